from __future__ import annotations

import fnmatch
import threading
import time
from typing import Any

import pytest
import redis

from RedisLink import RedisConfig, RedisLink


WRONGTYPE = "WRONGTYPE Operation against a key holding the wrong kind of value"


class FakeRedisServer:
    """In-memory stand-in for a Redis server, shaped like redis-py replies."""

    def __init__(self, password: str | None = None) -> None:
        self.password = password
        self.data: dict[str, Any] = {}
        self.subscribers: dict[str, int] = {}
        self.published: list[tuple[str, str]] = []
        self.commands: list[tuple[str, ...]] = []
        self.clients: list[FakeRedis] = []
        self.connection_kwargs: list[dict[str, Any]] = []
        self.unreachable = False
        self.timeout_next = False
        self.dispatch_delay = 0.0
        self.overlapped = False
        self._in_flight = 0
        self._guard = threading.Lock()

    def client_factory(self, **kwargs: Any) -> "FakeRedis":
        self.connection_kwargs.append(kwargs)
        client = FakeRedis(self, kwargs)
        # single-connection clients connect and authenticate while being built
        client._handshake()
        self.clients.append(client)
        return client

    def drop_connections(self) -> None:
        for client in self.clients:
            client.dropped = True

    def command_names(self) -> list[str]:
        return [command[0] for command in self.commands]

    def enter(self) -> None:
        with self._guard:
            self._in_flight += 1
            if self._in_flight > 1:
                self.overlapped = True

    def leave(self) -> None:
        with self._guard:
            self._in_flight -= 1


class FakeRedis:
    def __init__(self, server: FakeRedisServer, kwargs: dict[str, Any]) -> None:
        self.server = server
        self.kwargs = kwargs
        self.connected = False
        self.dropped = False
        self.closed = False

    def _handshake(self) -> None:
        if self.connected:
            return
        if self.server.unreachable:
            raise redis.ConnectionError("Error 111 connecting to 127.0.0.1:6379. Connection refused.")
        password = self.kwargs.get("password")
        if password:
            self.server.commands.append(("AUTH",))
            if self.server.password is None:
                raise redis.AuthenticationError("AUTH <password> called without any password configured")
            if password != self.server.password:
                raise redis.AuthenticationError("invalid username-password pair or user is disabled.")
        elif self.server.password is not None:
            raise redis.AuthenticationError("Authentication required.")
        self.connected = True

    def ping(self) -> bool:
        return self.execute_command("PING")

    def close(self) -> None:
        self.closed = True
        self.connected = False

    def execute_command(self, *args: str) -> Any:
        if self.closed or self.dropped:
            raise redis.ConnectionError("Connection closed by server.")
        self._handshake()
        if self.server.timeout_next:
            self.server.timeout_next = False
            raise redis.TimeoutError("Timeout reading from socket")

        self.server.enter()
        try:
            self.server.commands.append(tuple(args))
            if self.server.dispatch_delay:
                time.sleep(self.server.dispatch_delay)
            return self._dispatch(args[0].upper(), list(args[1:]))
        finally:
            self.server.leave()

    def _dispatch(self, name: str, args: list[str]) -> Any:
        data = self.server.data
        if name == "PING":
            return True
        if name == "BGSAVE":
            return True
        if name == "GET":
            value = data.get(args[0])
            if isinstance(value, dict):
                raise redis.ResponseError(WRONGTYPE)
            return value
        if name == "SET":
            data[args[0]] = args[1]
            return True
        if name == "HGET":
            value = data.get(args[0])
            if value is None:
                return None
            if not isinstance(value, dict):
                raise redis.ResponseError(WRONGTYPE)
            return value.get(args[1])
        if name == "HSET":
            value = data.setdefault(args[0], {})
            if not isinstance(value, dict):
                raise redis.ResponseError(WRONGTYPE)
            created = args[1] not in value
            value[args[1]] = args[2]
            return int(created)
        if name == "EXISTS":
            return int(args[0] in data)
        if name == "DEL":
            return int(data.pop(args[0], None) is not None)
        if name == "PUBLISH":
            self.server.published.append((args[0], args[1]))
            return self.server.subscribers.get(args[0], 0)
        if name == "KEYS":
            return [key for key in sorted(data) if fnmatch.fnmatchcase(key, args[0])]
        if name == "HKEYS":
            value = data.get(args[0], {})
            if not isinstance(value, dict):
                raise redis.ResponseError(WRONGTYPE)
            return list(value)
        raise redis.ResponseError(f"ERR unknown command '{name}'")


@pytest.fixture
def server() -> FakeRedisServer:
    return FakeRedisServer()


@pytest.fixture
def link(server: FakeRedisServer):
    instance = RedisLink(RedisConfig(), client_factory=server.client_factory)
    instance.load()
    yield instance
    instance.shutdown(persist=False)

"""
RedisLink Connection Management

Owns the single shared Redis connection. Configuration changes, (re)connects
and command dispatch all run under one lock, so a reload can never interleave
with a command and two commands can never share the socket at the same time.
"""

import threading
import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

import redis
from redis.backoff import NoBackoff
from redis.retry import Retry

from .config import RedisConfig, validate_config
from .exceptions import AuthFailedError, UnreachableError

logger = logging.getLogger("RedisLink.Connection")


class ConnectionManager:
    """Single shared Redis connection, (re)established on demand"""

    def __init__(self, config: Optional[RedisConfig] = None,
                 client_factory: Callable[..., redis.Redis] = redis.Redis):
        """
        Args:
            config: Initial settings (defaults apply until one is given)
            client_factory: Builds the client; redis.Redis unless a test injects a fake
        """
        self._lock = threading.RLock()
        self._config = validate_config(config) if config is not None else RedisConfig()
        self._client_factory = client_factory
        self._client: Optional[redis.Redis] = None
        self._failed = False

    @property
    def config(self) -> RedisConfig:
        with self._lock:
            return self._config

    @property
    def is_connected(self) -> bool:
        """True if a connection exists and has not been flagged as failed"""
        with self._lock:
            return self._client is not None and not self._failed

    def apply_configuration(self, config: RedisConfig):
        """
        Replace the active configuration

        Takes effect on the next connect()/reconnect().

        Raises:
            ConfigMissingError: If config is None
            ConfigInvalidError: If config holds unusable values
        """
        validate_config(config)
        with self._lock:
            self._config = config
        logger.info(f"Redis configuration applied ({config.address}, db {config.db})")

    def connect(self):
        """
        Open a new connection, replacing any existing one

        Raises:
            UnreachableError: If the socket or protocol handshake fails
            AuthFailedError: If the server rejects the configured password
        """
        with self._lock:
            self._release()
            config = self._config

            if config.auth_enabled:
                logger.warning("Authenticating.")

            # A single-connection client connects (and sends AUTH when a password is set) while being built;
            # PING then confirms the handshake
            client = None
            try:
                client = self._client_factory(
                    host=config.hostname,
                    port=config.port,
                    db=config.db,
                    password=config.password,
                    decode_responses=True,
                    socket_connect_timeout=config.timeout,
                    socket_timeout=config.timeout,
                    retry=Retry(NoBackoff(), 0),
                    single_connection_client=True,
                )
                client.ping()
            except redis.AuthenticationError as e:
                self._close_quietly(client)
                logger.error(f"Unable to authenticate to Redis at {config.address}: {e}")
                raise AuthFailedError(f"Redis rejected credentials: {e}") from e
            except redis.ResponseError as e:
                self._close_quietly(client)
                if config.auth_enabled:
                    logger.error(f"Unable to authenticate to Redis at {config.address}: {e}")
                    raise AuthFailedError(f"Redis rejected credentials: {e}") from e
                logger.error(f"Couldn't establish connection to Redis at {config.address}: {e}")
                raise UnreachableError(f"Redis handshake failed: {e}") from e
            except (redis.ConnectionError, redis.TimeoutError, OSError) as e:
                self._close_quietly(client)
                logger.error(f"Couldn't establish connection to Redis at {config.address}: {e}")
                raise UnreachableError(f"Redis connection failed: {e}") from e

            if config.auth_enabled:
                logger.warning("Authenticated.")

            self._client = client
            self._failed = False
            logger.info(f"Connected to Redis at {config.address} (db {config.db})")

    def reconnect(self):
        """Drop the current connection and connect again with the active configuration"""
        logger.warning("Reconnecting to Redis.")
        self.connect()

    @contextmanager
    def session(self) -> Iterator[Optional[redis.Redis]]:
        """
        Hold the connection for one dispatch

        Yields the live client, or None when there is no usable connection.
        """
        with self._lock:
            if self._client is None or self._failed:
                yield None
            else:
                yield self._client

    def mark_failed(self, reason: str):
        """Flag the current connection as broken until the next connect()"""
        with self._lock:
            if self._client is not None and not self._failed:
                logger.error(f"Redis connection marked as failed: {reason}")
            self._failed = True

    def close(self):
        """Release the connection"""
        with self._lock:
            self._release()
        logger.info("Redis connection closed")

    def _release(self):
        if self._client is not None:
            self._close_quietly(self._client)
        self._client = None
        self._failed = False

    @staticmethod
    def _close_quietly(client):
        if client is None:
            return
        try:
            client.close()
        except Exception as e:
            logger.error(f"Error closing Redis client: {e}")

"""
RedisLink - Simple Redis Key-Value Bridge

Provides essential Redis access for a host application's scripting layer:
- One shared connection, loaded from config and reconnected on demand
- Read/write of whole keys and hash fields
- Existence checks, deletes and channel publishing
- Key and hash listings
- Standard Python logging (systemd journald compatible)
"""

import logging
from typing import Callable, List, Optional, Tuple

import redis

from .adapter import KeyValueAdapter
from .commands import Command
from .config import RedisConfig, load_config
from .connection import ConnectionManager
from .exceptions import ExecError
from .executor import CommandExecutor

# Configure logging for systemd journald
logging.basicConfig(
    level=logging.INFO,
    format='%(name)s[%(process)d]: %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]  # Goes to systemd journald when run as service
)

logger = logging.getLogger("RedisLink")


class RedisLink:
    """
    Redis bridge with module-style lifecycle: load, reload, shutdown
    """

    def __init__(self, config: Optional[RedisConfig] = None, config_path: Optional[str] = None,
                 client_factory: Callable[..., redis.Redis] = redis.Redis):
        """
        Initialize RedisLink instance (does not connect until load())

        Args:
            config: Resolved settings; ignored when config_path is given
            config_path: INI file to read settings from on load/reload
            client_factory: Builds the Redis client (injectable for tests)
        """
        self.config_path = config_path
        self._initial_config = config

        self._connection = ConnectionManager(client_factory=client_factory)
        self._executor = CommandExecutor(self._connection)
        self._adapter = KeyValueAdapter(self._executor)

    def __enter__(self) -> "RedisLink":
        self.load()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()

    # ==================== LIFECYCLE ====================

    def _resolve_config(self) -> RedisConfig:
        if self.config_path:
            return load_config(self.config_path)
        if self._initial_config is not None:
            return self._initial_config
        return RedisConfig.from_env()

    def load(self):
        """
        Load configuration and connect

        Raises:
            ConfigError: If configuration is missing or invalid
            ConnectionError: If Redis is unreachable or rejects credentials
        """
        config = self._resolve_config()
        self._connection.apply_configuration(config)
        self._connection.connect()
        logger.info(f"RedisLink ready ({config.address}, db {config.db})")

    def reload(self):
        """Re-read configuration and reconnect"""
        logger.warning("Reloading.")
        self._connection.apply_configuration(self._resolve_config())
        self._connection.reconnect()

    def shutdown(self, persist: bool = True):
        """
        Release the connection

        Args:
            persist: Ask Redis for a background save (BGSAVE) first
        """
        logger.info("RedisLink shutting down...")

        if persist and self._connection.is_connected:
            try:
                self._executor.execute(Command.bgsave())
            except ExecError as e:
                logger.warning(f"BGSAVE on shutdown failed: {e}")

        self._connection.close()
        logger.info("RedisLink shutdown complete")

    def is_connected(self) -> bool:
        """Check if the Redis connection is alive"""
        try:
            self._executor.execute(Command.ping())
            return True
        except ExecError:
            return False

    @property
    def config(self) -> RedisConfig:
        return self._connection.config

    # ==================== DATA OPERATIONS ====================

    def read(self, *args: str) -> Optional[str]:
        """read(key) or read(key, hash_field); None when absent"""
        return self._adapter.read(*args)

    def write(self, *args: str):
        """write(key, value) or write(key, hash_field, value)"""
        self._adapter.write(*args)

    def exists(self, key: str) -> bool:
        return self._adapter.exists(key)

    def delete(self, key: str) -> Optional[str]:
        """Delete a key, returning the value it held"""
        return self._adapter.delete(key)

    def publish(self, channel: str, message: str) -> int:
        """Publish a message; returns the subscriber count"""
        return self._adapter.publish(channel, message)

    def list_all(self, pattern: str = "*") -> List[Tuple[str, Optional[str]]]:
        return self._adapter.list_keys(pattern)

    def list_hash(self, hash_name: str) -> List[Tuple[str, Optional[str]]]:
        return self._adapter.list_hash_fields(hash_name)

    # ==================== COMMON UTILITIES ====================

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """
        Get a logger in the RedisLink hierarchy for host-side code.

        get_logger("Dialplan") returns "RedisLink.Dialplan", which propagates to the
        journald handler configured above and follows the package log level.

        Args:
            name: Child name (defaults to the package logger itself)
        """
        if not name or name == logger.name:
            return logger
        if name.startswith(f"{logger.name}."):
            return logging.getLogger(name)
        return logger.getChild(name)

"""
RedisLink Configuration

Connection settings for the shared Redis connection. Values come from an
INI file (``[general]`` section), then environment variables, then defaults.
"""

import os
import logging
import configparser
from dataclasses import dataclass
from typing import Optional

from .exceptions import ConfigInvalidError, ConfigMissingError

logger = logging.getLogger("RedisLink.Config")

# Defaults
DEFAULT_HOSTNAME = "127.0.0.1"
DEFAULT_PORT = 6379
DEFAULT_DB = 0
DEFAULT_TIMEOUT = 5.0  # seconds

# Config file location - working directory relative unless overridden
DEFAULT_CONFIG_FILE = os.getenv('REDISLINK_CONFIG', 'redislink.conf')
CONFIG_SECTION = "general"

# Config key -> environment variable fallback
ENV_VARS = {
    "hostname": "REDIS_HOST",
    "port": "REDIS_PORT",
    "db": "REDIS_DB",
    "password": "REDIS_PASSWORD",
    "timeout": "REDIS_TIMEOUT",
}


@dataclass(frozen=True)
class RedisConfig:
    """Resolved connection settings. Replaced wholesale on reload, never mutated."""
    hostname: str = DEFAULT_HOSTNAME
    port: int = DEFAULT_PORT
    db: int = DEFAULT_DB
    password: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT

    @property
    def auth_enabled(self) -> bool:
        return bool(self.password)

    @property
    def address(self) -> str:
        return f"{self.hostname}:{self.port}"

    @classmethod
    def from_env(cls) -> "RedisConfig":
        """Build a config from REDIS_* environment variables with defaults."""
        return _build_config({}, source="environment")


def validate_config(config: RedisConfig) -> RedisConfig:
    """
    Check a config for usable values

    Raises:
        ConfigMissingError: If config is None
        ConfigInvalidError: If a value is out of range
    """
    if config is None:
        raise ConfigMissingError("No Redis configuration supplied")
    if not config.hostname or not str(config.hostname).strip():
        raise ConfigInvalidError("hostname must be a non-empty string")
    if not isinstance(config.port, int) or not 1 <= config.port <= 65535:
        raise ConfigInvalidError(f"port must be between 1 and 65535, got {config.port!r}")
    if not isinstance(config.db, int) or config.db < 0:
        raise ConfigInvalidError(f"db must be a non-negative integer, got {config.db!r}")
    if not isinstance(config.timeout, (int, float)) or config.timeout <= 0:
        raise ConfigInvalidError(f"timeout must be a positive number of seconds, got {config.timeout!r}")
    return config


def load_config(path: Optional[str] = None) -> RedisConfig:
    """
    Load connection settings from an INI file

    Args:
        path: Config file path (defaults to DEFAULT_CONFIG_FILE)

    Returns:
        Validated RedisConfig

    Raises:
        ConfigMissingError: If the file does not exist
        ConfigInvalidError: If the file cannot be parsed or holds bad values
    """
    path = path or DEFAULT_CONFIG_FILE
    if not os.path.isfile(path):
        logger.error(f"Unable to load config {path}")
        raise ConfigMissingError(f"Config file not found: {path}")

    parser = configparser.ConfigParser(interpolation=None)
    try:
        with open(path, encoding="utf-8") as f:
            parser.read_file(f)
    except (configparser.Error, UnicodeDecodeError) as e:
        logger.error(f"Unable to parse config {path}: {e}")
        raise ConfigInvalidError(f"Config file {path} is malformed: {e}") from e

    if not parser.has_section(CONFIG_SECTION):
        raise ConfigInvalidError(f"Config file {path} has no [{CONFIG_SECTION}] section")

    config = _build_config(dict(parser.items(CONFIG_SECTION)), source=path)
    logger.info(f"Redis config loaded from {path}")
    return config


def _warn_default(name: str, default, source: str):
    if name == "password":
        logger.warning(f"No redis password found in {source}, disabling authentication.")
    else:
        logger.warning(f"No redis {name} found in {source}, using {default!r} as default")


def _build_config(values: dict, source: str) -> RedisConfig:
    """Resolve each setting from values, then environment, then default."""

    def lookup(name: str, default):
        raw = values.get(name)
        if raw is None:
            raw = os.getenv(ENV_VARS[name])
        if raw is None:
            if source != "environment":
                _warn_default(name, default, source)
            return default
        return raw.strip()

    hostname = lookup("hostname", DEFAULT_HOSTNAME)
    password = lookup("password", None) or None  # empty disables authentication

    try:
        port = int(lookup("port", DEFAULT_PORT))
        db = int(lookup("db", DEFAULT_DB))
        timeout = float(lookup("timeout", DEFAULT_TIMEOUT))
    except ValueError as e:
        raise ConfigInvalidError(f"Non-numeric value in {source}: {e}") from e

    return validate_config(RedisConfig(
        hostname=hostname,
        port=port,
        db=db,
        password=password,
        timeout=timeout,
    ))

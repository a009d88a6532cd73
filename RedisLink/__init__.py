"""
RedisLink - Redis key-value bridge for host scripting layers

A thin synchronous adapter: one shared Redis connection, reconnected on demand,
through which a fixed set of commands is run with consistent error handling.

Key Features:
- Whole-key and hash-field read/write chosen by argument count
- Existence checks, deletes and channel publishing
- Key listings by glob pattern and hash field listings
- Optional password authentication
- Every command serialized on the shared connection

Usage:
    from RedisLink import RedisLink, RedisConfig

    with RedisLink(RedisConfig(hostname="127.0.0.1")) as link:
        link.write("caller:1001", "busy")
        link.write("caller:1001", "status", "busy")
        status = link.read("caller:1001", "status")
"""

from .redislink import RedisLink
from .config import RedisConfig, load_config
from .connection import ConnectionManager
from .executor import CommandExecutor
from .adapter import KeyValueAdapter
from .commands import Command, CommandType, ScalarTarget, HashFieldTarget, resolve_target
from .reply import CommandReply, ReplyKind
from .exceptions import (
    RedisLinkError, ConfigError, ConfigMissingError, ConfigInvalidError,
    ConnectionError, UnreachableError, AuthFailedError,
    ExecError, NotConnectedError, ProtocolError, CommandTimeoutError,
    UsageError, WriteFailedError, PublishFailedError,
)
from . import config

__version__ = "1.0.0"
__all__ = [
    "RedisLink", "RedisConfig", "load_config", "config",
    "ConnectionManager", "CommandExecutor", "KeyValueAdapter",
    "Command", "CommandType", "ScalarTarget", "HashFieldTarget", "resolve_target",
    "CommandReply", "ReplyKind",
    "RedisLinkError", "ConfigError", "ConfigMissingError", "ConfigInvalidError",
    "ConnectionError", "UnreachableError", "AuthFailedError",
    "ExecError", "NotConnectedError", "ProtocolError", "CommandTimeoutError",
    "UsageError", "WriteFailedError", "PublishFailedError",
]

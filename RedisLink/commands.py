"""RedisLink Commands - Typed command values and read/write targets"""

from enum import Enum
from dataclasses import dataclass
from typing import Tuple, Union

from .exceptions import UsageError


class CommandType(Enum):
    """Commands the adapter is allowed to send"""
    GET = "GET"
    SET = "SET"
    HGET = "HGET"
    HSET = "HSET"
    EXISTS = "EXISTS"
    DEL = "DEL"
    PUBLISH = "PUBLISH"
    KEYS = "KEYS"
    HKEYS = "HKEYS"
    PING = "PING"
    BGSAVE = "BGSAVE"


@dataclass(frozen=True)
class Command:
    """One Redis command, decoupled from how it is sent"""
    type: CommandType
    args: Tuple[str, ...] = ()

    def to_args(self) -> Tuple[str, ...]:
        """Positional arguments for redis-py's execute_command"""
        return (self.type.value,) + self.args

    def __str__(self) -> str:
        return " ".join(self.to_args())

    @classmethod
    def get(cls, key: str) -> "Command":
        return cls(CommandType.GET, (key,))

    @classmethod
    def set(cls, key: str, value: str) -> "Command":
        return cls(CommandType.SET, (key, value))

    @classmethod
    def hget(cls, key: str, field: str) -> "Command":
        return cls(CommandType.HGET, (key, field))

    @classmethod
    def hset(cls, key: str, field: str, value: str) -> "Command":
        return cls(CommandType.HSET, (key, field, value))

    @classmethod
    def exists(cls, key: str) -> "Command":
        return cls(CommandType.EXISTS, (key,))

    @classmethod
    def delete(cls, key: str) -> "Command":
        return cls(CommandType.DEL, (key,))

    @classmethod
    def publish(cls, channel: str, message: str) -> "Command":
        return cls(CommandType.PUBLISH, (channel, message))

    @classmethod
    def keys(cls, pattern: str = "*") -> "Command":
        return cls(CommandType.KEYS, (pattern,))

    @classmethod
    def hkeys(cls, key: str) -> "Command":
        return cls(CommandType.HKEYS, (key,))

    @classmethod
    def ping(cls) -> "Command":
        return cls(CommandType.PING)

    @classmethod
    def bgsave(cls) -> "Command":
        return cls(CommandType.BGSAVE)


# ==================== TARGETS ====================

@dataclass(frozen=True)
class ScalarTarget:
    """A whole key holding a single string value"""
    key: str

    def read_command(self) -> Command:
        return Command.get(self.key)

    def write_command(self, value: str) -> Command:
        return Command.set(self.key, value)

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class HashFieldTarget:
    """A single field inside a hash"""
    key: str
    field: str

    def read_command(self) -> Command:
        return Command.hget(self.key, self.field)

    def write_command(self, value: str) -> Command:
        return Command.hset(self.key, self.field, value)

    def __str__(self) -> str:
        return f"{self.key}[{self.field}]"


Target = Union[ScalarTarget, HashFieldTarget]


def require_argument(value, name: str) -> str:
    """Reject missing or empty arguments before anything is sent"""
    if not isinstance(value, str) or not value:
        raise UsageError(f"{name} must be a non-empty string")
    return value


def resolve_target(args: Tuple[str, ...], operation: str = "REDIS") -> Target:
    """
    Resolve positional arguments into a read/write target

    One argument addresses a whole key, two address a field inside a hash.

    Raises:
        UsageError: For any other number of arguments or an empty one
    """
    if len(args) == 1:
        return ScalarTarget(require_argument(args[0], "key"))
    if len(args) == 2:
        return HashFieldTarget(require_argument(args[0], "key"),
                               require_argument(args[1], "hash field"))
    raise UsageError(f"{operation} requires an argument, {operation}(<key>) or {operation}(<key>,<hash>)")

"""RedisLink Replies - Tagged view of what a command returned"""

from enum import Enum
from dataclasses import dataclass
from typing import Any, List, Optional

import redis


class ReplyKind(Enum):
    NIL = "nil"
    STRING = "string"
    INTEGER = "integer"
    STATUS = "status"
    ARRAY = "array"
    ERROR = "error"


@dataclass(frozen=True)
class CommandReply:
    """
    Decoded reply to one command

    Immutable and per-call; nothing to release once the caller is done with it.
    """
    kind: ReplyKind
    value: Any = None

    @classmethod
    def from_raw(cls, raw: Any) -> "CommandReply":
        """Tag a value returned by redis-py's execute_command"""
        if raw is None:
            return cls(ReplyKind.NIL)
        if isinstance(raw, redis.ResponseError):
            return cls(ReplyKind.ERROR, str(raw))
        # bool before int: redis-py turns +OK status replies into True
        if isinstance(raw, bool):
            return cls(ReplyKind.STATUS, raw)
        if isinstance(raw, int):
            return cls(ReplyKind.INTEGER, raw)
        if isinstance(raw, bytes):
            return cls(ReplyKind.STRING, raw.decode("utf-8", errors="replace"))
        if isinstance(raw, str):
            return cls(ReplyKind.STRING, raw)
        if isinstance(raw, (list, tuple, set)):
            return cls(ReplyKind.ARRAY, [cls.from_raw(item) for item in raw])
        return cls(ReplyKind.ERROR, f"Unexpected reply type {type(raw).__name__}")

    @property
    def is_nil(self) -> bool:
        return self.kind is ReplyKind.NIL

    @property
    def is_error(self) -> bool:
        return self.kind is ReplyKind.ERROR

    def as_string(self) -> Optional[str]:
        """String value, or None for nil and non-string replies"""
        if self.kind is ReplyKind.STRING:
            return self.value
        return None

    def as_int(self) -> int:
        if self.kind is ReplyKind.INTEGER:
            return self.value
        if self.kind is ReplyKind.STATUS:
            return int(bool(self.value))
        return 0

    def as_strings(self) -> List[str]:
        """String elements of an array reply; empty for anything else"""
        if self.kind is not ReplyKind.ARRAY:
            return []
        return [item.value for item in self.value if item.kind is ReplyKind.STRING]

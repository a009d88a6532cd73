"""
RedisLink Key-Value Operations

Domain operations on top of CommandExecutor:
- read/write a whole key or a field inside a hash (chosen by argument count)
- exists, delete, publish
- list keys by glob pattern, list the fields of a hash

Read-style operations degrade to "not found" when Redis is unavailable;
write and publish raise so the caller can see the failure.
"""

import logging
from typing import List, Optional, Tuple

from .commands import Command, Target, require_argument, resolve_target
from .exceptions import ExecError, PublishFailedError, UsageError, WriteFailedError
from .executor import CommandExecutor

logger = logging.getLogger("RedisLink.Adapter")


class KeyValueAdapter:
    """Key-value and publish operations against the shared connection"""

    def __init__(self, executor: CommandExecutor):
        self._executor = executor

    # ==================== SCALAR / HASH ACCESS ====================

    def read(self, *args: str) -> Optional[str]:
        """
        Read a value

        read(key) reads a whole key, read(key, field) reads a hash field.

        Returns:
            The stored value, or None if absent or Redis is unavailable

        Raises:
            UsageError: If called with anything other than 1 or 2 arguments
        """
        target = resolve_target(args, "REDIS")
        return self._read_target(target)

    def write(self, *args: str):
        """
        Write a value

        write(key, value) sets a whole key, write(key, field, value) sets a hash field.

        Raises:
            UsageError: If called with anything other than 2 or 3 arguments
            WriteFailedError: If Redis did not store the value
        """
        if len(args) < 2:
            raise UsageError("REDIS requires an argument, REDIS(<key>)=<value> or REDIS(<key>,<hash>)=<value>")
        *target_args, value = args
        target = resolve_target(tuple(target_args), "REDIS")
        if not isinstance(value, str):
            raise UsageError("value must be a string")

        try:
            self._executor.execute(target.write_command(value))
        except ExecError as e:
            logger.warning(f"REDIS: Error writing value for {target} to database: {e}")
            raise WriteFailedError(f"Failed to write {target}: {e}") from e

    def _read_target(self, target: Target) -> Optional[str]:
        try:
            reply = self._executor.execute(target.read_command())
        except ExecError as e:
            logger.debug(f"REDIS: Key {target} not found in database ({e})")
            return None

        if reply.is_nil:
            logger.debug(f"REDIS: Key {target} not found in database.")
            return None
        return reply.as_string()

    # ==================== KEY MANAGEMENT ====================

    def exists(self, key: str) -> bool:
        """Check if a key exists; False when Redis is unavailable"""
        require_argument(key, "key")
        try:
            reply = self._executor.execute(Command.exists(key))
        except ExecError as e:
            logger.debug(f"REDIS_EXISTS: Could not check {key}, reporting absent ({e})")
            return False
        return reply.as_int() > 0

    def delete(self, key: str) -> Optional[str]:
        """
        Delete a key and return the value it held

        A failed delete is logged as not found, never raised.

        Returns:
            Prior string value, or None if there was none
        """
        require_argument(key, "key")
        prior = self._read_target(resolve_target((key,)))
        try:
            self._executor.execute(Command.delete(key))
        except ExecError as e:
            logger.debug(f"REDIS_DELETE: Key {key} not found in database ({e})")
        return prior

    # ==================== PUB/SUB ====================

    def publish(self, channel: str, message: str) -> int:
        """
        Publish a message to a channel

        Returns:
            Number of subscribers that received it (0 with none listening)

        Raises:
            PublishFailedError: If the message could not be sent
        """
        require_argument(channel, "channel")
        if not isinstance(message, str):
            raise UsageError("message must be a string")
        try:
            reply = self._executor.execute(Command.publish(channel, message))
        except ExecError as e:
            logger.error(f"REDIS_PUBLISH: Error publishing message to {channel}: {e}")
            raise PublishFailedError(f"Failed to publish to {channel}: {e}") from e
        return reply.as_int()

    # ==================== LISTING ====================
    # One listing command, then one fetch per element. Values are read after
    # the listing, so concurrent writers can change or remove them in between:
    # the result is not a snapshot.

    def list_keys(self, pattern: str = "*") -> List[Tuple[str, Optional[str]]]:
        """
        List keys matching a glob pattern with their values

        Keys that vanish before their GET, or hold a non-string type, come back
        with a None value.
        """
        require_argument(pattern, "pattern")
        try:
            keys = self._executor.execute(Command.keys(pattern)).as_strings()
        except ExecError as e:
            logger.error(f"REDIS: Unable to list keys matching {pattern}: {e}")
            return []
        return [(key, self._read_target(resolve_target((key,)))) for key in keys]

    def list_hash_fields(self, hash_name: str) -> List[Tuple[str, Optional[str]]]:
        """List the fields of a hash with their values"""
        require_argument(hash_name, "hash")
        try:
            fields = self._executor.execute(Command.hkeys(hash_name)).as_strings()
        except ExecError as e:
            logger.error(f"REDIS: Unable to list fields of {hash_name}: {e}")
            return []
        return [(field, self._read_target(resolve_target((hash_name, field))))
                for field in fields]

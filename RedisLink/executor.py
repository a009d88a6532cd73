"""RedisLink Command Execution - One command, one normalized reply"""

import logging

import redis

from .commands import Command
from .connection import ConnectionManager
from .exceptions import CommandTimeoutError, NotConnectedError, ProtocolError
from .reply import CommandReply

logger = logging.getLogger("RedisLink.Executor")


class CommandExecutor:
    """Runs commands on the shared connection and maps failures to ExecError"""

    def __init__(self, connection: ConnectionManager):
        self._connection = connection

    def execute(self, command: Command) -> CommandReply:
        """
        Send one command and wait for its reply

        Args:
            command: Command to send

        Returns:
            Decoded reply

        Raises:
            NotConnectedError: If there is no usable connection (nothing is sent)
            CommandTimeoutError: If the server does not answer in time
            ProtocolError: If the server reports an error or the reply is malformed
        """
        logger.debug(str(command))

        with self._connection.session() as client:
            if client is None:
                raise NotConnectedError(f"Not connected to Redis, {command.type.value} not sent")
            try:
                raw = client.execute_command(*command.to_args())
            except redis.TimeoutError as e:
                self._connection.mark_failed(f"{command.type.value} timed out: {e}")
                raise CommandTimeoutError(f"{command.type.value} timed out: {e}") from e
            except redis.ConnectionError as e:
                self._connection.mark_failed(f"{command.type.value} lost the connection: {e}")
                raise NotConnectedError(f"Connection lost during {command.type.value}: {e}") from e
            except redis.RedisError as e:
                raise ProtocolError(f"{command.type.value} failed: {e}") from e

        reply = CommandReply.from_raw(raw)
        if reply.is_error:
            raise ProtocolError(f"{command.type.value} failed: {reply.value}")
        return reply

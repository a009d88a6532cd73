"""
RedisLink Exceptions - Simple and essential error handling
"""


class RedisLinkError(Exception):
    """Base exception for RedisLink errors."""
    pass


# ==================== CONFIGURATION ====================

class ConfigError(RedisLinkError):
    """Configuration could not be loaded."""
    pass


class ConfigMissingError(ConfigError):
    """Configuration source is absent."""
    pass


class ConfigInvalidError(ConfigError):
    """Configuration source is malformed or holds out-of-range values."""
    pass


# ==================== CONNECTION ====================

class ConnectionError(RedisLinkError):
    """Redis connection failed."""
    pass


class UnreachableError(ConnectionError):
    """Socket or protocol handshake with the server failed."""
    pass


class AuthFailedError(ConnectionError):
    """Server rejected the configured credentials."""
    pass


# ==================== COMMAND EXECUTION ====================

class ExecError(RedisLinkError):
    """A command could not be executed."""
    pass


class NotConnectedError(ExecError):
    """No usable connection; the command was not dispatched."""
    pass


class ProtocolError(ExecError):
    """Server reported an error or sent a malformed reply."""
    pass


class CommandTimeoutError(ExecError):
    """Server did not reply within the configured timeout."""
    pass


# ==================== DOMAIN OPERATIONS ====================

class UsageError(RedisLinkError):
    """Operation called with the wrong number of arguments or an empty one."""
    pass


class WriteFailedError(RedisLinkError):
    """SET/HSET could not be stored."""
    pass


class PublishFailedError(RedisLinkError):
    """PUBLISH could not be delivered to the server."""
    pass

"""Error types raised while resolving configuration and sending messages."""

from __future__ import annotations


class ToZulipError(Exception):
    """Base class for every failure that ends an invocation with exit code 1."""


class UsageError(ToZulipError):
    """Wrong number of message arguments or malformed flags."""


class ConfigError(ToZulipError):
    """Configuration could not be resolved into valid settings."""


class HomeDirectoryError(ConfigError):
    """The user's home directory could not be determined."""


class ConfigFileError(ConfigError):
    """A config file exists but could not be read or parsed."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class SendError(ToZulipError):
    """Delivering the message to Zulip failed."""


class TransportError(SendError):
    """The HTTP request did not complete (connection, TLS or timeout failure)."""


class ZulipApiError(SendError):
    """Zulip answered with a status other than 200."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Error from Zulip: {body}")
        self.status_code = status_code
        self.body = body

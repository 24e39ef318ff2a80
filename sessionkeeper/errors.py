"""Exceptions raised by sessionkeeper."""


class SessionKeeperError(Exception):
    """Base class for sessionkeeper errors."""


class SessionConfigError(SessionKeeperError, ValueError):
    """Raised when the session configuration is invalid."""


class SessionStateError(SessionKeeperError, RuntimeError):
    """Raised when the session manager is used out of lifecycle order."""

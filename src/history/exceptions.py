"""
Exceptions for history retrieval.

Resolver and snapshot errors abort a search before any connection is
attempted. Store and query errors are raised after the open connection has
been released.
"""


class HistSiftError(Exception):
    """Base exception for history retrieval errors."""
    pass


class NotConfiguredError(HistSiftError):
    """Raised when a browser has no dialect or no path template for this OS."""

    def __init__(self, browser: str, os_kind: str = "", reason: str = ""):
        self.browser = browser
        self.os_kind = os_kind
        message = f"Browser '{browser}' is not configured"
        if os_kind:
            message += f" on {os_kind}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class PathNotFoundError(HistSiftError):
    """Raised when a history path template matches nothing on disk."""

    def __init__(self, browser: str, pattern: str):
        self.browser = browser
        self.pattern = pattern
        super().__init__(f"No history database for '{browser}' at {pattern}")


class SnapshotError(HistSiftError):
    """Raised when the live history file cannot be copied."""
    pass


class StoreOpenError(HistSiftError):
    """Raised when a snapshot is unreadable or not a SQLite database."""
    pass


class QueryError(HistSiftError):
    """Raised when executing a history query fails."""
    pass

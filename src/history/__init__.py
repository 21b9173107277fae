"""
Browser history retrieval.

Structure:
    history/
    ├── dialects.py    # Per-browser schema (title, url, source, order)
    ├── _patterns.py   # Per-browser, per-OS history path templates
    ├── paths.py       # Template expansion and glob resolution
    ├── snapshot.py    # Copies of the live (locked) database
    ├── query.py       # Parameterized search SQL
    ├── connector.py   # Read-only store over a snapshot
    ├── normalize.py   # (title, url) rows -> HistoryEntry list
    └── session.py     # Interactive search session

Usage:
    from history import SearchSession

    with SearchSession("firefox", config) as session:
        for entry in session.candidates("python docs"):
            print(entry.title, entry.url)
"""

from ._patterns import BROWSER_PROFILES, BrowserProfile, get_all_browsers, get_profile
from .connector import HistoryStore, open_store
from .dialects import DIALECTS, SchemaDialect, get_dialect, supported_browsers, validate_profiles
from .exceptions import (
    HistSiftError,
    NotConfiguredError,
    PathNotFoundError,
    QueryError,
    SnapshotError,
    StoreOpenError,
)
from .normalize import HistoryEntry, normalize
from .paths import current_os_kind, resolve
from .query import DEFAULT_LIMIT, Query, build
from .session import SearchSession, SessionState, search
from .snapshot import SnapshotManager

__all__ = [
    "BROWSER_PROFILES",
    "BrowserProfile",
    "DEFAULT_LIMIT",
    "DIALECTS",
    "HistSiftError",
    "HistoryEntry",
    "HistoryStore",
    "NotConfiguredError",
    "PathNotFoundError",
    "Query",
    "QueryError",
    "SchemaDialect",
    "SearchSession",
    "SessionState",
    "SnapshotError",
    "SnapshotManager",
    "StoreOpenError",
    "build",
    "current_os_kind",
    "get_all_browsers",
    "get_dialect",
    "get_profile",
    "normalize",
    "open_store",
    "resolve",
    "search",
    "supported_browsers",
    "validate_profiles",
]

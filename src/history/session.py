"""
Interactive search sessions.

A SearchSession owns one snapshot and one read-only store for the duration of
a single interactive search:

    IDLE -> SNAPSHOT_READY -> CONNECTED -> QUERYING (repeatable) -> CLOSED

The store is released on every exit path (selection, cancellation, error),
so use the session as a context manager or call ``close()`` in a
``finally`` block.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Callable, List, Optional

from core.config import AppConfig
from core.logging import get_logger

from .connector import HistoryStore
from .dialects import SchemaDialect, get_dialect
from .exceptions import HistSiftError
from .normalize import HistoryEntry, normalize
from .query import build, split_terms
from .snapshot import SnapshotManager

LOGGER = get_logger("history.session")

CandidateSource = Callable[[str], List[HistoryEntry]]
# Receives the candidate source, returns the chosen url or None on cancel
Picker = Callable[[CandidateSource], Optional[str]]
Opener = Callable[[str], object]


class SessionState(enum.Enum):
    IDLE = "idle"
    SNAPSHOT_READY = "snapshot_ready"
    CONNECTED = "connected"
    QUERYING = "querying"
    CLOSED = "closed"


class SearchSession:
    """One interactive search against one browser's history."""

    def __init__(
        self,
        browser: str,
        config: AppConfig,
        force: bool = False,
        snapshots: Optional[SnapshotManager] = None,
        os_kind: Optional[str] = None,
    ) -> None:
        self.browser = browser
        self.config = config
        self.force = force
        self.dialect: SchemaDialect = get_dialect(browser)
        self.snapshots = snapshots or SnapshotManager(
            config.snapshot_dir,
            staleness_seconds=config.staleness_seconds,
            overrides=config.browsers,
            os_kind=os_kind,
        )
        self.state = SessionState.IDLE
        self.snapshot_path: Optional[Path] = None
        self.store: Optional[HistoryStore] = None

    def prepare(self) -> Path:
        """Ensure a fresh snapshot exists."""
        if self.state is SessionState.CLOSED:
            raise RuntimeError("Session is closed")
        self.snapshot_path = self.snapshots.ensure_snapshot(self.browser, force=self.force)
        self.state = SessionState.SNAPSHOT_READY
        return self.snapshot_path

    def connect(self) -> HistoryStore:
        """Open the read-only store on the snapshot, preparing it if needed."""
        if self.store is not None:
            return self.store
        if self.state is SessionState.IDLE:
            self.prepare()
        if self.state is not SessionState.SNAPSHOT_READY:
            raise RuntimeError(f"Cannot connect from state {self.state.value}")
        store = HistoryStore(self.snapshot_path)
        store.open()
        self.store = store
        self.state = SessionState.CONNECTED
        return store

    def candidates(self, text: str = "") -> List[HistoryEntry]:
        """
        Return results for the current input text.

        Input shorter than ``min_query_length`` (but not empty) yields no
        results without touching the store. On a store or query error the
        session is closed before the error propagates.
        """
        terms = split_terms(text)
        if terms and len(" ".join(terms)) < self.config.min_query_length:
            return []

        store = self.connect()
        self.state = SessionState.QUERYING
        try:
            rows = store.query(build(self.dialect, terms))
        except HistSiftError:
            LOGGER.warning("Query failed for %s, closing session", self.browser)
            self.close()
            raise
        return normalize(rows, self.config.strip_query_params)

    def close(self) -> None:
        if self.store is not None:
            self.store.close()
            self.store = None
        self.state = SessionState.CLOSED

    def __enter__(self) -> "SearchSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def search(
    browser: str,
    config: AppConfig,
    pick: Picker,
    opener: Opener,
    force: bool = False,
) -> Optional[str]:
    """
    Run one search: snapshot, connect, let ``pick`` choose, open the url.

    Returns:
        The chosen url, or None if the picker was cancelled
    """
    with SearchSession(browser, config, force=force) as session:
        session.connect()
        url = pick(session.candidates)
    if url:
        LOGGER.info("Opening %s", url)
        opener(url)
    return url

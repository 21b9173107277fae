"""
Read-only access to history snapshots.

A HistoryStore wraps one SQLite connection to a snapshot file (never the
live database). It is opened once per interactive session, reused for every
keystroke, and closed when the session ends.

Example:
    with open_store(snapshot) as store:
        rows = store.query(build(dialect, "python docs"))
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union

from core.logging import get_logger

from .exceptions import QueryError, StoreOpenError
from .query import Query

LOGGER = get_logger("history.connector")

Row = Tuple[Optional[str], Optional[str]]


class HistoryStore:
    """Read-only connection to a history snapshot."""

    def __init__(self, snapshot_path: Union[str, Path], timeout: float = 5.0) -> None:
        self.snapshot_path = Path(snapshot_path)
        self.timeout = timeout
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def closed(self) -> bool:
        return self._conn is None

    def open(self) -> "HistoryStore":
        """
        Open the snapshot in read-only mode.

        Raises:
            StoreOpenError: Missing file, unreadable file, or not a database
        """
        if self._conn is not None:
            return self
        if not self.snapshot_path.is_file():
            raise StoreOpenError(f"Snapshot not found: {self.snapshot_path}")

        uri = f"{self.snapshot_path.resolve().as_uri()}?mode=ro"
        conn: Optional[sqlite3.Connection] = None
        try:
            conn = sqlite3.connect(uri, uri=True, timeout=self.timeout)
            # Forces SQLite to read the header; a non-database fails here
            conn.execute("SELECT count(*) FROM sqlite_master").fetchone()
        except sqlite3.Error as e:
            if conn is not None:
                conn.close()
            raise StoreOpenError(f"Failed to open {self.snapshot_path}: {e}") from e

        self._conn = conn
        LOGGER.debug("Opened %s", self.snapshot_path)
        return self

    def query(
        self,
        query: Union[str, Query],
        params: Sequence[Any] = (),
    ) -> List[Row]:
        """
        Execute a query and return its (title, url) rows.

        Raises:
            QueryError: Store is closed or the statement failed
        """
        if self._conn is None:
            raise QueryError(f"Store is closed: {self.snapshot_path}")
        if isinstance(query, Query):
            sql, params = query.sql, query.params
        else:
            sql = query
        try:
            cursor = self._conn.execute(sql, tuple(params))
            return [(row[0], row[1]) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise QueryError(f"Query execution failed: {e}") from e

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        LOGGER.debug("Closed %s", self.snapshot_path)

    def __enter__(self) -> "HistoryStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_store(snapshot_path: Union[str, Path]) -> HistoryStore:
    """Open and return a store for a snapshot."""
    return HistoryStore(snapshot_path).open()

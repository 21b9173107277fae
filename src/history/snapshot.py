"""
Snapshots of live browser history databases.

Browsers keep their history database open (and often locked) while running,
so every search reads a private copy instead. One copy is kept per browser at
a fixed path inside the snapshot directory and reused until the live file
changes, or until it is older than the configured staleness threshold.

Copies are written to a temporary sibling and moved into place with
``os.replace``, so a reader never opens a partially written snapshot and two
racing sessions simply leave the last complete copy behind. The live file is
only ever opened for reading.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Callable, Optional, Union

from core.logging import get_logger

from .exceptions import SnapshotError
from .paths import TemplateOverrides, resolve

LOGGER = get_logger("history.snapshot")

SNAPSHOT_PREFIX = "histsift-"
SNAPSHOT_SUFFIX = ".sqlite"
# SQLite companion files that carry committed-but-uncheckpointed pages
COMPANION_SUFFIXES = ("-wal",)

Resolver = Callable[..., Path]


def _mtime(path: Path) -> float:
    """Latest modification time of a database and its WAL companion."""
    mtime = path.stat().st_mtime
    for suffix in COMPANION_SUFFIXES:
        companion = path.with_name(path.name + suffix)
        if companion.exists():
            mtime = max(mtime, companion.stat().st_mtime)
    return mtime


def _atomic_copy(src: Path, dest: Path) -> None:
    tmp = dest.with_name(f"{dest.name}.{os.getpid()}.tmp")
    try:
        shutil.copy2(src, tmp)
        os.replace(tmp, dest)
    finally:
        if tmp.exists():
            tmp.unlink()


class SnapshotManager:
    """
    Owns the per-browser snapshot files in ``snapshot_dir``.

    Args:
        snapshot_dir: Directory holding the snapshot files
        staleness_seconds: Reuse a snapshot unless the live file is newer by
            more than this many seconds (0: refresh whenever it is newer)
        overrides: Path template overrides passed to the resolver
        os_kind: OS used for path resolution (default: current OS)
        resolver: Callable mapping a browser to its live database path
    """

    def __init__(
        self,
        snapshot_dir: Union[str, Path],
        staleness_seconds: float = 0,
        overrides: Optional[TemplateOverrides] = None,
        os_kind: Optional[str] = None,
        resolver: Resolver = resolve,
    ) -> None:
        self.snapshot_dir = Path(snapshot_dir)
        self.staleness_seconds = max(0.0, float(staleness_seconds))
        self.overrides = overrides
        self.os_kind = os_kind
        self._resolver = resolver
        self.copy_count = 0

    def snapshot_path(self, browser: str) -> Path:
        """Fixed scratch path for a browser's snapshot."""
        return self.snapshot_dir / f"{SNAPSHOT_PREFIX}{browser}{SNAPSHOT_SUFFIX}"

    def is_stale(self, source: Path, snapshot: Path) -> bool:
        if not snapshot.exists():
            return True
        return _mtime(source) - _mtime(snapshot) > self.staleness_seconds

    def ensure_snapshot(self, browser: str, force: bool = False) -> Path:
        """
        Return a fresh snapshot of the browser's history database.

        Args:
            browser: Browser identifier
            force: Copy even if the current snapshot is fresh

        Returns:
            Path to the snapshot file

        Raises:
            NotConfiguredError, PathNotFoundError: From path resolution
            SnapshotError: The copy failed (permissions, source vanished)
        """
        source = self._resolver(browser, self.os_kind, self.overrides)
        snapshot = self.snapshot_path(browser)

        try:
            stale = force or self.is_stale(source, snapshot)
        except OSError as exc:
            raise SnapshotError(f"Cannot stat history database {source}: {exc}") from exc

        if not stale:
            LOGGER.debug("Reusing snapshot %s", snapshot)
            return snapshot

        try:
            self.snapshot_dir.mkdir(parents=True, exist_ok=True)
            _atomic_copy(source, snapshot)
            for suffix in COMPANION_SUFFIXES:
                companion = source.with_name(source.name + suffix)
                target = snapshot.with_name(snapshot.name + suffix)
                if companion.exists():
                    _atomic_copy(companion, target)
                elif target.exists():
                    target.unlink()
        except OSError as exc:
            raise SnapshotError(f"Failed to copy {source} to {snapshot}: {exc}") from exc

        self.copy_count += 1
        LOGGER.info("Copied %s history %s -> %s", browser, source, snapshot)
        return snapshot

    def remove(self, browser: str) -> bool:
        """Delete a browser's snapshot and companions. Returns True if removed."""
        snapshot = self.snapshot_path(browser)
        removed = False
        for path in [snapshot] + [
            snapshot.with_name(snapshot.name + suffix)
            for suffix in COMPANION_SUFFIXES + ("-shm",)
        ]:
            if path.exists():
                path.unlink()
                removed = True
        if removed:
            LOGGER.info("Removed snapshot %s", snapshot)
        return removed

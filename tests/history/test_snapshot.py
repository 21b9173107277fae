"""
Tests for history snapshots: copy policy, mtime preservation, failures.
"""

import os
import shutil

import pytest

from history import NotConfiguredError, SnapshotError, SnapshotManager


def _manager(tmp_path, live, staleness=0):
    return SnapshotManager(
        tmp_path / "snapshots",
        staleness_seconds=staleness,
        resolver=lambda browser, os_kind, overrides: live,
    )


def _touch(path, delta):
    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + delta))


class TestEnsureSnapshot:

    def test_first_call_copies(self, tmp_path, history_factory):
        live = history_factory("chrome")
        manager = _manager(tmp_path, live)

        snapshot = manager.ensure_snapshot("chrome")

        assert snapshot == tmp_path / "snapshots" / "histsift-chrome.sqlite"
        assert snapshot.read_bytes() == live.read_bytes()
        assert manager.copy_count == 1

    def test_preserves_source_mtime(self, tmp_path, history_factory):
        live = history_factory("chrome")
        _touch(live, -3600)
        manager = _manager(tmp_path, live)

        snapshot = manager.ensure_snapshot("chrome")

        assert snapshot.stat().st_mtime == pytest.approx(live.stat().st_mtime, abs=1e-3)

    def test_unchanged_source_copies_once(self, tmp_path, history_factory):
        live = history_factory("chrome")
        manager = _manager(tmp_path, live)

        first = manager.ensure_snapshot("chrome")
        second = manager.ensure_snapshot("chrome")

        assert first == second
        assert manager.copy_count == 1

    def test_modified_source_triggers_one_new_copy(self, tmp_path, history_factory):
        live = history_factory("chrome")
        manager = _manager(tmp_path, live)
        manager.ensure_snapshot("chrome")

        _touch(live, 10)
        manager.ensure_snapshot("chrome")
        manager.ensure_snapshot("chrome")

        assert manager.copy_count == 2

    def test_staleness_threshold_allows_reuse(self, tmp_path, history_factory):
        live = history_factory("chrome")
        manager = _manager(tmp_path, live, staleness=60)
        manager.ensure_snapshot("chrome")

        _touch(live, 30)
        manager.ensure_snapshot("chrome")
        assert manager.copy_count == 1

        _touch(live, 60)
        manager.ensure_snapshot("chrome")
        assert manager.copy_count == 2

    def test_force_always_copies(self, tmp_path, history_factory):
        live = history_factory("chrome")
        manager = _manager(tmp_path, live)

        manager.ensure_snapshot("chrome")
        manager.ensure_snapshot("chrome", force=True)

        assert manager.copy_count == 2

    def test_negative_staleness_clamped(self, tmp_path, history_factory):
        manager = _manager(tmp_path, history_factory("chrome"), staleness=-5)
        assert manager.staleness_seconds == 0

    def test_no_temp_files_left(self, tmp_path, history_factory):
        manager = _manager(tmp_path, history_factory("chrome"))
        manager.ensure_snapshot("chrome")

        leftovers = [p.name for p in (tmp_path / "snapshots").iterdir() if p.name.endswith(".tmp")]
        assert leftovers == []


class TestCompanionFiles:

    def test_wal_copied_alongside(self, tmp_path, history_factory):
        live = history_factory("firefox")
        wal = live.with_name(live.name + "-wal")
        wal.write_bytes(b"wal-bytes")
        manager = _manager(tmp_path, live)

        snapshot = manager.ensure_snapshot("firefox")

        assert snapshot.with_name(snapshot.name + "-wal").read_bytes() == b"wal-bytes"

    def test_stale_wal_removed(self, tmp_path, history_factory):
        live = history_factory("firefox")
        manager = _manager(tmp_path, live)
        snapshot = manager.snapshot_path("firefox")
        snapshot.parent.mkdir(parents=True)
        stale_wal = snapshot.with_name(snapshot.name + "-wal")
        stale_wal.write_bytes(b"old")

        manager.ensure_snapshot("firefox")

        assert not stale_wal.exists()

    def test_newer_wal_makes_snapshot_stale(self, tmp_path, history_factory):
        live = history_factory("firefox")
        manager = _manager(tmp_path, live)
        manager.ensure_snapshot("firefox")

        wal = live.with_name(live.name + "-wal")
        wal.write_bytes(b"new pages")
        os.utime(wal, (live.stat().st_atime, live.stat().st_mtime + 5))
        manager.ensure_snapshot("firefox")

        assert manager.copy_count == 2


class TestFailures:

    def test_source_vanishes_during_copy(self, tmp_path, history_factory, monkeypatch):
        live = history_factory("chrome")
        manager = _manager(tmp_path, live)

        def vanishing_copy(src, dst, *args, **kwargs):
            raise FileNotFoundError(2, "No such file or directory", str(src))

        monkeypatch.setattr(shutil, "copy2", vanishing_copy)

        with pytest.raises(SnapshotError, match="Failed to copy"):
            manager.ensure_snapshot("chrome")
        assert manager.copy_count == 0
        assert not manager.snapshot_path("chrome").exists()

    def test_missing_source_after_resolve(self, tmp_path):
        manager = _manager(tmp_path, tmp_path / "gone" / "History")

        with pytest.raises(SnapshotError):
            manager.ensure_snapshot("chrome")

    def test_resolver_errors_propagate(self, tmp_path):
        manager = SnapshotManager(tmp_path / "snapshots", os_kind="windows")

        with pytest.raises(NotConfiguredError):
            manager.ensure_snapshot("safari")


def test_remove_snapshot(tmp_path, history_factory):
    manager = _manager(tmp_path, history_factory("chrome"))
    snapshot = manager.ensure_snapshot("chrome")

    assert manager.remove("chrome") is True
    assert not snapshot.exists()
    assert manager.remove("chrome") is False

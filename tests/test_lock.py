"""Tests for the wrapper lock file"""

import os

import pytest

from duplicity_backup.exceptions import LockError
from duplicity_backup.lock import LockFile


class TestLockFile:
    def test_acquire_writes_pid(self, tmp_path):
        lock = LockFile(tmp_path / "backup.lock")
        lock.try_lock()

        try:
            assert lock.locked
            assert (tmp_path / "backup.lock").read_text() == f"{os.getpid()}\n"
        finally:
            lock.unlock()

    def test_parent_directory_is_created(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "backup.lock"

        with LockFile(path) as lock:
            assert lock.locked
            assert path.exists()

    def test_second_holder_is_rejected(self, tmp_path):
        path = tmp_path / "backup.lock"

        with LockFile(path):
            with pytest.raises(LockError) as exc_info:
                LockFile(path).try_lock()

        assert exc_info.value.code == "LOCK_HELD"
        assert str(path) in exc_info.value.message

    def test_relock_after_unlock(self, tmp_path):
        path = tmp_path / "backup.lock"
        first = LockFile(path)
        first.try_lock()
        first.unlock()

        second = LockFile(path)
        second.try_lock()
        assert second.locked
        second.unlock()
        assert not second.locked

    def test_context_manager_releases(self, tmp_path):
        path = tmp_path / "backup.lock"

        with LockFile(path) as lock:
            pass

        assert not lock.locked
        with LockFile(path):
            pass

    def test_unlock_without_lock(self, tmp_path):
        LockFile(tmp_path / "backup.lock").unlock()

    def test_home_is_expanded(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert LockFile("~/.config/duplicity-backup.lock").path == (
            tmp_path / ".config" / "duplicity-backup.lock"
        )

"""Process lock preventing overlapping wrapper runs"""

import fcntl
import os
from pathlib import Path
from typing import IO, Optional, Union

from duplicity_backup.exceptions import LockError


class LockFile:
    """Exclusive, non-blocking lock on a file

    The lock is released by the kernel when the process exits, so a crashed
    run never leaves a stale lock behind.

    Example:
        with LockFile("~/.config/duplicity-backup.lock"):
            run_backup()
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()
        self._handle: Optional[IO[str]] = None

    @property
    def locked(self) -> bool:
        return self._handle is not None

    def try_lock(self) -> None:
        """Acquire the lock without waiting

        Raises:
            LockError: If another process holds the lock
        """
        if self._handle is not None:
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(self.path, "a+", encoding="utf-8")
        try:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError as e:
            handle.close()
            raise LockError(
                f"Could not acquire lock {self.path}: {e}",
                details={"path": str(self.path)},
            ) from e

        handle.seek(0)
        handle.truncate()
        handle.write(f"{os.getpid()}\n")
        handle.flush()
        self._handle = handle

    def unlock(self) -> None:
        if self._handle is None:
            return
        try:
            fcntl.flock(self._handle.fileno(), fcntl.LOCK_UN)
        finally:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> "LockFile":
        self.try_lock()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unlock()

"""Size-bounded log files with a bounded chain of numbered backups.

Rotation scheme:
  - `file.log` -> `file.log.1` (newest backup)
  - `file.log.1` -> `file.log.2` ... up to `max_backups` (oldest)
  - once the chain is full, `file.log.<max_backups>` is evicted first

Roll-over is best-effort: a failed rename is logged and skipped so that
logging stays available even when the backup chain is damaged.
"""

from __future__ import annotations

import enum
import os
import threading
from typing import Callable

import structlog

from lfshook.config import DEFAULT_MAX_BACKUPS, DEFAULT_MAX_FILE_SIZE
from lfshook.errors import OpenError, RotationError, WriteError

logger = structlog.get_logger(__name__)

DIR_MODE = 0o755
FILE_MODE = 0o664


class HandleState(str, enum.Enum):
    CLOSED = "closed"
    OPEN = "open"
    ROLLING_OVER = "rolling_over"


def backup_path(path: str, generation: int) -> str:
    return f"{path}.{generation}"


def count_backups(path: str, max_backups: int) -> int:
    """Number of consecutive backups `path.1`, `path.2`, ... that exist."""
    count = 0
    for i in range(1, max_backups + 1):
        if not os.path.lexists(backup_path(path, i)):
            break
        count += 1
    return count


def _remove(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise RotationError(f"cannot remove {path}: {exc}", path=path) from exc


def _rename(src: str, dst: str) -> None:
    try:
        os.replace(src, dst)
    except OSError as exc:
        raise RotationError(f"cannot rename {src} -> {dst}: {exc}", path=src) from exc


def _best_effort(step: Callable[..., None], *args: str) -> None:
    try:
        step(*args)
    except RotationError as exc:
        logger.warning("Log rotation step failed", path=exc.path, error=str(exc))


def shift_backups(path: str, max_backups: int) -> None:
    """Move the base file to `path.1`, pushing older backups up by one.

    Evicts the oldest generation when all `max_backups` slots are taken.
    With `max_backups == 0` the base file is simply removed.
    """
    if max_backups <= 0:
        _best_effort(_remove, path)
        return

    existing = count_backups(path, max_backups)
    if existing >= max_backups:
        _best_effort(_remove, backup_path(path, max_backups))
        existing = max_backups - 1

    for i in range(existing, 0, -1):
        _best_effort(_rename, backup_path(path, i), backup_path(path, i + 1))

    _best_effort(_rename, path, backup_path(path, 1))


class RotatingFile:
    """One log file: its descriptor, tracked length and lock.

    `write()` runs ensure-open, the size check, roll-over and the append as
    one critical section. Tracked length counts bytes actually written since
    the file was opened (seeded from the existing size on open).
    """

    def __init__(
        self,
        path: str,
        *,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        max_backups: int = DEFAULT_MAX_BACKUPS,
    ) -> None:
        self.path = path
        self.max_file_size = max_file_size
        self.max_backups = max_backups
        self._lock = threading.Lock()
        self._fd: int | None = None
        self._length = 0
        self._state = HandleState.CLOSED

    @property
    def length(self) -> int:
        return self._length

    @property
    def state(self) -> HandleState:
        return self._state

    def write(self, data: bytes) -> int:
        """Append `data`, rotating first when the file is over its size limit.

        Returns the number of bytes written.

        Raises:
            OpenError: the base file could not be opened or created.
            WriteError: the append failed; the next call re-opens the file.
        """
        with self._lock:
            self._ensure_open()
            if self._length > self.max_file_size:
                self._state = HandleState.ROLLING_OVER
                self._roll_over()
                self._ensure_open()
            return self._append(data)

    def close(self) -> None:
        with self._lock:
            self._close()

    def _ensure_open(self) -> None:
        if self._fd is not None:
            return
        try:
            parent = os.path.dirname(self.path)
            if parent:
                os.makedirs(parent, mode=DIR_MODE, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, FILE_MODE)
        except OSError as exc:
            self._state = HandleState.CLOSED
            raise OpenError(f"cannot open log file {self.path}: {exc}", path=self.path) from exc
        try:
            self._length = os.fstat(fd).st_size
        except OSError:
            self._length = 0
        self._fd = fd
        self._state = HandleState.OPEN

    def _roll_over(self) -> None:
        logger.debug("Rotating log file", path=self.path, length=self._length, max_backups=self.max_backups)
        self._close()
        shift_backups(self.path, self.max_backups)
        self._length = 0

    def _append(self, data: bytes) -> int:
        if self._fd is None:
            raise WriteError(f"log file {self.path} is not open", path=self.path)
        try:
            written = os.write(self._fd, data)
        except OSError as exc:
            self._close()
            raise WriteError(f"cannot write log file {self.path}: {exc}", path=self.path) from exc
        self._length += written
        return written

    def _close(self) -> None:
        fd, self._fd = self._fd, None
        self._state = HandleState.CLOSED
        if fd is None:
            return
        try:
            os.close(fd)
        except OSError as exc:
            logger.warning("Failed to close log file", path=self.path, error=str(exc))

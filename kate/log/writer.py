"""Append-only log file writer that rotates the file once per day."""

from __future__ import annotations

import os
import sys
import threading
from datetime import datetime, timedelta

OPEN_FLAGS = os.O_CREAT | os.O_APPEND | os.O_WRONLY
OPEN_MODE = 0o644
MAX_ROTATE_COUNT = 7

_CHECK_INTERVAL = 1.0


def _open(location: str):
    fd = os.open(location, OPEN_FLAGS, OPEN_MODE)
    return os.fdopen(fd, "ab", buffering=0)


def _prev_day_suffix(days: int) -> str:
    return (datetime.now() - timedelta(days=days)).strftime("%Y%m%d")


class Writer:
    """Writes to ``location``; when the day changes the file is renamed with
    yesterday's date as suffix and a fresh file is opened."""

    def __init__(self, location: str | os.PathLike):
        self._location = os.fspath(location)
        self._file = _open(self._location)
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._closed = False
        self._thread = threading.Thread(
            target=self._rotate_loop, name="kate-log-rotate", daemon=True
        )
        self._thread.start()

    @property
    def location(self) -> str:
        return self._location

    def write(self, data: bytes | str) -> int:
        """Append ``data`` and return the number of bytes written."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        with self._lock:
            return self._file.write(data)

    def sync(self) -> None:
        """Flush the file to disk."""
        with self._lock:
            os.fsync(self._file.fileno())

    def close(self) -> None:
        """Stop rotating and close the file."""
        if self._closed:
            return
        self._closed = True
        self._stop.set()
        if self._thread is not threading.current_thread():
            self._thread.join()
        with self._lock:
            self._file.close()

    def __enter__(self) -> Writer:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _rotate_loop(self) -> None:
        last_day = datetime.now().day
        while not self._stop.wait(_CHECK_INTERVAL):
            today = datetime.now().day
            if today != last_day:
                last_day = today
                try:
                    self.rotate()
                except OSError as exc:
                    sys.stderr.write(f"ERROR: {exc}\n")
                    os._exit(255)

    def rotate(self) -> None:
        """Move the current file aside under yesterday's suffix and reopen it."""
        src = self._location
        dst = f"{src}.{_prev_day_suffix(1)}"

        if os.path.exists(src):
            sys.stderr.write(f"rotating {src} => {dst}\n")
            try:
                os.rename(src, dst)
            except OSError as exc:
                raise OSError(
                    f"failed to rotate: srcFile={src}, dstFile={dst}, error={exc}"
                ) from exc

        oldest = f"{src}.{_prev_day_suffix(MAX_ROTATE_COUNT + 1)}"
        if os.path.exists(oldest):
            sys.stderr.write(f"removing {oldest}\n")
            try:
                os.remove(oldest)
            except OSError:
                pass

        with self._lock:
            try:
                self._file.close()
            except OSError as exc:
                raise OSError(
                    f'failed to close log file "{src}", reason={exc}'
                ) from exc
            try:
                self._file = _open(src)
            except OSError as exc:
                raise OSError(
                    f'failed to rotate log file "{src}", reopen, reason={exc}'
                ) from exc
"""Asynchronous file logger with size-based rotation."""

from __future__ import annotations

import sys
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from os import PathLike, fspath
from pathlib import Path
from typing import TextIO

_BOM = "\ufeff"
_MAX_ROTATION_SUFFIX = 999


class LogLevel(IntEnum):
    """Severity of a log record, in increasing order."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    FATAL = 4

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    LogLevel.DEBUG: "[DEBUG]",
    LogLevel.INFO: "[INFO]",
    LogLevel.WARNING: "[WARN]",
    LogLevel.ERROR: "[ERROR]",
    LogLevel.FATAL: "[FATAL]",
}


@dataclass
class LoggerConfig:
    """Settings for AsyncFileLogger."""

    filename: str | PathLike[str]
    max_file_size: int = 10 * 1024 * 1024
    console_output: bool = True
    min_level: LogLevel = LogLevel.INFO
    max_queue_size: int = 10000


def format_timestamp(moment: datetime | None = None) -> str:
    """Format ``moment`` (default: now, local time) as ``YYYY-MM-DD HH:MM:SS``."""
    if moment is None:
        moment = datetime.now()
    return moment.strftime("%Y-%m-%d %H:%M:%S")


def format_line(level: LogLevel, message: str, moment: datetime | None = None) -> str:
    """Build one log line, terminated by a newline."""
    return f"[{format_timestamp(moment)}] {LogLevel(level).label} {message}\n"


class AsyncFileLogger:
    """Writes log records to a file from a background thread.

    The file is truncated and starts with a UTF-8 byte order mark. Once it
    reaches ``max_file_size`` bytes it is renamed with a timestamp suffix and
    a fresh file is started. When the queue holds ``max_queue_size`` pending
    records it is dropped before the next record is added.
    """

    def __init__(self, config: LoggerConfig) -> None:
        self.config = config
        self._path = Path(fspath(config.filename))
        self._file: TextIO | None = None
        self._file_size = 0
        self._queue: deque[tuple[LogLevel, str]] = deque()
        self._cond = threading.Condition()
        self._running = False

        self._open_with_bom()
        self._running = True
        self._worker = threading.Thread(
            target=self._run, name="AsyncFileLogger", daemon=True
        )
        self._worker.start()

    def __enter__(self) -> AsyncFileLogger:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def log(self, level: LogLevel, message: str) -> None:
        """Queue a record; records below ``min_level`` are ignored."""
        if level < self.config.min_level:
            return
        with self._cond:
            if len(self._queue) >= self.config.max_queue_size:
                self._queue.clear()
            self._queue.append((LogLevel(level), message))
            self._cond.notify()

    def close(self) -> None:
        """Stop the worker after it has written every queued record."""
        with self._cond:
            self._running = False
            self._cond.notify()
        if self._worker.is_alive() and self._worker is not threading.current_thread():
            self._worker.join()

    def _open_with_bom(self) -> None:
        handle = open(self._path, "w", encoding="utf-8", newline="")
        try:
            handle.write(_BOM)
            handle.flush()
        except OSError:
            handle.close()
            raise
        self._file = handle
        self._file_size = len(_BOM.encode("utf-8"))

    def _emit(self, level: LogLevel, message: str, rotate: bool) -> None:
        line = format_line(level, message)
        if self.config.console_output:
            sys.stdout.write(line)
            sys.stdout.flush()
        if self._file is None:
            return
        self._file.write(line)
        self._file_size += len(line.encode("utf-8"))
        if rotate:
            self._rotate_if_needed()

    def _rotation_targets(self, stamp: str):
        yield self._path.with_name(f"{self._path.name}.{stamp}.log")
        for index in range(1, _MAX_ROTATION_SUFFIX + 1):
            yield self._path.with_name(f"{self._path.name}.{stamp}_{index}.log")

    def _rotate_if_needed(self) -> None:
        if self._file is None or self._file_size < self.config.max_file_size:
            return
        self._file.close()
        self._file = None

        stamp = format_timestamp()
        for target in self._rotation_targets(stamp):
            if target.exists():
                continue
            try:
                self._path.rename(target)
            except OSError:
                continue
            break

        try:
            self._open_with_bom()
        except OSError as exc:
            sys.stderr.write(f"Logger: cannot reopen {self._path}: {exc}\n")
            with self._cond:
                self._running = False

    def _run(self) -> None:
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._queue or not self._running)
                if not self._running and not self._queue:
                    break
                batch = list(self._queue)
                self._queue.clear()
            for level, message in batch:
                self._emit(level, message, rotate=True)
            if self._file is not None:
                self._file.flush()

        while True:
            with self._cond:
                if not self._queue:
                    break
                level, message = self._queue.popleft()
            self._emit(level, message, rotate=False)

        if self._file is not None:
            self._file.close()
            self._file = None
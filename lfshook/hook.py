"""LfsHook: routes log records to rotating local files or caller-owned sinks."""

from __future__ import annotations

import logging
import threading

import structlog

from lfshook.config import RotationSettings, build_settings
from lfshook.errors import ConfigurationError, FormatError
from lfshook.formatters import Formatter, LoggingFormatterAdapter, TextFormatter, render
from lfshook.models import ALL_LEVELS, ByteSink, Level, PathLike
from lfshook.resolver import DestinationResolver
from lfshook.rotating_log import RotatingFile
from lfshook.sink_writer import SinkWriter

logger = structlog.get_logger(__name__)


def _plain_formatter(formatter: Formatter | None) -> Formatter:
    # Files are not terminals: strip colors.
    if formatter is None:
        return TextFormatter(disable_colors=True)
    if isinstance(formatter, TextFormatter):
        formatter.disable_colors = True
        return formatter
    if isinstance(formatter, logging.Formatter):
        return LoggingFormatterAdapter(formatter)
    if not callable(getattr(formatter, "format", None)):
        raise ConfigurationError(f"formatter must have a format() method, got {type(formatter).__name__}")
    return formatter


class LfsHook:
    """Hook that writes every record it is fired with to a file or a writer.

    `output` is one of: a path (all levels), a writable object (all levels),
    a `PathMap` / `WriterMap`, or a plain dict of level -> path or
    level -> writer. Caller-supplied writers are never closed by the hook.

    Files rotate once they grow past `max_file_size` bytes, keeping at most
    `max_backups` numbered backups (`.1` newest).
    """

    def __init__(
        self,
        output: object,
        formatter: Formatter | None = None,
        max_file_size: int | None = None,
        max_backups: int | None = None,
        *,
        settings: RotationSettings | None = None,
    ) -> None:
        if settings is not None and (max_file_size is not None or max_backups is not None):
            raise ConfigurationError("pass either settings or max_file_size/max_backups, not both")
        self.settings = settings or build_settings(max_file_size, max_backups)
        self._resolver = DestinationResolver(output)
        self._formatter = _plain_formatter(formatter)
        self._lock = threading.Lock()
        self._registry_lock = threading.Lock()
        self._files: dict[str, RotatingFile] = {}
        self._sinks: dict[int, SinkWriter] = {}

    @property
    def max_file_size(self) -> int:
        return self.settings.max_file_size

    @property
    def max_backups(self) -> int:
        return self.settings.max_backups

    @property
    def file_backed(self) -> bool:
        return self._resolver.file_backed

    @property
    def formatter(self) -> Formatter:
        return self._formatter

    def levels(self) -> tuple[Level, ...]:
        """Levels this hook wants to receive: all of them."""
        return ALL_LEVELS

    def set_formatter(self, formatter: Formatter | None) -> None:
        """Replace the formatter. None restores the default plain-text one."""
        formatter = _plain_formatter(formatter)
        with self._lock:
            self._formatter = formatter

    def set_default_path(self, path: PathLike) -> None:
        """Path used for levels without an entry of their own."""
        with self._lock:
            self._resolver.set_default_path(path)

    def set_default_writer(self, writer: ByteSink) -> None:
        """Writer used for levels without an entry of their own."""
        with self._lock:
            self._resolver.set_default_sink(writer)

    def fire(self, record: logging.LogRecord) -> None:
        """Write one record to the destination configured for its level.

        Records whose level has no destination are dropped silently.

        Raises:
            FormatError: the formatter failed; nothing was written.
            OpenError: the log file could not be opened.
            WriteError: the file or writer rejected the data.
        """
        with self._lock:
            formatter = self._formatter
            target = self._resolver.resolve(record.levelno)
            file_backed = self._resolver.file_backed

        if target is None:
            return

        if file_backed:
            self._file_for(target).write(self._format(formatter, record))  # type: ignore[arg-type]
        else:
            self._sink_for(target).write(self._format(formatter, record))  # type: ignore[arg-type]

    def close(self) -> None:
        """Close every open log file. A later `fire` re-opens them."""
        with self._registry_lock:
            files = list(self._files.values())
        for handle in files:
            handle.close()

    def _format(self, formatter: Formatter, record: logging.LogRecord) -> bytes:
        try:
            return render(formatter, record)
        except Exception as exc:
            logger.error("failed to generate string for entry", error=str(exc), record_level=record.levelname)
            raise FormatError(f"failed to generate string for entry: {exc}") from exc

    def _file_for(self, path: str) -> RotatingFile:
        with self._registry_lock:
            handle = self._files.get(path)
            if handle is None:
                handle = RotatingFile(
                    path,
                    max_file_size=self.settings.max_file_size,
                    max_backups=self.settings.max_backups,
                )
                self._files[path] = handle
        return handle

    def _sink_for(self, sink: ByteSink) -> SinkWriter:
        with self._registry_lock:
            writer = self._sinks.get(id(sink))
            if writer is None:
                writer = SinkWriter(sink)
                self._sinks[id(sink)] = writer
        return writer

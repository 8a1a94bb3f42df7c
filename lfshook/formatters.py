"""Record formatters: render a stdlib LogRecord into bytes for a file or sink."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Protocol

from lfshook.models import Level

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

_LEVEL_COLORS = {
    "TRACE": 37,
    "DEBUG": 37,
    "INFO": 36,
    "WARNING": 33,
    "ERROR": 31,
    "CRITICAL": 31,
}


class Formatter(Protocol):
    """Renders one record. Returning str means UTF-8."""

    def format(self, record: logging.LogRecord) -> bytes | str: ...


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Structured fields attached to a record via `extra=`."""
    return {k: v for k, v in vars(record).items() if k not in _RESERVED_ATTRS and not k.startswith("_")}


def _timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()


def _level_name(record: logging.LogRecord) -> str:
    # stdlib has no name for TRACE; its levelname would be "Level 5".
    try:
        return Level(record.levelno).name
    except ValueError:
        return record.levelname.upper()


def _needs_quoting(text: str) -> bool:
    if not text:
        return True
    return any(not (ch.isalnum() or ch in "-._/@^+") for ch in text)


class TextFormatter:
    """``time=... level=... msg=...`` lines followed by sorted extra fields.

    ANSI level coloring is applied unless ``disable_colors`` is set; the hook
    turns it off whenever it is handed a TextFormatter.
    """

    def __init__(self, disable_colors: bool = False, disable_timestamp: bool = False) -> None:
        self.disable_colors = disable_colors
        self.disable_timestamp = disable_timestamp

    def _quote(self, value: object) -> str:
        text = value if isinstance(value, str) else str(value)
        return json.dumps(text) if _needs_quoting(text) else text

    def format(self, record: logging.LogRecord) -> bytes:
        level = _level_name(record)
        message = record.getMessage()
        fields = record_fields(record)
        if record.exc_info:
            fields["error"] = logging.Formatter().formatException(record.exc_info)

        if self.disable_colors:
            parts = []
            if not self.disable_timestamp:
                parts.append(f"time={self._quote(_timestamp(record))}")
            parts.append(f"level={self._quote(level.lower())}")
            parts.append(f"msg={self._quote(message)}")
            parts.extend(f"{key}={self._quote(fields[key])}" for key in sorted(fields))
            line = " ".join(parts)
        else:
            color = _LEVEL_COLORS.get(level, 34)
            line = f"\x1b[{color}m{level[:4]}\x1b[0m {message:<44}"
            line += "".join(f" \x1b[{color}m{key}\x1b[0m={self._quote(fields[key])}" for key in sorted(fields))
        return (line + "\n").encode("utf-8")


class JSONFormatter:
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> bytes:
        data: dict[str, Any] = {
            "time": _timestamp(record),
            "level": _level_name(record).lower(),
            "msg": record.getMessage(),
            "logger": record.name,
        }
        for key, value in record_fields(record).items():
            data.setdefault(key, value)
        if record.exc_info:
            data["error"] = logging.Formatter().formatException(record.exc_info)
        return (json.dumps(data, default=str, ensure_ascii=False) + "\n").encode("utf-8")


class LoggingFormatterAdapter:
    """Use a stdlib ``logging.Formatter`` as a record formatter."""

    def __init__(self, formatter: logging.Formatter, encoding: str = "utf-8") -> None:
        self.formatter = formatter
        self.encoding = encoding

    def format(self, record: logging.LogRecord) -> bytes:
        return (self.formatter.format(record) + "\n").encode(self.encoding)


def render(formatter: Formatter, record: logging.LogRecord) -> bytes:
    """Run the formatter and normalize its output to bytes."""
    rendered = formatter.format(record)
    if isinstance(rendered, str):
        return rendered.encode("utf-8")
    if isinstance(rendered, (bytes, bytearray, memoryview)):
        return bytes(rendered)
    raise TypeError(f"formatter returned {type(rendered).__name__}, expected bytes or str")

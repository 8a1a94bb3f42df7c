"""Public package surface."""

from __future__ import annotations

from lfshook.config import DEFAULT_MAX_BACKUPS, DEFAULT_MAX_FILE_SIZE, RotationSettings
from lfshook.errors import (
    ConfigurationError,
    FormatError,
    LfsHookError,
    OpenError,
    RotationError,
    WriteError,
)
from lfshook.formatters import JSONFormatter, LoggingFormatterAdapter, TextFormatter
from lfshook.handler import LfsHandler
from lfshook.hook import LfsHook
from lfshook.models import ALL_LEVELS, Level, PathMap, WriterMap

__version__ = "0.1.0"

__all__ = [
    "ALL_LEVELS",
    "ConfigurationError",
    "DEFAULT_MAX_BACKUPS",
    "DEFAULT_MAX_FILE_SIZE",
    "FormatError",
    "JSONFormatter",
    "Level",
    "LfsHandler",
    "LfsHook",
    "LfsHookError",
    "LoggingFormatterAdapter",
    "OpenError",
    "PathMap",
    "RotationError",
    "RotationSettings",
    "TextFormatter",
    "WriteError",
    "WriterMap",
    "__version__",
]

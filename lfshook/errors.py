"""Error taxonomy for the file-system hook."""

from __future__ import annotations


class LfsHookError(Exception):
    """Base class for every error raised by lfshook."""


class ConfigurationError(LfsHookError):
    """Unsupported destination or settings at construction time."""


class FormatError(LfsHookError):
    """The formatter could not render a record."""


class FileHandleError(LfsHookError):
    """A filesystem operation on a rotating file failed."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class OpenError(FileHandleError):
    """Opening (or creating) the base log file failed."""


class WriteError(FileHandleError):
    """Appending a formatted record failed."""


class RotationError(FileHandleError):
    """A rename, stat or remove step during roll-over failed.

    Never propagated out of the hook; roll-over is best-effort.
    """

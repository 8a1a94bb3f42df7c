"""Rotation settings shared by every destination of one hook."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lfshook.errors import ConfigurationError

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MiB
DEFAULT_MAX_BACKUPS = 10


class RotationSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, gt=0)  # bytes
    max_backups: int = Field(default=DEFAULT_MAX_BACKUPS, ge=0)


def build_settings(
    max_file_size: int | None = None,
    max_backups: int | None = None,
) -> RotationSettings:
    """Validate rotation settings; None keeps the default.

    Raises:
        ConfigurationError: when a value is out of range or not an integer.
    """
    values: dict[str, int] = {}
    if max_file_size is not None:
        values["max_file_size"] = max_file_size
    if max_backups is not None:
        values["max_backups"] = max_backups
    try:
        return RotationSettings.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid rotation settings: {exc}") from exc

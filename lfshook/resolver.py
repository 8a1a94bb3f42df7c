"""Level -> destination resolution for one hook."""

from __future__ import annotations

import dataclasses

from lfshook.errors import ConfigurationError
from lfshook.models import (
    ByteSink,
    Destination,
    PathDestination,
    PathLike,
    SinkDestination,
    destination_from_output,
    is_path_like,
    is_sink,
    normalize_path,
)


class DestinationResolver:
    """Resolves a level to a path or a sink.

    Order: the level's own entry, then the default, then nothing. The mode
    (path or sink) is fixed by the output given at construction.
    """

    def __init__(self, output: object) -> None:
        self._destination: Destination = destination_from_output(output)

    @property
    def destination(self) -> Destination:
        return self._destination

    @property
    def file_backed(self) -> bool:
        return isinstance(self._destination, PathDestination)

    def resolve(self, level: int) -> str | ByteSink | None:
        """Return the target for `level`, or None when the record should be dropped."""
        destination = self._destination
        target = destination.routes.get(level)
        if target is not None:
            return target
        return destination.default

    def set_default_path(self, path: PathLike) -> None:
        if not isinstance(self._destination, PathDestination):
            raise ConfigurationError("cannot set a default path on a writer-backed hook")
        if not is_path_like(path):
            raise ConfigurationError(f"default path must be a path, got {type(path).__name__}")
        self._destination = dataclasses.replace(self._destination, default=normalize_path(path))

    def set_default_sink(self, sink: ByteSink) -> None:
        if not isinstance(self._destination, SinkDestination):
            raise ConfigurationError("cannot set a default writer on a path-backed hook")
        if not is_sink(sink):
            raise ConfigurationError(f"default writer must have a write() method, got {type(sink).__name__}")
        self._destination = dataclasses.replace(self._destination, default=sink)

"""Routing data models: severity levels and destination variants."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Protocol, Union

from lfshook.errors import ConfigurationError


class Level(IntEnum):
    """Severity levels, numbered like the stdlib logging levels."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50


# Most severe first.
ALL_LEVELS: tuple[Level, ...] = tuple(sorted(Level, reverse=True))

_LEVEL_ALIASES = {"WARN": Level.WARNING, "FATAL": Level.CRITICAL, "PANIC": Level.CRITICAL}


class ByteSink(Protocol):
    """Anything records can be written to."""

    def write(self, data: Any, /) -> Any: ...


PathLike = Union[str, "os.PathLike[str]"]


class PathMap(dict):
    """Level -> file path. Several levels may share a path; a level has one path."""


class WriterMap(dict):
    """Level -> byte sink. Several levels may share a sink; a level has one sink."""


def normalize_level(value: object) -> int:
    """Turn a routing key (Level, stdlib level number or level name) into an int."""
    if isinstance(value, bool):
        raise ConfigurationError(f"unsupported level key: {value!r}")
    if isinstance(value, int):
        return int(value)
    if isinstance(value, str):
        name = value.strip().upper()
        if name in _LEVEL_ALIASES:
            return int(_LEVEL_ALIASES[name])
        try:
            return int(Level[name])
        except KeyError:
            raise ConfigurationError(f"unknown level name: {value!r}") from None
    raise ConfigurationError(f"unsupported level key: {value!r}")


def normalize_path(value: PathLike) -> str:
    """Absolute path string, so aliases of one file resolve to one key."""
    return os.path.abspath(os.fspath(value))


def is_path_like(value: object) -> bool:
    return isinstance(value, (str, os.PathLike))


def is_sink(value: object) -> bool:
    return not is_path_like(value) and callable(getattr(value, "write", None))


@dataclass(frozen=True)
class PathDestination:
    """File-backed routing: every level resolves to a path (or nothing)."""

    routes: Mapping[int, str] = field(default_factory=dict)
    default: str | None = None


@dataclass(frozen=True)
class SinkDestination:
    """Sink-backed routing: every level resolves to a writable object (or nothing)."""

    routes: Mapping[int, ByteSink] = field(default_factory=dict)
    default: ByteSink | None = None


Destination = Union[PathDestination, SinkDestination]


def destination_from_output(output: object) -> Destination:
    """Classify the hook's output argument once.

    Accepts a single path, a single sink, a ``PathMap``, a ``WriterMap`` or a
    plain dict whose values are all paths or all sinks. Anything else raises
    ConfigurationError.
    """
    if is_path_like(output):
        return PathDestination(default=normalize_path(output))  # type: ignore[arg-type]
    if isinstance(output, Mapping):
        return _destination_from_mapping(output)
    if is_sink(output):
        return SinkDestination(default=output)  # type: ignore[arg-type]
    raise ConfigurationError(f"unsupported level map type: {type(output).__name__}")


def _destination_from_mapping(output: Mapping[Any, Any]) -> Destination:
    values = list(output.values())
    if isinstance(output, WriterMap):
        wants_paths = False
    elif isinstance(output, PathMap):
        wants_paths = True
    elif not output:
        raise ConfigurationError("an empty dict has no mode; pass PathMap() or WriterMap()")
    elif all(is_path_like(v) for v in values):
        wants_paths = True
    elif all(is_sink(v) for v in values):
        wants_paths = False
    else:
        raise ConfigurationError("level map must map every level to a path, or every level to a writer")

    if wants_paths:
        paths: dict[int, str] = {}
        for key, value in output.items():
            if not is_path_like(value):
                raise ConfigurationError(f"path map value for {key!r} is not a path: {type(value).__name__}")
            level = normalize_level(key)
            if level in paths:
                raise ConfigurationError(f"level {key!r} is mapped more than once")
            paths[level] = normalize_path(value)
        return PathDestination(routes=paths)

    sinks: dict[int, ByteSink] = {}
    for key, value in output.items():
        if not is_sink(value):
            raise ConfigurationError(f"writer map value for {key!r} is not writable: {type(value).__name__}")
        level = normalize_level(key)
        if level in sinks:
            raise ConfigurationError(f"level {key!r} is mapped more than once")
        sinks[level] = value
    return SinkDestination(routes=sinks)

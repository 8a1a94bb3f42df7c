"""Serialized writes to a caller-owned sink (file object, socket wrapper, buffer...)."""

from __future__ import annotations

import io
import threading

from lfshook.errors import WriteError
from lfshook.models import ByteSink


class SinkWriter:
    """Writes whole records to one sink under a lock.

    Text streams (``sys.stderr``, ``io.StringIO``) receive decoded text;
    everything else receives bytes. The sink is never closed here: whoever
    passed it in owns it.
    """

    def __init__(self, sink: ByteSink, encoding: str = "utf-8") -> None:
        self.sink = sink
        self.encoding = encoding
        self._lock = threading.Lock()
        self._text = isinstance(sink, io.TextIOBase)

    def write(self, data: bytes) -> int:
        payload: bytes | str = data.decode(self.encoding, errors="replace") if self._text else data
        with self._lock:
            try:
                written = self.sink.write(payload)
            except (OSError, ValueError, TypeError) as exc:
                raise WriteError(f"cannot write to sink {self.sink!r}: {exc}") from exc
        if isinstance(written, int) and not self._text:
            return written
        return len(data)

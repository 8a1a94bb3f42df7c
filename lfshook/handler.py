"""Bridge from stdlib logging to an LfsHook."""

from __future__ import annotations

import logging
import threading

from lfshook.hook import LfsHook


class LfsHandler(logging.Handler):
    """logging.Handler that fires an LfsHook for every record it receives.

    Attach it to any logger (`logging.getLogger().addHandler(LfsHandler(hook))`);
    level filtering beyond the handler level happens inside the hook's
    destination map.
    """

    def __init__(self, hook: LfsHook, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.hook = hook
        self._local = threading.local()

    def handle(self, record: logging.LogRecord) -> bool:
        # The hook locks per destination; skip logging.Handler's handler-wide lock.
        rv = self.filter(record)
        if isinstance(rv, logging.LogRecord):
            record = rv
        if rv:
            self.emit(record)
        return bool(rv)

    def emit(self, record: logging.LogRecord) -> None:
        # lfshook diagnostics emitted while firing must not loop back in.
        if getattr(self._local, "firing", False):
            return
        self._local.firing = True
        try:
            self.hook.fire(record)
        except Exception:
            self.handleError(record)
        finally:
            self._local.firing = False

    def close(self) -> None:
        try:
            self.hook.close()
        finally:
            super().close()

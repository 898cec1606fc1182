"""
Per-run cancellation context.

One ``RunContext`` is created per lint run and handed to every check
and every cluster read. Cancelling it (or passing its deadline) makes
the next read raise ``RunCancelledError``; the kubectl reader also
polls it while a subprocess is in flight and kills the process.
"""

from __future__ import annotations

import threading
import time


class RunCancelledError(Exception):
    """Raised when a read is attempted on a cancelled or expired run."""


class RunContext:
    """Cancellable, optionally time-bounded run scope."""

    def __init__(self, timeout: float | None = None) -> None:
        self._cancelled = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout else None
        self._reason = ""

    def cancel(self, reason: str = "run cancelled") -> None:
        self._reason = reason
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._reason = self._reason or "run deadline exceeded"
            return True
        return False

    @property
    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None when unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self) -> None:
        """Raise ``RunCancelledError`` if the run is no longer live."""
        if self.cancelled:
            raise RunCancelledError(self._reason or "run cancelled")

from __future__ import annotations

import time
from typing import Any, Callable, Optional

from core.contracts import IScheduler, ITimerHandle, Timestamp, USEC_PER_SEC


def now() -> Timestamp:
    """Current wall-clock time, exact to the microsecond."""
    sec, usec = divmod(time.time_ns() // 1000, USEC_PER_SEC)
    return Timestamp(sec, usec)


class RoundTimer:
    """One-shot timer bounding the length of a round.

    The duration is fixed; it is armed once per round and cancelled by the
    reset that ends the round.
    """

    def __init__(self, scheduler: IScheduler, seconds: float, callback: Callable[[], Any]) -> None:
        self._scheduler = scheduler
        self._seconds = seconds
        self._callback = callback
        self._handle: Optional[ITimerHandle] = None

    def start(self) -> None:
        if self._handle is not None:
            return
        self._handle = self._scheduler.call_later(self._seconds, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None

    def _fire(self) -> None:
        # the handle is spent once it fires; cancel() after this is a no-op
        self._handle = None
        self._callback()

    @property
    def is_running(self) -> bool:
        return self._handle is not None

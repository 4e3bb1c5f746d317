from __future__ import annotations

import random
from typing import Optional

from core.contracts import USEC_PER_SEC, Window

# Shared randomness source, seeded once from OS entropy at import.
_rng = random.Random()


class WindowGenerator:
    """Produces randomized response windows below a fixed upper bound.

    Seconds and microseconds are drawn independently, so a window lies in
    [0, max_window_seconds) with one microsecond of resolution.
    """

    def __init__(self, max_window_seconds: int, rng: Optional[random.Random] = None) -> None:
        if max_window_seconds <= 0:
            raise ValueError(f"max_window_seconds must be positive, got {max_window_seconds}")
        self.max_window_seconds = max_window_seconds
        self._rng = rng if rng is not None else _rng

    def next(self) -> Window:
        seconds = self._rng.randrange(self.max_window_seconds)
        microseconds = self._rng.randrange(USEC_PER_SEC)
        return Window(seconds, microseconds)

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Optional, Set, TextIO

from core.contracts import IClock, IScheduler
from server_core.protocol import format_report
from server_core.window import WindowGenerator
from services.timer import RoundTimer, now


@dataclass
class Session:
    """Holds the shared mutable state of the current round.

    One instance lives for the whole process and is reset, never replaced,
    when a round ends. Every mutation happens on the event loop thread, so no
    locking is involved. Connections keep a plain reference back to it.
    """

    max_window_seconds: int
    max_round_seconds: int
    scheduler: Optional[IScheduler] = None
    score: int = 0
    max_score: int = 0
    round_timer: Optional[RoundTimer] = None
    connections: Set[Any] = field(default_factory=set)
    rounds_played: int = 0
    out: Optional[TextIO] = None
    clock: IClock = now
    windows: Optional[WindowGenerator] = None

    def __post_init__(self):
        if self.max_round_seconds <= 0:
            raise ValueError(f"max_round_seconds must be positive, got {self.max_round_seconds}")
        if self.windows is None:
            self.windows = WindowGenerator(self.max_window_seconds)

    def add(self, conn) -> None:
        self.connections.add(conn)

    def discard(self, conn) -> None:
        self.connections.discard(conn)

    def increase_score(self) -> None:
        self.score += 1
        self.max_score = max(self.score, self.max_score)

    def reset_and_report(self) -> str:
        line = format_report(self.score, self.max_score)
        print(line, file=self.out if self.out is not None else sys.stdout, flush=True)
        self.score = 0
        self.rounds_played += 1
        return line

    @property
    def round_in_progress(self) -> bool:
        return self.round_timer is not None

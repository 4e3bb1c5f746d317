from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.contracts import USEC_PER_SEC, GameState, Window


@dataclass(frozen=True)
class Status:
    """A parsed `<sec>.<usec6> <score> <maxScore>` line from the server."""

    window: Window
    score: int
    max_score: int

    def deadline_from(self, received_at: float) -> float:
        return received_at + self.window.total_seconds


def parse_status(line: Optional[str]) -> Optional[Status]:
    """Parse one status line. Returns None for anything malformed."""
    if not line:
        return None
    parts = line.strip().split()
    if len(parts) != 3:
        return None
    sec_s, _, usec_s = parts[0].partition('.')
    if len(usec_s) != 6:
        return None
    try:
        sec = int(sec_s)
        usec = int(usec_s)
        score = int(parts[1])
        max_score = int(parts[2])
    except ValueError:
        return None
    if sec < 0 or not 0 <= usec < USEC_PER_SEC or score < 0 or max_score < 0:
        return None
    return Status(Window(sec, usec), score, max_score)


def apply_status(state: GameState, status: Status, received_at: float) -> None:
    """Fold a fresh status line into the client's game state."""
    state.window = status.window
    state.score = status.score
    state.max_score = status.max_score
    state.deadline = status.deadline_from(received_at)
    state.answered = False


def bot_delay(status: Status, fraction: float) -> float:
    """Seconds an automatic player waits before answering a window."""
    if not 0 <= fraction < 1:
        raise ValueError(f"fraction must be in [0, 1), got {fraction}")
    return status.window.total_seconds * fraction

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

USEC_PER_SEC = 1_000_000


@dataclass(frozen=True)
class Window:
    """A response window: whole seconds plus a microsecond fraction."""

    seconds: int
    microseconds: int

    @property
    def total_seconds(self) -> float:
        return self.seconds + self.microseconds / USEC_PER_SEC

    def __str__(self) -> str:
        return f"{self.seconds}.{self.microseconds:06d}"


@dataclass(frozen=True, order=True)
class Timestamp:
    """Absolute wall-clock instant split into second and microsecond fields.

    Field order matters: comparisons look at `sec` first and only fall back to
    `usec` when the seconds are equal.
    """

    sec: int
    usec: int

    def plus(self, window: Window) -> "Timestamp":
        sec, usec = divmod(self.usec + window.microseconds, USEC_PER_SEC)
        return Timestamp(self.sec + window.seconds + sec, usec)


@dataclass(frozen=True)
class ServerConfig:
    port: int
    max_window_seconds: int
    max_round_seconds: int
    host: Optional[str] = None

    def validate(self) -> "ServerConfig":
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be in 1..65535, got {self.port}")
        if self.max_window_seconds <= 0:
            raise ValueError(f"window bound must be positive, got {self.max_window_seconds}")
        if self.max_round_seconds <= 0:
            raise ValueError(f"round bound must be positive, got {self.max_round_seconds}")
        return self


@dataclass
class GameState:
    """Client-side view of the game, shared by input handling and the HUD.

    - window / score / max_score: from the latest status line
    - deadline: monotonic time the current window runs out
    - answered: a byte was sent for the current window
    - round_over: the server closed the connection
    """
    window: Optional[Window] = None
    score: int = 0
    max_score: int = 0
    deadline: Optional[float] = None
    answered: bool = False
    round_over: bool = False
    rounds: int = 0


class IStream(Protocol):
    """Byte stream owned by a connection (an asyncio transport in practice)."""

    def write(self, data: bytes) -> None:
        ...

    def close(self) -> None:
        ...

    def is_closing(self) -> bool:
        ...


class ITimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class IScheduler(Protocol):
    """Anything that can arm a one-shot timer; asyncio event loops qualify."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ITimerHandle:
        ...


class IClock(Protocol):
    def __call__(self) -> Timestamp:
        ...

from __future__ import annotations

from core.contracts import Window


def format_status(window: Window, score: int, max_score: int) -> bytes:
    """Status line sent to a client each time its deadline is (re)armed.

    Format: `<sec>.<usec6> <score> <maxScore>\\n`
    """
    return f"{window} {score} {max_score}\n".encode('ascii')


def format_report(score: int, max_score: int) -> str:
    """Operator-facing summary printed when a round ends."""
    return f"{score} / {max_score}"

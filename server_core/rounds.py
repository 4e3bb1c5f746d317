from __future__ import annotations

import logging

from server_core.session import Session
from services.timer import RoundTimer

logger = logging.getLogger('slowpoke.rounds')
logger.addHandler(logging.NullHandler())


def start_round_timer(session: Session) -> bool:
    """Arm the overall round timer unless the current round already has one.

    Returns True when a new timer was armed, i.e. this accept opened a round.
    """
    if session.round_timer is not None:
        return False
    if session.scheduler is None:
        raise RuntimeError("session has no scheduler to arm the round timer on")
    timer = RoundTimer(session.scheduler, session.max_round_seconds, lambda: end_round(session))
    session.round_timer = timer
    timer.start()
    logger.debug("Round %s started, ends in at most %ss", session.rounds_played + 1, session.max_round_seconds)
    return True


def end_round(session: Session) -> str:
    """Close every open connection, report the score and drop the round timer.

    Triggered by a late byte on any connection or by the round timer firing.
    Connections remove themselves from the set while being destroyed, so we
    keep popping one member until the set is empty instead of iterating it.
    """
    closed = 0
    while session.connections:
        conn = session.connections.pop()
        conn.destroy()
        closed += 1

    round_no = session.rounds_played + 1
    line = session.reset_and_report()
    logger.info("Round %s over: %s (%s connection(s) closed)", round_no, line, closed)

    if session.round_timer is not None:
        session.round_timer.cancel()
    session.round_timer = None
    return line

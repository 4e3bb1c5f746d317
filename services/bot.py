from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from core.contracts import GameState
from net.sync import apply_status, bot_delay, parse_status

logger = logging.getLogger('slowpoke.client')
logger.addHandler(logging.NullHandler())


def play_headless(network, fraction: float, max_points: Optional[int] = None,
                  line_timeout: float = 30.0,
                  sleep: Callable[[float], None] = time.sleep) -> GameState:
    """Answer every window automatically until the server ends the round.

    Waits `fraction` of each window before sending a byte. Stops early once
    `max_points` points were scored. Returns the final client state.
    """
    state = GameState()
    scored = 0
    while True:
        line = network.wait_line(timeout=line_timeout)
        if line is None:
            if not network.closed:
                logger.info("No status line within %ss, giving up", line_timeout)
            break
        status = parse_status(line)
        if status is None:
            logger.debug("Ignoring malformed line %r", line)
            continue
        apply_status(state, status, time.monotonic())
        if state.score > 0:
            scored = state.score
        if max_points is not None and scored >= max_points:
            break
        sleep(bot_delay(status, fraction))
        # a failed send means the server is closing us; the next wait_line sees it
        state.answered = network.send(b'.')
    state.round_over = network.closed
    if state.round_over:
        state.rounds += 1
    return state

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from core.contracts import IStream, Timestamp, Window
from server_core.protocol import format_status
from server_core.rounds import end_round, start_round_timer
from server_core.session import Session

logger = logging.getLogger('slowpoke.server')
logger.addHandler(logging.NullHandler())


class Connection(asyncio.Protocol):
    """One client socket and its response deadline.

    After every arm the client has a fresh randomized window to send any byte.
    Bytes arriving in time score a point and re-arm the deadline; bytes
    arriving late end the round for every connection. The deadline is only
    checked when data arrives, it is never a scheduled timer.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.transport: Optional[IStream] = None
        self.deadline: Optional[Timestamp] = None
        self.window: Optional[Window] = None
        self.peer = None

    # asyncio callbacks

    def connection_made(self, transport) -> None:
        self.transport = transport
        self.peer = transport.get_extra_info('peername')
        logger.info("Connected to: %s", self.peer)
        # timer, first window and membership change together so a reset
        # can never slip in between them
        if start_round_timer(self.session):
            logger.info("New round armed for %ss", self.session.max_round_seconds)
        self.arm()
        self.session.add(self)

    def data_received(self, data: bytes) -> None:
        if not data:
            # treated as end-of-stream
            self.destroy()
            return
        if self.transport is None:
            return
        if self.is_ready():
            self.session.increase_score()
            self.arm()
        else:
            logger.info("Client %s missed its deadline, ending round", self.peer)
            end_round(self.session)

    def eof_received(self) -> bool:
        logger.debug("Client %s closed its side", self.peer)
        self.destroy()
        return False

    def connection_lost(self, exc: Optional[Exception]) -> None:
        if exc is not None:
            logger.debug("Lost connection to %s: %s", self.peer, exc)
        self.destroy()

    # deadline handling

    def arm(self) -> Window:
        """Pick a new window, move the deadline and tell the client about it."""
        window = self.session.windows.next()
        self.window = window
        self.deadline = self.session.clock().plus(window)
        self.write(format_status(window, self.session.score, self.session.max_score))
        return window

    def is_ready(self, now: Optional[Timestamp] = None) -> bool:
        """True when the deadline has not passed yet.

        A byte arriving in the very microsecond of the deadline is on time.
        """
        if self.deadline is None:
            return False
        current = now if now is not None else self.session.clock()
        return current <= self.deadline

    def write(self, data: bytes) -> None:
        if self.transport is None or self.transport.is_closing():
            return
        self.transport.write(data)

    def destroy(self) -> None:
        """Leave the session, then release the stream. Safe to call twice."""
        self.session.discard(self)
        transport, self.transport = self.transport, None
        if transport is not None:
            logger.info("Closing connection to %s", self.peer)
            transport.close()

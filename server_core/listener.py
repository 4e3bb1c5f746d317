from __future__ import annotations

import asyncio
import logging
import socket
import sys
from typing import Optional, TextIO

from core.contracts import ServerConfig
from server_core.connection import Connection
from server_core.session import Session

logger = logging.getLogger('slowpoke.server')
logger.addHandler(logging.NullHandler())


class Listener:
    """Protocol factory handed to the event loop, called once per accept.

    The connection joins the round in `connection_made`, not here.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def __call__(self) -> Connection:
        return Connection(self.session)


async def start(config: ServerConfig, out: Optional[TextIO] = None):
    """Bind the listening socket on the running loop.

    Returns `(server, session)`; the caller decides how long to serve.
    """
    loop = asyncio.get_running_loop()
    session = Session(
        max_window_seconds=config.max_window_seconds,
        max_round_seconds=config.max_round_seconds,
        scheduler=loop,
        out=out,
    )
    server = await loop.create_server(
        Listener(session),
        config.host,
        config.port,
        reuse_address=True,
        backlog=socket.SOMAXCONN,
    )
    addrs = ", ".join(str(s.getsockname()) for s in server.sockets)
    logger.info("Listening on %s (window < %ss, round <= %ss)", addrs, config.max_window_seconds, config.max_round_seconds)
    return server, session


async def serve(config: ServerConfig, out: Optional[TextIO] = None) -> None:
    """Bind and serve until cancelled. Bind failures raise OSError."""
    server, _ = await start(config, out=out)
    try:
        await server.serve_forever()
    finally:
        server.close()


def run(config: ServerConfig, out: Optional[TextIO] = None) -> int:
    """Run the server until interrupted. Returns the process exit status."""
    try:
        loop = asyncio.new_event_loop()
    except Exception as e:
        logger.error("failed to create event loop: %s", e)
        print(f"failed to create event loop: {e}", file=sys.stderr)
        return 1

    try:
        asyncio.set_event_loop(loop)
        task = loop.create_task(serve(config, out=out))
        try:
            loop.run_until_complete(task)
        except OSError as e:
            logger.error("failed to bind/listen on port %s: %s", config.port, e)
            print(f"failed to bind/listen on port {config.port}: {e}", file=sys.stderr)
            return 1
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
            task.cancel()
            loop.run_until_complete(asyncio.gather(task, return_exceptions=True))
        except asyncio.CancelledError:
            pass
        return 0
    finally:
        asyncio.set_event_loop(None)
        loop.close()

import logging
import sys

import settings
from core.contracts import ServerConfig
from server_core.listener import run

# Server logger: silent unless started with --verbose, the score report is
# printed to stdout regardless.
logger = logging.getLogger('slowpoke.server')
logger.addHandler(logging.NullHandler())

USAGE = "usage: server.py [--host HOST] [--port PORT] [--window SECONDS] [--round SECONDS] [--verbose]"


def parse_args(argv):
    """Build a ServerConfig from `--flag value` pairs, falling back to settings.

    Raises ValueError on unknown flags, missing values or bad numbers.
    """
    host = settings.server or None
    port = settings.port
    window = settings.MAX_WINDOW_SECONDS
    round_ = settings.MAX_ROUND_SECONDS

    i = 0
    while i < len(argv):
        a = argv[i]
        if a in ('--verbose', '-v'):
            i += 1
            continue
        if a not in ('--host', '--port', '--window', '--round'):
            raise ValueError(f"unknown option {a!r}")
        if i + 1 >= len(argv):
            raise ValueError(f"option {a} needs a value")
        value = argv[i + 1]
        if a == '--host':
            host = value or None
        else:
            try:
                number = int(value)
            except ValueError:
                raise ValueError(f"option {a} expects an integer, got {value!r}") from None
            if a == '--port':
                port = number
            elif a == '--window':
                window = number
            else:
                round_ = number
        i += 2

    return ServerConfig(port=port, max_window_seconds=window, max_round_seconds=round_, host=host).validate()


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if '--verbose' in argv or '-v' in argv:
        logging.basicConfig(level=logging.DEBUG, format='[%(asctime)s] %(name)s %(levelname)s %(message)s')
    try:
        config = parse_args(argv)
    except ValueError as e:
        logger.error("bad arguments: %s", e)
        print(f"{e}\n{USAGE}", file=sys.stderr)
        return 1
    return run(config)


if __name__ == '__main__':
    sys.exit(main())

import logging
import sys
import time

import pygame

import settings
from settings import WINDOW_WIDTH, WINDOW_HEIGHT, FPS
from core.contracts import GameState
from controllers.input import InputHandler
from net.sync import apply_status, bot_delay, parse_status
from network import Network
from renderers.hud import HUDRenderer
from services.bot import play_headless

logger = logging.getLogger('slowpoke.client')
logger.addHandler(logging.NullHandler())

USAGE = "usage: client.py [--host HOST] [--port PORT] [--bot] [--headless] [--fraction F] [--verbose]"


class Game:
    def __init__(self, host, port, bot=False, fraction=settings.BOT_FRACTION):
        pygame.init()
        try:
            pygame.font.init()
        except Exception:
            pass
        try:
            self.font = pygame.font.SysFont('couriernew', 18)
            self.large_font = pygame.font.SysFont('couriernew', 30)
        except Exception:
            self.font = pygame.font.SysFont(None, 20)
            self.large_font = pygame.font.SysFont(None, 32)
        self.display_surface = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption("slowpoke")
        self.clock = pygame.time.Clock()

        self.host = host
        self.port = port
        self.bot = bot
        self.fraction = fraction
        self.state = GameState()
        self.network = Network(host, port)
        self.input = InputHandler(self)
        self.hud = HUDRenderer(self)
        self.running = True
        # monotonic time the bot answers the current window
        self._bot_answer_at = None

    def answer(self):
        if self.state.answered:
            return
        if self.network.send(b'.'):
            self.state.answered = True
            self._bot_answer_at = None

    def reconnect(self):
        self.network.close()
        self.network = Network(self.host, self.port)
        self.state.round_over = False
        self.state.window = None
        self.state.deadline = None
        self._bot_answer_at = None

    def poll_network(self):
        for line in self.network.get_lines():
            status = parse_status(line)
            if status is None:
                logger.debug("Ignoring malformed line %r", line)
                continue
            received_at = time.monotonic()
            apply_status(self.state, status, received_at)
            if self.bot:
                self._bot_answer_at = received_at + bot_delay(status, self.fraction)
        if self.network.closed and not self.state.round_over:
            self.state.round_over = True
            self.state.rounds += 1

    def run(self):
        while self.running:
            self.clock.tick(FPS)
            for event in pygame.event.get():
                self.input.handle_event(event)
            self.poll_network()
            if self.bot and self._bot_answer_at is not None and time.monotonic() >= self._bot_answer_at:
                self.answer()
            self.hud.draw()
            pygame.display.update()
        self.network.close()
        pygame.quit()


def parse_args(argv):
    opts = {
        'host': settings.server or '127.0.0.1',
        'port': settings.port,
        'bot': False,
        'headless': False,
        'fraction': settings.BOT_FRACTION,
    }
    i = 0
    while i < len(argv):
        a = argv[i]
        if a == '--bot':
            opts['bot'] = True
        elif a == '--headless':
            opts['headless'] = True
            opts['bot'] = True
        elif a in ('--verbose', '-v'):
            pass
        elif a in ('--host', '--port', '--fraction'):
            if i + 1 >= len(argv):
                raise ValueError(f"option {a} needs a value")
            value = argv[i + 1]
            if a == '--host':
                opts['host'] = value
            elif a == '--port':
                opts['port'] = int(value)
            else:
                opts['fraction'] = float(value)
            i += 1
        else:
            raise ValueError(f"unknown option {a!r}")
        i += 1
    if not 0 <= opts['fraction'] < 1:
        raise ValueError(f"fraction must be in [0, 1), got {opts['fraction']}")
    return opts


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if '--verbose' in argv or '-v' in argv:
        logging.basicConfig(level=logging.DEBUG, format='[%(asctime)s] %(name)s %(levelname)s %(message)s')
    try:
        opts = parse_args(argv)
    except ValueError as e:
        print(f"{e}\n{USAGE}", file=sys.stderr)
        return 1
    try:
        if opts['headless']:
            network = Network(opts['host'], opts['port'])
            try:
                state = play_headless(network, opts['fraction'])
            finally:
                network.close()
            print(f"{state.score} / {state.max_score}")
        else:
            Game(opts['host'], opts['port'], bot=opts['bot'], fraction=opts['fraction']).run()
    except OSError as e:
        print(f"failed to connect to {opts['host']}:{opts['port']}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())

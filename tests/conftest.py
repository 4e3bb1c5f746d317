import io
import os
import random
import sys

import pytest

# Ensure the project root (containing the packages) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from core.contracts import Timestamp, Window
from server_core.session import Session


class FakeTransport:
    def __init__(self, peer=('127.0.0.1', 40000)):
        self.written = []
        self.closed = False
        self.peer = peer

    def write(self, data):
        assert not self.closed, "write after close"
        self.written.append(data)

    def close(self):
        self.closed = True

    def is_closing(self):
        return self.closed

    def get_extra_info(self, name, default=None):
        return self.peer if name == 'peername' else default

    def lines(self):
        return b''.join(self.written).decode('ascii').splitlines()


class FakeHandle:
    def __init__(self, delay, callback, args):
        self.delay = delay
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Records call_later requests; tests fire them by hand."""

    def __init__(self):
        self.handles = []

    def call_later(self, delay, callback, *args):
        handle = FakeHandle(delay, callback, args)
        self.handles.append(handle)
        return handle

    def pending(self):
        return [h for h in self.handles if not h.cancelled]

    def fire(self, handle):
        handle.callback(*handle.args)


class FakeClock:
    def __init__(self, sec=1_000, usec=0):
        self.current = Timestamp(sec, usec)

    def __call__(self):
        return self.current

    def set(self, sec, usec):
        self.current = Timestamp(sec, usec)


class FixedWindows:
    """Window source returning a scripted sequence, repeating the last one."""

    def __init__(self, *windows):
        self.windows = list(windows) or [Window(1, 0)]
        self.calls = 0

    def next(self):
        w = self.windows[min(self.calls, len(self.windows) - 1)]
        self.calls += 1
        return w


@pytest.fixture()
def scheduler():
    return FakeScheduler()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def report():
    return io.StringIO()


@pytest.fixture()
def session(scheduler, clock, report):
    return Session(
        max_window_seconds=3,
        max_round_seconds=60,
        scheduler=scheduler,
        out=report,
        clock=clock,
        windows=FixedWindows(Window(1, 500_000)),
    )


@pytest.fixture()
def rng():
    return random.Random(1234)

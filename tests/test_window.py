import random

import pytest

from core.contracts import Timestamp, Window
from server_core.window import WindowGenerator


def test_windows_stay_below_bound(rng):
    gen = WindowGenerator(3, rng=rng)
    for _ in range(2000):
        w = gen.next()
        assert 0 <= w.seconds < 3
        assert 0 <= w.microseconds < 1_000_000
        assert 0 <= w.total_seconds < 3


def test_single_second_bound_only_yields_fractions(rng):
    gen = WindowGenerator(1, rng=rng)
    assert all(gen.next().seconds == 0 for _ in range(200))


def test_seconds_cover_whole_range(rng):
    gen = WindowGenerator(4, rng=rng)
    seen = {gen.next().seconds for _ in range(500)}
    assert seen == {0, 1, 2, 3}


def test_shared_source_is_not_reseeded():
    a = WindowGenerator(5, rng=random.Random(7))
    first = [a.next() for _ in range(5)]
    second = [a.next() for _ in range(5)]
    assert first != second


def test_default_generators_share_one_source():
    a = WindowGenerator(10)
    b = WindowGenerator(10)
    assert a._rng is b._rng


@pytest.mark.parametrize('bound', [0, -1])
def test_non_positive_bound_rejected(bound):
    with pytest.raises(ValueError):
        WindowGenerator(bound)


def test_window_renders_zero_padded_microseconds():
    assert str(Window(2, 42)) == "2.000042"
    assert str(Window(0, 999_999)) == "0.999999"


def test_timestamp_plus_carries_microseconds():
    assert Timestamp(10, 600_000).plus(Window(1, 500_000)) == Timestamp(12, 100_000)
    assert Timestamp(10, 0).plus(Window(0, 999_999)) == Timestamp(10, 999_999)


def test_timestamp_orders_seconds_before_microseconds():
    assert Timestamp(11, 0) > Timestamp(10, 999_999)
    assert Timestamp(10, 5) > Timestamp(10, 4)
    assert Timestamp(10, 5) == Timestamp(10, 5)

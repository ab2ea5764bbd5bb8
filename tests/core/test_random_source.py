"""Random Sources — range contract, determinism, fixed and sequence doubles."""

import random
import threading

import pytest

from skillcheck.core.errors import CalculationInvariantError
from skillcheck.core.random_source import (
    FixedRandomSource, SequenceRandomSource, SystemRandomSource,
)


def test_system_source_stays_in_range():
    source = SystemRandomSource(seed=7)
    rolls = [source.next(1, 100) for _ in range(2000)]
    assert min(rolls) >= 1
    assert max(rolls) <= 100


def test_system_source_covers_degenerate_range():
    assert SystemRandomSource().next(5, 5) == 5


def test_same_seed_same_stream():
    a = SystemRandomSource(seed=42)
    b = SystemRandomSource(seed=42)
    assert [a.next(1, 100) for _ in range(20)] == [b.next(1, 100) for _ in range(20)]


def test_system_source_does_not_touch_global_generator():
    random.seed(123)
    expected = random.random()
    random.seed(123)
    SystemRandomSource(seed=1).next(1, 100)
    assert random.random() == expected


@pytest.mark.parametrize("bounds", [(0, 100), (10, 5), (-3, 4)])
def test_invalid_range_is_value_error(bounds):
    with pytest.raises(ValueError):
        SystemRandomSource().next(*bounds)
    with pytest.raises(ValueError):
        FixedRandomSource(1).next(*bounds)


def test_fixed_source_repeats():
    source = FixedRandomSource(45)
    assert [source.next(1, 100) for _ in range(3)] == [45, 45, 45]


def test_sequence_source_in_order_then_exhausts():
    source = SequenceRandomSource([3, 99])
    assert source.remaining == 2
    assert source.next(1, 100) == 3
    assert source.next(1, 100) == 99
    assert source.remaining == 0
    with pytest.raises(CalculationInvariantError):
        source.next(1, 100)


def test_sequence_source_hands_each_value_out_once_across_threads():
    source = SequenceRandomSource(range(1, 101))
    drawn = []

    def draw():
        for _ in range(25):
            drawn.append(source.next(1, 100))

    threads = [threading.Thread(target=draw) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sorted(drawn) == list(range(1, 101))
    assert source.remaining == 0


def test_system_source_shared_across_threads():
    source = SystemRandomSource(seed=3)
    drawn = []

    def draw():
        for _ in range(200):
            drawn.append(source.next(1, 100))

    threads = [threading.Thread(target=draw) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(drawn) == 1600
    assert all(1 <= roll <= 100 for roll in drawn)

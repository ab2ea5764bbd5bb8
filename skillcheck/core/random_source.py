"""Random Sources — injectable uniform integer generators for dice rolls.

Invariants:
    - next(min, max) is uniform over the inclusive range [min, max]
    - Valid ranges satisfy 1 <= min <= max; anything else is a programming error (ValueError)
    - No implementation touches the module-level `random` generator
    - Implementations must be safe for concurrent use: one source is shared by
      every invocation of an orchestrator

Design Decisions:
    - RandomSource is a Protocol: fixed and sequence sources substitute for
      tests without subclassing
    - SystemRandomSource owns a private random.Random so a seed gives a
      reproducible stream per instance
"""

import random
import threading
from collections.abc import Iterable
from typing import Protocol

from skillcheck.core.errors import CalculationInvariantError


class RandomSource(Protocol):
    """Contract for roll generators. Must be safe to call from concurrent invocations."""
    def next(self, min_value: int, max_value: int) -> int: ...


def check_range(min_value: int, max_value: int) -> None:
    if not 1 <= min_value <= max_value:
        raise ValueError(
            f"invalid roll range [{min_value}, {max_value}]: need 1 <= min <= max",
        )


class SystemRandomSource:
    """Pseudo-random rolls from a private generator. Safe to share across threads."""

    def __init__(self, seed: int | None = None):
        self._lock = threading.Lock()
        self._rng = random.Random(seed)

    def next(self, min_value: int, max_value: int) -> int:
        check_range(min_value, max_value)
        with self._lock:
            return self._rng.randint(min_value, max_value)


class FixedRandomSource:
    """Always rolls the same value."""

    def __init__(self, value: int):
        self._value = value

    def next(self, min_value: int, max_value: int) -> int:
        check_range(min_value, max_value)
        return self._value


class SequenceRandomSource:
    """Rolls a predefined sequence in order; running past the end is an error.

    Concurrent callers each receive a distinct element; which caller gets which
    follows call order.
    """

    def __init__(self, values: Iterable[int]):
        self._lock = threading.Lock()
        self._values = tuple(values)
        self._position = 0

    @property
    def remaining(self) -> int:
        with self._lock:
            return len(self._values) - self._position

    def next(self, min_value: int, max_value: int) -> int:
        check_range(min_value, max_value)
        with self._lock:
            if self._position >= len(self._values):
                raise CalculationInvariantError(
                    f"SequenceRandomSource exhausted after {len(self._values)} rolls",
                )
            value = self._values[self._position]
            self._position += 1
            return value

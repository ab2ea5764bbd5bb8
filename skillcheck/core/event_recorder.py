"""Event Recorder — append-only, per-invocation ordered log of domain events.

Invariants:
    - record() stamps invocation_id, a 0-based monotonically increasing sequence,
      and occurred_at from the injected clock, then appends
    - Never reorders, deduplicates or removes, except reset(), which starts a
      new invocation from sequence 0
    - snapshot()/drain() return tuples: callers cannot mutate the buffer through them
    - Events already stamped by a recorder are rejected (ValueError)

Design Decisions:
    - One recorder per orchestrated invocation: no locks, no shared state
    - Clock and id factory injectable so traces are reproducible in tests
"""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import TypeVar
from uuid import UUID, uuid4

from skillcheck.core.domain_types import InvocationId
from skillcheck.core.events import EventEnvelope

E = TypeVar("E", bound=EventEnvelope)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EventRecorder:
    """In-memory event buffer for one skill-test invocation."""

    def __init__(
        self,
        invocation_id: InvocationId | None = None,
        clock: Clock = utc_now,
        id_factory: Callable[[], UUID] = uuid4,
    ):
        self._id_factory = id_factory
        self._invocation_id = invocation_id or InvocationId(id_factory())
        self._clock = clock
        self._events: list[EventEnvelope] = []

    @property
    def invocation_id(self) -> InvocationId:
        return self._invocation_id

    def record(self, event: E) -> E:
        """Stamp and append. Returns the stamped copy (the input is left untouched)."""
        if event.is_recorded:
            raise ValueError(
                f"{type(event).__name__} already recorded at sequence {event.sequence}",
            )
        stamped = event.model_copy(update={
            "invocation_id": self._invocation_id,
            "sequence": len(self._events),
            "occurred_at": self._clock(),
        })
        self._events.append(stamped)
        return stamped

    def snapshot(self) -> tuple[EventEnvelope, ...]:
        return tuple(self._events)

    def drain(self) -> tuple[EventEnvelope, ...]:
        """End-of-invocation read. Same as snapshot(): the buffer is kept until reset()."""
        return self.snapshot()

    def reset(self, invocation_id: InvocationId | None = None) -> None:
        """Clear the buffer and start a new invocation."""
        self._events = []
        self._invocation_id = invocation_id or InvocationId(self._id_factory())

    def __len__(self) -> int:
        return len(self._events)

"""Event Sink Adapters — where recorded domain events go after the recorder.

Invariants:
    - log_event() accepts one event at a time and returns nothing
    - Well-formed events never make a sink raise
    - InMemoryEventSink guards its buffer with a lock: shareable across invocations

Design Decisions:
    - LoggingEventSink writes the full event dump as a structured `event` extra,
      so the JSONFormatter output can be replayed through parse_event()
"""

import logging
import threading

from skillcheck.core.events import EventEnvelope


class LoggingEventSink:
    """Writes every event to a logger at INFO."""

    def __init__(self, logger_name: str = "skillcheck.events"):
        self._logger = logging.getLogger(logger_name)

    def log_event(self, event: EventEnvelope) -> None:
        self._logger.info(
            "%s #%s", getattr(event, "kind", type(event).__name__), event.sequence,
            extra={
                "invocation_id": str(event.invocation_id),
                "event_kind": getattr(event, "kind", None),
                "sequence": event.sequence,
                "event": event.model_dump(mode="json"),
            },
        )


class InMemoryEventSink:
    """Collects events in arrival order. Useful for tests and short-lived hosts."""

    def __init__(self):
        self._events: list[EventEnvelope] = []
        self._lock = threading.Lock()

    def log_event(self, event: EventEnvelope) -> None:
        with self._lock:
            self._events.append(event)

    def events(self) -> tuple[EventEnvelope, ...]:
        with self._lock:
            return tuple(self._events)

    def for_invocation(self, invocation_id) -> tuple[EventEnvelope, ...]:
        """Events of one execute() call, in sequence order."""
        with self._lock:
            matching = [e for e in self._events if e.invocation_id == invocation_id]
        return tuple(sorted(matching, key=lambda e: e.sequence))

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

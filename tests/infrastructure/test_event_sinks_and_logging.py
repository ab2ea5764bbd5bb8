"""Event sinks, character store and JSON logging."""

import json
import logging
import threading
from uuid import uuid4

from skillcheck.core.event_recorder import EventRecorder
from skillcheck.core.events import SkillRolled, parse_event
from skillcheck.infrastructure.character_store import InMemoryCharacterStore
from skillcheck.infrastructure.event_sinks import InMemoryEventSink, LoggingEventSink
from skillcheck.infrastructure.observability import JSONFormatter, setup_logging


def _stamped(recorder: EventRecorder, value: int = 50) -> SkillRolled:
    return recorder.record(
        SkillRolled(skill_id="climb", base_roll=value, modifier_total=0, roll_value=value),
    )


# ─── InMemoryEventSink ───────────────────────────────────────────

def test_in_memory_sink_keeps_arrival_order():
    sink = InMemoryEventSink()
    recorder = EventRecorder()
    events = [_stamped(recorder, v) for v in (10, 20, 30)]
    for e in events:
        sink.log_event(e)
    assert sink.events() == tuple(events)
    sink.clear()
    assert sink.events() == ()


def test_in_memory_sink_concurrent_writers():
    sink = InMemoryEventSink()

    def write():
        recorder = EventRecorder()
        for _ in range(50):
            sink.log_event(_stamped(recorder))

    threads = [threading.Thread(target=write) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(sink.events()) == 400


def test_for_invocation_filters_and_orders():
    sink = InMemoryEventSink()
    a, b = EventRecorder(invocation_id=uuid4()), EventRecorder(invocation_id=uuid4())
    a0, b0, a1 = _stamped(a), _stamped(b), _stamped(a)
    for e in (a1, b0, a0):
        sink.log_event(e)
    assert sink.for_invocation(a.invocation_id) == (a0, a1)


# ─── LoggingEventSink ────────────────────────────────────────────

def test_logging_sink_emits_replayable_event(caplog):
    caplog.set_level(logging.INFO, logger="skillcheck.events")
    event = _stamped(EventRecorder())
    LoggingEventSink().log_event(event)
    record = caplog.records[-1]
    assert record.name == "skillcheck.events"
    assert record.event_kind == "skill_rolled"
    assert record.sequence == 0
    assert parse_event(record.event) == event


# ─── InMemoryCharacterStore ──────────────────────────────────────

def test_character_store_returns_copies():
    store = InMemoryCharacterStore({"char-1": {"Strength": 14}})
    attrs = store.get_attributes("char-1")
    attrs["Strength"] = 1
    assert store.get_attributes("char-1") == {"Strength": 14}
    assert store.get_attributes("nobody") == {}


def test_character_store_set_attribute():
    store = InMemoryCharacterStore()
    store.set_attribute("char-1", "Agility", 12)
    assert store.get_attributes("char-1") == {"Agility": 12}


# ─── Observability ───────────────────────────────────────────────

def test_json_formatter_includes_known_extras():
    record = logging.LogRecord(
        "skillcheck.test", logging.WARNING, __file__, 1, "Skill test failed: %s", ("x",), None,
    )
    record.error_code = "SKILL_NOT_FOUND"
    record.stage = "initialized"
    record.unrelated = "hidden"
    payload = json.loads(JSONFormatter().format(record))
    assert payload["message"] == "Skill test failed: x"
    assert payload["level"] == "WARNING"
    assert payload["error_code"] == "SKILL_NOT_FOUND"
    assert payload["stage"] == "initialized"
    assert "unrelated" not in payload


def test_setup_logging_does_not_stack_handlers():
    before = list(logging.root.handlers)
    level = logging.root.level
    try:
        setup_logging("DEBUG", "json")
        setup_logging("WARNING", "text")
        ours = [h for h in logging.root.handlers if h.get_name() == "skillcheck"]
        assert len(ours) == 1
        assert not isinstance(ours[0].formatter, JSONFormatter)
        assert logging.root.level == logging.WARNING
    finally:
        for h in list(logging.root.handlers):
            if h not in before:
                logging.root.removeHandler(h)
        logging.root.setLevel(level)

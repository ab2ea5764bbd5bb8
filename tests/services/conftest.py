"""Service test fixtures — in-memory ports and a deterministic orchestrator factory.

Invariants:
    - Every test gets a fresh catalog, sink and id counter
    - make_orchestrator() defaults to a fixed roll of 45 and a ticking UTC clock
"""

from datetime import datetime, timedelta, timezone
from itertools import count
from uuid import UUID

import pytest

from skillcheck.core.models import Skill
from skillcheck.core.random_source import FixedRandomSource
from skillcheck.infrastructure.event_sinks import InMemoryEventSink
from skillcheck.infrastructure.skill_catalog import InMemorySkillCatalog
from skillcheck.services.skill_test_orchestrator import SkillTestOrchestrator


@pytest.fixture
def skills():
    return [
        Skill(id="climb", name="Climb", base_difficulty=40, attribute_key="Strength"),
        Skill(id="sneak", name="Sneak", base_difficulty=55, attribute_key="Agility"),
    ]


@pytest.fixture
def catalog(skills):
    return InMemorySkillCatalog(skills)


@pytest.fixture
def sink():
    return InMemoryEventSink()


@pytest.fixture
def make_orchestrator(catalog, sink):
    ids = count(1)
    ticks = count()
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def factory(roll: int = 45, **overrides) -> SkillTestOrchestrator:
        kwargs = {
            "skill_lookup": catalog,
            "event_sink": sink,
            "random_source": FixedRandomSource(roll),
            "clock": lambda: start + timedelta(milliseconds=next(ticks)),
            "id_factory": lambda: UUID(int=next(ids)),
        }
        kwargs.update(overrides)
        return SkillTestOrchestrator(
            kwargs.pop("skill_lookup"),
            kwargs.pop("event_sink"),
            kwargs.pop("random_source"),
            **kwargs,
        )

    return factory

"""Boundary Protocols — contracts between core and the caller's infrastructure.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by the caller via constructor injection
    - Implementations (and the injected RandomSource) must be safe for concurrent
      use by simultaneous invocations

Design Decisions:
    - Protocol over ABC: structural subtyping, adapters never subclass engine internals
    - Synchronous: the engine has no suspension points; async callers wrap the
      whole execute() call
"""

from collections.abc import Mapping, Sequence
from typing import Protocol

from skillcheck.core.domain_types import CharacterId, SkillId
from skillcheck.core.events import EventEnvelope
from skillcheck.core.models import Skill


class SkillLookup(Protocol):
    """Skill catalog access. get_by_id returns None (or raises SkillNotFoundError) on miss."""
    def get_by_id(self, skill_id: SkillId) -> Skill | None: ...
    def get_all(self) -> Sequence[Skill]: ...


class EventSink(Protocol):
    """Receives each recorded event, one at a time, in recording order."""
    def log_event(self, event: EventEnvelope) -> None: ...


class CharacterAttributes(Protocol):
    """Optional: named attribute scores per character, for attribute-derived modifiers."""
    def get_attributes(self, character_id: CharacterId) -> Mapping[str, int]: ...

"""Domain Events — immutable records of each completed calculation step.

Invariants:
    - DomainEvent is a closed tagged union: SkillLoaded | SkillRolled | SuccessMarginCalculated
    - `kind` is the discriminator; every variant carries only its own payload
    - invocation_id / sequence / occurred_at are stamped by EventRecorder.record(),
      never by the code that builds the payload
    - Events are frozen; stamping produces a new instance

Design Decisions:
    - Pydantic discriminated union over an open class hierarchy: exhaustively
      matchable and round-trips through JSON via parse_event()
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from skillcheck.core.domain_types import EventKind, InvocationId


class EventEnvelope(BaseModel):
    """Fields shared by every event variant."""
    model_config = ConfigDict(frozen=True)

    invocation_id: InvocationId | None = None
    sequence: int | None = Field(None, ge=0)
    occurred_at: datetime | None = None

    @property
    def is_recorded(self) -> bool:
        return self.sequence is not None


class SkillLoaded(EventEnvelope):
    kind: Literal["skill_loaded"] = EventKind.SKILL_LOADED.value
    skill_id: str
    skill_name: str


class SkillRolled(EventEnvelope):
    kind: Literal["skill_rolled"] = EventKind.SKILL_ROLLED.value
    skill_id: str
    base_roll: int
    modifier_total: int
    roll_value: int


class SuccessMarginCalculated(EventEnvelope):
    kind: Literal["success_margin_calculated"] = EventKind.SUCCESS_MARGIN_CALCULATED.value
    skill_id: str
    difficulty: int
    margin: int
    is_success: bool


DomainEvent = Annotated[
    Union[SkillLoaded, SkillRolled, SuccessMarginCalculated],
    Field(discriminator="kind"),
]

_domain_event_adapter: TypeAdapter = TypeAdapter(DomainEvent)


def parse_event(data: dict) -> SkillLoaded | SkillRolled | SuccessMarginCalculated:
    """Rebuild a concrete event from its dumped dict (e.g. read back from a log sink)."""
    return _domain_event_adapter.validate_python(data)

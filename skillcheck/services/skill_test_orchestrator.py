"""Skill Test Orchestrator — the use case that sequences one skill test end to end.

Invariants:
    - Stages run INITIALIZED -> SKILL_RESOLVED -> ROLLED -> MARGIN_CALCULATED -> COMPLETED;
      any error moves to FAILED and no partial result is returned
    - Request validated before any port is touched (InvalidRequestError, zero events)
    - Every calculation step is followed by exactly one recorded event, forwarded
      to the event sink before the next stage begins
    - Each execute() call builds its own EventRecorder; invocations share nothing
    - Foreign exceptions from ports are normalized to PortFailureError; engine
      errors propagate unchanged. Nothing is retried or suppressed.

Design Decisions:
    - Dependencies injected through the constructor only (ports + RandomSource)
    - SkillLoaded emission is opt-in so the default trace is exactly
      [SkillRolled, SuccessMarginCalculated]
    - Attribute-derived modifier folded into the ModifierSet under
      "attribute:<key>" so it shows up in RollResult like any other modifier
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from uuid import UUID, uuid4

from pydantic import ValidationError

from skillcheck.core.aggregate_modifiers import (
    AttributeModifierTable, derive_attribute_modifier,
)
from skillcheck.core.domain_types import (
    ATTRIBUTE_MODIFIER_PREFIX, CharacterId, InvocationId, PipelineStage, SkillId,
)
from skillcheck.core.errors import (
    ErrorContext, ErrorSeverity, InvalidRequestError, PortFailureError,
    SkillCheckError, SkillNotFoundError,
)
from skillcheck.core.event_recorder import Clock, EventRecorder, utc_now
from skillcheck.core.events import (
    EventEnvelope, SkillLoaded, SkillRolled, SuccessMarginCalculated,
)
from skillcheck.core.margin_service import MarginService, is_success
from skillcheck.core.models import (
    ModifierSet, RollResult, Skill, SkillTestRequest, SkillTestResult,
)
from skillcheck.core.port_protocols import CharacterAttributes, EventSink, SkillLookup
from skillcheck.core.random_source import RandomSource
from skillcheck.core.roll_service import RollService

logger = logging.getLogger(__name__)


class SkillTestOrchestrator:
    """Runs skill tests against injected ports and a RandomSource.

    Safe to share across threads when the ports and the RandomSource are; every
    bundled adapter and random source is.
    """

    def __init__(
        self,
        skill_lookup: SkillLookup,
        event_sink: EventSink,
        random_source: RandomSource,
        *,
        character_attributes: CharacterAttributes | None = None,
        attribute_table: AttributeModifierTable | None = None,
        emit_skill_loaded: bool = False,
        clock: Clock = utc_now,
        id_factory: Callable[[], UUID] = uuid4,
    ):
        self._skill_lookup = skill_lookup
        self._event_sink = event_sink
        self._roll_service = RollService(random_source)
        self._margin_service = MarginService()
        self._character_attributes = character_attributes
        self._attribute_table = attribute_table
        self._emit_skill_loaded = emit_skill_loaded
        self._clock = clock
        self._id_factory = id_factory

    # ─── Exposed port ──────────────────────────────────────────────

    def execute_skill_test(
        self,
        character_id: CharacterId,
        skill_id: SkillId,
        modifiers: Mapping[str, int] | ModifierSet | None = None,
    ) -> SkillTestResult:
        """Build and validate a request from plain values, then execute it."""
        return self.execute({
            "character_id": character_id,
            "skill_id": skill_id,
            "modifiers": modifiers,
        })

    def list_skills(self) -> Sequence[Skill]:
        try:
            return tuple(self._skill_lookup.get_all())
        except SkillCheckError:
            raise
        except Exception as e:
            raise PortFailureError(str(e), "skill_lookup") from e

    # ─── Pipeline ──────────────────────────────────────────────────

    def execute(self, request: SkillTestRequest | Mapping) -> SkillTestResult:
        """Run one skill test. Returns the full result or raises a SkillCheckError."""
        request = _validate_request(request)
        recorder = EventRecorder(
            invocation_id=InvocationId(self._id_factory()), clock=self._clock,
        )
        run = _Invocation(request, recorder)
        try:
            result = self._run_pipeline(run)
        except SkillCheckError as e:
            _annotate(e, run)
            run.stage = PipelineStage.FAILED
            _log_failure(e, run)
            raise
        logger.info(
            "Skill test completed: %s margin=%+d", request.skill_id, result.margin,
            extra=run.log_extra(),
        )
        return result

    def _run_pipeline(self, run: "_Invocation") -> SkillTestResult:
        request = run.request

        skill = self._resolve_skill(run)
        run.advance(PipelineStage.SKILL_RESOLVED)
        if self._emit_skill_loaded:
            self._emit(run, SkillLoaded(skill_id=skill.id, skill_name=skill.name))

        modifiers = self._with_attribute_modifier(run, skill)
        roll = self._roll(run, skill, modifiers)
        self._emit(run, SkillRolled(
            skill_id=skill.id,
            base_roll=roll.base_roll,
            modifier_total=roll.modifier_total,
            roll_value=roll.value,
        ))
        run.advance(PipelineStage.ROLLED)

        margin = self._margin_service.calculate(roll, skill.base_difficulty)
        success = is_success(margin)
        self._emit(run, SuccessMarginCalculated(
            skill_id=skill.id,
            difficulty=skill.base_difficulty,
            margin=margin,
            is_success=success,
        ))
        run.advance(PipelineStage.MARGIN_CALCULATED)

        result = SkillTestResult(
            invocation_id=run.recorder.invocation_id,
            character_id=request.character_id,
            skill=skill,
            roll=roll,
            margin=margin,
            is_success=success,
            events=run.recorder.snapshot(),
        )
        run.advance(PipelineStage.COMPLETED)
        return result

    def _resolve_skill(self, run: "_Invocation") -> Skill:
        skill_id = run.request.skill_id
        try:
            skill = self._skill_lookup.get_by_id(SkillId(skill_id))
        except SkillCheckError:
            raise
        except Exception as e:
            raise PortFailureError(str(e), "skill_lookup") from e
        if skill is None:
            raise SkillNotFoundError(skill_id)
        if not isinstance(skill, Skill):
            raise PortFailureError(
                f"expected Skill, got {type(skill).__name__}", "skill_lookup",
            )
        return skill

    def _with_attribute_modifier(self, run: "_Invocation", skill: Skill) -> ModifierSet:
        modifiers = run.request.modifiers
        if self._character_attributes is None or self._attribute_table is None:
            return modifiers
        name = f"{ATTRIBUTE_MODIFIER_PREFIX}{skill.attribute_key}"
        if not skill.attribute_key or name in modifiers:
            return modifiers
        try:
            attributes = self._character_attributes.get_attributes(
                CharacterId(run.request.character_id),
            )
        except SkillCheckError:
            raise
        except Exception as e:
            raise PortFailureError(str(e), "character_attributes") from e
        try:
            delta = derive_attribute_modifier(
                attributes, skill.attribute_key, self._attribute_table,
            )
        except SkillCheckError:
            raise
        except Exception as e:
            raise PortFailureError(str(e), "attribute_table") from e
        if delta == 0:
            return modifiers
        logger.debug(
            "Attribute modifier %s=%+d", name, delta, extra=run.log_extra(),
        )
        return modifiers.with_modifier(name, delta)

    def _roll(self, run: "_Invocation", skill: Skill, modifiers: ModifierSet) -> RollResult:
        try:
            return self._roll_service.roll(skill, modifiers)
        except SkillCheckError:
            raise
        except Exception as e:
            raise PortFailureError(str(e), "random_source") from e

    def _emit(self, run: "_Invocation", event: EventEnvelope) -> None:
        """Record, then forward to the sink before the caller moves to the next stage."""
        stamped = run.recorder.record(event)
        try:
            self._event_sink.log_event(stamped)
        except SkillCheckError:
            raise
        except Exception as e:
            raise PortFailureError(str(e), "event_sink") from e
        logger.debug(
            "Recorded %s #%d", stamped.kind, stamped.sequence,
            extra=run.log_extra(event_kind=stamped.kind, sequence=stamped.sequence),
        )


# ─── Helpers ────────────────────────────────────────────────────

class _Invocation:
    """Mutable bookkeeping for one execute() call. Never leaves this module."""

    def __init__(self, request: SkillTestRequest, recorder: EventRecorder):
        self.request = request
        self.recorder = recorder
        self.stage = PipelineStage.INITIALIZED

    def advance(self, stage: PipelineStage) -> None:
        self.stage = stage

    def log_extra(self, **fields: object) -> dict:
        return {
            "invocation_id": str(self.recorder.invocation_id),
            "character_id": self.request.character_id,
            "skill_id": self.request.skill_id,
            "stage": self.stage.value,
            **fields,
        }


def _validate_request(request: SkillTestRequest | Mapping) -> SkillTestRequest:
    if isinstance(request, SkillTestRequest):
        return request
    if not isinstance(request, Mapping):
        raise InvalidRequestError(
            f"request must be a SkillTestRequest or mapping, got {type(request).__name__}",
            "request",
        )
    try:
        return SkillTestRequest.model_validate(dict(request))
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(loc) for loc in first["loc"]) or "request"
        logger.warning(
            "Rejected skill test request: %s: %s", field, first["msg"],
            extra={"error_code": "INVALID_REQUEST"},
        )
        raise InvalidRequestError(
            f"Invalid skill test request: {field}: {first['msg']}", field,
            ErrorContext(debug_info={"errors": e.errors(include_url=False)}),
        ) from e


def _annotate(error: SkillCheckError, run: _Invocation) -> None:
    """Fill correlation fields the raising code could not know."""
    ctx = error.context
    ctx.invocation_id = ctx.invocation_id or str(run.recorder.invocation_id)
    ctx.character_id = ctx.character_id or run.request.character_id
    ctx.skill_id = ctx.skill_id or run.request.skill_id
    ctx.stage = ctx.stage or run.stage.value


def _log_failure(error: SkillCheckError, run: _Invocation) -> None:
    extra = run.log_extra(error_code=error.code, stage=error.context.stage)
    if error.severity == ErrorSeverity.CRITICAL:
        logger.error("Skill test failed: %s", error.message, extra=extra)
    else:
        logger.warning("Skill test failed: %s", error.message, extra=extra)

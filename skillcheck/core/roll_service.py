"""Roll Service — d100 base roll plus aggregated modifiers.

Invariants:
    - Base roll drawn from the injected RandomSource over [D100_MIN, D100_MAX]
    - value == base_roll + aggregate_modifiers(modifiers), never clamped
    - Same base roll and modifiers -> identical RollResult
    - A base roll outside [1, 100] or a value outside int32 raises CalculationInvariantError
"""

from skillcheck.core.aggregate_modifiers import aggregate_modifiers
from skillcheck.core.domain_types import D100_MAX, D100_MIN, fits_int32
from skillcheck.core.errors import CalculationInvariantError, ErrorContext
from skillcheck.core.models import ModifierSet, RollResult, Skill
from skillcheck.core.random_source import RandomSource


class RollService:
    """Rolls a skill test. Determinism is isolated to the RandomSource."""

    def __init__(self, random_source: RandomSource):
        self._random_source = random_source

    def roll(self, skill: Skill, modifiers: ModifierSet) -> RollResult:
        base_roll = self._random_source.next(D100_MIN, D100_MAX)
        if not D100_MIN <= base_roll <= D100_MAX:
            raise CalculationInvariantError(
                f"Random source returned {base_roll}, outside [{D100_MIN}, {D100_MAX}]",
                ErrorContext(skill_id=skill.id, debug_info={"base_roll": base_roll}),
            )
        return build_roll_result(skill, base_roll, modifiers)


def build_roll_result(skill: Skill, base_roll: int, modifiers: ModifierSet) -> RollResult:
    """Pure half of roll(): combine a known base roll with modifiers."""
    modifier_total = aggregate_modifiers(modifiers)
    value = base_roll + modifier_total
    if not (fits_int32(modifier_total) and fits_int32(value)):
        raise CalculationInvariantError(
            "Roll value overflows a 32-bit integer",
            ErrorContext(
                skill_id=skill.id,
                debug_info={"base_roll": base_roll, "modifier_total": modifier_total},
            ),
        )
    return RollResult(
        base_roll=base_roll,
        modifiers=modifiers,
        modifier_total=modifier_total,
        value=value,
    )

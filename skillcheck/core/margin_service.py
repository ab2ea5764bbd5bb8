"""Margin Service — signed distance between a roll and a skill's difficulty.

Invariants:
    - margin == roll_result.value - skill_difficulty
    - success <=> margin >= 0 (ties favor success)
"""

from skillcheck.core.domain_types import fits_int32
from skillcheck.core.errors import CalculationInvariantError, ErrorContext
from skillcheck.core.models import RollResult


class MarginService:
    """Stateless; one instance can serve any number of invocations."""

    def calculate(self, roll_result: RollResult, skill_difficulty: int) -> int:
        margin = roll_result.value - skill_difficulty
        if not fits_int32(margin):
            raise CalculationInvariantError(
                "Success margin overflows a 32-bit integer",
                ErrorContext(debug_info={
                    "roll_value": roll_result.value, "difficulty": skill_difficulty,
                }),
            )
        return margin


def is_success(margin: int) -> bool:
    return margin >= 0

"""Modifier Aggregation — reduce modifiers (and attribute effects) to one signed delta.

Invariants:
    - aggregate_modifiers is total: empty set -> 0, never raises
    - Attribute effects come from a caller-supplied table; the engine ships none
    - Missing attribute key on either side (table or character) -> 0

Design Decisions:
    - Table maps attribute key -> effect callable so content owners can express
      thresholds, curves or flat bonuses without engine changes
    - linear_effect() covers the common "+1 per N points above a baseline" rule
"""

from collections.abc import Callable, Mapping

from skillcheck.core.models import ModifierSet

AttributeEffect = Callable[[int], int]
AttributeModifierTable = Mapping[str, AttributeEffect]


def aggregate_modifiers(modifiers: ModifierSet) -> int:
    """Sum of all modifier values. Pure, no IO."""
    return sum(modifiers.values())


def derive_attribute_modifier(
    attributes: Mapping[str, int],
    attribute_key: str,
    table: AttributeModifierTable,
) -> int:
    """Map a character's attribute score through the table entry for attribute_key."""
    if not attribute_key:
        return 0
    effect = table.get(attribute_key)
    score = attributes.get(attribute_key)
    if effect is None or score is None:
        return 0
    return int(effect(score))


def linear_effect(baseline: int, step: int, points_per_step: int = 1) -> AttributeEffect:
    """Build an effect giving points_per_step for every full `step` above/below baseline.

    linear_effect(10, 2) maps 14 -> +2, 10 -> 0, 7 -> -2 (floors toward -inf).
    """
    if step <= 0:
        raise ValueError("step must be positive")

    def effect(score: int) -> int:
        return ((score - baseline) // step) * points_per_step

    return effect

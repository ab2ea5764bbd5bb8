"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - SkillId, CharacterId wrap str; InvocationId wraps UUID
    - Percentile rolls live in [D100_MIN, D100_MAX]
    - Every computed value fits a signed 32-bit integer
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

SkillId = NewType("SkillId", str)
CharacterId = NewType("CharacterId", str)
InvocationId = NewType("InvocationId", UUID)


# ─── Constants ───────────────────────────────────────────────────

D100_MIN = 1
D100_MAX = 100

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

ATTRIBUTE_MODIFIER_PREFIX = "attribute:"


# ─── Enums ───────────────────────────────────────────────────────

class EventKind(str, Enum):
    """Domain event variants: the `kind` discriminator of DomainEvent."""
    SKILL_LOADED = "skill_loaded"
    SKILL_ROLLED = "skill_rolled"
    SUCCESS_MARGIN_CALCULATED = "success_margin_calculated"


class PipelineStage(str, Enum):
    """Skill-test pipeline states. COMPLETED and FAILED are terminal."""
    INITIALIZED = "initialized"
    SKILL_RESOLVED = "skill_resolved"
    ROLLED = "rolled"
    MARGIN_CALCULATED = "margin_calculated"
    COMPLETED = "completed"
    FAILED = "failed"


def fits_int32(value: int) -> bool:
    """True when value is representable as a signed 32-bit integer."""
    return INT32_MIN <= value <= INT32_MAX

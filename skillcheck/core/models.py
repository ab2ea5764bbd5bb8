"""Domain Models — frozen Pydantic models for every value the engine passes around.

Invariants:
    - Every model is frozen: operations produce new instances, never mutate
    - ModifierSet names are non-empty and unique; values are strict ints (no bool/float/str)
    - ModifierSet entries are stored name-sorted, so equal sets compare equal
    - RollResult.value == base_roll + modifier_total == base_roll + sum(modifiers)
    - SkillTestResult holds tuples only; no handle into recorder or request state

Design Decisions:
    - ModifierSet stores a tuple of pairs rather than a dict: a frozen model over a
      dict would still hand out a mutable handle
    - Mappings accepted at construction (ModifierSet.of, SkillTestRequest.modifiers)
      so callers can pass plain dicts
"""

from collections.abc import Iterator, Mapping
from typing import Annotated

from pydantic import (
    BaseModel, ConfigDict, Field, StrictInt, StringConstraints,
    field_validator, model_validator,
)

from skillcheck.core.domain_types import CharacterId, D100_MAX, D100_MIN, InvocationId
from skillcheck.core.events import DomainEvent

ModifierName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Identifier = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class Skill(BaseModel):
    """A named game ability with a base difficulty threshold."""
    model_config = ConfigDict(frozen=True)

    id: Identifier
    name: str
    base_difficulty: StrictInt
    attribute_key: str = ""
    description: str = ""


class ModifierSet(BaseModel):
    """Immutable name -> signed int mapping. Only the sum matters downstream."""
    model_config = ConfigDict(frozen=True)

    entries: tuple[tuple[ModifierName, StrictInt], ...] = ()

    @field_validator("entries")
    @classmethod
    def sort_and_reject_duplicates(cls, v):
        names = [name for name, _ in v]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate modifier names: {', '.join(duplicates)}")
        return tuple(sorted(v))

    @classmethod
    def of(cls, modifiers: "Mapping[str, int] | ModifierSet | None" = None) -> "ModifierSet":
        """Build from a plain mapping (or pass an existing set through)."""
        if modifiers is None:
            return cls()
        if isinstance(modifiers, ModifierSet):
            return modifiers
        if not isinstance(modifiers, Mapping):
            raise TypeError(
                f"modifiers must be a mapping, got {type(modifiers).__name__}",
            )
        return cls(entries=tuple(modifiers.items()))

    def with_modifier(self, name: str, value: int) -> "ModifierSet":
        """Return a new set with one extra entry. Existing names are rejected."""
        return ModifierSet(entries=self.entries + ((name, value),))

    def names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.entries)

    def values(self) -> tuple[int, ...]:
        return tuple(value for _, value in self.entries)

    def items(self) -> Iterator[tuple[str, int]]:
        return iter(self.entries)

    def as_dict(self) -> dict[str, int]:
        """Fresh dict copy; mutating it never affects this set."""
        return dict(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: object) -> bool:
        return any(n == name for n, _ in self.entries)

    def __getitem__(self, name: str) -> int:
        for n, value in self.entries:
            if n == name:
                return value
        raise KeyError(name)


class RollResult(BaseModel):
    """Base percentile roll plus applied modifiers. Value is never clamped."""
    model_config = ConfigDict(frozen=True)

    base_roll: int = Field(ge=D100_MIN, le=D100_MAX)
    modifiers: ModifierSet = Field(default_factory=ModifierSet)
    modifier_total: int
    value: int

    @model_validator(mode="after")
    def check_value_is_determined(self) -> "RollResult":
        if self.modifier_total != sum(self.modifiers.values()):
            raise ValueError("modifier_total does not match the modifier set")
        if self.value != self.base_roll + self.modifier_total:
            raise ValueError("value must equal base_roll + modifier_total")
        return self


class SkillTestRequest(BaseModel):
    """Caller-supplied request, validated before any port is invoked."""
    model_config = ConfigDict(frozen=True)

    character_id: Identifier
    skill_id: Identifier
    modifiers: ModifierSet = Field(default_factory=ModifierSet)

    @field_validator("modifiers", mode="before")
    @classmethod
    def coerce_mapping(cls, v):
        if v is None:
            return ModifierSet()
        if isinstance(v, Mapping):
            if set(v) == {"entries"} and isinstance(v["entries"], (list, tuple)):
                return v  # dumped ModifierSet
            return {"entries": tuple(v.items())}
        return v


class SkillTestResult(BaseModel):
    """Everything one execute call produced. Deep-immutable snapshot."""
    model_config = ConfigDict(frozen=True)

    invocation_id: InvocationId
    character_id: CharacterId
    skill: Skill
    roll: RollResult
    margin: int
    is_success: bool
    events: tuple[DomainEvent, ...]

    @property
    def roll_value(self) -> int:
        return self.roll.value

"""Skill Catalog Adapters — SkillLookup implementations backed by memory or a JSON file.

Invariants:
    - Skill ids are unique per catalog (duplicates rejected at construction)
    - Catalog is read-only after construction: safe for concurrent lookups
    - get_all() preserves the order skills were supplied in
    - File/parse failures surface as PortFailureError, never raw OSError/ValidationError
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from skillcheck.core.domain_types import SkillId
from skillcheck.core.errors import PortFailureError
from skillcheck.core.models import Skill

logger = logging.getLogger(__name__)

_SKILL_LIST = TypeAdapter(list[Skill])


class InMemorySkillCatalog:
    """Dict-backed skill lookup."""

    def __init__(self, skills: Iterable[Skill] = ()):
        self._skills: dict[str, Skill] = {}
        for skill in skills:
            if skill.id in self._skills:
                raise ValueError(f"duplicate skill id '{skill.id}'")
            self._skills[skill.id] = skill

    def get_by_id(self, skill_id: SkillId) -> Skill | None:
        return self._skills.get(skill_id)

    def get_all(self) -> tuple[Skill, ...]:
        return tuple(self._skills.values())

    def __len__(self) -> int:
        return len(self._skills)


def load_skill_catalog(path: str | Path) -> InMemorySkillCatalog:
    """Read a JSON array of skill objects into an InMemorySkillCatalog."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PortFailureError(f"cannot read {path}: {e}", "skill_lookup") from e
    try:
        skills = _SKILL_LIST.validate_json(raw)
        catalog = InMemorySkillCatalog(skills)
    except (ValidationError, ValueError) as e:
        raise PortFailureError(f"invalid skill catalog {path}: {e}", "skill_lookup") from e
    logger.info("Loaded %d skills from %s", len(catalog), path)
    return catalog

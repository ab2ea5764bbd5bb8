"""In-memory CharacterAttributes adapter. Unknown characters have no attributes."""

import threading
from collections.abc import Mapping

from skillcheck.core.domain_types import CharacterId


class InMemoryCharacterStore:

    def __init__(self, attributes_by_character: Mapping[str, Mapping[str, int]] | None = None):
        self._lock = threading.Lock()
        self._attributes: dict[str, dict[str, int]] = {
            cid: dict(attrs) for cid, attrs in (attributes_by_character or {}).items()
        }

    def get_attributes(self, character_id: CharacterId) -> Mapping[str, int]:
        with self._lock:
            return dict(self._attributes.get(character_id, {}))

    def set_attribute(self, character_id: CharacterId, key: str, score: int) -> None:
        with self._lock:
            self._attributes.setdefault(character_id, {})[key] = score

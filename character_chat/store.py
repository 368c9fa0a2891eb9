"""Character records and in-memory conversations."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .models import Character
from .session import ChatSession

logger = logging.getLogger(__name__)


def load_characters(path: Path) -> Dict[str, Character]:
    """Load exported character records (a single object or a list of them)."""
    if not path.exists():
        raise FileNotFoundError(f"Characters file missing at {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    records = data if isinstance(data, list) else [data]
    characters: Dict[str, Character] = {}
    for record in records:
        try:
            character = Character.from_dict(record)
        except ValueError as exc:
            logger.warning("Skipping character record in %s: %s", path, exc)
            continue
        characters[character.name.lower()] = character
    return characters


class CharacterStore:
    def __init__(self, characters: Dict[str, Character]) -> None:
        self._characters = dict(characters)
        self._sessions: Dict[Tuple[str, str], ChatSession] = {}

    @classmethod
    def from_file(cls, path: Path) -> "CharacterStore":
        return cls(load_characters(path))

    def get(self, name: str) -> Optional[Character]:
        return self._characters.get(name.strip().lower())

    def names(self) -> List[str]:
        return sorted(character.name for character in self._characters.values())

    def characters(self) -> Iterable[Character]:
        return self._characters.values()

    def session(self, scope: str, character: Character) -> ChatSession:
        key = (scope, character.name.lower())
        session = self._sessions.get(key)
        if session is None:
            session = ChatSession(character)
            self._sessions[key] = session
        return session

    def drop_session(self, scope: str, character: Character) -> bool:
        return self._sessions.pop((scope, character.name.lower()), None) is not None

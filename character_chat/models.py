"""Data model shared by the prompt builder, gateway and chat sessions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

ROLES = ("user", "assistant")


@dataclass(frozen=True)
class Character:
    name: str
    personality: str
    greeting: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Character name is required")
        if not self.personality or not self.personality.strip():
            raise ValueError("Character personality is required")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Character":
        """Build a character from an exported record, ignoring unknown fields."""
        if not isinstance(data, Mapping) or not data.get("name") or not data.get("personality"):
            raise ValueError("Invalid character record: name and personality are required")
        greeting = data.get("greeting") or None
        return cls(
            name=str(data["name"]),
            personality=str(data["personality"]),
            greeting=str(greeting) if greeting else None,
        )


@dataclass(frozen=True)
class Message:
    role: str
    content: str

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unsupported message role: {self.role!r}")

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class Preferences:
    short_replies: bool = True


@dataclass(frozen=True)
class ProviderConfig:
    provider: str = "free"
    api_key: str = ""
    model: Optional[str] = None

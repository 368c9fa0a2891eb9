"""Settings lookups with fixed fallback defaults."""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional

from .models import Preferences, ProviderConfig

DEFAULT_PROVIDER = "free"
KEY_VARIABLES = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}
FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class Settings:
    provider: str = DEFAULT_PROVIDER
    model: Optional[str] = None
    api_keys: Mapping[str, str] = field(default_factory=dict)
    short_replies: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        provider = (env.get("DEFAULT_PROVIDER") or DEFAULT_PROVIDER).strip().lower()
        api_keys: Dict[str, str] = {}
        for name, variable in KEY_VARIABLES.items():
            value = (env.get(variable) or "").strip()
            if value:
                api_keys[name] = value
        short_replies = (env.get("SHORT_REPLIES") or "true").strip().lower() not in FALSE_VALUES
        return cls(
            provider=provider,
            model=env.get("DEFAULT_MODEL") or None,
            api_keys=api_keys,
            short_replies=short_replies,
        )

    def provider_config(self) -> ProviderConfig:
        return ProviderConfig(
            provider=self.provider,
            api_key=self.api_keys.get(self.provider, ""),
            model=self.model,
        )

    def preferences(self) -> Preferences:
        return Preferences(short_replies=self.short_replies)

    def with_provider(self, provider: str, model: Optional[str] = None) -> "Settings":
        """Switch provider; the model falls back to the new provider's default unless given."""
        return replace(self, provider=provider.strip().lower(), model=model or None)

    def has_credentials(self) -> bool:
        return self.provider == "free" or bool(self.api_keys.get(self.provider))

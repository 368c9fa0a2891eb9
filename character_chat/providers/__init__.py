"""Provider registry for the chat gateway."""
from __future__ import annotations

from typing import Dict, Iterable, Optional

from .base import (
    ChatRequest,
    ContentFilteredError,
    ErrorKind,
    GatewayError,
    InvalidCredentialsError,
    MissingCredentialsError,
    Provider,
    ProviderError,
    ProviderResponse,
    RateLimitedError,
    UnsupportedProviderError,
)
from .anthropic_provider import AnthropicProvider
from .free_provider import FreeProvider
from .gemini_provider import GeminiProvider
from .openai_provider import OpenAIProvider


class ProviderRegistry:
    def __init__(self) -> None:
        self._providers: Dict[str, Provider] = {}

    def register(self, provider: Provider) -> None:
        key = provider.name.lower()
        self._providers[key] = provider

    def get(self, name: str) -> Optional[Provider]:
        return self._providers.get(name.lower())

    def names(self) -> Iterable[str]:
        return self._providers.keys()

    def __contains__(self, item: str) -> bool:
        return item.lower() in self._providers


def default_registry() -> ProviderRegistry:
    registry = ProviderRegistry()
    registry.register(FreeProvider())
    registry.register(GeminiProvider())
    registry.register(OpenAIProvider())
    registry.register(AnthropicProvider())
    return registry


__all__ = [
    "ChatRequest",
    "ContentFilteredError",
    "ErrorKind",
    "GatewayError",
    "InvalidCredentialsError",
    "MissingCredentialsError",
    "Provider",
    "ProviderError",
    "ProviderResponse",
    "ProviderRegistry",
    "RateLimitedError",
    "UnsupportedProviderError",
    "AnthropicProvider",
    "FreeProvider",
    "GeminiProvider",
    "OpenAIProvider",
    "default_registry",
]

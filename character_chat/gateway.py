"""Provider-agnostic entry point for sending one chat turn."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from .config import Settings
from .models import Character, Message, Preferences, ProviderConfig
from .prompts import build_system_prompt
from .providers import (
    ChatRequest,
    GatewayError,
    MissingCredentialsError,
    ProviderRegistry,
    UnsupportedProviderError,
    default_registry,
)

logger = logging.getLogger(__name__)

_default_registry: Optional[ProviderRegistry] = None


def _registry() -> ProviderRegistry:
    global _default_registry
    if _default_registry is None:
        _default_registry = default_registry()
    return _default_registry


def resolve_model(config: ProviderConfig, registry: Optional[ProviderRegistry] = None) -> str:
    if config.model:
        return config.model
    name = config.provider.strip().lower()
    provider = (registry or _registry()).get(name)
    if provider is None:
        raise UnsupportedProviderError(f"Unknown provider: {config.provider}", provider=name)
    return provider.default_model


async def send_message(
    history: Sequence[Message],
    character: Character,
    config: ProviderConfig,
    preferences: Optional[Preferences] = None,
    registry: Optional[ProviderRegistry] = None,
) -> str:
    """Send ``history`` to the configured provider and return the assistant reply.

    Raises a :class:`GatewayError` subclass on every failure. Nothing is
    retried and ``history`` is never modified.
    """
    registry = registry or _registry()
    name = config.provider.strip().lower()
    if name != "free" and not config.api_key:
        raise MissingCredentialsError(
            "No API key set. Add a key for this provider in Settings, or switch to the Free provider.",
            provider=name,
        )
    provider = registry.get(name)
    if provider is None:
        raise UnsupportedProviderError(f"Unknown provider: {config.provider}", provider=name)

    request = ChatRequest(
        model=config.model or provider.default_model,
        system_prompt=build_system_prompt(character, preferences),
        messages=tuple(history),
        api_key=config.api_key if provider.requires_key else "",
    )
    logger.debug(
        "Sending %d message(s) as %s via %s (%s)",
        len(request.messages),
        character.name,
        provider.name,
        request.model,
    )
    try:
        response = await provider.complete(request)
    except GatewayError as exc:
        logger.warning("%s request failed (%s, status=%s): %s", provider.name, exc.kind.value, exc.status, exc)
        raise
    if response.usage:
        logger.debug("%s usage: %s", provider.name, response.usage)
    return response.text


class ChatGateway:
    """Reads provider settings from a settings collaborator on every call."""

    def __init__(self, settings: Settings, registry: Optional[ProviderRegistry] = None) -> None:
        self.settings = settings
        self.registry = registry or _registry()

    async def send_message(self, history: Sequence[Message], character: Character) -> str:
        return await send_message(
            history,
            character,
            self.settings.provider_config(),
            self.settings.preferences(),
            registry=self.registry,
        )

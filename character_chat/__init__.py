"""Chat with character personas through interchangeable LLM providers."""
from __future__ import annotations

from .config import Settings
from .gateway import ChatGateway, send_message
from .models import Character, Message, Preferences, ProviderConfig
from .prompts import build_system_prompt
from .providers import (
    ContentFilteredError,
    ErrorKind,
    GatewayError,
    InvalidCredentialsError,
    MissingCredentialsError,
    ProviderError,
    RateLimitedError,
    UnsupportedProviderError,
)
from .session import ChatSession

__all__ = [
    "Character",
    "ChatGateway",
    "ChatSession",
    "ContentFilteredError",
    "ErrorKind",
    "GatewayError",
    "InvalidCredentialsError",
    "Message",
    "MissingCredentialsError",
    "Preferences",
    "ProviderConfig",
    "ProviderError",
    "RateLimitedError",
    "Settings",
    "UnsupportedProviderError",
    "build_system_prompt",
    "send_message",
]

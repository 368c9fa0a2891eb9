"""Provider abstraction and error taxonomy for the chat gateway."""
from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import aiohttp

from ..models import Message

DEFAULT_TEMPERATURE = 0.9
DEFAULT_MAX_TOKENS = 1024
REQUEST_TIMEOUT = 90


class ErrorKind(str, enum.Enum):
    MISSING_CREDENTIALS = "missing_credentials"
    UNSUPPORTED_PROVIDER = "unsupported_provider"
    RATE_LIMITED = "rate_limited"
    INVALID_CREDENTIALS = "invalid_credentials"
    CONTENT_FILTERED = "content_filtered"
    PROVIDER_ERROR = "provider_error"


class GatewayError(RuntimeError):
    """Base class for every failure a chat turn can end with.

    ``str(error)`` is a message suitable for showing to the user; callers that
    need to branch should look at ``kind`` instead of parsing it.
    """

    kind: ErrorKind = ErrorKind.PROVIDER_ERROR

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        status: Optional[int] = None,
        provider_message: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status = status
        self.provider_message = provider_message


class MissingCredentialsError(GatewayError):
    kind = ErrorKind.MISSING_CREDENTIALS


class UnsupportedProviderError(GatewayError):
    kind = ErrorKind.UNSUPPORTED_PROVIDER


class RateLimitedError(GatewayError):
    kind = ErrorKind.RATE_LIMITED


class InvalidCredentialsError(GatewayError):
    kind = ErrorKind.INVALID_CREDENTIALS


class ContentFilteredError(GatewayError):
    kind = ErrorKind.CONTENT_FILTERED


class ProviderError(GatewayError):
    """Raised when a provider request fails for any other reason."""

    kind = ErrorKind.PROVIDER_ERROR


@dataclass
class ChatRequest:
    model: str
    system_prompt: str
    messages: Sequence[Message]
    api_key: str = ""
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS


@dataclass
class ProviderResponse:
    text: str
    raw: Dict[str, Any]
    usage: Dict[str, Any] = field(default_factory=dict)


def error_message(data: Any) -> Optional[str]:
    """Pull ``error.message`` out of an error body, if there is one."""
    if not isinstance(data, Mapping):
        return None
    error = data.get("error")
    if isinstance(error, Mapping):
        message = error.get("message")
        return str(message) if message else None
    if isinstance(error, str) and error:
        return error
    return None


class Provider:
    name: str
    label: str
    default_model: str
    requires_key: bool = True

    async def complete(self, request: ChatRequest) -> ProviderResponse:  # pragma: no cover - interface
        raise NotImplementedError

    async def _post(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> Tuple[int, Any]:
        """POST ``payload`` and return the status with the decoded body (``None`` if not JSON)."""
        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT)) as session:
                async with session.post(url, headers=headers, json=payload) as response:
                    try:
                        data = await response.json(content_type=None)
                    except (aiohttp.ContentTypeError, ValueError):
                        data = None
                    return response.status, data
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise ProviderError(
                f"Could not reach {self.label}: {str(exc) or type(exc).__name__}",
                provider=self.name,
            ) from exc

    def _failure(self, status: int, data: Any) -> ProviderError:
        message = error_message(data)
        return ProviderError(
            message or f"{self.label} error {status}, try again in a moment.",
            provider=self.name,
            status=status,
            provider_message=message,
        )

    def _malformed(self, status: int) -> ProviderError:
        return ProviderError(
            f"{self.label} returned an unexpected response, try again in a moment.",
            provider=self.name,
            status=status,
        )


def chat_messages(system_prompt: str, messages: Sequence[Message]) -> list:
    """OpenAI-style message list with the system prompt in front."""
    return [{"role": "system", "content": system_prompt}] + [message.to_dict() for message in messages]


def first_choice_text(data: Any) -> Optional[str]:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None

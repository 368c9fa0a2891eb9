"""Google Gemini provider."""
from __future__ import annotations

from typing import Any, Mapping

from .base import (
    ChatRequest,
    ContentFilteredError,
    InvalidCredentialsError,
    Provider,
    ProviderResponse,
    error_message,
)

ROLE_MAP = {"user": "user", "assistant": "model"}


def _is_key_error(data: Any, message: str | None) -> bool:
    if message and ("API_KEY" in message or "api key" in message.lower()):
        return True
    error = data.get("error") if isinstance(data, Mapping) else None
    details = error.get("details") if isinstance(error, Mapping) else None
    for detail in details or []:
        if isinstance(detail, Mapping) and "API_KEY" in str(detail.get("reason", "")):
            return True
    return False


class GeminiProvider(Provider):
    name = "gemini"
    label = "Gemini"
    default_model = "gemini-2.0-flash"

    def __init__(self, base_url: str | None = None) -> None:
        self.base_url = (base_url or "https://generativelanguage.googleapis.com").rstrip("/")

    async def complete(self, request: ChatRequest) -> ProviderResponse:
        url = f"{self.base_url}/v1beta/models/{request.model}:generateContent?key={request.api_key}"
        headers = {"Content-Type": "application/json"}
        payload = {
            "system_instruction": {"parts": [{"text": request.system_prompt}]},
            "contents": [
                {
                    "role": ROLE_MAP[message.role],
                    "parts": [{"text": message.content}],
                }
                for message in request.messages
            ],
            "generationConfig": {
                "maxOutputTokens": request.max_tokens,
                "temperature": request.temperature,
            },
        }
        status, data = await self._post(url, payload, headers)
        if status >= 400:
            if status == 400 and _is_key_error(data, error_message(data)):
                raise InvalidCredentialsError(
                    "Invalid API key. Get a free one at aistudio.google.com/apikey",
                    provider=self.name,
                    status=status,
                    provider_message=error_message(data),
                )
            raise self._failure(status, data)
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            text = None
        if not text:
            raise ContentFilteredError(
                "No response from Gemini. The character may have triggered a safety filter.",
                provider=self.name,
                status=status,
            )
        return ProviderResponse(text=text, raw=data, usage=data.get("usageMetadata") or {})

"""Keyless provider backed by the Pollinations OpenAI-compatible proxy."""
from __future__ import annotations

from .base import (
    ChatRequest,
    Provider,
    ProviderResponse,
    RateLimitedError,
    chat_messages,
    first_choice_text,
)


class FreeProvider(Provider):
    name = "free"
    label = "Free AI"
    default_model = "openai"
    requires_key = False

    def __init__(self, base_url: str | None = None) -> None:
        self.base_url = (base_url or "https://text.pollinations.ai").rstrip("/")

    async def complete(self, request: ChatRequest) -> ProviderResponse:
        url = f"{self.base_url}/openai"
        headers = {"Content-Type": "application/json"}
        # The proxy takes no key and no output cap.
        payload = {
            "model": request.model,
            "messages": chat_messages(request.system_prompt, request.messages),
            "temperature": request.temperature,
        }
        status, data = await self._post(url, payload, headers)
        if status == 429:
            raise RateLimitedError(
                "Too many requests: the free tier allows one request every 15 seconds. "
                "Wait a moment and try again.",
                provider=self.name,
                status=status,
            )
        if status >= 400:
            raise self._failure(status, data)
        text = first_choice_text(data)
        if text is None:
            raise self._malformed(status)
        return ProviderResponse(text=text, raw=data, usage=data.get("usage") or {})

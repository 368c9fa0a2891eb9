"""Anthropic Claude provider."""
from __future__ import annotations

from .base import ChatRequest, Provider, ProviderResponse


class AnthropicProvider(Provider):
    name = "anthropic"
    label = "Anthropic"
    default_model = "claude-sonnet-4-6"

    def __init__(self, version: str = "2023-06-01", base_url: str | None = None) -> None:
        self.version = version
        self.base_url = (base_url or "https://api.anthropic.com").rstrip("/")

    async def complete(self, request: ChatRequest) -> ProviderResponse:
        url = f"{self.base_url}/v1/messages"
        headers = {
            "x-api-key": request.api_key,
            "anthropic-version": self.version,
            "content-type": "application/json",
        }
        payload = {
            "model": request.model,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "system": request.system_prompt,
            "messages": [message.to_dict() for message in request.messages],
        }
        status, data = await self._post(url, payload, headers)
        if status >= 400:
            raise self._failure(status, data)
        try:
            text = data["content"][0]["text"]
        except (KeyError, IndexError, TypeError):
            text = None
        if not isinstance(text, str):
            raise self._malformed(status)
        return ProviderResponse(text=text, raw=data, usage=data.get("usage") or {})

"""OpenAI provider implementation."""
from __future__ import annotations

from .base import ChatRequest, Provider, ProviderResponse, chat_messages, first_choice_text


class OpenAIProvider(Provider):
    name = "openai"
    label = "OpenAI"
    default_model = "gpt-4o"

    def __init__(self, base_url: str | None = None) -> None:
        self.base_url = (base_url or "https://api.openai.com").rstrip("/")

    async def complete(self, request: ChatRequest) -> ProviderResponse:
        url = f"{self.base_url}/v1/chat/completions"
        headers = {
            "Authorization": f"Bearer {request.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": request.model,
            "messages": chat_messages(request.system_prompt, request.messages),
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
        }
        status, data = await self._post(url, payload, headers)
        if status >= 400:
            raise self._failure(status, data)
        text = first_choice_text(data)
        if text is None:
            raise self._malformed(status)
        return ProviderResponse(text=text, raw=data, usage=data.get("usage") or {})

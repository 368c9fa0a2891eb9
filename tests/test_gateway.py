"""Dispatch behaviour of the gateway: credential gating, provider selection, models."""
from __future__ import annotations

import re

import pytest
from aioresponses import aioresponses

from character_chat.config import Settings
from character_chat.gateway import ChatGateway, resolve_model, send_message
from character_chat.models import Message, Preferences, ProviderConfig
from character_chat.prompts import build_system_prompt
from character_chat.providers import (
    ErrorKind,
    MissingCredentialsError,
    UnsupportedProviderError,
)
from helpers import ANTHROPIC_URL, FREE_URL, OPENAI_URL, sent_request


@pytest.mark.asyncio
async def test_missing_key_fails_before_any_network_call(nova, history):
    with aioresponses() as m:
        with pytest.raises(MissingCredentialsError) as excinfo:
            await send_message(history, nova, ProviderConfig(provider="openai", api_key=""))
        assert not m.requests
    assert excinfo.value.kind is ErrorKind.MISSING_CREDENTIALS
    assert excinfo.value.provider == "openai"


@pytest.mark.asyncio
async def test_unknown_provider_is_unsupported(nova, history):
    with aioresponses() as m:
        with pytest.raises(UnsupportedProviderError):
            await send_message(history, nova, ProviderConfig(provider="grok", api_key="k"))
        assert not m.requests


@pytest.mark.asyncio
async def test_free_provider_needs_no_key(nova, history):
    with aioresponses() as m:
        m.post(FREE_URL, payload={"choices": [{"message": {"content": "Beep boop!"}}]})
        reply = await send_message(history, nova, ProviderConfig(provider="free"))
        request = sent_request(m)
    assert reply == "Beep boop!"
    assert request["json"]["model"] == "openai"
    assert "Authorization" not in request["headers"]


@pytest.mark.asyncio
async def test_free_provider_never_sends_a_configured_key(nova, history):
    with aioresponses() as m:
        m.post(FREE_URL, payload={"choices": [{"message": {"content": "ok"}}]})
        await send_message(history, nova, ProviderConfig(provider="free", api_key="secret"))
        request = sent_request(m)
    assert "secret" not in repr(request)


@pytest.mark.asyncio
async def test_end_to_end_openai_reply(nova, openai_config):
    history = [Message("assistant", "Beep! Hi!"), Message("user", "Who are you?")]
    with aioresponses() as m:
        m.post(OPENAI_URL, payload={"choices": [{"message": {"content": "Hello, traveler!"}}]})
        reply = await send_message(history, nova, openai_config, Preferences(short_replies=True))
        request = sent_request(m)
    assert reply == "Hello, traveler!"
    messages = request["json"]["messages"]
    assert messages[0] == {"role": "system", "content": build_system_prompt(nova, Preferences(short_replies=True))}
    assert messages[1:] == [message.to_dict() for message in history]
    assert request["json"]["model"] == "gpt-4o"


@pytest.mark.asyncio
async def test_history_is_not_modified(nova, history, openai_config):
    before = list(history)
    with aioresponses() as m:
        m.post(OPENAI_URL, payload={"choices": [{"message": {"content": "fine"}}]})
        await send_message(history, nova, openai_config)
    assert history == before


@pytest.mark.asyncio
async def test_configured_model_overrides_default(nova, history):
    config = ProviderConfig(provider="anthropic", api_key="test-key", model="claude-haiku-4-5")
    with aioresponses() as m:
        m.post(ANTHROPIC_URL, payload={"content": [{"type": "text", "text": "hi"}]})
        await send_message(history, nova, config)
        request = sent_request(m)
    assert request["json"]["model"] == "claude-haiku-4-5"


@pytest.mark.parametrize(
    "provider, model",
    [
        ("free", "openai"),
        ("gemini", "gemini-2.0-flash"),
        ("openai", "gpt-4o"),
        ("anthropic", "claude-sonnet-4-6"),
    ],
)
def test_default_models(provider, model):
    assert resolve_model(ProviderConfig(provider=provider)) == model


@pytest.mark.asyncio
async def test_chat_gateway_reads_settings_per_call(nova, history):
    gateway = ChatGateway(Settings(provider="gemini", api_keys={"gemini": "test-key"}, short_replies=False))
    with aioresponses() as m:
        m.post(
            re.compile(r"https://generativelanguage\.googleapis\.com/.*"),
            payload={"candidates": [{"content": {"parts": [{"text": "Salutations."}]}}]},
        )
        reply = await gateway.send_message(history, nova)
        request = sent_request(m)
    assert reply == "Salutations."
    system = request["json"]["system_instruction"]["parts"][0]["text"]
    assert system == build_system_prompt(nova, Preferences(short_replies=False))

    gateway.settings = gateway.settings.with_provider("openai")
    with pytest.raises(MissingCredentialsError):
        await gateway.send_message(history, nova)


@pytest.mark.asyncio
async def test_provider_name_is_case_insensitive(nova, history):
    with aioresponses() as m:
        m.post(FREE_URL, payload={"choices": [{"message": {"content": "Beep!"}}]})
        reply = await send_message(history, nova, ProviderConfig(provider=" Free "))
        request = sent_request(m)
    assert reply == "Beep!"
    assert request["json"]["model"] == "openai"
    assert resolve_model(ProviderConfig(provider="Gemini")) == "gemini-2.0-flash"

    with aioresponses() as m:
        with pytest.raises(MissingCredentialsError) as excinfo:
            await send_message(history, nova, ProviderConfig(provider="OpenAI"))
        assert not m.requests
    assert excinfo.value.provider == "openai"

from __future__ import annotations

import pytest

from character_chat.models import Character, Message, ProviderConfig


@pytest.fixture
def nova() -> Character:
    return Character(name="Nova", personality="Cheerful robot guide.", greeting="Beep! Hi!")


@pytest.fixture
def history() -> list:
    return [Message("user", "hi"), Message("assistant", "hello"), Message("user", "how are you?")]


@pytest.fixture
def openai_config() -> ProviderConfig:
    return ProviderConfig(provider="openai", api_key="test-key")

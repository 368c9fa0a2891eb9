from __future__ import annotations

import pytest

from character_chat.models import Character, Message


def test_character_requires_name_and_personality():
    with pytest.raises(ValueError):
        Character(name="", personality="Calm.")
    with pytest.raises(ValueError):
        Character(name="Nova", personality="  ")


def test_character_from_exported_record():
    character = Character.from_dict(
        {"name": "Nova", "personality": "Cheerful.", "greeting": "", "photo": "data:image/png", "published": True}
    )
    assert character == Character(name="Nova", personality="Cheerful.")


def test_character_from_invalid_record():
    with pytest.raises(ValueError):
        Character.from_dict({"name": "Nova"})
    with pytest.raises(ValueError):
        Character.from_dict(["not", "a", "record"])


def test_message_rejects_unknown_role():
    with pytest.raises(ValueError):
        Message("system", "you are a robot")
    assert Message("assistant", "hello").to_dict() == {"role": "assistant", "content": "hello"}

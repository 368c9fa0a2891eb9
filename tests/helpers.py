from __future__ import annotations

from typing import Any, Dict

from aioresponses import aioresponses

FREE_URL = "https://text.pollinations.ai/openai"
OPENAI_URL = "https://api.openai.com/v1/chat/completions"
ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash:generateContent?key=test-key"


def sent_request(mocked: aioresponses) -> Dict[str, Any]:
    """Keyword arguments of the single request made under ``mocked``."""
    calls = [call for recorded in mocked.requests.values() for call in recorded]
    assert len(calls) == 1
    return calls[0].kwargs

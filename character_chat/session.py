"""Caller-side conversation handling around the gateway."""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Sequence, Tuple

from .models import Character, Message

Sender = Callable[[Sequence[Message], Character], Awaitable[str]]


class ChatSession:
    """One conversation with one character.

    Sends are serialized so replies always land in order, and a failed call
    removes the user turn it optimistically recorded.
    """

    def __init__(self, character: Character) -> None:
        self.character = character
        self._history: List[Message] = []
        self._lock = asyncio.Lock()
        self.reset()

    @property
    def history(self) -> Tuple[Message, ...]:
        return tuple(self._history)

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def reset(self) -> None:
        self._history.clear()
        if self.character.greeting:
            self._history.append(Message("assistant", self.character.greeting))

    async def send(self, text: str, sender: Sender) -> str:
        text = text.strip()
        if not text:
            raise ValueError("Message text is empty")
        async with self._lock:
            self._history.append(Message("user", text))
            try:
                reply = await sender(tuple(self._history), self.character)
            except BaseException:
                self._history.pop()
                raise
            self._history.append(Message("assistant", reply))
            return reply

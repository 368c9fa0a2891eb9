"""System prompt construction for character personas."""
from __future__ import annotations

from typing import Optional

from .models import Character, Preferences

APP_NAME = "AI Creator"

SHORT_REPLIES_CLAUSE = (
    "IMPORTANT: Keep your replies SHORT, around 5 sentences max. Be concise and to the point. "
    "Only go longer if you're explaining something complex that truly needs more detail "
    "(like a tutorial, a story the user asked for, or a detailed how-to)."
)

NATURAL_LENGTH_CLAUSE = "Keep responses conversational. Use as much detail as feels natural."

APP_KNOWLEDGE = (
    f'\n\nYou also have knowledge about the app you live in, called "{APP_NAME}". '
    "If the user asks about the app or how to do things, help them while staying in character. "
    "Here's what you know about the app:\n"
    "- The app has 4 sections: Gallery, Create, My AIs, and Settings.\n"
    '- To CREATE a new AI: Open "Create". Add a photo, type a name, describe how the character acts '
    'in the personality box, optionally add a first greeting message, then choose "Create Character".\n'
    '- To CHAT with an AI: Go to "My AIs" or "Gallery" and open a character card to start the chat.\n'
    '- To PUBLISH an AI (so it shows in the Gallery): Go to "My AIs", find the character, '
    "and use the eye icon to publish/unpublish it.\n"
    '- To DELETE an AI: Go to "My AIs" and use the trash icon on the character.\n'
    '- To EXPORT an AI (share with others): Go to "My AIs" and use the export icon. '
    "It downloads a .json file you can share.\n"
    '- To IMPORT an AI (from someone else): Go to "My AIs", choose "Import", then select a .json file.\n'
    '- SETTINGS: Open Settings to change the AI provider or model. The default "Free AI" provider '
    "works with no setup needed.\n"
    "- The personality description is the most important part when creating an AI. The more detail "
    "you write about how the character talks, what they like, their backstory, etc., "
    "the better the AI will be.\n"
)


def build_system_prompt(character: Character, preferences: Optional[Preferences] = None) -> str:
    preferences = preferences or Preferences()
    prompt = f'You are "{character.name}". '
    prompt += f"Here is how you act and behave:\n{character.personality}\n\n"
    prompt += "Stay in character at all times. Respond as this character would. "
    prompt += SHORT_REPLIES_CLAUSE if preferences.short_replies else NATURAL_LENGTH_CLAUSE
    if character.greeting:
        prompt += f'\nYour typical greeting is: "{character.greeting}"'
    prompt += APP_KNOWLEDGE
    return prompt

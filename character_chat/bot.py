"""Character chat bot entrypoint."""
from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import discord
from discord import app_commands
from discord.ext import commands
from dotenv import load_dotenv

from .config import Settings
from .gateway import ChatGateway, resolve_model
from .providers import ErrorKind, GatewayError
from .session import ChatSession, Sender
from .store import CharacterStore

DEFAULT_CHARACTERS_PATH = Path("characters.json")
DEFAULT_RATE_LIMIT = 5
DEFAULT_RATE_WINDOW = 60
MAX_MESSAGE_LENGTH = 2000

logger = logging.getLogger("character-chat")


class SimpleRateLimiter:
    def __init__(self, limit: int, window_seconds: int) -> None:
        self.limit = limit
        self.window = window_seconds
        self._events: Dict[str, List[float]] = {}
        self._lock = asyncio.Lock()

    async def check(self, key: str) -> bool:
        async with self._lock:
            now = time.monotonic()
            events = [stamp for stamp in self._events.get(key, []) if now - stamp < self.window]
            if len(events) >= self.limit:
                self._events[key] = events
                return False
            events.append(now)
            self._events[key] = events
            return True


@dataclass
class BotConfig:
    token: str
    guild_id: Optional[int]
    characters_path: Path
    rate_limit: int
    rate_window: int

    @classmethod
    def from_env(cls) -> "BotConfig":
        token = os.getenv("DISCORD_BOT_TOKEN")
        if not token:
            raise RuntimeError("DISCORD_BOT_TOKEN is required")
        guild_id = os.getenv("DISCORD_GUILD_ID")
        return cls(
            token=token,
            guild_id=int(guild_id) if guild_id else None,
            characters_path=Path(os.getenv("CHARACTERS_PATH", str(DEFAULT_CHARACTERS_PATH))),
            rate_limit=int(os.getenv("AI_RATE_LIMIT", DEFAULT_RATE_LIMIT)),
            rate_window=int(os.getenv("AI_RATE_WINDOW", DEFAULT_RATE_WINDOW)),
        )


def describe_error(exc: GatewayError) -> str:
    if exc.kind is ErrorKind.CONTENT_FILTERED:
        return f"Content notice: {exc}"
    return f"Could not get a reply: {exc}"


def truncate(text: str, limit: int = MAX_MESSAGE_LENGTH) -> str:
    text = text.strip() or "(empty response)"
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


async def chat_turn(session: ChatSession, message: str, sender: Sender) -> Tuple[str, bool]:
    """Run one turn and return the text to post with whether it is ephemeral."""
    persona = session.character
    try:
        reply = await session.send(message, sender)
    except ValueError:
        return "Say something first.", True
    except GatewayError as exc:
        logger.info("Chat turn for %s failed: %s", persona.name, exc.kind.value)
        return describe_error(exc), True
    except Exception:
        logger.exception("Unexpected failure during chat turn for %s", persona.name)
        return "Unexpected error while contacting the provider.", True
    return truncate(f"**{persona.name}:** {reply}"), False


class CharacterChatBot(commands.Bot):
    def __init__(self, config: BotConfig, store: CharacterStore, gateway: ChatGateway) -> None:
        intents = discord.Intents.default()
        intents.guilds = True
        super().__init__(command_prefix="!", intents=intents)
        self.config = config
        self.store = store
        self.gateway = gateway
        self.rate_limiter = SimpleRateLimiter(config.rate_limit, config.rate_window)

    async def setup_hook(self) -> None:  # type: ignore[override]
        register_commands(self)
        if self.config.guild_id:
            guild = discord.Object(id=self.config.guild_id)
            self.tree.copy_global_to(guild=guild)
            await self.tree.sync(guild=guild)
        else:
            await self.tree.sync()


def register_commands(bot: CharacterChatBot) -> None:
    async def character_autocomplete(
        interaction: discord.Interaction, current: str
    ) -> List[app_commands.Choice[str]]:
        return [
            app_commands.Choice(name=name, value=name)
            for name in bot.store.names()
            if current.lower() in name.lower()
        ][:25]

    @bot.tree.command(name="chat", description="Say something to a character.")
    @app_commands.describe(character="Character to talk to", message="What you want to say")
    @app_commands.autocomplete(character=character_autocomplete)
    async def chat(interaction: discord.Interaction, character: str, message: str) -> None:
        persona = bot.store.get(character)
        if persona is None:
            await interaction.response.send_message(
                f"Unknown character. Available: {', '.join(bot.store.names())}", ephemeral=True
            )
            return
        if not bot.gateway.settings.has_credentials():
            await interaction.response.send_message(
                "No API key set for the current provider. Use /provider free or configure a key.",
                ephemeral=True,
            )
            return
        session = bot.store.session(str(interaction.channel_id), persona)
        if session.busy:
            await interaction.response.send_message(
                f"{persona.name} is still replying. Wait for the answer first.", ephemeral=True
            )
            return
        if not await bot.rate_limiter.check(str(interaction.channel_id)):
            await interaction.response.send_message(
                "Channel rate limit exceeded. Try again shortly.", ephemeral=True
            )
            return

        await interaction.response.defer(thinking=True)
        text, ephemeral = await chat_turn(session, message, bot.gateway.send_message)
        await interaction.followup.send(text, ephemeral=ephemeral)

    @bot.tree.command(name="reset", description="Start the conversation with a character over.")
    @app_commands.autocomplete(character=character_autocomplete)
    async def reset(interaction: discord.Interaction, character: str) -> None:
        persona = bot.store.get(character)
        if persona is None:
            await interaction.response.send_message("Unknown character.", ephemeral=True)
            return
        bot.store.drop_session(str(interaction.channel_id), persona)
        greeting = f" {persona.name} says: {persona.greeting}" if persona.greeting else ""
        await interaction.response.send_message(truncate(f"Conversation reset.{greeting}"))

    @bot.tree.command(name="characters", description="List available characters.")
    async def characters(interaction: discord.Interaction) -> None:
        lines = [f"**{persona.name}**: {persona.personality[:100]}" for persona in bot.store.characters()]
        await interaction.response.send_message(
            truncate("\n".join(lines) or "No characters loaded."), ephemeral=True
        )

    @bot.tree.command(name="provider", description="Switch the AI provider and model.")
    @app_commands.describe(name="free, gemini, openai or anthropic", model="Model identifier (optional)")
    async def provider(interaction: discord.Interaction, name: str, model: Optional[str] = None) -> None:
        if name.lower() not in bot.gateway.registry:
            available = ", ".join(sorted(bot.gateway.registry.names()))
            await interaction.response.send_message(
                f"Unknown provider. Available providers: {available}", ephemeral=True
            )
            return
        settings = bot.gateway.settings.with_provider(name, model)
        bot.gateway.settings = settings
        model_name = resolve_model(settings.provider_config(), bot.gateway.registry)
        note = "" if settings.has_credentials() else " (no API key configured for it yet)"
        logger.info("Provider switched to %s (%s)", settings.provider, model_name)
        await interaction.response.send_message(
            f"Provider set to {settings.provider} • {model_name}{note}", ephemeral=True
        )


def create_bot() -> CharacterChatBot:
    config = BotConfig.from_env()
    store = CharacterStore.from_file(config.characters_path)
    if not store.names():
        raise RuntimeError(f"No characters found in {config.characters_path}")
    gateway = ChatGateway(Settings.from_env())
    return CharacterChatBot(config, store, gateway)


async def main() -> None:
    load_dotenv()
    logging.basicConfig(level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO))
    bot = create_bot()
    await bot.start(bot.config.token)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()

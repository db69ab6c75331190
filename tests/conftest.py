from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from verify_bot.config import Settings

ENV_NAMES = (
    "DISCORD_TOKEN",
    "CLIENT_ID",
    "REDIRECT_URI",
    "GUILD_ID",
    "LOG_LEVEL",
    "OAUTH_AUTHORIZE_URL",
    "VERIFY_BRAND_NAME",
    "VERIFY_ICON_URL",
    "VERIFY_DOCS_URL",
    "VERIFY_DONATE_URL",
    "VERIFY_LEGACY_PREFIX",
    "VERIFY_LEGACY_PREFIX_ENABLED",
)

REDIRECT_URI = "https://verify.example.org/callback?src=discord"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def make_settings(**overrides: Any) -> Settings:
    values = {
        "discord_token": "bot-token",
        "client_id": "1100220033004400",
        "redirect_uri": REDIRECT_URI,
        "docs_url": "https://docs.example.org/",
        "donate_url": "https://donate.example.org/",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeUser:
    def __init__(self, user_id: int = 555, name: str = "alice", avatar: Optional[str] = "a1b2c3", bot: bool = False):
        self.id = user_id
        self.name = name
        self.avatar = SimpleNamespace(key=avatar) if avatar else None
        self.bot = bot
        self.guild_permissions = discord.Permissions.none()

    def __str__(self) -> str:
        return self.name


def make_guild(guild_id: int = 777, name: Optional[str] = "Test Guild", icon: Optional[str] = "g1c0n"):
    return SimpleNamespace(id=guild_id, name=name, icon=SimpleNamespace(key=icon) if icon else None)


def make_channel(channel_type: discord.ChannelType = discord.ChannelType.text, send_error: Optional[Exception] = None):
    channel = MagicMock()
    channel.id = 4242
    channel.type = channel_type
    channel.send = AsyncMock(side_effect=send_error)
    return channel


def make_interaction(
    *,
    manage_messages: bool = True,
    channel: Any = None,
    guild: Any = "default",
    user: Optional[FakeUser] = None,
    custom_id: Optional[str] = None,
):
    interaction = MagicMock()
    interaction.id = 9988776655
    interaction.type = discord.InteractionType.component if custom_id else discord.InteractionType.application_command
    interaction.data = {"custom_id": custom_id} if custom_id else {}
    interaction.permissions = discord.Permissions(manage_messages=manage_messages)
    interaction.channel = channel if channel is not None else make_channel()
    interaction.guild = make_guild() if guild == "default" else guild
    interaction.user = user or FakeUser()
    interaction.response.send_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.followup.send = AsyncMock()
    interaction.edit_original_response = AsyncMock()
    return interaction


def make_message(
    content: str = "!verify",
    *,
    manage_messages: bool = True,
    author_bot: bool = False,
    channel: Any = None,
    in_guild: bool = True,
):
    author = FakeUser(bot=author_bot)
    author.guild_permissions = discord.Permissions(manage_messages=manage_messages)

    message = MagicMock()
    message.id = 31337
    message.content = content
    message.author = author
    message.guild = make_guild() if in_guild else None
    message.channel = channel if channel is not None else make_channel()
    message.reply = AsyncMock()
    return message


def http_error(cls=discord.HTTPException, status: int = 500, text: str = "boom") -> Exception:
    return cls(SimpleNamespace(status=status, reason="Error"), text)

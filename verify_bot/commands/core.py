from __future__ import annotations

from typing import TYPE_CHECKING

from discord import app_commands

if TYPE_CHECKING:
    import discord

    from ..config import Settings


def status_message(settings: "Settings") -> str:
    prefix = f"ON ({settings.legacy_prefix})" if settings.legacy_prefix_enabled else "OFF"
    return (
        "✅ Pong. Bot is online.\n"
        f"Command sync: {settings.sync_scope}\n"
        f"Legacy prefix: {prefix}"
    )


def register(bot: "discord.Client", tree: "app_commands.CommandTree") -> None:
    """
    Core sanity command. Keep this module small and stable:
      - /ping   bot is alive + sync scope
    """

    @tree.command(name="ping", description="Sanity check: bot is alive.")
    async def ping(interaction: "discord.Interaction") -> None:
        await interaction.response.send_message(status_message(bot.settings), ephemeral=True)

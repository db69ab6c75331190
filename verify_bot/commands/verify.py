from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands

from ..panel import post_panel
from .shared import (
    DENIED_LEGACY,
    DENIED_SLASH,
    PANEL_FAILED_LEGACY,
    PANEL_FAILED_SLASH,
    PANEL_POSTED_LEGACY,
    PANEL_POSTED_SLASH,
    Outcome,
    can_manage_messages,
    safe_followup,
    safe_message_reply,
)

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)

COMMAND_NAME = "verify"
COMMAND_DESCRIPTION = "Post the wallet verification panel"


def is_legacy_trigger(content: str, prefix: str) -> bool:
    p = (prefix or "").strip().lower()
    if not p:
        return False
    return (content or "").lower().startswith(p)


async def handle_verify_command(interaction: "discord.Interaction", settings: "Settings") -> Outcome:
    """
    /verify: permission gate -> ephemeral defer -> panel -> edit deferred reply.
    """
    if not can_manage_messages(interaction.permissions):
        try:
            await interaction.response.send_message(DENIED_SLASH, ephemeral=True)
        except discord.HTTPException:
            logger.exception("Failed to send /verify denial (interaction=%s)", interaction.id)
        return Outcome.DENIED

    try:
        await interaction.response.defer(ephemeral=True, thinking=True)
    except discord.HTTPException:
        logger.exception("Failed to acknowledge /verify (interaction=%s)", interaction.id)
        return Outcome.TRANSPORT_ERROR

    outcome = await post_panel(interaction.channel, settings)
    await safe_followup(interaction, PANEL_POSTED_SLASH if outcome is Outcome.OK else PANEL_FAILED_SLASH)
    return outcome


async def handle_verify_message(message: "discord.Message", settings: "Settings") -> Outcome:
    """
    Legacy `!verify` text trigger. Same permission gate and panel as /verify,
    replies in-channel.
    """
    if message.author.bot:
        return Outcome.IGNORED
    if not is_legacy_trigger(message.content, settings.legacy_prefix):
        return Outcome.IGNORED

    # DMs have no guild permissions at all
    perms = getattr(message.author, "guild_permissions", None) if message.guild is not None else None
    if not can_manage_messages(perms):
        await safe_message_reply(message, DENIED_LEGACY)
        return Outcome.DENIED

    outcome = await post_panel(message.channel, settings)
    await safe_message_reply(message, PANEL_POSTED_LEGACY if outcome is Outcome.OK else PANEL_FAILED_LEGACY)
    return outcome


def register(bot: "discord.Client", tree: "app_commands.CommandTree") -> None:
    """
    Verification commands.

    Provides:
      - /verify  post the verification panel (Manage Messages required)

    The legacy `!verify` prefix is routed from VerifyBot.on_message.
    """

    @tree.command(name=COMMAND_NAME, description=COMMAND_DESCRIPTION)
    @app_commands.guild_only()
    @app_commands.default_permissions(manage_messages=True)
    async def verify_cmd(interaction: "discord.Interaction") -> None:
        await handle_verify_command(interaction, bot.settings)

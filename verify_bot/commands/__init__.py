from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import discord

from . import core, verify

if TYPE_CHECKING:
    from discord import app_commands

logger = logging.getLogger(__name__)

__all__ = ["register_all", "sync_commands"]


def register_all(bot: "discord.Client", tree: "app_commands.CommandTree") -> None:
    """
    Attach every slash command to the tree. Modules read bot.settings.

    A /ping failure is logged and skipped; a /verify failure raises RuntimeError.
    """
    try:
        core.register(bot, tree)
    except Exception:
        logger.exception("/ping registration failed; continuing without it")

    try:
        verify.register(bot, tree)
    except Exception as e:
        logger.exception("/verify registration failed")
        raise RuntimeError(f"/verify could not be registered: {e}") from e

    names = sorted(cmd.name for cmd in tree.get_commands())
    logger.info("Slash commands registered: %s", ", ".join(f"/{n}" for n in names))


async def sync_commands(tree: "app_commands.CommandTree", guild_id: Optional[int]) -> bool:
    """
    Push the tree to Discord.

    guild_id set -> guild-only sync (shows up immediately, for testing)
    otherwise    -> global sync (can take up to an hour to appear)

    Never raises: the bot keeps serving buttons and prefixes for already-registered commands.
    """
    try:
        if guild_id:
            guild = discord.Object(id=guild_id)
            tree.copy_global_to(guild=guild)
            synced = await tree.sync(guild=guild)
            logger.info("Slash commands synced to guild=%s (%s commands)", guild_id, len(synced))
        else:
            synced = await tree.sync()
            logger.info("Slash commands synced globally (%s commands, may take up to 1h)", len(synced))
    except Exception:
        logger.exception("Slash command sync failed")
        return False
    return True

"""
Verification panel: the embed + button row posted into a channel.

Both invocation paths (/verify and the legacy text prefix) converge on post_panel().
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import discord

from .commands.shared import Outcome

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger(__name__)

LETSGO_CUSTOM_ID = "verify_letsgo"

PANEL_COLOR = discord.Colour(0xE67E22)
PANEL_TITLE = "Verify your assets"
PANEL_DESCRIPTION = (
    "This is a read-only connection. Do not share your private keys.\n"
    "We will never ask for your seed phrase. We will never DM you."
)

# Plain text channels and announcement (news) channels only
SUPPORTED_CHANNEL_TYPES = (discord.ChannelType.text, discord.ChannelType.news)


def is_supported_channel(channel: Any) -> bool:
    return getattr(channel, "type", None) in SUPPORTED_CHANNEL_TYPES


def build_panel_embed(settings: "Settings") -> discord.Embed:
    embed = discord.Embed(title=PANEL_TITLE, description=PANEL_DESCRIPTION, colour=PANEL_COLOR)
    if settings.icon_url:
        embed.set_author(name=settings.brand_name, icon_url=settings.icon_url)
        embed.set_thumbnail(url=settings.icon_url)
    else:
        embed.set_author(name=settings.brand_name)
    return embed


def build_panel_view(settings: "Settings") -> discord.ui.View:
    """
    One stateful button (handled by custom_id in the dispatch table, so it keeps
    working after a restart) and two static link buttons.

    Must be called with a running event loop (discord.ui.View requirement).
    """
    view = discord.ui.View(timeout=None)
    view.add_item(
        discord.ui.Button(
            style=discord.ButtonStyle.primary,
            label="Let's go!",
            custom_id=LETSGO_CUSTOM_ID,
        )
    )
    view.add_item(discord.ui.Button(style=discord.ButtonStyle.link, label="Docs", url=settings.docs_url))
    view.add_item(discord.ui.Button(style=discord.ButtonStyle.link, label="Donate", url=settings.donate_url))
    return view


async def post_panel(channel: Any, settings: "Settings") -> Outcome:
    """
    Send the verification panel to channel.

    Never raises: send failures are logged and reported as TRANSPORT_ERROR.
    """
    if not is_supported_channel(channel):
        logger.info(
            "Cannot send verification panel to non-text channel (channel=%s type=%s)",
            getattr(channel, "id", None),
            getattr(channel, "type", None),
        )
        return Outcome.UNSUPPORTED_CHANNEL

    try:
        await channel.send(embed=build_panel_embed(settings), view=build_panel_view(settings))
    except discord.Forbidden:
        logger.warning("Missing access to post verification panel (channel=%s)", getattr(channel, "id", None))
        return Outcome.TRANSPORT_ERROR
    except Exception:
        logger.exception("Failed to send verification panel (channel=%s)", getattr(channel, "id", None))
        return Outcome.TRANSPORT_ERROR

    logger.info("Verification panel posted (channel=%s)", getattr(channel, "id", None))
    return Outcome.OK


async def send_panel(channel: Any, settings: "Settings") -> bool:
    return (await post_panel(channel, settings)) is Outcome.OK


__all__ = [
    "LETSGO_CUSTOM_ID",
    "PANEL_TITLE",
    "SUPPORTED_CHANNEL_TYPES",
    "is_supported_channel",
    "build_panel_embed",
    "build_panel_view",
    "post_panel",
    "send_panel",
]

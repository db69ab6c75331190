from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

import discord

logger = logging.getLogger(__name__)

# NOTE:
# Keep this module free of Settings and handler imports; panel/oauth/verify all depend on it.


class Outcome(str, Enum):
    """Tagged result returned by every handler."""

    OK = "ok"
    DENIED = "denied"
    UNSUPPORTED_CHANNEL = "unsupported_channel"
    TRANSPORT_ERROR = "transport_error"
    IGNORED = "ignored"


# -----------------------------
# User-facing strings
# -----------------------------

DENIED_SLASH = "You need **Manage Messages** permission to use this command."
DENIED_LEGACY = "You need Manage Messages permission."

PANEL_POSTED_SLASH = "Verification panel posted successfully!"
PANEL_FAILED_SLASH = "Failed to post verification panel. Check bot permissions and logs."
PANEL_POSTED_LEGACY = "Verification panel posted!"
PANEL_FAILED_LEGACY = "Failed to post panel. Check permissions."

GUILD_ONLY = "❌ This button only works inside a server."


# -----------------------------
# Small primitives
# -----------------------------

def can_manage_messages(permissions: Optional[Any]) -> bool:
    """
    Accepts a discord.Permissions (or anything with a manage_messages flag).
    Missing permissions (DMs, partial members) count as denied.
    """
    if permissions is None:
        return False
    return bool(getattr(permissions, "manage_messages", False))


# -----------------------------
# Reply helpers
# -----------------------------

async def safe_followup(interaction: "discord.Interaction", content: str) -> bool:
    """
    Replace the deferred (thinking) reply with content.
    Returns False if Discord rejected the edit (token expired, missing access, ...).
    """
    try:
        await interaction.edit_original_response(content=content)
        return True
    except discord.HTTPException:
        logger.exception("Failed to edit interaction reply (interaction=%s)", getattr(interaction, "id", "?"))
        return False


async def safe_message_reply(message: "discord.Message", content: str) -> bool:
    try:
        await message.reply(content=content)
        return True
    except discord.HTTPException:
        logger.exception("Failed to reply to message (message=%s)", getattr(message, "id", "?"))
        return False


__all__ = [
    "Outcome",
    # strings
    "DENIED_SLASH",
    "DENIED_LEGACY",
    "PANEL_POSTED_SLASH",
    "PANEL_FAILED_SLASH",
    "PANEL_POSTED_LEGACY",
    "PANEL_FAILED_LEGACY",
    "GUILD_ONLY",
    # primitives
    "can_manage_messages",
    # replies
    "safe_followup",
    "safe_message_reply",
]

"""
Connect link for the "Let's go!" button.

The member's session state travels inside the OAuth `state` query parameter;
nothing is stored here. The callback that consumes it is a separate service.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional
from urllib.parse import quote

import discord

from .commands.shared import GUILD_ONLY, Outcome

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger(__name__)

INSTRUCTIONS_COLOR = discord.Colour(0xE74C3C)
INSTRUCTIONS_TITLE = "Please read instructions carefully before connecting"
DEFAULT_COMMUNITY = "Your Community"

# Same unreserved set as JavaScript's encodeURIComponent
_COMPONENT_SAFE = "-_.!~*'()"


def _asset_key(asset: Any) -> str:
    """Avatar/icon hash, or "" when the user/guild has none."""
    if asset is None:
        return ""
    return str(getattr(asset, "key", "") or "")


@dataclass(frozen=True)
class VerificationState:
    user_id: str
    guild_id: str
    guild_name: str
    user_name: str
    user_avatar_hash: str = ""
    server_avatar_hash: str = ""

    @classmethod
    def from_interaction(cls, interaction: "discord.Interaction") -> "VerificationState":
        user = interaction.user
        guild = interaction.guild
        return cls(
            user_id=str(user.id),
            guild_id=str(guild.id),
            guild_name=guild.name or "",
            user_name=user.name,
            user_avatar_hash=_asset_key(getattr(user, "avatar", None)),
            server_avatar_hash=_asset_key(getattr(guild, "icon", None)),
        )

    def to_json(self) -> str:
        return json.dumps(asdict(self), separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class IssuedLink:
    state: VerificationState
    url: str
    embed: discord.Embed


def encode_component(value: str) -> str:
    return quote(value, safe=_COMPONENT_SAFE)


def build_authorize_url(settings: "Settings", state: VerificationState) -> str:
    base = settings.authorize_url.rstrip("?")
    return (
        f"{base}?"
        f"client_id={encode_component(settings.client_id)}&"
        f"redirect_uri={encode_component(settings.redirect_uri)}&"
        "response_type=code&"
        "scope=identify&"
        f"state={encode_component(state.to_json())}"
    )


def iso_timestamp(now: Optional[datetime] = None) -> str:
    """UTC ISO-8601 with milliseconds and a Z suffix, e.g. 2026-10-18T09:30:00.000Z"""
    dt = now or datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_signing_message(
    brand: str,
    community: str,
    user_tag: str,
    interaction_id: Any,
    timestamp: str,
) -> str:
    return (
        f"{brand} asks you to sign this message for the purpose of verifying your account ownership. "
        "This is READ-ONLY access and will NOT trigger any blockchain transactions or incur any fees.\n\n"
        f"- Community: {community}\n"
        f"- User: {user_tag}\n"
        f"- Discord Interaction: {interaction_id}\n"
        f"- Timestamp: {timestamp}\n"
    )


def build_instructions_embed(guild_id: Any, member_id: Any, signing_message: str) -> discord.Embed:
    # TODO: drop "(valid for 5 minutes)" or embed an expiry in the state once the callback enforces one
    description = (
        "Use this custom link to connect (valid for 5 minutes)\n\n"
        f"**Guild:** {guild_id} | **Member:** {member_id}\n\n"
        "You should expect to sign the following message when prompted:\n\n"
        f"```{signing_message}\n```"
        "**Make sure you sign the EXACT message and NEVER share your seed phrase or private key.**"
    )
    return discord.Embed(title=INSTRUCTIONS_TITLE, description=description, colour=INSTRUCTIONS_COLOR)


def build_connect_view(url: str) -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(discord.ui.Button(style=discord.ButtonStyle.link, label="Connect Wallet", url=url))
    return view


def prepare_link(
    interaction: "discord.Interaction",
    settings: "Settings",
    now: Optional[datetime] = None,
) -> IssuedLink:
    """
    Pure part of the button flow: state, authorize URL and instructions embed.
    Requires interaction.guild.
    """
    guild = interaction.guild
    user = interaction.user

    state = VerificationState.from_interaction(interaction)
    url = build_authorize_url(settings, state)

    signing = build_signing_message(
        brand=settings.brand_name,
        community=guild.name or DEFAULT_COMMUNITY,
        user_tag=str(user),
        interaction_id=interaction.id,
        timestamp=iso_timestamp(now),
    )
    embed = build_instructions_embed(guild.id, user.id, signing)
    return IssuedLink(state=state, url=url, embed=embed)


async def handle_letsgo(interaction: "discord.Interaction", settings: "Settings") -> Outcome:
    """
    "Let's go!" button: reply privately with the instructions and a Connect Wallet link.
    """
    if interaction.guild is None:
        try:
            await interaction.response.send_message(GUILD_ONLY, ephemeral=True)
        except discord.HTTPException:
            logger.exception("Failed to reply to out-of-guild button click (interaction=%s)", interaction.id)
            return Outcome.TRANSPORT_ERROR
        return Outcome.UNSUPPORTED_CHANNEL

    try:
        await interaction.response.defer(ephemeral=True, thinking=True)

        # Timestamp is taken at reply time, after the defer round-trip
        link = prepare_link(interaction, settings)
        await interaction.followup.send(embed=link.embed, view=build_connect_view(link.url), ephemeral=True)
    except discord.HTTPException:
        logger.exception(
            "Failed to send connect link (guild=%s member=%s interaction=%s)",
            interaction.guild.id,
            interaction.user.id,
            interaction.id,
        )
        return Outcome.TRANSPORT_ERROR

    logger.info("Connect link issued (guild=%s member=%s)", interaction.guild.id, interaction.user.id)
    return Outcome.OK


__all__ = [
    "VerificationState",
    "IssuedLink",
    "encode_component",
    "build_authorize_url",
    "iso_timestamp",
    "build_signing_message",
    "build_instructions_embed",
    "build_connect_view",
    "prepare_link",
    "handle_letsgo",
]

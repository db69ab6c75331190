from __future__ import annotations

import logging
from typing import Optional

import discord
from discord import app_commands
from pydantic import ValidationError

from .commands import register_all, sync_commands
from .commands.verify import handle_verify_message
from .config import ConfigError, Settings
from .dispatch import dispatch_component

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_intents(settings: Settings) -> discord.Intents:
    intents = discord.Intents.default()
    intents.guilds = True
    intents.guild_messages = True

    # Needed only for the legacy `!verify` text trigger (privileged intent)
    if settings.legacy_prefix_enabled:
        intents.message_content = True

    return intents


class VerifyBot(discord.Client):
    """
    Wallet verification bot.

    Notes:
    - Settings are passed in once and shared read-only with every handler.
    - Slash commands live on self.tree; buttons are routed by custom_id (dispatch.py).
    - Handlers never raise into discord.py; they log and return an Outcome.
    """

    def __init__(self, settings: Settings) -> None:
        super().__init__(intents=build_intents(settings))
        self.settings = settings
        self.tree = app_commands.CommandTree(self)
        self._commands_synced = False

    async def setup_hook(self) -> None:
        register_all(self, self.tree)

    async def on_ready(self) -> None:
        logger.info(
            "VerifyBot ready as %s (sync=%s, legacy_prefix=%s)",
            str(self.user),
            self.settings.sync_scope,
            self.settings.legacy_prefix if self.settings.legacy_prefix_enabled else "OFF",
        )

        # on_ready fires again after reconnects; sync once per process
        if self._commands_synced:
            return
        self._commands_synced = True
        await sync_commands(self.tree, self.settings.guild_id)

    async def on_message(self, message: discord.Message) -> None:
        if not self.settings.legacy_prefix_enabled:
            return
        await handle_verify_message(message, self.settings)

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        # Application commands are handled by self.tree
        if interaction.type is not discord.InteractionType.component:
            return
        await dispatch_component(interaction, self.settings)


# ---------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------

def run_bot(settings: Optional[Settings] = None) -> None:
    if settings is None:
        try:
            settings = Settings()
        except ValidationError as e:
            raise ConfigError(f"Invalid bot configuration: {e}") from e

    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO), format=LOG_FORMAT)
    settings.validate_for_boot()

    bot = VerifyBot(settings)
    # Root logging is configured above; keep discord.py from adding a second handler.
    bot.run(settings.discord_token, log_handler=None)


if __name__ == "__main__":
    run_bot()

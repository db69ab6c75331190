"""
Component (button) routing by custom_id.

Buttons are matched here rather than through discord.ui.View callbacks so that
panels posted before a restart keep working.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Dict, Optional

from .commands.shared import Outcome
from .oauth import handle_letsgo
from .panel import LETSGO_CUSTOM_ID

if TYPE_CHECKING:
    import discord

    from .config import Settings

logger = logging.getLogger(__name__)

ComponentHandler = Callable[["discord.Interaction", "Settings"], Awaitable[Outcome]]

COMPONENT_HANDLERS: Dict[str, ComponentHandler] = {
    LETSGO_CUSTOM_ID: handle_letsgo,
}


def component_custom_id(interaction: "discord.Interaction") -> Optional[str]:
    data = getattr(interaction, "data", None) or {}
    custom_id = data.get("custom_id") if isinstance(data, dict) else None
    return custom_id if isinstance(custom_id, str) and custom_id else None


async def dispatch_component(interaction: "discord.Interaction", settings: "Settings") -> Outcome:
    custom_id = component_custom_id(interaction)
    if custom_id is None:
        return Outcome.IGNORED

    handler = COMPONENT_HANDLERS.get(custom_id)
    if handler is None:
        # Another bot feature (or a stale message) owns this component.
        logger.debug("No handler for component custom_id=%s", custom_id)
        return Outcome.IGNORED

    return await handler(interaction, settings)


__all__ = ["COMPONENT_HANDLERS", "component_custom_id", "dispatch_component"]

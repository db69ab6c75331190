from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

import verify_bot.bot as bot_module
import verify_bot.commands.core as core_commands
import verify_bot.commands.verify as verify_commands
from verify_bot.bot import VerifyBot, build_intents
from verify_bot.commands import register_all, sync_commands
from verify_bot.commands.core import status_message
from verify_bot.commands.shared import Outcome
from verify_bot.dispatch import COMPONENT_HANDLERS, component_custom_id, dispatch_component

from conftest import make_interaction, make_message, make_settings


# -----------------------------
# Command registration / sync
# -----------------------------

def _fake_tree(sync_error=None):
    tree = MagicMock()
    tree.sync = AsyncMock(return_value=[object()], side_effect=sync_error)
    return tree


def test_sync_to_guild_when_configured():
    tree = _fake_tree()

    assert asyncio.run(sync_commands(tree, 123456789)) is True

    tree.copy_global_to.assert_called_once()
    assert tree.copy_global_to.call_args.kwargs["guild"].id == 123456789
    assert tree.sync.await_args.kwargs["guild"].id == 123456789


def test_sync_globally_without_guild():
    tree = _fake_tree()

    assert asyncio.run(sync_commands(tree, None)) is True

    tree.copy_global_to.assert_not_called()
    tree.sync.assert_awaited_once_with()


def test_sync_failure_is_logged_not_raised(caplog):
    tree = _fake_tree(sync_error=RuntimeError("401 Unauthorized"))

    assert asyncio.run(sync_commands(tree, None)) is False
    assert "Slash command sync failed" in caplog.text


def test_register_all_adds_verify_and_ping():
    bot = VerifyBot(make_settings())

    register_all(bot, bot.tree)

    verify = bot.tree.get_command("verify")
    assert verify is not None
    assert verify.default_permissions.manage_messages is True
    assert bot.tree.get_command("ping") is not None


def test_register_all_fails_closed_when_verify_cannot_register(monkeypatch):
    def _broken(bot, tree):
        raise ValueError("duplicate command")

    monkeypatch.setattr(verify_commands, "register", _broken)
    bot = VerifyBot(make_settings())

    with pytest.raises(RuntimeError, match="/verify could not be registered"):
        register_all(bot, bot.tree)


def test_register_all_survives_ping_failure(monkeypatch, caplog):
    def _broken(bot, tree):
        raise ValueError("duplicate command")

    monkeypatch.setattr(core_commands, "register", _broken)
    bot = VerifyBot(make_settings())

    register_all(bot, bot.tree)

    assert bot.tree.get_command("verify") is not None
    assert bot.tree.get_command("ping") is None
    assert "/ping registration failed" in caplog.text


def test_on_ready_syncs_once(monkeypatch):
    sync = AsyncMock(return_value=True)
    monkeypatch.setattr(bot_module, "sync_commands", sync)
    bot = VerifyBot(make_settings(guild_id=42))

    async def _reconnects():
        await bot.on_ready()
        await bot.on_ready()

    asyncio.run(_reconnects())

    sync.assert_awaited_once_with(bot.tree, 42)


# -----------------------------
# Event wiring
# -----------------------------

def test_intents_follow_legacy_prefix_flag():
    assert build_intents(make_settings()).message_content is True
    assert build_intents(make_settings(legacy_prefix_enabled=False)).message_content is False
    assert build_intents(make_settings()).guilds is True


def test_on_message_routes_legacy_prefix():
    bot = VerifyBot(make_settings())
    message = make_message()

    asyncio.run(bot.on_message(message))

    message.channel.send.assert_awaited_once()


def test_on_message_ignored_when_legacy_disabled():
    bot = VerifyBot(make_settings(legacy_prefix_enabled=False))
    message = make_message()

    asyncio.run(bot.on_message(message))

    message.channel.send.assert_not_awaited()
    message.reply.assert_not_awaited()


def test_on_interaction_leaves_app_commands_to_tree():
    bot = VerifyBot(make_settings())
    interaction = make_interaction()

    asyncio.run(bot.on_interaction(interaction))

    interaction.response.defer.assert_not_awaited()
    interaction.response.send_message.assert_not_awaited()


def test_on_interaction_routes_letsgo_button():
    bot = VerifyBot(make_settings())
    interaction = make_interaction(custom_id="verify_letsgo")

    asyncio.run(bot.on_interaction(interaction))

    interaction.followup.send.assert_awaited_once()


# -----------------------------
# Dispatch table
# -----------------------------

def test_dispatch_table_contents():
    assert set(COMPONENT_HANDLERS) == {"verify_letsgo"}


def test_dispatch_unknown_or_missing_custom_id_is_ignored():
    unknown = make_interaction(custom_id="someone_elses_button")
    missing = make_interaction()

    assert asyncio.run(dispatch_component(unknown, make_settings())) is Outcome.IGNORED
    assert asyncio.run(dispatch_component(missing, make_settings())) is Outcome.IGNORED
    assert component_custom_id(missing) is None
    unknown.response.defer.assert_not_awaited()


def test_dispatch_letsgo():
    interaction = make_interaction(custom_id="verify_letsgo")

    assert asyncio.run(dispatch_component(interaction, make_settings())) is Outcome.OK


def test_status_message():
    assert "Command sync: guild=42" in status_message(make_settings(guild_id=42))
    assert "Command sync: global" in status_message(make_settings())
    assert "Legacy prefix: OFF" in status_message(make_settings(legacy_prefix_enabled=False))


def test_interaction_type_fixture_sanity():
    # on_interaction relies on the component type to route buttons
    assert make_interaction(custom_id="x").type is discord.InteractionType.component

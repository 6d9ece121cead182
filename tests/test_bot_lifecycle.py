"""
Unit Tests for Bot Lifecycle

Tests for src/roommates_helper/infrastructure/discord/bot.py covering:

1. TestBotInitialization: intents, prefix, owners, container wiring
2. TestSetupHook: container initialization, cog loading, error handler, sync
3. TestLoadCogs: both cogs loaded, individual failures tolerated
4. TestSyncCommands: global and test-guild sync, HTTP failures logged
5. TestLogForwarding: channel handler attached once and detached on close
6. TestAppCommandErrorHandler: ephemeral reply via response or followup
7. TestOnReady: "Listening to /play" presence
8. TestBotClose: container shutdown, errors tolerated, shutdown event
9. TestCreateBot: factory function
"""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import discord
import pytest

from roommates_helper.domain.shared.messages import DiscordUIMessages
from roommates_helper.infrastructure.discord.bot import COG_EXTENSIONS, MusicBot, create_bot
from roommates_helper.utils.logging import DiscordLogHandler


@pytest.fixture
def mock_settings():
    """Create mock settings."""
    settings = MagicMock()
    settings.discord.command_prefix = "!"
    settings.discord.owner_ids = []
    settings.discord.sync_on_startup = False
    settings.discord.test_guild_ids = []
    settings.discord.log_channel_id = None
    return settings


@pytest.fixture
def mock_container():
    container = MagicMock()
    container.initialize = AsyncMock()
    container.shutdown = AsyncMock()
    container.set_bot = MagicMock()
    return container


@pytest.fixture
def bot(mock_container, mock_settings):
    return MusicBot(container=mock_container, settings=mock_settings)


def _make_interaction(responded=False):
    interaction = MagicMock()
    interaction.command.name = "play"
    interaction.response.is_done.return_value = responded
    interaction.response.send_message = AsyncMock()
    interaction.followup.send = AsyncMock()
    return interaction


# =============================================================================
# Bot Initialization Tests
# =============================================================================


class TestBotInitialization:
    @pytest.mark.asyncio
    async def test_init_sets_intents(self, bot):
        assert bot.intents.voice_states is True
        assert bot.intents.guilds is True
        assert bot.intents.message_content is False

    @pytest.mark.asyncio
    async def test_init_sets_command_prefix(self, mock_container, mock_settings):
        mock_settings.discord.command_prefix = "?"
        bot = MusicBot(container=mock_container, settings=mock_settings)

        assert bot.command_prefix == "?"

    @pytest.mark.asyncio
    async def test_init_disables_default_help(self, bot):
        assert bot.help_command is None

    @pytest.mark.asyncio
    async def test_init_sets_owner_ids(self, mock_container, mock_settings):
        mock_settings.discord.owner_ids = [42, 43]
        bot = MusicBot(container=mock_container, settings=mock_settings)

        assert bot.owner_ids == {42, 43}

    @pytest.mark.asyncio
    async def test_init_wires_container(self, bot, mock_container, mock_settings):
        assert bot.container is mock_container
        assert bot.settings is mock_settings
        mock_container.set_bot.assert_called_once_with(bot)
        assert isinstance(bot._shutdown_event, asyncio.Event)
        assert not bot._shutdown_event.is_set()
        assert bot.log_handler is None


# =============================================================================
# Setup Hook Tests
# =============================================================================


class TestSetupHook:
    @pytest.mark.asyncio
    async def test_setup_hook_initializes_and_loads(self, bot, mock_container):
        with patch.object(bot, "_load_cogs", new_callable=AsyncMock) as load:
            await bot.setup_hook()

        mock_container.initialize.assert_awaited_once()
        load.assert_awaited_once()
        assert bot.tree.on_error == bot._on_app_command_error

    @pytest.mark.asyncio
    async def test_setup_hook_syncs_when_enabled(self, bot, mock_settings):
        mock_settings.discord.sync_on_startup = True

        with patch.object(bot, "_load_cogs", new_callable=AsyncMock):
            with patch.object(bot, "_sync_commands", new_callable=AsyncMock) as sync:
                await bot.setup_hook()

        sync.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_setup_hook_skips_sync_when_disabled(self, bot):
        with patch.object(bot, "_load_cogs", new_callable=AsyncMock):
            with patch.object(bot, "_sync_commands", new_callable=AsyncMock) as sync:
                await bot.setup_hook()

        sync.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_setup_hook_propagates_container_error(self, bot, mock_container):
        mock_container.initialize.side_effect = RuntimeError("boom")

        with patch.object(bot, "_load_cogs", new_callable=AsyncMock) as load:
            with pytest.raises(RuntimeError):
                await bot.setup_hook()

        load.assert_not_awaited()


# =============================================================================
# Cog Loading Tests
# =============================================================================


class TestLoadCogs:
    @pytest.mark.asyncio
    async def test_load_cogs_loads_all_cogs(self, bot):
        with patch.object(bot, "load_extension", new_callable=AsyncMock) as mock_load:
            await bot._load_cogs()

        assert mock_load.call_count == 2
        mock_load.assert_any_call("roommates_helper.infrastructure.discord.cogs.music_cog")
        mock_load.assert_any_call("roommates_helper.infrastructure.discord.cogs.event_cog")

    @pytest.mark.asyncio
    async def test_load_cogs_handles_individual_failure(self, bot):
        async def load_side_effect(cog_name):
            if "music_cog" in cog_name:
                raise Exception("Music cog failed")

        with patch.object(
            bot, "load_extension", new_callable=AsyncMock, side_effect=load_side_effect
        ) as mock_load:
            await bot._load_cogs()

        assert mock_load.call_count == len(COG_EXTENSIONS)


# =============================================================================
# Command Sync Tests
# =============================================================================


class TestSyncCommands:
    @pytest.mark.asyncio
    async def test_sync_commands_global(self, bot):
        with patch.object(
            bot.tree, "sync", new_callable=AsyncMock, return_value=[MagicMock(), MagicMock()]
        ) as mock_sync:
            await bot._sync_commands()

        mock_sync.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_sync_commands_test_guilds(self, bot, mock_settings):
        mock_settings.discord.test_guild_ids = [111111, 222222]

        with patch.object(bot.tree, "copy_global_to") as copy_global:
            with patch.object(
                bot.tree, "sync", new_callable=AsyncMock, return_value=[MagicMock()]
            ) as mock_sync:
                await bot._sync_commands()

        assert copy_global.call_count == 2
        assert mock_sync.call_count == 3

    @pytest.mark.asyncio
    async def test_sync_commands_handles_errors(self, bot, mock_settings):
        mock_settings.discord.test_guild_ids = [111111]
        error = discord.HTTPException(MagicMock(status=500, reason="Server Error"), "sync failed")

        with patch.object(bot.tree, "copy_global_to"):
            with patch.object(
                bot.tree, "sync", new_callable=AsyncMock, side_effect=error
            ) as mock_sync:
                await bot._sync_commands()

        assert mock_sync.call_count == 2


# =============================================================================
# Log Forwarding Tests
# =============================================================================


class TestLogForwarding:
    @pytest.mark.asyncio
    async def test_no_channel_configured(self, bot):
        bot._attach_log_handler()
        assert bot.log_handler is None

    @pytest.mark.asyncio
    async def test_attach_and_detach(self, bot, mock_settings):
        mock_settings.discord.log_channel_id = 555
        root = logging.getLogger()

        bot._attach_log_handler()
        handler = bot.log_handler
        try:
            assert isinstance(handler, DiscordLogHandler)
            assert handler.channel_id == 555
            assert handler in root.handlers

            bot._attach_log_handler()
            assert bot.log_handler is handler
        finally:
            bot._detach_log_handler()

        assert bot.log_handler is None
        assert handler not in root.handlers

    @pytest.mark.asyncio
    async def test_close_detaches_handler(self, bot, mock_settings):
        mock_settings.discord.log_channel_id = 555
        bot._attach_log_handler()
        handler = bot.log_handler

        await bot.close()

        assert bot.log_handler is None
        assert handler not in logging.getLogger().handlers


# =============================================================================
# App Command Error Handler Tests
# =============================================================================


class TestAppCommandErrorHandler:
    @pytest.mark.asyncio
    async def test_error_handler_sends_ephemeral_response(self, bot):
        interaction = _make_interaction()

        await bot._on_app_command_error(interaction, MagicMock())

        interaction.response.send_message.assert_awaited_once_with(
            DiscordUIMessages.ERROR_COMMAND_FAILED, ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_error_handler_uses_followup_when_responded(self, bot):
        interaction = _make_interaction(responded=True)

        await bot._on_app_command_error(interaction, MagicMock())

        interaction.followup.send.assert_awaited_once_with(
            DiscordUIMessages.ERROR_COMMAND_FAILED, ephemeral=True
        )
        interaction.response.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_error_handler_logs_original_error(self, bot, caplog):
        interaction = _make_interaction()
        error = MagicMock()
        error.original = ValueError("root cause")

        with caplog.at_level(logging.ERROR):
            await bot._on_app_command_error(interaction, error)

        record = next(r for r in caplog.records if r.exc_info)
        assert record.exc_info[1] is error.original

    @pytest.mark.asyncio
    async def test_error_handler_handles_send_failure(self, bot):
        interaction = _make_interaction()
        interaction.response.send_message.side_effect = discord.HTTPException(
            MagicMock(status=404, reason="Not Found"), "Unknown interaction"
        )

        await bot._on_app_command_error(interaction, MagicMock())


# =============================================================================
# On Ready Handler Tests
# =============================================================================


class TestOnReady:
    @pytest.mark.asyncio
    async def test_on_ready_sets_presence(self, bot):
        mock_user = MagicMock()
        mock_user.id = 123456789

        with patch.object(type(bot), "user", PropertyMock(return_value=mock_user)):
            with patch.object(
                type(bot), "guilds", PropertyMock(return_value=[MagicMock(), MagicMock()])
            ):
                with patch.object(bot, "change_presence", new_callable=AsyncMock) as mock_change:
                    await bot.on_ready()

        activity = mock_change.call_args.kwargs["activity"]
        assert activity.type == discord.ActivityType.listening
        assert activity.name == "/play"


# =============================================================================
# Close/Shutdown Tests
# =============================================================================


class TestBotClose:
    @pytest.mark.asyncio
    async def test_close_shuts_down_container(self, bot, mock_container):
        await bot.close()

        mock_container.shutdown.assert_awaited_once()
        assert bot._shutdown_event.is_set()

    @pytest.mark.asyncio
    async def test_close_handles_container_shutdown_error(self, bot, mock_container):
        mock_container.shutdown.side_effect = Exception("Shutdown failed")

        await bot.close()

        assert bot._shutdown_event.is_set()


# =============================================================================
# Factory Function Tests
# =============================================================================


class TestCreateBot:
    def test_create_bot_passes_arguments(self, mock_container, mock_settings):
        bot = create_bot(container=mock_container, settings=mock_settings)

        assert isinstance(bot, MusicBot)
        assert bot.container is mock_container
        assert bot.settings is mock_settings

"""
Voice Adapter Tests

Tests for DiscordVoiceAdapter (joining, moving, error paths) and
DiscordVoiceTransport (session binding, disconnect signals, reconnect wait).
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from roommates_helper.domain.music.value_objects import LifecycleSignal
from roommates_helper.domain.shared.exceptions import InvalidOperationError, VoiceConnectionError
from roommates_helper.infrastructure.audio.ffmpeg_player import FFmpegPlaybackSession
from roommates_helper.infrastructure.discord.adapters import voice_adapter as voice_adapter_module
from roommates_helper.infrastructure.discord.adapters.voice_adapter import (
    DiscordVoiceAdapter,
    DiscordVoiceTransport,
)

from conftest import GUILD_ID, VOICE_CHANNEL_ID

OTHER_CHANNEL_ID = 666666666666666666


def make_voice_client(channel_id=VOICE_CHANNEL_ID, connected=True):
    vc = MagicMock(spec=discord.VoiceClient)
    vc.is_connected.return_value = connected
    vc.channel = MagicMock()
    vc.channel.id = channel_id
    return vc


def make_channel(channel_id, voice_client=None):
    channel = MagicMock(spec=discord.VoiceChannel)
    channel.id = channel_id
    channel.connect = AsyncMock(return_value=voice_client or make_voice_client(channel_id))
    return channel


@pytest.fixture
def channels():
    return {
        VOICE_CHANNEL_ID: make_channel(VOICE_CHANNEL_ID),
        OTHER_CHANNEL_ID: make_channel(OTHER_CHANNEL_ID),
    }


@pytest.fixture
def mock_guild(channels):
    guild = MagicMock()
    guild.id = GUILD_ID
    guild.voice_client = None
    guild.get_channel.side_effect = channels.get
    return guild


@pytest.fixture
def mock_bot(mock_guild):
    bot = MagicMock()
    bot.get_guild.side_effect = lambda gid: mock_guild if gid == GUILD_ID else None
    return bot


@pytest.fixture
def adapter(mock_bot):
    return DiscordVoiceAdapter(mock_bot, connect_timeout=0.2)


# =============================================================================
# DiscordVoiceAdapter
# =============================================================================


class TestVoiceAdapterConnect:
    """Tests for joining voice channels."""

    @pytest.mark.asyncio
    async def test_connect_joins_self_deafened(self, adapter, channels):
        transport = await adapter.connect(GUILD_ID, VOICE_CHANNEL_ID)

        channels[VOICE_CHANNEL_ID].connect.assert_awaited_once_with(self_deaf=True)
        assert transport.guild_id == GUILD_ID
        assert transport.is_connected
        assert adapter.get_transport(GUILD_ID) is transport

    @pytest.mark.asyncio
    async def test_connect_reuses_live_transport(self, adapter, channels):
        first = await adapter.connect(GUILD_ID, VOICE_CHANNEL_ID)
        second = await adapter.connect(GUILD_ID, VOICE_CHANNEL_ID)

        assert first is second
        channels[VOICE_CHANNEL_ID].connect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_connect_moves_live_transport(self, adapter, channels):
        transport = await adapter.connect(GUILD_ID, VOICE_CHANNEL_ID)

        moved = await adapter.connect(GUILD_ID, OTHER_CHANNEL_ID)

        assert moved is transport
        transport.voice_client.move_to.assert_awaited_once_with(channels[OTHER_CHANNEL_ID])

    @pytest.mark.asyncio
    async def test_connect_adopts_existing_voice_client(self, adapter, mock_guild, channels):
        vc = make_voice_client(OTHER_CHANNEL_ID)
        mock_guild.voice_client = vc

        transport = await adapter.connect(GUILD_ID, VOICE_CHANNEL_ID)

        vc.move_to.assert_awaited_once_with(channels[VOICE_CHANNEL_ID])
        channels[VOICE_CHANNEL_ID].connect.assert_not_awaited()
        assert transport.voice_client is vc

    @pytest.mark.asyncio
    async def test_unknown_guild(self, adapter):
        with pytest.raises(VoiceConnectionError):
            await adapter.connect(999, VOICE_CHANNEL_ID)

    @pytest.mark.asyncio
    async def test_channel_not_voice(self, adapter, mock_guild):
        mock_guild.get_channel.side_effect = lambda cid: MagicMock(spec=discord.TextChannel)
        with pytest.raises(VoiceConnectionError):
            await adapter.connect(GUILD_ID, VOICE_CHANNEL_ID)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            discord.ClientException("Already connected to a voice channel."),
            discord.Forbidden(MagicMock(status=403, reason="Forbidden"), "Missing Permissions"),
        ],
    )
    async def test_connect_errors_become_voice_connection_error(self, adapter, channels, error):
        channels[VOICE_CHANNEL_ID].connect.side_effect = error

        with pytest.raises(VoiceConnectionError):
            await adapter.connect(GUILD_ID, VOICE_CHANNEL_ID)
        assert adapter.get_transport(GUILD_ID) is None

    @pytest.mark.asyncio
    async def test_connect_timeout(self, adapter, channels):
        async def hang(**kwargs):
            await asyncio.sleep(5)

        channels[VOICE_CHANNEL_ID].connect.side_effect = hang

        with pytest.raises(VoiceConnectionError):
            await adapter.connect(GUILD_ID, VOICE_CHANNEL_ID)

    def test_create_session(self, adapter):
        session = adapter.create_session(GUILD_ID)
        assert isinstance(session, FFmpegPlaybackSession)
        assert session.guild_id == GUILD_ID


class TestVoiceAdapterRegistry:
    @pytest.mark.asyncio
    async def test_disconnect_forgets_transport(self, adapter):
        transport = await adapter.connect(GUILD_ID, VOICE_CHANNEL_ID)

        await transport.disconnect()

        assert adapter.get_transport(GUILD_ID) is None

    @pytest.mark.asyncio
    async def test_notify_disconnected_forwards_signal(self, adapter):
        transport = await adapter.connect(GUILD_ID, VOICE_CHANNEL_ID)
        events = []
        transport.subscribe(events.append)

        assert adapter.notify_disconnected(GUILD_ID) is True
        assert [e.signal for e in events] == [LifecycleSignal.DISCONNECTED]

    def test_notify_disconnected_unknown_guild(self, adapter):
        assert adapter.notify_disconnected(GUILD_ID) is False


# =============================================================================
# DiscordVoiceTransport
# =============================================================================


class TestVoiceTransport:
    def test_attach_binds_ffmpeg_session(self):
        vc = make_voice_client()
        transport = DiscordVoiceTransport(GUILD_ID, vc)
        session = FFmpegPlaybackSession(GUILD_ID)

        transport.attach(session)

        assert session._voice_client is vc

    def test_attach_twice_raises(self):
        transport = DiscordVoiceTransport(GUILD_ID, make_voice_client())
        transport.attach(FFmpegPlaybackSession(GUILD_ID))

        with pytest.raises(InvalidOperationError):
            transport.attach(FFmpegPlaybackSession(GUILD_ID))

    def test_channel_id(self):
        transport = DiscordVoiceTransport(GUILD_ID, make_voice_client(OTHER_CHANNEL_ID))
        assert transport.channel_id == OTHER_CHANNEL_ID

    @pytest.mark.asyncio
    async def test_disconnect_is_idempotent(self):
        vc = make_voice_client()
        on_closed = MagicMock()
        transport = DiscordVoiceTransport(GUILD_ID, vc, on_closed=on_closed)

        await transport.disconnect()
        await transport.disconnect()

        vc.disconnect.assert_awaited_once_with(force=True)
        on_closed.assert_called_once_with(GUILD_ID)
        assert transport.is_closed
        assert not transport.is_connected

    @pytest.mark.asyncio
    async def test_disconnect_failure_still_closes(self):
        vc = make_voice_client()
        vc.disconnect.side_effect = discord.ClientException("not connected")
        on_closed = MagicMock()
        transport = DiscordVoiceTransport(GUILD_ID, vc, on_closed=on_closed)

        await transport.disconnect()

        on_closed.assert_called_once_with(GUILD_ID)
        assert transport.is_closed

    @pytest.mark.asyncio
    async def test_closed_transport_stays_silent(self):
        transport = DiscordVoiceTransport(GUILD_ID, make_voice_client())
        events = []
        transport.subscribe(events.append)
        await transport.disconnect()

        transport.notify_disconnected()

        assert events == []

    @pytest.mark.asyncio
    async def test_wait_until_connected_already_connected(self):
        transport = DiscordVoiceTransport(GUILD_ID, make_voice_client())
        assert await transport.wait_until_connected(0.1) is True

    @pytest.mark.asyncio
    async def test_wait_until_connected_recovers(self, monkeypatch):
        monkeypatch.setattr(voice_adapter_module, "RECONNECT_POLL_INTERVAL", 0.01)
        vc = make_voice_client(connected=False)
        vc.is_connected.side_effect = [False, False, True]
        transport = DiscordVoiceTransport(GUILD_ID, vc)

        assert await transport.wait_until_connected(1.0) is True

    @pytest.mark.asyncio
    async def test_wait_until_connected_times_out(self, monkeypatch):
        monkeypatch.setattr(voice_adapter_module, "RECONNECT_POLL_INTERVAL", 0.01)
        transport = DiscordVoiceTransport(GUILD_ID, make_voice_client(connected=False))

        assert await transport.wait_until_connected(0.05) is False

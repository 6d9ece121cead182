"""Discord voice adapter: connects to voice channels and hands out transports."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

import discord

from roommates_helper.application.interfaces.voice_adapter import (
    PlaybackSession,
    SignalListener,
    VoiceAdapter,
    VoiceTransport,
)
from roommates_helper.domain.music.value_objects import LifecycleSignal, PlayerEvent
from roommates_helper.domain.shared.constants import TimeConstants
from roommates_helper.domain.shared.exceptions import InvalidOperationError, VoiceConnectionError
from roommates_helper.domain.shared.messages import ErrorMessages, LogTemplates
from roommates_helper.infrastructure.audio.ffmpeg_player import FFmpegConfig, FFmpegPlaybackSession

logger = logging.getLogger(__name__)

RECONNECT_POLL_INTERVAL: float = 0.25


class DiscordVoiceTransport(VoiceTransport):
    """Wraps one guild's ``discord.VoiceClient``."""

    def __init__(
        self,
        guild_id: int,
        voice_client: discord.VoiceClient,
        *,
        on_closed: Callable[[int], None] | None = None,
    ) -> None:
        self._guild_id = guild_id
        self._voice_client = voice_client
        self._on_closed = on_closed
        self._listener: SignalListener | None = None
        self._session: PlaybackSession | None = None
        self._closed = False

    @property
    def guild_id(self) -> int:
        return self._guild_id

    @property
    def voice_client(self) -> discord.VoiceClient:
        return self._voice_client

    @property
    def channel_id(self) -> int | None:
        channel = self._voice_client.channel
        return channel.id if channel else None

    @property
    def is_connected(self) -> bool:
        return not self._closed and self._voice_client.is_connected()

    @property
    def is_closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: SignalListener) -> None:
        self._listener = listener

    def attach(self, session: PlaybackSession) -> None:
        if self._session is not None:
            raise InvalidOperationError(
                operation="attach",
                current_state="attached",
                message=ErrorMessages.SESSION_ALREADY_ATTACHED,
            )
        if isinstance(session, FFmpegPlaybackSession):
            session.bind(self._voice_client)
        self._session = session

    def notify_disconnected(self) -> None:
        """Report that the gateway says the bot is no longer in voice."""
        if self._closed or self._listener is None:
            return
        self._listener(PlayerEvent(signal=LifecycleSignal.DISCONNECTED, guild_id=self._guild_id))

    async def wait_until_connected(self, timeout: float) -> bool:
        try:
            async with asyncio.timeout(timeout):
                while not self.is_connected:
                    if self._closed:
                        return False
                    await asyncio.sleep(RECONNECT_POLL_INTERVAL)
            return True
        except TimeoutError:
            return False

    async def disconnect(self) -> None:
        if self._closed:
            return
        self._closed = True

        try:
            await self._voice_client.disconnect(force=True)
            logger.info(LogTemplates.VOICE_DISCONNECTED, self._guild_id)
        except Exception:
            logger.exception(LogTemplates.VOICE_DISCONNECT_FAILED, self._guild_id)
        finally:
            if self._on_closed is not None:
                self._on_closed(self._guild_id)


class DiscordVoiceAdapter(VoiceAdapter):
    def __init__(
        self,
        bot: discord.Client,
        *,
        ffmpeg_config: FFmpegConfig | None = None,
        connect_timeout: float = TimeConstants.VOICE_CONNECT_TIMEOUT,
    ) -> None:
        self._bot = bot
        self._ffmpeg_config = ffmpeg_config or FFmpegConfig()
        self._connect_timeout = connect_timeout
        self._transports: dict[int, DiscordVoiceTransport] = {}

    def _get_voice_client(self, guild: discord.Guild) -> discord.VoiceClient | None:
        vc = guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    async def connect(self, guild_id: int, channel_id: int) -> DiscordVoiceTransport:
        guild = self._bot.get_guild(guild_id)
        channel = guild.get_channel(channel_id) if guild else None
        if guild is None or not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            logger.warning(LogTemplates.VOICE_CHANNEL_NOT_FOUND, channel_id, guild_id)
            raise VoiceConnectionError(guild_id, channel_id)

        existing = self._transports.get(guild_id)
        if existing is not None and existing.is_connected:
            if existing.channel_id != channel_id:
                await self._move(existing.voice_client, channel, guild_id)
            return existing

        try:
            vc = self._get_voice_client(guild)
            async with asyncio.timeout(self._connect_timeout):
                if vc is not None and vc.is_connected():
                    await vc.move_to(channel)
                else:
                    vc = await channel.connect(self_deaf=True)
        except TimeoutError as e:
            logger.error(LogTemplates.VOICE_CONNECT_TIMEOUT, channel_id, guild_id)
            raise VoiceConnectionError(guild_id, channel_id) from e
        except (discord.ClientException, discord.Forbidden) as e:
            logger.error(LogTemplates.VOICE_CONNECT_FAILED, channel_id, guild_id)
            raise VoiceConnectionError(guild_id, channel_id, str(e)) from e

        transport = DiscordVoiceTransport(guild_id, vc, on_closed=self._forget)
        self._transports[guild_id] = transport
        logger.info(LogTemplates.VOICE_CONNECTED, channel_id, guild_id)
        return transport

    async def _move(
        self,
        vc: discord.VoiceClient,
        channel: discord.VoiceChannel | discord.StageChannel,
        guild_id: int,
    ) -> None:
        try:
            async with asyncio.timeout(self._connect_timeout):
                await vc.move_to(channel)
            logger.info(LogTemplates.VOICE_MOVED, channel.id, guild_id)
        except TimeoutError as e:
            logger.error(LogTemplates.VOICE_CONNECT_TIMEOUT, channel.id, guild_id)
            raise VoiceConnectionError(guild_id, channel.id) from e

    def create_session(self, guild_id: int) -> FFmpegPlaybackSession:
        return FFmpegPlaybackSession(guild_id, self._ffmpeg_config)

    def get_transport(self, guild_id: int) -> DiscordVoiceTransport | None:
        return self._transports.get(guild_id)

    def notify_disconnected(self, guild_id: int) -> bool:
        """Forward a gateway voice disconnect to the guild's transport, if any."""
        transport = self._transports.get(guild_id)
        if transport is None:
            return False
        transport.notify_disconnected()
        return True

    def _forget(self, guild_id: int) -> None:
        self._transports.pop(guild_id, None)

"""
FFmpeg Playback Session

Plays yt-dlp stream URLs into a discord.py voice client through FFmpeg.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import discord

from roommates_helper.application.interfaces.voice_adapter import PlaybackSession, SignalListener
from roommates_helper.config.settings import AudioSettings
from roommates_helper.domain.music.value_objects import AudioStream, LifecycleSignal, PlayerEvent
from roommates_helper.domain.shared.constants import AudioConstants
from roommates_helper.domain.shared.exceptions import StreamUnavailableError
from roommates_helper.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

# Matches yt-dlp's Android client user-agent to avoid YouTube 403 responses
ANDROID_USER_AGENT = "com.google.android.youtube/19.44.38 (Linux; U; Android 14) gzip"


@dataclass
class FFmpegConfig:
    """Configuration for FFmpeg audio processing."""

    before_options: str = AudioConstants.FFMPEG_BEFORE_OPTIONS_DEFAULT
    options: str = AudioConstants.FFMPEG_OPTIONS_DEFAULT
    user_agent: str | None = ANDROID_USER_AGENT

    @classmethod
    def from_settings(cls, settings: AudioSettings) -> FFmpegConfig:
        return cls(
            before_options=settings.ffmpeg_before_options,
            options=settings.ffmpeg_options,
        )

    def get_before_options(self) -> str:
        """Get FFmpeg before_options string."""
        if not self.user_agent:
            return self.before_options
        return f'{self.before_options} -headers "User-Agent: {self.user_agent}"'.strip()

    def get_options(self) -> str:
        """Get FFmpeg options string."""
        return self.options


class FFmpegPlaybackSession(PlaybackSession):
    """One guild's player, bound to the voice client of its transport.

    discord.py calls the ``after`` hook from its audio thread; the hook is
    handed to the event loop with ``call_soon_threadsafe``. Each ``play`` and
    ``stop`` bumps a generation counter so hooks from superseded or stopped
    sources are ignored, and ENDED only ever reports a natural end.
    """

    def __init__(self, guild_id: int, config: FFmpegConfig | None = None) -> None:
        self._guild_id = guild_id
        self._config = config or FFmpegConfig()
        self._voice_client: discord.VoiceClient | None = None
        self._listener: SignalListener | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._source: discord.PCMVolumeTransformer | None = None
        self._generation = 0

    @property
    def guild_id(self) -> int:
        return self._guild_id

    def bind(self, voice_client: discord.VoiceClient) -> None:
        self._voice_client = voice_client

    def subscribe(self, listener: SignalListener) -> None:
        self._listener = listener

    def create_source(self, stream: AudioStream, volume: float) -> discord.PCMVolumeTransformer:
        """Create an FFmpeg source wrapped in a volume transformer."""
        source = discord.FFmpegPCMAudio(
            stream.source,
            before_options=self._config.get_before_options(),
            options=self._config.get_options(),
        )
        logger.debug(LogTemplates.FFMPEG_SOURCE_CREATED, stream.title or stream.source[:60])
        return discord.PCMVolumeTransformer(source, volume=volume)

    async def play(self, stream: AudioStream, volume: float) -> None:
        vc = self._voice_client
        if vc is None or not vc.is_connected():
            raise StreamUnavailableError(stream.source, ErrorMessages.SESSION_NOT_BOUND)

        self._loop = asyncio.get_running_loop()
        if vc.is_playing() or vc.is_paused():
            self.stop()

        try:
            source = self.create_source(stream, volume)
        except discord.ClientException as e:
            raise StreamUnavailableError(stream.source, str(e)) from e

        self._generation += 1
        generation = self._generation
        loop = self._loop

        def after_callback(error: Exception | None = None) -> None:
            loop.call_soon_threadsafe(self._on_source_finished, generation, error)

        try:
            vc.play(source, after=after_callback)
        except discord.ClientException as e:
            source.cleanup()
            raise StreamUnavailableError(stream.source, str(e)) from e

        self._source = source
        self._emit(LifecycleSignal.STARTED)

    def _on_source_finished(self, generation: int, error: Exception | None) -> None:
        if generation != self._generation:
            return

        self._source = None
        if error is not None:
            logger.warning(LogTemplates.FFMPEG_PLAYBACK_ERROR, self._guild_id, error)
            self._emit(LifecycleSignal.ERROR, str(error))
        else:
            self._emit(LifecycleSignal.ENDED)

    def _emit(self, signal: LifecycleSignal, error: str | None = None) -> None:
        if self._listener is not None:
            self._listener(PlayerEvent(signal=signal, guild_id=self._guild_id, error=error))

    def stop(self) -> None:
        self._generation += 1
        self._source = None
        vc = self._voice_client
        if vc is not None and (vc.is_playing() or vc.is_paused()):
            vc.stop()

    def pause(self) -> bool:
        vc = self._voice_client
        if vc is None or not vc.is_playing():
            return False
        vc.pause()
        return True

    def resume(self) -> bool:
        vc = self._voice_client
        if vc is None or not vc.is_paused():
            return False
        vc.resume()
        return True

    def set_volume(self, volume: float) -> None:
        if self._source is not None:
            self._source.volume = max(0.0, min(1.0, volume))

    @property
    def is_playing(self) -> bool:
        return self._voice_client is not None and self._voice_client.is_playing()

    @property
    def is_paused(self) -> bool:
        return self._voice_client is not None and self._voice_client.is_paused()

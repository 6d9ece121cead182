"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the resolver, voice adapter, and music manager.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.interfaces.audio_resolver import AudioResolver
    from ..application.services.music_manager import MusicManager
    from ..infrastructure.discord.adapters.voice_adapter import DiscordVoiceAdapter
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. The voice adapter
    and everything built on it need the bot, so ``set_bot`` comes first.
    """

    settings: Settings
    _bot: Bot | None = None

    # Infrastructure adapters
    _audio_resolver: AudioResolver | None = None
    _voice_adapter: DiscordVoiceAdapter | None = None

    # Application services
    _music_manager: MusicManager | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Infrastructure Adapters ===

    @property
    def audio_resolver(self) -> AudioResolver:
        """Get the audio resolver."""
        if self._audio_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver

            self._audio_resolver = YtDlpResolver(
                self.settings.audio,
                timeout=self.settings.music.resolve_timeout_seconds,
            )
        return self._audio_resolver

    @property
    def voice_adapter(self) -> DiscordVoiceAdapter:
        """Get the voice adapter."""
        if self._voice_adapter is None:
            from ..infrastructure.audio.ffmpeg_player import FFmpegConfig
            from ..infrastructure.discord.adapters.voice_adapter import DiscordVoiceAdapter

            self._voice_adapter = DiscordVoiceAdapter(
                self.bot,
                ffmpeg_config=FFmpegConfig.from_settings(self.settings.audio),
                connect_timeout=self.settings.music.connect_timeout_seconds,
            )
        return self._voice_adapter

    # === Application Services ===

    @property
    def music_manager(self) -> MusicManager:
        """Get the guild queue registry."""
        if self._music_manager is None:
            from ..application.services.music_manager import MusicManager
            from ..application.services.queue_models import QueueOptions

            self._music_manager = MusicManager(
                resolver=self.audio_resolver,
                voice_adapter=self.voice_adapter,
                options=QueueOptions.from_settings(self.settings.music),
            )
        return self._music_manager

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Build the music stack eagerly so the first command pays no setup cost."""
        _ = self.music_manager
        logger.info(LogTemplates.CONTAINER_INITIALIZED)

    async def shutdown(self) -> None:
        """Destroy every guild queue and drop cached instances."""
        if self._music_manager is not None:
            await self._music_manager.cleanup()

        self._music_manager = None
        self._voice_adapter = None
        self._audio_resolver = None
        logger.info(LogTemplates.CONTAINER_SHUTDOWN)


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)

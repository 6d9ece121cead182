"""Slash-command cog for music: play, skip, stop, pause, resume, queue, volume,
shuffle, leave, nowplaying, remove, loop."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from roommates_helper.domain.music.entities import Requester
from roommates_helper.domain.music.value_objects import LoopMode
from roommates_helper.domain.shared.constants import LimitConstants
from roommates_helper.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from roommates_helper.infrastructure.discord.adapters.notifier import TextChannelNotifier
from roommates_helper.infrastructure.discord.embeds import (
    build_now_playing_embed,
    build_queue_embed,
    build_track_added_embed,
)
from roommates_helper.infrastructure.discord.guards.voice_guards import (
    ensure_user_in_voice,
    send_ephemeral,
)
from roommates_helper.infrastructure.discord.views.now_playing_view import NowPlayingView
from roommates_helper.utils.reply import truncate

if TYPE_CHECKING:
    from ....application.services.music_manager import MusicManager
    from ....config.container import Container

logger = logging.getLogger(__name__)

LOOP_CHOICES = [
    app_commands.Choice(name="Off", value=LoopMode.NONE.value),
    app_commands.Choice(name="Track", value=LoopMode.TRACK.value),
    app_commands.Choice(name="Queue", value=LoopMode.QUEUE.value),
]


class MusicCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @property
    def manager(self) -> MusicManager:
        return self.container.music_manager

    async def _guild_id(self, interaction: discord.Interaction) -> int | None:
        if interaction.guild is None:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_SERVER_ONLY)
            return None
        logger.debug(
            LogTemplates.COMMAND_USED,
            interaction.command.name if interaction.command else "?",
            interaction.user.id,
            interaction.guild.id,
        )
        return interaction.guild.id

    # ─────────────────────────────────────────────────────────────────
    # Play
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="play", description="Play a song by URL or search query.")
    @app_commands.describe(query="YouTube URL or search query")
    async def play(self, interaction: discord.Interaction, query: str) -> None:
        voice_channel = await ensure_user_in_voice(interaction)
        if voice_channel is None:
            return

        assert interaction.guild is not None
        assert isinstance(interaction.user, discord.Member)

        await interaction.response.defer()

        member = interaction.user
        requester = Requester(user_id=member.id, display_name=member.display_name)
        notifier = TextChannelNotifier(interaction.channel)  # type: ignore[arg-type]

        result = await self.manager.play(
            guild_id=interaction.guild.id,
            voice_channel_id=voice_channel.id,
            notifier=notifier,
            query=query,
            requester=requester,
        )

        if not result.success or result.track is None:
            await interaction.followup.send(result.message, ephemeral=True)
            return

        await interaction.followup.send(
            embed=build_track_added_embed(result.track, result.position)
        )

    # ─────────────────────────────────────────────────────────────────
    # Transport controls
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="skip", description="Skip the current track.")
    async def skip(self, interaction: discord.Interaction) -> None:
        guild_id = await self._guild_id(interaction)
        if guild_id is None:
            return

        # Skipping starts the next track, which can outlast the interaction deadline
        await interaction.response.defer()
        if await self.manager.skip(guild_id):
            await interaction.followup.send(DiscordUIMessages.ACTION_SKIPPED)
        else:
            await interaction.followup.send(DiscordUIMessages.ERROR_NOTHING_TO_SKIP, ephemeral=True)

    @app_commands.command(name="stop", description="Stop playback and clear the queue.")
    async def stop(self, interaction: discord.Interaction) -> None:
        guild_id = await self._guild_id(interaction)
        if guild_id is None:
            return

        if self.manager.stop(guild_id):
            await interaction.response.send_message(DiscordUIMessages.ACTION_STOPPED)
        else:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_NOTHING_PLAYING)

    @app_commands.command(name="pause", description="Pause the current track.")
    async def pause(self, interaction: discord.Interaction) -> None:
        guild_id = await self._guild_id(interaction)
        if guild_id is None:
            return

        if self.manager.pause(guild_id):
            await interaction.response.send_message(DiscordUIMessages.ACTION_PAUSED)
        else:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_NOTHING_TO_PAUSE)

    @app_commands.command(name="resume", description="Resume the paused track.")
    async def resume(self, interaction: discord.Interaction) -> None:
        guild_id = await self._guild_id(interaction)
        if guild_id is None:
            return

        if self.manager.resume(guild_id):
            await interaction.response.send_message(DiscordUIMessages.ACTION_RESUMED)
        else:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_NOTHING_PAUSED)

    @app_commands.command(name="leave", description="Leave the voice channel and clear the queue.")
    async def leave(self, interaction: discord.Interaction) -> None:
        guild_id = await self._guild_id(interaction)
        if guild_id is None:
            return

        if await self.manager.destroy_queue(guild_id):
            await interaction.response.send_message(DiscordUIMessages.ACTION_LEFT)
        else:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_NOT_IN_VOICE_CHANNEL)

    # ─────────────────────────────────────────────────────────────────
    # Queue
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="queue", description="Show the current queue.")
    async def queue(self, interaction: discord.Interaction) -> None:
        guild_id = await self._guild_id(interaction)
        if guild_id is None:
            return

        info = self.manager.get_queue_info(guild_id)
        if info is None:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_NO_QUEUE)
            return

        embed = build_queue_embed(info, limit=self.container.settings.music.queue_page_size)
        await interaction.response.send_message(embed=embed)

    @app_commands.command(name="nowplaying", description="Show the track that is playing.")
    async def nowplaying(self, interaction: discord.Interaction) -> None:
        guild_id = await self._guild_id(interaction)
        if guild_id is None:
            return

        info = self.manager.get_queue_info(guild_id)
        if info is None or info.current_track is None:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_NOTHING_PLAYING)
            return

        view = NowPlayingView(
            guild_id=guild_id,
            manager=self.manager,
            is_paused=info.is_paused,
            timeout=self.container.settings.music.view_timeout_seconds,
        )
        embed = build_now_playing_embed(info.current_track, info.remaining, info=info)
        await interaction.response.send_message(embed=embed, view=view)
        view.set_message(await interaction.original_response())

    @app_commands.command(name="volume", description="Set the playback volume.")
    @app_commands.describe(level="Volume from 0 to 100")
    async def volume(
        self,
        interaction: discord.Interaction,
        level: app_commands.Range[
            int, LimitConstants.MIN_VOLUME_PERCENT, LimitConstants.MAX_VOLUME_PERCENT
        ],
    ) -> None:
        guild_id = await self._guild_id(interaction)
        if guild_id is None:
            return

        applied = self.manager.set_volume(guild_id, level)
        if applied is None:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_NO_QUEUE)
            return

        await interaction.response.send_message(
            DiscordUIMessages.ACTION_VOLUME_SET.format(volume=applied)
        )

    @app_commands.command(name="shuffle", description="Shuffle the upcoming tracks.")
    async def shuffle(self, interaction: discord.Interaction) -> None:
        guild_id = await self._guild_id(interaction)
        if guild_id is None:
            return

        if self.manager.get_queue(guild_id) is None:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_NO_QUEUE)
            return

        if self.manager.shuffle(guild_id):
            await interaction.response.send_message(DiscordUIMessages.ACTION_SHUFFLED)
        else:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_NOT_ENOUGH_TO_SHUFFLE)

    @app_commands.command(name="remove", description="Remove a track from the queue.")
    @app_commands.describe(position="Position in the queue (1 is the next track)")
    async def remove(self, interaction: discord.Interaction, position: int) -> None:
        guild_id = await self._guild_id(interaction)
        if guild_id is None:
            return

        if self.manager.get_queue(guild_id) is None:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_NO_QUEUE)
            return

        removed = self.manager.remove_track(guild_id, position - 1) if position >= 1 else None
        if removed is None:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_INVALID_POSITION)
            return

        await interaction.response.send_message(
            DiscordUIMessages.ACTION_TRACK_REMOVED.format(title=truncate(removed.title, 200))
        )

    @app_commands.command(name="loop", description="Set the loop mode.")
    @app_commands.describe(mode="Off, repeat the current track, or repeat the whole queue")
    @app_commands.choices(mode=LOOP_CHOICES)
    async def loop(self, interaction: discord.Interaction, mode: app_commands.Choice[str]) -> None:
        guild_id = await self._guild_id(interaction)
        if guild_id is None:
            return

        if not self.manager.set_loop_mode(guild_id, LoopMode(mode.value)):
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_NO_QUEUE)
            return

        await interaction.response.send_message(
            DiscordUIMessages.ACTION_LOOP_MODE_SET.format(mode=mode.name)
        )


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(MusicCog(bot, container))

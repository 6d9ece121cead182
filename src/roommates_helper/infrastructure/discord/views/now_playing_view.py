"""Now-playing controls: Pause/Resume, Skip, and Stop buttons."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from roommates_helper.domain.shared.constants import TimeConstants
from roommates_helper.domain.shared.messages import DiscordUIMessages, EmojiConstants, LogTemplates
from roommates_helper.infrastructure.discord.guards.voice_guards import check_user_in_voice
from roommates_helper.infrastructure.discord.views.base_view import BaseInteractiveView

if TYPE_CHECKING:
    from ....application.services.music_manager import MusicManager

logger = logging.getLogger(__name__)


class NowPlayingView(BaseInteractiveView):
    def __init__(
        self,
        *,
        guild_id: int,
        manager: MusicManager,
        is_paused: bool = False,
        timeout: float = TimeConstants.VIEW_TIMEOUT,
    ) -> None:
        super().__init__(timeout=timeout)
        self.guild_id = guild_id
        self.manager = manager
        self._set_pause_label(is_paused)

    def _set_pause_label(self, is_paused: bool) -> None:
        if is_paused:
            self.pause_button.label = DiscordUIMessages.BUTTON_RESUME
            self.pause_button.emoji = EmojiConstants.PLAY
        else:
            self.pause_button.label = DiscordUIMessages.BUTTON_PAUSE
            self.pause_button.emoji = EmojiConstants.PAUSE

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        return await check_user_in_voice(interaction, self.guild_id)

    @discord.ui.button(
        label=DiscordUIMessages.BUTTON_PAUSE,
        emoji=EmojiConstants.PAUSE,
        style=discord.ButtonStyle.primary,
    )
    async def pause_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[NowPlayingView]
    ) -> None:
        if self.manager.pause(self.guild_id):
            self._set_pause_label(True)
            message = DiscordUIMessages.ACTION_PAUSED
        elif self.manager.resume(self.guild_id):
            self._set_pause_label(False)
            message = DiscordUIMessages.ACTION_RESUMED
        else:
            await interaction.response.send_message(
                DiscordUIMessages.ERROR_NOTHING_PLAYING, ephemeral=True
            )
            return

        await interaction.response.edit_message(view=self)
        await interaction.followup.send(message, ephemeral=True)

    @discord.ui.button(
        label=DiscordUIMessages.BUTTON_SKIP,
        emoji=EmojiConstants.SKIP,
        style=discord.ButtonStyle.secondary,
    )
    async def skip_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[NowPlayingView]
    ) -> None:
        await interaction.response.defer(ephemeral=True)
        if await self.manager.skip(self.guild_id):
            await interaction.followup.send(DiscordUIMessages.ACTION_SKIPPED, ephemeral=True)
        else:
            await interaction.followup.send(DiscordUIMessages.ERROR_NOTHING_TO_SKIP, ephemeral=True)

    @discord.ui.button(
        label=DiscordUIMessages.BUTTON_STOP,
        emoji=EmojiConstants.STOP,
        style=discord.ButtonStyle.danger,
    )
    async def stop_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[NowPlayingView]
    ) -> None:
        if not self.manager.stop(self.guild_id):
            await interaction.response.send_message(
                DiscordUIMessages.ERROR_NOTHING_PLAYING, ephemeral=True
            )
            return

        logger.debug(LogTemplates.VIEW_STOPPED_PLAYBACK, self.guild_id)
        self.stop()
        self._disable_buttons()
        await interaction.response.edit_message(view=self)
        await interaction.followup.send(DiscordUIMessages.ACTION_STOPPED, ephemeral=True)

"""Notifier backed by the text channel a queue was started from."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from roommates_helper.application.interfaces.notifier import Notifier
from roommates_helper.domain.shared.messages import LogTemplates
from roommates_helper.infrastructure.discord.embeds import build_now_playing_embed

if TYPE_CHECKING:
    from discord.abc import Messageable

    from ....domain.music.entities import Track

logger = logging.getLogger(__name__)


class TextChannelNotifier(Notifier):
    def __init__(self, channel: Messageable) -> None:
        self._channel = channel

    @property
    def channel(self) -> Messageable:
        return self._channel

    async def send_text(self, text: str) -> None:
        try:
            await self._channel.send(text)
        except discord.HTTPException:
            logger.warning(LogTemplates.NOTIFY_FAILED, getattr(self._channel, "id", None))

    async def send_now_playing(self, track: Track, remaining: int) -> None:
        embed = build_now_playing_embed(track, remaining)
        try:
            await self._channel.send(embed=embed)
        except discord.HTTPException:
            logger.warning(LogTemplates.NOTIFY_FAILED, getattr(self._channel, "id", None))

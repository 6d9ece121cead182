"""Base class for interactive Discord views with common patterns."""

from __future__ import annotations

import logging

import discord

from roommates_helper.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class BaseInteractiveView(discord.ui.View):
    """Base view providing message tracking and button disabling."""

    def __init__(self, *, timeout: float | None = 180.0) -> None:
        super().__init__(timeout=timeout)
        self._message: discord.Message | None = None

    def set_message(self, message: discord.Message) -> None:
        self._message = message

    def _disable_buttons(self) -> None:
        for item in self.children:
            if isinstance(item, discord.ui.Button):
                item.disabled = True

    async def _try_edit_message(self) -> None:
        """Edit the tracked message, ignoring failures."""
        if self._message is None:
            return
        try:
            await self._message.edit(view=self)
        except discord.HTTPException:
            logger.debug(LogTemplates.VIEW_EDIT_FAILED, self._message.id)

    async def on_timeout(self) -> None:
        self._disable_buttons()
        await self._try_edit_message()

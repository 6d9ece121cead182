"""Main Discord bot class integrating the DI container, cog lifecycle, and log forwarding."""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING, Any

import discord
from discord.ext import commands

from roommates_helper.domain.shared.messages import DiscordUIMessages, LogTemplates
from roommates_helper.utils.logging import DiscordLogHandler

if TYPE_CHECKING:
    from ...config.container import Container
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

COG_EXTENSIONS = (
    "roommates_helper.infrastructure.discord.cogs.music_cog",
    "roommates_helper.infrastructure.discord.cogs.event_cog",
)


class MusicBot(commands.Bot):
    def __init__(
        self,
        container: Container,
        settings: Settings,
        **kwargs: Any,
    ) -> None:
        intents = discord.Intents.default()
        intents.voice_states = True
        intents.guilds = True

        super().__init__(
            command_prefix=settings.discord.command_prefix,
            intents=intents,
            help_command=None,
            owner_ids=set(settings.discord.owner_ids) or None,
            **kwargs,
        )

        self.container = container
        self.settings = settings
        self._shutdown_event = asyncio.Event()
        self._log_handler: DiscordLogHandler | None = None
        container.set_bot(self)

    @property
    def log_handler(self) -> DiscordLogHandler | None:
        return self._log_handler

    async def setup_hook(self) -> None:
        logger.info(LogTemplates.BOT_SETUP)
        asyncio.get_running_loop().set_exception_handler(self._handle_loop_exception)

        try:
            await self.container.initialize()
        except Exception:
            logger.exception(LogTemplates.CONTAINER_INIT_FAILED)
            raise

        await self._load_cogs()
        self.tree.on_error = self._on_app_command_error

        if self.settings.discord.sync_on_startup:
            await self._sync_commands()

        self._attach_log_handler()
        logger.info(LogTemplates.BOT_SETUP_COMPLETE)

    async def _load_cogs(self) -> None:
        loaded = 0
        failed = 0

        for cog in COG_EXTENSIONS:
            try:
                await self.load_extension(cog)
                logger.info(LogTemplates.COG_LOADED, cog)
                loaded += 1
            except Exception:
                logger.exception(LogTemplates.COG_LOAD_FAILED, cog)
                failed += 1

        logger.info(LogTemplates.COGS_LOADED_SUMMARY, loaded, failed)

    async def _sync_commands(self) -> None:
        for guild_id in self.settings.discord.test_guild_ids:
            guild = discord.Object(id=guild_id)
            try:
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
                logger.info(LogTemplates.COMMAND_SYNCED_GUILD, len(synced), guild_id)
            except discord.HTTPException:
                logger.exception(LogTemplates.COMMAND_SYNC_FAILED)

        try:
            synced = await self.tree.sync()
            logger.info(LogTemplates.COMMAND_SYNCED, len(synced))
        except discord.HTTPException:
            logger.exception(LogTemplates.COMMAND_SYNC_FAILED)

    def _attach_log_handler(self) -> None:
        channel_id = self.settings.discord.log_channel_id
        if channel_id is None or self._log_handler is not None:
            return

        handler = DiscordLogHandler(channel_id)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler.bind(self, asyncio.get_running_loop())
        logging.getLogger().addHandler(handler)
        self._log_handler = handler
        logger.info(LogTemplates.LOG_FORWARDING_ENABLED, channel_id)

    def _detach_log_handler(self) -> None:
        handler = self._log_handler
        if handler is None:
            return
        logging.getLogger().removeHandler(handler)
        handler.unbind()
        self._log_handler = None

    def _handle_loop_exception(
        self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]
    ) -> None:
        exc = context.get("exception")
        logger.error(
            LogTemplates.BOT_LOOP_EXCEPTION,
            context.get("message", "unknown error"),
            exc_info=exc if isinstance(exc, BaseException) else None,
        )

    async def _on_app_command_error(
        self, interaction: discord.Interaction, error: discord.app_commands.AppCommandError
    ) -> None:
        """Global slash-command error handler; replies ephemerally to avoid channel spam."""
        original = getattr(error, "original", error)
        logger.error(
            LogTemplates.COMMAND_ERROR,
            getattr(interaction.command, "name", "<unknown>"),
            exc_info=original,
        )

        try:
            if interaction.response.is_done():
                await interaction.followup.send(
                    DiscordUIMessages.ERROR_COMMAND_FAILED, ephemeral=True
                )
            else:
                await interaction.response.send_message(
                    DiscordUIMessages.ERROR_COMMAND_FAILED, ephemeral=True
                )
        except discord.HTTPException:
            logger.warning(LogTemplates.COMMAND_ERROR_REPLY_FAILED)

    async def on_ready(self) -> None:
        logger.info(LogTemplates.BOT_READY, self.user, len(self.guilds))

        activity = discord.Activity(type=discord.ActivityType.listening, name="/play")
        await self.change_presence(activity=activity)

    async def close(self) -> None:
        logger.info(LogTemplates.BOT_CLOSING)
        self._detach_log_handler()

        try:
            await self.container.shutdown()
        except Exception:
            logger.exception(LogTemplates.CONTAINER_SHUTDOWN_FAILED)

        await super().close()
        self._shutdown_event.set()

    def run_with_graceful_shutdown(self, token: str, *, shutdown_timeout: float = 30.0) -> None:
        async def runner() -> None:
            async with self:
                loop = asyncio.get_running_loop()

                async def _graceful_close(sig_name: str) -> None:
                    logger.info(LogTemplates.BOT_SHUTTING_DOWN, sig_name)
                    try:
                        await asyncio.wait_for(self.close(), timeout=shutdown_timeout)
                    except TimeoutError:
                        logger.warning(LogTemplates.BOT_SHUTDOWN_TIMEOUT, shutdown_timeout)

                for sig in (signal.SIGINT, signal.SIGTERM):
                    loop.add_signal_handler(
                        sig, lambda s=sig: asyncio.create_task(_graceful_close(s.name))
                    )
                await self.start(token)

        asyncio.run(runner())


def create_bot(container: Container, settings: Settings) -> MusicBot:
    return MusicBot(container=container, settings=settings)

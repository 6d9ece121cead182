"""Logging helpers: coloured console output and the Discord log-channel forwarder."""

from __future__ import annotations

import asyncio
import contextvars
import logging
import os
import sys
from typing import TYPE_CHECKING

from roommates_helper.domain.shared.constants import DiscordLogKeywords
from roommates_helper.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    import discord

logger = logging.getLogger(__name__)

DISCORD_MESSAGE_LIMIT = 2000

# Set only inside the task that is delivering a record to the log channel.
_forwarding: contextvars.ContextVar[bool] = contextvars.ContextVar(
    "discord_log_forwarding", default=False
)


class ColoredFormatter(logging.Formatter):
    """Logging formatter that applies ANSI color codes to the levelname field.

    Colors are disabled when the ``NO_COLOR`` environment variable is set or
    when the output stream is not a TTY (e.g. redirected to a file).
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",     # cyan
        logging.INFO: "\033[32m",      # green
        logging.WARNING: "\033[33m",   # yellow
        logging.ERROR: "\033[31m",     # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = getattr(self, "_stream", None) or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if self._use_color():
            color = self.COLORS.get(record.levelno, "")
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


class DiscordLogHandler(logging.Handler):
    """Forwards log records to a Discord text channel.

    WARNING and above are always forwarded; INFO only when the message
    mentions one of the startup keywords. Records logged by the send path
    itself (the channel lookup, ``discord.http``) are dropped; everything else
    keeps flowing while a send is in flight.
    Nothing is forwarded until :meth:`bind` hands over a ready client.
    """

    LEVEL_PREFIX: dict[int, str] = {
        logging.INFO: "ℹ️",
        logging.WARNING: "⚠️",
        logging.ERROR: "❌",
        logging.CRITICAL: "🚨",
    }

    def __init__(self, channel_id: int, level: int = logging.INFO) -> None:
        super().__init__(level=level)
        self.channel_id = channel_id
        self._client: discord.Client | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._emitting = False
        self._pending: set[asyncio.Future[None]] = set()

    @property
    def is_emitting(self) -> bool:
        return self._emitting

    def bind(self, client: discord.Client, loop: asyncio.AbstractEventLoop) -> None:
        self._client = client
        self._loop = loop

    def unbind(self) -> None:
        self._client = None
        self._loop = None

    def should_forward(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.WARNING:
            return True
        if record.levelno < logging.INFO:
            return False
        message = record.getMessage().lower()
        return any(keyword.lower() in message for keyword in DiscordLogKeywords.INFO_KEYWORDS)

    def emit(self, record: logging.LogRecord) -> None:
        if self._emitting or _forwarding.get() or self._client is None or self._loop is None:
            return
        if not self.should_forward(record):
            return

        # handle() holds self.lock here, so only same-thread re-entry sees the latch
        self._emitting = True
        try:
            text = self._render(record)
            future = asyncio.run_coroutine_threadsafe(self._send(text), self._loop)
            self._pending.add(future)
            future.add_done_callback(self._pending.discard)
        except Exception:
            self.handleError(record)
        finally:
            self._emitting = False

    def _render(self, record: logging.LogRecord) -> str:
        prefix = self.LEVEL_PREFIX.get(record.levelno, "")
        text = f"{prefix} **{record.levelname}** `{record.name}`\n{self.format(record)}"
        return text[:DISCORD_MESSAGE_LIMIT]

    async def _send(self, text: str) -> None:
        client = self._client
        if client is None:
            return

        token = _forwarding.set(True)
        try:
            channel = client.get_channel(self.channel_id)
            if channel is None or not hasattr(channel, "send"):
                logger.debug(LogTemplates.LOG_CHANNEL_UNAVAILABLE, self.channel_id)
                return
            await channel.send(text)  # type: ignore[union-attr]
        except Exception:
            logger.debug(LogTemplates.LOG_FORWARD_FAILED, self.channel_id, exc_info=True)
        finally:
            _forwarding.reset(token)

"""Tests for ColoredFormatter and DiscordLogHandler."""

import asyncio
import logging
from io import StringIO
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from roommates_helper.utils.logging import (
    DISCORD_MESSAGE_LIMIT,
    ColoredFormatter,
    DiscordLogHandler,
)

RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}
LOG_CHANNEL_ID = 555555555555555555


def _make_record(level: int, message: str = "test") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


# =============================================================================
# ColoredFormatter
# =============================================================================


class TestColoredFormatter:
    """Tests for ANSI color formatting."""

    def _tty_formatter(self) -> ColoredFormatter:
        fmt = ColoredFormatter("%(levelname)s | %(message)s")
        stream = StringIO()
        stream.isatty = lambda: True  # type: ignore[attr-defined]
        fmt._stream = stream  # type: ignore[attr-defined]
        return fmt

    @pytest.mark.parametrize("level", list(LEVEL_COLORS))
    def test_color_applied_per_level(self, level: int):
        output = self._tty_formatter().format(_make_record(level))

        assert LEVEL_COLORS[level] in output
        assert RESET in output

    def test_no_color_when_no_color_env_set(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        output = self._tty_formatter().format(_make_record(logging.ERROR))
        assert output == "ERROR | test"

    def test_no_color_when_not_tty(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s")
        fmt._stream = StringIO()  # type: ignore[attr-defined]
        assert fmt.format(_make_record(logging.INFO)) == "INFO | test"

    def test_original_record_untouched(self):
        record = _make_record(logging.WARNING)
        self._tty_formatter().format(record)
        assert record.levelname == "WARNING"


# =============================================================================
# DiscordLogHandler
# =============================================================================


@pytest.fixture
def channel():
    channel = MagicMock()
    channel.send = AsyncMock()
    return channel


@pytest.fixture
def client(channel):
    client = MagicMock()
    client.get_channel.return_value = channel
    return client


@pytest.fixture
def handler():
    handler = DiscordLogHandler(LOG_CHANNEL_ID)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


@pytest.fixture
def forward_logger(handler):
    log = logging.getLogger("tests.forwarding")
    log.setLevel(logging.DEBUG)
    log.propagate = False
    log.addHandler(handler)
    yield log
    log.removeHandler(handler)
    log.propagate = True


async def drain(handler: DiscordLogHandler) -> None:
    pending = [asyncio.wrap_future(f) for f in list(handler._pending)]
    if pending:
        await asyncio.wait(pending)


class TestShouldForward:
    @pytest.mark.parametrize("level", [logging.WARNING, logging.ERROR, logging.CRITICAL])
    def test_warning_and_above_always(self, handler, level):
        assert handler.should_forward(_make_record(level, "anything at all"))

    @pytest.mark.parametrize(
        "message",
        ["✅ Synced 12 commands", "Bot is READY", "Cog loaded", "Playback started"],
    )
    def test_info_with_keyword(self, handler, message):
        assert handler.should_forward(_make_record(logging.INFO, message))

    def test_info_without_keyword(self, handler):
        assert not handler.should_forward(_make_record(logging.INFO, "Queue created"))

    def test_debug_never(self, handler):
        assert not handler.should_forward(_make_record(logging.DEBUG, "ready"))


class TestDiscordLogHandler:
    @pytest.mark.asyncio
    async def test_forwards_warning_to_channel(self, handler, client, channel, forward_logger):
        handler.bind(client, asyncio.get_running_loop())

        forward_logger.warning("Voice connection lost in guild %s", 42)
        await drain(handler)

        client.get_channel.assert_called_once_with(LOG_CHANNEL_ID)
        channel.send.assert_awaited_once()
        text = channel.send.await_args.args[0]
        assert "**WARNING**" in text
        assert "Voice connection lost in guild 42" in text

    @pytest.mark.asyncio
    async def test_unbound_handler_drops_records(self, handler, channel, forward_logger):
        forward_logger.error("too early")
        assert handler._pending == set()
        channel.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unbind_stops_forwarding(self, handler, client, channel, forward_logger):
        handler.bind(client, asyncio.get_running_loop())
        handler.unbind()

        forward_logger.error("after shutdown")

        assert handler._pending == set()
        channel.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sink_logging_is_not_forwarded(self, handler, client, channel, forward_logger):
        def echo(text):
            forward_logger.warning("send path logged something")

        channel.send.side_effect = echo
        handler.bind(client, asyncio.get_running_loop())

        forward_logger.warning("first")
        await drain(handler)

        channel.send.assert_awaited_once()
        assert handler._pending == set()
        assert not handler.is_emitting

    @pytest.mark.asyncio
    async def test_other_records_forwarded_while_send_in_flight(
        self, handler, client, channel, forward_logger
    ):
        release = asyncio.Event()
        sent: list[str] = []

        async def slow_send(text):
            sent.append(text)
            await release.wait()

        channel.send.side_effect = slow_send
        handler.bind(client, asyncio.get_running_loop())

        forward_logger.warning("first warning")
        for _ in range(5):
            await asyncio.sleep(0)
        assert len(sent) == 1

        forward_logger.error("unrelated error from another guild")
        release.set()
        await drain(handler)

        assert len(sent) == 2
        assert "first warning" in sent[0]
        assert "unrelated error from another guild" in sent[1]

    @pytest.mark.asyncio
    async def test_send_failure_is_swallowed(self, handler, client, channel, forward_logger):
        channel.send.side_effect = RuntimeError("Missing Access")
        handler.bind(client, asyncio.get_running_loop())

        forward_logger.error("boom")
        await drain(handler)

        assert not handler.is_emitting
        forward_logger.error("again")
        await drain(handler)
        assert channel.send.await_count == 2

    @pytest.mark.asyncio
    async def test_missing_channel(self, handler, client, channel, forward_logger):
        client.get_channel.return_value = None
        handler.bind(client, asyncio.get_running_loop())

        forward_logger.error("nowhere to go")
        await drain(handler)

        channel.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_long_messages_truncated(self, handler, client, channel, forward_logger):
        handler.bind(client, asyncio.get_running_loop())

        forward_logger.error("x" * 5000)
        await drain(handler)

        assert len(channel.send.await_args.args[0]) == DISCORD_MESSAGE_LIMIT

    def test_render_error_goes_to_handle_error(self, handler, client):
        handler.bind(client, MagicMock())
        record = _make_record(logging.ERROR)

        with (
            patch.object(handler, "_render", side_effect=ValueError("bad format")),
            patch.object(handler, "handleError") as handle_error,
        ):
            handler.emit(record)

        handle_error.assert_called_once_with(record)
        assert not handler.is_emitting

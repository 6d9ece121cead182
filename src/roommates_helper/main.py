#!/usr/bin/env python3
"""Process entry point for Roommates Helper.

``roommates-helper`` loads settings from the environment (and ``.env``),
configures logging from ``logging_config.json`` and runs the bot until it is
interrupted. ``--check-config`` validates the configuration without
connecting to Discord.
"""

from __future__ import annotations

import argparse
import json
import logging
import logging.config
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from roommates_helper.domain.shared.constants import LogLevels
from roommates_helper.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from roommates_helper.config.settings import Settings

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"
_FALLBACK_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = LogLevels.INFO, config_path: Path | None = None) -> None:
    """Configure the root logger from a dictConfig JSON file.

    Falls back to ``basicConfig`` when the file is missing or invalid. The
    root level always follows ``log_level`` so the environment wins over the
    file.
    """
    path = config_path or _LOGGING_CONFIG_PATH
    level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(path) as f:
            logging.config.dictConfig(json.load(f))
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.basicConfig(level=level, format=_FALLBACK_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        logger.warning(LogTemplates.LOGGING_CONFIG_FALLBACK, path)

    logging.getLogger().setLevel(level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roommates-helper",
        description="Run the Roommates Helper Discord bot.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=[
            LogLevels.DEBUG,
            LogLevels.INFO,
            LogLevels.WARNING,
            LogLevels.ERROR,
            LogLevels.CRITICAL,
        ],
        help="Override LOG_LEVEL from the environment",
    )
    parser.add_argument(
        "--logging-config",
        type=Path,
        default=None,
        help="Path to a logging dictConfig JSON file",
    )
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Validate settings and exit without connecting",
    )
    return parser


def _run_bot(settings: Settings, token: str) -> int:
    from roommates_helper.config.container import create_container
    from roommates_helper.infrastructure.discord.bot import create_bot

    logger.info(LogTemplates.BOT_STARTING, settings.environment)
    bot = create_bot(create_container(settings), settings)

    try:
        bot.run_with_graceful_shutdown(token)
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception(LogTemplates.BOT_FATAL_ERROR)
        return 1

    logger.info(LogTemplates.BOT_STOPPED)
    return 0


def main(argv: Sequence[str] = ()) -> int:
    args = build_parser().parse_args(list(argv))

    from roommates_helper.config.settings import get_settings

    settings = get_settings()
    setup_logging(args.log_level or settings.log_level, args.logging_config)

    token = settings.bot_token
    if not token:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return 1

    if args.check_config:
        logger.info(
            LogTemplates.CONFIG_CHECK_OK,
            settings.environment,
            settings.discord.command_prefix,
            settings.music.max_queue_size,
            settings.discord.log_channel_id,
        )
        return 0

    return _run_bot(settings, token)


def cli() -> None:
    """Console script entry point (``[project.scripts]``)."""
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()  # pragma: no cover

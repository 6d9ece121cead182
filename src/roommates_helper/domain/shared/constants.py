"""Centralized constants for audio, limits, and other shared values."""

from __future__ import annotations


class AudioConstants:
    """Audio and FFmpeg configuration constants."""

    # FFmpeg Options
    FFMPEG_BEFORE_OPTIONS_DEFAULT = "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5"
    FFMPEG_OPTIONS_DEFAULT = "-vn"  # No video

    # yt-dlp Options
    YTDLP_FORMAT_DEFAULT = "bestaudio/best"

    # Stream quality hints, mapped to yt-dlp format selectors
    QUALITY_FORMATS = {
        0: "worstaudio/worst",
        1: "bestaudio[abr<=96]/bestaudio/best",
        2: "bestaudio/best",
    }

    # Audio Settings
    DEFAULT_VOLUME = 0.5
    DEFAULT_STREAM_QUALITY = 2
    INPUT_TYPE_FFMPEG = "ffmpeg"


class LogLevels:
    """Valid logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class TimeConstants:
    """Time-related constants in seconds."""

    VOICE_CONNECT_TIMEOUT = 10.0
    VOICE_RECONNECT_GRACE = 5.0
    RESOLVE_TIMEOUT = 30.0
    VIEW_TIMEOUT = 300.0


class LimitConstants:
    """Numeric limits and constraints."""

    # Queue limits
    MAX_QUEUE_SIZE = 500
    MAX_CONSECUTIVE_FAILURES = 5

    # Volume limits (percent)
    MIN_VOLUME_PERCENT = 0
    MAX_VOLUME_PERCENT = 100

    # Queue embed
    QUEUE_PAGE_SIZE = 10

    # Discord limits
    MAX_DISCORD_SNOWFLAKE = 2**64


class EmbedColors:
    """Embed accent colours."""

    NOW_PLAYING = 0x00FF00
    TRACK_ADDED = 0x0099FF
    QUEUE = 0x0099FF


class DiscordLogKeywords:
    """Keywords that promote an INFO record to the Discord log channel."""

    INFO_KEYWORDS = ("✅", "🚀", "ready", "online", "started", "loaded", "success")

"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import AudioConstants, LimitConstants, LogLevels, TimeConstants
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import CommandPrefixStr, DiscordSnowflake, MaxQueueSize


def _validate_snowflakes(v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
    if isinstance(v, list):
        v = tuple(v)
    for snowflake in v:
        if snowflake <= 0 or snowflake >= LimitConstants.MAX_DISCORD_SNOWFLAKE:
            raise ValueError(f"Invalid Discord snowflake ID: {snowflake}")
    return v


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token")
    )
    command_prefix: CommandPrefixStr = Field(
        default="!",
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )
    owner_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("owner_ids", "owners")
    )
    test_guild_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("test_guild_ids", "test_guilds")
    )
    sync_on_startup: bool = True
    log_channel_id: DiscordSnowflake | None = Field(
        default=None, validation_alias=AliasChoices("log_channel_id", "log_channel")
    )

    @field_validator("owner_ids", "test_guild_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate Discord snowflake IDs and convert lists to tuples."""
        return _validate_snowflakes(v)


class MusicSettings(BaseModel):
    """Queue and playback behaviour."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    default_volume: float = Field(default=AudioConstants.DEFAULT_VOLUME, ge=0.0, le=1.0)
    max_queue_size: MaxQueueSize = LimitConstants.MAX_QUEUE_SIZE
    max_consecutive_failures: int = Field(
        default=LimitConstants.MAX_CONSECUTIVE_FAILURES,
        ge=1,
        le=50,
        validation_alias=AliasChoices("max_consecutive_failures", "max_failures"),
    )
    reconnect_grace_seconds: float = Field(
        default=TimeConstants.VOICE_RECONNECT_GRACE,
        gt=0.0,
        le=60.0,
        validation_alias=AliasChoices("reconnect_grace_seconds", "reconnect_grace"),
    )
    resolve_timeout_seconds: float = Field(default=TimeConstants.RESOLVE_TIMEOUT, gt=0.0, le=300.0)
    connect_timeout_seconds: float = Field(
        default=TimeConstants.VOICE_CONNECT_TIMEOUT, gt=0.0, le=60.0
    )
    stream_quality: int = Field(default=AudioConstants.DEFAULT_STREAM_QUALITY, ge=0, le=2)
    queue_page_size: int = Field(default=LimitConstants.QUEUE_PAGE_SIZE, ge=1, le=25)
    view_timeout_seconds: float = Field(default=TimeConstants.VIEW_TIMEOUT, gt=0.0)


class AudioSettings(BaseModel):
    """FFmpeg and yt-dlp configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    ffmpeg_before_options: str = AudioConstants.FFMPEG_BEFORE_OPTIONS_DEFAULT
    ffmpeg_options: str = AudioConstants.FFMPEG_OPTIONS_DEFAULT
    ytdlp_format: str = Field(
        default=AudioConstants.YTDLP_FORMAT_DEFAULT,
        validation_alias=AliasChoices("ytdlp_format", "format"),
    )


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD_TOKEN (top-level shortcut) or DISCORD__TOKEN
    - DISCORD__LOG_CHANNEL_ID, MUSIC__DEFAULT_VOLUME, AUDIO__FFMPEG_OPTIONS, etc.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = LogLevels.INFO
    discord_token: SecretStr = SecretStr("")

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    music: MusicSettings = Field(default_factory=MusicSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {
            LogLevels.DEBUG,
            LogLevels.INFO,
            LogLevels.WARNING,
            LogLevels.ERROR,
            LogLevels.CRITICAL,
        }
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels))
        return v_upper

    @property
    def bot_token(self) -> str:
        """The nested token wins over the top-level DISCORD_TOKEN shortcut."""
        return self.discord.token.get_secret_value() or self.discord_token.get_secret_value()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()

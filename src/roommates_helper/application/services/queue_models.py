"""DTOs for the music queue application services."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ...domain.music.entities import Track
from ...domain.music.value_objects import LoopMode
from ...domain.shared.constants import AudioConstants, LimitConstants, TimeConstants
from ...domain.shared.types import (
    NonNegativeInt,
    PositiveFloat,
    PositiveInt,
    StreamQuality,
    UnitInterval,
    VolumePercent,
)

if TYPE_CHECKING:
    from ...config.settings import MusicSettings


class QueueOptions(BaseModel):
    """Tunables shared by every guild queue."""

    model_config = ConfigDict(frozen=True)

    default_volume: UnitInterval = AudioConstants.DEFAULT_VOLUME
    max_queue_size: PositiveInt | None = LimitConstants.MAX_QUEUE_SIZE
    max_consecutive_failures: PositiveInt = LimitConstants.MAX_CONSECUTIVE_FAILURES
    reconnect_grace_seconds: PositiveFloat = TimeConstants.VOICE_RECONNECT_GRACE
    stream_quality: StreamQuality = AudioConstants.DEFAULT_STREAM_QUALITY

    @classmethod
    def from_settings(cls, settings: MusicSettings) -> QueueOptions:
        return cls(
            default_volume=settings.default_volume,
            max_queue_size=settings.max_queue_size,
            max_consecutive_failures=settings.max_consecutive_failures,
            reconnect_grace_seconds=settings.reconnect_grace_seconds,
            stream_quality=settings.stream_quality,
        )


class QueueInfo(BaseModel):
    """Point-in-time snapshot of a guild queue."""

    tracks: list[Track]
    current_track: Track | None
    is_playing: bool
    is_paused: bool
    volume: VolumePercent
    loop_mode: LoopMode = LoopMode.NONE

    @property
    def remaining(self) -> int:
        return len(self.tracks)


class PlayResult(BaseModel):
    success: bool
    track: Track | None = None
    position: NonNegativeInt = 0
    queue_length: NonNegativeInt = 0
    started: bool = False
    message: str = ""

    @classmethod
    def failed(cls, message: str) -> PlayResult:
        return cls(success=False, message=message)

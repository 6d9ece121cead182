"""Core domain entities for the music bounded context."""

from __future__ import annotations

import random

from pydantic import BaseModel, ConfigDict, Field

from roommates_helper.domain.music.value_objects import LoopMode, PlaybackState
from roommates_helper.domain.shared.constants import AudioConstants, LimitConstants
from roommates_helper.domain.shared.exceptions import (
    BusinessRuleViolationError,
    InvalidOperationError,
)
from roommates_helper.domain.shared.types import (
    DiscordSnowflake,
    DurationMs,
    NonEmptyStr,
    NonNegativeInt,
    QueuePositionInt,
    TrackTitleStr,
    UnitInterval,
)


class Requester(BaseModel):
    """The member who asked for a track."""

    model_config = ConfigDict(frozen=True, strict=True)

    user_id: DiscordSnowflake
    display_name: NonEmptyStr

    @property
    def mention(self) -> str:
        return f"<@{self.user_id}>"


class Track(BaseModel):
    """Immutable value object representing a playable track.

    ``duration_ms`` of 0 is the sentinel for an unknown duration, not a
    zero-length track.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    title: TrackTitleStr
    url: NonEmptyStr
    duration_ms: DurationMs = 0
    requester: Requester
    thumbnail_url: NonEmptyStr | None = None

    @property
    def duration_formatted(self) -> str:
        """Format duration as M:SS or H:MM:SS, or "Unknown" when not known."""
        if self.duration_ms == 0:
            return "Unknown"

        total_seconds = self.duration_ms // 1000
        hours, remainder = divmod(total_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"


class SearchResult(BaseModel):
    """A candidate item returned by the search collaborator.

    Every field is optional: results are validated before a Track is built.
    """

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    url: str | None = None
    duration_seconds: NonNegativeInt | None = None
    thumbnail_url: str | None = None

    @property
    def has_playable_url(self) -> bool:
        return bool(self.url and self.url.strip())


class GuildQueue(BaseModel):
    """Aggregate holding one guild's pending tracks and playback state."""

    model_config = ConfigDict(strict=True)

    guild_id: DiscordSnowflake
    tracks: list[Track] = Field(default_factory=list)
    current_track: Track | None = None
    state: PlaybackState = PlaybackState.IDLE
    loop_mode: LoopMode = LoopMode.NONE
    volume: UnitInterval = AudioConstants.DEFAULT_VOLUME
    max_size: NonNegativeInt | None = LimitConstants.MAX_QUEUE_SIZE

    @property
    def queue_length(self) -> int:
        return len(self.tracks)

    @property
    def is_playing(self) -> bool:
        return self.state == PlaybackState.PLAYING

    @property
    def is_paused(self) -> bool:
        return self.state == PlaybackState.PAUSED

    @property
    def is_idle(self) -> bool:
        return self.state == PlaybackState.IDLE

    @property
    def is_destroyed(self) -> bool:
        return self.state == PlaybackState.DESTROYED

    @property
    def can_add_to_queue(self) -> bool:
        return self.max_size is None or self.queue_length < self.max_size

    @property
    def volume_percent(self) -> int:
        return round(self.volume * 100)

    def enqueue(self, track: Track) -> int:
        """Append a track and return its zero-based position."""
        if self.is_destroyed:
            raise InvalidOperationError(operation="enqueue", current_state=self.state.value)
        if not self.can_add_to_queue:
            raise BusinessRuleViolationError(
                rule="MAX_QUEUE_SIZE", message=f"Queue is full (max {self.max_size} tracks)"
            )

        self.tracks.append(track)
        return len(self.tracks) - 1

    def remove_at(self, position: QueuePositionInt) -> Track | None:
        """Remove a track at a specific queue position."""
        if 0 <= position < len(self.tracks):
            return self.tracks.pop(position)
        return None

    def clear_queue(self) -> int:
        """Clear all pending tracks and return the count removed."""
        count = len(self.tracks)
        self.tracks.clear()
        return count

    def advance_to_next_track(self) -> Track | None:
        """Select the next current track according to the loop mode."""
        if self.loop_mode == LoopMode.TRACK and self.current_track:
            return self.current_track

        if self.loop_mode == LoopMode.QUEUE and self.current_track:
            self.tracks.append(self.current_track)

        self.current_track = self.tracks.pop(0) if self.tracks else None
        return self.current_track

    def drop_current(self) -> None:
        """Forget the current track without re-queueing it, whatever the loop mode."""
        self.current_track = None

    def shuffle(self, rng: random.Random | None = None) -> bool:
        """Fisher-Yates shuffle of the pending tracks; the current track is untouched."""
        if len(self.tracks) <= 1:
            return False

        rng = rng or random.Random()
        for i in range(len(self.tracks) - 1, 0, -1):
            j = rng.randint(0, i)
            self.tracks[i], self.tracks[j] = self.tracks[j], self.tracks[i]
        return True

    def set_volume_percent(self, percent: int) -> int:
        """Clamp ``percent`` to 0..100, store it as a fraction, and return the stored percent."""
        clamped = max(
            LimitConstants.MIN_VOLUME_PERCENT, min(LimitConstants.MAX_VOLUME_PERCENT, percent)
        )
        self.volume = clamped / 100
        return self.volume_percent

    def transition_to(self, new_state: PlaybackState) -> None:
        """Transition to a new playback state."""
        if not self.state.can_transition_to(new_state):
            raise InvalidOperationError(
                operation=f"transition to {new_state.value}",
                current_state=self.state.value,
                message=f"Cannot transition from {self.state.value} to {new_state.value}",
            )

        self.state = new_state

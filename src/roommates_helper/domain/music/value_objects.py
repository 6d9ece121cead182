"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from roommates_helper.domain.shared.constants import AudioConstants
from roommates_helper.domain.shared.types import NonEmptyStr


class LoopMode(Enum):
    """Loop mode settings for queue playback."""

    NONE = "none"
    TRACK = "track"  # Replay the current track
    QUEUE = "queue"  # Re-append finished tracks to the tail

    def next_mode(self) -> LoopMode:
        """Cycle to next loop mode."""
        modes = list(LoopMode)
        current_index = modes.index(self)
        next_index = (current_index + 1) % len(modes)
        return modes[next_index]


class PlaybackState(Enum):
    """Playback state of a guild queue.

    State transitions:
    - IDLE -> LOADING (a track was selected, stream requested)
    - LOADING -> LOADING (stream failed, next track selected)
    - LOADING -> PLAYING (stream acquired and started)
    - LOADING -> IDLE (nothing left to load)
    - PLAYING <-> PAUSED
    - PLAYING/PAUSED -> LOADING (track ended, next one selected)
    - PLAYING/PAUSED -> IDLE (track ended or stopped with an empty queue)
    - Any -> DESTROYED (terminal)
    """

    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"
    DESTROYED = "destroyed"

    def can_transition_to(self, target: PlaybackState) -> bool:
        """Check if transition to target state is valid."""
        if target == PlaybackState.DESTROYED:
            return self != PlaybackState.DESTROYED
        valid_transitions = {
            PlaybackState.IDLE: {PlaybackState.LOADING, PlaybackState.IDLE},
            PlaybackState.LOADING: {
                PlaybackState.LOADING,
                PlaybackState.PLAYING,
                PlaybackState.IDLE,
            },
            PlaybackState.PLAYING: {
                PlaybackState.PAUSED,
                PlaybackState.LOADING,
                PlaybackState.IDLE,
            },
            PlaybackState.PAUSED: {
                PlaybackState.PLAYING,
                PlaybackState.LOADING,
                PlaybackState.IDLE,
            },
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_active(self) -> bool:
        return self in {PlaybackState.PLAYING, PlaybackState.PAUSED}


class LifecycleSignal(Enum):
    """Closed set of signals emitted by the playback session and transport."""

    STARTED = "started"
    ENDED = "ended"
    ERROR = "error"
    DISCONNECTED = "disconnected"


class PlayerEvent(BaseModel):
    """One lifecycle signal, tagged with the guild it belongs to."""

    model_config = ConfigDict(frozen=True)

    signal: LifecycleSignal
    guild_id: int
    error: str | None = None


class AudioStream(BaseModel):
    """A playable stream handed to the playback session."""

    model_config = ConfigDict(frozen=True, strict=True)

    source: NonEmptyStr
    input_type: NonEmptyStr = AudioConstants.INPUT_TYPE_FFMPEG
    title: str | None = None

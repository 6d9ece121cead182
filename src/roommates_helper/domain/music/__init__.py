"""
Music Bounded Context

Domain logic for tracks, per-guild queue state and playback lifecycle signals.
"""

from roommates_helper.domain.music.entities import GuildQueue, Requester, SearchResult, Track
from roommates_helper.domain.music.value_objects import (
    AudioStream,
    LifecycleSignal,
    LoopMode,
    PlaybackState,
    PlayerEvent,
)

__all__ = [
    # Entities
    "Track",
    "Requester",
    "SearchResult",
    "GuildQueue",
    # Value Objects
    "AudioStream",
    "LifecycleSignal",
    "LoopMode",
    "PlaybackState",
    "PlayerEvent",
]

"""Port interfaces for voice transport and audio playback."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

from roommates_helper.domain.shared.types import DiscordSnowflake, UnitInterval

if TYPE_CHECKING:
    from ...domain.music.value_objects import AudioStream, PlayerEvent

SignalListener = Callable[["PlayerEvent"], None]


class PlaybackSession(ABC):
    """Plays one stream at a time into an attached transport.

    Emits STARTED when audio begins, ENDED only on a natural end of the stream
    and ERROR when the player fails. Explicit stops emit nothing.
    """

    @abstractmethod
    def subscribe(self, listener: SignalListener) -> None:
        """Set the single listener that receives lifecycle events."""
        ...

    @abstractmethod
    async def play(self, stream: "AudioStream", volume: UnitInterval) -> None:
        """Start playing ``stream`` at ``volume``, raising StreamUnavailableError on failure."""
        ...

    @abstractmethod
    def stop(self) -> None:
        ...

    @abstractmethod
    def pause(self) -> bool:
        ...

    @abstractmethod
    def resume(self) -> bool:
        ...

    @abstractmethod
    def set_volume(self, volume: UnitInterval) -> None:
        ...

    @property
    @abstractmethod
    def is_playing(self) -> bool:
        ...

    @property
    @abstractmethod
    def is_paused(self) -> bool:
        ...


class VoiceTransport(ABC):
    """One guild's voice connection. Emits DISCONNECTED when the connection drops."""

    @abstractmethod
    def subscribe(self, listener: SignalListener) -> None:
        """Set the single listener that receives lifecycle events."""
        ...

    @abstractmethod
    def attach(self, session: PlaybackSession) -> None:
        """Attach the playback session; a transport accepts exactly one."""
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Leave the voice channel. Safe to call more than once."""
        ...

    @abstractmethod
    async def wait_until_connected(self, timeout: float) -> bool:
        """Wait up to ``timeout`` seconds for the connection to come back."""
        ...

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        ...


class VoiceAdapter(ABC):
    """Factory for voice transports and playback sessions."""

    @abstractmethod
    async def connect(
        self, guild_id: DiscordSnowflake, channel_id: DiscordSnowflake
    ) -> VoiceTransport:
        """Join a voice channel, raising VoiceConnectionError when that is not possible."""
        ...

    @abstractmethod
    def create_session(self, guild_id: DiscordSnowflake) -> PlaybackSession:
        ...

    @abstractmethod
    def get_transport(self, guild_id: DiscordSnowflake) -> VoiceTransport | None:
        """Return the live transport for a guild, if any."""
        ...

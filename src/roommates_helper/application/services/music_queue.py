"""Music Queue - drives one guild's playback state machine."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from ...domain.music.entities import GuildQueue, Track
from ...domain.music.value_objects import LifecycleSignal, LoopMode, PlaybackState, PlayerEvent
from ...domain.shared.exceptions import BusinessRuleViolationError, StreamUnavailableError
from ...domain.shared.messages import DiscordUIMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake, QueuePositionInt
from .queue_models import QueueInfo, QueueOptions

if TYPE_CHECKING:
    from ..interfaces.audio_resolver import AudioResolver
    from ..interfaces.notifier import Notifier
    from ..interfaces.voice_adapter import PlaybackSession, VoiceTransport

logger = logging.getLogger(__name__)

DisconnectHandler = Callable[[DiscordSnowflake], Awaitable[object]]


class MusicQueue:
    """One guild's pending tracks, current track and the voice resources it owns.

    The queue subscribes itself to its transport and playback session when it
    is constructed and reacts to their lifecycle signals. Once destroyed it
    releases both handles and must not be reused.
    """

    def __init__(
        self,
        *,
        guild_id: DiscordSnowflake,
        transport: VoiceTransport,
        session: PlaybackSession,
        notifier: Notifier,
        resolver: AudioResolver,
        options: QueueOptions | None = None,
        on_disconnect: DisconnectHandler | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._options = options or QueueOptions()
        self._state = GuildQueue(
            guild_id=guild_id,
            volume=self._options.default_volume,
            max_size=self._options.max_queue_size,
        )
        self._transport = transport
        self._session = session
        self._notifier = notifier
        self._resolver = resolver
        self._on_disconnect = on_disconnect
        self._rng = rng or random.Random()

        # Bumped by stop/destroy so that slow play requests can tell they are stale.
        self._epoch = 0
        # Bumped by every advance, skip, stop and destroy; an in-flight load
        # whose token no longer matches discards its result.
        self._load_token = 0

        self._advance_task: asyncio.Task[Track | None] | None = None
        self._reconnect_task: asyncio.Task[None] | None = None

        self._session.subscribe(self.handle_signal)
        self._transport.subscribe(self.handle_signal)

    # ─── Read-only views ──────────────────────────────────────────────

    @property
    def guild_id(self) -> int:
        return self._state.guild_id

    @property
    def tracks(self) -> list[Track]:
        return list(self._state.tracks)

    @property
    def current_track(self) -> Track | None:
        return self._state.current_track

    @property
    def state(self) -> PlaybackState:
        return self._state.state

    @property
    def loop_mode(self) -> LoopMode:
        return self._state.loop_mode

    @property
    def volume(self) -> float:
        return self._state.volume

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def is_idle(self) -> bool:
        return self._state.is_idle and self._state.current_track is None

    @property
    def is_destroyed(self) -> bool:
        return self._state.is_destroyed

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    def info(self) -> QueueInfo:
        return QueueInfo(
            tracks=list(self._state.tracks),
            current_track=self._state.current_track,
            is_playing=self._state.is_playing,
            is_paused=self._state.is_paused,
            volume=self._state.volume_percent,
            loop_mode=self._state.loop_mode,
        )

    # ─── Pending list ─────────────────────────────────────────────────

    def add_track(self, track: Track) -> int | None:
        """Append a track; returns its zero-based position, or None if it was refused."""
        if self.is_destroyed:
            return None
        try:
            position = self._state.enqueue(track)
        except BusinessRuleViolationError:
            logger.info(LogTemplates.QUEUE_FULL, self.guild_id, self._state.max_size)
            return None

        logger.info(LogTemplates.QUEUE_TRACK_ADDED, track.title, position, self.guild_id)
        return position

    def remove_track(self, index: QueuePositionInt) -> Track | None:
        if self.is_destroyed:
            return None
        return self._state.remove_at(index)

    def shuffle(self) -> bool:
        if self.is_destroyed or not self._state.shuffle(self._rng):
            return False
        logger.info(LogTemplates.QUEUE_SHUFFLED, self._state.queue_length, self.guild_id)
        return True

    def set_loop_mode(self, mode: LoopMode) -> None:
        self._state.loop_mode = mode
        logger.info(LogTemplates.LOOP_MODE_CHANGED, mode.value, self.guild_id)

    def set_volume(self, percent: int) -> int:
        """Clamp and apply a 0-100 volume; returns the stored percentage."""
        stored = self._state.set_volume_percent(percent)
        if not self.is_destroyed:
            self._session.set_volume(self._state.volume)
        return stored

    # ─── Playback controls ────────────────────────────────────────────

    async def skip(self) -> bool:
        """Abandon the current track and move on."""
        if self.is_destroyed:
            return False
        if self._state.current_track is None and not self._state.tracks:
            return False

        if self._state.loop_mode == LoopMode.TRACK:
            self._state.drop_current()
        self._session.stop()
        await self.advance()
        return True

    def stop(self) -> bool:
        """Clear every pending track, stop the player and settle in IDLE."""
        if self.is_destroyed:
            return False

        self._epoch += 1
        self._load_token += 1
        self._state.clear_queue()
        self._settle_idle()
        self._session.stop()
        return True

    def pause(self) -> bool:
        if not self._state.is_playing or not self._session.pause():
            return False
        self._state.transition_to(PlaybackState.PAUSED)
        return True

    def resume(self) -> bool:
        if not self._state.is_paused or not self._session.resume():
            return False
        self._state.transition_to(PlaybackState.PLAYING)
        return True

    # ─── State machine ────────────────────────────────────────────────

    async def advance(self) -> Track | None:
        """Select the next track and start it; returns the track now playing, if any.

        A track whose stream cannot be acquired is dropped and the next one is
        tried, up to ``max_consecutive_failures`` times in a row.
        """
        if self.is_destroyed:
            return None

        self._load_token += 1
        token = self._load_token
        failures = 0

        while True:
            if self._is_stale(token):
                return None

            track = self._state.advance_to_next_track()
            if track is None:
                self._settle_idle()
                logger.info(LogTemplates.PLAYBACK_QUEUE_FINISHED, self.guild_id)
                return None

            self._state.transition_to(PlaybackState.LOADING)
            try:
                stream = await self._resolver.open_stream(track.url, self._options.stream_quality)
                if self._is_stale(token):
                    logger.debug(LogTemplates.PLAYBACK_STALE_COMPLETION, track.title, self.guild_id)
                    return None
                await self._session.play(stream, self._state.volume)
            except Exception as exc:
                if self._is_stale(token):
                    return None

                failures += 1
                logger.warning(
                    LogTemplates.PLAYBACK_STREAM_FAILED,
                    track.title,
                    self.guild_id,
                    failures,
                    exc_info=not isinstance(exc, StreamUnavailableError),
                )
                self._state.drop_current()
                await self._notifier.send_text(
                    DiscordUIMessages.NOTICE_TRACK_FAILED.format(title=track.title)
                )

                if failures >= self._options.max_consecutive_failures:
                    logger.error(LogTemplates.PLAYBACK_FAILURE_LIMIT, failures, self.guild_id)
                    if not self._is_stale(token):
                        self._settle_idle()
                    await self._notifier.send_text(DiscordUIMessages.NOTICE_TOO_MANY_FAILURES)
                    return None
                continue

            self._state.transition_to(PlaybackState.PLAYING)
            logger.info(LogTemplates.PLAYBACK_STARTED, track.title, self.guild_id)
            await self._notifier.send_now_playing(track, self._state.queue_length)
            return track

    def handle_signal(self, event: PlayerEvent) -> None:
        """Dispatch one lifecycle signal from the playback session or transport."""
        if self.is_destroyed:
            return

        if event.signal == LifecycleSignal.STARTED:
            logger.debug(LogTemplates.PLAYBACK_PLAYER_STARTED, self.guild_id)
        elif event.signal == LifecycleSignal.ENDED:
            self._schedule_advance()
        elif event.signal == LifecycleSignal.ERROR:
            logger.error(LogTemplates.PLAYBACK_PLAYER_ERROR, self.guild_id, event.error)
            self._state.drop_current()
            self._schedule_advance(notice=DiscordUIMessages.NOTICE_PLAYER_ERROR)
        elif event.signal == LifecycleSignal.DISCONNECTED:
            if self._reconnect_task is not None and not self._reconnect_task.done():
                return
            self._reconnect_task = asyncio.get_running_loop().create_task(
                self._await_reconnect()
            )

    async def settled(self) -> None:
        """Wait for any scheduled advance or reconnect wait to finish."""
        for task in (self._advance_task, self._reconnect_task):
            if task is not None and task is not asyncio.current_task():
                await asyncio.gather(task, return_exceptions=True)

    async def destroy(self) -> bool:
        """Release the playback session and transport. Returns False if already destroyed."""
        if self.is_destroyed:
            return False

        self._epoch += 1
        self._load_token += 1
        self._state.clear_queue()
        self._state.drop_current()
        self._state.transition_to(PlaybackState.DESTROYED)

        current = asyncio.current_task()
        for task in (self._advance_task, self._reconnect_task):
            if task is not None and task is not current and not task.done():
                task.cancel()

        try:
            self._session.stop()
        except Exception:
            logger.exception(LogTemplates.FFMPEG_STOP_FAILED, self.guild_id)
        try:
            await self._transport.disconnect()
        except Exception:
            logger.exception(LogTemplates.VOICE_DISCONNECT_FAILED, self.guild_id)

        logger.info(LogTemplates.QUEUE_DESTROYED, self.guild_id)
        return True

    # ─── Internals ────────────────────────────────────────────────────

    def _is_stale(self, token: int) -> bool:
        return token != self._load_token or self.is_destroyed

    def _settle_idle(self) -> None:
        self._state.drop_current()
        if self._state.state != PlaybackState.IDLE:
            self._state.transition_to(PlaybackState.IDLE)

    def _schedule_advance(self, notice: str | None = None) -> None:
        self._advance_task = asyncio.get_running_loop().create_task(self._advance_after(notice))

    async def _advance_after(self, notice: str | None) -> Track | None:
        if notice:
            await self._notifier.send_text(notice)
        return await self.advance()

    async def _await_reconnect(self) -> None:
        grace = self._options.reconnect_grace_seconds
        logger.warning(LogTemplates.VOICE_RECONNECT_WAIT, self.guild_id, grace)

        if await self._transport.wait_until_connected(grace):
            logger.info(LogTemplates.VOICE_RECONNECTED, self.guild_id)
            return

        logger.warning(LogTemplates.VOICE_RECONNECT_GAVE_UP, self.guild_id)
        if self._on_disconnect is not None:
            await self._on_disconnect(self.guild_id)
        else:
            await self.destroy()

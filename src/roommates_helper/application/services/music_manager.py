"""Music Manager - registry of guild queues and the operations the commands use."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import TYPE_CHECKING

from ...domain.music.entities import Requester, Track
from ...domain.music.value_objects import LoopMode
from ...domain.shared.exceptions import QueueNotFoundError, VoiceConnectionError
from ...domain.shared.messages import DiscordUIMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake, NonEmptyStr, QueuePositionInt
from .music_queue import MusicQueue
from .queue_models import PlayResult, QueueInfo, QueueOptions

if TYPE_CHECKING:
    from ...domain.music.entities import SearchResult
    from ..interfaces.audio_resolver import AudioResolver
    from ..interfaces.notifier import Notifier
    from ..interfaces.voice_adapter import VoiceAdapter

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown Title"


class MusicManager:
    """Owns the guild -> queue map and every cross-cutting music operation.

    Operations that target a guild without a queue report ``False`` or
    ``None`` instead of raising; only :meth:`require_queue` raises.
    """

    def __init__(
        self,
        *,
        resolver: AudioResolver,
        voice_adapter: VoiceAdapter,
        options: QueueOptions | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._resolver = resolver
        self._voice_adapter = voice_adapter
        self._options = options or QueueOptions()
        self._rng = rng
        self._queues: dict[DiscordSnowflake, MusicQueue] = {}
        self._create_locks: dict[DiscordSnowflake, asyncio.Lock] = {}

    # ─── Registry ─────────────────────────────────────────────────────

    @property
    def guild_ids(self) -> list[DiscordSnowflake]:
        return list(self._queues)

    def get_queue(self, guild_id: DiscordSnowflake) -> MusicQueue | None:
        return self._queues.get(guild_id)

    def require_queue(self, guild_id: DiscordSnowflake) -> MusicQueue:
        queue = self._queues.get(guild_id)
        if queue is None:
            raise QueueNotFoundError(guild_id)
        return queue

    async def create_queue(
        self,
        guild_id: DiscordSnowflake,
        voice_channel_id: DiscordSnowflake,
        notifier: Notifier,
    ) -> MusicQueue:
        """Return the guild's queue, connecting to voice and creating it if needed.

        Raises VoiceConnectionError when the voice channel cannot be joined.
        """
        existing = self._queues.get(guild_id)
        if existing is not None:
            return existing

        lock = self._create_locks.setdefault(guild_id, asyncio.Lock())
        async with lock:
            existing = self._queues.get(guild_id)
            if existing is not None:
                return existing

            transport = await self._voice_adapter.connect(guild_id, voice_channel_id)
            session = self._voice_adapter.create_session(guild_id)
            transport.attach(session)

            queue = MusicQueue(
                guild_id=guild_id,
                transport=transport,
                session=session,
                notifier=notifier,
                resolver=self._resolver,
                options=self._options,
                on_disconnect=self.destroy_queue,
                rng=self._rng,
            )
            self._queues[guild_id] = queue
            logger.info(LogTemplates.QUEUE_CREATED, guild_id)
            return queue

    async def destroy_queue(self, guild_id: DiscordSnowflake) -> bool:
        """Stop playback, release voice and forget the guild. Safe to repeat."""
        queue = self._queues.pop(guild_id, None)
        self._create_locks.pop(guild_id, None)
        if queue is None:
            return False
        await queue.destroy()
        return True

    async def cleanup(self) -> None:
        """Destroy every registered queue; used at shutdown."""
        guild_ids = list(self._queues)
        if guild_ids:
            logger.info(LogTemplates.QUEUE_CLEANUP, len(guild_ids))
        for guild_id in guild_ids:
            try:
                await self.destroy_queue(guild_id)
            except Exception:
                logger.exception(LogTemplates.QUEUE_DESTROY_FAILED, guild_id)

    # ─── Play ─────────────────────────────────────────────────────────

    async def play(
        self,
        guild_id: DiscordSnowflake,
        voice_channel_id: DiscordSnowflake,
        notifier: Notifier,
        query: NonEmptyStr,
        requester: Requester,
    ) -> PlayResult:
        """Resolve ``query``, queue the top match and start playback when idle."""
        try:
            queue = await self.create_queue(guild_id, voice_channel_id, notifier)
            epoch = queue.epoch

            results = await self._resolver.search(query)
            if not results:
                logger.info(LogTemplates.RESOLVE_NO_RESULTS, query)
                return PlayResult.failed(DiscordUIMessages.ERROR_NO_TRACKS_FOUND)

            result = results[0]
            if not result.has_playable_url:
                logger.warning(LogTemplates.RESOLVE_NO_URL, result.title)
                return PlayResult.failed(DiscordUIMessages.ERROR_NO_PLAYABLE_URL)

            if queue.epoch != epoch or queue.is_destroyed:
                logger.info(LogTemplates.PLAYBACK_STALE_COMPLETION, result.title, guild_id)
                return PlayResult.failed(DiscordUIMessages.ERROR_PLAY_CANCELLED)

            track = self._build_track(result, requester)
            should_start = queue.is_idle
            position = queue.add_track(track)
            if position is None:
                return PlayResult.failed(
                    DiscordUIMessages.ERROR_QUEUE_FULL.format(max_size=self._options.max_queue_size)
                )

            if should_start:
                await queue.advance()

            started = queue.current_track is track
            if should_start and not started:
                return PlayResult.failed(
                    DiscordUIMessages.ERROR_TRACK_NOT_STARTED.format(title=track.title)
                )

            return PlayResult(
                success=True,
                track=track,
                position=0 if started else len(queue.tracks),
                queue_length=len(queue.tracks),
                started=started,
            )
        except VoiceConnectionError:
            return PlayResult.failed(DiscordUIMessages.ERROR_COULD_NOT_JOIN_VOICE)
        except Exception:
            logger.exception(LogTemplates.PLAY_FAILED, guild_id, query)
            return PlayResult.failed(DiscordUIMessages.ERROR_PLAY_FAILED)

    def _build_track(self, result: SearchResult, requester: Requester) -> Track:
        title = (result.title or "").strip() or UNKNOWN_TITLE
        return Track(
            title=title[:500],
            url=result.url.strip(),
            duration_ms=(result.duration_seconds or 0) * 1000,
            requester=requester,
            thumbnail_url=result.thumbnail_url or None,
        )

    # ─── Per-guild operations ─────────────────────────────────────────

    async def skip(self, guild_id: DiscordSnowflake) -> bool:
        queue = self._queues.get(guild_id)
        if queue is None:
            return False
        return await queue.skip()

    def stop(self, guild_id: DiscordSnowflake) -> bool:
        queue = self._queues.get(guild_id)
        if queue is None:
            return False
        return queue.stop()

    def pause(self, guild_id: DiscordSnowflake) -> bool:
        queue = self._queues.get(guild_id)
        if queue is None:
            return False
        return queue.pause()

    def resume(self, guild_id: DiscordSnowflake) -> bool:
        queue = self._queues.get(guild_id)
        if queue is None:
            return False
        return queue.resume()

    def set_volume(self, guild_id: DiscordSnowflake, percent: int) -> int | None:
        """Clamp ``percent`` to 0..100 and apply it; returns the stored percentage."""
        queue = self._queues.get(guild_id)
        if queue is None:
            return None
        return queue.set_volume(percent)

    def shuffle(self, guild_id: DiscordSnowflake) -> bool:
        queue = self._queues.get(guild_id)
        if queue is None:
            return False
        return queue.shuffle()

    def remove_track(self, guild_id: DiscordSnowflake, index: QueuePositionInt) -> Track | None:
        queue = self._queues.get(guild_id)
        if queue is None:
            return None
        return queue.remove_track(index)

    def set_loop_mode(self, guild_id: DiscordSnowflake, mode: LoopMode) -> bool:
        queue = self._queues.get(guild_id)
        if queue is None:
            return False
        queue.set_loop_mode(mode)
        return True

    def get_queue_info(self, guild_id: DiscordSnowflake) -> QueueInfo | None:
        queue = self._queues.get(guild_id)
        if queue is None:
            return None
        return queue.info()

"""AudioResolver implementation using yt-dlp for search and stream extraction."""

from __future__ import annotations

import asyncio
import logging
import re
import threading
import time
from typing import Any, Final, cast

from yt_dlp import YoutubeDL

from roommates_helper.application.interfaces.audio_resolver import AudioResolver
from roommates_helper.config.settings import AudioSettings
from roommates_helper.domain.music.entities import SearchResult
from roommates_helper.domain.music.value_objects import AudioStream
from roommates_helper.domain.shared.constants import AudioConstants, TimeConstants
from roommates_helper.domain.shared.exceptions import StreamUnavailableError
from roommates_helper.domain.shared.messages import ErrorMessages, LogTemplates
from roommates_helper.infrastructure.audio.models import (
    CACHE_MAX_SIZE,
    CACHE_TTL,
    LOG_URL_TRUNCATE,
    AudioFormatInfo,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)

logger = logging.getLogger(__name__)

URL_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"https?://"),
    re.compile(r"www\."),
]


class YtDlpResolver(AudioResolver):
    """Searches with ``ytsearch1:`` and extracts direct audio URLs for FFmpeg."""

    def __init__(
        self,
        settings: AudioSettings | None = None,
        *,
        timeout: float = TimeConstants.RESOLVE_TIMEOUT,
    ) -> None:
        self._settings = settings or AudioSettings()
        self._timeout = timeout
        self._base_opts = YtDlpOpts(format=self._settings.ytdlp_format)
        self._stream_cache: dict[tuple[str, str], CacheEntry] = {}
        self._cache_lock = threading.Lock()

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    def _format_for_quality(self, quality: int) -> str:
        if quality >= AudioConstants.DEFAULT_STREAM_QUALITY:
            return self._settings.ytdlp_format
        return AudioConstants.QUALITY_FORMATS.get(quality, self._settings.ytdlp_format)

    @staticmethod
    def _parse_info(data: dict[str, Any]) -> YtDlpTrackInfo:
        return YtDlpTrackInfo.model_validate(data)

    @staticmethod
    def _info_to_result(info: YtDlpTrackInfo, fallback_url: str | None = None) -> SearchResult:
        return SearchResult(
            title=info.title,
            url=info.webpage_url or fallback_url or info.url,
            duration_seconds=info.duration,
            thumbnail_url=info.first_thumbnail,
        )

    @staticmethod
    def _extract_stream_from_formats(formats: list[AudioFormatInfo]) -> str | None:
        audio_formats = [f for f in formats if f.acodec != "none" and f.url]
        if audio_formats:
            return audio_formats[-1].url
        return None

    # ─── Blocking yt-dlp calls (run in a worker thread) ───────────────

    def _lookup_sync(self, url: str) -> YtDlpTrackInfo | None:
        try:
            opts = self._get_opts(extract_flat="in_playlist")
            with YoutubeDL(params=cast(Any, opts.model_dump())) as ydl:
                data = ydl.extract_info(url, download=False)
                return self._parse_info(dict(data)) if isinstance(data, dict) else None
        except Exception:
            logger.exception(LogTemplates.EXTRACT_FAILED, url[:LOG_URL_TRUNCATE])
            return None

    def _search_sync(self, query: str, limit: int = 1) -> list[YtDlpTrackInfo]:
        try:
            search_query = f"ytsearch{limit}:{query}"
            opts = self._get_opts(extract_flat="in_playlist")
            with YoutubeDL(params=cast(Any, opts.model_dump())) as ydl:
                data = ydl.extract_info(search_query, download=False)

                if not isinstance(data, dict):
                    return []

                entries = data.get("entries", [])
                if not isinstance(entries, list):
                    return []

                return [self._parse_info(dict(e)) for e in entries if e]
        except Exception:
            logger.exception(LogTemplates.SEARCH_FAILED, query)
            return []

    def _extract_stream_sync(self, url: str, fmt: str) -> CacheEntry | None:
        now = time.time()
        key = (url, fmt)
        with self._cache_lock:
            cached = self._stream_cache.get(key)
            if cached is not None:
                if now - cached.cached_at < CACHE_TTL:
                    return cached
                self._stream_cache.pop(key, None)

        try:
            with YoutubeDL(params=cast(Any, self._get_opts(format=fmt).model_dump())) as ydl:
                data = ydl.extract_info(url, download=False)
        except Exception:
            logger.exception(LogTemplates.EXTRACT_FAILED, url[:LOG_URL_TRUNCATE])
            return None

        if not isinstance(data, dict):
            return None

        info = self._parse_info(dict(data))
        stream_url = info.url or self._extract_stream_from_formats(info.formats)
        if not stream_url:
            logger.warning(ErrorMessages.NO_URL_IN_INFO_DICT)
            return None

        entry = CacheEntry(stream_url=stream_url, title=info.title, cached_at=now)
        # extract_stream runs on worker threads, one per concurrent guild
        with self._cache_lock:
            self._stream_cache[key] = entry
            if len(self._stream_cache) > CACHE_MAX_SIZE:
                expired = [
                    k for k, e in self._stream_cache.items() if now - e.cached_at >= CACHE_TTL
                ]
                for k in expired:
                    self._stream_cache.pop(k, None)

        return entry

    # ─── AudioResolver ────────────────────────────────────────────────

    async def search(self, query: str) -> list[SearchResult]:
        query = query.strip()
        try:
            async with asyncio.timeout(self._timeout):
                if self.is_url(query):
                    info = await asyncio.to_thread(self._lookup_sync, query)
                    return [self._info_to_result(info, fallback_url=query)] if info else []

                results = await asyncio.to_thread(self._search_sync, query, 1)
                return [self._info_to_result(info) for info in results[:1]]
        except TimeoutError:
            logger.warning(LogTemplates.RESOLVE_TIMEOUT, query)
            return []

    async def open_stream(self, url: str, quality: int) -> AudioStream:
        fmt = self._format_for_quality(quality)
        try:
            async with asyncio.timeout(self._timeout):
                entry = await asyncio.to_thread(self._extract_stream_sync, url, fmt)
        except TimeoutError as e:
            logger.warning(LogTemplates.RESOLVE_TIMEOUT, url)
            raise StreamUnavailableError(
                url, ErrorMessages.RESOLVE_TIMED_OUT.format(timeout=self._timeout, target=url)
            ) from e

        if entry is None:
            raise StreamUnavailableError(url, ErrorMessages.NO_STREAM_URL_FOR_TRACK.format(url=url))

        return AudioStream(
            source=entry.stream_url,
            input_type=AudioConstants.INPUT_TYPE_FFMPEG,
            title=entry.title,
        )

    def is_url(self, query: str) -> bool:
        return any(pattern.search(query) for pattern in URL_PATTERNS)

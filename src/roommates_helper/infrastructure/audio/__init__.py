"""Audio infrastructure - yt-dlp resolver and FFmpeg playback session."""

from roommates_helper.infrastructure.audio.ffmpeg_player import FFmpegConfig, FFmpegPlaybackSession
from roommates_helper.infrastructure.audio.models import (
    AudioFormatInfo,
    CacheEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)
from roommates_helper.infrastructure.audio.ytdlp_resolver import YtDlpResolver

__all__ = [
    "AudioFormatInfo",
    "CacheEntry",
    "FFmpegConfig",
    "FFmpegPlaybackSession",
    "YtDlpOpts",
    "YtDlpResolver",
    "YtDlpTrackInfo",
]

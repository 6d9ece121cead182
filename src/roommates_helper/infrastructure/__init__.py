"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Discord (bot, cogs, views, voice and notification adapters)
- Audio (yt-dlp, FFmpeg)
"""

"""Discord cogs - command handlers."""

from roommates_helper.infrastructure.discord.cogs.event_cog import EventCog
from roommates_helper.infrastructure.discord.cogs.music_cog import MusicCog

__all__ = [
    "EventCog",
    "MusicCog",
]

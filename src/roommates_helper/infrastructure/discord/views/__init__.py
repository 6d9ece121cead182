"""Discord UI views and components."""

from __future__ import annotations

from roommates_helper.infrastructure.discord.views.base_view import BaseInteractiveView
from roommates_helper.infrastructure.discord.views.now_playing_view import NowPlayingView

__all__ = [
    "BaseInteractiveView",
    "NowPlayingView",
]

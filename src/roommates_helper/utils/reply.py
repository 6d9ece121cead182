"""Utility functions for formatting Discord messages."""

from __future__ import annotations

from functools import cache


def format_track_count(count: int) -> str:
    """``1 track`` / ``3 tracks``."""
    return f"{count} track" if count == 1 else f"{count} tracks"


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"

"""Roommates Helper - a Discord community bot with per-guild music playback."""

__version__ = "1.0.0"

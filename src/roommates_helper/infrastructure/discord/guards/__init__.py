"""Guard functions for Discord cogs and views."""

from roommates_helper.infrastructure.discord.guards.voice_guards import (
    check_user_in_voice,
    ensure_user_in_voice,
    get_member,
    has_voice_permissions,
    send_ephemeral,
)

__all__ = [
    "check_user_in_voice",
    "ensure_user_in_voice",
    "get_member",
    "has_voice_permissions",
    "send_ephemeral",
]

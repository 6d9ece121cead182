"""Embed builders for now-playing, track-added, and queue replies."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import discord

from roommates_helper.domain.shared.constants import EmbedColors
from roommates_helper.domain.shared.messages import DiscordUIMessages
from roommates_helper.utils.reply import format_track_count, truncate

if TYPE_CHECKING:
    from ...application.services.queue_models import QueueInfo
    from ...domain.music.entities import Track

QUEUE_LIST_LIMIT = 10
TITLE_MAX_LENGTH = 200


def status_label(info: QueueInfo) -> str:
    if info.is_playing:
        return DiscordUIMessages.STATUS_PLAYING
    if info.is_paused:
        return DiscordUIMessages.STATUS_PAUSED
    return DiscordUIMessages.STATUS_IDLE


def _base_track_embed(track: Track, *, title: str, color: int) -> discord.Embed:
    embed = discord.Embed(
        title=title,
        description=f"**{truncate(track.title, TITLE_MAX_LENGTH)}**",
        color=color,
        timestamp=datetime.now(UTC),
    )
    if track.thumbnail_url:
        embed.set_thumbnail(url=track.thumbnail_url)

    embed.add_field(name=DiscordUIMessages.FIELD_DURATION, value=track.duration_formatted, inline=True)
    embed.add_field(
        name=DiscordUIMessages.FIELD_REQUESTED_BY, value=track.requester.mention, inline=True
    )
    return embed


def build_now_playing_embed(
    track: Track,
    remaining: int,
    *,
    info: QueueInfo | None = None,
) -> discord.Embed:
    """Announce ``track``. With ``info`` the embed also shows volume and status."""
    embed = _base_track_embed(
        track, title=DiscordUIMessages.EMBED_NOW_PLAYING, color=EmbedColors.NOW_PLAYING
    )

    if info is not None:
        embed.add_field(name=DiscordUIMessages.FIELD_VOLUME, value=f"{info.volume}%", inline=True)
        embed.add_field(name=DiscordUIMessages.FIELD_STATUS, value=status_label(info), inline=True)
        field_name = DiscordUIMessages.FIELD_QUEUE
    else:
        field_name = DiscordUIMessages.FIELD_QUEUE_POSITION

    embed.add_field(
        name=field_name,
        value=DiscordUIMessages.VALUE_REMAINING.format(count=format_track_count(remaining)),
        inline=True,
    )
    return embed


def build_track_added_embed(track: Track, position: int) -> discord.Embed:
    embed = _base_track_embed(
        track, title=DiscordUIMessages.EMBED_TRACK_ADDED, color=EmbedColors.TRACK_ADDED
    )
    embed.add_field(
        name=DiscordUIMessages.FIELD_POSITION,
        value=str(position) if position > 0 else DiscordUIMessages.VALUE_PLAYING_NOW,
        inline=True,
    )
    return embed


def build_queue_embed(info: QueueInfo, *, limit: int = QUEUE_LIST_LIMIT) -> discord.Embed:
    embed = discord.Embed(
        title=DiscordUIMessages.EMBED_QUEUE,
        color=EmbedColors.QUEUE,
        timestamp=datetime.now(UTC),
    )

    if info.current_track is not None:
        embed.add_field(
            name=f"🎵 {DiscordUIMessages.FIELD_NOW_PLAYING}",
            value=DiscordUIMessages.VALUE_CURRENT_LINE.format(
                title=truncate(info.current_track.title, TITLE_MAX_LENGTH),
                requester=info.current_track.requester.mention,
            ),
            inline=False,
        )

    if info.tracks:
        lines = [
            DiscordUIMessages.VALUE_QUEUE_LINE.format(
                index=index,
                title=truncate(track.title, 80),
                duration=track.duration_formatted,
                requester=track.requester.mention,
            )
            for index, track in enumerate(info.tracks[:limit], start=1)
        ]
        embed.add_field(
            name=DiscordUIMessages.EMBED_UP_NEXT.format(count=format_track_count(info.remaining)),
            value="\n\n".join(lines),
            inline=False,
        )
        if info.remaining > limit:
            embed.set_footer(
                text=DiscordUIMessages.EMBED_MORE_TRACKS.format(
                    count=info.remaining - limit
                )
            )
    else:
        embed.add_field(
            name=DiscordUIMessages.EMBED_UP_NEXT_EMPTY,
            value=DiscordUIMessages.EMBED_QUEUE_EMPTY,
            inline=False,
        )

    embed.add_field(name=f"🔊 {DiscordUIMessages.FIELD_VOLUME}", value=f"{info.volume}%", inline=True)
    embed.add_field(name=f"▶️ {DiscordUIMessages.FIELD_STATUS}", value=status_label(info), inline=True)
    embed.add_field(
        name=f"🔁 {DiscordUIMessages.FIELD_LOOP}", value=info.loop_mode.value.title(), inline=True
    )
    return embed

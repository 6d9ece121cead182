"""Reusable guard functions for Discord slash commands and views.

These are free functions that accept the interaction explicitly rather than
relying on a specific cog instance, making them usable from any cog or view.
"""

from __future__ import annotations

import discord

from roommates_helper.domain.shared.messages import DiscordUIMessages

VoiceChannel = discord.VoiceChannel | discord.StageChannel


async def send_ephemeral(interaction: discord.Interaction, message: str) -> None:
    """Send an ephemeral message, handling both fresh and already-responded interactions."""
    if interaction.response.is_done():
        await interaction.followup.send(message, ephemeral=True)
    else:
        await interaction.response.send_message(message, ephemeral=True)


async def get_member(interaction: discord.Interaction) -> discord.Member | None:
    """Validate that the interaction comes from a guild member. Returns None with error on failure."""
    if not interaction.guild or not isinstance(interaction.user, discord.Member):
        await send_ephemeral(interaction, DiscordUIMessages.ERROR_SERVER_ONLY)
        return None
    return interaction.user


def has_voice_permissions(channel: VoiceChannel, me: discord.Member) -> bool:
    permissions = channel.permissions_for(me)
    return permissions.connect and permissions.speak


async def ensure_user_in_voice(interaction: discord.Interaction) -> VoiceChannel | None:
    """Return the member's voice channel if the bot may join it.

    Replies ephemerally and returns None when the user is not in voice or
    the bot lacks Connect/Speak there.
    """
    member = await get_member(interaction)
    if member is None:
        return None

    if not member.voice or not member.voice.channel:
        await send_ephemeral(interaction, DiscordUIMessages.ERROR_NOT_IN_VOICE)
        return None

    channel = member.voice.channel
    assert interaction.guild is not None
    me = interaction.guild.me
    if me is None or not has_voice_permissions(channel, me):
        await send_ephemeral(interaction, DiscordUIMessages.ERROR_MISSING_VOICE_PERMISSIONS)
        return None

    return channel


async def check_user_in_voice(interaction: discord.Interaction, guild_id: int) -> bool:
    """Return True if the interacting user is in the bot's voice channel.

    Sends an ephemeral rejection and returns False otherwise.
    Used as an ``interaction_check`` in views that require voice presence.
    """
    user = interaction.user
    if not isinstance(user, discord.Member):
        await send_ephemeral(interaction, DiscordUIMessages.ERROR_SERVER_ONLY)
        return False

    if not user.voice or not user.voice.channel:
        await send_ephemeral(interaction, DiscordUIMessages.ERROR_NOT_IN_VOICE)
        return False

    guild = interaction.client.get_guild(guild_id)
    if guild and guild.voice_client and guild.voice_client.channel:
        if user.voice.channel.id != guild.voice_client.channel.id:
            await send_ephemeral(interaction, DiscordUIMessages.ERROR_MUST_SHARE_VOICE)
            return False

    return True

"""Centralized message constants for error messages, logging, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Configuration Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    DISCORD_TOKEN_REQUIRED = "DISCORD_TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"

    # Audio/Stream Errors
    NO_URL_IN_INFO_DICT = "No URL found in info dict"
    NO_STREAM_URL_FOR_TRACK = "No stream URL found for {url}"
    RESOLVE_TIMED_OUT = "Timed out after {timeout}s resolving {target}"

    # Voice Errors
    SESSION_ALREADY_ATTACHED = "A playback session is already attached to this transport"
    SESSION_NOT_BOUND = "Playback session is not bound to a voice client"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting.
    """

    # Voice/Audio Operations
    VOICE_CONNECTED = "Connected to voice channel %s in guild %s"
    VOICE_MOVED = "Moved to voice channel %s in guild %s"
    VOICE_CONNECT_TIMEOUT = "Timed out connecting to voice channel %s in guild %s"
    VOICE_CONNECT_FAILED = "Failed to connect to voice channel %s in guild %s"
    VOICE_CHANNEL_NOT_FOUND = "Voice channel %s not found in guild %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_DISCONNECT_FAILED = "Error disconnecting voice client in guild %s"
    VOICE_BOT_LEFT_CHANNEL = "Bot left voice channel %s in guild %s"
    VOICE_BOT_MOVED_CHANNEL = "Bot moved from channel %s to %s in guild %s"
    VOICE_RECONNECT_WAIT = "Voice lost in guild %s, waiting %ss for reconnection"
    VOICE_RECONNECTED = "Voice reconnected in guild %s"
    VOICE_RECONNECT_GAVE_UP = "Voice did not reconnect in guild %s, destroying queue"

    # FFmpeg/Audio Resource Management
    FFMPEG_SOURCE_CREATED = "Created FFmpeg source for %s"
    FFMPEG_PLAYBACK_ERROR = "Playback error in guild %s: %s"
    FFMPEG_STOP_FAILED = "Failed to stop playback in guild %s"

    # Playback Operations
    PLAYBACK_STARTED = "Now playing '%s' in guild %s"
    PLAYBACK_STREAM_FAILED = "Could not stream '%s' in guild %s (%s consecutive failures)"
    PLAYBACK_FAILURE_LIMIT = "Giving up after %s consecutive stream failures in guild %s"
    PLAYBACK_STALE_COMPLETION = "Discarding stale completion for '%s' in guild %s"
    PLAYBACK_PLAYER_STARTED = "Audio player started in guild %s"
    PLAYBACK_PLAYER_ERROR = "Audio player reported an error in guild %s: %s"
    PLAYBACK_QUEUE_FINISHED = "Queue finished in guild %s"

    # Queue Operations
    QUEUE_CREATED = "Created music queue for guild %s"
    QUEUE_DESTROYED = "Destroyed music queue for guild %s"
    QUEUE_TRACK_ADDED = "Queued '%s' at position %s in guild %s"
    QUEUE_FULL = "Queue is full in guild %s (max %s tracks)"
    QUEUE_SHUFFLED = "Shuffled %s tracks in guild %s"
    QUEUE_CLEANUP = "Destroying %s music queues"
    QUEUE_DESTROY_FAILED = "Error destroying music queue for guild %s"

    # Loop Mode
    LOOP_MODE_CHANGED = "Loop mode set to %s in guild %s"

    # Resolution/Search
    RESOLVE_NO_RESULTS = "No results for query '%s'"
    RESOLVE_NO_URL = "Search result '%s' has no playable URL"
    RESOLVE_TIMEOUT = "Timed out resolving '%s'"
    SEARCH_FAILED = "yt-dlp search failed for '%s'"
    EXTRACT_FAILED = "yt-dlp extraction failed for '%s'"
    PLAY_FAILED = "Play request failed in guild %s for '%s'"

    # Notifications
    NOTIFY_FAILED = "Failed to send notification to channel %s"

    # Cog Lifecycle
    COG_LOADED = "Loaded cog %s"
    COG_LOAD_FAILED = "Failed to load cog %s"
    COGS_LOADED_SUMMARY = "Loaded %s cogs (%s failed)"

    # Commands
    COMMAND_USED = "Command /%s used by %s in guild %s"
    COMMAND_SYNCED = "Synced %s application commands"
    COMMAND_SYNCED_GUILD = "Synced %s application commands to guild %s"
    COMMAND_SYNC_FAILED = "Failed to sync application commands"
    COMMAND_ERROR = "Error in app command /%s"
    COMMAND_ERROR_REPLY_FAILED = "Failed to send error reply for app command"

    # Application Lifecycle
    BOT_READY = "🚀 %s is online and ready in %s guilds"
    BOT_SHUTTING_DOWN = "🛑 Received %s, shutting down gracefully..."
    BOT_STARTING = "Starting Roommates Helper (%s)"
    BOT_STOPPED = "Bot stopped"
    BOT_FATAL_ERROR = "Fatal error while running the bot"
    GATEWAY_CONNECTED = "WebSocket connected"
    GATEWAY_DISCONNECTED = "WebSocket disconnected"
    GATEWAY_RESUMED = "WebSocket session resumed"
    GUILD_JOINED = "Joined guild: %s (%s)"
    GUILD_LEFT = "Left guild: %s (%s), tearing down its queue"
    VIEW_EDIT_FAILED = "Failed to edit view message %s"
    VIEW_STOPPED_PLAYBACK = "Playback stopped from controls in guild %s"
    LOGGING_CONFIG_FALLBACK = "Could not load %s, falling back to basic config"
    CONFIG_CHECK_OK = "Configuration OK: environment=%s prefix=%s max_queue=%s log_channel=%s"
    BOT_SETUP = "Setting up bot..."
    BOT_SETUP_COMPLETE = "✅ Bot setup complete"
    BOT_CLOSING = "Closing bot and releasing voice resources"
    BOT_SHUTDOWN_TIMEOUT = "Shutdown did not finish within %ss"
    BOT_LOOP_EXCEPTION = "Unhandled exception in event loop: %s"
    CONTAINER_INITIALIZED = "✅ Container initialized"
    CONTAINER_INIT_FAILED = "Container initialization failed"
    CONTAINER_SHUTDOWN = "Container shut down"
    CONTAINER_SHUTDOWN_FAILED = "Container shutdown failed"

    # Discord log forwarding
    LOG_CHANNEL_UNAVAILABLE = "Log channel %s is not available"
    LOG_FORWARD_FAILED = "Failed to forward log record to channel %s"
    LOG_FORWARDING_ENABLED = "Forwarding warnings to log channel %s"


class DiscordUIMessages:
    """User-facing Discord messages and responses.

    These strings are shown directly to users in Discord interactions.
    Keep them concise, friendly, and include appropriate emoji.
    """

    # Success Messages
    ACTION_SKIPPED = "⏭️ Skipped the current track!"
    ACTION_STOPPED = "⏹️ Stopped playing music and cleared the queue!"
    ACTION_PAUSED = "⏸️ Paused the current track!"
    ACTION_RESUMED = "▶️ Resumed the current track!"
    ACTION_VOLUME_SET = "🔊 Volume set to {volume}%!"
    ACTION_SHUFFLED = "🔀 Queue has been shuffled!"
    ACTION_LEFT = "👋 Left the voice channel and cleared the queue!"
    ACTION_TRACK_REMOVED = "🗑️ Removed **{title}** from the queue!"
    ACTION_LOOP_MODE_SET = "🔁 Loop mode set to **{mode}**!"

    # Error Messages
    ERROR_SERVER_ONLY = "This command can only be used in a server!"
    ERROR_NOT_IN_VOICE = "❌ You need to be in a voice channel to play music!"
    ERROR_MUST_SHARE_VOICE = "❌ You must be in the same voice channel as the bot!"
    ERROR_MISSING_VOICE_PERMISSIONS = "❌ I need permission to connect and speak in your voice channel!"
    ERROR_COULD_NOT_JOIN_VOICE = "❌ I couldn't join your voice channel!"
    ERROR_NO_TRACKS_FOUND = "❌ No tracks found for your search query."
    ERROR_NO_PLAYABLE_URL = "❌ Could not get a playable link for that track."
    ERROR_PLAY_FAILED = "❌ An error occurred while trying to play the track."
    ERROR_PLAY_CANCELLED = "❌ Playback was stopped before the track could be added."
    ERROR_TRACK_NOT_STARTED = "❌ Could not start **{title}**, it was removed from the queue."
    ERROR_QUEUE_FULL = "❌ The queue is full (max {max_size} tracks)!"
    ERROR_NOTHING_TO_SKIP = "❌ Nothing to skip!"
    ERROR_NOTHING_PLAYING = "❌ No music is currently playing!"
    ERROR_NOTHING_TO_PAUSE = "❌ Nothing is playing or already paused!"
    ERROR_NOTHING_PAUSED = "❌ Nothing is paused!"
    ERROR_NO_QUEUE = "❌ No music queue found!"
    ERROR_NOT_ENOUGH_TO_SHUFFLE = "❌ Not enough tracks in queue to shuffle!"
    ERROR_NOT_IN_VOICE_CHANNEL = "❌ I'm not currently in a voice channel!"
    ERROR_INVALID_POSITION = "❌ Invalid queue position!"
    ERROR_COMMAND_FAILED = "❌ Something went wrong while running that command."

    # Channel notices
    NOTICE_TRACK_FAILED = "❌ Error playing **{title}**. Skipping to next track..."
    NOTICE_PLAYER_ERROR = "❌ An error occurred while playing music. Skipping to next track..."
    NOTICE_TOO_MANY_FAILURES = "❌ Too many tracks in a row could not be played. Stopping playback."

    # Embed Titles
    EMBED_NOW_PLAYING = "🎵 Now Playing"
    EMBED_TRACK_ADDED = "🎵 Track Added to Queue"
    EMBED_QUEUE = "🎵 Music Queue"
    EMBED_UP_NEXT = "📝 Up Next ({count})"
    EMBED_UP_NEXT_EMPTY = "📝 Up Next"
    EMBED_MORE_TRACKS = "And {count} more tracks..."
    EMBED_QUEUE_EMPTY = "Queue is empty"

    # Embed Fields
    FIELD_NOW_PLAYING = "Now Playing"
    FIELD_DURATION = "Duration"
    FIELD_REQUESTED_BY = "Requested By"
    FIELD_POSITION = "Position in Queue"
    FIELD_VOLUME = "Volume"
    FIELD_STATUS = "Status"
    FIELD_LOOP = "Loop"
    FIELD_QUEUE = "Queue"
    FIELD_QUEUE_POSITION = "Queue Position"

    # Embed values
    VALUE_REMAINING = "{count} remaining"
    VALUE_PLAYING_NOW = "Playing now"
    VALUE_QUEUE_LINE = "{index}. **{title}** - {duration}\n   Requested by: {requester}"
    VALUE_CURRENT_LINE = "**{title}**\nRequested by: {requester}"

    # Status labels
    STATUS_PLAYING = "Playing"
    STATUS_PAUSED = "Paused"
    STATUS_IDLE = "Idle"

    # Button labels
    BUTTON_PAUSE = "Pause"
    BUTTON_RESUME = "Resume"
    BUTTON_SKIP = "Skip"
    BUTTON_STOP = "Stop"


class EmojiConstants:
    """Emoji constants for consistent visual feedback."""

    PLAY = "▶️"
    PAUSE = "⏸️"
    STOP = "⏹️"
    SKIP = "⏭️"


"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class QueueNotFoundError(DomainError):
    """Raised when a caller requires a guild queue that was never created."""

    def __init__(self, guild_id: int, message: str | None = None) -> None:
        msg = message or f"No music queue exists for guild '{guild_id}'"
        super().__init__(msg, code="QUEUE_NOT_FOUND")
        self.guild_id = guild_id


class StreamUnavailableError(DomainError):
    """Raised when no playable audio stream can be acquired for a locator."""

    def __init__(self, url: str, message: str | None = None) -> None:
        super().__init__(message or f"No audio stream available for '{url}'", code="STREAM_UNAVAILABLE")
        self.url = url


class BusinessRuleViolationError(DomainError):
    """Raised when a business rule is violated."""

    def __init__(self, rule: str, message: str | None = None) -> None:
        msg = message or f"Business rule violated: {rule}"
        super().__init__(msg, code="BUSINESS_RULE_VIOLATION")
        self.rule = rule


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class VoiceConnectionError(DomainError):
    """Raised when the bot cannot join or use a guild's voice channel."""

    def __init__(self, guild_id: int, channel_id: int, message: str | None = None) -> None:
        msg = message or f"Could not connect to voice channel '{channel_id}' in guild '{guild_id}'"
        super().__init__(msg, code="VOICE_CONNECTION_FAILED")
        self.guild_id = guild_id
        self.channel_id = channel_id

"""
Shared Domain Kernel

Contains types, messages and exceptions shared across all bounded contexts.
"""

from roommates_helper.domain.shared.exceptions import (
    BusinessRuleViolationError,
    DomainError,
    InvalidOperationError,
    QueueNotFoundError,
    StreamUnavailableError,
    VoiceConnectionError,
)

__all__ = [
    "DomainError",
    "QueueNotFoundError",
    "StreamUnavailableError",
    "BusinessRuleViolationError",
    "InvalidOperationError",
    "VoiceConnectionError",
]

# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, messages, constants and exceptions
- music/: Track, queue state and playback lifecycle values
"""

from roommates_helper.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]

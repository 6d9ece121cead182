"""Port interface for the guild's text notification sink."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.music.entities import Track


class Notifier(ABC):
    """Fire-and-forget messages to the text channel a queue was started from.

    Implementations log and swallow delivery failures.
    """

    @abstractmethod
    async def send_text(self, text: str) -> None:
        ...

    @abstractmethod
    async def send_now_playing(self, track: "Track", remaining: int) -> None:
        """Announce that ``track`` started, with ``remaining`` tracks still pending."""
        ...

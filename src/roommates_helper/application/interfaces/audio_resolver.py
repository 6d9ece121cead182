"""Port interface for searching tracks and acquiring audio streams."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from roommates_helper.domain.shared.types import NonEmptyStr, StreamQuality

if TYPE_CHECKING:
    from ...domain.music.entities import SearchResult
    from ...domain.music.value_objects import AudioStream


class AudioResolver(ABC):
    """Interface for resolving queries to candidates and locators to streams."""

    @abstractmethod
    async def search(self, query: NonEmptyStr) -> list["SearchResult"]:
        """Resolve a query to candidate items.

        An exact URL is looked up directly; anything else is a keyword search
        that returns the top match only.
        """
        ...

    @abstractmethod
    async def open_stream(self, url: NonEmptyStr, quality: StreamQuality) -> "AudioStream":
        """Acquire a playable stream, raising StreamUnavailableError on failure."""
        ...

    @abstractmethod
    def is_url(self, query: NonEmptyStr) -> bool:
        ...

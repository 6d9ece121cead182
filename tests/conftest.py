import asyncio
import random

import pytest

from roommates_helper.application.interfaces.audio_resolver import AudioResolver
from roommates_helper.application.interfaces.notifier import Notifier
from roommates_helper.application.interfaces.voice_adapter import (
    PlaybackSession,
    VoiceAdapter,
    VoiceTransport,
)
from roommates_helper.domain.music.entities import Requester, SearchResult, Track
from roommates_helper.domain.music.value_objects import AudioStream, LifecycleSignal, PlayerEvent
from roommates_helper.domain.shared.exceptions import StreamUnavailableError, VoiceConnectionError

GUILD_ID = 111111111111111111
VOICE_CHANNEL_ID = 222222222222222222
USER_ID = 333333333333333333


# ============================================================================
# Port Fakes
# ============================================================================


class FakeResolver(AudioResolver):
    """In-memory search/stream collaborator.

    ``results`` maps a query to what ``search`` returns; unknown queries get a
    single result titled after the query. URLs in ``failing_urls`` raise on
    ``open_stream``. Setting ``gate`` blocks ``open_stream`` until it is set.
    """

    def __init__(self) -> None:
        self.results: dict[str, list[SearchResult]] = {}
        self.failing_urls: set[str] = set()
        self.opened: list[str] = []
        self.gate: asyncio.Event | None = None

    async def search(self, query):
        if query in self.results:
            return self.results[query]
        slug = query.lower().replace(" ", "-")
        return [
            SearchResult(
                title=query,
                url=f"https://example.com/{slug}",
                duration_seconds=180,
                thumbnail_url=f"https://img.example.com/{slug}.jpg",
            )
        ]

    async def open_stream(self, url, quality):
        self.opened.append(url)
        if self.gate is not None:
            await self.gate.wait()
        if url in self.failing_urls:
            raise StreamUnavailableError(url, "no stream")
        return AudioStream(source=f"{url}/stream", title=url)

    def is_url(self, query):
        return query.startswith("http")


class FakeSession(PlaybackSession):
    def __init__(self, guild_id: int = GUILD_ID) -> None:
        self.guild_id = guild_id
        self.listener = None
        self.played: list[AudioStream] = []
        self.volumes: list[float] = []
        self.stop_calls = 0
        self.fail_play = False
        self._playing = False
        self._paused = False

    def subscribe(self, listener):
        self.listener = listener

    async def play(self, stream, volume):
        if self.fail_play:
            raise StreamUnavailableError(stream.source, "player refused")
        self.played.append(stream)
        self.volumes.append(volume)
        self._playing = True
        self._paused = False
        self.emit(LifecycleSignal.STARTED)

    def stop(self):
        self.stop_calls += 1
        self._playing = False
        self._paused = False

    def pause(self):
        if not self._playing:
            return False
        self._playing = False
        self._paused = True
        return True

    def resume(self):
        if not self._paused:
            return False
        self._playing = True
        self._paused = False
        return True

    def set_volume(self, volume):
        self.volumes.append(volume)

    @property
    def is_playing(self):
        return self._playing

    @property
    def is_paused(self):
        return self._paused

    def emit(self, signal, error=None):
        if self.listener is not None:
            self.listener(PlayerEvent(signal=signal, guild_id=self.guild_id, error=error))

    def finish(self):
        """Simulate the current source reaching its natural end."""
        self._playing = False
        self.emit(LifecycleSignal.ENDED)


class FakeTransport(VoiceTransport):
    def __init__(self, guild_id: int = GUILD_ID, channel_id: int = VOICE_CHANNEL_ID) -> None:
        self.guild_id = guild_id
        self.channel_id = channel_id
        self.listener = None
        self.session = None
        self.connected = True
        self.disconnect_calls = 0
        self.reconnects = False

    def subscribe(self, listener):
        self.listener = listener

    def attach(self, session):
        self.session = session

    async def disconnect(self):
        self.disconnect_calls += 1
        self.connected = False

    async def wait_until_connected(self, timeout):
        await asyncio.sleep(0)
        if self.reconnects:
            self.connected = True
        return self.connected

    @property
    def is_connected(self):
        return self.connected

    def drop(self):
        """Simulate the gateway reporting that voice was lost."""
        self.connected = False
        if self.listener is not None:
            self.listener(PlayerEvent(signal=LifecycleSignal.DISCONNECTED, guild_id=self.guild_id))


class FakeVoiceAdapter(VoiceAdapter):
    def __init__(self) -> None:
        self.transports: dict[int, FakeTransport] = {}
        self.sessions: dict[int, FakeSession] = {}
        self.connect_calls = 0
        self.fail_connect = False

    async def connect(self, guild_id, channel_id):
        self.connect_calls += 1
        if self.fail_connect:
            raise VoiceConnectionError(guild_id, channel_id)
        transport = FakeTransport(guild_id, channel_id)
        self.transports[guild_id] = transport
        return transport

    def create_session(self, guild_id):
        session = FakeSession(guild_id)
        self.sessions[guild_id] = session
        return session

    def get_transport(self, guild_id):
        return self.transports.get(guild_id)


class FakeNotifier(Notifier):
    def __init__(self) -> None:
        self.texts: list[str] = []
        self.now_playing: list[tuple[Track, int]] = []

    async def send_text(self, text):
        self.texts.append(text)

    async def send_now_playing(self, track, remaining):
        self.now_playing.append((track, remaining))


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


@pytest.fixture
def requester():
    return Requester(user_id=USER_ID, display_name="Roomie")


@pytest.fixture
def make_track(requester):
    def _make(title: str, duration_ms: int = 180_000) -> Track:
        slug = title.lower().replace(" ", "-")
        return Track(
            title=title,
            url=f"https://example.com/{slug}",
            duration_ms=duration_ms,
            requester=requester,
        )

    return _make


@pytest.fixture
def sample_track(make_track):
    return make_track("Test Track")


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def voice_adapter():
    return FakeVoiceAdapter()


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def rng():
    return random.Random(1234)

"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from roommates_helper.application.interfaces.audio_resolver import AudioResolver
from roommates_helper.application.interfaces.notifier import Notifier
from roommates_helper.application.interfaces.voice_adapter import (
    PlaybackSession,
    SignalListener,
    VoiceAdapter,
    VoiceTransport,
)

__all__ = [
    "AudioResolver",
    "Notifier",
    "PlaybackSession",
    "SignalListener",
    "VoiceAdapter",
    "VoiceTransport",
]

"""Synthesized audio feedback: tone rendering, playback backends and the engine."""

from .backend import AudioBackend, NullBackend, PygameMixerBackend, create_backend
from .engine import AudioEngine, ToneKind

__all__ = [
    "AudioBackend",
    "AudioEngine",
    "NullBackend",
    "PygameMixerBackend",
    "ToneKind",
    "create_backend",
]

import logging
import os
from typing import Any, Optional, Protocol

import numpy as np

from portfolio_terminal.audio.synth import SAMPLE_RATE, to_pcm

logger = logging.getLogger(__name__)

MIXER_CHANNELS = 32


class PlayingSound(Protocol):
    def stop(self) -> Any: ...


class AudioBackend(Protocol):
    """Plays rendered samples; returns a handle that stops them, or None if nothing plays."""

    def play(self, samples: np.ndarray) -> Optional[PlayingSound]: ...

    def stop_all(self) -> None: ...

    def close(self) -> None: ...


class NullBackend:
    """Backend used when sound is muted or unavailable."""

    def play(self, samples: np.ndarray) -> Optional[PlayingSound]:
        return None

    def stop_all(self) -> None:
        pass

    def close(self) -> None:
        pass


class PygameMixerBackend:
    """Plays samples through pygame.mixer channels."""

    def __init__(
        self, sample_rate: int = SAMPLE_RATE, channels: int = MIXER_CHANNELS
    ) -> None:
        os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
        import pygame

        self._pygame = pygame
        pygame.mixer.init(frequency=sample_rate, size=-16, channels=2)
        pygame.mixer.set_num_channels(channels)
        init = pygame.mixer.get_init()
        self._output_channels = init[2] if init else 2

    def play(self, samples: np.ndarray) -> Optional[PlayingSound]:
        sound = self._pygame.sndarray.make_sound(to_pcm(samples, self._output_channels))
        if sound.play() is None:
            return None
        # Sound.stop only halts channels still playing this sound
        return sound

    def stop_all(self) -> None:
        self._pygame.mixer.stop()

    def close(self) -> None:
        self._pygame.mixer.quit()


def create_backend(enabled: bool = True) -> AudioBackend:
    """Return the pygame mixer backend, or a silent one if sound is off or unavailable."""
    if not enabled:
        return NullBackend()
    try:
        return PygameMixerBackend()
    except Exception as e:
        logger.debug(f"Audio unavailable, continuing without sound: {e}")
        return NullBackend()

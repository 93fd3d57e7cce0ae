import logging
import random
from enum import Enum
from typing import Optional

from portfolio_terminal.audio.backend import AudioBackend, PlayingSound
from portfolio_terminal.audio.synth import ToneSpec, Wave, render
from portfolio_terminal.terminal.scope import Cancellable, CancellationScope

logger = logging.getLogger(__name__)

UNDERTALE_NOTES = (440.0, 493.88, 523.25, 587.33, 659.25)  # A4 B4 C5 D5 E5


class ToneKind(str, Enum):
    key = "key"
    enter = "enter"
    tab = "tab"
    arrow = "arrow"
    typewriter = "typewriter"
    hack = "hack"
    undertale = "undertale"
    alarm = "alarm"
    access = "access"
    impact = "impact"
    glitch = "glitch"
    rumble = "rumble"
    restore = "restore"


class ActiveVoice:
    """A sounding tone; releases itself from its scope when its duration ends."""

    def __init__(self, sound: PlayingSound, scope: CancellationScope) -> None:
        self._sound = sound
        self._scope = scope
        self._end_timer: Optional[Cancellable] = None
        self.stopped = False

    def schedule_end(self, duration: float) -> None:
        self._end_timer = self._scope.clock.call_later(duration, self.stop)

    def stop(self) -> None:
        if self.stopped:
            return
        self.stopped = True
        if self._end_timer is not None:
            self._end_timer.cancel()
        try:
            self._sound.stop()
        except Exception as e:
            logger.debug(f"Failed to stop sound: {e}")
        self._scope.release_voice(self)


class AudioEngine:
    """Fire-and-forget synthesized feedback tones.

    Every voice and every delayed sub-burst is registered in a scope (the
    engine's own by default) so it can be torn down with that scope.
    Playback failures are logged at debug level and otherwise ignored.
    """

    def __init__(
        self,
        backend: AudioBackend,
        scope: CancellationScope,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.backend = backend
        self.scope = scope
        self.rng = rng or random.Random()

    def spec_for(self, kind: ToneKind, dark: bool = True) -> ToneSpec:
        rng = self.rng
        if kind is ToneKind.key:
            return ToneSpec(800 + rng.random() * 200, 0.1, 0.05)
        if kind is ToneKind.enter:
            return ToneSpec(600, 0.15, 0.08)
        if kind is ToneKind.tab:
            return ToneSpec(1000, 0.12, 0.06)
        if kind is ToneKind.arrow:
            return ToneSpec(900, 0.08, 0.04)
        if kind is ToneKind.typewriter:
            return ToneSpec(600 + rng.random() * 300, 0.05, 0.03, Wave.sine)
        if kind is ToneKind.hack:
            return ToneSpec(400 + rng.random() * 800, 0.08, 0.06, Wave.sawtooth)
        if kind is ToneKind.undertale:
            return ToneSpec(rng.choice(UNDERTALE_NOTES), 0.1, 0.04, Wave.triangle)
        if kind is ToneKind.alarm:
            base = 800.0 if dark else 1000.0
            return ToneSpec(
                base,
                0.3,
                0.06 * (1.2 if dark else 1.0),
                steps=((0.1, base * 0.8), (0.2, base)),
            )
        if kind is ToneKind.access:
            start, end = (250.0, 700.0) if dark else (300.0, 600.0)
            return ToneSpec(
                start,
                0.25,
                0.07 if dark else 0.05,
                Wave.triangle,
                end_frequency=end,
                ramp_time=0.2,
            )
        if kind is ToneKind.impact:
            return ToneSpec(200, 0.15, 0.08, end_frequency=50, ramp_time=0.1)
        if kind is ToneKind.glitch:
            wave = Wave.sawtooth if rng.random() > 0.5 else Wave.square
            return ToneSpec(800 + rng.random() * 1200, 0.08, 0.04, wave)
        if kind is ToneKind.restore:
            return ToneSpec(
                600, 0.4, 0.03, Wave.sine, end_frequency=800, ramp_time=0.3
            )
        raise ValueError(f"No single tone for {kind.value}")

    def _play(self, spec: ToneSpec, scope: Optional[CancellationScope]) -> None:
        scope = scope or self.scope
        if scope.closed:
            return
        try:
            sound = self.backend.play(render(spec))
        except Exception as e:
            logger.debug(f"Tone playback failed: {e}")
            return
        if sound is None:
            return
        voice = ActiveVoice(sound, scope)
        scope.add_voice(voice)
        voice.schedule_end(spec.duration)

    def tone(
        self,
        kind: ToneKind,
        scope: Optional[CancellationScope] = None,
        dark: bool = True,
    ) -> None:
        """Play one feedback tone."""
        if kind is ToneKind.rumble:
            self.rumble(1, scope)
            return
        self._play(self.spec_for(kind, dark), scope)

    def rumble(self, intensity: int, scope: Optional[CancellationScope] = None) -> None:
        """Layered low sawtooth burst; intensity 2 adds an impact, 3 also a glitch."""
        scope = scope or self.scope
        intensity = max(0, min(intensity, 3))
        for i in range(3):
            volume = (0.03 + intensity * 0.02) * (1 - i * 0.3)
            frequency = 60 + i * 30 + self.rng.random() * 40
            self._play(
                ToneSpec(frequency, 0.4, volume, Wave.sawtooth, end_gain=0.001), scope
            )
        if intensity >= 2:
            scope.call_later(0.05, lambda: self.tone(ToneKind.impact, scope))
        if intensity >= 3:
            scope.call_later(0.12, lambda: self.tone(ToneKind.glitch, scope))

    def hack_start(self, dark: bool, scope: Optional[CancellationScope] = None) -> None:
        """Alarm, rumble and rising access tone that open the hack sequence."""
        scope = scope or self.scope
        scope.call_later(0.1, lambda: self.tone(ToneKind.alarm, scope, dark=dark))
        scope.call_later(0.4, lambda: self.rumble(3 if dark else 2, scope))
        scope.call_later(0.7, lambda: self.tone(ToneKind.access, scope, dark=dark))

    def restore(self, scope: Optional[CancellationScope] = None) -> None:
        """Soft rising tone played when the hack theme reverts."""
        self.tone(ToneKind.restore, scope)

    def stop_all(self) -> None:
        self.scope.stop_all()
        try:
            self.backend.stop_all()
        except Exception as e:
            logger.debug(f"Failed to silence audio backend: {e}")

    def close(self) -> None:
        self.stop_all()
        try:
            self.backend.close()
        except Exception as e:
            logger.debug(f"Failed to close audio backend: {e}")

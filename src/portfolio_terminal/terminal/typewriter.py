"""
Character-by-character output playback.

A TypewriterPlayback reveals its lines one character at a time on the clock
of its own CancellationScope. Every step, tick tone and extra burst it
schedules lives in that scope, so cancel() tears all of it down at once.
"""

import logging
import math
import random
from typing import Callable, Optional, Sequence, Tuple

from portfolio_terminal.audio.engine import AudioEngine
from portfolio_terminal.terminal.effects import EFFECT_PROFILES, EffectMode, EffectProfile
from portfolio_terminal.terminal.markup import plain_text
from portfolio_terminal.terminal.scope import CancellationScope
from portfolio_terminal.terminal.state import Display, PlaybackState

logger = logging.getLogger(__name__)

LINE_PAUSE = 0.2

CompletionCallback = Callable[[Tuple[str, ...]], None]
ProgressCallback = Callable[[str], None]


class TypewriterPlayback:
    """One cancellable run of the typewriter over a fixed set of lines."""

    def __init__(
        self,
        lines: Sequence[str],
        profile: EffectProfile,
        scope: CancellationScope,
        audio: AudioEngine,
        display: Display,
        rng: random.Random,
        speed: float = 1.0,
        on_complete: Optional[CompletionCallback] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.state = PlaybackState(tuple(lines))
        self.profile = profile
        self.scope = scope
        self.audio = audio
        self.display = display
        self.rng = rng
        self.speed = speed
        self.on_complete = on_complete
        self.on_progress = on_progress
        self._visible = [plain_text(line) for line in self.state.queue]
        self.cancelled = False
        self.finished = False

    @property
    def mode(self) -> EffectMode:
        return self.profile.mode

    @property
    def active(self) -> bool:
        return self.state.active

    def start(self) -> "TypewriterPlayback":
        self.scope.call_later(self._char_delay(), self._step)
        return self

    def _char_delay(self) -> float:
        minimum, jitter = self.profile.char_delay
        return (minimum + self.rng.random() * jitter) * self.speed

    def _step(self) -> None:
        state = self.state
        if not state.active:
            return
        if state.line_index >= len(state.queue):
            self._finish()
            return

        visible = self._visible[state.line_index]
        if state.char_index < len(visible):
            state.char_index += 1
            state.current_line = visible[: state.char_index]
            self.audio.tone(self.profile.tick, self.scope)
            self._bursts(len(visible))
            self._progress(state.current_line)
            self.scope.call_later(self._char_delay(), self._step)
            return

        self.display.append_line(state.queue[state.line_index])
        state.line_index += 1
        state.char_index = 0
        state.current_line = ""
        self._progress("")
        if state.line_index >= len(state.queue):
            self._finish()
        else:
            self.scope.call_later(LINE_PAUSE * self.speed, self._step)

    def _bursts(self, line_length: int) -> None:
        profile = self.profile
        if profile.burst_probability <= 0:
            return
        scope = self.scope
        if self.rng.random() < profile.burst_probability:
            delay = self.rng.random() * profile.burst_max_delay
            scope.call_later(delay, lambda: self.audio.rumble(1, scope))
        state = self.state
        if state.line_index in profile.milestone_lines and state.char_index == math.floor(
            line_length * profile.milestone_fraction
        ):
            scope.call_later(profile.milestone_delay, lambda: self.audio.rumble(3, scope))

    def _progress(self, text: str) -> None:
        if self.on_progress is not None:
            self.on_progress(text)

    def _finish(self) -> None:
        self.state.active = False
        self.finished = True
        self.scope.release()
        logger.debug(f"Playback finished after {len(self.state.queue)} lines")
        if self.on_complete is not None:
            self.on_complete(self.state.queue)

    def cancel(self) -> None:
        """Stop revealing and drop the partial line. No-op once finished or cancelled."""
        if not self.state.active:
            return
        self.state.active = False
        self.cancelled = True
        self.state.current_line = ""
        self.scope.close()
        logger.debug(
            f"Playback cancelled at line {self.state.line_index}/{len(self.state.queue)}"
        )


class TypewriterScheduler:
    def __init__(
        self,
        scope: CancellationScope,
        audio: AudioEngine,
        display: Display,
        rng: Optional[random.Random] = None,
        speed: float = 1.0,
    ) -> None:
        self.scope = scope
        self.audio = audio
        self.display = display
        self.rng = rng or random.Random()
        self.speed = speed

    def play(
        self,
        lines: Sequence[str],
        mode: EffectMode,
        on_complete: Optional[CompletionCallback] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> TypewriterPlayback:
        """Start revealing `lines` with the pacing of `mode`."""
        playback = TypewriterPlayback(
            lines,
            EFFECT_PROFILES[mode],
            self.scope.child(),
            self.audio,
            self.display,
            self.rng,
            speed=self.speed,
            on_complete=on_complete,
            on_progress=on_progress,
        )
        return playback.start()

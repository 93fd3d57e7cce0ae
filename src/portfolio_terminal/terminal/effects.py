"""
Presentation modes and their side effects.

EFFECT_PROFILES holds the per-mode timing and sound parameters used by the
typewriter. EffectStateMachine selects the mode for a command and drives the
hack theme override together with its delayed restoration.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Protocol, Tuple

from portfolio_terminal import storage
from portfolio_terminal.audio.engine import AudioEngine, ToneKind
from portfolio_terminal.storage import HACK_ORIGINAL_THEME_KEY, HACK_THEME_ACTIVE_KEY
from portfolio_terminal.terminal.scope import CancellationScope

logger = logging.getLogger(__name__)

HACK_THEME = "hack"
RESTORE_THEME_DELAY = 0.5


class EffectMode(str, Enum):
    normal = "normal"
    hack = "hack"
    undertale = "undertale"


@dataclass(frozen=True)
class EffectProfile:
    mode: EffectMode
    # (minimum, jitter) in seconds
    char_delay: Tuple[float, float]
    tick: ToneKind
    burst_probability: float = 0.0
    burst_max_delay: float = 0.0
    milestone_lines: FrozenSet[int] = frozenset()
    milestone_fraction: float = 0.7
    milestone_delay: float = 0.05
    settle_delay: float = 0.0
    restore_delay: float = 0.0


EFFECT_PROFILES: Dict[EffectMode, EffectProfile] = {
    EffectMode.normal: EffectProfile(
        EffectMode.normal, (0.015, 0.015), ToneKind.typewriter
    ),
    EffectMode.hack: EffectProfile(
        EffectMode.hack,
        (0.030, 0.020),
        ToneKind.hack,
        burst_probability=0.15,
        burst_max_delay=0.1,
        milestone_lines=frozenset({2, 5, 8}),
        settle_delay=1.0,
        restore_delay=2.0,
    ),
    EffectMode.undertale: EffectProfile(
        EffectMode.undertale, (0.060, 0.040), ToneKind.undertale
    ),
}


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> bool: ...

    def remove_item(self, key: str) -> bool: ...


class ThemeHost:
    """Base theme of the host plus an optional temporary override."""

    def __init__(self, base: str = "dark") -> None:
        self.base = base
        self.override: Optional[str] = None

    @property
    def current(self) -> str:
        return self.override or self.base

    @property
    def is_dark(self) -> bool:
        return self.base == "dark"

    def apply_override(self, theme: str) -> None:
        self.override = theme

    def restore(self, theme: Optional[str] = None) -> None:
        if theme:
            self.base = theme
        self.override = None


class EffectStateMachine:
    def __init__(
        self,
        scope: CancellationScope,
        audio: AudioEngine,
        theme: ThemeHost,
        store: KeyValueStore = storage,
    ) -> None:
        self.scope = scope
        self.audio = audio
        self.theme = theme
        self.store = store
        self.mode = EffectMode.normal
        self.intensity = 0
        self._restore_scope: Optional[CancellationScope] = None

    @staticmethod
    def profile(mode: EffectMode) -> EffectProfile:
        return EFFECT_PROFILES[mode]

    @property
    def restore_pending(self) -> bool:
        return self._restore_scope is not None

    def select(self, command: str) -> EffectMode:
        """Pick the mode for `command` and fire its entry effects."""
        text = command.strip().lower()
        if text == "hack":
            self._enter_hack()
            mode = EffectMode.hack
        elif text == "undertale" or "matrix" in text:
            mode = EffectMode.undertale
        else:
            mode = EffectMode.normal
        self.mode = mode
        return mode

    def _enter_hack(self) -> None:
        self._cancel_restore()
        if self.theme.override != HACK_THEME:
            self.store.set_item(HACK_ORIGINAL_THEME_KEY, self.theme.base)
            self.store.set_item(HACK_THEME_ACTIVE_KEY, "true")
            self.theme.apply_override(HACK_THEME)
        self.intensity = 3
        self.audio.hack_start(dark=self.theme.is_dark, scope=self.scope)
        logger.info(f"Hack theme applied over {self.theme.base}")

    def complete(self, mode: EffectMode) -> None:
        """Playback finished: back to normal, with the hack theme reverting after a delay."""
        self.mode = EffectMode.normal
        if mode is not EffectMode.hack:
            return
        profile = self.profile(mode)
        self._cancel_restore()
        restore_scope = self.scope.child()
        self._restore_scope = restore_scope

        def settle() -> None:
            self.intensity = 0

        def begin_restore() -> None:
            self.audio.restore(restore_scope)
            restore_scope.call_later(RESTORE_THEME_DELAY, self._restore_theme)

        restore_scope.call_later(profile.settle_delay, settle)
        restore_scope.call_later(profile.restore_delay, begin_restore)

    def _cancel_restore(self) -> None:
        if self._restore_scope is not None:
            self._restore_scope.close()
            self._restore_scope = None

    def _clear_markers(self) -> None:
        self.store.remove_item(HACK_THEME_ACTIVE_KEY)
        self.store.remove_item(HACK_ORIGINAL_THEME_KEY)

    def _restore_theme(self) -> None:
        saved = self.store.get_item(HACK_ORIGINAL_THEME_KEY)
        self.theme.restore(saved)
        self._clear_markers()
        self.intensity = 0
        self._cancel_restore()
        logger.info(f"Theme restored to {self.theme.current}")

    def interrupt(self) -> None:
        """A new command started: finish any outstanding hack restoration right away."""
        if self.theme.override is not None or self.restore_pending:
            self._restore_theme()
        self.mode = EffectMode.normal
        self.intensity = 0

    def reset(self) -> None:
        """Revert immediately and always drop the persisted markers."""
        self._cancel_restore()
        saved = self.store.get_item(HACK_ORIGINAL_THEME_KEY)
        self.theme.restore(saved if self.theme.override is not None else None)
        self._clear_markers()
        self.mode = EffectMode.normal
        self.intensity = 0

    def recover(self) -> None:
        """Undo a hack override left behind by a previous session."""
        if self.store.get_item(HACK_THEME_ACTIVE_KEY) is None:
            return
        saved = self.store.get_item(HACK_ORIGINAL_THEME_KEY)
        self.theme.restore(saved)
        self._clear_markers()
        logger.info("Recovered theme from an interrupted hack sequence")

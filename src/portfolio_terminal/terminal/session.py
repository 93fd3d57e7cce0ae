"""
The terminal widget state, owned by one TerminalSession.

The session wires the command registry, the typewriter, the effect state
machine, the audio engine and the input controller to a Display. All timers
and voices hang off a single root CancellationScope; submitting a command,
clearing or closing stops everything left over from the previous command
before anything new starts.
"""

import asyncio
import html
import logging
import random
from typing import List, Optional, Tuple

from portfolio_terminal import storage
from portfolio_terminal.audio.backend import AudioBackend, NullBackend
from portfolio_terminal.audio.engine import AudioEngine, ToneKind
from portfolio_terminal.i18n import Translations, get_translations, welcome_lines
from portfolio_terminal.runtime_config import RuntimeConfig
from portfolio_terminal.terminal.commands import CommandRegistry
from portfolio_terminal.terminal.effects import (
    EffectMode,
    EffectStateMachine,
    KeyValueStore,
    ThemeHost,
)
from portfolio_terminal.terminal.input_controller import InputController
from portfolio_terminal.terminal.scope import CancellationScope, Clock, LoopClock
from portfolio_terminal.terminal.state import Display, HistoryEntry
from portfolio_terminal.terminal.typewriter import TypewriterPlayback, TypewriterScheduler

logger = logging.getLogger(__name__)

PROMPT = "$ "


class TerminalSession:
    def __init__(
        self,
        config: RuntimeConfig,
        registry: CommandRegistry,
        display: Display,
        backend: Optional[AudioBackend] = None,
        clock: Optional[Clock] = None,
        store: KeyValueStore = storage,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.registry = registry
        self.display = display
        self.scope = CancellationScope(clock or LoopClock())
        self.audio = AudioEngine(backend or NullBackend(), self.scope, rng=rng)
        self.theme = ThemeHost(config.theme.value)
        self.effects = EffectStateMachine(self.scope, self.audio, self.theme, store=store)
        self.typewriter = TypewriterScheduler(
            self.scope, self.audio, display, rng=rng, speed=config.speed
        )
        self.input = InputController(registry, self.audio)
        self.history: List[HistoryEntry] = []
        self.processing = False
        self.partial_line = ""
        self._playback: Optional[TypewriterPlayback] = None
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def translations(self) -> Translations:
        return get_translations(self.config.language)

    @property
    def pending_resources(self) -> int:
        """Timers, tasks and voices still alive in the session."""
        return self.scope.pending

    def start(self, show_welcome: bool = True) -> None:
        self.effects.recover()
        if show_welcome:
            self._welcome()

    def _welcome(self) -> None:
        lines = welcome_lines(self.translations)
        for line in lines:
            self.display.append_line(line)
        self.history.append(HistoryEntry("", lines))
        self.display.scroll_to_bottom(force=True)

    def submit(self, raw: Optional[str] = None) -> Optional["asyncio.Task[None]"]:
        """Handle Enter. Returns the dispatch task, or None when nothing needs resolving."""
        command = self.input.submit(raw)
        self.interrupt()
        self.audio.tone(ToneKind.enter)

        if not command:
            self.display.append_line(PROMPT)
            self.display.append_line("")
            self.history.append(HistoryEntry("", ("",)))
            self.display.scroll_to_bottom(force=True)
            return None

        if command.split()[0].lower() == "clear":
            self.clear()
            return None

        self.display.append_line(PROMPT + html.escape(command))
        self.processing = True
        self._idle.clear()
        task = asyncio.get_running_loop().create_task(self._dispatch(command))
        self.scope.track(task)
        return task

    async def _dispatch(self, command: str) -> None:
        try:
            result = await self.registry.resolve(command, self.config.language)
            mode = self.effects.select(command)
            if result.clear_screen:
                self.display.clear()
            self._playback = self.typewriter.play(
                result.output,
                mode,
                on_complete=lambda lines: self._on_complete(command, lines, mode),
                on_progress=self._on_progress,
            )
        except asyncio.CancelledError:
            logger.debug(f"Dispatch of {command} cancelled")
            raise
        except Exception:
            logger.exception(f"Failed to dispatch {command}")
            self._set_idle()

    def _on_progress(self, text: str) -> None:
        self.partial_line = text

    def _on_complete(self, command: str, lines: Tuple[str, ...], mode: EffectMode) -> None:
        self._playback = None
        self.history.append(HistoryEntry(command, lines))
        self.effects.complete(mode)
        self._set_idle()
        self.display.scroll_to_bottom(force=True)

    def _set_idle(self) -> None:
        self.processing = False
        self.partial_line = ""
        self._idle.set()

    def interrupt(self) -> None:
        """Stop the in-flight command: playback, pending timers, tasks and sound."""
        self.effects.interrupt()
        if self._playback is not None:
            self._playback.cancel()
            self._playback = None
        self.stop_all()
        self._set_idle()

    def stop_all(self) -> None:
        """Cancel every timer, task and voice of the session. Safe when idle."""
        self.scope.stop_all()
        self.audio.stop_all()

    def clear(self) -> None:
        """Hard reset: empty display, fresh history cursor, theme reverted, banner redrawn."""
        self.interrupt()
        self.effects.reset()
        self.display.clear()
        self.input.reset()
        self.history = []
        self._welcome()

    def close(self) -> None:
        self.interrupt()
        self.audio.close()
        self.scope.close()

    async def wait_idle(self) -> None:
        await self._idle.wait()

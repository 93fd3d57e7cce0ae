import logging
from typing import Optional

from portfolio_terminal.audio.engine import AudioEngine, ToneKind
from portfolio_terminal.terminal.commands import CommandRegistry
from portfolio_terminal.terminal.state import AutocompleteState, InputHistoryState

logger = logging.getLogger(__name__)


class InputController:
    """Input buffer with command history and tab completion."""

    def __init__(
        self, registry: CommandRegistry, audio: Optional[AudioEngine] = None
    ) -> None:
        self.registry = registry
        self.audio = audio
        self.buffer = ""
        self.history = InputHistoryState()
        self.autocomplete = AutocompleteState()

    def _tone(self, kind: ToneKind) -> None:
        if self.audio is not None:
            self.audio.tone(kind)

    def set_text(self, text: str) -> None:
        """The user edited the buffer."""
        if len(text) > len(self.buffer):
            self._tone(ToneKind.key)
        self.buffer = text
        prefix = text.strip()
        candidates = self.registry.suggest(prefix) if prefix else []
        self.autocomplete.candidates = candidates
        self.autocomplete.highlighted = 0
        self.autocomplete.visible = len(candidates) > 1

    def tab(self) -> None:
        prefix = self.buffer.strip()
        if not prefix:
            return
        self._tone(ToneKind.tab)
        candidates = self.registry.suggest(prefix)
        if len(candidates) == 1:
            self.buffer = f"{candidates[0]} "
            self.autocomplete.clear()
        elif candidates:
            self.autocomplete.candidates = candidates
            self.autocomplete.highlighted = 0
            self.autocomplete.visible = True

    def up(self) -> None:
        self._tone(ToneKind.arrow)
        if self.autocomplete.visible:
            self.autocomplete.highlighted = max(self.autocomplete.highlighted - 1, 0)
            return
        history = self.history
        if not history.entries:
            return
        if history.cursor == -1:
            history.cursor = len(history.entries) - 1
        else:
            history.cursor = max(history.cursor - 1, 0)
        self.buffer = history.entries[history.cursor]

    def down(self) -> None:
        self._tone(ToneKind.arrow)
        if self.autocomplete.visible:
            last = len(self.autocomplete.candidates) - 1
            self.autocomplete.highlighted = min(self.autocomplete.highlighted + 1, last)
            return
        history = self.history
        if history.cursor == -1:
            return
        cursor = history.cursor + 1
        if cursor >= len(history.entries):
            history.cursor = -1
            self.buffer = ""
        else:
            history.cursor = cursor
            self.buffer = history.entries[cursor]

    def escape(self) -> None:
        self.autocomplete.visible = False

    def select(self, candidate: Optional[str] = None) -> None:
        """Replace the buffer with a candidate (the highlighted one by default)."""
        if candidate is None:
            candidates = self.autocomplete.candidates
            if not candidates:
                return
            candidate = candidates[self.autocomplete.highlighted]
        self.buffer = f"{candidate} "
        self.autocomplete.clear()

    def confirm(self) -> bool:
        """Enter while the candidate list is open selects instead of submitting."""
        if not self.autocomplete.visible:
            return False
        self.select()
        return True

    def submit(self, text: Optional[str] = None) -> str:
        command = (self.buffer if text is None else text).strip()
        self.history.record(command)
        self.reset()
        return command

    def reset(self) -> None:
        self.buffer = ""
        self.history.cursor = -1
        self.autocomplete.clear()

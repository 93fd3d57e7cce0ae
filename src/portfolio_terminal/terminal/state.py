"""
State records shared by the terminal widget's components.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Protocol, Tuple


class Display(Protocol):
    """The surface output lines are written to."""

    def append_line(self, line: str) -> None: ...

    def clear(self) -> None: ...

    def scroll_to_bottom(self, force: bool = False) -> None: ...


@dataclass(frozen=True)
class HistoryEntry:
    command: str
    output: Tuple[str, ...]
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        object.__setattr__(self, "output", tuple(self.output))


@dataclass(frozen=True)
class CommandResult:
    output: Tuple[str, ...] = ()
    clear_screen: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "output", tuple(self.output))

    @classmethod
    def of(cls, lines: Iterable[str], clear_screen: bool = False) -> "CommandResult":
        return cls(tuple(lines), clear_screen)


@dataclass
class PlaybackState:
    queue: Tuple[str, ...]
    line_index: int = 0
    char_index: int = 0
    current_line: str = ""
    active: bool = True


@dataclass
class InputHistoryState:
    entries: List[str] = field(default_factory=list)
    # -1 means not browsing
    cursor: int = -1

    def record(self, command: str) -> None:
        """Append `command` unless it repeats the previous entry."""
        if not command:
            return
        if self.entries and self.entries[-1] == command:
            return
        self.entries.append(command)


@dataclass
class AutocompleteState:
    candidates: List[str] = field(default_factory=list)
    highlighted: int = 0
    visible: bool = False

    def clear(self) -> None:
        self.candidates = []
        self.highlighted = 0
        self.visible = False

import os
from typing import Callable, List, Optional

from rich.console import Console
from rich.text import Text

from portfolio_terminal.terminal.markup import plain_text, render_markup

__all__ = ["RichDisplay", "clear_terminal", "console", "plain_text", "render_markup"]

console = Console()

LinePrinter = Callable[[Text], None]


def clear_terminal() -> None:
    """Clear the terminal screen."""
    os.system("cls" if os.name == "nt" else "clear")


def print_line(text: Text) -> None:
    console.print(text)


class RichDisplay:
    """Display that prints each completed output line through rich."""

    def __init__(
        self,
        printer: Optional[LinePrinter] = None,
        clearer: Optional[Callable[[], None]] = None,
    ) -> None:
        self.printer = printer or print_line
        self.clearer = clearer
        self.lines: List[str] = []

    def append_line(self, line: str) -> None:
        self.lines.append(line)
        self.printer(render_markup(line))

    def clear(self) -> None:
        self.lines = []
        (self.clearer or clear_terminal)()

    def scroll_to_bottom(self, force: bool = False) -> None:
        # The terminal scrolls on its own; only make sure nothing is left buffered.
        if force:
            console.file.flush()

"""
Console subpackage: the interactive REPL, headless mode and rich rendering.
"""

from portfolio_terminal.console.console import (
    ConsoleInterface,
    HeadlessConsole,
    ReplConsole,
)

__all__ = ["ConsoleInterface", "HeadlessConsole", "ReplConsole"]

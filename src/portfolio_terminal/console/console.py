from typing import Protocol

from portfolio_terminal.console.repl_console import ReplConsole
from portfolio_terminal.terminal.session import TerminalSession

__all__ = ["ConsoleInterface", "HeadlessConsole", "ReplConsole"]


class ConsoleInterface(Protocol):
    """Common interface for console interactions."""

    session: TerminalSession

    async def run(self) -> None:
        pass


class HeadlessConsole(ConsoleInterface):
    """Console that runs a single command and exits."""

    def __init__(self, session: TerminalSession) -> None:
        self.session = session

    async def run(self) -> None:
        """
        Execute one command with instant playback and print its output.
        """
        command = self.session.config.command
        if not command:
            raise ValueError("Command is required for headless mode")

        self.session.typewriter.speed = 0.0
        self.session.start(show_welcome=False)
        try:
            self.session.submit(command)
            await self.session.wait_idle()
        finally:
            self.session.close()

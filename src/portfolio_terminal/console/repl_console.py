import asyncio
import logging
from itertools import cycle
from typing import List, Optional, Tuple

from prompt_toolkit.application import run_in_terminal
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.formatted_text import FormattedText, to_formatted_text
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.shortcuts import PromptSession
from prompt_toolkit.styles import Style
from rich.panel import Panel
from rich.text import Text

from portfolio_terminal.console import rendering
from portfolio_terminal.terminal.session import TerminalSession

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("exit", "quit")

# rich style applied to printed lines per active theme
THEME_STYLES = {
    "dark": "",
    "light": "",
    "hack": "bold green",
}


class Spinner:
    def __init__(self) -> None:
        self._frames = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")
        self._cycle = cycle(self._frames)
        self._current_frame = next(self._cycle)

    def update(self) -> None:
        """Update spinner frame."""
        self._current_frame = next(self._cycle)

    @property
    def current_frame(self) -> str:
        return self._current_frame


class ReplConsole:
    """Console that runs the interactive terminal."""

    session: TerminalSession
    prompt_session: Optional[PromptSession[str]]

    _render_task: Optional[asyncio.Task[None]]
    _should_stop_render: bool

    style: Style = Style.from_dict(
        {
            "partial": "ansigreen",
            "spinner": "ansicyan",
            "hint": "ansigray",
            "candidate": "noinherit",
            "candidate.current": "noinherit reverse bold",
            "hack": "ansired bold",
            "bottom-toolbar": "noreverse",
        }
    )

    def __init__(self, session: TerminalSession) -> None:
        self.session = session
        self.prompt_session = None
        self._spinner = Spinner()
        self._render_task = None
        self._should_stop_render = False
        self._syncing = False

    def prompt_fragments(self) -> FormattedText:
        """Return the live output line or spinner above the prompt symbol."""
        session = self.session
        if not session.processing:
            return to_formatted_text("\n$ ")

        if session.partial_line:
            return FormattedText(
                [("class:partial", f"{session.partial_line}▌"), ("", "\n$ ")]
            )

        ui = session.translations["ui"]
        return FormattedText(
            [
                ("class:spinner", f"{self._spinner.current_frame} {ui['processing']} "),
                ("class:hint", "(ESC to interrupt)"),
                ("", "\n$ "),
            ]
        )

    def bottom_toolbar(self) -> FormattedText:
        """Autocomplete candidates and the hack theme indicator."""
        fragments: List[Tuple[str, str]] = []
        autocomplete = self.session.input.autocomplete
        if autocomplete.visible:
            for index, name in enumerate(autocomplete.candidates):
                style = (
                    "class:candidate.current"
                    if index == autocomplete.highlighted
                    else "class:candidate"
                )
                fragments.append((style, f" {name} "))
        if self.session.theme.override is not None:
            if fragments:
                fragments.append(("", "  "))
            fragments.append(("class:hack", self.session.translations["ui"]["hack_active"]))
        return FormattedText(fragments)

    async def _render_loop(self) -> None:
        """Keep the spinner and the partial line moving."""
        try:
            while not self._should_stop_render:
                if self.session.processing:
                    self._spinner.update()

                if self.prompt_session and self.prompt_session.app:
                    self.prompt_session.app.invalidate()

                await asyncio.sleep(0.03)
        except asyncio.CancelledError:
            pass

    def _start_render_loop(self) -> None:
        if not self._render_task or self._render_task.done():
            self._should_stop_render = False
            self._render_task = asyncio.create_task(self._render_loop())

    def _stop_render_loop(self) -> None:
        self._should_stop_render = True
        if self._render_task and not self._render_task.done():
            self._render_task.cancel()

    def _sync_buffer(self, buffer: Buffer) -> None:
        """Copy the controller's buffer into the prompt without re-triggering it."""
        text = self.session.input.buffer
        if buffer.text == text:
            return
        self._syncing = True
        try:
            buffer.text = text
            buffer.cursor_position = len(text)
        finally:
            self._syncing = False

    def _on_text_changed(self, buffer: Buffer) -> None:
        if self._syncing:
            return
        self.session.input.set_text(buffer.text)

    def _get_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()
        controller = self.session.input

        @kb.add("tab")
        def _(event: KeyPressEvent) -> None:
            controller.tab()
            self._sync_buffer(event.current_buffer)

        @kb.add("up")
        def _(event: KeyPressEvent) -> None:
            controller.up()
            self._sync_buffer(event.current_buffer)

        @kb.add("down")
        def _(event: KeyPressEvent) -> None:
            controller.down()
            self._sync_buffer(event.current_buffer)

        @kb.add("escape")
        def _(event: KeyPressEvent) -> None:
            """Hide the candidate list, or interrupt the running command."""
            if controller.autocomplete.visible:
                controller.escape()
            elif self.session.processing:
                self.session.interrupt()

        @kb.add("enter")
        def _(event: KeyPressEvent) -> None:
            if controller.confirm():
                self._sync_buffer(event.current_buffer)
                return
            event.current_buffer.validate_and_handle()

        return kb

    def _print_line(self, text: Text) -> None:
        style = THEME_STYLES.get(self.session.theme.current, "")
        printed = asyncio.ensure_future(
            run_in_terminal(lambda: rendering.console.print(text, style=style))
        )
        printed.add_done_callback(self._log_print_failure)

    @staticmethod
    def _log_print_failure(printed: "asyncio.Future[None]") -> None:
        if printed.cancelled():
            return
        error = printed.exception()
        if error is not None:
            logger.error(f"Failed to print output line: {error!r}")

    def _print_header(self) -> None:
        config = self.session.config
        ui = self.session.translations["ui"]
        rendering.console.print(
            Panel(
                f"[bold cyan]╭─ {ui['title']} ─╮[/bold cyan]\n\n"
                f"[dim]API:[/dim] [dim cyan]{config.api_url}[/dim cyan]\n"
                f"[dim]Language:[/dim] [dim cyan]{config.language.value}[/dim cyan]\n"
                f"[dim]Sound:[/dim] [dim cyan]{'on' if config.sound else 'off'}[/dim cyan]",
                expand=False,
            )
        )

    async def run(self) -> None:
        """Interactive loop for the terminal."""
        self._print_header()
        display = self.session.display
        if isinstance(display, rendering.RichDisplay):
            display.printer = self._print_line
        self.session.start()

        self._start_render_loop()
        self.prompt_session = PromptSession(
            message=self.prompt_fragments,
            bottom_toolbar=self.bottom_toolbar,
            style=self.style,
            key_bindings=self._get_key_bindings(),
            erase_when_done=True,
        )
        self.prompt_session.default_buffer.on_text_changed += self._on_text_changed

        try:
            while True:
                logger.info("Prompting user...")
                user_input = await self.prompt_session.prompt_async()
                if user_input.strip().lower() in EXIT_COMMANDS:
                    rendering.console.print(self.session.translations["ui"]["goodbye"])
                    break
                self.session.submit(user_input)
        except (KeyboardInterrupt, EOFError):
            logger.info("Terminal closed by user")
        finally:
            self._stop_render_loop()
            self.session.close()

import asyncio
import logging
from typing import Callable, Optional

import typer
from typing_extensions import Annotated

from portfolio_terminal import storage
from portfolio_terminal.api import PortfolioApiClient
from portfolio_terminal.audio import create_backend
from portfolio_terminal.console.console import (
    ConsoleInterface,
    HeadlessConsole,
    ReplConsole,
)
from portfolio_terminal.console.rendering import RichDisplay
from portfolio_terminal.logger import setup_logging
from portfolio_terminal.runtime_config import (
    DEFAULT_API_URL,
    DEFAULT_USER_ID,
    PORTFOLIO_API_URL_ENV,
    PORTFOLIO_LANGUAGE_ENV,
    PORTFOLIO_USER_ID_ENV,
    PORTFOLIO_USERNAME_ENV,
    LanguageChoice,
    RuntimeConfig,
    ThemeChoice,
    load_envs,
)
from portfolio_terminal.terminal.cache import DomainCache
from portfolio_terminal.terminal.commands import (
    CommandRegistry,
    register_portfolio_commands,
)
from portfolio_terminal.terminal.session import TerminalSession

# Global factory functions - set by create_app()
_session_factory: Optional[Callable[[RuntimeConfig], TerminalSession]] = None
_console_factory: Optional[Callable[[TerminalSession], ConsoleInterface]] = None

STORAGE_KEYS = (
    storage.LANGUAGE_KEY,
    storage.HACK_THEME_ACTIVE_KEY,
    storage.HACK_ORIGINAL_THEME_KEY,
)


def default_session_factory(config: RuntimeConfig) -> TerminalSession:
    """Default factory wiring the API client, cache, commands and audio into a session."""
    client = PortfolioApiClient(config.api_url, config.user_id, config.username)
    registry = CommandRegistry()
    register_portfolio_commands(registry, DomainCache(client))
    return TerminalSession(
        config,
        registry,
        RichDisplay(),
        backend=create_backend(config.sound),
    )


def default_console_factory(session: TerminalSession) -> ConsoleInterface:
    """Default factory for creating Console instances."""
    if session.config.command:
        return HeadlessConsole(session)
    else:
        return ReplConsole(session)


def create_state_app() -> typer.Typer:
    # Create state subcommand group
    state_app = typer.Typer(rich_markup_mode=None)
    state_app.command("show")(state_show)
    state_app.command("reset")(state_reset)
    return state_app


def state_show() -> None:
    """Show the persisted terminal state."""
    items = storage.all_items()
    if not items:
        typer.echo("No persisted state.")
        return
    for key, value in items.items():
        typer.echo(f"{key}={value}")


def state_reset() -> None:
    """Forget the saved language and any pending hack theme restoration."""
    if not storage.all_items():
        typer.echo("No persisted state.")
        return

    if typer.confirm("Are you sure you want to reset the terminal state?"):
        if all(storage.remove_item(key) for key in STORAGE_KEYS):
            typer.echo("✅ Terminal state reset.")
        else:
            typer.echo("❌ Failed to reset terminal state.")
            raise typer.Exit(code=1)
    else:
        typer.echo("Reset cancelled.")


def create_app(
    session_factory: Optional[Callable[[RuntimeConfig], TerminalSession]] = None,
    console_factory: Optional[Callable[[TerminalSession], ConsoleInterface]] = None,
) -> typer.Typer:
    """
    Create and configure the Typer application.

    Args:
        session_factory: Factory function to create TerminalSession instances
        console_factory: Factory function to create Console instances

    Returns:
        Typer application
    """
    setup_logging()

    # Load API settings from .env if not already set in the environment
    load_envs()

    def main(
        ctx: typer.Context,
        api_url: Annotated[
            str,
            typer.Option(envvar=PORTFOLIO_API_URL_ENV, help="Portfolio API base URL"),
        ] = DEFAULT_API_URL,
        user_id: Annotated[
            str,
            typer.Option(envvar=PORTFOLIO_USER_ID_ENV, help="Portfolio owner id"),
        ] = DEFAULT_USER_ID,
        username: Annotated[
            Optional[str],
            typer.Option(
                envvar=PORTFOLIO_USERNAME_ENV,
                help="Public username used to fetch the profile",
            ),
        ] = None,
        language: Annotated[
            Optional[LanguageChoice],
            typer.Option(
                "--language",
                "-l",
                envvar=PORTFOLIO_LANGUAGE_ENV,
                help="Output language (remembered for later sessions)",
            ),
        ] = None,
        theme: Annotated[
            ThemeChoice, typer.Option("--theme", help="Base theme: dark or light")
        ] = ThemeChoice.dark,
        mute: Annotated[
            bool, typer.Option("--mute", help="Disable audio feedback")
        ] = False,
        speed: Annotated[
            float,
            typer.Option(
                "--speed", help="Playback delay multiplier; 0 reveals output instantly"
            ),
        ] = 1.0,
        command: Annotated[
            Optional[str],
            typer.Option(
                "--command",
                "-c",
                help="Run a single command without the interactive terminal",
            ),
        ] = None,
    ) -> None:
        """PORTFOLIO TERMINAL - an interactive shell over a developer portfolio"""
        # If no subcommand, run default action
        if ctx.invoked_subcommand is not None:
            return

        logger = logging.getLogger(__name__)
        if speed < 0:
            typer.echo("Error: --speed must not be negative", err=True)
            raise typer.Exit(code=1)

        if language is not None:
            storage.set_item(storage.LANGUAGE_KEY, language.value)
        else:
            language = storage.current_language()

        cfg = RuntimeConfig(
            api_url=api_url,
            user_id=user_id,
            username=username,
            language=language,
            theme=theme,
            sound=not mute and command is None,
            speed=speed,
            command=command,
        )

        if command is None:
            logger.info(f"Starting terminal against {cfg.api_url} in {cfg.language.value}")
        else:
            logger.info(f"Running command headless: {command}")

        try:
            factory = _session_factory or default_session_factory
            console_fact = _console_factory or default_console_factory
            session = factory(cfg)
            console = console_fact(session)
            asyncio.run(console.run())
        except KeyboardInterrupt:
            print("\nExiting...")

    # Set global factory functions
    global _session_factory, _console_factory
    _session_factory = session_factory
    _console_factory = console_factory

    app = typer.Typer(rich_markup_mode=None)
    state_app = create_state_app()
    app.add_typer(state_app, name="state")

    app.callback(invoke_without_command=True)(main)

    return app


# Create default app instance for backward compatibility
app = create_app()


if __name__ == "__main__":
    app()

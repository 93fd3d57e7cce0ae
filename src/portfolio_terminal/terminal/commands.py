import inspect
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Union

from portfolio_terminal.i18n import Translations, get_translations, normalize_language
from portfolio_terminal.runtime_config import LanguageChoice
from portfolio_terminal.terminal import summaries
from portfolio_terminal.terminal.cache import DomainCache
from portfolio_terminal.terminal.state import CommandResult

logger = logging.getLogger(__name__)

HandlerResult = Union[CommandResult, Sequence[str]]
CommandHandler = Callable[
    [List[str], Translations, str], Union[HandlerResult, Awaitable[HandlerResult]]
]

MAIN_COMMANDS = (
    "help",
    "about",
    "skills",
    "projects",
    "contact",
    "experience",
    "education",
    "refresh",
    "clear",
    "whoami",
    "ls",
    "cat",
)
EASTER_EGGS = (
    "hack",
    "undertale",
    "matrix",
    "coffee",
    "sudo",
    "konami",
    "pokemon",
    "pizza",
    "vim",
    "42",
    "debug",
    "emoji",
)


def _as_result(value: HandlerResult) -> CommandResult:
    if isinstance(value, CommandResult):
        return value
    return CommandResult.of(value)


class CommandRegistry:
    """Maps lowercase command names to handlers and resolves raw input against them."""

    def __init__(self) -> None:
        self._commands: Dict[str, CommandHandler] = {}

    def register(self, name: str, handler: CommandHandler) -> None:
        key = name.lower()
        if key in self._commands:
            raise ValueError(f"Command already registered: {key}")
        self._commands[key] = handler

    def get(self, name: str) -> Optional[CommandHandler]:
        return self._commands.get(name.lower())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._commands

    @property
    def names(self) -> List[str]:
        return list(self._commands)

    def suggest(self, prefix: str) -> List[str]:
        """Registered names starting with `prefix`, in registration order."""
        prefix = prefix.lower()
        return [name for name in self._commands if name.startswith(prefix)]

    async def resolve(
        self, raw_input: str, language: Union[str, LanguageChoice]
    ) -> CommandResult:
        """Run the command in `raw_input`. Failures become localized output, never exceptions."""
        lang = normalize_language(language)
        t = get_translations(lang)
        tokens = raw_input.split()
        if not tokens:
            return CommandResult(("",))

        cmd = tokens[0].lower()
        args = tokens[1:]
        handler = self._commands.get(cmd)
        if handler is None:
            return CommandResult(
                (f"{t['responses']['command_not_found']}: {cmd}", t["responses"]["try_help"])
            )

        try:
            result = handler(args, t, lang.value)
            if inspect.isawaitable(result):
                result = await result
            return _as_result(result)
        except Exception:
            logger.exception(f"Error executing command {cmd}")
            return CommandResult(
                (f"{t['responses']['error']}: {cmd}", t["responses"]["try_help"])
            )


def register_portfolio_commands(registry: CommandRegistry, cache: DomainCache) -> None:
    """Register the portfolio shell vocabulary on `registry`."""

    def cmd_help(args: List[str], t: Translations, language: str) -> List[str]:
        """Show the available commands."""
        commands = t["commands"]
        output = [t["help"]["header"]]
        output.extend(f"  {name:<10}- {commands[name]['description']}" for name in MAIN_COMMANDS)
        output.extend(["", t["help"]["easter_eggs"]])
        output.extend(f"  {name:<10}- {commands[name]['description']}" for name in EASTER_EGGS)
        output.extend(["", t["help"]["tip"], t["help"]["note"]])
        return output

    async def cmd_about(args: List[str], t: Translations, language: str) -> List[str]:
        """Profile summary."""
        await cache.ensure_loaded()
        return summaries.profile_summary(cache.profile, t)

    async def cmd_whoami(args: List[str], t: Translations, language: str) -> List[str]:
        await cache.ensure_loaded()
        return summaries.whoami_summary(cache.profile, t)

    async def cmd_skills(args: List[str], t: Translations, language: str) -> List[str]:
        await cache.ensure_loaded()
        return summaries.skills_summary(cache.skills or [], t)

    async def cmd_projects(args: List[str], t: Translations, language: str) -> List[str]:
        await cache.ensure_loaded()
        return summaries.projects_summary(cache.projects or [], t)

    async def cmd_contact(args: List[str], t: Translations, language: str) -> List[str]:
        await cache.ensure_loaded()
        return summaries.contact_summary(cache.profile, t)

    async def cmd_experience(args: List[str], t: Translations, language: str) -> List[str]:
        await cache.ensure_loaded()
        return summaries.experience_summary(cache.experiences or [], t)

    async def cmd_education(args: List[str], t: Translations, language: str) -> List[str]:
        await cache.ensure_loaded()
        return summaries.education_summary(cache.education or [], t)

    def cmd_ls(args: List[str], t: Translations, language: str) -> List[str]:
        """List the virtual directories."""
        texts = t["commands"]["ls"]
        if not args:
            return list(texts["directories"])
        directory = args[0]
        if directory in ("skills", "skills/"):
            return list(texts["skills"])
        if directory in ("projects", "projects/"):
            return list(texts["projects"])
        return [texts["error"].replace("{dir}", directory)]

    def cmd_cat(args: List[str], t: Translations, language: str) -> List[str]:
        """Print a virtual file."""
        texts = t["commands"]["cat"]
        if not args:
            return list(texts["no_file"])
        name = args[0]
        if name in texts["files"]:
            return list(texts["files"][name])
        return [texts["not_found"].replace("{file}", name)]

    def cmd_clear(args: List[str], t: Translations, language: str) -> CommandResult:
        return CommandResult((), clear_screen=True)

    async def cmd_refresh(args: List[str], t: Translations, language: str) -> List[str]:
        """Drop cached records and fetch them again."""
        cache.invalidate_all()
        await cache.ensure_loaded()
        return list(t["commands"]["refresh"]["output"])

    def cmd_rm(args: List[str], t: Translations, language: str) -> List[str]:
        texts = t["commands"]["rm"]
        return list(texts["read_only"] if args else texts["no_operand"])

    def static_output(name: str) -> CommandHandler:
        def handler(args: List[str], t: Translations, language: str) -> List[str]:
            return list(t["commands"][name]["output"])

        return handler

    registry.register("help", cmd_help)
    registry.register("about", cmd_about)
    registry.register("whoami", cmd_whoami)
    registry.register("skills", cmd_skills)
    registry.register("projects", cmd_projects)
    registry.register("experience", cmd_experience)
    registry.register("education", cmd_education)
    registry.register("contact", cmd_contact)
    registry.register("ls", cmd_ls)
    registry.register("cat", cmd_cat)
    registry.register("clear", cmd_clear)
    registry.register("refresh", cmd_refresh)
    for name in (
        "matrix",
        "undertale",
        "coffee",
        "sudo",
        "hack",
        "konami",
        "pokemon",
        "pizza",
        "vim",
        "42",
        "debug",
        "emoji",
    ):
        registry.register(name, static_output(name))
    registry.register("rm", cmd_rm)

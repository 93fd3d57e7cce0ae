import json
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, List, Union

from portfolio_terminal.runtime_config import LanguageChoice

Translations = Dict[str, Any]

DEFAULT_LANGUAGE = LanguageChoice.es


def normalize_language(language: Union[str, LanguageChoice]) -> LanguageChoice:
    """Map a language code to a supported language, defaulting to Spanish."""
    value = language.value if isinstance(language, LanguageChoice) else str(language)
    try:
        return LanguageChoice(value.lower())
    except ValueError:
        return DEFAULT_LANGUAGE


@lru_cache(maxsize=None)
def _load_bundle(language: LanguageChoice) -> Translations:
    bundle = (
        resources.files("portfolio_terminal.i18n")
        .joinpath("locales")
        .joinpath(f"{language.value}.json")
    )
    data: Translations = json.loads(bundle.read_text(encoding="utf-8"))
    return data


def get_translations(language: Union[str, LanguageChoice]) -> Translations:
    """Return the string table for `language`; unknown languages fall back to Spanish."""
    return _load_bundle(normalize_language(language))


def welcome_lines(t: Translations) -> List[str]:
    """Lines of the banner shown when the terminal starts or is cleared."""
    ui = t["ui"]
    return [
        ui["title"],
        "",
        ui["welcome"],
        ui["description"],
        "",
        ui["tips_header"],
        f"  {ui['tip_help']}",
        f"  {ui['tip_tab']}",
        f"  {ui['tip_clear']}",
        f"  {ui['tip_explore']}",
        f"  {ui['tip_easter_eggs']}",
        "",
        ui["footer"],
    ]

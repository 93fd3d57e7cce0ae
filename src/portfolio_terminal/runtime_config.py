"""
Runtime configuration for the portfolio terminal.

This module provides:
- load_envs(): load PORTFOLIO_API_URL, PORTFOLIO_USER_ID, PORTFOLIO_USERNAME and
  PORTFOLIO_LANGUAGE from a .env file if they are not already present in the environment.
- RuntimeConfig: a dataclass holding runtime settings, including the API endpoint,
  the portfolio owner, language, theme and playback options.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

# Environment variable names for the data source and defaults
PORTFOLIO_API_URL_ENV: str = "PORTFOLIO_API_URL"
PORTFOLIO_USER_ID_ENV: str = "PORTFOLIO_USER_ID"
PORTFOLIO_USERNAME_ENV: str = "PORTFOLIO_USERNAME"
PORTFOLIO_LANGUAGE_ENV: str = "PORTFOLIO_LANGUAGE"
LOG_LEVEL_ENV: str = "PORTFOLIO_TERMINAL_LOG_LEVEL"

DEFAULT_API_URL: str = "http://localhost:3000/api"
DEFAULT_USER_ID: str = "1"


def load_envs(env_file: Optional[str] = None) -> None:
    """
    Load PORTFOLIO_API_URL, PORTFOLIO_USER_ID, PORTFOLIO_USERNAME and PORTFOLIO_LANGUAGE
    from a .env file into the process environment if they are not already set.
    """
    env_values = dotenv_values(env_file) if env_file else dotenv_values()
    for key in (
        PORTFOLIO_API_URL_ENV,
        PORTFOLIO_USER_ID_ENV,
        PORTFOLIO_USERNAME_ENV,
        PORTFOLIO_LANGUAGE_ENV,
    ):
        if not os.environ.get(key):
            val = env_values.get(key)
            if val:
                os.environ[key] = str(val)


class LanguageChoice(str, Enum):
    """Supported terminal languages."""

    es = "es"
    en = "en"


class ThemeChoice(str, Enum):
    """Base visual themes of the host."""

    dark = "dark"
    light = "light"


@dataclass(frozen=True)
class RuntimeConfig:
    """
    Holds runtime configuration for the portfolio terminal.

    Attributes:
        api_url: Base URL of the portfolio REST API.
        user_id: Owner id used by the list endpoints.
        username: Public username used by the profile endpoint.
        language: Language of the command output.
        theme: Base theme the hack override temporarily replaces.
        sound: Whether audio feedback is enabled.
        speed: Multiplier applied to every playback delay (0 reveals instantly).
        command: One command to run headless (if provided).
    """

    api_url: str = DEFAULT_API_URL
    user_id: str = DEFAULT_USER_ID
    username: Optional[str] = None
    language: LanguageChoice = LanguageChoice.es
    theme: ThemeChoice = ThemeChoice.dark
    sound: bool = True
    speed: float = 1.0
    command: Optional[str] = None


def get_config_dir() -> Path:
    """
    Return the portfolio terminal config directory under XDG_CONFIG_HOME or fallback to ~/.config.
    """
    config_home = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return config_home / "portfolio_terminal"


def get_data_dir() -> Path:
    """
    Return the portfolio terminal data directory under XDG_DATA_HOME or fallback to ~/.local/share.
    """
    data_home = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return data_home / "portfolio_terminal"

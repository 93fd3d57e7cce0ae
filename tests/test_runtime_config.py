import os
from enum import Enum
from pathlib import Path

import pytest

import portfolio_terminal.runtime_config as config_module
from portfolio_terminal.runtime_config import (
    DEFAULT_API_URL,
    LanguageChoice,
    RuntimeConfig,
    ThemeChoice,
    load_envs,
)


@pytest.mark.parametrize(
    "enum_class,expected_values",
    [
        (LanguageChoice, {"es", "en"}),
        (ThemeChoice, {"dark", "light"}),
    ],
)
def test_enum_values(enum_class: type[Enum], expected_values: set[str]) -> None:
    """Test that enum classes have the expected values."""
    choices = {c.value for c in enum_class}
    assert choices == expected_values


def test_runtime_config_defaults() -> None:
    cfg = RuntimeConfig()
    assert cfg.api_url == DEFAULT_API_URL
    assert cfg.language == LanguageChoice.es
    assert cfg.theme == ThemeChoice.dark
    assert cfg.sound is True
    assert cfg.speed == 1.0
    assert cfg.command is None


def test_runtime_config_is_frozen() -> None:
    cfg = RuntimeConfig()
    with pytest.raises(AttributeError):
        cfg.speed = 2.0  # type: ignore[misc]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        config_module.PORTFOLIO_API_URL_ENV,
        config_module.PORTFOLIO_USER_ID_ENV,
        config_module.PORTFOLIO_USERNAME_ENV,
        config_module.PORTFOLIO_LANGUAGE_ENV,
    ):
        monkeypatch.delenv(key, raising=False)


def test_load_envs_reads_env_file(clean_env: None, tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "PORTFOLIO_API_URL=https://api.example.dev\nPORTFOLIO_USERNAME=ada\nUNRELATED=1\n"
    )

    load_envs(str(env_file))

    assert os.environ["PORTFOLIO_API_URL"] == "https://api.example.dev"
    assert os.environ["PORTFOLIO_USERNAME"] == "ada"
    assert "UNRELATED" not in os.environ
    # load_envs writes os.environ directly; undo it for other tests
    del os.environ["PORTFOLIO_API_URL"]
    del os.environ["PORTFOLIO_USERNAME"]


def test_load_envs_keeps_existing_values(
    clean_env: None, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("PORTFOLIO_USER_ID", "42")
    env_file = tmp_path / ".env"
    env_file.write_text("PORTFOLIO_USER_ID=7\n")

    load_envs(str(env_file))

    assert os.environ["PORTFOLIO_USER_ID"] == "42"


def test_config_and_data_dirs_follow_xdg(tmp_path: Path) -> None:
    assert config_module.get_config_dir() == tmp_path / "config" / "portfolio_terminal"
    assert config_module.get_data_dir() == tmp_path / "data" / "portfolio_terminal"


def test_dirs_fall_back_to_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("XDG_CONFIG_HOME")
    monkeypatch.delenv("XDG_DATA_HOME")
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    assert config_module.get_config_dir() == tmp_path / ".config" / "portfolio_terminal"
    assert config_module.get_data_dir() == tmp_path / ".local/share" / "portfolio_terminal"

"""
Host storage: persisted string key-value pairs under the user config directory.

Keys mirror the ones the portfolio site keeps in browser storage, so the
terminal remembers the language and a pending hack-theme restoration.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from portfolio_terminal.runtime_config import LanguageChoice, get_config_dir

logger = logging.getLogger(__name__)

LANGUAGE_KEY = "cv-language"
HACK_THEME_ACTIVE_KEY = "hack-theme-active"
HACK_ORIGINAL_THEME_KEY = "hack-original-theme"


def get_storage_file_path() -> Path:
    """Get the path to the host storage file in the config directory."""
    return get_config_dir() / "storage"


def _read_entries() -> Dict[str, str]:
    """Read key=value entries from the storage file."""
    path = get_storage_file_path()
    if not path.exists():
        return {}
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(f"Failed to read host storage {path}: {e}")
        return {}

    entries: Dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if "=" not in line or line.startswith("#"):
            continue
        key, value = line.split("=", 1)
        entries[key.strip()] = value.strip()
    return entries


def _write_entries(entries: Dict[str, str]) -> bool:
    """Write all entries back to the storage file."""
    path = get_storage_file_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            "".join(f"{key}={value}\n" for key, value in entries.items()),
            encoding="utf-8",
        )
        path.chmod(0o600)
        return True
    except OSError as e:
        logger.warning(f"Failed to write host storage {path}: {e}")
        return False


def get_item(key: str) -> Optional[str]:
    """
    Retrieve a stored value.

    Returns:
        The value if present and non-empty, None otherwise
    """
    value = _read_entries().get(key)
    return value if value else None


def set_item(key: str, value: str) -> bool:
    """
    Store a value, replacing any previous one.

    Returns:
        True if saved successfully, False otherwise
    """
    entries = _read_entries()
    entries[key] = value
    return _write_entries(entries)


def remove_item(key: str) -> bool:
    """
    Remove a stored value. Removing a missing key succeeds.

    Returns:
        True if the key is gone afterwards, False otherwise
    """
    entries = _read_entries()
    if key not in entries:
        return True
    del entries[key]
    if not entries:
        try:
            get_storage_file_path().unlink()
            return True
        except OSError as e:
            logger.warning(f"Failed to remove host storage file: {e}")
            return False
    return _write_entries(entries)


def all_items() -> Dict[str, str]:
    """Return every stored entry."""
    return _read_entries()


def current_language(default: LanguageChoice = LanguageChoice.es) -> LanguageChoice:
    """Return the persisted terminal language, falling back to `default`."""
    saved = get_item(LANGUAGE_KEY)
    if saved in (LanguageChoice.es.value, LanguageChoice.en.value):
        return LanguageChoice(saved)
    return default

"""Localized string tables for the terminal (Spanish and English)."""

from .translations import (
    Translations,
    get_translations,
    normalize_language,
    welcome_lines,
)

__all__ = ["Translations", "get_translations", "normalize_language", "welcome_lines"]

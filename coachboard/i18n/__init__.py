"""UI string tables."""

from .translations import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, get_translations

__all__ = ["DEFAULT_LANGUAGE", "SUPPORTED_LANGUAGES", "get_translations"]

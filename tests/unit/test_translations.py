"""Unit tests for the UI string tables."""

import pytest

from coachboard.i18n import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, get_translations
from coachboard.i18n.translations import TRANSLATIONS


class TestTranslations:
    def test_languages_share_keys(self):
        """A key missing from one language would crash that language's screens."""
        keys = {language: set(table) for language, table in TRANSLATIONS.items()}
        assert keys["fr"] == keys["en"]

    def test_supported_languages(self):
        assert SUPPORTED_LANGUAGES == ("fr", "en")
        assert DEFAULT_LANGUAGE == "fr"

    def test_unknown_language_rejected(self):
        with pytest.raises(ValueError, match="Unsupported language 'de'"):
            get_translations("de")

    def test_placeholders_format(self):
        assert get_translations("fr")["exercise_not_found"].format(name="Squat").count("Squat") == 1
        assert "Squat" in get_translations("en")["exercise_not_found"].format(name="Squat")

    def test_login_error_per_language(self):
        assert get_translations("fr")["login_error"] == "Nom d'utilisateur ou mot de passe incorrect."
        assert get_translations("en")["login_error"] == "Incorrect username or password."

"""Tests for marketplace_installer.core.messages module."""

from unittest.mock import patch

import pytest

from marketplace_installer.core.messages import (
    MESSAGES,
    SUPPORTED_LOCALES,
    Messages,
    detect_locale,
    translate,
)


class TestCatalog:
    """Tests for the message catalog."""

    def test_is_immutable(self):
        """Rejects modification."""
        with pytest.raises(TypeError):
            MESSAGES["done"] = {"en": "changed"}  # type: ignore[index]
        with pytest.raises(TypeError):
            MESSAGES["done"]["en"] = "changed"  # type: ignore[index]

    def test_every_key_has_every_locale(self):
        """Every message is translated."""
        for key, entry in MESSAGES.items():
            assert set(entry) == set(SUPPORTED_LOCALES), key


class TestTranslate:
    """Tests for translate."""

    def test_formats_positional_arguments(self):
        result = translate("deleting_directory", "en", "/tmp/spicetify")

        assert "/tmp/spicetify" in result
        assert "{0}" not in result

    def test_uses_requested_locale(self):
        assert translate("yes_full", "tr") == "Evet"
        assert translate("yes_char", "tr") == "E"

    def test_unknown_locale_falls_back_to_english(self):
        assert translate("yes_full", "de") == "Yes"

    def test_unknown_key_returns_key(self):
        assert translate("no_such_message", "en") == "no_such_message"

    def test_no_arguments_returns_template(self):
        assert translate("user_data_path", "en") == MESSAGES["user_data_path"]["en"]

    def test_missing_argument_is_marked(self):
        """Marks a template that needs more arguments than given."""
        result = translate("detected_alternative_dir", "en", "only-one")

        assert result.startswith(MESSAGES["detected_alternative_dir"]["en"])
        assert "FORMATTING ERROR" in result


class TestDetectLocale:
    """Tests for detect_locale."""

    def test_turkish_environment(self, monkeypatch):
        monkeypatch.setenv("LC_ALL", "tr_TR.UTF-8")

        assert detect_locale() == "tr"

    def test_english_environment(self, monkeypatch):
        monkeypatch.setenv("LC_ALL", "en_US.UTF-8")

        assert detect_locale() == "en"

    def test_windows_style_name(self, monkeypatch):
        for name in ("LC_ALL", "LC_MESSAGES", "LANG"):
            monkeypatch.delenv(name, raising=False)

        with patch(
            "marketplace_installer.core.messages.locale_module.getlocale",
            return_value=("Turkish_Turkey", "1254"),
        ):
            assert detect_locale() == "tr"

    def test_no_locale_information(self, monkeypatch):
        for name in ("LC_ALL", "LC_MESSAGES", "LANG"):
            monkeypatch.delenv(name, raising=False)

        with patch(
            "marketplace_installer.core.messages.locale_module.getlocale",
            return_value=(None, None),
        ):
            assert detect_locale() == "en"


class TestMessages:
    """Tests for Messages."""

    def test_binds_locale(self):
        assert Messages("tr")("no_full") == "Hayır"

    def test_unsupported_locale_becomes_english(self):
        messages = Messages("fr")

        assert messages.locale == "en"
        assert messages("no_full") == "No"

"""Tests for marketplace_installer.core.console module."""

import io
import logging
from unittest.mock import patch

import pytest
from rich.console import Console

from marketplace_installer.core.console import (
    CONSOLE_LOGGER_NAME,
    ConsolePrompter,
    Reporter,
    parse_answer,
)
from marketplace_installer.core.messages import Messages


@pytest.fixture
def output_console() -> Console:
    return Console(file=io.StringIO(), width=200)


class TestReporter:
    """Tests for Reporter."""

    def test_prints_message(self, output_console: Console):
        reporter = Reporter(output_console)

        reporter.success("All done")

        assert "All done" in output_console.file.getvalue()

    def test_does_not_interpret_markup(self, output_console: Console):
        """Prints square brackets literally."""
        reporter = Reporter(output_console)

        reporter.info("[bold]not bold[/bold]")

        assert "[bold]not bold[/bold]" in output_console.file.getvalue()

    def test_logs_at_matching_level(self, output_console: Console, caplog):
        """Mirrors messages into the log."""
        reporter = Reporter(output_console)

        with caplog.at_level(logging.DEBUG, logger=CONSOLE_LOGGER_NAME):
            reporter.step("Downloading")
            reporter.warning("Careful\nnow")
            reporter.error("Broken")

        levels = [(r.levelno, r.getMessage()) for r in caplog.records]
        assert levels == [
            (logging.INFO, "Downloading"),
            (logging.WARNING, "Careful now"),
            (logging.ERROR, "Broken"),
        ]


class TestParseAnswer:
    """Tests for parse_answer."""

    @pytest.mark.parametrize("reply", ["y", "Y", "yes", " YES "])
    def test_english_yes(self, reply):
        assert parse_answer(reply, Messages("en"), default=False) is True

    @pytest.mark.parametrize("reply", ["n", "No"])
    def test_english_no(self, reply):
        assert parse_answer(reply, Messages("en"), default=True) is False

    @pytest.mark.parametrize("reply", ["e", "evet"])
    def test_turkish_yes(self, reply):
        assert parse_answer(reply, Messages("tr"), default=False) is True

    def test_turkish_no(self):
        assert parse_answer("h", Messages("tr"), default=True) is False

    @pytest.mark.parametrize("reply", ["", None, "maybe"])
    def test_empty_or_unrecognized_takes_default(self, reply):
        assert parse_answer(reply, Messages("en"), default=True) is True
        assert parse_answer(reply, Messages("en"), default=False) is False


class TestConsolePrompter:
    """Tests for ConsolePrompter."""

    def test_shows_localized_choices(self, output_console: Console):
        prompter = ConsolePrompter(Messages("tr"), output_console)

        with patch.object(output_console, "input", return_value="e") as mock_input:
            assert prompter.confirm("Devam?", default=False) is True

        assert mock_input.call_args.args[0] == "Devam? (E/H) [H]: "

    def test_end_of_input_takes_default(self, output_console: Console):
        prompter = ConsolePrompter(Messages("en"), output_console)

        with patch.object(output_console, "input", side_effect=EOFError):
            assert prompter.confirm("Did it work?", default=False) is False

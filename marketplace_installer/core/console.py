"""Console output and prompts for the installer.

User-facing lines are printed with ``rich`` and mirrored into the log at the
matching level, so the log file holds everything the user saw.
"""

import logging
from typing import Protocol

from rich.console import Console
from rich.markup import escape

from marketplace_installer.core.messages import Messages

CONSOLE_LOGGER_NAME = "marketplace_installer.console"

logger = logging.getLogger(CONSOLE_LOGGER_NAME)


class Reporter:
    """Prints user-facing status lines and logs them."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def _emit(self, message: str, style: str, level: int) -> None:
        self.console.print(f"[{style}]{escape(message)}[/{style}]")
        logger.log(level, message.replace("\n", " "))

    def step(self, message: str) -> None:
        """Announce the start of an installation step."""
        self._emit(message, "cyan", logging.INFO)

    def info(self, message: str) -> None:
        self._emit(message, "dim", logging.INFO)

    def success(self, message: str) -> None:
        self._emit(message, "green", logging.INFO)

    def warning(self, message: str) -> None:
        self._emit(message, "yellow", logging.WARNING)

    def error(self, message: str) -> None:
        self._emit(message, "red", logging.ERROR)


class Prompter(Protocol):
    """Asks the user yes/no questions."""

    def confirm(self, question: str, default: bool) -> bool:
        """Ask a yes/no question.

        Args:
            question: Question text
            default: Answer used for an empty or unrecognized reply

        Returns:
            The user's answer
        """
        ...


def parse_answer(reply: str | None, messages: Messages, default: bool) -> bool:
    """Interpret a yes/no reply in the active language.

    Args:
        reply: Raw user input, or None when input is unavailable
        messages: Localized message lookup
        default: Answer for empty or unrecognized replies

    Returns:
        True for a localized "yes", False for a localized "no", else default
    """
    answer = (reply or "").strip().upper()
    if answer in (messages("yes_char").upper(), messages("yes_full").upper()):
        return True
    if answer in (messages("no_char").upper(), messages("no_full").upper()):
        return False
    return default


class ConsolePrompter:
    """Prompts on the terminal using localized Y/N characters."""

    def __init__(self, messages: Messages, console: Console | None = None):
        self.messages = messages
        self.console = console or Console()

    def confirm(self, question: str, default: bool) -> bool:
        yes = self.messages("yes_char")
        no = self.messages("no_char")
        shown_default = yes if default else no
        try:
            reply = self.console.input(f"{escape(question)} ({yes}/{no}) [{shown_default}]: ")
        except EOFError:
            reply = None
        logger.info("User reply to '%s': '%s'", question, reply)
        return parse_answer(reply, self.messages, default)

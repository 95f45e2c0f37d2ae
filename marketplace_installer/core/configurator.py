"""Activating the plugin through CLI tool configuration commands."""

from __future__ import annotations

import logging
from enum import Enum

from marketplace_installer.config.schemas import InstallerConfig
from marketplace_installer.core.console import Prompter, Reporter
from marketplace_installer.core.messages import Messages
from marketplace_installer.core.paths import InstallationPaths
from marketplace_installer.core.runner import CommandRunner

logger = logging.getLogger(__name__)


class ThemeConflictDecision(Enum):
    """What to do with the CLI tool's current theme."""

    NO_CONFLICT = "no-conflict"
    REPLACE = "replace"
    KEEP = "keep"

    @property
    def sets_theme(self) -> bool:
        """Whether the plugin theme must be set as current theme."""
        return self is ThemeConflictDecision.REPLACE


class ConfigurationApplier:
    """Issues the configuration commands that activate the plugin.

    Every command is best-effort: a failing command is logged and the
    remaining commands still run.
    """

    def __init__(
        self,
        runner: CommandRunner,
        prompter: Prompter,
        config: InstallerConfig | None = None,
        reporter: Reporter | None = None,
        messages: Messages | None = None,
    ):
        self.runner = runner
        self.prompter = prompter
        self.config = config or InstallerConfig()
        self.reporter = reporter or Reporter()
        self.messages = messages or Messages()

    def read_current_theme(self) -> str | None:
        """Ask the CLI tool for its current theme.

        Returns:
            The theme name, or None if no real theme is set
        """
        result = self.runner.run("config", "current_theme", capture_output=True)
        if not result.succeeded or not result.output.strip():
            logger.warning(
                "'config current_theme' failed or returned nothing (exit code %d, output '%s'); "
                "assuming no theme is set",
                result.exit_code,
                result.output,
            )
            return None

        name = result.output.strip()
        logger.info("CLI tool reported current theme: '%s'", name)
        if self.is_placeholder_theme(name):
            return None
        return name

    def is_placeholder_theme(self, name: str) -> bool:
        """Check whether a reported theme name means "no theme"."""
        blank_names = {n.lower() for n in self.config.blank_theme_names}
        return (
            not name
            or name.lower() in blank_names
            or self.config.unreadable_theme_marker in name
        )

    def decide_theme(self) -> ThemeConflictDecision:
        """Decide whether to set the plugin theme, prompting on a conflict."""
        plugin_theme = self.config.plugin_name
        current = self.read_current_theme()

        if current == plugin_theme:
            logger.info("Current theme is already '%s'; not setting it again", plugin_theme)
            return ThemeConflictDecision.NO_CONFLICT

        if current is None:
            logger.info("No conflicting theme; will set theme to '%s'", plugin_theme)
            return ThemeConflictDecision.REPLACE

        self.reporter.warning(self.messages("local_theme_found", current))
        if self.prompter.confirm(self.messages("replace_theme_prompt"), default=True):
            logger.info("User chose to replace theme '%s' with '%s'", current, plugin_theme)
            return ThemeConflictDecision.REPLACE

        logger.info("User chose to keep theme '%s'", current)
        return ThemeConflictDecision.KEEP

    def _issue(self, *args: str) -> None:
        result = self.runner.run(*args)
        if not result.succeeded:
            self.reporter.warning(
                self.messages("command_failed", " ".join(args), result.exit_code)
            )
            logger.warning(
                "Configuration command '%s' failed with exit code %d; continuing",
                " ".join(args),
                result.exit_code,
            )

    def apply(self, paths: InstallationPaths) -> ThemeConflictDecision:
        """Configure the CLI tool to load the plugin.

        Args:
            paths: Directories of this run

        Returns:
            The theme decision taken
        """
        theme_file = paths.themes_dir / self.config.theme_file_name
        if not theme_file.exists():
            logger.warning("Placeholder theme file '%s' is missing", theme_file)

        decision = self.decide_theme()
        plugin = self.config.plugin_name

        self.reporter.step(self.messages("configuring_cli"))
        self._issue("config", "inject_css", "1")
        self._issue("config", "replace_colors", "1")
        if decision.sets_theme:
            self.reporter.step(self.messages("setting_current_theme", plugin))
            self._issue("config", "current_theme", plugin)
        self._issue("config", "custom_apps", plugin)

        self.reporter.step(self.messages("backing_up_and_applying"))
        self._issue("backup")
        self._issue("apply")
        logger.info("Configuration commands issued (theme decision: %s)", decision.value)
        return decision

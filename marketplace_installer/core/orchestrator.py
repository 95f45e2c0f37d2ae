"""Installation orchestrator.

This module contains the InstallOrchestrator which drives the two
installation flows:

- the standard flow runs every installation step and then asks the user
  whether the plugin shows up;
- the force-reinstall flow restores the CLI tool, deletes its data
  directories and runs the installation steps again.

Installation steps raise on fatal errors. The orchestrator catches them at
the flow boundary, reports them and carries on to the next stage, so the
process always reaches its closing messages.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from marketplace_installer.config.schemas import InstallerConfig
from marketplace_installer.core.archive import (
    ArchiveInstaller,
    ExtractionOutcome,
    FlatLayout,
    NestedLayout,
    Unrecognized,
)
from marketplace_installer.core.bootstrap import CliToolBootstrapper
from marketplace_installer.core.configurator import ConfigurationApplier, ThemeConflictDecision
from marketplace_installer.core.console import ConsolePrompter, Prompter, Reporter
from marketplace_installer.core.errors import DirectoryPreparationError, PathResolutionError
from marketplace_installer.core.fetcher import ArtifactFetcher, StorageError
from marketplace_installer.core.messages import Messages
from marketplace_installer.core.paths import InstallationPaths, PathResolver
from marketplace_installer.core.runner import CommandRunner
from marketplace_installer.utils.filesystem import (
    ensure_directory,
    remove_directory,
    write_text_file,
)
from marketplace_installer.utils.platform import known_data_directories

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Success:
    """The installation finished (and was confirmed, where asked)."""


@dataclass(frozen=True)
class Failure:
    """The installation did not finish or was not confirmed."""

    reason: str


InstallRunOutcome = Success | Failure


class InstallOrchestrator:
    """Runs the standard and force-reinstall installation flows.

    Collaborators default to production implementations built from the
    configuration; tests pass fakes.
    """

    def __init__(
        self,
        config: InstallerConfig,
        messages: Messages | None = None,
        reporter: Reporter | None = None,
        prompter: Prompter | None = None,
        runner: CommandRunner | None = None,
        fetcher: ArtifactFetcher | None = None,
        data_directories: list[Path] | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: Installer configuration
            messages: Localized message lookup
            reporter: Console reporter
            prompter: Source of yes/no answers
            runner: CLI tool runner
            fetcher: HTTPS downloader
            data_directories: CLI tool directories deleted on force reinstall
        """
        self.config = config
        self.messages = messages or Messages(config.locale or "en")
        self.reporter = reporter or Reporter()
        self.prompter = prompter or ConsolePrompter(self.messages, self.reporter.console)
        self.runner = runner or CommandRunner(config.cli_program, bypass_admin=config.bypass_admin)
        self.fetcher = fetcher or ArtifactFetcher(timeout=config.download_timeout)
        self.data_directories = (
            data_directories
            if data_directories is not None
            else known_data_directories(config.cli_program)
        )

        self.bootstrapper = CliToolBootstrapper(
            self.runner, self.fetcher, config, self.reporter, self.messages
        )
        self.path_resolver = PathResolver(self.runner, config.plugin_name)
        self.archive_installer = ArchiveInstaller(
            config.expected_archive_dir, config.archive_dir_keyword
        )
        self.configurator = ConfigurationApplier(
            self.runner, self.prompter, config, self.reporter, self.messages
        )

    # -------------------------------------------------------------------------
    # Flows
    # -------------------------------------------------------------------------

    def run(self, force_reinstall: bool = False) -> InstallRunOutcome:
        """Run the installer.

        Args:
            force_reinstall: Skip the standard flow and its verification prompt

        Returns:
            Outcome of the last flow that ran
        """
        self.reporter.step(self.messages("setting_up"))
        if force_reinstall or self.config.force_reinstall:
            logger.info("Force reinstall requested; skipping the standard flow")
            return self.force_reinstall_flow()

        outcome = self.standard_flow()
        if isinstance(outcome, Success):
            logger.info("Standard installation confirmed by user")
            return outcome

        logger.info("Standard installation not confirmed (%s); forcing reinstall", outcome.reason)
        return self.force_reinstall_flow()

    def standard_flow(self) -> InstallRunOutcome:
        """Install, then ask the user whether it worked.

        Returns:
            Success if the user confirmed, otherwise Failure
        """
        logger.info("Starting standard installation")
        attempt = self._attempt_install("during_standard_install")

        if self.verify_installation():
            self.reporter.success(self.messages("great_success"))
            return Success()

        self.reporter.warning(self.messages("proceeding_with_force_reinstall"))
        if isinstance(attempt, Failure):
            return attempt
        return Failure("installation not confirmed by user")

    def force_reinstall_flow(self) -> InstallRunOutcome:
        """Clean the CLI tool's data and install from scratch, without verification."""
        self.reporter.step(self.messages("force_reinstall_starting"))
        logger.info("Starting force reinstall")
        self.clean_cli_data()
        self.reporter.step(self.messages("data_cleaned_fresh_install"))
        return self._attempt_install("during_force_reinstall")

    def verify_installation(self) -> bool:
        """Ask the user whether the plugin is visible. Defaults to no."""
        self.reporter.warning(self.messages("verification_title"))
        confirmed = self.prompter.confirm(self.messages("verification_question"), default=False)
        logger.info("User verification answer: %s", "yes" if confirmed else "no")
        return confirmed

    def _attempt_install(self, error_key: str) -> InstallRunOutcome:
        try:
            self.install()
        except Exception as e:
            m = self.messages
            self.reporter.error(f"{m('error_label')} {m(error_key, e)}")
            logger.error("Installation failed", exc_info=True)
            return Failure(str(e))

        self.reporter.success(self.messages("done"))
        return Success()

    # -------------------------------------------------------------------------
    # Installation steps
    # -------------------------------------------------------------------------

    def install(self) -> ThemeConflictDecision:
        """Run every installation step in order.

        Returns:
            The theme decision taken while configuring

        Raises:
            InstallError: On a fatal step failure
            FetchError: If a download or its storage fails
        """
        self.ensure_cli_tool()
        paths = self.resolve_paths()
        self.prepare_directories(paths)
        self.fetch_and_install_archive(paths)
        self.fetch_placeholder_theme(paths)
        return self.apply_configuration(paths)

    def ensure_cli_tool(self) -> None:
        self.bootstrapper.ensure()

    def resolve_paths(self) -> InstallationPaths:
        try:
            paths = self.path_resolver.resolve()
        except PathResolutionError as e:
            raise PathResolutionError(
                self.messages("failed_to_get_user_data_path"), step=e.step
            ) from e
        if self.path_resolver.used_fallback:
            self.reporter.warning(
                self.messages("user_data_path_fallback", paths.user_data_root)
            )
        self.reporter.info(self.messages("user_data_path", paths.user_data_root))
        return paths

    def prepare_directories(self, paths: InstallationPaths) -> None:
        """Delete and recreate the plugin directories.

        Raises:
            DirectoryPreparationError: If any directory cannot be deleted or created
        """
        self.reporter.step(self.messages("preparing_directories"))
        try:
            ensure_directory(paths.user_data_root)
            for directory in (paths.custom_apps_dir, paths.themes_dir):
                if remove_directory(directory):
                    logger.info("Deleted existing directory '%s'", directory)
            ensure_directory(paths.custom_apps_dir)
            ensure_directory(paths.themes_dir)
        except OSError as e:
            logger.error("Directory preparation failed", exc_info=True)
            raise DirectoryPreparationError(
                f"Cannot prepare plugin directories: {e}",
                path=str(e.filename) if e.filename else None,
            ) from e
        logger.info(
            "Prepared plugin directories '%s' and '%s'", paths.custom_apps_dir, paths.themes_dir
        )

    def fetch_and_install_archive(self, paths: InstallationPaths) -> ExtractionOutcome:
        """Download the plugin archive and unpack it into the custom-apps directory.

        Raises:
            TransportError: If the download fails
            ArchiveError: If extraction fails
        """
        self.reporter.step(self.messages("downloading_plugin"))
        archive = self.fetcher.fetch(self.config.archive_url)

        self.reporter.step(self.messages("extracting_plugin"))
        outcome = self.archive_installer.install(archive, paths.custom_apps_dir)
        self._report_layout(outcome)
        return outcome

    def _report_layout(self, outcome: ExtractionOutcome) -> None:
        m = self.messages
        expected = self.config.expected_archive_dir
        if isinstance(outcome, NestedLayout):
            if outcome.subdirectory != expected:
                self.reporter.warning(
                    m("detected_alternative_dir", outcome.subdirectory, expected)
                )
            self.reporter.info(m("moving_items", outcome.subdirectory))
        elif isinstance(outcome, FlatLayout):
            self.reporter.warning(m("files_extracted_directly"))
        elif isinstance(outcome, Unrecognized):
            self.reporter.warning(m("expected_dir_not_found", expected))

    def fetch_placeholder_theme(self, paths: InstallationPaths) -> Path:
        """Download the placeholder theme into the themes directory.

        Raises:
            TransportError: If the download fails
            StorageError: If the theme file cannot be written
        """
        self.reporter.step(self.messages("downloading_theme"))
        content = self.fetcher.fetch_text(self.config.theme_url)
        theme_file = paths.themes_dir / self.config.theme_file_name
        try:
            write_text_file(theme_file, content)
        except OSError as e:
            raise StorageError(f"Cannot write {theme_file}: {e}", path=theme_file) from e
        logger.info("Saved placeholder theme to '%s'", theme_file)
        return theme_file

    def apply_configuration(self, paths: InstallationPaths) -> ThemeConflictDecision:
        return self.configurator.apply(paths)

    # -------------------------------------------------------------------------
    # Force-reinstall cleanup
    # -------------------------------------------------------------------------

    def clean_cli_data(self) -> list[Path]:
        """Restore the CLI tool and delete its data directories.

        Each step is best-effort; a directory that cannot be deleted does not
        stop the others.

        Returns:
            Directories that were deleted
        """
        m = self.messages
        self.reporter.warning(m("cleaning_cli_data"))
        self.reporter.info(m("running_restore"))
        self.runner.run("restore")

        deleted: list[Path] = []
        for directory in self.data_directories:
            if not directory.exists():
                logger.debug("Directory not found, skipping deletion: '%s'", directory)
                continue
            self.reporter.info(m("deleting_directory", directory))
            try:
                remove_directory(directory)
            except OSError as e:
                self.reporter.error(m("error_deleting_directory", directory, e))
                logger.error("Failed to delete '%s'", directory, exc_info=True)
                continue
            deleted.append(directory)
            logger.info("Deleted directory '%s'", directory)

        self.reporter.success(m("cli_data_cleaned"))
        return deleted

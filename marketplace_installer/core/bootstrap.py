"""Making sure the CLI tool is installed."""

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path

from marketplace_installer.config.schemas import InstallerConfig
from marketplace_installer.core.console import Reporter
from marketplace_installer.core.errors import CliToolUnavailableError
from marketplace_installer.core.fetcher import ArtifactFetcher, FetchError
from marketplace_installer.core.messages import Messages
from marketplace_installer.core.runner import (
    LAUNCH_FAILURE_EXIT_CODE,
    CommandResult,
    CommandRunner,
    combine_output,
)
from marketplace_installer.utils.filesystem import remove_file
from marketplace_installer.utils.platform import is_windows

logger = logging.getLogger(__name__)


class CliToolBootstrapper:
    """Detects the CLI tool and installs it with the official script if absent."""

    def __init__(
        self,
        runner: CommandRunner,
        fetcher: ArtifactFetcher,
        config: InstallerConfig | None = None,
        reporter: Reporter | None = None,
        messages: Messages | None = None,
    ):
        self.runner = runner
        self.fetcher = fetcher
        self.config = config or InstallerConfig()
        self.reporter = reporter or Reporter()
        self.messages = messages or Messages()

    def is_installed(self) -> bool:
        """Check whether the CLI tool answers the version probe."""
        result = self.runner.probe_version(self.config.version_probe_timeout)
        installed = result.succeeded
        logger.info(
            "Version probe exited with code %d; installed: %s", result.exit_code, installed
        )
        return installed

    def ensure(self) -> None:
        """Make sure the CLI tool is usable.

        Raises:
            CliToolUnavailableError: If the tool is still missing after running
                the install script
        """
        if self.is_installed():
            logger.info("CLI tool is already installed")
            return

        m = self.messages
        self.reporter.warning(m("cli_not_found"))
        self.install()

        if not self.is_installed():
            message = f"{m('cli_not_found')} {m('installation_failed')}"
            self.reporter.error(message)
            raise CliToolUnavailableError(message, step="ensure-cli")
        self.reporter.success(m("cli_verified"))

    def script_location(self) -> tuple[str, Path]:
        """Get the install script URL and the temporary path to save it to."""
        if is_windows():
            url, name = self.config.install_script_url_windows, "install-spicetify.ps1"
        else:
            url, name = self.config.install_script_url_unix, "install-spicetify.sh"
        return url, Path(tempfile.gettempdir()) / name

    def script_command(self, script_path: Path) -> list[str]:
        """Build the command line that runs the install script."""
        if is_windows():
            return [
                "powershell.exe",
                "-NoProfile",
                "-ExecutionPolicy",
                "Bypass",
                "-File",
                str(script_path),
            ]
        return ["sh", str(script_path)]

    def install(self) -> None:
        """Download and run the official install script.

        Download failures are reported but not raised; ``ensure`` decides
        whether the tool is usable afterwards.
        """
        m = self.messages
        self.reporter.step(m("installing_cli"))
        url, script_path = self.script_location()

        try:
            self.fetcher.download_to_file(url, script_path)
        except FetchError as e:
            self.reporter.error(m("cli_install_script_download_failed", e))
            logger.error("Install script download from %s failed", url, exc_info=True)
            return

        try:
            self.reporter.step(m("running_cli_installer"))
            result = self.run_script(script_path)
        finally:
            try:
                remove_file(script_path)
                logger.info("Deleted temporary install script '%s'", script_path)
            except OSError as e:
                logger.warning("Failed to delete temporary install script '%s': %s", script_path, e)

        if not result.succeeded:
            self.reporter.error(m("cli_install_script_failed", result.exit_code))
            if result.output:
                self.reporter.warning(result.output)
            return

        self.reporter.success(m("cli_install_script_finished"))
        lowered = result.output.lower()
        if "error" in lowered or "failed" in lowered:
            self.reporter.warning(result.output)

    def run_script(self, script_path: Path) -> CommandResult:
        """Run the install script, answering its prompts with "no".

        Args:
            script_path: Downloaded script

        Returns:
            CommandResult with the script's combined output
        """
        argv = self.script_command(script_path)
        answers = "".join(f"{answer}\n" for answer in self.config.install_script_answers)
        logger.info("Executing install script: %s", " ".join(argv))
        try:
            completed = subprocess.run(
                argv,
                input=answers,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as e:
            logger.error("Failed to launch install script: %s", e, exc_info=True)
            return CommandResult(
                output=f"Failed to launch {argv[0]}: {e}", exit_code=LAUNCH_FAILURE_EXIT_CODE
            )

        logger.info("Install script finished with exit code %d", completed.returncode)
        if completed.stdout and completed.stdout.strip():
            logger.debug("Install script stdout:\n%s", completed.stdout.strip())
        if completed.stderr and completed.stderr.strip():
            logger.warning("Install script stderr:\n%s", completed.stderr.strip())
        return CommandResult(
            output=combine_output(completed.stdout, completed.stderr),
            exit_code=completed.returncode,
        )

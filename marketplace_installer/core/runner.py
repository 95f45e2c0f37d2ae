"""Runs the CLI tool as a child process."""

from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass, field

from marketplace_installer.utils.platform import is_windows

logger = logging.getLogger(__name__)

LAUNCH_FAILURE_EXIT_CODE = -1
TIMEOUT_EXIT_CODE = -2
BYPASS_ADMIN_FLAG = "--bypass-admin"


@dataclass(frozen=True)
class CommandInvocation:
    """A single CLI tool call."""

    program: str
    args: tuple[str, ...] = field(default_factory=tuple)
    capture_output: bool = False
    timeout: float | None = None
    # Timed calls must launch directly; killing cmd.exe leaves its child on the pipes
    through_shell: bool = True

    def display(self) -> str:
        """Render the invocation the way a user would type it."""
        return " ".join([self.program, *(f'"{a}"' if " " in a else a for a in self.args)])


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a CLI tool call.

    A non-zero exit code is not an error by itself; callers decide. Negative
    codes mean the process could not be launched or did not finish in time.
    """

    output: str
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


def combine_output(stdout: str | None, stderr: str | None) -> str:
    """Join captured streams, appending labeled stderr when it is not blank."""
    output = (stdout or "").strip()
    error_text = (stderr or "").strip()
    if error_text:
        prefix = f"{output}\n" if output else ""
        output = f"{prefix}STDERR:\n{error_text}"
    return output


class CommandRunner:
    """Invokes the CLI tool.

    The runner never raises for a failed command. Launch failures are mapped
    to a result with ``LAUNCH_FAILURE_EXIT_CODE`` so callers only ever deal
    with one result shape.
    """

    def __init__(self, program: str = "spicetify", bypass_admin: bool = False):
        """Initialize the runner.

        Args:
            program: CLI tool executable name
            bypass_admin: If True, every invocation carries ``--bypass-admin``
        """
        self.program = program
        self.bypass_admin = bypass_admin

    def build_argv(self, invocation: CommandInvocation) -> list[str]:
        """Build the process argument vector for an invocation."""
        args = list(invocation.args)
        if self.bypass_admin:
            args.insert(0, BYPASS_ADMIN_FLAG)
        argv = [invocation.program, *args]
        # The CLI tool is a script shim on Windows and needs the shell to resolve it
        if invocation.through_shell and is_windows():
            argv = ["cmd.exe", "/c", *argv]
        return argv

    def invoke(self, invocation: CommandInvocation) -> CommandResult:
        """Run an invocation to completion.

        Args:
            invocation: What to run and whether to capture its output

        Returns:
            CommandResult with combined output (empty when not captured)
        """
        argv = self.build_argv(invocation)
        logger.info("Executing command: %s", " ".join(argv))
        started = time.monotonic()

        try:
            if invocation.capture_output:
                completed = subprocess.run(
                    argv,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    timeout=invocation.timeout,
                    check=False,
                )
                result = CommandResult(
                    output=combine_output(completed.stdout, completed.stderr),
                    exit_code=completed.returncode,
                )
            else:
                completed = subprocess.run(argv, timeout=invocation.timeout, check=False)
                result = CommandResult(output="", exit_code=completed.returncode)
        except subprocess.TimeoutExpired:
            logger.error(
                "Command timed out after %ss: %s", invocation.timeout, invocation.display()
            )
            result = CommandResult(
                output=f"Timed out after {invocation.timeout}s: {invocation.display()}",
                exit_code=TIMEOUT_EXIT_CODE,
            )
        except OSError as e:
            logger.error("Failed to launch %s: %s", argv[0], e, exc_info=True)
            result = CommandResult(
                output=f"Failed to launch {argv[0]}: {e}",
                exit_code=LAUNCH_FAILURE_EXIT_CODE,
            )

        logger.debug(
            "Command '%s' exited with code %d after %.0fms",
            invocation.display(),
            result.exit_code,
            (time.monotonic() - started) * 1000,
        )
        if result.output:
            logger.debug("Output of '%s':\n%s", invocation.display(), result.output)
        if not result.succeeded:
            if invocation.capture_output:
                logger.warning(
                    "Command '%s' failed with exit code %d. Output:\n%s",
                    invocation.display(),
                    result.exit_code,
                    result.output,
                )
            else:
                logger.warning(
                    "Command '%s' failed with exit code %d",
                    invocation.display(),
                    result.exit_code,
                )
        return result

    def run(self, *args: str, capture_output: bool = False) -> CommandResult:
        """Run the CLI tool with the given arguments."""
        return self.invoke(CommandInvocation(self.program, tuple(args), capture_output))

    def probe_version(self, timeout: float) -> CommandResult:
        """Run the version check with a bounded wait.

        The CLI tool is launched directly, without the Windows shell wrapper,
        so a timeout kills the process that holds the output pipes.

        Args:
            timeout: Seconds to wait before giving up

        Returns:
            CommandResult; a zero exit code means the CLI tool is usable
        """
        return self.invoke(
            CommandInvocation(
                self.program,
                ("--version",),
                capture_output=True,
                timeout=timeout,
                through_shell=False,
            )
        )

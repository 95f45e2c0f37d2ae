"""Command-line entry point for the Marketplace installer."""

import logging
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from marketplace_installer import __version__
from marketplace_installer.config.parser import ConfigError, load_installer_config
from marketplace_installer.core.console import CONSOLE_LOGGER_NAME, Reporter
from marketplace_installer.core.messages import Messages, detect_locale
from marketplace_installer.core.orchestrator import InstallOrchestrator, Success
from marketplace_installer.utils.platform import get_os, get_username, is_user_admin

app = typer.Typer(
    name="marketplace-installer",
    help="Unattended installer for the Spicetify Marketplace",
    add_completion=False,
)

console = Console()
error_console = Console(stderr=True)

logger = logging.getLogger("marketplace_installer")

LOG_FORMAT = "[%(asctime)s.%(msecs)03d] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Flags are matched case-insensitively; option values are left alone
KNOWN_FLAGS = frozenset(
    {
        "--bypass-admin",
        "-a",
        "-b",
        "-f",
        "--forcereinstall",
        "-v",
        "-vv",
        "-vvv",
        "--verbose",
        "-c",
        "--config",
        "--lang",
        "--help",
    }
)


def normalize_args(args: list[str]) -> list[str]:
    """Lower-case every argument that names a known flag.

    Args:
        args: Raw command-line arguments (without the program name)

    Returns:
        Arguments with known flags in canonical case
    """
    return [arg.lower() if arg.lower() in KNOWN_FLAGS else arg for arg in args]


def setup_logging(verbosity: int, log_file: Path | None = None) -> None:
    """Configure logging based on verbosity level.

    The terminal handler follows ``verbosity``. The log file, when given,
    always receives everything at DEBUG level.

    Args:
        verbosity: 0=ERROR, 1=INFO, 2+=DEBUG
        log_file: Append-only log file path
    """
    if verbosity == 0:
        # Warnings the user needs are already printed by the reporter
        level = logging.ERROR
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logger.setLevel(logging.DEBUG)

    # Replace handlers from an earlier run in the same process
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    handler = RichHandler(
        console=error_console,
        show_time=verbosity >= 2,
        show_path=verbosity >= 3,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    # The reporter already printed these lines to the terminal
    handler.addFilter(lambda record: record.name != CONSOLE_LOGGER_NAME)
    logger.addHandler(handler)

    if log_file is None:
        return

    try:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as e:
        print_warning(f"Cannot open log file {log_file}: {e}")
        return
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(file_handler)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message to stderr."""
    error_console.print(f"[yellow]Warning:[/yellow] {message}")


def wait_for_keypress(messages: Messages) -> None:
    """Keep the window open until the user presses a key."""
    console.print(messages("press_any_key"))
    try:
        typer.getchar()
    except (EOFError, OSError):
        logger.debug("No interactive input; not waiting for a key press")


def resolve_bypass_admin(flag: bool) -> tuple[bool, bool]:
    """Decide whether CLI tool commands need the bypass flag.

    Args:
        flag: Whether the bypass flag was passed explicitly

    Returns:
        Tuple of (bypass enabled, enabled automatically)
    """
    if flag:
        return True, False
    detected = is_user_admin() or get_username().lower() == "administrator"
    return detected, detected


@app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def install(
    ctx: typer.Context,
    bypass_admin: Annotated[
        bool,
        typer.Option(
            "--bypass-admin",
            "-a",
            "-b",
            help="Pass --bypass-admin to every Spicetify command",
        ),
    ] = False,
    force_reinstall: Annotated[
        bool,
        typer.Option(
            "--forcereinstall",
            "-f",
            help="Clean Spicetify data and reinstall without asking first",
        ),
    ] = False,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase terminal verbosity (-v info, -vv debug)",
        ),
    ] = 0,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="YAML file overriding installer settings",
        ),
    ] = None,
    lang: Annotated[
        str | None,
        typer.Option(
            "--lang",
            help="Message language (en or tr); detected from the system by default",
        ),
    ] = None,
) -> None:
    """Install the Spicetify Marketplace.

    Installs the Spicetify CLI if needed, unpacks the Marketplace into the
    Spicetify user-data directory and activates it. If the result is not
    confirmed, Spicetify data is cleaned and the Marketplace is installed
    again.
    """
    overrides: dict[str, Any] = {}
    if force_reinstall:
        overrides["force_reinstall"] = True
    if lang:
        overrides["locale"] = lang.lower()

    try:
        config = load_installer_config(config_path, overrides)
    except ConfigError as e:
        print_error(str(e))
        wait_for_keypress(Messages(lang.lower() if lang else detect_locale()))
        raise typer.Exit(1) from e

    bypass, auto_detected = resolve_bypass_admin(bypass_admin or config.bypass_admin)
    config = config.model_copy(
        update={"bypass_admin": bypass, "locale": config.locale or detect_locale()}
    )

    setup_logging(verbose, config.log_file)
    logger.info("Marketplace installer %s starting on %s", __version__, get_os())
    logger.debug("Resolved configuration: %s", config.model_dump(mode="json"))
    if ctx.args:
        logger.info("Ignoring unrecognized arguments: %s", " ".join(ctx.args))

    messages = Messages(config.locale)
    reporter = Reporter(console)
    if auto_detected:
        reporter.warning(messages("admin_rights_detected"))

    try:
        orchestrator = InstallOrchestrator(config, messages=messages, reporter=reporter)
        outcome = orchestrator.run(force_reinstall=config.force_reinstall)
        if isinstance(outcome, Success):
            logger.info("Installer finished successfully")
        else:
            logger.warning("Installer finished without success: %s", outcome.reason)
    except Exception as e:
        reporter.error(f"{messages('error_label')} {e}")
        logger.error("Unexpected installer failure", exc_info=True)

    console.print()
    reporter.info(messages("check_errors", config.log_file))
    reporter.warning(messages("restart_spotify"))
    wait_for_keypress(messages)


def main() -> None:
    """Run the installer with case-insensitive flags."""
    app(args=normalize_args(sys.argv[1:]), prog_name="marketplace-installer")


if __name__ == "__main__":
    main()

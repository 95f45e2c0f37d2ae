"""Locating the CLI tool's user-data directory."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from marketplace_installer.core.errors import PathResolutionError
from marketplace_installer.core.runner import CommandRunner
from marketplace_installer.utils.platform import default_user_data_path

logger = logging.getLogger(__name__)

CUSTOM_APPS_DIRNAME = "CustomApps"
THEMES_DIRNAME = "Themes"


@dataclass(frozen=True)
class InstallationPaths:
    """Directories used by one installation run.

    Built once per run and read by every later step.
    """

    user_data_root: Path
    custom_apps_dir: Path
    themes_dir: Path

    @classmethod
    def from_user_data_root(cls, root: str | Path, plugin_name: str) -> InstallationPaths:
        """Derive the plugin directories from the user-data root.

        Args:
            root: CLI tool user-data directory
            plugin_name: Plugin directory name under CustomApps and Themes

        Returns:
            InstallationPaths for the plugin

        Raises:
            PathResolutionError: If root is empty
        """
        if not str(root).strip():
            raise PathResolutionError(
                "User-data path is empty; refusing to create directories", step="resolve-paths"
            )
        root_path = Path(str(root).strip())
        return cls(
            user_data_root=root_path,
            custom_apps_dir=root_path / CUSTOM_APPS_DIRNAME / plugin_name,
            themes_dir=root_path / THEMES_DIRNAME / plugin_name,
        )


def first_existing_directory(output: str) -> str | None:
    """Pick the first non-blank output line naming an existing directory.

    Args:
        output: Command output, one candidate path per line

    Returns:
        The stripped line, or None if no line qualifies
    """
    for line in output.splitlines():
        candidate = line.strip()
        if candidate and Path(candidate).is_dir():
            return candidate
    return None


class PathResolver:
    """Determines the CLI tool's user-data directory.

    Asks the CLI tool first and falls back to the platform convention when
    its answer is unusable.
    """

    def __init__(
        self,
        runner: CommandRunner,
        plugin_name: str = "marketplace",
        fallback: Callable[[], str | Path] | None = None,
    ):
        """Initialize the resolver.

        Args:
            runner: Runner for the CLI tool
            plugin_name: Plugin directory name
            fallback: Supplies the default path (platform convention if None)
        """
        self.runner = runner
        self.plugin_name = plugin_name
        self._fallback = fallback or (lambda: default_user_data_path(runner.program))
        self.used_fallback = False

    def resolve_user_data_path(self) -> str:
        """Get the user-data directory.

        Returns:
            First existing directory reported by ``path userdata``, or the
            fallback path

        Raises:
            PathResolutionError: If even the fallback is empty
        """
        result = self.runner.run("path", "userdata", capture_output=True)
        logger.debug(
            "Raw output from 'path userdata' (exit code %d):\n%s", result.exit_code, result.output
        )
        if not result.succeeded:
            logger.error(
                "'path userdata' failed with exit code %d: %s", result.exit_code, result.output
            )

        found = first_existing_directory(result.output)
        if found:
            logger.info("Parsed user-data path from command output: '%s'", found)
            self.used_fallback = False
            return found

        fallback = str(self._fallback()).strip()
        logger.warning(
            "No valid user-data path in 'path userdata' output, using fallback '%s'. "
            "Raw output was: %s",
            fallback,
            result.output,
        )
        self.used_fallback = True
        if not fallback:
            logger.error("User-data path is empty even after fallback")
            raise PathResolutionError("Failed to determine user-data path", step="resolve-paths")
        return fallback

    def resolve(self) -> InstallationPaths:
        """Resolve the user-data directory and derive the plugin paths."""
        root = self.resolve_user_data_path()
        paths = InstallationPaths.from_user_data_root(root, self.plugin_name)
        logger.info("Using user-data path: '%s'", paths.user_data_root)
        return paths

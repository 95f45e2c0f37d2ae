"""Extracting the plugin archive and normalizing its layout.

Release archives either contain the plugin files at the top level or wrap
them in a single directory (normally ``marketplace-dist``). After extraction
the wrapped layout is flattened so the files sit directly in the plugin
directory.
"""

from __future__ import annotations

import logging
import shutil
import zipfile
from dataclasses import dataclass
from pathlib import Path

from marketplace_installer.core.errors import ArchiveError
from marketplace_installer.utils.filesystem import (
    extract_zip,
    list_files,
    list_subdirectories,
    move_directory_contents,
)

logger = logging.getLogger(__name__)

PLUGIN_FILE_SUFFIXES = (".js",)
PLUGIN_FILE_NAMES = ("manifest.json",)


@dataclass(frozen=True)
class FlatLayout:
    """Plugin files were extracted directly into the target directory."""


@dataclass(frozen=True)
class NestedLayout:
    """Plugin files were extracted into a subdirectory of the target."""

    subdirectory: str


@dataclass(frozen=True)
class Unrecognized:
    """Neither layout could be identified; files were left as extracted."""


ExtractionOutcome = FlatLayout | NestedLayout | Unrecognized


def is_plugin_file(path: Path) -> bool:
    name = path.name.lower()
    return name.endswith(PLUGIN_FILE_SUFFIXES) or name in PLUGIN_FILE_NAMES


class ArchiveInstaller:
    """Installs a downloaded plugin archive into a directory."""

    def __init__(self, expected_dir: str = "marketplace-dist", keyword: str = "marketplace"):
        """Initialize the installer.

        Args:
            expected_dir: Name of the wrapping directory in release archives
            keyword: Substring identifying an alternatively named wrapper
        """
        self.expected_dir = expected_dir
        self.keyword = keyword.lower()

    def install(self, archive: bytes, target_dir: Path) -> ExtractionOutcome:
        """Extract an archive and flatten a wrapping directory.

        Args:
            archive: Zip archive bytes
            target_dir: Plugin directory

        Returns:
            The detected layout

        Raises:
            ArchiveError: If extraction or flattening fails
        """
        logger.info("Extracting %d-byte archive into '%s'", len(archive), target_dir)
        try:
            members = extract_zip(archive, target_dir)
        except (zipfile.BadZipFile, ValueError, OSError) as e:
            logger.error("Archive extraction into '%s' failed: %s", target_dir, e)
            raise ArchiveError(f"Cannot extract archive: {e}", step="install-archive") from e
        logger.debug("Extracted %d archive members", len(members))

        outcome = self.detect_layout(target_dir)
        if isinstance(outcome, NestedLayout):
            self._flatten(target_dir / outcome.subdirectory, target_dir)
        return outcome

    def detect_layout(self, target_dir: Path) -> ExtractionOutcome:
        """Classify the extracted contents of ``target_dir``."""
        if (target_dir / self.expected_dir).is_dir():
            return NestedLayout(self.expected_dir)

        logger.warning(
            "Expected subdirectory '%s' not found in '%s', checking for alternatives",
            self.expected_dir,
            target_dir,
        )
        subdirs = list_subdirectories(target_dir)
        if len(subdirs) == 1:
            name = subdirs[0].name
            if name.lower() == self.expected_dir.lower() or self.keyword in name.lower():
                logger.warning(
                    "Using extracted subdirectory '%s' instead of '%s'", name, self.expected_dir
                )
                return NestedLayout(name)

        if not subdirs and any(is_plugin_file(p) for p in list_files(target_dir)):
            logger.info("Files were extracted directly into '%s'", target_dir)
            return FlatLayout()

        logger.warning(
            "Could not identify the archive layout in '%s'; leaving files as extracted",
            target_dir,
        )
        return Unrecognized()

    def _flatten(self, source: Path, target_dir: Path) -> None:
        """Move the contents of ``source`` up into ``target_dir``."""
        # Rename first so a child named like its parent cannot collide with it
        staging = target_dir / f".{source.name}.unpacking"
        try:
            if staging.exists():
                shutil.rmtree(staging)
            source.rename(staging)
        except OSError as e:
            raise ArchiveError(
                f"Cannot prepare '{source.name}' for moving: {e}", step="install-archive"
            ) from e

        logger.info("Moving items from '%s' to '%s'", source.name, target_dir)
        try:
            moved = move_directory_contents(staging, target_dir)
        except OSError as e:
            staging.rename(source)
            raise ArchiveError(
                f"Cannot move files out of '{source.name}': {e}", step="install-archive"
            ) from e
        logger.debug("Moved %d entries out of '%s'", len(moved), source.name)

        try:
            shutil.rmtree(staging)
        except OSError as e:
            logger.warning("Could not delete extracted subdirectory '%s': %s", staging, e)

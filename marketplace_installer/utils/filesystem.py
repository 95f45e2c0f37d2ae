"""Filesystem utilities for the installer."""

import io
import logging
import shutil
import zipfile
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists

    Returns:
        The directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def remove_directory(path: Path) -> bool:
    """Remove a directory and its contents.

    Args:
        path: Directory path to remove

    Returns:
        True if the directory was removed, False if it didn't exist
    """
    if not path.exists():
        return False
    shutil.rmtree(path)
    return True


def remove_file(path: Path) -> bool:
    """Remove a file.

    Args:
        path: File path to remove

    Returns:
        True if the file was removed, False if it didn't exist
    """
    if not path.exists():
        return False
    path.unlink()
    return True


def write_text_file(path: Path, content: str) -> None:
    """Write content to a text file.

    Args:
        path: Path to the file
        content: Content to write
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def extract_zip(archive: bytes, dest_dir: Path) -> list[str]:
    """Extract an in-memory zip archive, overwriting existing entries.

    Args:
        archive: Raw zip archive bytes
        dest_dir: Destination directory

    Returns:
        Names of the extracted members

    Raises:
        zipfile.BadZipFile: If the archive is corrupt
        ValueError: If a member would be written outside dest_dir
        OSError: If writing fails
    """
    dest_dir.mkdir(parents=True, exist_ok=True)

    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        # Security: prevent path traversal
        for name in zf.namelist():
            member_path = PurePosixPath(name.replace("\\", "/"))
            if member_path.is_absolute() or ".." in member_path.parts:
                raise ValueError(f"Unsafe path in zip archive: {name}")
        zf.extractall(dest_dir)
        return zf.namelist()


def list_subdirectories(path: Path) -> list[Path]:
    """List the immediate subdirectories of a directory, sorted by name."""
    return sorted(p for p in path.iterdir() if p.is_dir())


def list_files(path: Path) -> list[Path]:
    """List the immediate files of a directory, sorted by name."""
    return sorted(p for p in path.iterdir() if p.is_file())


def move_directory_contents(source: Path, dest: Path) -> list[str]:
    """Move every file and directory from ``source`` into ``dest``.

    Existing files in ``dest`` are overwritten and existing directories with
    the same name are deleted first. If any move fails, the entries already
    moved are moved back into ``source`` before the error is re-raised, so a
    failed call leaves ``source`` complete.

    Args:
        source: Directory whose contents are moved
        dest: Directory receiving the contents

    Returns:
        Names of the moved entries

    Raises:
        OSError: If an entry cannot be moved
    """
    moved: list[str] = []
    try:
        for entry in list_files(source):
            target = dest / entry.name
            if target.is_dir():
                shutil.rmtree(target)
            shutil.move(str(entry), str(target))
            moved.append(entry.name)
        for entry in list_subdirectories(source):
            target = dest / entry.name
            if target.exists():
                logger.debug("Target directory %s already exists, deleting before move", target)
                if target.is_dir():
                    shutil.rmtree(target)
                else:
                    target.unlink()
            shutil.move(str(entry), str(target))
            moved.append(entry.name)
    except OSError:
        logger.error("Moving contents of %s failed, restoring %d moved entries", source, len(moved))
        for name in reversed(moved):
            try:
                shutil.move(str(dest / name), str(source / name))
            except OSError as restore_error:
                logger.error("Could not restore %s into %s: %s", name, source, restore_error)
        raise
    return moved

"""Tests for marketplace_installer.utils.filesystem module."""

import io
import shutil
import zipfile
from pathlib import Path
from unittest.mock import patch

import pytest

from marketplace_installer.utils.filesystem import (
    ensure_directory,
    extract_zip,
    list_files,
    list_subdirectories,
    move_directory_contents,
    remove_directory,
    remove_file,
    write_text_file,
)


def make_zip(entries: dict[str, str]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buffer.getvalue()


class TestEnsureDirectory:
    """Tests for ensure_directory function."""

    def test_creates_nested_directories(self, temp_dir: Path):
        path = temp_dir / "a" / "b" / "c"

        assert ensure_directory(path) == path
        assert path.is_dir()

    def test_existing_directory_is_fine(self, temp_dir: Path):
        assert ensure_directory(temp_dir) == temp_dir


class TestRemoval:
    """Tests for remove_directory and remove_file."""

    def test_removes_directory_tree(self, temp_dir: Path):
        path = temp_dir / "tree"
        (path / "sub").mkdir(parents=True)
        (path / "sub" / "file.txt").write_text("x")

        assert remove_directory(path) is True
        assert not path.exists()

    def test_missing_directory(self, temp_dir: Path):
        assert remove_directory(temp_dir / "missing") is False

    def test_removes_file(self, temp_dir: Path):
        path = temp_dir / "file.txt"
        path.write_text("x")

        assert remove_file(path) is True
        assert remove_file(path) is False


class TestWriteTextFile:
    """Tests for write_text_file function."""

    def test_creates_parents(self, temp_dir: Path):
        path = temp_dir / "Themes" / "marketplace" / "color.ini"

        write_text_file(path, "[Marketplace]\n")

        assert path.read_text(encoding="utf-8") == "[Marketplace]\n"


class TestExtractZip:
    """Tests for extract_zip function."""

    def test_extracts_members(self, temp_dir: Path):
        names = extract_zip(make_zip({"a.js": "1", "dir/b.js": "2"}), temp_dir / "out")

        assert sorted(names) == ["a.js", "dir/b.js"]
        assert (temp_dir / "out" / "dir" / "b.js").read_text() == "2"

    def test_overwrites_existing_files(self, temp_dir: Path):
        (temp_dir / "a.js").write_text("old")

        extract_zip(make_zip({"a.js": "new"}), temp_dir)

        assert (temp_dir / "a.js").read_text() == "new"

    @pytest.mark.parametrize("name", ["../evil.js", "/etc/evil.js", "dir/../../evil.js"])
    def test_rejects_unsafe_paths(self, temp_dir: Path, name: str):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            zf.writestr(zipfile.ZipInfo(name), "x")

        with pytest.raises(ValueError, match="Unsafe path"):
            extract_zip(buffer.getvalue(), temp_dir / "out")

    def test_rejects_corrupt_archive(self, temp_dir: Path):
        with pytest.raises(zipfile.BadZipFile):
            extract_zip(b"not a zip", temp_dir)


class TestListing:
    """Tests for list_subdirectories and list_files."""

    def test_separates_files_and_directories(self, temp_dir: Path):
        (temp_dir / "b-dir").mkdir()
        (temp_dir / "a-dir").mkdir()
        (temp_dir / "file.js").write_text("x")

        assert list_subdirectories(temp_dir) == [temp_dir / "a-dir", temp_dir / "b-dir"]
        assert list_files(temp_dir) == [temp_dir / "file.js"]


class TestMoveDirectoryContents:
    """Tests for move_directory_contents function."""

    def test_moves_files_and_directories(self, temp_dir: Path):
        source = temp_dir / "source"
        dest = temp_dir / "dest"
        (source / "assets").mkdir(parents=True)
        (source / "index.js").write_text("x")
        (source / "assets" / "icon.svg").write_text("<svg/>")
        dest.mkdir()

        moved = move_directory_contents(source, dest)

        assert moved == ["index.js", "assets"]
        assert (dest / "index.js").exists()
        assert (dest / "assets" / "icon.svg").exists()
        assert list(source.iterdir()) == []

    def test_replaces_existing_entries(self, temp_dir: Path):
        source = temp_dir / "source"
        dest = temp_dir / "dest"
        (source / "assets").mkdir(parents=True)
        (source / "assets" / "new.svg").write_text("new")
        (source / "index.js").write_text("new")
        (dest / "assets").mkdir(parents=True)
        (dest / "assets" / "stale.svg").write_text("old")
        (dest / "index.js").write_text("old")

        move_directory_contents(source, dest)

        assert (dest / "index.js").read_text() == "new"
        assert not (dest / "assets" / "stale.svg").exists()
        assert (dest / "assets" / "new.svg").exists()

    def test_failure_moves_entries_back(self, temp_dir: Path):
        source = temp_dir / "source"
        dest = temp_dir / "dest"
        (source / "sub").mkdir(parents=True)
        (source / "a.js").write_text("a")
        dest.mkdir()

        real_move = shutil.move

        def failing_move(src, dst):
            if Path(src).name == "sub":
                raise PermissionError("denied")
            return real_move(src, dst)

        with patch("marketplace_installer.utils.filesystem.shutil.move", side_effect=failing_move):
            with pytest.raises(PermissionError):
                move_directory_contents(source, dest)

        assert (source / "a.js").exists()
        assert (source / "sub").is_dir()
        assert not (dest / "a.js").exists()

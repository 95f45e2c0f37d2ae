"""Shared fixtures for installer tests."""

import io
import shutil
import tempfile
import zipfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from rich.console import Console

from marketplace_installer.config.schemas import InstallerConfig
from marketplace_installer.core.console import Reporter
from marketplace_installer.core.fetcher import StorageError, TransportError
from marketplace_installer.core.messages import Messages
from marketplace_installer.core.runner import CommandResult

THEME_CONTENT = "[Marketplace]\ntext = FFFFFF\n"


class FakeRunner:
    """Records CLI tool calls and answers them from a script."""

    def __init__(
        self,
        responses: dict[tuple[str, ...], CommandResult] | None = None,
        version_results: list[CommandResult] | None = None,
        program: str = "spicetify",
    ):
        self.program = program
        self.bypass_admin = False
        self.responses = dict(responses or {})
        self.version_results = list(version_results or [CommandResult("2.38.0", 0)])
        self.calls: list[tuple[str, ...]] = []

    def run(self, *args: str, capture_output: bool = False) -> CommandResult:
        self.calls.append(args)
        return self.responses.get(args, CommandResult("", 0))

    def probe_version(self, timeout: float) -> CommandResult:
        self.calls.append(("--version",))
        if len(self.version_results) > 1:
            return self.version_results.pop(0)
        return self.version_results[0]


class FakePrompter:
    """Answers prompts from a list, falling back to the default."""

    def __init__(self, answers: list[bool] | None = None):
        self.answers = list(answers or [])
        self.questions: list[tuple[str, bool]] = []

    def confirm(self, question: str, default: bool) -> bool:
        self.questions.append((question, default))
        if self.answers:
            return self.answers.pop(0)
        return default


class FakeFetcher:
    """Serves downloads from a URL mapping; exceptions in the mapping are raised."""

    def __init__(self, resources: dict[str, bytes | Exception] | None = None):
        self.resources = dict(resources or {})
        self.requested: list[str] = []

    def fetch(self, url: str) -> bytes:
        self.requested.append(url)
        resource = self.resources.get(url)
        if resource is None:
            raise TransportError(f"HTTP 404: Not Found for {url}", url=url, status_code=404)
        if isinstance(resource, Exception):
            raise resource
        return resource

    def fetch_text(self, url: str, encoding: str = "utf-8") -> str:
        return self.fetch(url).decode(encoding)

    def download_to_file(self, url: str, dest: Path) -> Path:
        content = self.fetch(url)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(content)
        except OSError as e:
            raise StorageError(str(e), path=dest) from e
        return dest


class RecordingReporter(Reporter):
    """Reporter that keeps every emitted line."""

    def __init__(self):
        super().__init__(Console(file=io.StringIO(), width=200))
        self.lines: list[tuple[str, str]] = []

    def _emit(self, message: str, style: str, level: int) -> None:
        self.lines.append((style, message))
        super()._emit(message, style, level)

    def texts(self, style: str | None = None) -> list[str]:
        return [text for s, text in self.lines if style is None or s == style]


def build_zip(entries: dict[str, str]) -> bytes:
    """Build an in-memory zip archive from name/content pairs."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory."""
    path = Path(tempfile.mkdtemp(prefix="marketplace_test_"))
    yield path
    if path.exists():
        shutil.rmtree(path)


@pytest.fixture
def config() -> InstallerConfig:
    """Default installer configuration."""
    return InstallerConfig()


@pytest.fixture
def messages() -> Messages:
    """English messages."""
    return Messages("en")


@pytest.fixture
def reporter() -> RecordingReporter:
    """Reporter recording its output."""
    return RecordingReporter()


@pytest.fixture
def prompter() -> FakePrompter:
    """Prompter that always takes the default."""
    return FakePrompter()


@pytest.fixture
def zip_factory() -> Callable[[dict[str, str]], bytes]:
    """Factory for in-memory zip archives."""
    return build_zip


@pytest.fixture
def user_data_dir(temp_dir: Path) -> Path:
    """Existing CLI tool user-data directory."""
    path = temp_dir / "spicetify-userdata"
    path.mkdir()
    return path


@pytest.fixture
def plugin_archive() -> bytes:
    """Release archive wrapping the plugin in marketplace-dist."""
    return build_zip(
        {
            "marketplace-dist/index.js": "console.log('marketplace');",
            "marketplace-dist/manifest.json": '{"name": "marketplace"}',
            "marketplace-dist/style.css": "body {}",
            "marketplace-dist/assets/icon.svg": "<svg/>",
        }
    )


@pytest.fixture
def fake_runner(user_data_dir: Path) -> FakeRunner:
    """Runner reporting an installed CLI tool and an existing user-data path."""
    return FakeRunner(
        responses={
            ("path", "userdata"): CommandResult(str(user_data_dir), 0),
            ("config", "current_theme"): CommandResult("", 0),
        }
    )


@pytest.fixture
def fake_fetcher(config: InstallerConfig, plugin_archive: bytes) -> FakeFetcher:
    """Fetcher serving the plugin archive and placeholder theme."""
    return FakeFetcher(
        {
            config.archive_url: plugin_archive,
            config.theme_url: THEME_CONTENT.encode("utf-8"),
        }
    )


@pytest.fixture
def make_runner() -> type[FakeRunner]:
    """Factory for scripted runners."""
    return FakeRunner


@pytest.fixture
def make_prompter() -> type[FakePrompter]:
    """Factory for scripted prompters."""
    return FakePrompter


@pytest.fixture
def make_fetcher() -> type[FakeFetcher]:
    """Factory for fetchers serving fixed resources."""
    return FakeFetcher

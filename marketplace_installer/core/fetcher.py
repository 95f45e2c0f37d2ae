"""HTTPS downloads of remote installer resources."""

from __future__ import annotations

import logging
import ssl
from pathlib import Path
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from marketplace_installer import __version__

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Base error for artifact downloads."""


class TransportError(FetchError):
    """The resource could not be retrieved (bad status, connection failure)."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class StorageError(FetchError):
    """A downloaded resource could not be written to disk."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


class ArtifactFetcher:
    """Downloads remote resources over HTTPS.

    Every call performs exactly one request; retry decisions belong to the
    caller.
    """

    USER_AGENT = f"MarketplaceInstaller/{__version__}"

    def __init__(self, timeout: float | None = None, headers: dict[str, str] | None = None):
        """Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds (None waits indefinitely)
            headers: Extra HTTP headers sent with every request
        """
        self._timeout = timeout
        self._headers = {"User-Agent": self.USER_AGENT, **(headers or {})}
        self._ssl_context = ssl.create_default_context()

    def _make_request(self, url: str) -> bytes:
        """Make a GET request.

        Args:
            url: URL to request

        Returns:
            Response body as bytes

        Raises:
            TransportError: If the URL is not HTTPS or the request fails
        """
        if urlparse(url).scheme != "https":
            raise TransportError(f"Invalid URL scheme (expected https): {url}", url=url)

        logger.debug("Making GET request to %s", url)
        try:
            request = Request(url, method="GET")
            for key, value in self._headers.items():
                request.add_header(key, value)

            with urlopen(request, timeout=self._timeout, context=self._ssl_context) as response:
                status: int = response.status
                if not 200 <= status < 300:
                    raise TransportError(
                        f"HTTP {status} for {url}", url=url, status_code=status
                    )
                result: bytes = response.read()
                logger.debug("Request successful, received %d bytes", len(result))
                return result
        except HTTPError as e:
            logger.error("HTTP error %d: %s for %s", e.code, e.reason, url)
            raise TransportError(
                f"HTTP {e.code}: {e.reason} for {url}",
                url=url,
                status_code=e.code,
            ) from e
        except URLError as e:
            logger.error("Failed to connect to %s: %s", url, e.reason)
            raise TransportError(
                f"Failed to connect to {url}: {e.reason}",
                url=url,
            ) from e
        except TimeoutError as e:
            logger.error("Request timed out for %s", url)
            raise TransportError(
                f"Request timed out for {url}",
                url=url,
            ) from e

    def fetch(self, url: str) -> bytes:
        """Download a resource into memory.

        Raises:
            TransportError: If the download fails
        """
        logger.info("Downloading %s", url)
        return self._make_request(url)

    def fetch_text(self, url: str, encoding: str = "utf-8") -> str:
        """Download a text resource.

        Raises:
            TransportError: If the download fails
        """
        return self.fetch(url).decode(encoding, errors="replace")

    def download_to_file(self, url: str, dest: Path) -> Path:
        """Download a URL to a local file.

        Args:
            url: URL to download
            dest: Destination file path

        Returns:
            Path to downloaded file

        Raises:
            TransportError: If the download fails
            StorageError: If the file cannot be written
        """
        content = self.fetch(url)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(content)
        except OSError as e:
            logger.error("Failed to write %s: %s", dest, e)
            raise StorageError(f"Cannot write {dest}: {e}", path=dest) from e
        logger.info("Saved %d bytes from %s to %s", len(content), url, dest)
        return dest

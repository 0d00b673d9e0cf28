"""HTTP and local-file implementation of PageFetcher.

Fetches the source page over HTTP(S) with httpx, or reads it from disk
when given a ``file://`` URI or a plain path. Reading from disk keeps the
service usable against a saved copy of the page.
"""

import asyncio
import logging
from pathlib import Path
from urllib.parse import unquote, urlsplit

import httpx

from yesterland_feed.config import settings
from yesterland_feed.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    # A normal desktop browser UA helps with basic bot filters
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


class HttpPageFetcher:
    """httpx-based implementation of the PageFetcher protocol.

    This class satisfies the PageFetcher protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        fetcher = HttpPageFetcher.create()

        html = await fetcher.fetch("https://www.yesterland.com/whatsnew.html")
        html = await fetcher.fetch("file:///srv/whatsnew.html")
        html = await fetcher.fetch("tests/fixtures/whatsnew.html")

        await fetcher.close()
        ```
    """

    def __init__(
        self,
        timeout: float | None = None,
        verify: bool | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds. Defaults to settings.fetch_timeout.
            verify: Verify TLS certificates. Defaults to settings.verify_tls.
            transport: Optional httpx transport (tests pass httpx.MockTransport).
        """
        self._timeout = timeout or settings.fetch_timeout
        self._verify = settings.verify_tls if verify is None else verify
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                verify=self._verify,
                headers=DEFAULT_HEADERS,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    @classmethod
    def create(
        cls,
        timeout: float | None = None,
        verify: bool | None = None,
    ) -> "HttpPageFetcher":
        """Factory method to create HttpPageFetcher with defaults.

        Args:
            timeout: Request timeout. If None, uses settings.
            verify: TLS verification. If None, uses settings.

        Returns:
            Configured HttpPageFetcher
        """
        return cls(timeout=timeout, verify=verify)

    async def fetch(self, url: str) -> str:
        """Fetch the page at ``url``.

        Args:
            url: An http(s) URL, a ``file://`` URI or a local path

        Returns:
            The page body as text

        Raises:
            FetchError: On transport errors, non-2xx responses or unreadable files
        """
        parts = urlsplit(url)
        if parts.scheme in ("", "file"):
            return await self._fetch_file(parts.path if parts.scheme == "file" else url)

        logger.info("[http] GET %s (verify=%s)", url, self._verify)
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(f"HTTP error {e.response.status_code} from {url}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"Request to {url} failed: {e}") from e

        logger.debug(
            "[http] Response %s %s, %d bytes",
            response.status_code,
            response.reason_phrase,
            len(response.content),
        )
        return response.text

    async def _fetch_file(self, raw_path: str) -> str:
        path = Path(unquote(raw_path)).expanduser().resolve()
        logger.info("[file] Reading %s", path)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except OSError as e:
            raise FetchError(f"Cannot read {path}: {e}") from e

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None

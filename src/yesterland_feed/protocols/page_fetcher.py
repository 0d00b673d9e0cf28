"""Page fetcher protocol.

Defines the interface for anything that can return the raw HTML of the
source page.

Implementations can include:
- HTTP(S) fetch via httpx (default)
- Local file or ``file://`` URI read
- Canned HTML for tests
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class PageFetcher(Protocol):
    """Protocol for source page fetchers."""

    async def fetch(self, url: str) -> str:
        """Fetch the page at ``url``.

        Args:
            url: An http(s) URL, a ``file://`` URI or a local path

        Returns:
            The page body as text

        Raises:
            FetchError: If the page could not be retrieved
        """
        ...

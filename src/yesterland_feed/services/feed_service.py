"""Feed service: the fetch -> parse -> render pipeline.

This service turns the source page into an RSS document by coordinating
the page fetcher (data access), the entry parser and the RSS builder.
It satisfies the ContentPipeline protocol consumed by the refresh loop.
"""

import asyncio
import logging

from yesterland_feed.parsing import EntryParser, RssBuilder
from yesterland_feed.protocols import PageFetcher
from yesterland_feed.repositories import HttpPageFetcher

logger = logging.getLogger(__name__)


class FeedService:
    """Content pipeline producing the rendered feed.

    This service depends on the PageFetcher PROTOCOL, not a concrete
    fetcher, so tests can hand it canned HTML.

    Example:
        ```python
        from yesterland_feed.services import FeedService

        # Create with defaults (httpx fetcher)
        service = FeedService.create()

        # Or with a custom fetcher
        service = FeedService(fetcher=StaticFetcher(html))

        body = await service.render("https://www.yesterland.com/whatsnew.html", 75)
        ```
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        parser: EntryParser | None = None,
        builder: RssBuilder | None = None,
    ) -> None:
        """Initialize the feed service.

        Args:
            fetcher: Source page fetcher (required).
            parser: Entry parser. Defaults to EntryParser().
            builder: RSS builder. Defaults to RssBuilder().
        """
        self._fetcher = fetcher
        self._parser = parser or EntryParser()
        self._builder = builder or RssBuilder()

    @classmethod
    def create(cls, fetcher: PageFetcher | None = None) -> "FeedService":
        """Factory method to create FeedService with the default fetcher.

        Args:
            fetcher: Page fetcher. If None, uses HttpPageFetcher.create().

        Returns:
            Configured FeedService instance
        """
        return cls(fetcher=fetcher or HttpPageFetcher.create())

    async def render(self, source_url: str, limit: int) -> bytes:
        """Fetch ``source_url`` and render its newest ``limit`` entries.

        Business logic:
        1. Fetch the page HTML
        2. Parse the DT/DD entries, keeping page order
        3. Keep the first ``limit`` entries
        4. Render and UTF-8 encode the RSS document

        Args:
            source_url: Page to scrape
            limit: Maximum number of entries to keep

        Returns:
            The RSS document as bytes

        Raises:
            FetchError: If the page cannot be retrieved
        """
        logger.info("[feed] Fetching %s (limit %d)", source_url, limit)
        html = await self._fetcher.fetch(source_url)

        # Parsing and templating are CPU bound; keep them off the event loop
        return await asyncio.to_thread(self._build, html, source_url, limit)

    def _build(self, html: str, source_url: str, limit: int) -> bytes:
        entries = self._parser.parse(html, source_url)[:limit]
        logger.info("[feed] Parsed %d entries", len(entries))

        body = self._builder.build(entries, source_url).encode("utf-8")
        logger.info("[feed] Built RSS %d bytes", len(body))
        return body

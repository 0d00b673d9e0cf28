"""Content pipeline protocol.

The serving core only needs one thing from the scraping side: a rendered
feed document. Everything between the raw page and the RSS bytes hides
behind this interface.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ContentPipeline(Protocol):
    """Protocol for fetch -> parse -> render pipelines.

    Example:
        ```python
        pipeline: ContentPipeline = FeedService.create()
        body = await pipeline.render("https://www.yesterland.com/whatsnew.html", 75)
        ```
    """

    async def render(self, source_url: str, limit: int) -> bytes:
        """Produce the RSS document for ``source_url``.

        Args:
            source_url: Page to scrape
            limit: Maximum number of entries to keep

        Returns:
            The complete RSS document, UTF-8 encoded. A page without any
            entries still renders a valid (empty) channel.

        Raises:
            Exception: Any fetch or parse failure; callers treat every
                exception as a failed cycle.
        """
        ...

"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Swapping the page source (network, local file, canned HTML in tests)
- Driving the refresh loop with a fake pipeline in tests
- Clear separation between the serving core and the content transforms

Usage:
    ```python
    from yesterland_feed.protocols import ContentPipeline, PageFetcher

    fetcher: PageFetcher = HttpPageFetcher()      # works
    pipeline: ContentPipeline = FeedService(...)  # also works
    ```
"""

from .content_pipeline import ContentPipeline
from .page_fetcher import PageFetcher

__all__ = [
    "ContentPipeline",
    "PageFetcher",
]

"""Service layer for business logic.

This layer contains the feed pipeline and the loop that keeps the
cache fresh. Services depend on protocols (interfaces), not concrete
implementations, making them testable and flexible.

Architecture:
    RefreshScheduler -> FeedService -> PageFetcher
    (Background)     -> (Pipeline)  -> (Data Access)
                     -> FeedCache

Usage:
    ```python
    from yesterland_feed.services import FeedService, RefreshScheduler

    service = FeedService.create()
    scheduler = RefreshScheduler(service, cache, source_url, limit=75, interval=86400)
    ```
"""

from .feed_service import FeedService
from .refresh_scheduler import RefreshScheduler

__all__ = [
    "FeedService",
    "RefreshScheduler",
]

"""Yesterland Feed - unofficial RSS feed for the Yesterland "What's New" page.

This package scrapes the page on a timer and serves the rendered feed over
HTTP with ETag / Last-Modified validation.

Layers:
    - protocols: Interface contracts (PageFetcher, ContentPipeline)
    - repositories: Page access (HTTP or local file)
    - parsing: HTML -> entries -> RSS transforms
    - services: Feed pipeline and background refresh
    - cache: The shared snapshot register
    - handlers: HTTP request decisions
    - dto: Wire request/response models
    - entities: Domain models (internal)
    - api: Listener, wiring and entry point

Usage:
    ```python
    from yesterland_feed.services import FeedService

    service = FeedService.create()
    body = await service.render("https://www.yesterland.com/whatsnew.html", 75)
    ```

To run the server:
    ```
    python -m yesterland_feed
    ```
"""

from yesterland_feed.cache import FeedCache
from yesterland_feed.config import Settings, configure_logging, get_settings, settings
from yesterland_feed.dto import FeedRequest, FeedResponse
from yesterland_feed.entities import Entry, FeedSnapshot
from yesterland_feed.errors import FeedError, FetchError
from yesterland_feed.handlers import FeedHandler
from yesterland_feed.parsing import EntryParser, RssBuilder, decode_html_entities
from yesterland_feed.protocols import ContentPipeline, PageFetcher
from yesterland_feed.repositories import HttpPageFetcher
from yesterland_feed.services import FeedService, RefreshScheduler

__all__ = [
    # Configuration
    "Settings",
    "settings",
    "get_settings",
    "configure_logging",
    # Errors
    "FeedError",
    "FetchError",
    # Protocols (interfaces)
    "ContentPipeline",
    "PageFetcher",
    # Repositories (data access)
    "HttpPageFetcher",
    # Parsing (transforms)
    "EntryParser",
    "RssBuilder",
    "decode_html_entities",
    # Services (business logic)
    "FeedService",
    "RefreshScheduler",
    # Cache and handlers
    "FeedCache",
    "FeedHandler",
    # Entities (domain models)
    "Entry",
    "FeedSnapshot",
    # DTOs (wire contracts)
    "FeedRequest",
    "FeedResponse",
]

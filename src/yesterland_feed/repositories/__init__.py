"""Repository layer for data access.

This layer hides where the source page comes from (network or disk)
behind the PageFetcher protocol. This enables:
- Serving from a saved copy of the page during development
- Unit testing with canned HTML
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
"""

from yesterland_feed.protocols import PageFetcher

from .html_fetcher import HttpPageFetcher

__all__ = [
    "PageFetcher",
    "HttpPageFetcher",
]

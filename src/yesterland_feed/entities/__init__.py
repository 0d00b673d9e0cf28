"""Domain entities for internal representation.

These are pure dataclasses (frozen) shared by the pipeline, the cache
and the request handler. They are NOT used for the wire format - use DTOs
from the dto package for that.
"""

from .entry import Entry
from .feed_snapshot import FeedSnapshot, digest

__all__ = ["Entry", "FeedSnapshot", "digest"]

"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response decisions.
Handlers read the feed cache; they never touch sockets or the pipeline.

Architecture:
    FeedServer -> FeedHandler -> FeedCache <- RefreshScheduler
    (Socket)   -> (HTTP)      -> (Snapshot) <- (Background)
"""

from .feed_handler import FeedHandler

__all__ = [
    "FeedHandler",
]

"""Data Transfer Objects for the HTTP wire format.

These Pydantic models sit between the socket and the handler: the server
parses bytes into a FeedRequest and writes a FeedResponse back out.

Internal domain logic should use entities from the entities package.
"""

from .requests import FeedRequest
from .responses import FeedResponse

__all__ = [
    "FeedRequest",
    "FeedResponse",
]

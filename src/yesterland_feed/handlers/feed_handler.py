"""HTTP handler for the feed endpoints.

Handlers convert between DTOs (wire format) and the feed cache.
They handle HTTP concerns like routing, conditional requests and
status codes; socket I/O lives in the api package.
"""

from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime

from yesterland_feed.cache import FeedCache
from yesterland_feed.dto import FeedRequest, FeedResponse
from yesterland_feed.entities import FeedSnapshot

FEED_PATHS = frozenset({"/", "/feed", "/rss"})
RSS_CONTENT_TYPE = "application/rss+xml; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


def http_date(dt: datetime) -> str:
    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)


def parse_http_date(value: str) -> datetime | None:
    """Parse an RFC 7231 HTTP-date; None when it is not one."""
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _text_response(status: int, text: str) -> FeedResponse:
    body = text.encode("utf-8")
    return FeedResponse(
        status=status,
        headers={
            "Content-Type": TEXT_CONTENT_TYPE,
            "Content-Length": str(len(body)),
            "Connection": "close",
        },
        body=body,
    )


class FeedHandler:
    """Answer feed requests from the current cache snapshot.

    The handler keeps no state of its own besides the cache reference,
    so one instance serves every connection.

    Example:
        ```python
        handler = FeedHandler(cache, max_age=86400, placeholder=service.placeholder(url))

        response = handler.handle(FeedRequest(method="GET", target="/feed"))
        writer.write(response.to_bytes())
        ```
    """

    def __init__(self, cache: FeedCache, max_age: int, placeholder: bytes) -> None:
        """Initialize the feed handler.

        Args:
            cache: Shared feed cache (required).
            max_age: ``Cache-Control`` max-age in seconds, the refresh interval.
            placeholder: Body served before the first successful refresh.
        """
        self._cache = cache
        self._max_age = max_age
        self._placeholder = FeedSnapshot.placeholder(placeholder)

    def handle(self, request: FeedRequest) -> FeedResponse:
        """Route ``request`` and build its response.

        Args:
            request: The parsed request head

        Returns:
            200 with the feed, 304 when the client copy is current,
            404 for anything other than GET on a feed path
        """
        if not self.is_servable(request.method, request.path):
            return self.not_found()

        snapshot = self._cache.get() or self._placeholder
        headers = self.cache_headers(snapshot)

        if self.is_fresh(snapshot, request):
            return FeedResponse(status=304, headers=headers)

        headers["Content-Type"] = RSS_CONTENT_TYPE
        headers["Content-Length"] = str(len(snapshot.body))
        return FeedResponse(status=200, headers=headers, body=snapshot.body)

    @staticmethod
    def is_servable(method: str, path: str) -> bool:
        return method == "GET" and path in FEED_PATHS

    @staticmethod
    def is_fresh(snapshot: FeedSnapshot, request: FeedRequest) -> bool:
        """Whether the client's cached copy matches ``snapshot``.

        Either validator is enough: a matching ``If-None-Match``, or an
        ``If-Modified-Since`` at or after ``last_modified`` compared to the
        second, since HTTP dates carry no fractions.
        """
        if snapshot.is_placeholder:
            return False

        if_none_match = request.header("if-none-match")
        if if_none_match is not None and if_none_match.strip() == snapshot.etag:
            return True

        if_modified_since = request.header("if-modified-since")
        if if_modified_since is None:
            return False
        since = parse_http_date(if_modified_since)
        if since is None:
            return False
        return since >= snapshot.last_modified.replace(microsecond=0)

    def cache_headers(self, snapshot: FeedSnapshot) -> dict[str, str]:
        headers = {
            "Connection": "close",
            "Cache-Control": f"public, max-age={self._max_age}",
        }
        if not snapshot.is_placeholder:
            headers["ETag"] = snapshot.etag
            headers["Last-Modified"] = http_date(snapshot.last_modified)
        return headers

    @staticmethod
    def not_found() -> FeedResponse:
        return _text_response(404, "Not found")

    @staticmethod
    def request_timeout() -> FeedResponse:
        return _text_response(408, "Request timeout")

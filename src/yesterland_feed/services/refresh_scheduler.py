"""Background refresh loop for the feed cache."""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from yesterland_feed.cache import FeedCache
from yesterland_feed.entities import FeedSnapshot
from yesterland_feed.protocols import ContentPipeline

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RefreshScheduler:
    """Periodically re-render the feed and install it into the cache.

    A cycle that raises is logged and skipped; the snapshot already in the
    cache stays exactly as it was. The interval is measured from the end of
    one cycle to the start of the next.

    Example:
        ```python
        scheduler = RefreshScheduler(pipeline, cache, source_url, limit=75, interval=86400)

        await scheduler.refresh_once()       # blocking first fetch
        scheduler.start(initial_delay=True)  # then every interval
        ...
        await scheduler.stop()
        ```
    """

    def __init__(
        self,
        pipeline: ContentPipeline,
        cache: FeedCache,
        source_url: str,
        limit: int,
        interval: float,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the scheduler.

        Args:
            pipeline: Produces the rendered feed (required).
            cache: Cache the snapshots are installed into (required).
            source_url: Page handed to the pipeline on every cycle.
            limit: Entry limit handed to the pipeline on every cycle.
            interval: Seconds to wait after a cycle before the next one.
            clock: Source of the ``last_modified`` instant.
        """
        self._pipeline = pipeline
        self._cache = cache
        self._source_url = source_url
        self._limit = limit
        self._interval = interval
        self._clock = clock
        self._stop = asyncio.Event()
        self._task: asyncio.Task | None = None

        self.refresh_count = 0
        self.failure_count = 0

    async def refresh_once(self) -> bool:
        """Run one cycle.

        Returns:
            True if a new snapshot was installed, False if the cycle failed
        """
        try:
            body = await self._pipeline.render(self._source_url, self._limit)
        except Exception as e:
            self.failure_count += 1
            logger.warning("[feed] Fetch failed: %s: %s", type(e).__name__, e)
            return False

        installed_at = self._clock()
        previous = self._cache.get()
        if previous is not None and previous.last_modified is not None:
            installed_at = max(installed_at, previous.last_modified)

        self._cache.replace(FeedSnapshot.build(body, installed_at))
        self.refresh_count += 1
        logger.info("[feed] Updated (%d bytes)", len(body))
        return True

    async def run(self, initial_delay: bool = False) -> None:
        """Refresh forever, until ``stop()`` is called.

        Args:
            initial_delay: Wait one interval before the first cycle.
        """
        logger.info("[feed] Background refresh every %ss", self._interval)
        if initial_delay and await self._wait_interval():
            return
        while True:
            await self.refresh_once()
            if await self._wait_interval():
                return

    async def _wait_interval(self) -> bool:
        """Sleep one interval; True when a stop was requested meanwhile."""
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=self._interval)
        except asyncio.TimeoutError:
            return False
        return True

    def start(self, initial_delay: bool = False) -> asyncio.Task:
        """Run the loop as a background task on the current event loop."""
        if self._task is not None and not self._task.done():
            raise RuntimeError("RefreshScheduler is already running")
        self._stop = asyncio.Event()
        self._task = asyncio.create_task(self.run(initial_delay=initial_delay), name="feed-refresh")
        return self._task

    async def stop(self) -> None:
        """Stop the loop; an in-flight cycle is cancelled, not awaited."""
        self._stop.set()
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

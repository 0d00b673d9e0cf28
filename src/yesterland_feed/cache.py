import threading

from yesterland_feed.entities import FeedSnapshot


class FeedCache:
    """In-memory register holding the feed snapshot currently being served.

    Snapshots are immutable, so readers get a reference rather than a copy.
    The lock only guards the reference swap and is never held across I/O,
    which keeps it safe to share between the event loop and worker threads.

    Example:
        ```python
        cache = FeedCache()
        cache.get()                         # None until the first refresh
        cache.replace(FeedSnapshot.build(body, now))
        cache.get().etag
        ```
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot: FeedSnapshot | None = None

    def get(self) -> FeedSnapshot | None:
        """Return the current snapshot, or None before the first install."""
        with self._lock:
            return self._snapshot

    def replace(self, snapshot: FeedSnapshot) -> None:
        """Install ``snapshot`` as current, unconditionally."""
        with self._lock:
            self._snapshot = snapshot

    @property
    def is_initialized(self) -> bool:
        return self.get() is not None

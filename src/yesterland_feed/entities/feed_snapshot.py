"""Feed snapshot domain entity."""

import hashlib
from dataclasses import dataclass
from datetime import datetime, timezone


def digest(body: bytes) -> str:
    """Hex-encoded SHA-256 of ``body``, used as the ETag."""
    return hashlib.sha256(body).hexdigest()


@dataclass(frozen=True)
class FeedSnapshot:
    """The rendered feed together with its cache-validation metadata.

    A snapshot either carries both ``etag`` and ``last_modified`` or neither;
    the latter is the placeholder served before the first successful refresh.

    Attributes:
        body: Complete RSS document, UTF-8 encoded
        etag: SHA-256 hex digest of ``body``
        last_modified: UTC instant the snapshot was installed
    """

    body: bytes
    etag: str | None = None
    last_modified: datetime | None = None

    def __post_init__(self) -> None:
        if (self.etag is None) != (self.last_modified is None):
            raise ValueError("etag and last_modified must be set together")

    @classmethod
    def build(cls, body: bytes, installed_at: datetime) -> "FeedSnapshot":
        """Create a servable snapshot, hashing ``body`` for the ETag."""
        return cls(
            body=body,
            etag=digest(body),
            last_modified=installed_at.astimezone(timezone.utc),
        )

    @classmethod
    def placeholder(cls, body: bytes) -> "FeedSnapshot":
        """Create the uninitialized snapshot (no validators)."""
        return cls(body=body)

    @property
    def is_placeholder(self) -> bool:
        return self.etag is None

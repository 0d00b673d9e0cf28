"""
Tests for the feed snapshot entity and the in-memory feed cache.
"""

import hashlib
import threading
from datetime import timedelta

import pytest
from conftest import T0

from yesterland_feed.cache import FeedCache
from yesterland_feed.entities import FeedSnapshot, digest


def test_etag_is_sha256_of_body():
    snapshot = FeedSnapshot.build(b"<rss/>", T0)

    assert snapshot.etag == hashlib.sha256(b"<rss/>").hexdigest()
    assert snapshot.last_modified == T0


def test_identical_bodies_share_an_etag():
    first = FeedSnapshot.build(b"same body", T0)
    second = FeedSnapshot.build(b"same body", T0 + timedelta(days=1))

    assert first.etag == second.etag


def test_one_byte_difference_changes_the_etag():
    assert digest(b"body A") != digest(b"body B")
    assert digest(b"body") != digest(b"body ")


def test_snapshot_requires_both_validators():
    with pytest.raises(ValueError):
        FeedSnapshot(body=b"x", etag="abc")
    with pytest.raises(ValueError):
        FeedSnapshot(body=b"x", last_modified=T0)


def test_placeholder_has_no_validators():
    snapshot = FeedSnapshot.placeholder(b"<rss/>")

    assert snapshot.is_placeholder
    assert snapshot.etag is None
    assert snapshot.last_modified is None
    assert not FeedSnapshot.build(b"<rss/>", T0).is_placeholder


def test_cache_starts_empty():
    cache = FeedCache()

    assert cache.get() is None
    assert not cache.is_initialized


def test_replace_overwrites_previous_snapshot():
    cache = FeedCache()
    first = FeedSnapshot.build(b"first", T0)
    second = FeedSnapshot.build(b"second", T0 + timedelta(hours=1))

    cache.replace(first)
    assert cache.get() is first

    cache.replace(second)
    assert cache.get() is second
    assert cache.is_initialized


def test_concurrent_readers_never_see_torn_snapshots():
    """Readers racing a writer always get a body that matches its own etag."""
    cache = FeedCache()
    cache.replace(FeedSnapshot.build(b"seed", T0))
    stop = threading.Event()
    errors: list[str] = []

    def writer() -> None:
        i = 0
        while not stop.is_set():
            i += 1
            cache.replace(FeedSnapshot.build(b"x" * (i % 997), T0 + timedelta(seconds=i)))

    def reader() -> None:
        for _ in range(5000):
            snapshot = cache.get()
            if snapshot.etag != digest(snapshot.body):
                errors.append(f"etag mismatch for {len(snapshot.body)} bytes")

    writer_thread = threading.Thread(target=writer)
    readers = [threading.Thread(target=reader) for _ in range(4)]
    writer_thread.start()
    for t in readers:
        t.start()
    for t in readers:
        t.join()
    stop.set()
    writer_thread.join()

    assert errors == []

"""
Tests for the background refresh loop.
"""

import asyncio
import logging
import time
from datetime import timedelta

from conftest import SOURCE_URL, T0, FakePipeline, StepClock

from yesterland_feed.cache import FeedCache
from yesterland_feed.entities import digest
from yesterland_feed.errors import FetchError
from yesterland_feed.services import RefreshScheduler


def make_scheduler(pipeline, cache, interval=3600.0, clock=None) -> RefreshScheduler:
    return RefreshScheduler(
        pipeline=pipeline,
        cache=cache,
        source_url=SOURCE_URL,
        limit=75,
        interval=interval,
        clock=clock or StepClock(T0),
    )


def test_refresh_installs_snapshot(cache):
    pipeline = FakePipeline(b"<rss>one</rss>")
    scheduler = make_scheduler(pipeline, cache)

    assert asyncio.run(scheduler.refresh_once()) is True

    snapshot = cache.get()
    assert snapshot.body == b"<rss>one</rss>"
    assert snapshot.etag == digest(b"<rss>one</rss>")
    assert snapshot.last_modified == T0
    assert pipeline.calls == [(SOURCE_URL, 75)]
    assert scheduler.refresh_count == 1


def test_failed_refresh_keeps_previous_snapshot(cache, caplog):
    """A failing cycle leaves body, etag and last_modified untouched."""
    pipeline = FakePipeline(b"good", FetchError("HTTP error 500"))
    scheduler = make_scheduler(pipeline, cache, clock=StepClock(T0, T0 + timedelta(hours=1)))

    asyncio.run(scheduler.refresh_once())
    before = cache.get()

    with caplog.at_level(logging.WARNING, logger="yesterland_feed"):
        assert asyncio.run(scheduler.refresh_once()) is False

    after = cache.get()
    assert after is before
    assert (after.body, after.etag, after.last_modified) == (b"good", digest(b"good"), T0)
    assert scheduler.failure_count == 1
    assert "Fetch failed: FetchError: HTTP error 500" in caplog.text


def test_failed_first_refresh_leaves_cache_empty(cache):
    scheduler = make_scheduler(FakePipeline(RuntimeError("boom")), cache)

    assert asyncio.run(scheduler.refresh_once()) is False
    assert cache.get() is None


def test_unchanged_body_keeps_etag_but_advances_last_modified(cache):
    later = T0 + timedelta(days=1)
    scheduler = make_scheduler(FakePipeline(b"same"), cache, clock=StepClock(T0, later))

    asyncio.run(scheduler.refresh_once())
    first = cache.get()
    asyncio.run(scheduler.refresh_once())
    second = cache.get()

    assert first.etag == second.etag
    assert second.last_modified == later


def test_last_modified_never_goes_backwards(cache):
    """A wall clock stepping back does not make the feed look older."""
    clock = StepClock(T0, T0 - timedelta(minutes=5), T0 + timedelta(minutes=1))
    scheduler = make_scheduler(FakePipeline(b"a", b"b", b"c"), cache, clock=clock)

    stamps = []
    for _ in range(3):
        asyncio.run(scheduler.refresh_once())
        stamps.append(cache.get().last_modified)

    assert stamps == [T0, T0, T0 + timedelta(minutes=1)]
    assert stamps == sorted(stamps)


def test_run_refreshes_every_interval(cache):
    pipeline = FakePipeline(b"tick")
    scheduler = make_scheduler(pipeline, cache, interval=0.01)

    async def run() -> None:
        scheduler.start()
        assert scheduler.is_running
        await asyncio.sleep(0.2)
        await scheduler.stop()

    asyncio.run(run())

    assert len(pipeline.calls) >= 3
    assert not scheduler.is_running
    assert cache.get().body == b"tick"


class SlowPipeline:
    """ContentPipeline that takes ``duration`` seconds and records start times."""

    def __init__(self, duration: float) -> None:
        self.duration = duration
        self.starts: list[float] = []

    async def render(self, source_url: str, limit: int) -> bytes:
        self.starts.append(time.monotonic())
        await asyncio.sleep(self.duration)
        return b"slow"


def test_interval_runs_from_end_of_cycle_to_next_start(cache):
    """A slow cycle pushes the next one back by its full duration."""
    pipeline = SlowPipeline(duration=0.1)
    scheduler = make_scheduler(pipeline, cache, interval=0.1)

    async def run() -> None:
        scheduler.start()
        await asyncio.sleep(0.75)
        await scheduler.stop()

    asyncio.run(run())

    gaps = [later - earlier for earlier, later in zip(pipeline.starts, pipeline.starts[1:])]
    assert len(gaps) >= 2
    assert all(gap >= 0.19 for gap in gaps)


def test_failures_do_not_stop_the_loop(cache):
    pipeline = FakePipeline(RuntimeError("first"), RuntimeError("second"), b"recovered")
    scheduler = make_scheduler(pipeline, cache, interval=0.01)

    async def run() -> None:
        scheduler.start()
        for _ in range(200):
            if cache.get() is not None:
                break
            await asyncio.sleep(0.01)
        await scheduler.stop()

    asyncio.run(run())

    assert scheduler.failure_count == 2
    assert cache.get().body == b"recovered"


def test_initial_delay_defers_first_cycle(cache):
    pipeline = FakePipeline(b"later")
    scheduler = make_scheduler(pipeline, cache, interval=60)

    async def run() -> None:
        scheduler.start(initial_delay=True)
        await asyncio.sleep(0.05)
        await asyncio.wait_for(scheduler.stop(), timeout=1)

    asyncio.run(run())

    assert pipeline.calls == []
    assert cache.get() is None


def test_stop_cancels_in_flight_cycle(cache):
    """Shutdown does not wait for a slow fetch to finish."""

    class HangingPipeline:
        def __init__(self) -> None:
            self.started = asyncio.Event()

        async def render(self, source_url: str, limit: int) -> bytes:
            self.started.set()
            await asyncio.Event().wait()
            return b"never"

    async def run() -> None:
        pipeline = HangingPipeline()
        scheduler = make_scheduler(pipeline, cache)
        scheduler.start()
        await asyncio.wait_for(pipeline.started.wait(), timeout=1)
        await asyncio.wait_for(scheduler.stop(), timeout=1)
        assert not scheduler.is_running

    asyncio.run(run())

    assert cache.get() is None

"""Component wiring for the feed server.

Pattern:
    - Every component is constructed explicitly in ``lifespan``
    - The one FeedCache is passed by reference to the scheduler and the handler
    - Clean separation, no global mutable state
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from yesterland_feed.api.server import FeedServer
from yesterland_feed.cache import FeedCache
from yesterland_feed.config import Settings, get_settings
from yesterland_feed.handlers import FeedHandler
from yesterland_feed.parsing import RssBuilder
from yesterland_feed.protocols import ContentPipeline
from yesterland_feed.repositories import HttpPageFetcher
from yesterland_feed.services import FeedService, RefreshScheduler

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Running components, exposed for the entry point and tests."""

    settings: Settings
    cache: FeedCache
    scheduler: RefreshScheduler
    handler: FeedHandler
    server: FeedServer


@asynccontextmanager
async def lifespan(
    settings: Settings | None = None,
    pipeline: ContentPipeline | None = None,
) -> AsyncIterator[AppState]:
    """Build, start and tear down the feed server.

    Startup order:
    1. Fetcher and pipeline (or the ``pipeline`` passed in)
    2. Cache, then one blocking refresh so cold clients get real data
    3. Background refresh loop, first cycle one interval later
    4. Listener bound and accepting

    Args:
        settings: Configuration. Defaults to get_settings().
        pipeline: Content pipeline override (tests pass a fake).

    Yields:
        AppState with every running component

    Cleanup:
        Stops the refresh loop, closes the listener and the HTTP client
    """
    settings = settings or get_settings()
    logger.info("[server] Starting")

    fetcher: HttpPageFetcher | None = None
    if pipeline is None:
        fetcher = HttpPageFetcher.create(timeout=settings.fetch_timeout, verify=settings.verify_tls)
        pipeline = FeedService(fetcher=fetcher)

    cache = FeedCache()
    scheduler = RefreshScheduler(
        pipeline=pipeline,
        cache=cache,
        source_url=settings.source_url,
        limit=settings.feed_limit,
        interval=settings.fetch_interval,
    )
    placeholder = RssBuilder().build_placeholder(settings.source_url).encode("utf-8")
    handler = FeedHandler(cache=cache, max_age=settings.fetch_interval, placeholder=placeholder)
    server = FeedServer(
        handler,
        host=settings.host,
        port=settings.port,
        max_clients=settings.max_clients,
        read_timeout=settings.client_read_timeout,
    )

    try:
        if not await scheduler.refresh_once():
            logger.warning("[server] Initial refresh failed; serving placeholder until the next cycle")
        scheduler.start(initial_delay=True)
        await server.start()

        yield AppState(
            settings=settings,
            cache=cache,
            scheduler=scheduler,
            handler=handler,
            server=server,
        )
    finally:
        await scheduler.stop()
        await server.close()
        if fetcher is not None:
            await fetcher.close()
        logger.info("[server] Stopped")

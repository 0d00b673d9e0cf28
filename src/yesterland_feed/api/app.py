import asyncio
import contextlib
import logging
import signal

from yesterland_feed.api.dependencies import lifespan
from yesterland_feed.config import Settings, configure_logging, get_settings

logger = logging.getLogger(__name__)


async def serve(settings: Settings) -> None:
    """Run the feed server until SIGINT or SIGTERM."""
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # add_signal_handler is unavailable on Windows event loops
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop.set)

    async with lifespan(settings) as state:
        logger.info(
            "[server] Serving %s on port %d, refresh every %ss",
            settings.source_url,
            state.server.port,
            settings.fetch_interval,
        )
        await stop.wait()
        logger.info("[server] Shutdown requested")


def main() -> None:
    settings = get_settings()
    configure_logging(settings.logging_level)
    try:
        asyncio.run(serve(settings))
    except OSError as e:
        logger.error("[server] Cannot listen on %s:%d: %s", settings.host, settings.port, e)
        raise SystemExit(1) from e
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()

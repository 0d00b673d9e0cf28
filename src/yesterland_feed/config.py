import logging
import os
import sys
import time
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SOURCE_URL = "https://www.yesterland.com/whatsnew.html"

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Listener
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "4567"))
    max_clients: int = int(os.getenv("MAX_CLIENTS", "100"))
    client_read_timeout: float = float(os.getenv("CLIENT_READ_TIMEOUT", "10"))

    # Feed
    source_url: str = os.getenv("SOURCE_URL", DEFAULT_SOURCE_URL)
    fetch_interval: int = int(os.getenv("FETCH_INTERVAL", str(24 * 60 * 60)))  # 24 hours
    feed_limit: int = int(os.getenv("FEED_LIMIT", "75"))

    # Upstream fetch
    fetch_timeout: float = float(os.getenv("FETCH_TIMEOUT", "30"))
    verify_tls: bool = os.getenv("VERIFY_TLS", "true").lower() == "true"

    log_level: str = os.getenv("LOG_LEVEL", "info").lower()

    @property
    def logging_level(self) -> int:
        """Map the configured level name onto a ``logging`` constant."""
        return LOG_LEVELS[self.log_level]

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not 0 <= self.port <= 65535:
            raise ValueError(f"PORT must be between 0 and 65535, got {self.port}")

        for name in ("max_clients", "client_read_timeout", "fetch_interval", "feed_limit", "fetch_timeout"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name.upper()} must be positive, got {getattr(self, name)}")

        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {sorted(LOG_LEVELS)}, got {self.log_level!r}"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """Send package logs to stderr as ``<utc time> yesterland_feed LEVEL: message``."""
    logger = logging.getLogger("yesterland_feed")
    formatter = logging.Formatter(
        "%(asctime)s yesterland_feed %(levelname)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    formatter.converter = time.gmtime

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    logger.handlers = [handler]
    logger.setLevel(level)
    logger.propagate = False
    return logger

"""HTTP surface: the listener, component wiring and the entry point."""

from .dependencies import AppState, lifespan
from .server import FeedServer

__all__ = [
    "AppState",
    "FeedServer",
    "lifespan",
]

"""
Shared fixtures for the feed tests.
"""

import asyncio
import contextlib
from datetime import datetime, timezone
from pathlib import Path

import pytest

from yesterland_feed.cache import FeedCache
from yesterland_feed.handlers import FeedHandler
from yesterland_feed.parsing import RssBuilder

FIXTURES = Path(__file__).parent / "fixtures"
SOURCE_URL = "https://www.yesterland.com/whatsnew.html"
T0 = datetime(2025, 7, 17, 12, 30, 15, 250000, tzinfo=timezone.utc)


class StaticFetcher:
    """PageFetcher returning canned HTML and recording requested URLs."""

    def __init__(self, html: str) -> None:
        self.html = html
        self.urls: list[str] = []

    async def fetch(self, url: str) -> str:
        self.urls.append(url)
        return self.html


class FakePipeline:
    """ContentPipeline that replays a script of bodies and exceptions."""

    def __init__(self, *results: bytes | Exception) -> None:
        self.results = list(results)
        self.calls: list[tuple[str, int]] = []

    async def render(self, source_url: str, limit: int) -> bytes:
        self.calls.append((source_url, limit))
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


class StepClock:
    """Clock returning the given instants in order, repeating the last one."""

    def __init__(self, *instants: datetime) -> None:
        self.instants = list(instants)

    def __call__(self) -> datetime:
        return self.instants.pop(0) if len(self.instants) > 1 else self.instants[0]


@pytest.fixture
def fixture_html() -> str:
    return (FIXTURES / "whatsnew.html").read_text(encoding="utf-8")


@pytest.fixture
def cache() -> FeedCache:
    return FeedCache()


@pytest.fixture
def placeholder() -> bytes:
    return RssBuilder().build_placeholder(SOURCE_URL).encode("utf-8")


@pytest.fixture
def handler(cache, placeholder) -> FeedHandler:
    return FeedHandler(cache=cache, max_age=3600, placeholder=placeholder)


async def http_exchange(port: int, data: bytes, timeout: float = 5.0) -> bytes:
    """Send ``data`` on a fresh connection and read until the server closes it."""
    reader, writer = await asyncio.open_connection("127.0.0.1", port)
    try:
        if data:
            writer.write(data)
            await writer.drain()
        return await asyncio.wait_for(reader.read(), timeout=timeout)
    finally:
        writer.close()
        with contextlib.suppress(ConnectionError):
            await writer.wait_closed()


def parse_response(raw: bytes) -> tuple[int, dict[str, str], bytes]:
    """Split a raw HTTP response into status, lower-cased headers and body."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    status = int(lines[0].split()[1])
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name.lower()] = value
    return status, headers, body


def get_request(path: str = "/", **headers: str) -> bytes:
    lines = [f"GET {path} HTTP/1.1", "Host: localhost"]
    lines.extend(f"{name.replace('_', '-')}: {value}" for name, value in headers.items())
    return ("\r\n".join(lines) + "\r\n\r\n").encode("latin-1")

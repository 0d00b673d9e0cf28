#!/usr/bin/env python3
"""
Demo script for the feed pipeline.

Renders the feed once from a URL or a saved copy of the page and prints
the entries, the ETag the server would send and, optionally, the XML.

    python scripts/demo.py
    python scripts/demo.py tests/fixtures/whatsnew.html --limit 5 --xml
"""

import argparse
import asyncio
from datetime import datetime, timezone

from yesterland_feed import EntryParser, FeedSnapshot, FeedService, HttpPageFetcher, settings


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo(source_url: str, limit: int, show_xml: bool) -> None:
    fetcher = HttpPageFetcher.create()
    try:
        print_section(f"Entries from {source_url}")
        html = await fetcher.fetch(source_url)
        entries = EntryParser().parse(html, source_url)[:limit]
        for e in entries:
            when = e.pub_date.date().isoformat() if e.pub_date else "??????????"
            print(f"  {when}  {e.title[:60]}")
            print(f"              {e.link}")

        print_section("Rendered feed")
        body = await FeedService(fetcher=fetcher).render(source_url, limit)
        snapshot = FeedSnapshot.build(body, datetime.now(timezone.utc))
        print(f"  bytes:         {len(snapshot.body)}")
        print(f"  ETag:          {snapshot.etag}")
        print(f"  Last-Modified: {snapshot.last_modified.isoformat()}")

        if show_xml:
            print_section("XML")
            print(body.decode("utf-8"))
    finally:
        await fetcher.close()


def main() -> None:
    p = argparse.ArgumentParser(description="Render the feed once and print it")
    p.add_argument("source", nargs="?", default=settings.source_url, help="URL, file:// URI or local path")
    p.add_argument("--limit", type=int, default=settings.feed_limit, help="Override FEED_LIMIT")
    p.add_argument("--xml", action="store_true", help="Print the RSS document")
    args = p.parse_args()
    asyncio.run(demo(args.source, args.limit, args.xml))


if __name__ == "__main__":
    main()

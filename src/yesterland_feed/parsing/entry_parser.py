import re
from datetime import datetime, timezone
from urllib.parse import urljoin

from dateutil import parser as dtparser

from yesterland_feed.entities import Entry

from .html_utils import decode_html_entities

# very simple DT/DD extraction - tweak if the page layout changes
ENTRY_RE = re.compile(r"<dt>(.*?)</dt>\s*<dd>(.*?)</dd>", re.I | re.S)
LINK_RE = re.compile(r'<a\s+[^>]*href="([^"]+)"[^>]*>(.*?)</a>', re.I | re.S)
NBSP_RE = re.compile(r"&nbsp;", re.I)
WHITESPACE_RE = re.compile(r"\s+")


def parse_date(date_str: str) -> datetime | None:
    """Leniently parse a page date; naive results are taken as UTC."""
    try:
        parsed = dtparser.parse(date_str)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class EntryParser:
    """Extract dated entries from the "What's New" definition list.

    Each ``<dt>`` holds the date and the following ``<dd>`` holds a link to
    the article. Pairs whose ``<dd>`` has no link are skipped.
    """

    def parse(self, html: str, source_url: str) -> list[Entry]:
        entries: list[Entry] = []

        for raw_date, dd_html in ENTRY_RE.findall(html):
            date_str = decode_html_entities(raw_date.strip())
            date_str = WHITESPACE_RE.sub(" ", NBSP_RE.sub(" ", date_str)).strip()

            match = LINK_RE.search(dd_html)
            if not match:
                continue

            href, title_raw = match.groups()
            entries.append(
                Entry(
                    title=decode_html_entities(title_raw.strip()),
                    link=urljoin(source_url, href),
                    date_str=date_str,
                    pub_date=parse_date(date_str),
                )
            )

        return entries

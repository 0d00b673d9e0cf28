"""Scraped announcement entity."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Entry:
    """One dated announcement scraped from the source page.

    Attributes:
        title: Link text with HTML entities decoded
        link: Absolute URL of the announcement
        date_str: The date exactly as the page shows it (whitespace collapsed)
        pub_date: Parsed publish time in UTC, or None if the date was unparseable
    """

    title: str
    link: str
    date_str: str
    pub_date: datetime | None = None

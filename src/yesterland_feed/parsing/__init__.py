"""Stateless transforms from the source page to an RSS document.

    html text -> EntryParser -> [Entry] -> RssBuilder -> rss text
"""

from .entry_parser import EntryParser
from .html_utils import decode_html_entities
from .rss_builder import CHANNEL_TITLE, RssBuilder

__all__ = [
    "CHANNEL_TITLE",
    "EntryParser",
    "RssBuilder",
    "decode_html_entities",
]

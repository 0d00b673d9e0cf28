from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from email.utils import format_datetime

from jinja2 import Template

from yesterland_feed.entities import Entry

CHANNEL_TITLE = "Yesterland What’s New (Unofficial)"
CHANNEL_DESCRIPTION = "Unofficial RSS feed generated from Yesterland “What’s New” page."
INITIALIZING_DESCRIPTION = "Feed is initializing, try again shortly."

RSS_TMPL = Template(
    """\
<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>{{ title }}</title>
    <link>{{ source_url }}</link>
    <description>{{ description }}</description>
    {% if build_date %}
    <lastBuildDate>{{ build_date }}</lastBuildDate>
    {% endif %}
    {% for it in items %}
    <item>
      <title>{{ it.title }}</title>
      <link>{{ it.link }}</link>
      <guid isPermaLink="true">{{ it.link }}</guid>
      <pubDate>{{ it.pub_date }}</pubDate>
      <description>{{ it.description }}</description>
    </item>
    {% endfor %}
  </channel>
</rss>
""",
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


def rfc2822(dt: datetime) -> str:
    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RssBuilder:
    """Render entries as an RSS 2.0 document.

    Args:
        clock: Returns the build time; entries without a parsed date use it
            as their ``pubDate``.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock

    def build(self, entries: Iterable[Entry], source_url: str) -> str:
        now = self._clock()
        items = [
            {
                "title": e.title,
                "link": e.link,
                "pub_date": rfc2822(e.pub_date or now),
                "description": f"{e.title} ({e.date_str})",
            }
            for e in entries
        ]
        return RSS_TMPL.render(
            title=CHANNEL_TITLE,
            source_url=source_url,
            description=CHANNEL_DESCRIPTION,
            build_date=rfc2822(now),
            items=items,
        )

    def build_placeholder(self, source_url: str) -> str:
        """Channel-only document served until the first refresh succeeds."""
        return RSS_TMPL.render(
            title=CHANNEL_TITLE,
            source_url=source_url,
            description=INITIALIZING_DESCRIPTION,
            build_date=None,
            items=[],
        )

from html import unescape

MAX_DECODE_PASSES = 5


def decode_html_entities(text: str | None) -> str:
    """Decode HTML entities, including double-encoded ones like ``&amp;rsquo;``.

    ``&nbsp;`` becomes a plain space rather than U+00A0 so titles and dates
    collapse cleanly.
    """
    s = text or ""
    for _ in range(MAX_DECODE_PASSES):
        s = s.replace("&nbsp;", " ")
        decoded = unescape(s)
        if decoded == s:
            break
        s = decoded
    return s

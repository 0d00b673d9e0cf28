"""Exceptions raised by the feed pipeline."""


class FeedError(Exception):
    """Base class for errors raised by this package."""


class FetchError(FeedError):
    """The source page could not be retrieved (network, HTTP status or file)."""

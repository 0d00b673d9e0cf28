"""Request DTOs for the HTTP listener."""

from urllib.parse import urlsplit

from pydantic import BaseModel, Field


class FeedRequest(BaseModel):
    """A parsed HTTP request head.

    The server builds this from the request line and header block; the
    handler decides the response from it alone.
    """

    model_config = {"frozen": True}

    method: str = Field(..., description="Request method, as sent", min_length=1)
    target: str = Field(..., description="Request target from the request line", min_length=1)
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Header values keyed by lower-cased name, whitespace trimmed",
    )

    @property
    def path(self) -> str:
        """The target without its query string or fragment."""
        return urlsplit(self.target).path

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

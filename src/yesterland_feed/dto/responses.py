"""Response DTOs for the HTTP listener."""

from http import HTTPStatus

from pydantic import BaseModel, Field


class FeedResponse(BaseModel):
    """An HTTP response ready to be written to the socket."""

    model_config = {"frozen": True}

    status: int = Field(..., description="HTTP status code", ge=100, le=599)
    headers: dict[str, str] = Field(default_factory=dict, description="Headers in write order")
    body: bytes = Field(b"", description="Response body (empty for 304)")

    @property
    def reason(self) -> str:
        return HTTPStatus(self.status).phrase

    def to_bytes(self) -> bytes:
        """Serialize as status line, headers, blank line, body."""
        head = [f"HTTP/1.1 {self.status} {self.reason}"]
        head.extend(f"{name}: {value}" for name, value in self.headers.items())
        return ("\r\n".join(head) + "\r\n\r\n").encode("latin-1") + self.body

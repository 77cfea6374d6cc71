"""HTTP response model and serializer."""

from dataclasses import dataclass, field
from pathlib import Path

REASON_PHRASES: dict[int, str] = {
    200: "OK",
    400: "Bad Request",
    404: "NOT FOUND",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


@dataclass(slots=True)
class HTTPResponse:
    status_code: int
    reason_phrase: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | str | None = None
    file_path: Path | None = None

    def __post_init__(self) -> None:
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")
        if self.file_path is not None and self.body is not None:
            raise ValueError("Response cannot set both body and file_path")

    @property
    def reason(self) -> str:
        return self.reason_phrase or REASON_PHRASES.get(self.status_code, "Unknown")


def serialize_head(response: HTTPResponse, content_length: int | None = None) -> bytes:
    """Build the status line and headers; Content-Length only when a body follows."""
    headers = dict(response.headers)
    if content_length is not None:
        headers["Content-Length"] = str(content_length)

    header_lines = [f"HTTP/1.1 {response.status_code} {response.reason}"]
    header_lines.extend(f"{key}: {value}" for key, value in headers.items())
    return "\r\n".join(header_lines).encode("iso-8859-1") + b"\r\n\r\n"


def not_found() -> HTTPResponse:
    return HTTPResponse(status_code=404)


def internal_error() -> HTTPResponse:
    return HTTPResponse(status_code=500)

"""HTTP request-line model and parser."""

from dataclasses import dataclass

ROOT_TARGET = "/"


class HTTPRequestParseError(ValueError):
    """Request parse error carrying an HTTP status code."""

    def __init__(self, message: str, *, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True)
class HTTPRequest:
    method: str
    target: str
    http_version: str = ""
    defaulted_to_root: bool = False

    @classmethod
    def from_bytes(cls, raw: bytes, *, strict: bool = False) -> "HTTPRequest":
        """Parse the request line out of raw request bytes.

        Only the method and target of the first line are used. When the line
        has fewer than two tokens the request falls back to the root target,
        unless strict is set, in which case HTTPRequestParseError is raised.
        """
        request_line = raw.split(b"\n", 1)[0].rstrip(b"\r")
        parts = [
            part.decode("utf-8", errors="replace")
            for part in request_line.split(b" ")
            if part
        ]

        if len(parts) >= 2:
            return cls(
                method=parts[0].upper(),
                target=parts[1],
                http_version=parts[2] if len(parts) > 2 else "",
            )

        if strict:
            raise HTTPRequestParseError("Invalid request line")

        return cls(
            method=parts[0].upper() if parts else "",
            target=ROOT_TARGET,
            defaulted_to_root=True,
        )

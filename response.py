"""HTTP response model and serializer."""

from dataclasses import dataclass, field

REASON_PHRASES: dict[int, str] = {
    200: "OK",
    201: "Created",
    400: "Bad Request",
    404: "Not Found",
    408: "Request Timeout",
    413: "Payload Too Large",
    431: "Request Header Fields Too Large",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


@dataclass(slots=True)
class HTTPResponse:
    status_code: int
    reason_phrase: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | str = b""

    def __post_init__(self) -> None:
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")

    @property
    def reason(self) -> str:
        return self.reason_phrase or REASON_PHRASES.get(self.status_code, "Unknown")

    def header_items(self) -> list[tuple[str, str]]:
        """Return the headers to write, body headers first."""
        remaining = {
            name: value
            for name, value in self.headers.items()
            if name.lower() not in {"content-type", "content-length"}
        }
        content_type = _lookup(self.headers, "Content-Type")

        items: list[tuple[str, str]] = []
        if content_type is not None:
            items.append(("Content-Type", content_type))
        if self.body or content_type is not None:
            items.append(("Content-Length", str(len(self.body))))
        items.extend(remaining.items())
        return items

    def to_bytes(self) -> bytes:
        """Serialize the response into HTTP/1.1 wire format bytes."""
        header_lines = [f"HTTP/1.1 {self.status_code} {self.reason}"]
        header_lines.extend(f"{name}: {value}" for name, value in self.header_items())
        head = "\r\n".join(header_lines).encode("iso-8859-1") + b"\r\n\r\n"

        payload = bytearray(head)
        payload.extend(self.body)
        return bytes(payload)


def _lookup(headers: dict[str, str], name: str) -> str | None:
    wanted = name.lower()
    for header_name, value in headers.items():
        if header_name.lower() == wanted:
            return value
    return None


def empty_response(status_code: int) -> HTTPResponse:
    return HTTPResponse(status_code=status_code)

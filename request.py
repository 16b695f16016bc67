"""HTTP request model and parser."""

from dataclasses import dataclass, field

from errors import MalformedRequestError

CRLF = b"\r\n"
HEADER_TERMINATOR = b"\r\n\r\n"
HEADER_ENCODING = "iso-8859-1"


@dataclass(slots=True)
class HTTPRequest:
    method: str
    path: str
    http_version: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def get_header(self, name: str) -> str | None:
        """Return the last value sent under ``name``, ignoring case."""
        wanted = name.lower()
        value = None
        for header_name, header_value in self.headers.items():
            if header_name.lower() == wanted:
                value = header_value
        return value

    @classmethod
    def from_bytes(cls, raw: bytes) -> "HTTPRequest":
        """Parse raw HTTP request bytes into a structured request object."""
        request_line, offset = _read_line(raw, 0)
        method, path, http_version = _parse_request_line(request_line)

        headers: dict[str, str] = {}
        header_section_closed = False
        while offset < len(raw):
            line, offset = _read_line(raw, offset)
            if not line:
                header_section_closed = True
                break
            name, value = _parse_header_line(line)
            headers[name] = value

        body = b""
        if header_section_closed:
            body = _extract_body(raw, offset, headers)

        return cls(
            method=method,
            path=path,
            http_version=http_version,
            headers=headers,
            body=body,
        )


def _read_line(raw: bytes, offset: int) -> tuple[str, int]:
    line_end = raw.find(CRLF, offset)
    if line_end == -1:
        return raw[offset:].decode(HEADER_ENCODING), len(raw)
    return raw[offset:line_end].decode(HEADER_ENCODING), line_end + len(CRLF)


def _parse_request_line(line: str) -> tuple[str, str, str]:
    if not line:
        raise MalformedRequestError("Missing request line")

    method, _sep, rest = line.partition(" ")
    target, _sep, http_version = rest.partition(" ")
    if not method:
        raise MalformedRequestError("Request line has no method")
    if not target:
        raise MalformedRequestError("Request line has no target")
    if not target.startswith("/"):
        raise MalformedRequestError("Request target must start with '/'")
    return method, target, http_version


def _parse_header_line(line: str) -> tuple[str, str]:
    name, sep, value = line.partition(":")
    if not sep:
        raise MalformedRequestError("Malformed header line")
    if not name or name != name.strip():
        raise MalformedRequestError("Malformed header name")
    return name, value.strip(" \t")


def content_length_of(headers: dict[str, str]) -> int | None:
    """Return the declared body length, or None when absent or unusable."""
    raw_value = None
    for name, value in headers.items():
        if name.lower() == "content-length":
            raw_value = value
    if raw_value is None:
        return None
    # 1*DIGIT only; int() would also take signs and underscores.
    if not (raw_value.isascii() and raw_value.isdigit()):
        return None
    return int(raw_value)


def _extract_body(raw: bytes, body_start: int, headers: dict[str, str]) -> bytes:
    declared = content_length_of(headers)
    if declared is None:
        if _has_header(headers, "content-length"):
            # Unusable length: keep whatever followed the head.
            return raw[body_start:]
        return b""
    return raw[body_start : body_start + declared]


def _has_header(headers: dict[str, str], lowered_name: str) -> bool:
    return any(name.lower() == lowered_name for name in headers)

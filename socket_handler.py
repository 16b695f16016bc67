"""Low-level socket read/write utilities."""

from __future__ import annotations

import socket
from dataclasses import dataclass

from config import BUFFER_SIZE, MAX_BODY_BYTES, MAX_HEADER_BYTES, READ_CHUNK_SIZE
from errors import (
    ConnectionIOError,
    HeaderTooLargeError,
    PayloadTooLargeError,
    SocketTimeoutError,
)
from request import CRLF, HEADER_ENCODING, HEADER_TERMINATOR, content_length_of
from response import HTTPResponse


@dataclass(slots=True)
class RequestHeadInfo:
    header_end_index: int
    expected_body_length: int

    @property
    def request_size(self) -> int:
        """Total bytes of head, terminator and declared body."""
        return self.header_end_index + len(HEADER_TERMINATOR) + self.expected_body_length


def _head_headers(header_bytes: bytes) -> dict[str, str]:
    headers: dict[str, str] = {}
    for line in header_bytes.decode(HEADER_ENCODING).split(CRLF.decode())[1:]:
        name, sep, value = line.partition(":")
        if sep:
            headers[name] = value.strip(" \t")
    return headers


def inspect_http_request_head(
    buffer: bytes | bytearray,
    *,
    max_header_bytes: int = MAX_HEADER_BYTES,
    max_body_bytes: int = MAX_BODY_BYTES,
) -> RequestHeadInfo | None:
    """Inspect request headers from an in-memory buffer, if complete."""
    header_end_index = buffer.find(HEADER_TERMINATOR)
    if header_end_index == -1:
        if len(buffer) > max_header_bytes:
            raise HeaderTooLargeError("Headers exceeded MAX_HEADER_BYTES")
        return None

    if header_end_index + len(HEADER_TERMINATOR) > max_header_bytes:
        raise HeaderTooLargeError("Headers exceeded MAX_HEADER_BYTES")

    declared = content_length_of(_head_headers(bytes(buffer[:header_end_index])))
    expected_body_length = declared or 0
    if expected_body_length > max_body_bytes:
        raise PayloadTooLargeError("Body exceeded MAX_BODY_BYTES")

    return RequestHeadInfo(
        header_end_index=header_end_index,
        expected_body_length=expected_body_length,
    )


def read_http_request(
    client_socket: socket.socket,
    *,
    max_header_bytes: int = MAX_HEADER_BYTES,
    max_body_bytes: int = MAX_BODY_BYTES,
) -> bytes:
    """Read one HTTP request, looping until the head and declared body arrive.

    Returns whatever was received if the peer closes early; an empty result
    means the peer sent nothing at all.
    """
    buffer = bytearray()
    request_size: int | None = None
    while request_size is None or len(buffer) < request_size:
        try:
            chunk = client_socket.recv(max(BUFFER_SIZE, READ_CHUNK_SIZE))
        except socket.timeout as exc:
            raise SocketTimeoutError("Timed out waiting for request bytes") from exc
        except OSError as exc:
            raise ConnectionIOError(f"Receive failed: {exc}") from exc

        if not chunk:
            break
        buffer.extend(chunk)

        # The head is inspected once; after that only the length matters.
        if request_size is None:
            head_info = inspect_http_request_head(
                buffer,
                max_header_bytes=max_header_bytes,
                max_body_bytes=max_body_bytes,
            )
            if head_info is not None:
                request_size = head_info.request_size

    return bytes(buffer)


def write_http_response(client_socket: socket.socket, response: HTTPResponse) -> int:
    """Write the complete response to a client socket and return bytes sent."""
    payload = response.to_bytes()
    try:
        client_socket.sendall(payload)
    except OSError as exc:
        raise ConnectionIOError(f"Send failed: {exc}") from exc
    return len(payload)

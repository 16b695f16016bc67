"""Unit tests for HTTP response serialization."""

from response import HTTPResponse


def test_empty_response_has_no_body_headers() -> None:
    raw = HTTPResponse(status_code=200).to_bytes()

    assert raw == b"HTTP/1.1 200 OK\r\n\r\n"


def test_not_found_status_line() -> None:
    raw = HTTPResponse(status_code=404).to_bytes()

    assert raw == b"HTTP/1.1 404 Not Found\r\n\r\n"


def test_content_type_precedes_content_length() -> None:
    response = HTTPResponse(
        status_code=200,
        headers={"X-Extra": "1", "Content-Type": "text/plain"},
        body="hello",
    )

    raw = response.to_bytes()

    assert raw == (
        b"HTTP/1.1 200 OK\r\n"
        b"Content-Type: text/plain\r\n"
        b"Content-Length: 5\r\n"
        b"X-Extra: 1\r\n"
        b"\r\n"
        b"hello"
    )


def test_content_length_is_computed_from_body_bytes() -> None:
    response = HTTPResponse(
        status_code=200,
        headers={"Content-Type": "text/plain", "Content-Length": "999"},
        body="héllo",
    )

    raw = response.to_bytes()

    assert b"Content-Length: 6\r\n" in raw
    assert b"999" not in raw


def test_binary_body_with_nul_bytes_is_written_verbatim() -> None:
    payload = b"a\x00b\x00\xff"
    response = HTTPResponse(
        status_code=200,
        headers={"Content-Type": "application/octet-stream"},
        body=payload,
    )

    raw = response.to_bytes()

    assert raw.endswith(b"\r\n\r\n" + payload)
    assert b"Content-Length: 5\r\n" in raw


def test_typed_empty_body_still_reports_zero_length() -> None:
    response = HTTPResponse(
        status_code=201,
        headers={"Content-Type": "application/octet-stream"},
    )

    assert response.to_bytes() == (
        b"HTTP/1.1 201 Created\r\n"
        b"Content-Type: application/octet-stream\r\n"
        b"Content-Length: 0\r\n"
        b"\r\n"
    )


def test_custom_reason_phrase() -> None:
    raw = HTTPResponse(status_code=200, reason_phrase="Fine").to_bytes()

    assert raw.startswith(b"HTTP/1.1 200 Fine\r\n")

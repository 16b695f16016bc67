"""Tests for looped request reads and full response writes."""

import socket
import threading
import time

import pytest

import socket_handler
from errors import (
    ConnectionIOError,
    HeaderTooLargeError,
    PayloadTooLargeError,
    SocketTimeoutError,
)
from response import HTTPResponse
from socket_handler import (
    inspect_http_request_head,
    read_http_request,
    write_http_response,
)


def _send_in_parts(sock: socket.socket, parts: list[bytes], *, close: bool = False) -> None:
    for part in parts:
        sock.sendall(part)
        time.sleep(0.02)
    if close:
        sock.shutdown(socket.SHUT_WR)


def test_inspect_returns_none_until_head_is_complete() -> None:
    assert inspect_http_request_head(b"GET / HTTP/1.1\r\nHost: x\r\n") is None


def test_inspect_reports_declared_body_length() -> None:
    head_info = inspect_http_request_head(
        b"POST /files/a HTTP/1.1\r\nContent-Length: 12\r\n\r\n"
    )

    assert head_info is not None
    assert head_info.expected_body_length == 12


def test_inspect_rejects_oversized_head() -> None:
    with pytest.raises(HeaderTooLargeError):
        inspect_http_request_head(b"GET / HTTP/1.1\r\nX: " + b"a" * 64, max_header_bytes=32)


def test_inspect_rejects_oversized_body() -> None:
    with pytest.raises(PayloadTooLargeError):
        inspect_http_request_head(
            b"POST / HTTP/1.1\r\nContent-Length: 100\r\n\r\n",
            max_body_bytes=10,
        )


def test_bad_content_length_means_request_ends_after_head() -> None:
    head = b"POST / HTTP/1.1\r\nContent-Length: nope\r\n\r\n"

    head_info = inspect_http_request_head(head)

    assert head_info is not None
    assert head_info.expected_body_length == 0
    assert head_info.request_size == len(head)


def test_read_gathers_request_split_across_segments() -> None:
    server_side, client_side = socket.socketpair()
    parts = [
        b"POST /files/a HTTP/1.1\r\nHo",
        b"st: localhost\r\nContent-Le",
        b"ngth: 10\r\n\r\n01234",
        b"56789",
    ]
    with server_side, client_side:
        sender = threading.Thread(target=_send_in_parts, args=(client_side, parts))
        sender.start()
        raw = read_http_request(server_side)
        sender.join()

    assert raw == b"".join(parts)


def test_read_inspects_head_once_while_body_streams_in(monkeypatch) -> None:
    inspected: list[int] = []

    def counting_inspect(buffer, **kwargs):
        inspected.append(len(buffer))
        return inspect_http_request_head(buffer, **kwargs)

    monkeypatch.setattr(socket_handler, "inspect_http_request_head", counting_inspect)
    head = b"POST /files/big HTTP/1.1\r\nContent-Length: 4000\r\n\r\n"
    parts = [head] + [b"x" * 200 for _ in range(20)]
    server_side, client_side = socket.socketpair()
    with server_side, client_side:
        sender = threading.Thread(target=_send_in_parts, args=(client_side, parts))
        sender.start()
        raw = read_http_request(server_side)
        sender.join()

    assert raw == head + b"x" * 4000
    assert len(inspected) == 1


def test_read_returns_partial_bytes_when_peer_closes_early() -> None:
    server_side, client_side = socket.socketpair()
    parts = [b"POST / HTTP/1.1\r\nContent-Length: 10\r\n\r\nabc"]
    with server_side, client_side:
        sender = threading.Thread(
            target=_send_in_parts,
            args=(client_side, parts),
            kwargs={"close": True},
        )
        sender.start()
        raw = read_http_request(server_side)
        sender.join()

    assert raw.endswith(b"\r\n\r\nabc")


def test_read_returns_empty_when_peer_sends_nothing() -> None:
    server_side, client_side = socket.socketpair()
    with server_side, client_side:
        client_side.shutdown(socket.SHUT_WR)
        assert read_http_request(server_side) == b""


def test_read_times_out_when_configured() -> None:
    server_side, client_side = socket.socketpair()
    with server_side, client_side:
        server_side.settimeout(0.05)
        client_side.sendall(b"GET / HTTP/1.1\r\n")
        with pytest.raises(SocketTimeoutError):
            read_http_request(server_side)


def test_read_failure_is_connection_io_error() -> None:
    server_side, client_side = socket.socketpair()
    client_side.close()
    server_side.close()

    with pytest.raises(ConnectionIOError):
        read_http_request(server_side)


def test_write_sends_full_payload() -> None:
    server_side, client_side = socket.socketpair()
    response = HTTPResponse(
        status_code=200,
        headers={"Content-Type": "text/plain"},
        body=b"abc",
    )
    with server_side, client_side:
        sent = write_http_response(server_side, response)
        server_side.shutdown(socket.SHUT_WR)
        received = b""
        while chunk := client_side.recv(4096):
            received += chunk

    assert sent == len(received)
    assert received == response.to_bytes()


def test_write_failure_is_connection_io_error() -> None:
    server_side, client_side = socket.socketpair()
    server_side.close()
    client_side.close()

    with pytest.raises(ConnectionIOError):
        write_http_response(server_side, HTTPResponse(status_code=200))

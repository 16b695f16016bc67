"""Single-connection lifecycle: read, parse, route, handle, respond."""

from __future__ import annotations

import json
import logging
import socket
import time

from config import LOG_FORMAT, MAX_BODY_BYTES, MAX_HEADER_BYTES
from errors import ConnectionIOError, HTTPError
from metrics import MetricsRegistry
from request import HTTPRequest
from response import HTTPResponse, empty_response
from router import Router
from socket_handler import read_http_request, write_http_response

logger = logging.getLogger(__name__)


class ConnectionHandler:
    """Serves exactly one request per accepted connection, then closes it."""

    def __init__(
        self,
        router: Router,
        *,
        metrics: MetricsRegistry | None = None,
        socket_timeout_secs: float | None = None,
        max_header_bytes: int = MAX_HEADER_BYTES,
        max_body_bytes: int = MAX_BODY_BYTES,
        log_format: str = LOG_FORMAT,
    ) -> None:
        self.router = router
        self.metrics = metrics or MetricsRegistry()
        self.socket_timeout_secs = socket_timeout_secs
        self.max_header_bytes = max_header_bytes
        self.max_body_bytes = max_body_bytes
        self.log_format = log_format

    def __call__(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        self.handle(client_socket, address)

    def handle(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        with client_socket, self.metrics.connection():
            self._serve(client_socket, address)

    def _serve(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        started_at = time.perf_counter()
        client_socket.settimeout(self.socket_timeout_secs)

        try:
            raw_request = read_http_request(
                client_socket,
                max_header_bytes=self.max_header_bytes,
                max_body_bytes=self.max_body_bytes,
            )
        except ConnectionIOError as exc:
            self.metrics.record_io_failure("read", exc)
            logger.warning("client=%s read failed: %s", address[0], exc)
            return
        except HTTPError as exc:
            logger.info("client=%s rejected request: %s", address[0], exc)
            self._respond(
                client_socket,
                address,
                empty_response(exc.status_code),
                method="-",
                path="-",
                bytes_in=0,
                started_at=started_at,
            )
            return

        if not raw_request:
            logger.debug("client=%s closed without sending a request", address[0])
            return

        try:
            request = HTTPRequest.from_bytes(raw_request)
        except HTTPError as exc:
            logger.info("client=%s malformed request: %s", address[0], exc)
            self._respond(
                client_socket,
                address,
                empty_response(exc.status_code),
                method="-",
                path="-",
                bytes_in=len(raw_request),
                started_at=started_at,
            )
            return

        response = self.dispatch(request)
        self._respond(
            client_socket,
            address,
            response,
            method=request.method,
            path=request.path,
            bytes_in=len(raw_request),
            started_at=started_at,
        )

    def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        """Run the routed handler, turning handler errors into responses."""
        handler = self.router.resolve(request.method, request.path)
        try:
            return handler(request)
        except HTTPError as exc:
            logger.debug("%s %s -> %s: %s", request.method, request.path, exc.status_code, exc)
            return empty_response(exc.status_code)
        except Exception:
            logger.exception("Unhandled error in route handler")
            return empty_response(500)

    def _respond(
        self,
        client_socket: socket.socket,
        address: tuple[str, int],
        response: HTTPResponse,
        *,
        method: str,
        path: str,
        bytes_in: int,
        started_at: float,
    ) -> None:
        try:
            bytes_sent = write_http_response(client_socket, response)
        except ConnectionIOError as exc:
            self.metrics.record_io_failure("write", exc)
            logger.warning("client=%s write failed: %s", address[0], exc)
            return

        duration_ms = (time.perf_counter() - started_at) * 1000
        self.metrics.record_exchange(
            response.status_code,
            bytes_in=bytes_in,
            bytes_out=bytes_sent,
            duration_ms=duration_ms,
        )
        self._log_access(
            address=address,
            method=method,
            path=path,
            status=response.status_code,
            bytes_in=bytes_in,
            bytes_out=bytes_sent,
            duration_ms=duration_ms,
        )

    def _log_access(
        self,
        *,
        address: tuple[str, int],
        method: str,
        path: str,
        status: int,
        bytes_in: int,
        bytes_out: int,
        duration_ms: float,
    ) -> None:
        event = {
            "client": address[0],
            "method": method,
            "path": path,
            "status": status,
            "bytes_in": bytes_in,
            "bytes_out": bytes_out,
            "duration_ms": round(duration_ms, 3),
        }
        if self.log_format == "json":
            logger.info(json.dumps(event, sort_keys=True))
            return

        logger.info(
            "client=%s method=%s path=%s status=%s bytes_in=%s bytes_out=%s duration_ms=%.2f",
            event["client"],
            event["method"],
            event["path"],
            event["status"],
            event["bytes_in"],
            event["bytes_out"],
            duration_ms,
        )

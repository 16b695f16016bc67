"""Main HTTP server entry point: listening socket, accept loop and CLI."""

from __future__ import annotations

import argparse
import json
import logging
import socket
import sys
from pathlib import Path

from config import (
    ACCEPT_POLL_SECS,
    BUFFER_SIZE,
    FILES_DIR,
    HOST,
    LISTEN_BACKLOG,
    LOG_FORMAT,
    LOG_LEVEL,
    MAX_BODY_BYTES,
    MAX_HEADER_BYTES,
    PORT,
    REJECT_DRAIN_SECS,
    REQUEST_QUEUE_SIZE,
    SOCKET_TIMEOUT_SECS,
    WORKER_COUNT,
)
from connection import ConnectionHandler
from file_store import FileStore
from handlers.basic_handlers import echo, not_found, root, user_agent
from handlers.file_handlers import FILES_PREFIX, FileHandlers
from metrics import MetricsRegistry
from response import HTTPResponse
from router import Router
from socket_handler import write_http_response
from thread_pool import ThreadPool

logger = logging.getLogger(__name__)


def build_router(store: FileStore) -> Router:
    """Build the fixed route table; order matters, first match wins."""
    files = FileHandlers(store)
    router = Router(fallback=not_found)
    router.add_route("GET", "/", root)
    router.add_prefix_route(None, "/echo/", echo)
    router.add_route("GET", "/user-agent", user_agent)
    router.add_prefix_route("GET", FILES_PREFIX, files.get_file)
    router.add_prefix_route("POST", FILES_PREFIX, files.post_file)
    return router


class HTTPServer:
    def __init__(
        self,
        host: str = HOST,
        port: int = PORT,
        router: Router | None = None,
        worker_count: int = WORKER_COUNT,
        request_queue_size: int = REQUEST_QUEUE_SIZE,
        *,
        files_directory: str | Path = FILES_DIR,
        socket_timeout_secs: float | None = SOCKET_TIMEOUT_SECS,
        max_header_bytes: int = MAX_HEADER_BYTES,
        max_body_bytes: int = MAX_BODY_BYTES,
        log_format: str = LOG_FORMAT,
    ) -> None:
        self.host = host
        self.port = port
        self.store = FileStore(files_directory)
        self.router = router or build_router(self.store)
        self.worker_count = worker_count
        self.request_queue_size = request_queue_size
        self.metrics = MetricsRegistry()
        self.connection_handler = ConnectionHandler(
            self.router,
            metrics=self.metrics,
            socket_timeout_secs=socket_timeout_secs,
            max_header_bytes=max_header_bytes,
            max_body_bytes=max_body_bytes,
            log_format=log_format,
        )

        self._server_socket: socket.socket | None = None
        self._pool: ThreadPool | None = None
        self._running = False

    def start(self) -> None:
        """Bind, listen and hand each accepted connection to the worker pool."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server_socket:
            self._server_socket = server_socket
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server_socket.bind((self.host, self.port))
            server_socket.listen(LISTEN_BACKLOG)
            server_socket.settimeout(ACCEPT_POLL_SECS)
            self.port = server_socket.getsockname()[1]
            self._pool = ThreadPool(
                worker_count=self.worker_count,
                queue_size=self.request_queue_size,
                handler=self.connection_handler,
            )
            self._pool.start()
            logger.info(
                "listening on %s:%s serving files from %s",
                self.host,
                self.port,
                self.store.root,
            )

            self._running = True
            try:
                while self._running:
                    try:
                        client_socket, address = server_socket.accept()
                    except socket.timeout:
                        continue
                    except OSError:
                        break

                    if self._pool is None or not self._pool.submit(client_socket, address):
                        self._send_queue_full_response(client_socket, address)
            finally:
                if self._pool is not None:
                    self._pool.shutdown()
                    self._pool = None
                logger.info("server stopped metrics=%s", json.dumps(self.metrics.snapshot()))

    def stop(self) -> None:
        self._running = False
        if self._server_socket is not None:
            self._server_socket.close()
            self._server_socket = None

    def _send_queue_full_response(
        self,
        client_socket: socket.socket,
        address: tuple[str, int],
    ) -> None:
        self.metrics.record_rejection()
        logger.warning("worker queue full, rejecting client=%s", address[0])
        with client_socket:
            try:
                write_http_response(client_socket, HTTPResponse(status_code=503))
                client_socket.shutdown(socket.SHUT_WR)
                # Unread request bytes would turn the close into a reset.
                client_socket.settimeout(REJECT_DRAIN_SECS)
                while client_socket.recv(BUFFER_SIZE):
                    pass
            except socket.timeout:
                pass
            except OSError as exc:
                self.metrics.record_io_failure("write", exc)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the file-serving HTTP server")
    parser.add_argument(
        "--directory",
        default=FILES_DIR,
        help="directory served under /files/ (default: current directory)",
    )
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--workers", type=int, default=WORKER_COUNT)
    parser.add_argument("--queue-size", type=int, default=REQUEST_QUEUE_SIZE)
    parser.add_argument(
        "--timeout",
        type=float,
        default=SOCKET_TIMEOUT_SECS,
        help="seconds to wait for request bytes (default: wait indefinitely)",
    )
    parser.add_argument("--log-format", choices=["plain", "json"], default=LOG_FORMAT)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=LOG_LEVEL,
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if not Path(args.directory).is_dir():
        logger.error("Failed to serve directory %s: not a directory", args.directory)
        return 1

    server = HTTPServer(
        host=args.host,
        port=args.port,
        worker_count=args.workers,
        request_queue_size=args.queue_size,
        files_directory=args.directory,
        socket_timeout_secs=args.timeout,
        log_format=args.log_format,
    )
    try:
        server.start()
    except KeyboardInterrupt:
        server.stop()
    except OSError as exc:
        logger.error("Server failed to start on %s:%s: %s", args.host, args.port, exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

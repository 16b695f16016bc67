"""Per-server tallies of connections and their single exchange."""

from __future__ import annotations

import threading
from collections import Counter
from collections.abc import Iterator
from contextlib import contextmanager


class MetricsRegistry:
    """Lock-protected counters shared by every connection worker.

    A connection ends in one of three ways: an exchange (some response was
    written), an I/O failure, or a silent close. Rejections happen before a
    worker ever sees the socket.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._connections_open = 0
        self._totals: Counter[str] = Counter()
        self._responses_by_status: Counter[int] = Counter()
        self._io_failures: Counter[str] = Counter()
        self._slowest_ms = 0.0

    @contextmanager
    def connection(self) -> Iterator[None]:
        """Count a connection as open for the duration of the block."""
        with self._lock:
            self._connections_open += 1
            self._totals["connections"] += 1
        try:
            yield
        finally:
            with self._lock:
                self._connections_open -= 1

    def record_exchange(
        self,
        status_code: int,
        *,
        bytes_in: int,
        bytes_out: int,
        duration_ms: float,
    ) -> None:
        with self._lock:
            self._totals["exchanges"] += 1
            self._totals["bytes_in"] += bytes_in
            self._totals["bytes_out"] += bytes_out
            self._responses_by_status[status_code] += 1
            self._slowest_ms = max(self._slowest_ms, duration_ms)

    def record_io_failure(self, stage: str, error: BaseException) -> None:
        """Tally a read or write failure that ended a connection without a response."""
        with self._lock:
            self._io_failures[f"{stage}:{type(error).__name__}"] += 1

    def record_rejection(self) -> None:
        with self._lock:
            self._totals["rejected"] += 1

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            return {
                "connections_open": self._connections_open,
                "connections_total": self._totals["connections"],
                "exchanges": self._totals["exchanges"],
                "rejected": self._totals["rejected"],
                "bytes_in": self._totals["bytes_in"],
                "bytes_out": self._totals["bytes_out"],
                "responses_by_status": {
                    str(status): count
                    for status, count in sorted(self._responses_by_status.items())
                },
                "io_failures": dict(self._io_failures),
                "slowest_ms": round(self._slowest_ms, 3),
            }

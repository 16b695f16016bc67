"""Configuration constants for the file-serving HTTP server."""

HOST: str = "0.0.0.0"
PORT: int = 4221
FILES_DIR: str = "."
BUFFER_SIZE: int = 1024
READ_CHUNK_SIZE: int = 65_536
MAX_HEADER_BYTES: int = 16_384
MAX_BODY_BYTES: int = 10_485_760
SOCKET_TIMEOUT_SECS: float | None = None
WORKER_COUNT: int = 8
REQUEST_QUEUE_SIZE: int = 64
LISTEN_BACKLOG: int = 128
ACCEPT_POLL_SECS: float = 0.2
LOG_FORMAT: str = "plain"
LOG_LEVEL: str = "INFO"
REJECT_DRAIN_SECS: float = 0.05

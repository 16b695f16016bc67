"""Exceptions that map onto HTTP error responses."""


class HTTPError(Exception):
    """Base error carrying the status code the client should receive."""

    status_code: int = 500


class MalformedRequestError(HTTPError, ValueError):
    """Raised when request bytes cannot yield a method and a path."""

    status_code = 400


class MissingRequiredHeaderError(HTTPError):
    """Raised when a handler needs a header the client did not send."""

    status_code = 400

    def __init__(self, header_name: str) -> None:
        super().__init__(f"Missing required header: {header_name}")
        self.header_name = header_name


class ResourceNotFoundError(HTTPError, LookupError):
    """Raised when a file cannot be found, opened or created."""

    status_code = 404


class PayloadTooLargeError(HTTPError):
    """Raised when the declared request body exceeds MAX_BODY_BYTES."""

    status_code = 413


class HeaderTooLargeError(HTTPError):
    """Raised when the request head exceeds MAX_HEADER_BYTES."""

    status_code = 431


class SocketTimeoutError(HTTPError):
    """Raised when a client stalls past the configured socket timeout."""

    status_code = 408


class ConnectionIOError(OSError):
    """Raised when bytes cannot be received from or sent to the peer."""

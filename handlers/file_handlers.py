"""Handlers that read and write files in the served directory."""

import logging

from file_store import FileStore
from request import HTTPRequest
from response import HTTPResponse

logger = logging.getLogger(__name__)

FILES_PREFIX = "/files/"
OCTET_STREAM = "application/octet-stream"


class FileHandlers:
    """GET/POST handlers for ``/files/<name>`` bound to one FileStore."""

    def __init__(self, store: FileStore) -> None:
        self.store = store

    def get_file(self, request: HTTPRequest) -> HTTPResponse:
        filename = request.path.removeprefix(FILES_PREFIX)
        contents = self.store.read(filename)
        return HTTPResponse(
            status_code=200,
            headers={"Content-Type": OCTET_STREAM},
            body=contents,
        )

    def post_file(self, request: HTTPRequest) -> HTTPResponse:
        filename = request.path.removeprefix(FILES_PREFIX)
        written = self.store.write(filename, request.body)
        logger.info("stored file=%s bytes=%s", filename, written)
        return HTTPResponse(
            status_code=201,
            headers={"Content-Type": OCTET_STREAM},
            body=request.body,
        )

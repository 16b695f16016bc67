"""Filename-addressed storage rooted at the served directory."""

from __future__ import annotations

import logging
from pathlib import Path

from errors import ResourceNotFoundError

logger = logging.getLogger(__name__)


class FileStore:
    """Reads and writes whole files under a single base directory.

    Writes are not serialized; concurrent writers to one name race and the
    last one wins.
    """

    def __init__(self, base_directory: str | Path) -> None:
        self._root = Path(base_directory).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, filename: str) -> Path:
        """Map a request filename to a path inside the root, or raise."""
        if not filename or "\x00" in filename:
            raise ResourceNotFoundError("Empty or invalid filename")

        candidate = (self._root / filename).resolve()
        try:
            candidate.relative_to(self._root)
        except ValueError as exc:
            raise ResourceNotFoundError(f"Path escapes served directory: {filename}") from exc
        if candidate == self._root:
            raise ResourceNotFoundError("Filename resolves to the served directory")
        return candidate

    def read(self, filename: str) -> bytes:
        path = self.resolve(filename)
        if not path.is_file():
            raise ResourceNotFoundError(f"File not found: {filename}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise ResourceNotFoundError(f"Cannot read {filename}") from exc

    def write(self, filename: str, data: bytes) -> int:
        """Create or truncate ``filename`` and write ``data``; return bytes written."""
        path = self.resolve(filename)
        try:
            with path.open("wb") as file_obj:
                written = file_obj.write(data)
        except OSError as exc:
            raise ResourceNotFoundError(f"Cannot write {filename}") from exc
        logger.debug("wrote %s bytes to %s", written, path)
        return written

"""Ordered routing table for method/path handlers."""

from collections.abc import Callable
from dataclasses import dataclass

from request import HTTPRequest
from response import HTTPResponse

Handler = Callable[[HTTPRequest], HTTPResponse]


@dataclass(frozen=True, slots=True)
class Route:
    method: str | None
    path: str
    handler: Handler
    prefix: bool = False

    def matches(self, method: str, path: str) -> bool:
        if self.method is not None and self.method != method:
            return False
        if self.prefix:
            return path.startswith(self.path)
        return path == self.path


class Router:
    """First-match-wins router; unmatched requests go to the fallback."""

    def __init__(self, fallback: Handler) -> None:
        self._routes: list[Route] = []
        self._fallback = fallback

    def add_route(self, method: str | None, path: str, handler: Handler) -> None:
        self._add(method, path, handler, prefix=False)

    def add_prefix_route(self, method: str | None, prefix: str, handler: Handler) -> None:
        self._add(method, prefix, handler, prefix=True)

    def resolve(self, method: str, path: str) -> Handler:
        for route in self._routes:
            if route.matches(method, path):
                return route.handler
        return self._fallback

    def _add(self, method: str | None, path: str, handler: Handler, *, prefix: bool) -> None:
        if method is not None:
            method = method.strip()
            if not method:
                raise ValueError("method cannot be empty")
        if not path.startswith("/"):
            raise ValueError("path must start with '/'")
        self._routes.append(Route(method=method, path=path, handler=handler, prefix=prefix))

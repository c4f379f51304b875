"""Route table and Method Not Allowed responder.

The table maps every declared path pattern to the HTTP methods registered for
it. Paths keep registration order, as do routes declared on the same path.
Starlette stores the methods of a single route as a set, so those are listed
in canonical order: GET, HEAD, POST, PUT, PATCH, DELETE, OPTIONS, then any
others alphabetically.

The table is built once from the application's routes (descending into
mounted routers) and reused for every request. A request whose path matches a
known pattern but whose method is not registered for it gets a 405 with an
``Allow`` header; anything else passes through untouched, so unknown paths
still reach the 404 handler.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import BaseRoute, Mount

from authgate import messages
from authgate.response import error_response

_METHOD_ORDER = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
_PARAM_RE = re.compile(r"\{([^}:]+)(?::([^}]+))?\}")


def normalize_path(path: str) -> str:
    """Collapse repeated slashes and drop a trailing slash (except for the root)."""
    path = re.sub(r"/{2,}", "/", path or "/")
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    return path or "/"


def compile_pattern(path: str) -> re.Pattern:
    """Turn ``/users/{id}`` into ``^/users/[^/]+$``; ``{x:path}`` matches across slashes."""
    parts = []
    last = 0
    for m in _PARAM_RE.finditer(path):
        parts.append(re.escape(path[last : m.start()]))
        parts.append(".+" if m.group(2) == "path" else "[^/]+")
        last = m.end()
    parts.append(re.escape(path[last:]))
    return re.compile("^" + "".join(parts) + "$")


def _ordered_methods(methods: Iterable[str]) -> list[str]:
    """Canonical order for the unordered method set of one route."""
    upper = {m.upper() for m in methods}
    known = [m for m in _METHOD_ORDER if m in upper]
    return known + sorted(upper - set(known))


@dataclass
class RouteEntry:
    path: str
    pattern: re.Pattern
    methods: list[str] = field(default_factory=list)


class RouteTable:
    """Ordered mapping of path pattern to allowed methods."""

    def __init__(self) -> None:
        self._entries: dict[str, RouteEntry] = {}

    def add(self, path: str, methods: Iterable[str]) -> None:
        path = normalize_path(path)
        entry = self._entries.get(path)
        if entry is None:
            entry = RouteEntry(path=path, pattern=compile_pattern(path))
            self._entries[path] = entry
        for method in _ordered_methods(methods):
            if method not in entry.methods:
                entry.methods.append(method)

    @classmethod
    def from_routes(cls, routes: Iterable[BaseRoute], prefix: str = "") -> "RouteTable":
        table = cls()
        table._walk(routes, prefix)
        return table

    def _walk(self, routes: Iterable[BaseRoute], prefix: str) -> None:
        for route in routes:
            if isinstance(route, Mount):
                self._walk(route.routes or [], prefix + route.path)
                continue
            methods = getattr(route, "methods", None)
            path = getattr(route, "path", None)
            if methods and path is not None:
                self.add(prefix + path, methods)

    def match(self, path: str) -> RouteEntry | None:
        """First registered pattern matching ``path``, or None."""
        path = normalize_path(path)
        for entry in self._entries.values():
            if entry.pattern.match(path):
                return entry
        return None

    def allowed_methods(self, path: str) -> list[str] | None:
        entry = self.match(path)
        return list(entry.methods) if entry else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries.values())


def method_not_allowed_response(method: str, allowed: list[str]) -> Response:
    allow = ", ".join(allowed)
    return error_response(
        405,
        messages.METHOD_NOT_ALLOWED.format(method=method, allowed=allow),
        error={"error": "MethodNotAllowed", "allowed": allowed},
        headers={"Allow": allow},
    )


class MethodNotAllowedMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        table = getattr(request.app.state, "route_table", None)
        if table is None:
            table = RouteTable.from_routes(request.app.routes)
            request.app.state.route_table = table

        entry = table.match(request.url.path)
        method = request.method.upper()
        if entry is not None and method not in entry.methods:
            return method_not_allowed_response(method, entry.methods)
        return await call_next(request)

from __future__ import annotations

from typing import FrozenSet

from starlette.types import ASGIApp, Receive, Scope, Send

# Fixed segments of the registered routes; path parameters (ids, codes) keep their case.
ROUTE_LITERALS: FrozenSet[str] = frozenset(
    {"api", "health", "echo", "tasks", "toggle", "protected", "stats", "test", "response"}
)


def normalize_path(path: str) -> str:
    """
    Canonical form used for route matching.

    - one trailing slash is dropped, except on "/"
    - route literals are matched case-insensitively: /API/Tasks -> /api/tasks
    """
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    segments = [s.lower() if s.lower() in ROUTE_LITERALS else s for s in path.split("/")]
    return "/".join(segments)


# PUBLIC_INTERFACE
class PathNormalizerMiddleware:
    """
    Pure ASGI middleware rewriting scope["path"] to its normalized form before
    routing. The path as sent by the client is kept in request.state.original_path.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            original = scope["path"]
            scope.setdefault("state", {})["original_path"] = original
            scope["path"] = normalize_path(original)
        await self.app(scope, receive, send)

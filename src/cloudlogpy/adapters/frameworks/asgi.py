"""ASGI middleware attaching HTTP request context to log records.

Works with any ASGI server (uvicorn, hypercorn, daphne) and framework
(FastAPI, Starlette, Django) without depending on them.
"""

from collections.abc import Callable, Coroutine
from typing import Any
from urllib.parse import quote

from cloudlogpy.adapters.logging_context import (
    reset_request_context,
    set_request_context,
)
from cloudlogpy.core.http import request_context
from cloudlogpy.core.models import RequestInfo

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]


def _decode(value: bytes) -> str:
    return value.decode("latin-1")


def _request_url(scope: Scope) -> str:
    """Return the request URI (path and query) as sent by the client."""
    raw_path: bytes | None = scope.get("raw_path")
    if raw_path:
        # Some servers include the query string in raw_path.
        path = _decode(raw_path).partition("?")[0]
    else:
        path = quote(scope.get("path", ""))
    query = _decode(scope.get("query_string", b""))
    return f"{path}?{query}" if query else path


def request_info_from_scope(scope: Scope) -> RequestInfo:
    """Build a RequestInfo from an ASGI HTTP scope.

    Repeated headers are joined with ", ".
    """
    headers: dict[str, str] = {}
    for name, value in scope.get("headers", []):
        key = _decode(name).lower()
        if key in headers:
            headers[key] += ", " + _decode(value)
        else:
            headers[key] = _decode(value)
    client = scope.get("client")
    remote_addr = f"{client[0]}:{client[1]}" if client else ""
    version = scope.get("http_version", "")
    return RequestInfo(
        method=scope.get("method", ""),
        url=_request_url(scope),
        headers=headers,
        remote_addr=remote_addr,
        protocol=f"HTTP/{version}" if version else "",
    )


class CloudLoggingMiddleware:
    """ASGI middleware that makes request information available to log records.

    For every HTTP request the middleware computes the httpRequest group and
    the trace IDs once and stores them as the current request context while
    the wrapped app runs. Use a context-aware logging path (Logger, or the
    standard library with CloudLoggingHandler) inside the app to have them
    added to the records.
    """

    def __init__(self, app: ASGIApp) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application to wrap.
        """
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI callable interface that processes requests through the wrapped app."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        token = set_request_context(request_context(request_info_from_scope(scope)))
        try:
            await self.app(scope, receive, send)
        finally:
            reset_request_context(token)

"""WSGI middleware attaching HTTP request context to log records."""

from collections.abc import Callable, Iterable
from typing import Any
from urllib.parse import quote

from cloudlogpy.adapters.logging_context import (
    reset_request_context,
    set_request_context,
)
from cloudlogpy.core.http import request_context
from cloudlogpy.core.models import RequestInfo

Environ = dict[str, Any]
StartResponse = Callable[..., Any]
WSGIApp = Callable[[Environ, StartResponse], Iterable[bytes]]


def _request_url(environ: Environ) -> str:
    # PEP 3333 paths are the raw request bytes decoded as latin-1.
    raw = environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", "")
    try:
        path = quote(raw.encode("latin-1"))
    except UnicodeEncodeError:
        # The server already decoded the path as text.
        path = quote(raw)
    query = environ.get("QUERY_STRING", "")
    return f"{path}?{query}" if query else path


def request_info_from_environ(environ: Environ) -> RequestInfo:
    """Build a RequestInfo from a WSGI environ."""
    headers: dict[str, str] = {}
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            headers[key[5:].replace("_", "-").lower()] = value
    for key in ("CONTENT_TYPE", "CONTENT_LENGTH"):
        if environ.get(key):
            headers[key.replace("_", "-").lower()] = environ[key]
    remote_addr = environ.get("REMOTE_ADDR", "")
    remote_port = environ.get("REMOTE_PORT", "")
    if remote_addr and remote_port:
        remote_addr = f"{remote_addr}:{remote_port}"
    return RequestInfo(
        method=environ.get("REQUEST_METHOD", ""),
        url=_request_url(environ),
        headers=headers,
        remote_addr=remote_addr,
        protocol=environ.get("SERVER_PROTOCOL", ""),
    )


class CloudLoggingWSGIMiddleware:
    """WSGI middleware that makes request information available to log records.

    The request context is current while the wrapped app is called. Records
    logged while a streaming response body is being iterated afterwards
    don't carry it.
    """

    def __init__(self, app: WSGIApp) -> None:
        """Initialize the middleware.

        Args:
            app: The WSGI application to wrap.
        """
        self.app = app

    def __call__(
        self, environ: Environ, start_response: StartResponse
    ) -> Iterable[bytes]:
        """WSGI callable interface."""
        token = set_request_context(request_context(request_info_from_environ(environ)))
        try:
            return self.app(environ, start_response)
        finally:
            reset_request_context(token)

"""Request-scoped logging context.

The middleware stores one RequestContext per request in a ContextVar, so it
is visible to all code running in that request's context (including awaited
coroutines) and to nothing else.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token

from cloudlogpy.core.models import RequestContext

_request_context: ContextVar[RequestContext | None] = ContextVar(
    "cloudlogpy_request_context", default=None
)


def get_request_context() -> RequestContext | None:
    """Return the context entry of the current request, or None."""
    return _request_context.get()


def set_request_context(entry: RequestContext) -> Token[RequestContext | None]:
    """Store the context entry for the current request.

    Returns:
        Token to pass to reset_request_context once the request is done.
    """
    return _request_context.set(entry)


def reset_request_context(token: Token[RequestContext | None]) -> None:
    """Restore the context that was current before set_request_context."""
    _request_context.reset(token)


@contextmanager
def bind_request_context(entry: RequestContext) -> Iterator[RequestContext]:
    """Make a context entry current for the duration of a with block."""
    token = set_request_context(entry)
    try:
        yield entry
    finally:
        reset_request_context(token)

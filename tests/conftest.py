"""Shared test fixtures for all test modules."""

import io
import json
from collections.abc import Callable, Sequence
from typing import Any

import pytest

try:
    import httpx
except ImportError:
    httpx = None

from cloudlogpy.config import HandlerOptions, Options
from cloudlogpy.core.models import Attr
from cloudlogpy.core.rewrite import TIME_KEY
from cloudlogpy.handler import Handler


def _remove_time(groups: Sequence[str], a: Attr) -> Attr | None:
    """Rewrite hook suppressing the time field."""
    if not groups and a.key == TIME_KEY:
        return None
    return a


@pytest.fixture(autouse=True)
def _no_ambient_project(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of the tests."""
    monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)


@pytest.fixture
def stream() -> io.StringIO:
    """Provide an in-memory output sink."""
    return io.StringIO()


@pytest.fixture
def read_records(stream: io.StringIO) -> Callable[[], list[dict[str, Any]]]:
    """Return a function parsing everything written to ``stream`` so far."""

    def _read() -> list[dict[str, Any]]:
        return [json.loads(line) for line in stream.getvalue().splitlines()]

    return _read


@pytest.fixture
def remove_time() -> Callable[[Sequence[str], Attr], Attr | None]:
    """Rewrite hook that drops the time field to make output deterministic."""
    return _remove_time


@pytest.fixture
def make_handler(stream: io.StringIO) -> Callable[..., Handler]:
    """Factory fixture for handlers writing to ``stream`` without time noise.

    Usage:
        def test_something(make_handler):
            h = make_handler(project_id="test", level="DEBUG")
    """

    def _make(
        project_id: str = "",
        level: int | str = "INFO",
        add_source: bool = False,
        keep_time: bool = False,
        replace_attr: Callable[[Sequence[str], Attr], Attr | None] | None = None,
    ) -> Handler:
        hook = replace_attr
        if hook is None and not keep_time:
            hook = _remove_time
        return Handler(
            stream,
            HandlerOptions(level=level, add_source=add_source, replace_attr=hook),
            Options(project_id=project_id),
        )

    return _make


# === ASGI Test Fixtures ===


@pytest.fixture
def asgi_scope():
    """Factory fixture for creating ASGI scope dicts."""
    from cloudlogpy.adapters.frameworks.asgi import Scope

    def _scope(
        method: str = "GET",
        path: str = "/test",
        headers: list[tuple[bytes, bytes]] | None = None,
    ) -> Scope:
        return {
            "type": "http",
            "http_version": "1.1",
            "method": method,
            "path": path,
            "raw_path": path.encode(),
            "query_string": b"",
            "headers": headers or [],
            "client": ("10.0.0.7", 5678),
        }

    return _scope


@pytest.fixture
def asgi_send_capture():
    """Fixture that returns a send callable and a responses list for capture."""

    responses: list[dict[str, object]] = []

    async def send(message: dict[str, object]) -> None:
        """Capture ASGI messages."""
        responses.append(message)

    return send, responses


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            async with asgi_test_client(app) as client:
                response = await client.get("/endpoint")
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client


# === WSGI Test Fixtures ===


@pytest.fixture
def wsgi_test_client():
    """Factory fixture that creates an httpx.Client for WSGI testing."""
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return a Client context manager for the given app."""
        return httpx.Client(
            transport=httpx.WSGITransport(app=app), base_url="http://test"
        )

    return _get_client

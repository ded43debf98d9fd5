"""BDD step definitions for the request context feature."""

import pytest
from pytest_bdd import given, parsers, then, when

from tests.features.middleware.steps_helpers import (
    MiddlewareScenarioContext,
    create_test_app,
    simulate_request,
)


@pytest.fixture
def ctx() -> MiddlewareScenarioContext:
    """Fresh scenario context for each test."""
    return MiddlewareScenarioContext()


def _only_record(ctx: MiddlewareScenarioContext) -> dict:
    records = ctx.records()
    assert len(records) == 1
    return records[0]


# === Given ===
@given(parsers.parse('a handler for project "{project_id}"'))
def step_handler_for_project(ctx: MiddlewareScenarioContext, project_id: str) -> None:
    ctx.use_handler(project_id)


@given("a handler without project")
def step_handler_without_project(ctx: MiddlewareScenarioContext) -> None:
    ctx.use_handler("")


@given(parsers.parse('the environment variable GOOGLE_CLOUD_PROJECT is "{value}"'))
def step_env_project(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", value)


@given(parsers.parse('an ASGI app behind the logging middleware that logs "{message}"'))
def step_asgi_app(ctx: MiddlewareScenarioContext, message: str) -> None:
    ctx.log_call = lambda log: log.info(message)
    ctx.app = create_test_app(ctx)


@given(
    parsers.parse(
        'the app logs through group "{outer}" and group "{inner}" with attr {value:d}'
    )
)
def step_grouped_logging(
    ctx: MiddlewareScenarioContext, outer: str, inner: str, value: int
) -> None:
    ctx.log_call = lambda log: log.with_group(outer).with_group(inner).info(
        "grouped", attr=value
    )


# === When ===
@when(parsers.parse('a GET request to "{path}" without trace header'))
def step_get_without_trace(ctx: MiddlewareScenarioContext, path: str) -> None:
    assert simulate_request(ctx, path, {}) == 200


@when(parsers.parse('a GET request to "{path}" with trace header "{header}"'))
def step_get_with_trace(ctx: MiddlewareScenarioContext, path: str, header: str) -> None:
    headers = {"X-Cloud-Trace-Context": header}
    assert simulate_request(ctx, path, headers) == 200


# === Then ===
@then("one record is written")
def step_one_record(ctx: MiddlewareScenarioContext) -> None:
    assert len(ctx.records()) == 1


@then(
    parsers.parse(
        'the record has httpRequest with requestMethod "{method}" and requestUrl "{url}"'
    )
)
def step_http_request(ctx: MiddlewareScenarioContext, method: str, url: str) -> None:
    assert _only_record(ctx)["httpRequest"] == {
        "requestMethod": method,
        "requestUrl": url,
    }


@then("the record has no trace fields")
def step_no_trace(ctx: MiddlewareScenarioContext) -> None:
    record = _only_record(ctx)
    assert "logging.googleapis.com/trace" not in record
    assert "logging.googleapis.com/spanId" not in record


@then(parsers.parse('the record has trace "{trace}"'))
def step_trace(ctx: MiddlewareScenarioContext, trace: str) -> None:
    assert _only_record(ctx)["logging.googleapis.com/trace"] == trace


@then(parsers.parse('the record has span ID "{span_id}"'))
def step_span(ctx: MiddlewareScenarioContext, span_id: str) -> None:
    assert _only_record(ctx)["logging.googleapis.com/spanId"] == span_id


@then("the record has no span ID")
def step_no_span(ctx: MiddlewareScenarioContext) -> None:
    assert "logging.googleapis.com/spanId" not in _only_record(ctx)


@then(parsers.parse("the record has nested attribute outer.inner.attr equal to {value:d}"))
def step_nested_attr(ctx: MiddlewareScenarioContext, value: int) -> None:
    assert _only_record(ctx)["outer"]["inner"]["attr"] == value


@then(parsers.parse('the record has no top-level attribute "{key}"'))
def step_no_top_level(ctx: MiddlewareScenarioContext, key: str) -> None:
    assert key not in _only_record(ctx)

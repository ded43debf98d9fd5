"""Unit tests for the CloudLoggingHandler logging adapter."""

import logging
from collections.abc import Iterator

import pytest

from cloudlogpy.adapters.logging import CloudLoggingHandler, to_record
from cloudlogpy.adapters.logging_context import bind_request_context
from cloudlogpy.core.http import request_context
from cloudlogpy.core.levels import LEVEL_NOTICE
from cloudlogpy.core.models import Attr, RequestInfo, SourceLocation, group


@pytest.fixture
def logger(make_handler) -> Iterator[logging.Logger]:
    """A logger writing through a CloudLoggingHandler with project "test"."""
    log = logging.getLogger("cloudlogpy.tests.bridge")
    log.handlers.clear()
    log.propagate = False
    log.setLevel(logging.DEBUG)
    log.addHandler(CloudLoggingHandler(make_handler(project_id="test")))
    yield log
    log.handlers.clear()


def _ctx():
    return request_context(
        RequestInfo(
            method="GET", url="/", headers={"X-Cloud-Trace-Context": "abc/123;o=1"}
        )
    )


@pytest.mark.core
class TestCloudLoggingHandler:
    """Tests for CloudLoggingHandler adapter."""

    def test_handler_is_logging_handler(self) -> None:
        """Handler extends logging.Handler."""
        assert isinstance(CloudLoggingHandler(), logging.Handler)

    def test_emit_writes_record(self, logger, read_records) -> None:
        logger.info("hello %s", "world")
        assert read_records() == [{"severity": "INFO", "message": "hello world"}]

    def test_level_threshold_of_handler(self, logger, read_records) -> None:
        """The wrapped handler's threshold applies to logging records."""
        logger.debug("too chatty")
        logger.log(LEVEL_NOTICE, "notice")
        assert read_records() == [{"severity": "NOTICE", "message": "notice"}]

    def test_includes_extra_attributes(self, logger, read_records) -> None:
        """Extra fields become attributes, dicts become groups."""
        logger.warning(
            "request processed",
            extra={"request_id": "abc123", "user": {"id": 42}},
        )
        assert read_records() == [
            {
                "severity": "WARNING",
                "message": "request processed",
                "request_id": "abc123",
                "user": {"id": 42},
            }
        ]

    def test_extracts_exception_info(self, logger, read_records) -> None:
        try:
            raise ValueError("test error")
        except ValueError:
            logger.exception("caught error")

        (rec,) = read_records()
        assert rec["severity"] == "ERROR"
        assert "ValueError: test error" in rec["stack_trace"]

    def test_includes_stack_info(self, logger, read_records) -> None:
        """stack_info=True adds the call stack to stack_trace."""
        logger.info("where am i", stack_info=True)
        (rec,) = read_records()
        assert rec["stack_trace"].startswith("Stack (most recent call last):")
        assert "test_includes_stack_info" in rec["stack_trace"]

    def test_stack_info_follows_exception(self, logger, read_records) -> None:
        try:
            raise ValueError("test error")
        except ValueError:
            logger.exception("caught error", stack_info=True)

        stack_trace = read_records()[0]["stack_trace"]
        assert stack_trace.index("ValueError: test error") < stack_trace.index(
            "Stack (most recent call last):"
        )

    def test_extra_named_like_builtin_field(self, logger, read_records) -> None:
        """Extras named source, level or msg are kept as plain attributes."""
        logger.info("hi", extra={"source": "billing-db", "level": 5})
        assert read_records() == [
            {
                "severity": "INFO",
                "message": "hi",
                "source": "billing-db",
                "level": 5,
            }
        ]

    def test_ambient_request_context(self, logger, read_records) -> None:
        with bind_request_context(_ctx()):
            logger.info("hi")
        assert read_records() == [
            {
                "severity": "INFO",
                "message": "hi",
                "httpRequest": {"requestMethod": "GET", "requestUrl": "/"},
                "logging.googleapis.com/trace": "projects/test/traces/abc",
                "logging.googleapis.com/spanId": "123",
            }
        ]

    def test_explicit_request_context(self, logger, read_records) -> None:
        """A request_context extra is used and not written as an attribute."""
        logger.info("hi", extra={"request_context": _ctx()})
        (rec,) = read_records()
        assert rec["logging.googleapis.com/spanId"] == "123"
        assert "request_context" not in rec

    def test_with_group_handler(self, stream, make_handler, read_records) -> None:
        log = logging.getLogger("cloudlogpy.tests.bridge.group")
        log.handlers.clear()
        log.propagate = False
        log.addHandler(CloudLoggingHandler(make_handler().with_group("app")))
        try:
            log.error("test error", extra={"attr": 123})
        finally:
            log.handlers.clear()
        assert read_records() == [
            {"severity": "ERROR", "message": "test error", "app": {"attr": 123}}
        ]

    def test_stream_errors_propagate(self, remove_time) -> None:
        import io

        from cloudlogpy.config import HandlerOptions
        from cloudlogpy.handler import Handler

        class BrokenSink(io.StringIO):
            def write(self, s: str) -> int:
                raise OSError("closed")

        handler = CloudLoggingHandler(
            Handler(BrokenSink(), HandlerOptions(replace_attr=remove_time))
        )
        record = logging.LogRecord("t", logging.INFO, "", 0, "m", (), None)
        with pytest.raises(OSError, match="closed"):
            handler.emit(record)


@pytest.mark.core
class TestToRecord:
    """Tests for to_record()."""

    def test_converts_logrecord(self) -> None:
        record = logging.LogRecord(
            name="myapp.service",
            level=logging.ERROR,
            pathname="/app/service.py",
            lineno=42,
            msg="error %d",
            args=(7,),
            exc_info=None,
            func="process_request",
        )
        result = to_record(record)
        assert result.level == logging.ERROR
        assert result.message == "error 7"
        assert result.source == SourceLocation(
            "/app/service.py", 42, "process_request"
        )
        assert result.time is not None
        assert result.time.utcoffset().total_seconds() == 0  # type: ignore[union-attr]
        assert result.time.timestamp() == pytest.approx(record.created)
        assert result.attrs == ()

    def test_group_extras_pass_through(self) -> None:
        record = logging.LogRecord("t", logging.INFO, "", 0, "m", (), None)
        record.__dict__["g"] = group("ignored", Attr("a", 1)).value
        assert to_record(record).attrs == (group("g", Attr("a", 1)),)

"""Python logging handler adapter for cloudlogpy.

This adapter bridges Python's standard library logging module to Handler,
so that records logged through ``logging`` are written in the Cloud Logging
JSON layout.
"""

import logging
import traceback
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from cloudlogpy.core.models import (
    Attr,
    Group,
    Record,
    RequestContext,
    SourceLocation,
    attrs_from_mapping,
)
from cloudlogpy.handler import Handler

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

# Extra field carrying an explicit RequestContext, e.g.
# logger.info("hi", extra={"request_context": ctx}).
REQUEST_CONTEXT_ATTR = "request_context"

# Error Reporting picks up stack traces from this field.
STACK_TRACE_KEY = "stack_trace"


class CloudLoggingHandler(logging.Handler):
    """Logging handler that writes records through a cloudlogpy Handler.

    Extra fields passed with a logging call become attributes; dicts become
    nested groups. Exception info is written as a ``stack_trace`` attribute.
    Errors raised by the output stream propagate to the logging call.

    Example:
        ```python
        from cloudlogpy import CloudLoggingHandler, Handler, Options

        handler = CloudLoggingHandler(Handler(extra=Options(project_id="p")))
        logging.getLogger().addHandler(handler)
        ```
    """

    def __init__(self, handler: Handler | None = None, level: int = logging.NOTSET) -> None:
        """Initialize the handler.

        Args:
            handler: The Handler to write through. Defaults to a Handler
                writing to stderr.
            level: Level threshold of the logging handler itself. The
                Handler's own threshold applies as well.
        """
        super().__init__(level)
        self._handler = handler if handler is not None else Handler()

    @property
    def handler(self) -> Handler:
        return self._handler

    def emit(self, record: logging.LogRecord) -> None:
        """Write a log record.

        Args:
            record: The log record to emit.
        """
        if not self._handler.enabled(record.levelno):
            return
        context = getattr(record, REQUEST_CONTEXT_ATTR, None)
        if not isinstance(context, RequestContext):
            context = None
        self._handler.handle(to_record(record), context)


def to_record(record: logging.LogRecord) -> Record:
    """Convert a standard library LogRecord into a Record."""
    attrs: list[Attr] = []
    for key, value in record.__dict__.items():
        if key in _STANDARD_LOGRECORD_ATTRS or key == REQUEST_CONTEXT_ATTR:
            continue
        attrs.append(_extra_attr(key, value))

    stack_trace = ""
    if record.exc_info and record.exc_info[0] is not None:
        exc_type, exc_value, exc_tb = record.exc_info
        stack_trace = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
    elif record.exc_text:
        stack_trace = record.exc_text
    # Same layout as logging.Formatter: exception first, then the stack.
    if record.stack_info:
        if stack_trace and not stack_trace.endswith("\n"):
            stack_trace += "\n"
        stack_trace += record.stack_info
    if stack_trace:
        attrs.append(Attr(STACK_TRACE_KEY, stack_trace))

    source = None
    if record.pathname or record.funcName:
        source = SourceLocation(
            file=record.pathname or "",
            line=record.lineno or 0,
            function=record.funcName or "",
        )
    return Record(
        time=datetime.fromtimestamp(record.created, tz=timezone.utc),
        level=record.levelno,
        message=record.getMessage(),
        source=source,
        attrs=tuple(attrs),
    )


def _extra_attr(key: str, value: Any) -> Attr:
    if isinstance(value, Group):
        return Attr(key, value)
    if isinstance(value, Mapping):
        return Attr(key, Group(tuple(attrs_from_mapping(value))))
    return Attr(key, value)

"""Structured logging for Google Cloud Logging.

Records are written as one JSON object per line in the layout the Cloud
Logging agent understands: levels map to severities, the message, time and
source location use the special field names, and records logged while
serving an HTTP request carry the request and its trace.
"""

from cloudlogpy.adapters.frameworks.asgi import CloudLoggingMiddleware
from cloudlogpy.adapters.frameworks.wsgi import CloudLoggingWSGIMiddleware
from cloudlogpy.adapters.logging import CloudLoggingHandler
from cloudlogpy.adapters.logging_context import (
    bind_request_context,
    get_request_context,
)
from cloudlogpy.config import HandlerOptions, Options
from cloudlogpy.core.http import request_context
from cloudlogpy.core.levels import (
    LEVEL_ALERT,
    LEVEL_CRITICAL,
    LEVEL_DEBUG,
    LEVEL_EMERGENCY,
    LEVEL_ERROR,
    LEVEL_INFO,
    LEVEL_NOTICE,
    LEVEL_WARN,
    severity_for_level,
)
from cloudlogpy.core.models import (
    Attr,
    Group,
    Record,
    RequestContext,
    RequestInfo,
    SourceLocation,
    attr,
    group,
)
from cloudlogpy.core.rewrite import (
    HTTP_REQUEST_KEY,
    MESSAGE_KEY,
    SEVERITY_KEY,
    SOURCE_LOCATION_KEY,
    SPAN_ID_KEY,
    TIME_KEY,
    TRACE_KEY,
)
from cloudlogpy.handler import Handler
from cloudlogpy.logger import Logger

__all__ = [
    "Attr",
    "CloudLoggingHandler",
    "CloudLoggingMiddleware",
    "CloudLoggingWSGIMiddleware",
    "Group",
    "HTTP_REQUEST_KEY",
    "Handler",
    "HandlerOptions",
    "LEVEL_ALERT",
    "LEVEL_CRITICAL",
    "LEVEL_DEBUG",
    "LEVEL_EMERGENCY",
    "LEVEL_ERROR",
    "LEVEL_INFO",
    "LEVEL_NOTICE",
    "LEVEL_WARN",
    "Logger",
    "MESSAGE_KEY",
    "Options",
    "Record",
    "RequestContext",
    "RequestInfo",
    "SEVERITY_KEY",
    "SOURCE_LOCATION_KEY",
    "SPAN_ID_KEY",
    "SourceLocation",
    "TIME_KEY",
    "TRACE_KEY",
    "attr",
    "bind_request_context",
    "get_request_context",
    "group",
    "request_context",
    "severity_for_level",
]

"""Extraction of request attributes from inbound HTTP requests.

See https://cloud.google.com/logging/docs/reference/v2/rest/v2/LogEntry#HttpRequest
and https://cloud.google.com/trace/docs/setup#force-trace.
"""

from cloudlogpy.core.models import Attr, RequestContext, RequestInfo, group_value
from cloudlogpy.core.rewrite import HTTP_REQUEST_KEY

TRACE_HEADER = "X-Cloud-Trace-Context"


def http_request_attr(info: RequestInfo) -> Attr:
    """Build the httpRequest group, omitting fields that are empty."""
    return Attr(
        HTTP_REQUEST_KEY,
        group_value(
            "requestMethod", info.method,
            "requestUrl", info.url,
            "userAgent", info.header("User-Agent"),
            "remoteIp", info.remote_addr,
            "referer", info.header("Referer"),
            "protocol", info.protocol,
        ),
    )


def trace_context(header: str) -> tuple[str, str]:
    """Split a trace header of the form TRACE_ID/SPAN_ID;o=OPTIONS.

    Returns:
        (trace_id, span_id); both empty if the header is empty or has no
        trace ID.
    """
    prefix = header.partition(";")[0]
    trace_id, _, span_id = prefix.partition("/")
    span_id = span_id.partition("/")[0]
    if not trace_id:
        return "", ""
    return trace_id, span_id


def request_context(info: RequestInfo) -> RequestContext:
    """Compute the logging context entry for a request."""
    trace_id, span_id = trace_context(info.header(TRACE_HEADER))
    return RequestContext(
        http_request=http_request_attr(info),
        trace_id=trace_id,
        span_id=span_id,
    )

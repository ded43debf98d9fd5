"""Formatting of trace attributes."""

from cloudlogpy.core.models import Attr, optional_strings
from cloudlogpy.core.rewrite import SPAN_ID_KEY, TRACE_KEY


def trace_name(project_id: str, trace_id: str) -> str:
    """Return the trace resource name, projects/<project>/traces/<trace>."""
    return f"projects/{project_id}/traces/{trace_id}"


def trace_attrs(project_id: str, trace_id: str, span_id: str) -> list[Attr]:
    """Return the trace and span ID attributes for a log record.

    Without a project ID the trace can't be expressed in the required
    format, so nothing is returned.
    """
    if not project_id or not trace_id:
        return []
    return optional_strings(
        TRACE_KEY, trace_name(project_id, trace_id),
        SPAN_ID_KEY, span_id,
    )

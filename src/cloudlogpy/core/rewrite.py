"""Translation of built-in record fields into Cloud Logging fields.

See https://cloud.google.com/logging/docs/structured-logging for the special
fields recognized by the logging agent.
"""

from collections.abc import Callable, Sequence

from cloudlogpy.core.levels import severity_for_level
from cloudlogpy.core.models import Attr, Group, SourceLocation, group_value

# Keys of the built-in fields produced by the JSON emitter.
BUILTIN_TIME_KEY = "time"
BUILTIN_LEVEL_KEY = "level"
BUILTIN_MESSAGE_KEY = "msg"
BUILTIN_SOURCE_KEY = "source"

# Special keys in the output record.
TIME_KEY = "time"
SEVERITY_KEY = "severity"
MESSAGE_KEY = "message"
SOURCE_LOCATION_KEY = "logging.googleapis.com/sourceLocation"
HTTP_REQUEST_KEY = "httpRequest"
TRACE_KEY = "logging.googleapis.com/trace"
SPAN_ID_KEY = "logging.googleapis.com/spanId"

ReplaceAttr = Callable[[Sequence[str], Attr], Attr | None]


def replace_attr(groups: Sequence[str], a: Attr) -> Attr | None:
    """Rename built-in fields to the keys Cloud Logging expects.

    Only top-level attributes are touched; anything inside a group is
    returned as is. The handler applies it to the built-in fields only.
    """
    if groups:
        return a
    key = a.key
    value = a.value
    if key == BUILTIN_TIME_KEY:
        # The handler has already converted the time to UTC.
        return Attr(TIME_KEY, value)
    if key == BUILTIN_LEVEL_KEY:
        if isinstance(value, int) and not isinstance(value, bool):
            value = severity_for_level(value)
        return Attr(SEVERITY_KEY, value)
    if key == BUILTIN_MESSAGE_KEY:
        return Attr(MESSAGE_KEY, value)
    if key == BUILTIN_SOURCE_KEY:
        return Attr(SOURCE_LOCATION_KEY, _source_location(value))
    return a


def _source_location(value: object) -> Group:
    src = value if isinstance(value, SourceLocation) else SourceLocation()
    # Leave out the line if unknown so that an unresolvable location
    # yields an empty group instead of one with a spurious line.
    line = str(src.line) if src.line > 0 else ""
    return group_value(
        "file", src.file,
        "line", line,
        "function", src.function,
    )


def compose(user: ReplaceAttr | None) -> ReplaceAttr:
    """Return a hook applying replace_attr first, then the user's hook."""
    if user is None:
        return replace_attr

    def _replace(groups: Sequence[str], a: Attr) -> Attr | None:
        r = replace_attr(groups, a)
        if r is None:
            return None
        return user(groups, r)

    return _replace

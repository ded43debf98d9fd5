"""Core domain models for log records and request context."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union


@dataclass(frozen=True)
class Group:
    """A nested group of attributes, serialized as a JSON object.

    Attributes:
        attrs: Member attributes in insertion order.
    """

    attrs: tuple["Attr", ...] = ()

    def __bool__(self) -> bool:
        return bool(self.attrs)


# Other values are serialized with str().
Value = Union[str, int, float, bool, None, datetime, Group]


@dataclass(frozen=True)
class Attr:
    """A key/value pair attached to a log record.

    Attributes:
        key: Attribute name. Keys are unique within one group.
        value: A scalar, a datetime, or a nested Group.
    """

    key: str
    value: Value

    @property
    def is_group(self) -> bool:
        return isinstance(self.value, Group)


@dataclass(frozen=True)
class SourceLocation:
    """Where a log call happened.

    Attributes:
        file: Path of the source file, empty if unknown.
        line: Line number, zero or negative if unknown.
        function: Qualified function name, empty if unknown.
    """

    file: str = ""
    line: int = 0
    function: str = ""


@dataclass(frozen=True)
class Record:
    """Immutable snapshot of a single log call.

    Attributes:
        time: Time of the call. None means "no time", and no time field
            is written.
        level: Numeric logging level.
        message: The log message.
        source: Source location of the call, if known.
        attrs: Record-local attributes in call order.
    """

    time: datetime | None
    level: int
    message: str
    source: SourceLocation | None = None
    attrs: tuple[Attr, ...] = ()


@dataclass(frozen=True)
class RequestInfo:
    """Transport-neutral view of an inbound HTTP request.

    Attributes:
        method: HTTP method, e.g. GET.
        url: Request URL as received (path and query for server requests).
        headers: Request headers with lower-case names.
        remote_addr: Network address of the client, e.g. "10.0.0.1:5678".
        protocol: Protocol version, e.g. "HTTP/1.1".
    """

    method: str = ""
    url: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    remote_addr: str = ""
    protocol: str = ""

    def header(self, name: str) -> str:
        """Return the value of a header (case-insensitive), or ""."""
        name = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name:
                return value
        return ""


@dataclass(frozen=True)
class RequestContext:
    """Per-request logging context, created once when a request arrives.

    Attributes:
        http_request: The formatted httpRequest attribute group.
        trace_id: Raw trace ID from the trace header, empty if absent.
        span_id: Raw span ID from the trace header, empty if absent.
    """

    http_request: Attr
    trace_id: str = ""
    span_id: str = ""


def attr(key: str, value: Value) -> Attr:
    """Create an attribute."""
    return Attr(key, value)


def group(key: str, *attrs: Attr) -> Attr:
    """Create a group-valued attribute."""
    return Attr(key, Group(tuple(attrs)))


def optional_strings(*args: str) -> list[Attr]:
    """Build string attributes from alternating keys and values.

    Pairs whose value is empty are left out.

    Raises:
        ValueError: If an odd number of arguments is given.
    """
    if len(args) % 2 != 0:
        raise ValueError("odd number of arguments")
    return [
        Attr(key, value)
        for key, value in zip(args[::2], args[1::2], strict=True)
        if value != ""
    ]


def group_value(*args: str) -> Group:
    """Build a group from alternating keys and values, omitting empty values."""
    return Group(tuple(optional_strings(*args)))


def attrs_from_mapping(values: Mapping[str, Any]) -> list[Attr]:
    """Convert a mapping into attributes, turning nested mappings into groups."""
    return [_to_attr(key, value) for key, value in values.items()]


def _to_attr(key: str, value: Any) -> Attr:
    if isinstance(value, Mapping):
        return Attr(key, Group(tuple(attrs_from_mapping(value))))
    return Attr(key, value)


def as_attrs(values: Iterable[Attr] | Mapping[str, Any]) -> tuple[Attr, ...]:
    """Normalize attributes given as a mapping or as Attr objects."""
    if isinstance(values, Mapping):
        return tuple(attrs_from_mapping(values))
    return tuple(values)

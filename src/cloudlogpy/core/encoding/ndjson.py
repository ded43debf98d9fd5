"""NDJSON emitter writing one JSON object per log record."""

import json
import math
import threading
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from cloudlogpy.core.levels import LEVEL_INFO, parse_level
from cloudlogpy.core.models import Attr, Group, Record
from cloudlogpy.core.ports import SinkPort
from cloudlogpy.core.rewrite import (
    BUILTIN_LEVEL_KEY,
    BUILTIN_MESSAGE_KEY,
    BUILTIN_SOURCE_KEY,
    BUILTIN_TIME_KEY,
    ReplaceAttr,
)


def format_time(t: datetime) -> str:
    """Format a time as RFC 3339 in UTC, dropping trailing zero fractions.

    Naive datetimes are taken to be in UTC already.
    """
    if t.tzinfo is not None:
        t = t.astimezone(timezone.utc)
    s = t.strftime("%Y-%m-%dT%H:%M:%S")
    frac = f"{t.microsecond:06d}".rstrip("0")
    if frac:
        s += "." + frac
    return s + "Z"


def _default(value: Any) -> str:
    if isinstance(value, datetime):
        return format_time(value)
    return str(value)


def _json_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_time(value)
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return value


def _append(
    obj: dict[str, Any],
    a: Attr,
    groups: tuple[str, ...],
    replace: ReplaceAttr | None,
) -> None:
    """Add an attribute to a JSON object under construction.

    The first occurrence of a key wins. Attributes with an empty key are
    dropped, groups with an empty key are inlined and empty groups are
    left out.
    """
    if replace is not None and not a.is_group:
        r = replace(groups, a)
        if r is None:
            return
        a = r
    if isinstance(a.value, Group):
        if not a.key:
            _append_all(obj, a.value.attrs, groups, replace)
            return
        sub: dict[str, Any] = {}
        _append_all(sub, a.value.attrs, groups + (a.key,), replace)
        if sub:
            obj.setdefault(a.key, sub)
        return
    if not a.key:
        return
    obj.setdefault(a.key, _json_value(a.value))


def _append_all(
    obj: dict[str, Any],
    attrs: Iterable[Attr],
    groups: tuple[str, ...],
    replace: ReplaceAttr | None,
) -> None:
    for a in attrs:
        _append(obj, a, groups, replace)


def _builtins(record: Record, add_source: bool) -> list[Attr]:
    builtins = []
    if record.time is not None:
        builtins.append(Attr(BUILTIN_TIME_KEY, record.time))
    builtins.append(Attr(BUILTIN_LEVEL_KEY, record.level))
    if add_source and record.source is not None:
        builtins.append(Attr(BUILTIN_SOURCE_KEY, record.source))
    builtins.append(Attr(BUILTIN_MESSAGE_KEY, record.message))
    return builtins


def encode_record(
    record: Record,
    replace_attr: ReplaceAttr | None = None,
    add_source: bool = False,
    builtin_replace: ReplaceAttr | None = None,
) -> str:
    """Encode a record as a single line of compact JSON.

    Args:
        record: The record to encode.
        replace_attr: Hook applied to every non-group attribute together
            with its enclosing group names.
        add_source: Whether to include the record's source location.
        builtin_replace: Hook applied to the built-in fields (time, level,
            source, msg) instead of ``replace_attr``. Record attributes
            never go through it, so caller attributes that happen to be
            named like a built-in field are kept as they are.

    Returns:
        JSON text without a trailing newline.
    """
    builtin_hook = builtin_replace if builtin_replace is not None else replace_attr
    obj: dict[str, Any] = {}
    _append_all(obj, _builtins(record, add_source), (), builtin_hook)
    _append_all(obj, record.attrs, (), replace_attr)
    return json.dumps(
        obj, separators=(",", ":"), ensure_ascii=False, default=_default
    )


class NDJSONEmitter:
    """Writes log records as NDJSON to a text stream.

    Writes are serialized with a lock and the stream is flushed after every
    record. Errors raised by the stream propagate to the caller.
    """

    def __init__(
        self,
        stream: SinkPort,
        level: int | str = LEVEL_INFO,
        add_source: bool = False,
        replace_attr: ReplaceAttr | None = None,
        builtin_replace: ReplaceAttr | None = None,
    ) -> None:
        """Initialize the emitter.

        Args:
            stream: Output sink.
            level: Minimum level to write, as an int or a level name.
            add_source: Whether to write source locations.
            replace_attr: Rewrite hook for record attributes.
            builtin_replace: Rewrite hook for the built-in fields. Defaults
                to ``replace_attr``.
        """
        self._stream = stream
        self._level = parse_level(level)
        self._add_source = add_source
        self._replace = replace_attr
        self._builtin_replace = builtin_replace
        self._lock = threading.Lock()

    @property
    def add_source(self) -> bool:
        return self._add_source

    def enabled(self, level: int) -> bool:
        """Return True if the level is at or above the threshold."""
        return level >= self._level

    def handle(self, record: Record) -> None:
        """Write a record as one line."""
        line = encode_record(
            record, self._replace, self._add_source, self._builtin_replace
        )
        with self._lock:
            self._stream.write(line + "\n")
            self._stream.flush()


__all__ = [
    "NDJSONEmitter",
    "encode_record",
    "format_time",
]

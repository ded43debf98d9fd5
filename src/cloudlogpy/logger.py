"""Structured logger front end for Handler."""

import sys
from datetime import datetime, timezone
from typing import Any

from cloudlogpy.core.levels import (
    LEVEL_ALERT,
    LEVEL_CRITICAL,
    LEVEL_DEBUG,
    LEVEL_EMERGENCY,
    LEVEL_ERROR,
    LEVEL_INFO,
    LEVEL_NOTICE,
    LEVEL_WARN,
)
from cloudlogpy.core.models import (
    Record,
    RequestContext,
    SourceLocation,
    attrs_from_mapping,
)
from cloudlogpy.handler import Handler


def _caller(depth: int) -> SourceLocation:
    try:
        frame = sys._getframe(depth + 1)
    except ValueError:
        return SourceLocation()
    code = frame.f_code
    module = frame.f_globals.get("__name__", "")
    function = f"{module}.{code.co_qualname}" if module else code.co_qualname
    return SourceLocation(file=code.co_filename, line=frame.f_lineno, function=function)


class Logger:
    """Logger writing through a Handler.

    Keyword arguments of the logging methods become attributes of the
    record; dicts become nested groups. Every method accepts a keyword-only
    ``context`` to attach an explicit RequestContext instead of the one of
    the current request.

    Example:
        ```python
        log = Logger(Handler())
        log.with_group("db").info("query", table="users", rows=3)
        ```
    """

    __slots__ = ("_handler",)

    def __init__(self, handler: Handler | None = None) -> None:
        self._handler = handler if handler is not None else Handler()

    @property
    def handler(self) -> Handler:
        return self._handler

    def with_attrs(self, **attributes: Any) -> "Logger":
        """Return a logger that adds the attributes to every record."""
        return Logger(self._handler.with_attrs(attributes))

    def with_group(self, name: str) -> "Logger":
        """Return a logger that nests further attributes in a group."""
        return Logger(self._handler.with_group(name))

    def enabled(self, level: int) -> bool:
        return self._handler.enabled(level)

    def log(
        self,
        level: int,
        message: str,
        *,
        context: RequestContext | None = None,
        **attributes: Any,
    ) -> None:
        """Log a message at an arbitrary numeric level."""
        self._log(level, message, context, attributes)

    def debug(
        self, message: str, *, context: RequestContext | None = None, **attributes: Any
    ) -> None:
        self._log(LEVEL_DEBUG, message, context, attributes)

    def info(
        self, message: str, *, context: RequestContext | None = None, **attributes: Any
    ) -> None:
        self._log(LEVEL_INFO, message, context, attributes)

    def notice(
        self, message: str, *, context: RequestContext | None = None, **attributes: Any
    ) -> None:
        self._log(LEVEL_NOTICE, message, context, attributes)

    def warn(
        self, message: str, *, context: RequestContext | None = None, **attributes: Any
    ) -> None:
        self._log(LEVEL_WARN, message, context, attributes)

    warning = warn

    def error(
        self, message: str, *, context: RequestContext | None = None, **attributes: Any
    ) -> None:
        self._log(LEVEL_ERROR, message, context, attributes)

    def critical(
        self, message: str, *, context: RequestContext | None = None, **attributes: Any
    ) -> None:
        self._log(LEVEL_CRITICAL, message, context, attributes)

    def alert(
        self, message: str, *, context: RequestContext | None = None, **attributes: Any
    ) -> None:
        self._log(LEVEL_ALERT, message, context, attributes)

    def emergency(
        self, message: str, *, context: RequestContext | None = None, **attributes: Any
    ) -> None:
        self._log(LEVEL_EMERGENCY, message, context, attributes)

    def _log(
        self,
        level: int,
        message: str,
        context: RequestContext | None,
        attributes: dict[str, Any],
    ) -> None:
        if not self._handler.enabled(level):
            return
        # Frames: _log, the public method, the caller.
        source = _caller(2) if self._handler.add_source else None
        record = Record(
            time=datetime.now(timezone.utc),
            level=level,
            message=message,
            source=source,
            attrs=tuple(attrs_from_mapping(attributes)),
        )
        self._handler.handle(record, context)

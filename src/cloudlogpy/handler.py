"""Handler translating log records into the Cloud Logging JSON layout."""

import sys
from collections.abc import Iterable, Mapping
from datetime import timezone
from typing import Any

from cloudlogpy.adapters.logging_context import get_request_context
from cloudlogpy.config import HandlerOptions, Options, resolve_project_id
from cloudlogpy.core.attrs import custom_attrs
from cloudlogpy.core.encoding.ndjson import NDJSONEmitter
from cloudlogpy.core.models import Attr, Record, RequestContext, as_attrs
from cloudlogpy.core.ports import EmitterPort, SinkPort
from cloudlogpy.core.rewrite import compose
from cloudlogpy.core.trace import trace_attrs


class Handler:
    """Writes structured log records in the format Cloud Logging expects.

    Handlers are immutable: with_attrs and with_group return new handlers
    and never modify the receiver, so one handler can be shared between
    threads and tasks.

    Example:
        ```python
        from cloudlogpy import Handler, Logger, Options

        log = Logger(Handler(extra=Options(project_id="my-project")))
        log.info("started", port=8080)
        ```
    """

    __slots__ = ("_emitter", "_project_id", "_attrs", "_groups")

    def __init__(
        self,
        stream: SinkPort | None = None,
        options: HandlerOptions | None = None,
        extra: Options | None = None,
    ) -> None:
        """Initialize the handler.

        If ``extra`` doesn't contain a project ID, the handler tries to
        detect it from the environment. If that fails too, trace fields
        are left out.

        Args:
            stream: Output sink; defaults to ``sys.stderr``.
            options: Generic emitter options (level, source, rewrite hook).
            extra: Cloud Logging specific options.
        """
        opts = options or HandlerOptions()
        emitter = NDJSONEmitter(
            stream if stream is not None else sys.stderr,
            level=opts.level,
            add_source=opts.add_source,
            replace_attr=opts.replace_attr,
            builtin_replace=compose(opts.replace_attr),
        )
        self._init(emitter, resolve_project_id(extra or Options()), (), ())

    def _init(
        self,
        emitter: EmitterPort,
        project_id: str,
        attrs: tuple[Attr, ...],
        groups: tuple[str, ...],
    ) -> None:
        self._emitter = emitter
        # Empty only if we don't know the project ID.
        self._project_id = project_id
        # Attributes added by with_attrs.
        self._attrs = attrs
        # Groups added by with_group, innermost first.
        self._groups = groups

    @classmethod
    def from_emitter(cls, emitter: EmitterPort, project_id: str = "") -> "Handler":
        """Create a handler around an existing emitter.

        The emitter must already apply ``rewrite.replace_attr`` to the
        built-in fields.
        """
        h = cls.__new__(cls)
        h._init(emitter, project_id, (), ())
        return h

    @property
    def project_id(self) -> str:
        return self._project_id

    @property
    def attrs(self) -> tuple[Attr, ...]:
        return self._attrs

    @property
    def groups(self) -> tuple[str, ...]:
        return self._groups

    @property
    def add_source(self) -> bool:
        return self._emitter.add_source

    def enabled(self, level: int) -> bool:
        """Return True if records at this level are written."""
        return self._emitter.enabled(level)

    def handle(self, record: Record, context: RequestContext | None = None) -> None:
        """Write a record.

        Args:
            record: The record to write.
            context: Request context to attach. Defaults to the context of
                the current request, if any.

        Raises:
            Exception: Whatever the output sink raises.
        """
        if context is None:
            context = get_request_context()
        attrs: list[Attr] = []
        if context is not None:
            attrs.append(context.http_request)
            attrs.extend(
                trace_attrs(self._project_id, context.trace_id, context.span_id)
            )
        attrs.extend(custom_attrs(record.attrs, self._attrs, self._groups))
        time = record.time
        if time is not None and time.tzinfo is not None:
            time = time.astimezone(timezone.utc)
        self._emitter.handle(
            Record(
                time=time,
                level=record.level,
                message=record.message,
                source=record.source,
                attrs=tuple(attrs),
            )
        )

    def with_attrs(self, attrs: Iterable[Attr] | Mapping[str, Any]) -> "Handler":
        """Return a handler that adds the given attributes to every record."""
        new = as_attrs(attrs)
        if not new:
            return self
        return self._derive(self._attrs + new, self._groups)

    def with_group(self, name: str) -> "Handler":
        """Return a handler that nests all further attributes in a group.

        An empty name returns this handler unchanged.
        """
        if not name:
            return self
        return self._derive(self._attrs, (name,) + self._groups)

    def _derive(self, attrs: tuple[Attr, ...], groups: tuple[str, ...]) -> "Handler":
        h = type(self).__new__(type(self))
        h._init(self._emitter, self._project_id, attrs, groups)
        return h

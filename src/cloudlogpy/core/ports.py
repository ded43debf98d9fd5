"""Port interfaces for the emission path.

These protocols define the contracts the handler relies on. The core
depends only on these interfaces, not on concrete implementations.
"""

from typing import Protocol, runtime_checkable

from cloudlogpy.core.models import Record


@runtime_checkable
class SinkPort(Protocol):
    """Port for the output sink, typically ``sys.stderr``.

    Any text stream with ``write`` and ``flush`` works.
    """

    def write(self, s: str, /) -> object:
        """Write a chunk of text."""
        ...

    def flush(self) -> None:
        """Flush buffered output."""
        ...


@runtime_checkable
class EmitterPort(Protocol):
    """Port for the JSON object emitter.

    The emitter decides which levels are enabled, applies the attribute
    rewrite hook and writes one JSON object per record.
    """

    @property
    def add_source(self) -> bool:
        """Whether source locations are written."""
        ...

    def enabled(self, level: int) -> bool:
        """Return True if records at the given level are written."""
        ...

    def handle(self, record: Record) -> None:
        """Serialize and write a single record."""
        ...

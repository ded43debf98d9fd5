"""Folding of accumulated attributes into open groups."""

from collections.abc import Iterable, Sequence

from cloudlogpy.core.models import Attr, Group
from cloudlogpy.core.rewrite import MESSAGE_KEY


def custom_attrs(
    record_attrs: Iterable[Attr],
    attrs: Sequence[Attr],
    groups: Sequence[str],
) -> list[Attr]:
    """Nest persistent and record attributes inside the open groups.

    Args:
        record_attrs: Attributes passed with the log call. An attribute
            named like the message field is dropped so it can't clash
            with the message.
        attrs: Persistent attributes added with ``Handler.with_attrs``.
        groups: Open group names, innermost first.

    Returns:
        The attributes to add at the top level of the record: either the
        flat list, or a single group attribute if any group is open.
        Empty if there is nothing to add.
    """
    result = list(attrs)
    result.extend(a for a in record_attrs if a.key != MESSAGE_KEY)
    if not result:
        return []
    for name in groups:
        result = [Attr(name, Group(tuple(result)))]
    return result

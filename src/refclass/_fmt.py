"""Text listings of classes and instances.

describe(value) → str

Instances render like::

    <Anova #4>
      Inherits from: Stat
      Public:
        groups: ['setosa', 'virginica', 'versicolor']
        statistics: [('setosa', 0.5), ...]
        get_significant_results()
        set_threshold() -> self
        clone()
      Private:
        threshold: 0.02

Classes render the same sections with default values, marked as a
generator for new instances.
"""

import reprlib

import refclass
from ._member import FIELD, METHOD, ACTIVE


__all__ = ["describe"]


_repr = reprlib.Repr()
_repr.maxstring = 40
_repr.maxother = 40


def describe(value):
    """Render a ClassDef or Instance as a member listing.

    Args:
        value: (ClassDef | Instance) What to describe
    Returns:
        (str) Multi-line listing
    """
    if isinstance(value, refclass.Instance):
        classdef = value._class
        header = repr(value)
        table = value._table
        store = value._store
        extra = [name for name in store.public if name not in table]
    elif isinstance(value, refclass.ClassDef):
        classdef = value
        header = f"<{value.name}> class generator"
        table = value.resolve()
        store = None
        extra = []
    else:
        raise TypeError(f"Cannot describe {type(value).__name__}")

    lines = [header]
    if classdef.parent is not None:
        lines.append(f"  Inherits from: {classdef.parent.name}")

    public = [m for m in table.values() if not m.private]
    private = [m for m in table.values() if m.private]

    lines.append("  Public:")
    lines.extend(f"    {_format_member(m, store)}" for m in _ordered(public))
    lines.extend(f"    {name}: {_format_value(store.public[name])}" for name in extra)
    if private:
        lines.append("  Private:")
        lines.extend(f"    {_format_member(m, store)}" for m in _ordered(private))
    return "\n".join(lines)


def _ordered(members):
    """Fields first, then active bindings, then methods."""
    rank = {FIELD: 0, ACTIVE: 1, METHOD: 2}
    return sorted(members, key=lambda m: rank[m.kind])


def _format_member(member, store):
    if member.kind == FIELD:
        if store is None:
            value = member.value
        else:
            value = (store.private if member.private else store.public)[member.name]
        return f"{member.name}: {_format_value(value)}"
    if member.kind == ACTIVE:
        return f"{member.name}: active binding"
    suffix = " -> self" if member.is_mutator else ""
    return f"{member.name}(){suffix}"


def _format_value(value):
    if value is refclass.UNSET:
        return "UNSET"
    if isinstance(value, refclass.Instance):
        return repr(value)
    return _repr.repr(value)

"""Context resolution.

Names are looked up against a context stack, most specific context first.
Dotted names of the form ``list.N`` or ``list.N.field`` address an item of
a ListValue by index. A name that cannot be resolved is never an error; it
falls back to the parent context and finally renders as nothing.
"""

from collections.abc import Sequence

from stache.models.values import (
    BoolValue,
    Context,
    ContextValue,
    ListValue,
    Variable,
    is_absent,
)

ContextStack = tuple[Context, ...]

# Name an item context is queried with for ``{{list.N}}``
SELF_NAME = b"."


def find_array_item(context: Context, name: bytes) -> tuple[Context, bytes] | None:
    """Resolve an array path against a single context.

    Args:
        context: Context holding the list
        name: Dotted name, e.g. b"users.1.name"

    Returns:
        (item context, name to look up in it), or None if the name is not
        a valid array path into this context
    """
    head, dot, rest = name.partition(b".")
    if not dot:
        return None

    digits = 0
    while digits < len(rest) and rest[digits : digits + 1].isdigit():
        digits += 1
    if digits == 0:
        return None

    after = rest[digits:]
    if after and not after.startswith(b"."):
        return None

    value = context(head)
    if not isinstance(value, ListValue):
        return None

    idx = int(rest[:digits])
    if idx >= len(value.items):
        return None

    item = value.items[idx]
    if not after:
        return item, SELF_NAME
    return item, after[1:]


def read_var(stack: Sequence[Context], name: bytes) -> bytes:
    """Resolve a plain variable to its rendered bytes.

    Only Variable and BoolValue produce text. Any other bound kind stops the
    search and renders as nothing.
    """
    for context in stack:
        value = context(name)
        if isinstance(value, Variable):
            return value.render()
        if isinstance(value, BoolValue):
            return str(value.flag).encode("ascii")
        if is_absent(value):
            found = find_array_item(context, name)
            if found is not None:
                item, item_name = found
                return read_var((item,), item_name)
            continue
        return b""
    return b""


def lookup_section(stack: Sequence[Context], name: bytes) -> ContextValue | None:
    """Find the value driving a section.

    The first context binding the name wins. Only when no context binds it
    directly are array paths tried, again front to back.

    Returns:
        The bound value, or None when the name is not found anywhere
    """
    for context in stack:
        value = context(name)
        if not is_absent(value):
            return value

    for context in stack:
        found = find_array_item(context, name)
        if found is not None:
            item, item_name = found
            return item(item_name)

    return None


def push_context(stack: ContextStack, context: Context) -> ContextStack:
    """Return a new stack with context in front."""
    return (context,) + stack

"""Context builders.

The renderer only needs a callable mapping a name (bytes) to a context
value. These helpers build such callables from ordinary Python data:

- mk_str_context: from a mapping or a function taking str names
- mk_generic_context: from a mapping, dataclass instance or NamedTuple,
  converting nested records and sequences recursively

Usage:
    context = mk_generic_context({"name": "Haskell", "unread": 100})
    render_str("Hello, {{name}}! ({{unread}})", context)
"""

import dataclasses
from collections.abc import Callable, Mapping, Sequence, Set
from numbers import Number
from typing import Any

from stache.models.values import (
    ABSENT,
    BoolValue,
    Context,
    ContextValue,
    Lambda,
    LambdaM,
    ListValue,
    Variable,
)
from stache.templates.resolver import SELF_NAME
from stache.utils.encoding import decode_str

_CONTEXT_VALUE_TYPES = (Variable, ListValue, BoolValue, Lambda, LambdaM, type(ABSENT))
_SCALAR_TYPES = (str, bytes, bytearray, Number)


def is_record(value: Any) -> bool:
    """Return True for values exposing named fields."""
    if isinstance(value, Mapping):
        return True
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return True
    return isinstance(value, tuple) and hasattr(value, "_fields")


def record_fields(value: Any) -> Mapping[str, Any]:
    """Return the named fields of a record as a mapping."""
    if isinstance(value, Mapping):
        return value
    if dataclasses.is_dataclass(value):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    return value._asdict()


def to_context_value(value: Any) -> ContextValue:
    """Convert a Python value to a context value.

    - None -> ABSENT
    - bool -> BoolValue
    - str, bytes, numbers -> Variable
    - records -> a one-item ListValue, so a section pushes the record
    - other sequences and sets -> ListValue of item contexts
    - callables -> Lambda
    - context values are returned unchanged
    """
    if value is None:
        return ABSENT
    if isinstance(value, _CONTEXT_VALUE_TYPES):
        return value
    if isinstance(value, bool):
        return BoolValue(value)
    if isinstance(value, _SCALAR_TYPES):
        return Variable(value)
    if is_record(value):
        return ListValue((mk_generic_context(value),))
    if isinstance(value, (Sequence, Set)):
        return ListValue(tuple(item_context(item) for item in value))
    if callable(value):
        return Lambda(value)
    return Variable(str(value))


def item_context(item: Any) -> Context:
    """Build the context pushed for one list item.

    Records expose their fields; any item also answers ``.`` with itself.
    """
    fields = mk_generic_context(item) if is_record(item) else None
    self_value = ListValue((fields,)) if fields is not None else to_context_value(item)

    def context(name: bytes) -> ContextValue:
        if name == SELF_NAME:
            return self_value
        if fields is None:
            return ABSENT
        return fields(name)

    return context


def mk_generic_context(record: Any) -> Context:
    """Build a context from a record.

    Dotted names (``address.city``) walk through nested records. Names that
    cross a list are left to the renderer's array-path lookup.

    Args:
        record: Mapping, dataclass instance or NamedTuple

    Returns:
        Context lookup function

    Raises:
        TypeError: If record has no named fields
    """
    if not is_record(record):
        raise TypeError(f"Cannot build a context from {type(record).__name__}")

    fields = record_fields(record)

    def context(name: bytes) -> ContextValue:
        key = decode_str(name)
        if key in fields:
            return to_context_value(fields[key])

        head, dot, rest = key.partition(".")
        if dot and head in fields and is_record(fields[head]):
            return mk_generic_context(fields[head])(rest.encode("utf-8"))
        return ABSENT

    return context


def mk_str_context(source: Mapping[str, Any] | Callable[[str], Any]) -> Context:
    """Build a context from a mapping or a function of str names.

    Function results go through to_context_value; returning None marks the
    name as absent.

    Examples:
        >>> ctx = mk_str_context({"name": "Haskell"})
        >>> ctx(b"name")
        Variable(value='Haskell')
    """
    if isinstance(source, Mapping):
        return mk_generic_context(source)

    def context(name: bytes) -> ContextValue:
        return to_context_value(source(decode_str(name)))

    return context

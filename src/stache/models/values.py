"""Context values handed back by context lookup functions.

A context is any callable mapping a tag name (bytes) to one of the value
kinds defined here:

- Variable: a renderable scalar or sequence
- ListValue: a list of nested contexts (iterated by sections)
- BoolValue: a plain flag
- Lambda / LambdaM: callouts receiving the raw section body
- ABSENT: the name is not bound in this context
"""

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from numbers import Number
from typing import Any, Union

# Absolute tolerance used when deciding whether a number counts as zero
ZERO_TOLERANCE = 1e-9


@dataclass(frozen=True)
class Variable:
    """A value rendered as text by plain variable tags.

    Attributes:
        value: str, bytes, number, bool, or a list/tuple of those
    """

    value: Any

    def render(self) -> bytes:
        """Render the wrapped value to bytes."""
        return render_value(self.value)

    @property
    def is_empty(self) -> bool:
        """Return True if the value is logically absent."""
        return is_empty(self.value)


@dataclass(frozen=True)
class ListValue:
    """A sequence of contexts, one per section iteration.

    Attributes:
        items: Context lookup functions, in iteration order
    """

    items: tuple["Context", ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class BoolValue:
    """A boolean flag. Sections use its truth value directly."""

    flag: bool


@dataclass(frozen=True)
class Lambda:
    """Pure callout invoked with the unprocessed section body."""

    func: Callable[[bytes], Any]


@dataclass(frozen=True)
class LambdaM:
    """Callout invoked with the unprocessed section body that may perform I/O.

    Called exactly once per tag occurrence, in template order.
    """

    func: Callable[[bytes], Any]


class _Absent:
    """Marker returned by a context for names it does not define."""

    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()

ContextValue = Union[Variable, ListValue, BoolValue, Lambda, LambdaM, _Absent]
Context = Callable[[bytes], ContextValue]


def render_value(value: Any) -> bytes:
    """Render a variable value to bytes.

    Args:
        value: Scalar or sequence to render

    Returns:
        UTF-8 bytes. Sequences render as ``[a,b,c]``.

    Examples:
        >>> render_value(100)
        b'100'
        >>> render_value(["a", 1])
        b'[a,1]'
    """
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, Variable):
        return value.render()
    if isinstance(value, (list, tuple)):
        return b"[" + b",".join(render_value(v) for v in value) + b"]"
    return str(value).encode("utf-8")


def is_empty(value: Any) -> bool:
    """Check whether a variable value counts as empty for sections.

    Numbers close to zero, zero-length text and empty sequences are empty.
    Booleans are never empty; sections test their truth value instead.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, Number):
        return math.isclose(abs(value), 0.0, abs_tol=ZERO_TOLERANCE)
    if isinstance(value, (str, bytes, bytearray, memoryview)):
        return len(value) == 0
    if isinstance(value, Sequence):
        return len(value) == 0
    return False


def is_absent(value: ContextValue) -> bool:
    """Return True for the ABSENT marker."""
    return value is ABSENT

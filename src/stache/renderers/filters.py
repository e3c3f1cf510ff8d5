"""Escape functions applied to plain variable output.

The escape function only ever sees resolved variable bytes, never literal
template text, triple-brace/ampersand output, or lambda results.
"""

from collections.abc import Callable

EscapeFunc = Callable[[bytes], bytes]

# Byte -> entity mapping used by html_escape
HTML_ENTITIES: dict[int, bytes] = {
    ord("&"): b"&amp;",
    ord("\\"): b"&#92;",
    ord('"'): b"&quot;",
    ord("'"): b"&#39;",
    ord("<"): b"&lt;",
    ord(">"): b"&gt;",
}


def html_escape(text: bytes) -> bytes:
    """Escape HTML-significant characters.

    Args:
        text: Rendered variable bytes.

    Returns:
        Escaped bytes. Escaping is applied once; already escaped input is
        escaped again.

    Examples:
        >>> html_escape(b"<b>")
        b'&lt;b&gt;'
        >>> html_escape(b"&lt;")
        b'&amp;lt;'
    """
    if not any(b in HTML_ENTITIES for b in text):
        return text

    out = bytearray()
    for b in text:
        entity = HTML_ENTITIES.get(b)
        if entity is None:
            out.append(b)
        else:
            out += entity
    return bytes(out)


def empty_escape(text: bytes) -> bytes:
    """Return text unchanged."""
    return text


# Escapers selectable by name from configuration and CLI
ESCAPE_FUNCTIONS: dict[str, EscapeFunc] = {
    "html": html_escape,
    "none": empty_escape,
}


def get_escape_function(name: str) -> EscapeFunc:
    """Look up an escape function by its configuration name.

    Raises:
        ValueError: If the name is not registered
    """
    try:
        return ESCAPE_FUNCTIONS[name]
    except KeyError:
        raise ValueError(
            f"Unknown escape function: {name}. Valid: {sorted(ESCAPE_FUNCTIONS)}"
        ) from None

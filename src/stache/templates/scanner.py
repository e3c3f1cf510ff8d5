"""Tag scanner.

Locates the next tag under the current delimiter pair. Everything here works
on raw bytes plus offsets into them, so scanning never copies the unread
rest of a template, and never raises on malformed input: a tag without a
closing marker is simply "not a tag".
"""

from typing import NamedTuple

# Bytes stripped by trim_all / trim_standalone
TRIM_CHARS = b" \t"


class Delimiters(NamedTuple):
    """Open/close tag markers in effect for the rest of a render."""

    open: bytes
    close: bytes

    @property
    def is_default(self) -> bool:
        return self == DEFAULT_DELIMITERS


DEFAULT_DELIMITERS = Delimiters(b"{{", b"}}")

# Closing marker of a triple-brace (unescaped) tag under default delimiters
UNESCAPE_CLOSE = b"}}}"


class Tag(NamedTuple):
    """A located tag.

    Attributes:
        start: Offset of the open delimiter (literal text ends here)
        end: Offset just past the closing marker (rendering resumes here)
        sigil: The byte right after the open delimiter (e.g. b"#")
        body: Bytes between the delimiters, sigil included
    """

    start: int
    end: int
    sigil: bytes
    body: bytes


def find_tag(
    text: bytes,
    delimiters: Delimiters = DEFAULT_DELIMITERS,
    start: int = 0,
) -> Tag | None:
    """Find the first tag in text at or after start.

    Args:
        text: Template text
        delimiters: Current open/close markers
        start: Offset to scan from

    Returns:
        The located tag, or None when there is no complete tag (the rest of
        the text is then literal)

    Examples:
        >>> find_tag(b"Hi {{name}}!")
        Tag(start=3, end=11, sigil=b'n', body=b'name')
        >>> find_tag(b"{{{raw}}}").body
        b'{raw'
    """
    open_at = text.find(delimiters.open, start)
    if open_at == -1:
        return None

    body_start = open_at + len(delimiters.open)
    if body_start >= len(text):
        return None

    sigil = text[body_start : body_start + 1]
    if sigil == b"{" and delimiters.is_default:
        close = UNESCAPE_CLOSE
    else:
        close = delimiters.close

    close_at = text.find(close, body_start)
    if close_at == -1:
        return None

    return Tag(
        start=open_at,
        end=close_at + len(close),
        sigil=sigil,
        body=text[body_start:close_at],
    )


def find_close_section(
    text: bytes,
    name: bytes,
    delimiters: Delimiters = DEFAULT_DELIMITERS,
    start: int = 0,
) -> tuple[int, int] | None:
    """Locate the first closing tag for a section at or after start.

    The first occurrence of ``open + "/" + name + close`` wins; nesting is
    not counted, so a same-named inner section ends the outer one early.

    Returns:
        (offset of the closing tag, offset just past it), or None if unclosed
    """
    close_tag = delimiters.open + b"/" + name + delimiters.close
    close_at = text.find(close_tag, start)
    if close_at == -1:
        return None
    return close_at, close_at + len(close_tag)


def trim_all(text: bytes) -> bytes:
    """Strip spaces and tabs from both ends."""
    return text.strip(TRIM_CHARS)


def drop_newline(text: bytes, pos: int = 0) -> int:
    """Skip a single newline at pos, returning the new offset."""
    if text.startswith(b"\n", pos):
        return pos + 1
    return pos


def trim_standalone(text: bytes, pos: int = 0) -> int:
    """Skip the rest of a standalone tag line.

    Spaces/tabs followed by a newline are skipped together with that
    newline. If no newline follows, pos is returned unchanged.
    """
    end = pos
    while end < len(text) and text[end] in TRIM_CHARS:
        end += 1
    if text.startswith(b"\n", end):
        return end + 1
    return pos


def parse_delimiter_command(body: bytes) -> Delimiters | None:
    """Parse a set-delimiter tag body such as ``=<% %>=``.

    Args:
        body: Tag body including the leading ``=`` sigil

    Returns:
        The new delimiters, or None when the command is malformed
    """
    if len(body) <= 4 or not body.endswith(b"="):
        return None

    command = trim_all(body[1:-1])
    parts = command.split(b" ")
    if len(parts) != 2 or not all(parts):
        return None

    return Delimiters(parts[0], parts[1])

"""Conversion between Python text and the UTF-8 bytes the renderer works on."""

# Encoding used for templates, names and rendered output
ENCODING = "utf-8"


def encode_str(text: str) -> bytes:
    """Encode text to UTF-8 bytes.

    Examples:
        >>> encode_str("héllo")
        b'h\\xc3\\xa9llo'
    """
    return text.encode(ENCODING)


def decode_str(data: bytes) -> str:
    """Decode UTF-8 bytes to text.

    Invalid sequences are replaced with U+FFFD; decoding never raises.
    """
    return bytes(data).decode(ENCODING, errors="replace")

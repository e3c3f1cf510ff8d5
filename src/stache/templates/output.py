"""Append-only output accumulator for a single render."""


class OutputBuffer:
    """Ordered byte chunks, joined once when the render completes.

    A buffer belongs to exactly one render invocation.
    """

    def __init__(self) -> None:
        self._chunks: list[bytes] = []
        self._size = 0

    def append(self, data: bytes) -> None:
        """Append a chunk. Empty chunks are skipped."""
        if data:
            self._chunks.append(bytes(data))
            self._size += len(data)

    def getvalue(self) -> bytes:
        """Materialize the accumulated output."""
        if len(self._chunks) > 1:
            self._chunks = [b"".join(self._chunks)]
        return self._chunks[0] if self._chunks else b""

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"OutputBuffer(chunks={len(self._chunks)}, size={self._size})"

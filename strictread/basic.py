"""
Basic: an in-memory source with the loose contract.

The byte sequence consumes itself as it is read, so it has nowhere to keep
an error for a later call and returns the last bytes together with EOF.
Useful as a fixture for anything that has to cope with such sources.
"""

from typing import Any, Union

from .source import EOF, ReadResult, Source


class Basic(Source):
    """
    A byte sequence that shrinks as it is read.
    Once empty, every read returns (0, EOF).
    """

    def __init__(self, content: Union[bytes, str] = b"") -> None:
        """Initialize Basic with its content.

        Args:
            content: Bytes to serve; str content is encoded as UTF-8 (default: empty)
        """
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._remaining: bytearray = bytearray(content)

    def read(self, buffer: Any) -> ReadResult:
        """Copy as much of the remaining content as fits into buffer.

        Args:
            buffer: A writable bytes-like object

        Returns:
            ``(n, None)`` when buffer was filled, ``(n, EOF)`` when the content ran out
            before buffer was full, ``(0, None)`` for an empty buffer

        Examples:
            >>> b = Basic("Hello, World!")
            >>> p = bytearray(10)
            >>> b.read(p)
            (10, None)
            >>> b.read(p)
            (3, EOF)
            >>> b.read(p)
            (0, EOF)
        """
        # once EOF, always EOF
        if not self._remaining:
            return 0, EOF

        size = len(buffer)
        if size == 0:
            return 0, None

        n = min(size, len(self._remaining))
        buffer[:n] = self._remaining[:n]
        if size <= len(self._remaining):
            del self._remaining[:n]
            return n, None

        # exhausted without filling buffer, so signal EOF as well
        self._remaining.clear()
        return n, EOF

    def __len__(self) -> int:
        """Return the number of bytes not yet read."""
        return len(self._remaining)

    def __bytes__(self) -> bytes:
        """Return a copy of the bytes not yet read."""
        return bytes(self._remaining)


def new_basic(content: Union[bytes, str]) -> Basic:
    """Create a Basic source serving content."""
    return Basic(content)

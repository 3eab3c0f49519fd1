"""
The Source contract shared by everything strictread wraps, plus an adapter
for Python's own binary streams.
"""

import io
from abc import ABCMeta, abstractmethod
from typing import Any, Optional, Tuple, Union

ReadResult = Tuple[int, Optional[BaseException]]


class StrictReaderException(Exception):
    """Exception raised when strictread is misused, e.g. wrapping a missing source."""

    def __init__(self, msg: Union[str, bytes]) -> None:
        """Initialize StrictReaderException with an error message.

        Args:
            msg: The error message as string or bytes
        """
        super().__init__(msg)
        self._msg: Union[str, bytes] = msg

    def __str__(self) -> str:
        """Return the error message as a string."""
        if isinstance(self._msg, str):
            return self._msg
        elif isinstance(self._msg, bytes):
            return self._msg.decode("utf-8")
        else:
            return str(self._msg)


class EndOfStream(Exception):
    """Signals that a source will never produce more data.

    Compare against the module level ``EOF`` instance with ``is``.
    """

    def __str__(self) -> str:
        return "EOF"

    __repr__ = __str__


EOF = EndOfStream()


class Source(metaclass=ABCMeta):
    """Abstract base class for anything strictread can read from.

    A source fills the start of a caller supplied buffer and reports how many
    bytes it wrote along with an optional error value. Errors are returned,
    not raised. A source is allowed to return data and an error in the same
    call, for example the last few bytes together with ``EOF``.
    """

    @abstractmethod
    def read(self, buffer: Any) -> ReadResult:
        """Read up to len(buffer) bytes into buffer.

        Args:
            buffer: A writable bytes-like object (bytearray, memoryview)

        Returns:
            A ``(n, err)`` tuple where ``0 <= n <= len(buffer)`` and ``err`` is
            None or an exception instance
        """
        pass

    @classmethod
    def __subclasshook__(cls, subclass):
        if cls is Source:
            # io streams have read(size), not read(buffer)
            if issubclass(subclass, io.IOBase):
                return False
            if callable(getattr(subclass, "read", None)):
                return True
        return NotImplemented


class StreamSource(Source):
    """Adapts a binary file-like object (io.BytesIO, open files, socket files) to the Source contract.

    Python streams report end of stream by reading zero bytes and report
    failures by raising OSError; both are turned into error values here.
    The stream itself is still reachable through :meth:`seek`, :meth:`tell`
    and :attr:`stream`.
    """

    def __init__(self, stream: Any) -> None:
        """Initialize StreamSource around a binary stream.

        Args:
            stream: Any object providing ``readinto(buffer)``

        Raises:
            StrictReaderException: If stream is None or cannot readinto
        """
        if stream is None:
            raise StrictReaderException("cannot wrap a None stream")
        if not callable(getattr(stream, "readinto", None)):
            raise StrictReaderException(f"{type(stream).__name__} does not support readinto")
        self._stream = stream

    @property
    def stream(self) -> Any:
        return self._stream

    def read(self, buffer: Any) -> ReadResult:
        if len(buffer) == 0:
            return 0, None
        try:
            n = self._stream.readinto(buffer)
        except OSError as e:
            return 0, e
        if n is None:
            # non-blocking stream with nothing available yet
            return 0, None
        if n == 0:
            return 0, EOF
        return n, None

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._stream.seek(offset, whence)

    def tell(self) -> int:
        return self._stream.tell()

    def close(self) -> None:
        self._stream.close()

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - closes the wrapped stream"""
        self.close()
        return False

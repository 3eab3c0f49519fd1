"""strictread provides the StrictReader class, which wraps any source and guarantees that a read
returning data never also returns an error, and the read_into helper which sizes a reusable buffer
to exactly the bytes a read produced.

A source may hand back its last bytes together with EOF (or any other error). The only safe read loop
for such a source has to look at the data before looking at the error. StrictReader stores the error
instead and returns it on the next call, so the loop can simply stop at the first error.
"""

import io
import logging
import sys
from enum import Enum
from typing import Any, Iterator, Optional, Tuple

from cffi import FFI

from .source import EOF, ReadResult, Source, StreamSource, StrictReaderException

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 65536

ReaderState = Enum("ReaderState", "CLEAR PENDING")

_EMPTY = memoryview(bytearray())

ffi = FFI()


class StrictReader(Source):
    """Wraps a source and strengthens its contract: if n > 0 then err is None.

    When the wrapped source returns data and an error together, the data is returned right away and the
    error is kept until the next call to ``read`` (or ``drain_error``), which returns it without reading
    from the source. Stored errors are discarded once returned.

    Some care is needed when calling other methods of the wrapped source directly, for example ``seek``:
    call ``drain_error`` first, otherwise a pending error is lost or reported against the wrong read.

    Neither the reader nor its source is safe to share between threads.
    """

    def __init__(self, source: Source) -> None:
        """Initialize StrictReader around source.

        Args:
            source: Anything with a ``read(buffer) -> (n, err)`` method

        Raises:
            StrictReaderException: If source is None, an io stream, or has no read method
        """
        if source is None:
            raise StrictReaderException("cannot wrap a None source")
        if isinstance(source, io.IOBase):
            raise StrictReaderException(f"{type(source).__name__} is an io stream, wrap it in StreamSource first")
        if not isinstance(source, Source):
            raise StrictReaderException(f"{type(source).__name__} has no read method")
        self._source = source
        self._state = ReaderState.CLEAR
        self._pending: Optional[BaseException] = None

    @property
    def source(self) -> Source:
        return self._source

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def pending(self) -> Optional[BaseException]:
        """The stored error, if any. Looking at it does not clear it."""
        return self._pending

    def read(self, buffer: Any) -> ReadResult:
        """Read from the wrapped source, making sure err is None whenever n > 0.

        If an error is pending it is returned (and discarded) with n == 0 and the source is not read.

        Args:
            buffer: A writable bytes-like object

        Returns:
            A ``(n, err)`` tuple; err is None whenever n > 0
        """
        if self._state is ReaderState.PENDING:
            return 0, self.drain_error()

        n, err = self._source.read(buffer)

        # data and error together, keep the error for the next call
        if n != 0 and err is not None:
            self._defer(err)
            return n, None

        return n, err

    def drain_error(self) -> Optional[BaseException]:
        """Return, then discard, any error stored from the last read.

        Only needed after a successful read when a different method of the wrapped source (e.g. seek)
        is about to be called. Two calls in a row with no read in between: the second returns None.
        """
        err = self._pending
        self._pending = None
        if self._state is ReaderState.PENDING:
            self._state = ReaderState.CLEAR
            logger.debug("returning deferred %r", err)
        return err

    def _defer(self, err: BaseException) -> None:
        logger.debug("deferring %r until the next read", err)
        self._pending = err
        self._state = ReaderState.PENDING

    def __repr__(self) -> str:
        return f"StrictReader({self._source!r}, state={self._state.name})"


def _address(view: memoryview) -> int:
    return int(ffi.cast("uintptr_t", ffi.from_buffer(view)))


def _as_bytes(view: memoryview) -> memoryview:
    if view.format != "B" or view.ndim != 1:
        return view.cast("B")
    return view


def _full_view(buffer: Any) -> memoryview:
    view = memoryview(buffer)
    if not view.c_contiguous:
        return view
    view = _as_bytes(view)
    if isinstance(buffer, memoryview) and buffer.obj is not None:
        whole = memoryview(buffer.obj)
        if whole.c_contiguous:
            whole = _as_bytes(whole)
            offset = _address(view) - _address(whole)
            # grow to the end of the object, never over bytes before the view
            if 0 <= offset <= len(whole):
                view = whole[offset:]
    return view


def read_into(source: Source, buffer: Any) -> Tuple[Optional[memoryview], Optional[BaseException]]:
    """Grow buffer to its capacity, read from source once, and cut it down to the data returned.

    The returned view can be handed straight back in on the next iteration of a read loop, no index
    bookkeeping needed. Works with any source but combine with StrictReader for best results.

    Args:
        source: The source to read from
        buffer: A bytearray (or other writable buffer) or a memoryview returned by an earlier call.
            A memoryview is grown from where it starts to the end of the object it views; bytes
            before its start are never touched. May be None.

    Returns:
        A ``(view, err)`` tuple where view is a memoryview of exactly the n bytes read (None if buffer
        was None) and err is whatever the source returned

    Examples:
        >>> from strictread import Basic
        >>> r = StrictReader(Basic("Hello, World!"))
        >>> p = bytearray(10)
        >>> p, err = read_into(r, p)
        >>> bytes(p), err
        (b'Hello, Wor', None)
        >>> p, err = read_into(r, p)
        >>> bytes(p), err
        (b'ld!', None)
    """
    if buffer is None:
        _, err = source.read(_EMPTY)
        return None, err

    view = _full_view(buffer)
    n, err = source.read(view)
    return view[:n], err


def iter_chunks(
    source: Source,
    buffer: Any = None,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
    max_empty_reads: Optional[int] = None,
) -> Iterator[bytes]:
    """Yield every chunk source produces until EOF.

    source is wrapped in a StrictReader (unless it already is one) so the loop only has to look at
    the error. Errors other than EOF are raised once all data before them has been yielded.

    Args:
        source: The source to read from
        buffer: Buffer reused for every read. If None, one of buffer_size bytes is allocated.
        buffer_size: Size of the buffer allocated when none is given (default: 65536)
        max_empty_reads: Give up after this many reads in a row return neither data nor an error.
            None means never give up, so a non-blocking source with nothing to read keeps the loop
            spinning. (default: None)

    Raises:
        StrictReaderException: If buffer_size is not positive, buffer is empty, or max_empty_reads
            empty reads happen in a row
    """
    if buffer is None:
        if buffer_size <= 0:
            raise StrictReaderException(f"buffer_size must be positive, got {buffer_size}")
        buffer = bytearray(buffer_size)
    elif len(_full_view(buffer)) == 0:
        raise StrictReaderException("cannot read chunks into an empty buffer")
    reader = source if isinstance(source, StrictReader) else StrictReader(source)
    empty_reads = 0
    while True:
        buffer, err = read_into(reader, buffer)
        if err is EOF:
            return
        if err is not None:
            raise err
        if len(buffer):
            empty_reads = 0
            yield bytes(buffer)
            continue
        empty_reads += 1
        if max_empty_reads is not None and empty_reads >= max_empty_reads:
            raise StrictReaderException(f"no data after {empty_reads} reads in a row")


def read_all(source: Source, buffer_size: int = DEFAULT_BUFFER_SIZE) -> bytes:
    """Read source until EOF and return everything it produced."""
    return b"".join(iter_chunks(source, buffer_size=buffer_size))


def run(data=None, out=None, buffer_size=DEFAULT_BUFFER_SIZE):
    """Copy data (default: stdin) to out (default: stdout) through a StrictReader, returns bytes copied.

    data should be a blocking stream; a non-blocking one with nothing to read keeps this spinning.
    """
    if data is None:
        data = sys.stdin.buffer
    if out is None:
        out = sys.stdout.buffer

    copied = 0
    for chunk in iter_chunks(StreamSource(data), buffer_size=buffer_size):
        out.write(chunk)
        copied += len(chunk)
    out.flush()
    return copied


if __name__ == "__main__":
    run()

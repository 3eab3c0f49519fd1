"""strictread wraps byte sources whose reads may return data and an error together (StrictReader) so
that callers only ever see one or the other, and sizes reusable buffers to the data actually read
(read_into).

Basic is a small in-memory source with the loose contract, StreamSource adapts Python binary streams.
"""

from strictread.basic import Basic, new_basic
from strictread.source import EOF, EndOfStream, Source, StreamSource, StrictReaderException
from strictread.strictreader import (
    DEFAULT_BUFFER_SIZE,
    ReaderState,
    StrictReader,
    iter_chunks,
    read_all,
    read_into,
)

__all__ = [
    "Basic",
    "DEFAULT_BUFFER_SIZE",
    "EOF",
    "EndOfStream",
    "ReaderState",
    "Source",
    "StreamSource",
    "StrictReader",
    "StrictReaderException",
    "iter_chunks",
    "new_basic",
    "read_all",
    "read_into",
]

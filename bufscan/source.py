from __future__ import annotations

import io
import logging

from typing import BinaryIO

logger = logging.getLogger("bufscan.source")


class ByteSource:
    """
    Buffered byte stream with peek and consume primitives.

    ByteSource accepts bytes, strings and binary streams. Strings are
    encoded with `encoding`. Streams are read in chunks of at most
    `buffer_size` bytes, taking whatever one read returns; the stream
    itself is never closed.

    Text streams are accepted only if they expose the underlying binary
    buffer (`TextIOWrapper.buffer`).
    """

    def __init__(self,
                 stream: bytes | str | BinaryIO | io.IOBase,
                 encoding="utf-8",
                 buffer_size=io.DEFAULT_BUFFER_SIZE):
        self.buffer = b""
        self.pointer = 0
        self.stream = None
        self.name = None
        self.encoding = encoding
        self.buffer_size = buffer_size
        self.eof = True

        if isinstance(stream, str):
            self.name = "<string>"
            self.buffer = stream.encode(encoding)
            return
        elif isinstance(stream, (bytes, bytearray, memoryview)):
            self.name = "<bytes>"
            self.buffer = bytes(stream)
            return
        elif isinstance(stream, io.TextIOBase):
            self.name = getattr(stream, 'name', '<stream>')
            buffer = getattr(stream, 'buffer', None)
            if buffer is None:
                raise TypeError(f"text stream has no binary buffer: "
                                f"{self.name}")
            stream = buffer
        elif isinstance(stream, io.IOBase):
            self.name = getattr(stream, 'name', '<stream>')
        else:
            raise TypeError(f"cannot read from {type(stream).__name__}")

        if not stream.readable():
            with_name = f": {self.name}" if self.name else ""
            raise ValueError("stream must be readable" + with_name)

        self.stream = stream
        self.eof = False
        # read1 returns what one underlying read yields instead of
        # blocking until the whole chunk is filled.
        self._read = getattr(stream, 'read1', stream.read)

    def peek(self) -> bytes:
        """Return the buffered unread bytes without consuming them.

        Reads from the stream only if nothing is buffered. Returns an
        empty bytes object at the end of the stream.
        """
        if self.pointer >= len(self.buffer):
            self.update()
        return self.buffer[self.pointer:]

    def fill(self, length: int) -> bytes:
        """Buffer at least `length` unread bytes and return them.

        Returns fewer bytes only at the end of the stream.
        """
        if len(self.buffer) - self.pointer < length:
            self.update(length)
        return self.buffer[self.pointer:]

    def consume(self, n: int) -> None:
        """Discard the first `n` bytes. They must have been peeked."""
        if n > len(self.buffer) - self.pointer:
            raise ValueError(f"cannot consume {n} bytes, "
                             f"{len(self.buffer) - self.pointer} buffered")
        self.pointer += n

    def read_line(self) -> bytes:
        """Consume and return bytes through the next newline inclusive."""
        while (end := self.buffer.find(b"\n", self.pointer)) < 0:
            if self.eof:
                end = len(self.buffer) - 1
                break
            self.update(len(self.buffer) - self.pointer + 1)
        line = self.buffer[self.pointer:end + 1]
        self.pointer = end + 1
        return line

    def update(self, length: int = 1) -> None:
        if self.eof:
            return
        self.buffer = self.buffer[self.pointer:]
        self.pointer = 0
        while len(self.buffer) < length:
            data = self._read(self.buffer_size)
            if data:
                logger.debug("%s: read %d bytes", self.name, len(data))
                self.buffer += data
            else:
                self.eof = True
                break

    def __repr__(self):
        return f"ByteSource({self.name!r}, encoding={self.encoding!r})"

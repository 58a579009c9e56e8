from __future__ import annotations

import io
import re
import logging

from typing import Iterator, Optional

from bufscan.errors import NumberFormatError, ScanError
from bufscan.numeric import (
    MIN_RADIX,
    MAX_RADIX,
    parse_int,
    parse_float,
    strip_commas,
)
from bufscan.source import ByteSource

logger = logging.getLogger("bufscan.scanner")

DEFAULT_DELIMITER = re.compile(r"\s+")
DEFAULT_RADIX = 10


class Scanner:
    """
    Splits a buffered byte stream into tokens, lines and numbers.

    A token is a maximal run of text that does not match the delimiter
    pattern (one or more whitespace characters by default). The scanner
    keeps no position of its own: every read peeks at the bytes the source
    has buffered and consumes exactly the bytes it used, so token reads
    and line reads can be freely interleaved.

    Only the currently buffered bytes are examined, and a token never
    spans a buffer refill. A multibyte character cut by the buffer end
    starts the next token instead. `next()` returns None without consuming
    anything if the buffer is not valid text, and also when only
    delimiters are buffered; iterating over the scanner refills the
    buffer and goes on until the stream is exhausted.

    The scanner holds the source for its lifetime and never closes it.
    """

    def __init__(self,
                 stream: ByteSource | bytes | str | io.IOBase,
                 *,
                 delimiter: Optional[str | re.Pattern] = None,
                 radix: int = DEFAULT_RADIX,
                 encoding="utf-8",
                 buffer_size=io.DEFAULT_BUFFER_SIZE):
        if isinstance(stream, ByteSource):
            self.source = stream
        else:
            self.source = ByteSource(stream, encoding, buffer_size)

        self._delimiter = DEFAULT_DELIMITER
        self._radix = DEFAULT_RADIX

        if delimiter is not None:
            self.set_delimiter(delimiter)
        self.set_radix(radix)

    @classmethod
    def from_config(cls, stream, config) -> Scanner:
        """Create a scanner configured by `bufscan.config.SCANNER_OPTIONS`."""
        scanner = cls(stream,
                      radix=config.radix,
                      encoding=config.encoding,
                      buffer_size=config.buffer_size)
        if config.literal:
            scanner.set_delimiter_literal(config.delimiter)
        else:
            scanner.set_delimiter(config.delimiter)
        return scanner

    def set_delimiter(self, delimiter: str | re.Pattern) -> re.Pattern:
        """Install a delimiter pattern and return it.

        Raises:
            re.error: `delimiter` is a malformed pattern. The previous
                delimiter stays installed.
        """
        if not isinstance(delimiter, re.Pattern):
            delimiter = re.compile(delimiter)
        self._delimiter = delimiter
        return self._delimiter

    def set_delimiter_literal(self, text: str) -> re.Pattern:
        """Install a delimiter that matches `text` verbatim and return it."""
        self._delimiter = re.compile(re.escape(text))
        return self._delimiter

    def get_delimiter(self) -> re.Pattern:
        return self._delimiter

    delimiter = property(get_delimiter)

    def set_radix(self, radix: int) -> None:
        """Set the default radix for numeric reads.

        Values outside [2, 36] are ignored.
        """
        if MIN_RADIX <= radix <= MAX_RADIX:
            self._radix = radix

    def get_radix(self) -> int:
        return self._radix

    radix = property(get_radix)

    def next(self) -> Optional[str]:
        """Return the next token, or None if there is none.

        Leading delimiters are consumed, then everything up to (but
        excluding) the next delimiter. The delimiter after the token stays
        in the stream. Leading delimiters are consumed even if no token
        follows them.
        """
        token, _ = self._next_token()
        return token or None

    def _next_token(self) -> tuple[Optional[str], int]:
        """Scan the buffered bytes for a token.

        Returns the token, which may be empty, and the number of bytes
        consumed. The token is None if the buffer is not valid text.
        """
        encoding = self.source.encoding
        try:
            text = self._peek_text()
        except UnicodeDecodeError as e:
            logger.debug("%s: buffer is not valid %s: %s",
                         self.source.name, encoding, e)
            return None, 0

        window = text
        skipped = 0
        while (found := self._delimiter.search(window)):
            if found.start() > 0 or found.end() == 0:
                break
            skipped += found.end()
            window = window[found.end():]

        if skipped:
            logger.debug("%s: skipped %d delimiter characters",
                         self.source.name, skipped)

        if found := self._delimiter.search(window):
            token = window[:found.start()]
        else:
            token = window

        consumed = len(text[:skipped + len(token)].encode(encoding))
        self.source.consume(consumed)
        return token, consumed

    def _peek_text(self) -> str:
        """Decode the buffered bytes.

        A character cut by the end of the buffer is left for the next
        read. If the buffer holds nothing but such a character, more bytes
        are fetched to complete it.

        Raises:
            UnicodeDecodeError
        """
        buf = self.source.peek()
        while True:
            try:
                return buf.decode(self.source.encoding)
            except UnicodeDecodeError as e:
                if e.reason != "unexpected end of data" or e.end != len(buf):
                    raise
                if e.start > 0:
                    return buf[:e.start].decode(self.source.encoding)
                more = self.source.fill(len(buf) + 1)
                if len(more) == len(buf):
                    raise
                buf = more

    def _decode_line(self, line: bytes) -> str:
        text = line.decode(self.source.encoding)
        if text.endswith('\n'):
            text = text[:-1]
        return text

    def next_line(self) -> Optional[str]:
        """Return the next line without its trailing newline.

        Leading delimiters are part of the line. Returns None at the end
        of the stream or if the line is not valid text; in the latter case
        the line is still consumed.
        """
        line = self.source.read_line()
        if not line:
            return None

        try:
            return self._decode_line(line)
        except UnicodeDecodeError as e:
            logger.debug("%s: line is not valid %s: %s",
                         self.source.name, self.source.encoding, e)
            return None

    def next_int(self,
                 radix: Optional[int] = None,
                 width: Optional[int] = 32) -> Optional[int]:
        """Read the next token as a signed integer.

        Commas are removed before parsing. The token is consumed even if
        it is not a valid number, including when `radix` is out of range.

        Args:
            radix: Base of the number. Defaults to the scanner's radix.
            width: Bit width of the result; values outside the signed
                range are rejected. None disables the range check.
        """
        token = self.next()
        if token is None:
            return None
        if radix is None:
            radix = self._radix

        try:
            return parse_int(strip_commas(token), radix, width)
        except NumberFormatError as e:
            logger.debug("%s: not an integer: %s", self.source.name, e)
            return None

    def next_float(self, radix: Optional[int] = None) -> Optional[float]:
        """Read the next token as a float.

        Same consumption rules as `next_int`.
        """
        token = self.next()
        if token is None:
            return None
        if radix is None:
            radix = self._radix

        try:
            return parse_float(strip_commas(token), radix)
        except NumberFormatError as e:
            logger.debug("%s: not a float: %s", self.source.name, e)
            return None

    def lines(self) -> Iterator[str]:
        """Yield lines until the end of the stream.

        Lines that are not valid text are skipped with a warning.
        """
        number = 0
        while line := self.source.read_line():
            number += 1
            try:
                text = self._decode_line(line)
            except UnicodeDecodeError as e:
                logger.warning("%s: skipping line %d, not valid %s: %s",
                               self.source.name, number,
                               self.source.encoding, e)
                continue
            yield text

    def __iter__(self) -> Scanner:
        return self

    def __next__(self) -> str:
        """Return the next token, refilling the buffer as needed.

        Raises:
            StopIteration: The stream is exhausted.
            ScanError: The input cannot be tokenized any further.
        """
        while True:
            token, consumed = self._next_token()
            if token:
                return token
            if not self.source.peek():
                raise StopIteration
            if consumed:
                continue
            if token is None:
                raise ScanError(f"{self.source.name}: input is not valid "
                                f"{self.source.encoding} text")
            raise ScanError(f"{self.source.name}: delimiter "
                            f"{self._delimiter.pattern!r} matches an "
                            f"empty string")

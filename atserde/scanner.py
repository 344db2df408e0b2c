"""Byte-level cursor over AT response text."""

from __future__ import annotations

from .errors import DeserializeError, ErrorKind

_WHITESPACE = frozenset(b" \n\t\r")
_ASCII_WHITESPACE = b" \t\n\x0c\r"
_FLOAT_CHARS = frozenset(b"0123456789+-.eE")
# Characters below 0x100 that carry the Unicode White_Space property.
_UNICODE_SPACE = frozenset("\t\n\x0b\x0c\r \x85\xa0")
_DIGITS = frozenset(b"0123456789")


def trim_ascii_whitespace(data: bytes | bytearray | memoryview) -> bytes:
    """Return ``data`` without leading and trailing ASCII whitespace."""
    return bytes(data).strip(_ASCII_WHITESPACE)


def _is_word_byte(byte: int) -> bool:
    char = chr(byte)
    return char.isalnum() or char in _UNICODE_SPACE


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DeserializeError(ErrorKind.INVALID_UNICODE_CODE_POINT) from exc


class Scanner:
    """A read position in a byte string, with the primitive AT parsers."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self.data = bytes(data)
        self.index = 0
        self.struct_size_hint: int | None = None
        self.trailing = False

    def peek(self) -> int | None:
        """Return the byte at the read position without consuming it."""
        if self.index < len(self.data):
            return self.data[self.index]
        return None

    def eat_char(self) -> None:
        """Move past the current byte."""
        self.index += 1

    def next_char(self) -> int | None:
        """Consume and return the current byte, or None at the end."""
        byte = self.peek()
        if byte is not None:
            self.index += 1
        return byte

    def parse_whitespace(self) -> int | None:
        """Skip whitespace and return the next byte without consuming it."""
        while (byte := self.peek()) is not None and byte in _WHITESPACE:
            self.eat_char()
        return byte

    def end(self) -> None:
        """Raise if anything but whitespace remains."""
        if self.parse_whitespace() is not None:
            raise DeserializeError(ErrorKind.TRAILING_CHARACTERS)

    def set_trailing(self) -> None:
        """Make the next string or bytes value take the rest of the input."""
        self.trailing = True

    def parse_ident(self, ident: bytes) -> None:
        """Consume exactly the bytes of ``ident``."""
        for expected in ident:
            if self.next_char() != expected:
                raise DeserializeError(ErrorKind.EXPECTED_SOME_IDENT)

    def _leading_backslashes(self, index: int) -> int:
        count = 0
        while index - count - 1 >= 0 and self.data[index - count - 1] == ord("\\"):
            count += 1
        return count

    def parse_str(self) -> str:
        """Read a string whose opening quote has already been consumed."""
        start = self.index
        if self.trailing:
            self.index = len(self.data)
            return _decode(self.data[start:])
        while True:
            byte = self.peek()
            if byte is None:
                raise DeserializeError(ErrorKind.EOF_WHILE_PARSING_STRING)
            if byte == ord('"') and self._leading_backslashes(self.index) % 2 == 0:
                end = self.index
                self.eat_char()
                return _decode(self.data[start:end])
            self.eat_char()

    def parse_bytes(self) -> bytes:
        """Read an unquoted run of letters, digits and whitespace."""
        start = self.index
        if self.trailing:
            self.index = len(self.data)
            return self.data[start:]
        while (byte := self.peek()) is not None:
            if not _is_word_byte(byte):
                raise DeserializeError(ErrorKind.EOF_WHILE_PARSING_STRING)
            self.eat_char()
        return self.data[start:self.index]

    def parse_at(self) -> bool:
        """Skip a leading ``+CMD:`` response prefix; return whether one was found."""
        if self.parse_whitespace() != ord("+"):
            return False
        saved = self.index
        while (byte := self.peek()) is not None:
            self.eat_char()
            if byte == ord(":"):
                if self.parse_whitespace() is None:
                    raise DeserializeError(ErrorKind.EOF_WHILE_PARSING_VALUE)
                return True
        self.index = saved
        return False

    def _digits(self, first: int, sign: int, low: int, high: int) -> int:
        number = sign * (first - ord("0"))
        while (byte := self.peek()) is not None and byte in _DIGITS:
            self.eat_char()
            number *= 10
            if not low <= number <= high:
                raise DeserializeError(ErrorKind.INVALID_NUMBER)
            number += sign * (byte - ord("0"))
            if not low <= number <= high:
                raise DeserializeError(ErrorKind.INVALID_NUMBER)
        return number

    def parse_unsigned(self, bits: int) -> int:
        """Read an unsigned decimal integer that fits in ``bits`` bits."""
        byte = self.parse_whitespace()
        if byte is None:
            raise DeserializeError(ErrorKind.EOF_WHILE_PARSING_VALUE)
        if byte == ord("-"):
            raise DeserializeError(ErrorKind.INVALID_NUMBER)
        if byte == ord("0"):
            self.eat_char()
            return 0
        if byte in _DIGITS:
            self.eat_char()
            return self._digits(byte, 1, 0, (1 << bits) - 1)
        raise DeserializeError(ErrorKind.INVALID_TYPE)

    def parse_signed(self, bits: int) -> int:
        """Read a signed decimal integer that fits in ``bits`` bits."""
        byte = self.parse_whitespace()
        if byte is None:
            raise DeserializeError(ErrorKind.EOF_WHILE_PARSING_VALUE)
        sign = 1
        if byte == ord("-"):
            self.eat_char()
            sign = -1
        byte = self.peek()
        if byte is None:
            raise DeserializeError(ErrorKind.EOF_WHILE_PARSING_VALUE)
        if byte == ord("0"):
            self.eat_char()
            return 0
        if byte in _DIGITS:
            self.eat_char()
            return self._digits(byte, sign, -(1 << (bits - 1)), (1 << (bits - 1)) - 1)
        raise DeserializeError(ErrorKind.INVALID_TYPE)

    def parse_float(self) -> float:
        """Read a decimal floating point number.

        The number must be followed by some other byte; reaching the end of
        the input inside it is an error.
        """
        if self.parse_whitespace() is None:
            raise DeserializeError(ErrorKind.EOF_WHILE_PARSING_VALUE)
        start = self.index
        while True:
            byte = self.peek()
            if byte is None:
                raise DeserializeError(ErrorKind.EOF_WHILE_PARSING_NUMBER)
            if byte not in _FLOAT_CHARS:
                break
            self.eat_char()
        try:
            return float(self.data[start:self.index].decode("ascii"))
        except ValueError as exc:
            raise DeserializeError(ErrorKind.INVALID_NUMBER) from exc
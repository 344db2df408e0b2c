"""Hexadecimal string parameters: integers and byte arrays written in hex."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import DeserializeError, ErrorKind
from .fields import IntType

HEX_WIDTHS = (8, 16, 32, 64, 128)

_HEX_VALUES = {c: int(c, 16) for c in "0123456789abcdefABCDEF"}


def _decode(text: str | bytes | bytearray | memoryview) -> str:
    if isinstance(text, str):
        return text
    try:
        return bytes(text).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DeserializeError(ErrorKind.CUSTOM, str(exc)) from exc


def _strip_prefix(text: str) -> str:
    if text.startswith(("0x", "0X")):
        return text[2:]
    return text


def _nibbles(text: str):
    """Yield the value of every hex digit in ``text``, skipping anything else."""
    for char in _strip_prefix(text):
        value = _HEX_VALUES.get(char)
        if value is not None:
            yield value


def _check_width(bits: int) -> None:
    if bits not in HEX_WIDTHS:
        raise ValueError(f"unsupported hex integer width: {bits}")


def _group(digits: str, size: int, delimiter: str, from_right: bool) -> str:
    if size <= 0:
        return digits
    if from_right:
        reversed_digits = digits[::-1]
        chunks = [reversed_digits[i:i + size] for i in range(0, len(reversed_digits), size)]
        return delimiter.join(chunks)[::-1]
    return delimiter.join(digits[i:i + size] for i in range(0, len(digits), size))


def parse_hex_int(text: str | bytes, bits: int) -> int:
    """Read an unsigned integer of ``bits`` width written in hex.

    An optional ``0x``/``0X`` prefix is dropped and any character that is not a
    hex digit is ignored, so ``"8:d"`` reads as ``0x8d``.  Digits shifted past
    the width of the integer are lost.
    """
    _check_width(bits)
    mask = (1 << bits) - 1
    result = 0
    for nibble in _nibbles(_decode(text)):
        shifted = (result << 4) & mask
        if shifted + nibble > mask:
            raise DeserializeError(ErrorKind.CUSTOM, "Invalid number")
        result = shifted + nibble
    return result


def parse_hex_bytes(text: str | bytes, size: int) -> bytes:
    """Read a byte array of exactly ``size`` bytes written in hex.

    Digits are taken in pairs; a final lone digit becomes the value of its
    byte.  Bytes not covered by the text are zero.
    """
    if size < 0:
        raise ValueError("size must not be negative")
    result = bytearray(size)
    index = 0
    pending: int | None = None
    for nibble in _nibbles(_decode(text)):
        if pending is None:
            pending = nibble
            continue
        if index >= size:
            raise DeserializeError(ErrorKind.CUSTOM, "too many bytes for the array")
        result[index] = (pending << 4) + nibble
        pending = None
        index += 1
    if pending is not None:
        if index >= size:
            raise DeserializeError(ErrorKind.CUSTOM, "too many bytes for the array")
        result[index] = pending
    return bytes(result)


@dataclass
class HexStr:
    """An unsigned integer that is written as a hex string.

    ``bits`` is the width of the integer (8, 16, 32, 64 or 128); it fixes the
    number of digits written when leading zeros are kept.
    """

    val: int = 0
    bits: int = 32
    add_0x_with_encoding: bool = False
    hex_in_caps: bool = True
    delimiter_after_nibble_count: int = 0
    delimiter: str = " "
    skip_last_0_values: bool = True

    def __post_init__(self) -> None:
        _check_width(self.bits)
        IntType(self.bits, False).check(self.val)
        if len(self.delimiter) != 1:
            raise ValueError("delimiter must be a single character")
        if self.delimiter_after_nibble_count < 0:
            raise ValueError("delimiter_after_nibble_count must not be negative")

    def __int__(self) -> int:
        return self.val

    def __index__(self) -> int:
        return self.val

    def format(self) -> str:
        """Return the hex text for this value, without surrounding quotes."""
        digits = format(self.val, "X" if self.hex_in_caps else "x")
        if not self.skip_last_0_values:
            digits = digits.rjust(self.bits // 4, "0")
        digits = _group(digits, self.delimiter_after_nibble_count, self.delimiter, True)
        return ("0x" if self.add_0x_with_encoding else "") + digits


@dataclass
class HexBytes:
    """A fixed-size byte array that is written as a hex string."""

    val: bytes = b""
    add_0x_with_encoding: bool = False
    hex_in_caps: bool = True
    delimiter_after_nibble_count: int = 0
    delimiter: str = " "
    skip_last_0_values: bool = True

    def __post_init__(self) -> None:
        self.val = bytes(self.val)
        if len(self.delimiter) != 1:
            raise ValueError("delimiter must be a single character")
        if self.delimiter_after_nibble_count < 0:
            raise ValueError("delimiter_after_nibble_count must not be negative")

    def __bytes__(self) -> bytes:
        return self.val

    def __len__(self) -> int:
        return len(self.val)

    def _kept(self) -> bytes:
        if not self.skip_last_0_values:
            return self.val
        # The last byte itself is never examined: the search runs from the
        # second-to-last byte backwards and stops at the first non-zero one.
        index = 0
        for index in range(len(self.val) - 2, -1, -1):
            if self.val[index] != 0:
                break
        return self.val[: index + 1]

    def format(self) -> str:
        """Return the hex text for these bytes, without surrounding quotes."""
        digits = self._kept().hex()
        if self.hex_in_caps:
            digits = digits.upper()
        digits = _group(digits, self.delimiter_after_nibble_count, self.delimiter, False)
        return ("0x" if self.add_0x_with_encoding else "") + digits
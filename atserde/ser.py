"""Write Python values as AT command text."""

from __future__ import annotations

import dataclasses
import enum
import math
import struct
import types
import typing
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from .fields import CharType, FloatType, IntType, int_type_of
from .hexstr import HexBytes, HexStr
from .options import OutputBuffer, SerializeOptions

_NONE_TYPE = type(None)


@dataclass(frozen=True)
class Variant:
    """A data-carrying enum variant, written as its index followed by its values.

    With no values it is a unit variant and only the index is written.
    """

    index: int
    values: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise TypeError("variant index must be an integer")
        if not 0 <= self.index <= 0xFFFF_FFFF:
            raise ValueError("variant index must fit in 32 unsigned bits")
        object.__setattr__(self, "values", tuple(self.values))


def _strip_optional(hint: Any) -> Any:
    origin = typing.get_origin(hint)
    if origin is typing.Union or origin is types.UnionType:
        inner = [arg for arg in typing.get_args(hint) if arg is not _NONE_TYPE]
        if len(inner) == 1:
            return inner[0]
    return hint


def _markers(hint: Any) -> tuple[Any, ...]:
    if isinstance(hint, (IntType, FloatType, CharType)):
        return (hint,)
    if typing.get_origin(hint) is typing.Annotated:
        return tuple(typing.get_args(hint)[1:])
    return ()


def _marker_of(hint: Any, kind: type) -> Any:
    for item in _markers(hint):
        if isinstance(item, kind):
            return item
    return None


def _to_f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _shortest_f32(value: float) -> str:
    single = _to_f32(value)
    if single == 0 or not math.isfinite(single):
        return repr(single)
    for precision in range(1, 10):
        text = f"{single:.{precision}g}"
        if _to_f32(float(text)) == single:
            return text
    return repr(single)


def format_float(value: float, bits: int = 64) -> str:
    """Format a float the way it is written in a command: plain decimal, no exponent."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = _shortest_f32(value) if bits == 32 else repr(float(value))
    plain = format(Decimal(text), "f")
    if "." in plain:
        plain = plain.rstrip("0").rstrip(".")
    return plain


class _Writer:
    """Writes values into an output buffer."""

    def __init__(self, buffer: OutputBuffer, cmd: str, options: SerializeOptions) -> None:
        self.buffer = buffer
        self.cmd = cmd
        self.options = options
        self._nested = False

    def write(self, value: Any, hint: Any = None) -> None:
        if isinstance(hint, str):
            hint = None
        hint = _strip_optional(hint)
        if value is None:
            self.buffer.unpush(1)
        elif isinstance(value, bool):
            self.buffer.push(b"true" if value else b"false")
        elif isinstance(value, enum.Enum):
            self.buffer.push(str(list(type(value)).index(value)).encode("ascii"))
        elif isinstance(value, int):
            self._write_int(value, hint)
        elif isinstance(value, float):
            width = _marker_of(hint, FloatType)
            self.buffer.push(format_float(value, width.bits if width else 64).encode("ascii"))
        elif isinstance(value, str):
            if _marker_of(hint, CharType) is not None:
                if len(value) != 1:
                    raise ValueError("a char value must be a single character")
                self.buffer.push(value.encode("utf-8"))
            else:
                self._write_str(value)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            self.buffer.push(value)
        elif isinstance(value, (HexStr, HexBytes)):
            self._write_str(value.format())
        elif isinstance(value, Variant):
            self._write_variant(value)
        elif dataclasses.is_dataclass(value) and not isinstance(value, type):
            self._write_struct(value)
        else:
            raise TypeError(f"cannot serialize values of type {type(value).__name__}")

    def _write_int(self, value: int, hint: Any) -> None:
        if hint is not None and hint is not int:
            width = int_type_of(hint)
            if width is not None:
                width.check(value)
        self.buffer.push(str(value).encode("ascii"))

    def _write_str(self, text: str) -> None:
        quote = self.options.quote_escape_strings
        if quote:
            self.buffer.push(b'"')
        self.buffer.push(text.encode("utf-8"))
        if quote:
            self.buffer.push(b'"')

    def _write_variant(self, variant: Variant) -> None:
        self.buffer.push(str(variant.index).encode("ascii"))
        if not variant.values:
            return
        self.buffer.push(b",")
        for position, item in enumerate(variant.values):
            if position:
                self.buffer.push(b",")
            self.write(item)

    def _write_struct(self, value: Any) -> None:
        top = not self._nested
        if top:
            self._nested = True
            self.buffer.push(self.options.cmd_prefix.encode("utf-8"))
            self.buffer.push(self.cmd.encode("utf-8"))
        for position, field in enumerate(dataclasses.fields(value)):
            if position == 0:
                if top and self.options.value_sep:
                    self.buffer.push(b"=")
            else:
                self.buffer.push(b",")
            self.write(getattr(value, field.name), field.type)
        if top:
            self.buffer.push(self.options.termination.encode("utf-8"))


def _serialize(
    value: Any, cmd: str, options: SerializeOptions | None, capacity: int | None
) -> bytes:
    buffer = OutputBuffer(capacity)
    _Writer(buffer, cmd, options or SerializeOptions()).write(value)
    return buffer.getvalue()


def to_slice(
    value: Any,
    cmd: str,
    buf: bytearray | memoryview,
    options: SerializeOptions | None = None,
) -> int:
    """Write ``value`` into ``buf`` and return the number of bytes written.

    Raises BufferFullError when the command does not fit in ``buf``.
    """
    data = _serialize(value, cmd, options, len(buf))
    buf[: len(data)] = data
    return len(data)


def to_bytes(
    value: Any,
    cmd: str,
    options: SerializeOptions | None = None,
    capacity: int | None = None,
) -> bytes:
    """Return the command text for ``value`` as bytes, at most ``capacity`` long."""
    return _serialize(value, cmd, options, capacity)


def to_string(
    value: Any,
    cmd: str,
    options: SerializeOptions | None = None,
    capacity: int | None = None,
) -> str:
    """Return the command text for ``value`` as a string."""
    return to_bytes(value, cmd, options, capacity).decode("utf-8")
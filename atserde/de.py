"""Read AT response text into Python values described by type annotations."""

from __future__ import annotations

import dataclasses
import enum
import types
import typing
from typing import Any, Callable

from .errors import DeserializeError, ErrorKind
from .fields import CharType, FloatType, IntType, int_type_of
from .hexstr import HexBytes, HexStr, parse_hex_bytes, parse_hex_int
from .length_delimited import LengthDelimited, parse_length_delimited
from .scanner import Scanner, trim_ascii_whitespace

_END = object()
_NONE_TYPE = type(None)


def _metadata_int(metadata: tuple[Any, ...]) -> int | None:
    for item in metadata:
        if isinstance(item, int) and not isinstance(item, bool):
            return item
    return None


def _metadata_of(metadata: tuple[Any, ...], kind: type) -> Any:
    for item in metadata:
        if isinstance(item, kind):
            return item
    return None


def _check_capacity(size: int, capacity: int | None) -> None:
    if capacity is not None and size > capacity:
        raise DeserializeError(ErrorKind.CUSTOM, "incorrect slice size")


class _SeqAccess:
    """Hands out the comma-separated elements of a sequence or struct."""

    def __init__(self, scanner: Scanner) -> None:
        self._scanner = scanner
        self._first = True
        self._count = 0
        self._len = scanner.struct_size_hint

    def next_element(self, read: Callable[[], Any]) -> Any:
        """Return the next element read by ``read``, or ``_END`` when done."""
        scanner = self._scanner
        byte = scanner.parse_whitespace()
        if byte == ord(","):
            scanner.eat_char()
            if scanner.parse_whitespace() is None:
                raise DeserializeError(ErrorKind.EOF_WHILE_PARSING_VALUE)
        elif byte is not None:
            if self._first:
                self._first = False
            elif byte != ord("+"):
                if self._len is not None and self._count == self._len - 1:
                    scanner.set_trailing()
                else:
                    return _END
        try:
            value = read()
        except DeserializeError as exc:
            if exc.kind is ErrorKind.EOF_WHILE_PARSING_OBJECT:
                self._count += 1
                return _END
            raise
        self._count += 1
        return value


class _Reader:
    """Reads values of annotated types from a scanner."""

    def __init__(self, scanner: Scanner) -> None:
        self.scanner = scanner

    def read(self, tp: Any) -> Any:
        if isinstance(tp, str):
            raise TypeError(
                f"annotation {tp!r} is a string; declare field types as objects"
            )
        origin = typing.get_origin(tp)
        if origin is typing.Annotated:
            return self._read_annotated(tp)
        if origin is typing.Union or origin is types.UnionType:
            args = typing.get_args(tp)
            inner = [arg for arg in args if arg is not _NONE_TYPE]
            if len(inner) == 1 and len(args) == 2:
                return self._read_option(inner[0])
            raise TypeError(f"unsupported union type: {tp!r}")
        if origin is list:
            (item,) = typing.get_args(tp)
            return self._read_list(item)
        if isinstance(tp, IntType):
            return self._read_int(tp)
        if isinstance(tp, FloatType) or tp is float:
            return self.scanner.parse_float()
        if isinstance(tp, CharType):
            return self._read_char()
        if tp is bool:
            return self._read_bool()
        if tp is int:
            return self._read_int(int_type_of(int))
        if tp is str:
            return self._read_str(None)
        if tp is bytes:
            return self._read_bytes(None)
        if tp is HexStr:
            return self._read_hex_str(32)
        if tp is LengthDelimited:
            return self._read_length_delimited(None)
        if isinstance(tp, type) and issubclass(tp, enum.Enum):
            return self._read_enum(tp)
        if isinstance(tp, type) and dataclasses.is_dataclass(tp):
            return self._read_struct(tp)
        if hasattr(tp, "__supertype__"):
            return self._read_newtype(tp)
        raise TypeError(f"cannot deserialize values of type {tp!r}")

    def _read_annotated(self, tp: Any) -> Any:
        base, *rest = typing.get_args(tp)
        metadata = tuple(rest)
        size = _metadata_int(metadata)
        if base is HexStr:
            width = int_type_of(tp)
            return self._read_hex_str(width.bits if width else 32)
        if base is HexBytes:
            if size is None:
                raise TypeError("HexBytes needs its size, e.g. Annotated[HexBytes, 16]")
            return self._read_hex_bytes(size)
        if base is LengthDelimited:
            return self._read_length_delimited(size)
        if base is bytes:
            return self._read_bytes(size)
        if _metadata_of(metadata, CharType) is not None:
            return self._read_char()
        if base is str:
            return self._read_str(size)
        width = _metadata_of(metadata, IntType)
        if width is not None:
            return self._read_int(width)
        if _metadata_of(metadata, FloatType) is not None:
            return self.scanner.parse_float()
        return self.read(base)

    def _read_int(self, width: IntType) -> int:
        if width.signed:
            return self.scanner.parse_signed(width.bits)
        return self.scanner.parse_unsigned(width.bits)

    def _read_bool(self) -> bool:
        scanner = self.scanner
        byte = scanner.parse_whitespace()
        if byte is None:
            raise DeserializeError(ErrorKind.EOF_WHILE_PARSING_VALUE)
        if byte == ord("t"):
            scanner.eat_char()
            scanner.parse_ident(b"rue")
            return True
        if byte == ord("f"):
            scanner.eat_char()
            scanner.parse_ident(b"alse")
            return False
        raise DeserializeError(ErrorKind.INVALID_TYPE)

    def _read_char(self) -> str:
        byte = self.scanner.parse_whitespace()
        if byte is None:
            raise DeserializeError(ErrorKind.EOF_WHILE_PARSING_VALUE)
        self.scanner.eat_char()
        return chr(byte)

    def _read_str(self, capacity: int | None) -> str:
        scanner = self.scanner
        byte = scanner.parse_whitespace()
        if byte is None:
            raise DeserializeError(ErrorKind.EOF_WHILE_PARSING_VALUE)
        if byte == ord('"'):
            scanner.eat_char()
            text = scanner.parse_str()
        elif chr(byte).isalpha():
            raw = scanner.parse_bytes()
            try:
                text = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise DeserializeError(ErrorKind.CUSTOM, str(exc)) from exc
        else:
            raise DeserializeError(ErrorKind.INVALID_TYPE)
        _check_capacity(len(text.encode("utf-8")), capacity)
        return text

    def _raw_field(self) -> tuple[bytes, int]:
        """Return the bytes up to the next comma and the index where they end."""
        scanner = self.scanner
        scanner.parse_at()
        end = scanner.data.find(b",", scanner.index)
        if end < 0:
            end = len(scanner.data)
        return scanner.data[scanner.index:end], end

    def _read_bytes(self, capacity: int | None) -> bytes:
        raw, end = self._raw_field()
        _check_capacity(len(raw), capacity)
        self.scanner.index = end
        return raw

    def _read_hex_str(self, bits: int) -> HexStr:
        raw, end = self._raw_field()
        value = HexStr(val=parse_hex_int(raw, bits), bits=bits)
        self.scanner.index = end
        return value

    def _read_hex_bytes(self, size: int) -> HexBytes:
        raw, end = self._raw_field()
        value = HexBytes(val=parse_hex_bytes(raw, size), skip_last_0_values=False)
        self.scanner.index = end
        return value

    def _read_length_delimited(self, capacity: int | None) -> LengthDelimited:
        scanner = self.scanner
        value = parse_length_delimited(scanner.data[scanner.index:], capacity)
        scanner.index = len(scanner.data)
        return value

    def _read_option(self, tp: Any) -> Any:
        byte = self.scanner.parse_whitespace()
        if byte is None or byte in (ord("+"), ord(",")):
            return None
        return self.read(tp)

    def _read_list(self, item: Any) -> list[Any]:
        access = _SeqAccess(self.scanner)
        result = []
        while (value := access.next_element(lambda: self.read(item))) is not _END:
            result.append(value)
        return result

    def _read_enum(self, cls: type[enum.Enum]) -> enum.Enum:
        if self.scanner.parse_whitespace() is None:
            raise DeserializeError(ErrorKind.EOF_WHILE_PARSING_VALUE)
        name = self._read_str(None)
        for member in cls:
            if isinstance(member.value, str) and member.value == name:
                return member
        member = cls.__members__.get(name)
        if member is None:
            raise DeserializeError(ErrorKind.CUSTOM, f"unknown variant `{name}`")
        return member

    def _read_newtype(self, tp: Any) -> Any:
        self.scanner.parse_at()
        return tp(self.read(tp.__supertype__))

    def _read_struct(self, cls: type) -> Any:
        scanner = self.scanner
        scanner.parse_at()
        # End of input after something was read marks the end of a list of structs.
        if scanner.index == len(scanner.data) and scanner.index > 0:
            raise DeserializeError(ErrorKind.EOF_WHILE_PARSING_OBJECT)
        fields = [field for field in dataclasses.fields(cls) if field.init]
        scanner.struct_size_hint = len(fields)
        try:
            access = _SeqAccess(scanner)
            values = {}
            for position, field in enumerate(fields):
                tp = field.type
                value = access.next_element(lambda tp=tp: self.read(tp))
                if value is _END:
                    raise DeserializeError(
                        ErrorKind.CUSTOM,
                        f"invalid length {position}, expected struct "
                        f"{cls.__name__} with {len(fields)} elements",
                    )
                values[field.name] = value
        finally:
            scanner.struct_size_hint = None
        return cls(**values)


def from_slice(data: bytes | bytearray | memoryview, cls: Any) -> Any:
    """Read a value of type ``cls`` from bytes of AT response text."""
    scanner = Scanner(trim_ascii_whitespace(data))
    value = _Reader(scanner).read(cls)
    scanner.end()
    return value


def from_str(text: str, cls: Any) -> Any:
    """Read a value of type ``cls`` from a string of AT response text."""
    return from_slice(text.encode("utf-8"), cls)
"""Type markers that give Python values the widths AT parameters carry."""

from __future__ import annotations

import typing
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class IntType:
    """A fixed-width integer type, signed or unsigned."""

    bits: int
    signed: bool

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def check(self, value: int) -> int:
        """Return ``value`` if it fits this type; raise otherwise."""
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected an integer, got {type(value).__name__}")
        if not self.min_value <= value <= self.max_value:
            raise OverflowError(f"{value} does not fit in {self}")
        return value

    def __str__(self) -> str:
        return f"{'i' if self.signed else 'u'}{self.bits}"


@dataclass(frozen=True)
class FloatType:
    """A floating point type of single or double precision."""

    bits: int


@dataclass(frozen=True)
class CharType:
    """A single character value."""


U8 = IntType(8, False)
U16 = IntType(16, False)
U32 = IntType(32, False)
U64 = IntType(64, False)
U128 = IntType(128, False)
I8 = IntType(8, True)
I16 = IntType(16, True)
I32 = IntType(32, True)
I64 = IntType(64, True)
I128 = IntType(128, True)
USIZE = U64
ISIZE = I64

F32 = FloatType(32)
F64 = FloatType(64)

CHAR = CharType()

DEFAULT_INT = I64


def int_type_of(annotation: Any) -> IntType | None:
    """Return the integer type an annotation describes, or None if it is not one.

    Accepts an ``IntType`` itself, ``Annotated[int, <IntType>]`` and plain ``int``,
    which stands for a signed 64-bit integer.
    """
    if isinstance(annotation, IntType):
        return annotation
    if typing.get_origin(annotation) is typing.Annotated:
        base, *metadata = typing.get_args(annotation)
        for item in metadata:
            if isinstance(item, IntType):
                return item
        return int_type_of(base)
    if annotation is int:
        return DEFAULT_INT
    return None
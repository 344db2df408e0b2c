"""Length-delimited byte payloads such as ``4,"ABCD"``."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import DeserializeError, ErrorKind

_LENGTH = re.compile(rb"\+?[0-9]+")
_USIZE_MAX = (1 << 64) - 1


@dataclass
class LengthDelimited:
    """A payload preceded by its length.

    For quoted payloads the length excludes the surrounding double quotes.
    """

    len: int
    bytes: bytes


def _parse_len(raw: bytes) -> int:
    if _LENGTH.fullmatch(raw) is None:
        raise DeserializeError(ErrorKind.CUSTOM, "expected an unsigned int")
    value = int(raw)
    if value > _USIZE_MAX:
        raise DeserializeError(ErrorKind.CUSTOM, "expected an unsigned int")
    return value


def parse_length_delimited(
    data: bytes | bytearray | memoryview, capacity: int | None = None
) -> LengthDelimited:
    """Read ``<len>,<payload>`` where the payload may be wrapped in quotes.

    ``capacity`` bounds the payload size; ``None`` means no bound.
    """
    data = bytes(data)
    pos = data.find(b",")
    if pos < 0:
        raise DeserializeError(ErrorKind.CUSTOM, "expected a comma")
    length = _parse_len(data[:pos])
    start = pos + 1
    end = start + length
    if len(data) >= end + 2 and data[start] == ord('"') and data[end + 1] == ord('"'):
        start += 1
        end += 1
    if end > len(data):
        raise DeserializeError(ErrorKind.CUSTOM, "incorrect slice size")
    payload = data[start:end]
    if capacity is not None and len(payload) > capacity:
        raise DeserializeError(ErrorKind.CUSTOM, "incorrect slice size")
    return LengthDelimited(len=length, bytes=payload)
"""Serializer options and the bounded output buffer."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import BufferFullError


@dataclass
class SerializeOptions:
    """Options that shape the command text written by the serializer."""

    value_sep: bool = True
    """Write ``=`` between the command and its parameters."""
    cmd_prefix: str = "AT"
    """Prefix written before the command."""
    termination: str = "\r\n"
    """Characters written after the last parameter."""
    quote_escape_strings: bool = True
    """Surround strings with double quotes."""


class OutputBuffer:
    """A byte buffer that refuses to grow past ``capacity`` bytes.

    A ``capacity`` of None means the buffer is unbounded.
    """

    def __init__(self, capacity: int | None = None) -> None:
        if capacity is not None and capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._data = bytearray()

    def __len__(self) -> int:
        return len(self._data)

    def push(self, data: bytes | bytearray | memoryview | int) -> None:
        """Append a byte or bytes; nothing is written if they do not all fit."""
        chunk = bytes((data,)) if isinstance(data, int) else bytes(data)
        if self.capacity is not None and len(self._data) + len(chunk) > self.capacity:
            raise BufferFullError()
        self._data += chunk

    def unpush(self, count: int = 1) -> None:
        """Drop the last ``count`` bytes written."""
        if count < 0 or count > len(self._data):
            raise ValueError("cannot remove more bytes than were written")
        if count:
            del self._data[-count:]

    def getvalue(self) -> bytes:
        """Return the bytes written so far."""
        return bytes(self._data)
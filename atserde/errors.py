"""Exceptions raised while reading or writing AT command text."""

from __future__ import annotations

import enum

_CUSTOM_MESSAGE_LIMIT = 64


class ErrorKind(enum.Enum):
    """The ways reading AT response text can fail."""

    EOF_WHILE_PARSING_OBJECT = enum.auto()
    EOF_WHILE_PARSING_STRING = enum.auto()
    EOF_WHILE_PARSING_NUMBER = enum.auto()
    EOF_WHILE_PARSING_VALUE = enum.auto()
    EXPECTED_SOME_IDENT = enum.auto()
    EXPECTED_SOME_VALUE = enum.auto()
    INVALID_NUMBER = enum.auto()
    INVALID_TYPE = enum.auto()
    INVALID_UNICODE_CODE_POINT = enum.auto()
    TRAILING_CHARACTERS = enum.auto()
    TRAILING_COMMA = enum.auto()
    CUSTOM = enum.auto()

    @property
    def description(self) -> str:
        """Human readable text for this kind of failure."""
        return _DESCRIPTIONS.get(self, "Invalid AT Command string")


_DESCRIPTIONS = {
    ErrorKind.EOF_WHILE_PARSING_OBJECT: "EOF while parsing an object.",
    ErrorKind.EOF_WHILE_PARSING_STRING: "EOF while parsing a string.",
    ErrorKind.EOF_WHILE_PARSING_VALUE: "EOF while parsing an AT Command string.",
    ErrorKind.EXPECTED_SOME_IDENT: (
        "Expected to parse either a `true`, `false`, or a `null`."
    ),
    ErrorKind.EXPECTED_SOME_VALUE: (
        "Expected this character to start an AT Command string."
    ),
    ErrorKind.INVALID_NUMBER: "Invalid number.",
    ErrorKind.INVALID_TYPE: "Invalid type",
    ErrorKind.INVALID_UNICODE_CODE_POINT: "Invalid unicode code point.",
    ErrorKind.TRAILING_CHARACTERS: (
        "AT Command string has non-whitespace trailing characters after the value."
    ),
    ErrorKind.CUSTOM: (
        "AT Command string does not match deserializer\u2019s expected format."
    ),
}


class AtError(Exception):
    """Base class of every error raised by this package."""


class DeserializeError(AtError):
    """Reading AT response text failed."""

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        if message is not None and kind is ErrorKind.CUSTOM:
            message = str(message)[:_CUSTOM_MESSAGE_LIMIT]
        self.kind = kind
        self.message = message
        super().__init__(message if message else kind.description)

    def __repr__(self) -> str:
        return f"DeserializeError({self.kind.name}, {self.message!r})"


class SerializeError(AtError):
    """Writing an AT command failed."""


class BufferFullError(SerializeError):
    """The output buffer has no room for more bytes."""

    def __init__(self, message: str = "Buffer is full") -> None:
        super().__init__(message)
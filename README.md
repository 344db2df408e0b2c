# atserde

`atserde` writes Python dataclasses as AT command strings and reads AT
command responses back into dataclasses and other typed values. It has
no dependencies outside the standard library.

## Serializing commands

The fields of a dataclass become the command parameters, in declaration
order. The command name is passed separately.

```python
from dataclasses import dataclass
from typing import Optional

from atserde.ser import to_string


@dataclass
class SetProfile:
    profile: int
    apn: Optional[str] = None


to_string(SetProfile(1, "apn.example.com"), "+UPSD")
# 'AT+UPSD=1,"apn.example.com"\r\n'

to_string(SetProfile(1), "+UPSD")
# 'AT+UPSD=1\r\n'
```

A field holding `None` removes the comma written before it, so trailing
optional parameters are simply left out. A dataclass nested inside
another writes its fields in place, with no prefix or termination of
its own.

Functions in `atserde.ser`:

- `to_string(value, cmd, options=None, capacity=None)` returns a `str`.
- `to_bytes(value, cmd, options=None, capacity=None)` returns `bytes`.
- `to_slice(value, cmd, buf, options=None)` writes into a `bytearray`
  (or writable `memoryview`) and returns the number of bytes written.

When the output would exceed `capacity` or the length of `buf`,
`atserde.errors.BufferFullError` is raised.

`atserde.options.SerializeOptions` controls the output:

| option                 | default  | effect                                           |
|------------------------|----------|--------------------------------------------------|
| `value_sep`            | `True`   | write `=` between the command and its parameters |
| `cmd_prefix`           | `"AT"`   | text written before the command                  |
| `termination`          | `"\r\n"` | text written after the last parameter            |
| `quote_escape_strings` | `True`   | surround strings (and hex strings) with `"`      |

Values are written as follows: `bool` as `true`/`false`; integers in
decimal; floats in plain decimal notation without an exponent; `str` in
quotes (unless disabled); `bytes` as they are; a member of an
`enum.Enum` as its position in the enum; `HexStr` and `HexBytes` as
their hex text. `atserde.ser.Variant(index, values)` writes a
data-carrying enum variant as its index followed by its values, for
example `Variant(4, (15,))` becomes `4,15`.

Integer fields annotated with a width from `atserde.fields` (for
example `Annotated[int, U8]`) are checked to fit that width before they
are written; `Annotated[float, F32]` writes the float at single
precision, and `Annotated[str, CHAR]` writes a single character
without quotes.

## Parsing responses

```python
from dataclasses import dataclass
from typing import Optional

from atserde.de import from_str


@dataclass
class Config:
    p1: int
    p2: int
    p3: Optional[bool]


from_str("+CFG: 2,56, true", Config)
# Config(p1=2, p2=56, p3=True)

from_str("+CFG: 2,56", Config)
# Config(p1=2, p2=56, p3=None)
```

`from_str(text, cls)` and `from_slice(data, cls)` read a value of the
given type. A leading `+CMD:` prefix is skipped, surrounding whitespace
is ignored, and anything left over after the value raises an error.

Supported types:

- `bool`, `int` (signed 64-bit), `float`, `str`, `bytes`
- integers of a fixed width: `Annotated[int, U8]`, `Annotated[int, I16]`
  and the other `IntType` values in `atserde.fields`; numbers that do
  not fit raise an error
- a single character: `Annotated[str, CHAR]`
- `Optional[T]`, which reads as `None` when the input ends or the next
  byte is `,` or `+`
- `list[T]`, for example a list of dataclasses from a multi-line response
- `enum.Enum` subclasses, matched by member value or by member name
- `typing.NewType` wrappers around any of these
- nested dataclasses
- `HexStr`, `HexBytes` and `LengthDelimited` (below)

`Annotated[str, N]` and `Annotated[bytes, N]` limit the value to `N`
bytes. A quoted string ends at the first unescaped `"`; an unquoted
string is a run of letters, digits and whitespace. A `bytes` field takes
everything up to the next comma.

When the last field of a dataclass is not preceded by a comma in the
input, a string or bytes value in that field takes the rest of the
input verbatim. This suits responses such as `+CMGR` whose free text
follows a line break:

```python
@dataclass
class Message:
    state: str
    sender: str
    size: Optional[int]
    date: str
    message: str

from_str('+CMGR: "REC UNREAD","+10000000000",12,"23/11/21,13:31:39+04"\r\nINFO,WWW', Message)
# Message(..., message='INFO,WWW')
```

Field annotations must be real objects: a module that uses
`from __future__ import annotations` leaves them as strings, which
raises `TypeError`.

## Hex values

`atserde.hexstr.HexStr` is an unsigned integer of `bits` width (8, 16,
32, 64 or 128; default 32) written in hex. When reading, a `0x`/`0X`
prefix is dropped and any character that is not a hex digit is
ignored:

```python
from typing import Annotated

from atserde.de import from_str
from atserde.fields import U64
from atserde.hexstr import HexStr

from_str("+CCID: 0x8d", HexStr).val
# 141
from_str("+CCID: 0xFee-dfA-CE-C-Afe-BE-3F", Annotated[HexStr, U64]).val
# 18369614221190020671
```

When writing, `HexStr` options choose the `0x` prefix
(`add_0x_with_encoding`), upper or lower case (`hex_in_caps`), padding
with leading zeros to the full width (`skip_last_0_values=False`), and
a `delimiter` every `delimiter_after_nibble_count` digits:

```python
HexStr(val=0x55AA, bits=32, delimiter="-", delimiter_after_nibble_count=2,
       skip_last_0_values=False).format()
# '00-00-55-AA'
```

`HexBytes` does the same for a byte array. Read it with
`Annotated[HexBytes, 16]` to get exactly 16 bytes. `parse_hex_int(text,
bits)` and `parse_hex_bytes(text, size)` are available directly.

## Length-delimited payloads

`atserde.length_delimited.LengthDelimited` reads a `<len>,<payload>`
pair. The payload may be wrapped in quotes not counted in the length,
and may itself contain commas, so it must be the last field:

```python
from dataclasses import dataclass
from typing import Annotated

from atserde.de import from_slice
from atserde.fields import I8, U8
from atserde.length_delimited import LengthDelimited


@dataclass
class Payload:
    ctx: Annotated[int, U8]
    id: Annotated[int, I8]
    payload: Annotated[LengthDelimited, 32]


from_slice(b'1,-1,9,"ABCD,1234"', Payload).payload
# LengthDelimited(len=9, bytes=b'ABCD,1234')
```

`parse_length_delimited(data, capacity=None)` parses such a pair on its
own.

## Errors

All errors derive from `atserde.errors.AtError`. Parsing failures raise
`DeserializeError`, whose `kind` is an `ErrorKind` such as
`INVALID_NUMBER`, `INVALID_TYPE`, `EOF_WHILE_PARSING_STRING` or
`TRAILING_CHARACTERS`. Serialization raises `SerializeError`, in
practice its subclass `BufferFullError`.

## What it does not do

`atserde` only converts between values and text. It does not open
serial ports, talk to modems, wait for responses or split a stream into
individual responses; pass it a complete command or response.
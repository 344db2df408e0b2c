import enum
from dataclasses import dataclass
from typing import Annotated, NewType, Optional

import pytest

from atserde.de import from_slice, from_str
from atserde.errors import DeserializeError, ErrorKind
from atserde.fields import CHAR, I8, I16, U8, U16, U32, U64, U128
from atserde.hexstr import HexBytes, HexStr
from atserde.length_delimited import LengthDelimited


@dataclass
class CFG:
    p1: Annotated[int, U8]
    p2: Annotated[int, I16]
    p3: bool


@dataclass
class CFGOption:
    p1: Annotated[int, U8]
    p2: Annotated[int, I16]
    p3: Optional[bool]


@dataclass
class CCID:
    ccid: Annotated[int, U128]


@dataclass
class CharHandle:
    c: Annotated[str, CHAR]


Handle = NewType("Handle", int)


@dataclass
class PayloadResponse:
    ctx: Annotated[int, U8]
    id: Annotated[int, I8]
    payload: Annotated[LengthDelimited, 32]


class PinStatusCode(enum.Enum):
    READY = "READY"
    SIM_PIN = "SIM PIN"
    PH_SIM_PIN = "PH-SIM PIN"


@dataclass
class PinStatus:
    code: PinStatusCode


@dataclass
class Item:
    a: int
    b: int


def test_simple_struct():
    assert from_str("+CFG: 2,56,false", CFG) == CFG(p1=2, p2=56, p3=False)


def test_simple_struct_optionals():
    assert from_str("+CFG: 2,56", CFGOption) == CFGOption(2, 56, None)
    assert from_str("+CFG: 2,56, true", CFGOption) == CFGOption(2, 56, True)
    assert from_str("+CFG: 2,56,false", CFGOption) == CFGOption(2, 56, False)


def test_missing_required_field():
    with pytest.raises(DeserializeError) as info:
        from_str("+CFG: 2,56", CFG)
    assert info.value.kind is ErrorKind.EOF_WHILE_PARSING_VALUE


def test_simple_string():
    @dataclass
    class StringTest:
        string: Annotated[str, 32]

    assert from_str('+CCID: "12345678901234567890"', StringTest) == StringTest(
        "12345678901234567890"
    )


def test_string_over_capacity():
    with pytest.raises(DeserializeError) as info:
        from_str('"abcdef"', Annotated[str, 4])
    assert info.value.kind is ErrorKind.CUSTOM


def test_cgmi_string():
    @dataclass
    class CGMI:
        id: Annotated[bytes, 32]

    assert from_slice(b"u-blox", CGMI) == CGMI(b"u-blox")


def test_u128():
    assert from_str("+CCID: 12345678901234567890123", CCID) == CCID(
        12345678901234567890123
    )


def test_char():
    assert from_str("+CCID: B", CharHandle) == CharHandle("B")


def test_newtype_struct():
    assert from_str("+CCID: 15", Handle) == 15


def test_char_vec_struct():
    assert from_str("+CCID: IMP_", Annotated[bytes, 4]) == b"IMP_"


def test_bytes_over_capacity():
    with pytest.raises(DeserializeError) as info:
        from_str("+CCID: IMPORT", Annotated[bytes, 4])
    assert info.value.kind is ErrorKind.CUSTOM


def test_trailing_cmgr_parsing():
    @dataclass
    class Message:
        state: str
        sender: str
        size: Optional[int]
        date: str
        message: str

    text = '+CMGR: "REC UNREAD","+SENDER",12,"23/11/21,13:31:39+04"\r\nINFO,WWW""a'
    assert from_str(text, Message) == Message(
        state="REC UNREAD",
        sender="+SENDER",
        size=12,
        date="23/11/21,13:31:39+04",
        message='INFO,WWW""a',
    )


def test_length_delimited():
    res = from_slice(b'1,-1,9,"ABCD,1234"', PayloadResponse)
    assert res.ctx == 1
    assert res.id == -1
    assert res.payload.len == 9
    assert res.payload.bytes == b"ABCD,1234"


def test_length_delimited_no_quotes():
    res = from_slice(b"1,-1,9,ABCD,1234", PayloadResponse)
    assert (res.ctx, res.id) == (1, -1)
    assert res.payload.len == 9
    assert res.payload.bytes == b"ABCD,1234"


def test_length_delimited_json():
    res = from_slice(b'1,-2,28,"{"cmd": "blink", "pin": "2"}"', PayloadResponse)
    assert (res.ctx, res.id) == (1, -2)
    assert res.payload.len == 28
    assert res.payload.bytes == b'{"cmd": "blink", "pin": "2"}'


@pytest.mark.parametrize(
    "text, width, expected",
    [
        ("+CCID: 0x8d", U8, 0x8D),
        ("+CCID: 8:d", U8, 0x8D),
        ("+CCID: 0x0B00", U16, 0x0B00),
        ("+CCID: D3AdB3ef", U32, 0xD3ADB3EF),
        ("+CCID: 0xFeedfACECAfeBE3F", U64, 0xFEEDFACECAFEBE3F),
        ("+CCID: 0xFee-dfA-CE-C-Afe-BE-3F", U64, 0xFEEDFACECAFEBE3F),
        ("+CCID: 0x1234567890abcdef1234567890abcdef", U128, 0x1234567890ABCDEF1234567890ABCDEF),
        (
            "+CCID: 0x12:34:56:78:90:ab:cd:ef:12:34:56:78:90:ab:cd:ef",
            U128,
            0x1234567890ABCDEF1234567890ABCDEF,
        ),
    ],
)
def test_parsing_a_hex_string(text, width, expected):
    value = from_str(text, Annotated[HexStr, width])
    assert value.val == expected
    assert value.bits == width.bits
    assert value.skip_last_0_values is True


def test_hex_str_arrays():
    value = from_str(
        "+CCID: 0x12:34:56:78:90:ab:cd:ef:12:34:56:78:90:ab:cd:ef",
        Annotated[HexBytes, 16],
    )
    assert value.val == bytes(
        [0x12, 0x34, 0x56, 0x78, 0x90, 0xAB, 0xCD, 0xEF] * 2
    )
    assert value.skip_last_0_values is False


def test_enum_unquoted_and_quoted():
    assert from_str("+CPIN: READY", PinStatus) == PinStatus(PinStatusCode.READY)
    assert from_str('+CPIN: "PH-SIM PIN"', PinStatus) == PinStatus(PinStatusCode.PH_SIM_PIN)
    assert from_str("+CPIN: SIM PIN", PinStatus) == PinStatus(PinStatusCode.SIM_PIN)


def test_enum_unknown_variant():
    with pytest.raises(DeserializeError) as info:
        from_str("+CPIN: BUSY", PinStatus)
    assert info.value.kind is ErrorKind.CUSTOM


def test_list_of_structs():
    assert from_str("1,2,3,4", list[Item]) == [Item(1, 2), Item(3, 4)]


def test_list_of_structs_with_prefixes():
    assert from_str("+CMD: 1,2\r\n+CMD: 3,4", list[Item]) == [Item(1, 2), Item(3, 4)]


def test_list_of_ints_runs_past_end():
    with pytest.raises(DeserializeError) as info:
        from_str("1,2,3", list[int])
    assert info.value.kind is ErrorKind.EOF_WHILE_PARSING_VALUE


def test_float_field():
    @dataclass
    class Pos:
        x: float
        n: int

    assert from_str("1.5,2", Pos) == Pos(1.5, 2)


def test_float_at_end_of_input():
    with pytest.raises(DeserializeError) as info:
        from_str("1.5", float)
    assert info.value.kind is ErrorKind.EOF_WHILE_PARSING_NUMBER


def test_nested_struct():
    @dataclass
    class Outer:
        first: Item
        flag: bool

    assert from_str("+CMD: 1,2,true", Outer) == Outer(Item(1, 2), True)


def test_whitespace_is_trimmed():
    assert from_slice(b"  15\r\n", int) == 15


def test_trailing_characters():
    with pytest.raises(DeserializeError) as info:
        from_str("15 x", int)
    assert info.value.kind is ErrorKind.TRAILING_CHARACTERS


@pytest.mark.parametrize("text", ["-1", "256"])
def test_unsigned_out_of_range(text):
    with pytest.raises(DeserializeError) as info:
        from_str(text, Annotated[int, U8])
    assert info.value.kind is ErrorKind.INVALID_NUMBER


def test_invalid_type():
    with pytest.raises(DeserializeError) as info:
        from_str("x", int)
    assert info.value.kind is ErrorKind.INVALID_TYPE


def test_bad_bool():
    with pytest.raises(DeserializeError) as info:
        from_str("tru", bool)
    assert info.value.kind is ErrorKind.EXPECTED_SOME_IDENT


def test_unsupported_type():
    with pytest.raises(TypeError):
        from_str("1", dict[str, int])


def test_option_before_next_command():
    @dataclass
    class Pair:
        a: int
        b: Optional[int]

    assert from_str("+CMD: 7", Pair) == Pair(7, None)
    assert from_str("+CMD: 7,8", Pair) == Pair(7, 8)
# wloc/protocol/wire.py
"""
Tag/wire-type message codec.

The location service speaks a protobuf-shaped wire format without a published
schema, so fields are read and written by hand. Only the four wire types the
service has been observed to emit are understood; anything else is fatal for
the message being read.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Union

from wloc.errors import TruncatedInputError, UnsupportedWireTypeError
from wloc.protocol.varint import decode_varint, encode_varint


class WireType(IntEnum):
    VARINT = 0
    FIXED64 = 1
    LENGTH_DELIMITED = 2
    FIXED32 = 5

    @classmethod
    def from_raw(cls, raw: int) -> "WireType":
        try:
            return cls(raw)
        except ValueError:
            raise UnsupportedWireTypeError(raw) from None


_FIXED_WIDTH = {
    WireType.FIXED64: 8,
    WireType.FIXED32: 4,
}


@dataclass(frozen=True)
class WireField:
    """
    One decoded field.

    Parameters
    ----------
    field_number : int
        Field number from the tag.
    wire_type : WireType
        How the payload was encoded.
    payload : int | bytes
        The varint value for VARINT fields, the raw bytes otherwise
        (without the length prefix for LENGTH_DELIMITED).
    """
    field_number: int
    wire_type: WireType
    payload: Union[int, bytes]


def read_tag(buffer: bytes, offset: int) -> tuple[int, WireType, int]:
    """
    Read one tag. Returns (field_number, wire_type, next_offset).
    """
    tag, offset = decode_varint(buffer, offset)
    return tag >> 3, WireType.from_raw(tag & 0x07), offset


def write_tag(field_number: int, wire_type: int) -> bytes:
    return encode_varint((field_number << 3) | int(wire_type))


def skip_field(buffer: bytes, offset: int, wire_type: int) -> int:
    """
    Advance past a field value of the given wire type and return the offset
    just after it.
    """
    wire_type = WireType.from_raw(wire_type)
    if wire_type is WireType.VARINT:
        _, offset = decode_varint(buffer, offset)
        return offset
    if wire_type is WireType.LENGTH_DELIMITED:
        length, offset = decode_varint(buffer, offset)
        end = offset + length
        if end > len(buffer):
            raise TruncatedInputError("length-delimited field")
        return end
    end = offset + _FIXED_WIDTH[wire_type]
    if end > len(buffer):
        raise TruncatedInputError(f"fixed{_FIXED_WIDTH[wire_type] * 8} field")
    return end


def read_field(buffer: bytes, offset: int) -> tuple[WireField, int]:
    """
    Read a tag and its value. Returns (field, next_offset).
    """
    field_number, wire_type, offset = read_tag(buffer, offset)
    if wire_type is WireType.VARINT:
        value, end = decode_varint(buffer, offset)
        return WireField(field_number, wire_type, value), end

    end = skip_field(buffer, offset, wire_type)
    if wire_type is WireType.LENGTH_DELIMITED:
        # payload starts after the length prefix
        _, offset = decode_varint(buffer, offset)
    return WireField(field_number, wire_type, bytes(buffer[offset:end])), end


def iter_fields(buffer: bytes) -> Iterator[WireField]:
    """
    Walk every top-level field in `buffer`, in order.

    Unknown field numbers are yielded like any other; callers ignore what
    they do not need.
    """
    offset = 0
    while offset < len(buffer):
        field, offset = read_field(buffer, offset)
        yield field


def write_varint_field(field_number: int, value: int) -> bytes:
    return write_tag(field_number, WireType.VARINT) + encode_varint(value)


def write_bytes_field(field_number: int, data: bytes) -> bytes:
    return (
        write_tag(field_number, WireType.LENGTH_DELIMITED)
        + encode_varint(len(data))
        + data
    )

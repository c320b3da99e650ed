# wloc/protocol/varint.py
"""
Base-128 variable-length integers, as used by the location service wire format.
"""

from wloc.errors import TruncatedInputError, VarintOverflowError

UINT64_MASK = 0xFFFFFFFFFFFFFFFF
INT64_MAX = 0x7FFFFFFFFFFFFFFF


def encode_varint(value: int) -> bytes:
    """
    Encode a non-negative integer as little-endian 7-bit groups.

    Parameters
    ----------
    value
        Integer to encode. Python ints are unbounded, so 64-bit
        coordinates encode without truncation.

    Returns
    -------
    bytes
        The encoded groups, continuation bit set on all but the last byte.
    """
    if value < 0:
        raise ValueError(f"varint value must be non-negative, got {value}")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def decode_varint(buffer: bytes, offset: int) -> tuple[int, int]:
    """
    Decode a varint from `buffer` starting at `offset`.

    Returns (value, next_offset). Raises TruncatedInputError when the buffer
    ends before a byte with the continuation bit clear.
    """
    result = 0
    shift = 0
    pos = offset
    end = len(buffer)
    while pos < end:
        b = buffer[pos]
        pos += 1
        result |= (b & 0x7F) << shift
        if not b & 0x80:
            return result, pos
        shift += 7
    raise TruncatedInputError("varint")


def to_signed64(value: int) -> int:
    """
    Reinterpret an unsigned wire value as a two's-complement int64.

    Raises VarintOverflowError for values wider than 64 bits.
    """
    if not 0 <= value <= UINT64_MASK:
        raise VarintOverflowError(value)
    if value > INT64_MAX:
        value -= 1 << 64
    return value


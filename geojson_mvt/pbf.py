"""
The subset of the protobuf wire format needed to write vector tiles.

Writers append to a caller-owned `bytearray`. Readers exist so payloads can be
walked back for inspection and tests.
"""
from __future__ import annotations
from typing import Iterable, Iterator, Tuple, Union

from .errors import EncodingOverflow

WIRE_VARINT = 0
WIRE_FIXED64 = 1
WIRE_LENGTH_DELIMITED = 2
WIRE_FIXED32 = 5

UINT64_MAX = (1 << 64) - 1
INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1

# largest field number protobuf allows
MAX_FIELD_NUMBER = (1 << 29) - 1


# ------------------------- writers ------------------------- #
def write_varint(buf: bytearray, value: int) -> None:
    if value < 0 or value > UINT64_MAX:
        raise EncodingOverflow(f"varint value {value} outside [0, 2**64 - 1]")
    while value > 0x7F:
        buf.append((value & 0x7F) | 0x80)
        value >>= 7
    buf.append(value)


def zigzag(n: int) -> int:
    if n < INT32_MIN or n > INT32_MAX:
        raise EncodingOverflow(f"zigzag value {n} outside 32-bit signed range")
    return (n << 1) ^ (n >> 31)


def unzigzag(u: int) -> int:
    return (u >> 1) ^ -(u & 1)


def write_tag(buf: bytearray, field_number: int, wire_type: int) -> None:
    if not 1 <= field_number <= MAX_FIELD_NUMBER:
        raise EncodingOverflow(f"field number {field_number} out of range")
    write_varint(buf, (field_number << 3) | wire_type)


def write_length_delimited(buf: bytearray, field_number: int, payload: Union[bytes, bytearray]) -> None:
    write_tag(buf, field_number, WIRE_LENGTH_DELIMITED)
    write_varint(buf, len(payload))
    buf.extend(payload)


def write_string(buf: bytearray, field_number: int, text: str) -> None:
    write_length_delimited(buf, field_number, text.encode("utf-8"))


def write_varint_field(buf: bytearray, field_number: int, value: int) -> None:
    write_tag(buf, field_number, WIRE_VARINT)
    write_varint(buf, value)


def write_packed_varints(buf: bytearray, field_number: int, values: Iterable[int]) -> None:
    packed = bytearray()
    for v in values:
        write_varint(packed, v)
    write_length_delimited(buf, field_number, packed)


# ------------------------- readers ------------------------- #
def read_varint(data: Union[bytes, bytearray], pos: int = 0) -> Tuple[int, int]:
    """Return (value, next_pos) for the varint starting at `pos`."""
    result = 0
    shift = 0
    while True:
        if pos >= len(data):
            raise ValueError("truncated varint")
        b = data[pos]
        pos += 1
        result |= (b & 0x7F) << shift
        if not b & 0x80:
            return result, pos
        shift += 7
        if shift >= 70:
            raise ValueError("varint longer than 10 bytes")


def read_packed_varints(data: Union[bytes, bytearray]) -> list:
    values = []
    pos = 0
    while pos < len(data):
        v, pos = read_varint(data, pos)
        values.append(v)
    return values


def iter_fields(data: Union[bytes, bytearray]) -> Iterator[Tuple[int, int, Union[int, bytes]]]:
    """
    Yield (field_number, wire_type, value) for each field of a message body.

    Varints come back as ints, length-delimited fields as raw bytes and the
    fixed-width wire types as their little-endian bytes.
    """
    pos = 0
    end = len(data)
    while pos < end:
        tag, pos = read_varint(data, pos)
        field_number, wire_type = tag >> 3, tag & 0x07
        if wire_type == WIRE_VARINT:
            value, pos = read_varint(data, pos)
        elif wire_type == WIRE_LENGTH_DELIMITED:
            length, pos = read_varint(data, pos)
            if pos + length > end:
                raise ValueError(f"field {field_number} overruns message")
            value = bytes(data[pos:pos + length])
            pos += length
        elif wire_type == WIRE_FIXED64:
            value = bytes(data[pos:pos + 8])
            pos += 8
        elif wire_type == WIRE_FIXED32:
            value = bytes(data[pos:pos + 4])
            pos += 4
        else:
            raise ValueError(f"unsupported wire type {wire_type} for field {field_number}")
        yield field_number, wire_type, value

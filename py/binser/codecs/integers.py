"""Variable-length integer codec.

All integer types wider than a byte share one wire format. The first byte
is a control byte: its high bit is set when the value is negative and its
four low bits hold the number of magnitude bytes that follow. The absolute
value is stored little endian with leading zero bytes trimmed, so zero is
written as a lone control byte.

Bits 6-4 of the control byte are reserved and ignored on read. A value
written from any integer width can be read into any other width as long as
the number fits the target range.
"""

import operator
from typing import Any

from binser.codecs.base import Codec
from binser.errors import ErrorKind, SerializationError
from binser.stream import ByteReader, ByteWriter

SIGN_BIT = 0x80
SIZE_MASK = 0x0F
MAX_WIDTH = 8


def pack_int(value: int, out: ByteWriter, type_name: str) -> None:
    """Write ``value`` as a control byte followed by its minimal magnitude."""
    magnitude = abs(value)
    size = (magnitude.bit_length() + 7) // 8
    if size > MAX_WIDTH:
        raise SerializationError.writing(type_name, ErrorKind.OVERFLOW)
    control = size | (SIGN_BIT if value < 0 else 0)
    out.write(bytes((control,)) + magnitude.to_bytes(size, "little"), type_name)


def unpack_int(inp: ByteReader, width: int, type_name: str) -> int:
    """Read one integer record whose magnitude may use at most ``width`` bytes."""
    control = inp.read_byte(type_name)
    size = control & SIZE_MASK
    # check if the serialized number is too big for the target
    if size > width:
        raise SerializationError.reading(type_name, ErrorKind.OVERFLOW)
    magnitude = int.from_bytes(inp.read_exact(size, type_name), "little")
    return -magnitude if control & SIGN_BIT else magnitude


class IntCodec(Codec[int]):
    """Codec for a fixed-width signed or unsigned integer type."""

    def __init__(self, type_name: str, bits: int, signed: bool) -> None:
        if bits % 8 or not 16 <= bits <= 64:
            raise ValueError(f"Unsupported integer width: {bits}")
        self._name = type_name
        self.width = bits // 8
        self.signed = signed
        if signed:
            self.min_value = -(1 << (bits - 1))
            self.max_value = (1 << (bits - 1)) - 1
        else:
            self.min_value = 0
            self.max_value = (1 << bits) - 1

    @property
    def name(self) -> str:
        return self._name

    def serialize(self, item: int, out: ByteWriter) -> None:
        try:
            value = operator.index(item)
        except TypeError as e:
            raise SerializationError.writing(self.name) from e
        if not self.min_value <= value <= self.max_value:
            raise SerializationError.writing(self.name, ErrorKind.OVERFLOW)
        pack_int(value, out, self.name)

    def deserialize(self, inp: ByteReader) -> int:
        value = unpack_int(inp, self.width, self.name)
        if not self.min_value <= value <= self.max_value:
            raise SerializationError.reading(self.name, ErrorKind.OVERFLOW)
        return value

    def from_plain(self, data: Any) -> int:
        return int(data)


INT16 = IntCodec("int16", 16, signed=True)
INT32 = IntCodec("int32", 32, signed=True)
INT64 = IntCodec("int64", 64, signed=True)
UINT16 = IntCodec("uint16", 16, signed=False)
UINT32 = IntCodec("uint32", 32, signed=False)
UINT64 = IntCodec("uint64", 64, signed=False)
# Wide character code units travel as 32-bit signed integers
WCHAR = IntCodec("wchar", 32, signed=True)

INTEGER_CODECS = (INT16, INT32, INT64, UINT16, UINT32, UINT64, WCHAR)

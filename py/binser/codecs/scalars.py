"""Byte, character, boolean and floating point codecs."""

import math
import operator
import re
import struct
from typing import Any

from binser.codecs.base import Codec
from binser.errors import ErrorKind, SerializationError
from binser.stream import ByteReader, ByteWriter

# Enough significant digits to reproduce any double bit for bit
FLOAT_PRECISION = 35
# Longest token "%.35g" can produce, with room to spare
MAX_FLOAT_TOKEN = 64

INF_TOKEN = b"inf"
NINF_TOKEN = b"ninf"
NAN_TOKEN = b"NaN"

_NUMBER = re.compile(rb"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\Z")


class ByteCodec(Codec[int]):
    """Single raw byte holding a signed or unsigned 8-bit integer."""

    def __init__(self, type_name: str, signed: bool) -> None:
        self._name = type_name
        self.signed = signed

    @property
    def name(self) -> str:
        return self._name

    def serialize(self, item: int, out: ByteWriter) -> None:
        try:
            value = operator.index(item)
        except TypeError as e:
            raise SerializationError.writing(self.name) from e
        low, high = (-128, 127) if self.signed else (0, 255)
        if not low <= value <= high:
            raise SerializationError.writing(self.name, ErrorKind.OVERFLOW)
        out.write_byte(value & 0xFF, self.name)

    def deserialize(self, inp: ByteReader) -> int:
        value = inp.read_byte(self.name)
        if self.signed and value > 127:
            value -= 256
        return value

    def from_plain(self, data: Any) -> int:
        return int(data)


class CharCodec(Codec[str]):
    """Single raw byte holding a one character string (latin-1 code unit)."""

    @property
    def name(self) -> str:
        return "char"

    def serialize(self, item: str, out: ByteWriter) -> None:
        if not isinstance(item, str) or len(item) != 1:
            raise SerializationError.writing(self.name)
        try:
            data = item.encode("latin-1")
        except UnicodeEncodeError as e:
            raise SerializationError.writing(self.name, ErrorKind.OVERFLOW) from e
        out.write(data, self.name)

    def deserialize(self, inp: ByteReader) -> str:
        return inp.read_exact(1, self.name).decode("latin-1")


class BoolCodec(Codec[bool]):
    """Boolean written as the ASCII digit '1' or '0'."""

    @property
    def name(self) -> str:
        return "bool"

    def serialize(self, item: bool, out: ByteWriter) -> None:
        out.write(b"1" if item else b"0", self.name)

    def deserialize(self, inp: ByteReader) -> bool:
        ch = inp.read(1)
        if ch == b"1":
            return True
        if ch == b"0":
            return False
        raise SerializationError.reading(self.name, ErrorKind.MALFORMED)

    def from_plain(self, data: Any) -> bool:
        return bool(data)


def format_float(value: float) -> bytes:
    """Render ``value`` as a wire token, without the trailing space."""
    if value == math.inf:
        return INF_TOKEN
    elif value == -math.inf:
        return NINF_TOKEN
    elif value < math.inf:
        return ("%.*g" % (FLOAT_PRECISION, value)).encode("ascii")
    else:
        return NAN_TOKEN


class FloatCodec(Codec[float]):
    """Floating point number written as a decimal token and a space.

    The three IEEE special values use the tokens ``inf``, ``ninf`` and
    ``NaN``. Single precision values are rounded to the nearest float32
    before they are written and after they are parsed.
    """

    def __init__(self, type_name: str, single: bool = False) -> None:
        self._name = type_name
        self.single = single

    @property
    def name(self) -> str:
        return self._name

    def _narrow(self, value: float, reading: bool) -> float:
        if not self.single:
            return value
        try:
            return struct.unpack("<f", struct.pack("<f", value))[0]
        except OverflowError as e:
            error = SerializationError.reading if reading else SerializationError.writing
            raise error(self.name, ErrorKind.OVERFLOW) from e

    def serialize(self, item: float, out: ByteWriter) -> None:
        try:
            value = float(item)
        except OverflowError as e:
            raise SerializationError.writing(self.name, ErrorKind.OVERFLOW) from e
        except (TypeError, ValueError) as e:
            raise SerializationError.writing(self.name) from e
        token = format_float(self._narrow(value, reading=False))
        out.write(token + b" ", self.name)

    def deserialize(self, inp: ByteReader) -> float:
        first = inp.read_exact(1, self.name)
        if first == b"i":
            self._expect(inp, INF_TOKEN[1:])
            value = math.inf
        elif first == b"n":
            self._expect(inp, NINF_TOKEN[1:])
            value = -math.inf
        elif first == b"N":
            self._expect(inp, NAN_TOKEN[1:])
            value = math.nan
        else:
            value = self._parse_number(first, inp)
            # the terminating space was consumed by _parse_number
            return value

        if inp.read(1) != b" ":
            raise SerializationError.reading(self.name)
        return value

    def _expect(self, inp: ByteReader, rest: bytes) -> None:
        if inp.read(len(rest)) != rest:
            raise SerializationError.reading(self.name)

    def _parse_number(self, first: bytes, inp: ByteReader) -> float:
        token = bytearray(first)
        while True:
            ch = inp.read(1)
            if ch == b" ":
                break
            if not ch or len(token) >= MAX_FLOAT_TOKEN:
                raise SerializationError.reading(self.name)
            token += ch
        if not _NUMBER.match(token):
            raise SerializationError.reading(self.name)
        return self._narrow(float(token), reading=True)

    def from_plain(self, data: Any) -> float:
        return float(data)


BYTE = ByteCodec("uint8", signed=False)
SBYTE = ByteCodec("int8", signed=True)
CHAR = CharCodec()
BOOL = BoolCodec()
FLOAT32 = FloatCodec("float32", single=True)
FLOAT64 = FloatCodec("float64")

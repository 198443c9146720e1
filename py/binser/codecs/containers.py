"""Container codecs.

Every container is written as an element count, encoded with the
variable-length unsigned integer codec, followed by each element encoded
with the element type's own codec. Pairs and complex numbers have a fixed
arity and skip the count. Raw byte buffers and strings write their payload
in one block after the count.

Errors raised while handling an element are re-raised with a line naming
the container, see SerializationError.wrap. Nesting depth is bounded only by
the interpreter's recursion limit; callers decoding untrusted input should
cap the depth of the types they hand in.
"""

from collections.abc import Iterable, Sized
from typing import Any, Generic, TypeVar

from binser.codecs.base import Codec
from binser.codecs.integers import UINT64, WCHAR
from binser.errors import ErrorKind, SerializationError
from binser.stream import ByteReader, ByteWriter

A = TypeVar("A")
B = TypeVar("B")
K = TypeVar("K")
V = TypeVar("V")
T = TypeVar("T")

# Element counts travel as 64-bit unsigned integers
LENGTH = UINT64


def _length(codec: Codec[Any], item: Sized) -> int:
    try:
        return len(item)
    except TypeError as e:
        raise SerializationError.writing(codec.name) from e


def _ordered(codec: Codec[Any], items: Iterable[Any]) -> list[Any]:
    try:
        return sorted(items)
    except TypeError as e:
        raise SerializationError.writing(codec.name) from e


class PairCodec(Codec[tuple[A, B]], Generic[A, B]):
    """Two values written first then second."""

    def __init__(self, first: Codec[A], second: Codec[B]) -> None:
        self.first = first
        self.second = second

    @property
    def name(self) -> str:
        return f"pair[{self.first.name}, {self.second.name}]"

    def serialize(self, item: tuple[A, B], out: ByteWriter) -> None:
        if _length(self, item) != 2:
            raise SerializationError.writing(self.name)
        with self.context(reading=False):
            self.first.serialize(item[0], out)
            self.second.serialize(item[1], out)

    def deserialize(self, inp: ByteReader) -> tuple[A, B]:
        with self.context(reading=True):
            first = self.first.deserialize(inp)
            second = self.second.deserialize(inp)
        return first, second

    def to_plain(self, value: tuple[A, B]) -> Any:
        return [self.first.to_plain(value[0]), self.second.to_plain(value[1])]

    def from_plain(self, data: Any) -> tuple[A, B]:
        first, second = data
        return self.first.from_plain(first), self.second.from_plain(second)


class ComplexCodec(Codec[complex]):
    """Complex number written as its real part then its imaginary part."""

    def __init__(self, part: Codec[float]) -> None:
        self.part = part

    @property
    def name(self) -> str:
        return f"complex[{self.part.name}]"

    def serialize(self, item: complex, out: ByteWriter) -> None:
        try:
            value = complex(item)
        except OverflowError as e:
            raise SerializationError.writing(self.name, ErrorKind.OVERFLOW) from e
        except (TypeError, ValueError) as e:
            raise SerializationError.writing(self.name) from e
        with self.context(reading=False):
            self.part.serialize(value.real, out)
            self.part.serialize(value.imag, out)

    def deserialize(self, inp: ByteReader) -> complex:
        with self.context(reading=True):
            real = self.part.deserialize(inp)
            imag = self.part.deserialize(inp)
        return complex(real, imag)

    def to_plain(self, value: complex) -> Any:
        return [value.real, value.imag]

    def from_plain(self, data: Any) -> complex:
        if isinstance(data, (list, tuple)):
            real, imag = data
            return complex(float(real), float(imag))
        return complex(data)


class SequenceCodec(Codec[list[T]], Generic[T]):
    """Ordered sequence of elements, kept in their original order."""

    def __init__(self, element: Codec[T]) -> None:
        self.element = element

    @property
    def name(self) -> str:
        return f"list[{self.element.name}]"

    def serialize(self, item: list[T], out: ByteWriter) -> None:
        size = _length(self, item)
        with self.context(reading=False):
            LENGTH.serialize(size, out)
            for value in item:
                self.element.serialize(value, out)

    def deserialize(self, inp: ByteReader) -> list[T]:
        item: list[T] = []
        self.deserialize_into(item, inp)
        return item

    def deserialize_into(self, target: list[T], inp: ByteReader) -> None:
        """Clear ``target`` and fill it with the elements read from ``inp``."""
        target.clear()
        with self.context(reading=True):
            size = LENGTH.deserialize(inp)
            for _ in range(size):
                target.append(self.element.deserialize(inp))

    def to_plain(self, value: list[T]) -> Any:
        return [self.element.to_plain(v) for v in value]

    def from_plain(self, data: Any) -> list[T]:
        return [self.element.from_plain(v) for v in data]


class BytesCodec(Codec[bytes]):
    """Raw byte buffer, written as a count and one block of bytes."""

    @property
    def name(self) -> str:
        return "bytes"

    def serialize(self, item: bytes, out: ByteWriter) -> None:
        try:
            data = memoryview(item).cast("B")
        except TypeError as e:
            raise SerializationError.writing(self.name) from e
        with self.context(reading=False):
            LENGTH.serialize(len(data), out)
            out.write(data, self.name)

    def deserialize(self, inp: ByteReader) -> bytes:
        with self.context(reading=True):
            size = LENGTH.deserialize(inp)
            return inp.read_exact(size, self.name)

    def deserialize_into(self, target: bytearray, inp: ByteReader) -> None:
        """Replace the contents of ``target`` with the buffer read from ``inp``."""
        target.clear()
        target += self.deserialize(inp)

    def from_plain(self, data: Any) -> bytes:
        if isinstance(data, str):
            return data.encode("utf-8")
        return bytes(data)


class BoolSequenceCodec(Codec[list[bool]]):
    """Booleans transcoded to '1'/'0' bytes and written as a raw buffer."""

    def __init__(self) -> None:
        self.buffer = BytesCodec()

    @property
    def name(self) -> str:
        return "list[bool]"

    def serialize(self, item: list[bool], out: ByteWriter) -> None:
        data = bytes(ord("1") if value else ord("0") for value in item)
        with self.context(reading=False):
            self.buffer.serialize(data, out)

    def deserialize(self, inp: ByteReader) -> list[bool]:
        with self.context(reading=True):
            data = self.buffer.deserialize(inp)
        return [ch == ord("1") for ch in data]

    def deserialize_into(self, target: list[bool], inp: ByteReader) -> None:
        target.clear()
        target.extend(self.deserialize(inp))

    def from_plain(self, data: Any) -> list[bool]:
        return [bool(v) for v in data]


class StringCodec(Codec[str]):
    """Text written as its UTF-8 code units in one block after the count."""

    @property
    def name(self) -> str:
        return "str"

    def serialize(self, item: str, out: ByteWriter) -> None:
        if not isinstance(item, str):
            raise SerializationError.writing(self.name)
        data = item.encode("utf-8", "surrogatepass")
        with self.context(reading=False):
            LENGTH.serialize(len(data), out)
        out.write(data, self.name)

    def deserialize(self, inp: ByteReader) -> str:
        with self.context(reading=True):
            size = LENGTH.deserialize(inp)
        data = inp.read_exact(size, self.name)
        try:
            return data.decode("utf-8", "surrogatepass")
        except UnicodeDecodeError as e:
            raise SerializationError.reading(self.name) from e

    def from_plain(self, data: Any) -> str:
        return str(data)


class WideStringCodec(Codec[str]):
    """Text written as a count of code points, each a ``wchar`` integer."""

    @property
    def name(self) -> str:
        return "wstr"

    def serialize(self, item: str, out: ByteWriter) -> None:
        if not isinstance(item, str):
            raise SerializationError.writing(self.name)
        with self.context(reading=False):
            LENGTH.serialize(len(item), out)
            for ch in item:
                WCHAR.serialize(ord(ch), out)

    def deserialize(self, inp: ByteReader) -> str:
        with self.context(reading=True):
            size = LENGTH.deserialize(inp)
            points = [WCHAR.deserialize(inp) for _ in range(size)]
        try:
            return "".join(map(chr, points))
        except ValueError as e:
            raise SerializationError.reading(self.name, ErrorKind.OVERFLOW) from e

    def from_plain(self, data: Any) -> str:
        return str(data)


class SetCodec(Codec[set[T]], Generic[T]):
    """Set of elements, written in ascending order."""

    def __init__(self, element: Codec[T]) -> None:
        self.element = element

    @property
    def name(self) -> str:
        return f"set[{self.element.name}]"

    def serialize(self, item: set[T], out: ByteWriter) -> None:
        ordered = _ordered(self, item)
        with self.context(reading=False):
            LENGTH.serialize(len(ordered), out)
            for value in ordered:
                self.element.serialize(value, out)

    def deserialize(self, inp: ByteReader) -> set[T]:
        item: set[T] = set()
        self.deserialize_into(item, inp)
        return item

    def deserialize_into(self, target: set[T], inp: ByteReader) -> None:
        """Clear ``target`` and insert the elements read from ``inp``."""
        target.clear()
        with self.context(reading=True):
            size = LENGTH.deserialize(inp)
            for _ in range(size):
                target.add(self.element.deserialize(inp))

    def to_plain(self, value: set[T]) -> Any:
        return [self.element.to_plain(v) for v in sorted(value)]

    def from_plain(self, data: Any) -> set[T]:
        return {self.element.from_plain(v) for v in data}


class MapCodec(Codec[dict[K, V]], Generic[K, V]):
    """Associative map, written as key/value pairs in ascending key order."""

    def __init__(self, key: Codec[K], value: Codec[V]) -> None:
        self.key = key
        self.value = value

    @property
    def name(self) -> str:
        return f"dict[{self.key.name}, {self.value.name}]"

    def serialize(self, item: dict[K, V], out: ByteWriter) -> None:
        keys = _ordered(self, item.keys())
        with self.context(reading=False):
            LENGTH.serialize(len(keys), out)
            for key in keys:
                self.key.serialize(key, out)
                self.value.serialize(item[key], out)

    def deserialize(self, inp: ByteReader) -> dict[K, V]:
        item: dict[K, V] = {}
        self.deserialize_into(item, inp)
        return item

    def deserialize_into(self, target: dict[K, V], inp: ByteReader) -> None:
        """Clear ``target`` and insert the pairs read from ``inp``.

        A key repeated in the stream keeps the last value read.
        """
        target.clear()
        with self.context(reading=True):
            size = LENGTH.deserialize(inp)
            for _ in range(size):
                key = self.key.deserialize(inp)
                target[key] = self.value.deserialize(inp)

    def to_plain(self, value: dict[K, V]) -> Any:
        return {self.key.to_plain(k): self.value.to_plain(v) for k, v in value.items()}

    def from_plain(self, data: Any) -> dict[K, V]:
        return {self.key.from_plain(k): self.value.from_plain(v) for k, v in data.items()}


class FixedArrayCodec(Codec[list[T]], Generic[T]):
    """Array whose length is part of its type.

    The length is still written in front of the elements. Reading a record
    whose length differs from the declared one fails right after the count
    is read; the elements are left in the stream.
    """

    def __init__(self, element: Codec[T], length: int) -> None:
        if length < 0:
            raise ValueError(f"Array length must not be negative: {length}")
        self.element = element
        self.length = length

    @property
    def name(self) -> str:
        return f"array[{self.element.name}, {self.length}]"

    def serialize(self, item: list[T], out: ByteWriter) -> None:
        if _length(self, item) != self.length:
            raise SerializationError(
                f"Error serializing object of type {self.name}, lengths do not match",
                ErrorKind.LENGTH_MISMATCH,
            )
        with self.context(reading=False):
            LENGTH.serialize(self.length, out)
            for value in item:
                self.element.serialize(value, out)

    def deserialize(self, inp: ByteReader) -> list[T]:
        item: list[Any] = [None] * self.length
        self.deserialize_into(item, inp)
        return item

    def deserialize_into(self, target: list[T], inp: ByteReader) -> None:
        """Overwrite the elements of ``target`` in place.

        On failure the elements read so far stay in ``target``.
        """
        if len(target) != self.length:
            raise ValueError(f"Target holds {len(target)} elements, expected {self.length}")
        with self.context(reading=True):
            size = LENGTH.deserialize(inp)
            if size == self.length:
                for i in range(self.length):
                    target[i] = self.element.deserialize(inp)
        if size != self.length:
            raise SerializationError(
                f"Error deserializing object of type {self.name}, lengths do not match",
                ErrorKind.LENGTH_MISMATCH,
            )

    def to_plain(self, value: list[T]) -> Any:
        return [self.element.to_plain(v) for v in value]

    def from_plain(self, data: Any) -> list[T]:
        return [self.element.from_plain(v) for v in data]


BYTES = BytesCodec()
STRING = StringCodec()
WSTRING = WideStringCodec()
BOOL_LIST = BoolSequenceCodec()

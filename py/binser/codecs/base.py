"""Abstract codec interface.

This module defines the Codec abstract base class. A codec knows how to
write one Python type to a ByteWriter and read it back from a ByteReader.
Container codecs are built from the codecs of their element types.
"""

import contextlib
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any, Generic, TypeVar

from binser.errors import SerializationError
from binser.stream import ByteReader, ByteWriter

T = TypeVar("T")


class Codec(ABC, Generic[T]):
    """Abstract base class for codecs.

    Implementations must consume exactly the bytes they produced, so records
    can be concatenated in one stream and read back one after another.
    """

    @abstractmethod
    def serialize(self, item: T, out: ByteWriter) -> None:
        """Write ``item`` to ``out``.

        Args:
            item: Value to serialize
            out: Destination stream

        Raises:
            SerializationError: If the value cannot be written
        """
        pass

    @abstractmethod
    def deserialize(self, inp: ByteReader) -> T:
        """Read one value from ``inp``.

        Args:
            inp: Source stream

        Returns:
            The value read

        Raises:
            SerializationError: If the stream does not hold a valid record
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the type expression of this codec.

        Returns:
            Type expression (e.g., "int32", "list[str]")
        """
        pass

    def to_plain(self, value: T) -> Any:
        """Convert a decoded value to plain YAML-friendly data."""
        return value

    def from_plain(self, data: Any) -> T:
        """Convert plain YAML data to a value this codec can serialize."""
        return data

    @contextlib.contextmanager
    def context(self, reading: bool) -> Iterator[None]:
        """Annotate element errors raised inside the block with this codec's name."""
        try:
            yield
        except SerializationError as e:
            raise e.wrap(self.name, reading) from e

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Codec) and type(other) is type(self) and other.name == self.name

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.name))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"

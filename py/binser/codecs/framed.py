"""Length-prefixed framing for externally serialized messages.

Messages produced by an external serializer (protocol buffers, msgpack, ...)
do not record where they end. This adapter writes their size as a
little-endian 32-bit unsigned integer in front of the payload, which makes
the record self-delimiting inside a binser stream.

Framing is opt-in: annotate a field as ``Framed[MyMessage]`` or build a
FramedCodec explicitly.
"""

import logging
import struct
from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from binser.codecs.base import Codec
from binser.errors import ErrorKind, SerializationError
from binser.stream import ByteReader, ByteWriter

logger = logging.getLogger(__name__)

# "<I" = uint32 little-endian
SIZE_FORMAT = "<I"
SIZE_LEN = struct.calcsize(SIZE_FORMAT)
MAX_PAYLOAD = 0xFFFFFFFF


@runtime_checkable
class ExternalMessage(Protocol):
    """Protocol for messages that serialize themselves to opaque bytes."""

    def to_bytes(self) -> bytes | None:
        """Serialize the message, returning None (or raising) on failure."""
        ...

    def from_bytes(self, data: bytes) -> bool:
        """Parse ``data`` into this message, returning False if it is invalid."""
        ...


M = TypeVar("M", bound=ExternalMessage)


class Framed(Generic[M]):
    """Annotation marker selecting the framing adapter for a message type.

    Usage:
        codec_for(list[Framed[MsgpackMessage]])
    """

    def __init__(self) -> None:
        raise TypeError("Framed is an annotation marker and cannot be instantiated")


class FramedCodec(Codec[M], Generic[M]):
    """Codec that frames an external message with a 32-bit size prefix."""

    def __init__(self, factory: Callable[[], M], type_name: str | None = None) -> None:
        """Initialize the adapter.

        Args:
            factory: Builds an empty message to parse into
            type_name: Name of the message type, defaults to the factory's name
        """
        self.factory = factory
        self.message_name = type_name or getattr(factory, "__name__", "message")

    @property
    def name(self) -> str:
        return f"framed[{self.message_name}]"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FramedCodec) and other.factory is self.factory

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.factory))

    def serialize(self, item: M, out: ByteWriter) -> None:
        try:
            payload = item.to_bytes()
        except Exception as e:
            raise SerializationError(
                "Error while serializing an external message object."
            ) from e
        if payload is None:
            raise SerializationError("Error while serializing an external message object.")
        if len(payload) > MAX_PAYLOAD:
            raise SerializationError(
                "Error while serializing an external message object, message too large.",
                ErrorKind.TOO_LARGE,
            )

        logger.trace(f"Framing {self.message_name} payload of {len(payload)} bytes")
        out.write(struct.pack(SIZE_FORMAT, len(payload)) + payload, self.name)

    def deserialize(self, inp: ByteReader) -> M:
        header = inp.read(SIZE_LEN)
        if len(header) != SIZE_LEN:
            raise SerializationError(
                "Error while deserializing an external message object.", ErrorKind.TRUNCATED
            )
        (size,) = struct.unpack(SIZE_FORMAT, header)
        # A valid external message is never empty
        if size == 0:
            raise SerializationError("Error while deserializing an external message object.")

        payload = inp.read(size)
        if len(payload) != size:
            raise SerializationError(
                "Error while deserializing an external message object.", ErrorKind.TRUNCATED
            )

        message = self.factory()
        if not message.from_bytes(payload):
            raise SerializationError("Error while deserializing an external message object.")
        logger.trace(f"Parsed {self.message_name} payload of {size} bytes")
        return message

    def to_plain(self, value: M) -> Any:
        to_plain = getattr(value, "to_plain", None)
        return to_plain() if callable(to_plain) else value.to_bytes()

    def from_plain(self, data: Any) -> M:
        message = self.factory()
        from_plain = getattr(message, "from_plain", None)
        if callable(from_plain):
            from_plain(data)
        elif not message.from_bytes(bytes(data)):
            raise ValueError(f"Invalid {self.message_name} payload")
        return message

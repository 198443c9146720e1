"""Top-level serialize/deserialize entry points.

The type to use is given explicitly, as an annotation, a type expression or
a codec:

    buf = io.BytesIO()
    serialize({"a": [1, 2]}, buf, dict[str, list[Int32]])
    serialize(3.5, buf, "float64")
    buf.seek(0)
    deserialize(dict[str, list[Int32]], buf)  # {"a": [1, 2]}
    deserialize("float64", buf)  # 3.5

Records are self-delimiting, so several of them can share one stream.
"""

import io
import logging
from collections.abc import Iterator
from typing import Any, BinaryIO

from binser.errors import ErrorKind, SerializationError
from binser.registry import codec_for
from binser.stream import ByteReader, ByteWriter, as_reader, as_writer

logger = logging.getLogger(__name__)


def serialize(item: Any, out: BinaryIO | ByteWriter, tp: Any) -> None:
    """Write ``item`` to ``out`` using the codec for ``tp``.

    Args:
        item: Value to serialize
        out: Binary stream or ByteWriter
        tp: Type annotation, type expression or codec

    Raises:
        SerializationError: If the value cannot be written
        TypeError: If no codec exists for ``tp``
    """
    codec = codec_for(tp)
    writer = as_writer(out)
    start = writer.written
    try:
        codec.serialize(item, writer)
    except SerializationError as e:
        logger.debug(f"Serializing {codec.name} failed ({e.kind.value})")
        raise
    logger.trace(f"Wrote {codec.name} record of {writer.written - start} bytes")


def deserialize(tp: Any, inp: BinaryIO | ByteReader) -> Any:
    """Read one value of type ``tp`` from ``inp``.

    Exactly the bytes of one record are consumed. On failure nothing is
    returned, so the caller's previous value stays untouched.

    Args:
        tp: Type annotation, type expression or codec
        inp: Binary stream or ByteReader

    Returns:
        The value read

    Raises:
        SerializationError: If the stream does not hold a valid record
        TypeError: If no codec exists for ``tp``
    """
    codec = codec_for(tp)
    reader = as_reader(inp)
    start = reader.consumed
    try:
        value = codec.deserialize(reader)
    except SerializationError as e:
        logger.debug(f"Deserializing {codec.name} failed ({e.kind.value})")
        raise
    logger.trace(f"Read {codec.name} record of {reader.consumed - start} bytes")
    return value


def dumps(item: Any, tp: Any) -> bytes:
    """Serialize ``item`` to a new bytes object."""
    buf = io.BytesIO()
    serialize(item, buf, tp)
    return buf.getvalue()


def loads(tp: Any, data: bytes) -> Any:
    """Deserialize exactly one record of type ``tp`` from ``data``.

    Raises:
        SerializationError: If ``data`` is not one complete record
    """
    reader = ByteReader(io.BytesIO(data))
    value = deserialize(tp, reader)
    if not reader.at_end():
        leftover = len(data) - reader.consumed
        raise SerializationError(
            f"Error deserializing object of type {codec_for(tp).name}, "
            f"{leftover} trailing bytes",
            ErrorKind.MALFORMED,
        )
    return value


def iter_records(tp: Any, inp: BinaryIO | ByteReader) -> Iterator[Any]:
    """Yield records of type ``tp`` until the stream is exhausted.

    A record cut short by the end of the stream raises SerializationError.
    """
    reader = as_reader(inp)
    while not reader.at_end():
        yield deserialize(tp, reader)

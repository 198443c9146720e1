import io
from typing import Any

from binser import ByteReader, ByteWriter
from binser.codecs import Codec


def encode(codec: Codec[Any], value: Any) -> bytes:
    buf = io.BytesIO()
    codec.serialize(value, ByteWriter(buf))
    return buf.getvalue()


def reader_for(data: bytes) -> ByteReader:
    return ByteReader(io.BytesIO(data))


def roundtrip(codec: Codec[Any], value: Any) -> Any:
    reader = reader_for(encode(codec, value))
    result = codec.deserialize(reader)
    assert reader.at_end()
    return result

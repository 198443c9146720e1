import io
import struct

import msgpack
import pytest

from binser import (
    ByteReader,
    ErrorKind,
    Framed,
    FramedCodec,
    MsgpackMessage,
    SerializationError,
    codec_for,
    deserialize,
    dumps,
    loads,
    serialize,
)
from binser.codecs import INT32


class Point:
    """Minimal external message with a fixed binary layout."""

    def __init__(self, x: int = 0, y: int = 0) -> None:
        self.x = x
        self.y = y

    def to_bytes(self) -> bytes:
        return struct.pack("<ii", self.x, self.y)

    def from_bytes(self, data: bytes) -> bool:
        if len(data) != 8:
            return False
        self.x, self.y = struct.unpack("<ii", data)
        return True


class HugePayload(bytes):
    def __len__(self) -> int:
        return 2**32


class HugeMessage:
    def to_bytes(self) -> bytes:
        return HugePayload(b"x")

    def from_bytes(self, data: bytes) -> bool:
        return True


def test_size_prefix_is_little_endian_uint32():
    codec = FramedCodec(MsgpackMessage)
    payload = msgpack.packb({"a": 1}, use_bin_type=True)
    data = dumps(MsgpackMessage({"a": 1}), codec)
    assert data == struct.pack("<I", len(payload)) + payload
    assert loads(codec, data) == MsgpackMessage({"a": 1})


def test_custom_message_round_trip():
    codec = FramedCodec(Point)
    data = dumps(Point(3, -4), codec)
    assert data[:4] == b"\x08\x00\x00\x00"
    point = loads(codec, data)
    assert (point.x, point.y) == (3, -4)


def test_zero_length_is_malformed():
    with pytest.raises(SerializationError) as exc_info:
        loads(FramedCodec(MsgpackMessage), b"\x00\x00\x00\x00")
    assert exc_info.value.kind is ErrorKind.MALFORMED


@pytest.mark.parametrize("data", [b"", b"\x01\x00", struct.pack("<I", 10) + b"abc"])
def test_short_stream_is_truncated(data):
    with pytest.raises(SerializationError) as exc_info:
        loads(FramedCodec(MsgpackMessage), data)
    assert exc_info.value.kind is ErrorKind.TRUNCATED


@pytest.mark.parametrize("payload", [b"\xc1", b"\x01\x02", b"\x92\x01"])
def test_rejected_payload_is_malformed(payload):
    with pytest.raises(SerializationError) as exc_info:
        loads(FramedCodec(MsgpackMessage), struct.pack("<I", len(payload)) + payload)
    assert exc_info.value.kind is ErrorKind.MALFORMED
    assert str(exc_info.value) == "Error while deserializing an external message object."


def test_unserializable_message():
    with pytest.raises(SerializationError) as exc_info:
        dumps(MsgpackMessage(object()), FramedCodec(MsgpackMessage))
    assert exc_info.value.kind is ErrorKind.MALFORMED


def test_oversized_payload_rejected():
    with pytest.raises(SerializationError) as exc_info:
        dumps(HugeMessage(), FramedCodec(HugeMessage))
    assert exc_info.value.kind is ErrorKind.TOO_LARGE


def test_framed_records_are_self_delimiting():
    codec = codec_for(list[Framed[MsgpackMessage]])
    messages = [MsgpackMessage([1, "two"]), MsgpackMessage({"k": b"\x00"})]

    buf = io.BytesIO()
    serialize(messages, buf, codec)
    serialize(42, buf, INT32)
    buf.seek(0)

    reader = ByteReader(buf)
    assert deserialize(codec, reader) == messages
    assert deserialize(INT32, reader) == 42
    assert reader.at_end()


def test_framed_error_inside_container():
    codec = codec_for(list[Framed[MsgpackMessage]])
    data = b"\x01\x01" + b"\x00\x00\x00\x00"
    with pytest.raises(SerializationError) as exc_info:
        loads(codec, data)
    assert str(exc_info.value) == (
        "Error while deserializing an external message object.\n"
        "   while deserializing object of type list[framed[MsgpackMessage]]"
    )


def test_framed_marker_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Framed()


def _message_class(tag: str) -> type:
    class Message:
        def __init__(self, value: int = 0) -> None:
            self.value = value
            self.tag = tag

        def to_bytes(self) -> bytes:
            return bytes((self.value,))

        def from_bytes(self, data: bytes) -> bool:
            self.value = data[0]
            return True

    return Message


def test_same_named_messages_keep_their_own_class():
    first, second = _message_class("a"), _message_class("b")
    first_codec, second_codec = FramedCodec(first), FramedCodec(second)
    assert first_codec.name == second_codec.name
    assert first_codec != second_codec

    assert loads(first_codec, dumps(first(1), first_codec)).tag == "a"
    decoded = deserialize(second_codec, io.BytesIO(dumps(second(2), second_codec)))
    assert isinstance(decoded, second)
    assert (decoded.tag, decoded.value) == ("b", 2)

import struct

import pytest

from binser import (
    Array,
    Byte,
    Char,
    Float32,
    Framed,
    Int16,
    Int32,
    MsgpackMessage,
    UInt32,
    WStr,
    codec_for,
    parse_type,
    register_message,
)
from binser.codecs import (
    BOOL,
    BOOL_LIST,
    BYTES,
    FLOAT64,
    INT64,
    STRING,
    ComplexCodec,
    FramedCodec,
    SequenceCodec,
)


@pytest.mark.parametrize(
    "tp, name",
    [
        (int, "int64"),
        (float, "float64"),
        (bool, "bool"),
        (str, "str"),
        (bytes, "bytes"),
        (complex, "complex[float64]"),
        (Int16, "int16"),
        (Char, "char"),
        (WStr, "wstr"),
        (list[bool], "list[bool]"),
        (list[Byte], "list[uint8]"),
        (dict[str, list[Int32]], "dict[str, list[int32]]"),
        (tuple[str, UInt32], "pair[str, uint32]"),
        (set[Float32], "set[float32]"),
        (frozenset[int], "set[int64]"),
        (Array(Int16, 4), "array[int16, 4]"),
        (list[Array(str, 2)], "list[array[str, 2]]"),
        (Framed[MsgpackMessage], "framed[MsgpackMessage]"),
    ],
)
def test_codec_for_annotations(tp, name):
    assert codec_for(tp).name == name


def test_codec_for_returns_shared_scalars():
    assert codec_for(int) is INT64
    assert codec_for(str) is STRING
    assert codec_for(bytes) is BYTES
    assert codec_for(list[bool]) is BOOL_LIST
    assert codec_for(bool) is BOOL


def test_codec_for_accepts_codecs_and_expressions():
    codec = SequenceCodec(FLOAT64)
    assert codec_for(codec) is codec
    assert codec_for("list[float64]") == codec


@pytest.mark.parametrize("tp", [object, tuple[int, ...], tuple[int, int, int], list])
def test_codec_for_unsupported(tp):
    with pytest.raises(TypeError):
        codec_for(tp)


@pytest.mark.parametrize(
    "expr",
    [
        "int16",
        "uint64",
        "wchar",
        "int8",
        "char",
        "bool",
        "float32",
        "str",
        "wstr",
        "bytes",
        "list[bool]",
        "list[list[uint16]]",
        "set[str]",
        "dict[int32, pair[str, float64]]",
        "complex[float32]",
        "array[complex[float64], 3]",
        "framed[MsgpackMessage]",
        "dict[str, list[framed[MsgpackMessage]]]",
    ],
)
def test_names_parse_back(expr):
    codec = parse_type(expr)
    assert codec.name == expr
    assert parse_type(codec.name) == codec


def test_parse_aliases_and_whitespace():
    assert parse_type("int") == INT64
    assert parse_type("double") == FLOAT64
    assert parse_type("complex") == ComplexCodec(FLOAT64)
    assert parse_type(" tuple[ int , str ] ").name == "pair[int64, str]"


@pytest.mark.parametrize(
    "expr",
    ["", "foo", "list[", "list[int32]]", "dict[int32]", "array[int32, x]", "array[int32]",
     "list[3]", "framed[Unknown]", "int32 int32", "list[int32;]"],
)
def test_parse_errors(expr):
    with pytest.raises(ValueError):
        parse_type(expr)


def test_registered_message_is_parseable():
    @register_message
    class Vec2:
        def __init__(self) -> None:
            self.x = self.y = 0.0

        def to_bytes(self) -> bytes:
            return struct.pack("<dd", self.x, self.y)

        def from_bytes(self, data: bytes) -> bool:
            self.x, self.y = struct.unpack("<dd", data)
            return True

    codec = parse_type("framed[Vec2]")
    assert isinstance(codec, FramedCodec)
    assert codec.factory is Vec2


def test_codec_for_returns_the_given_codec_instance():
    first = SequenceCodec(FLOAT64)
    second = SequenceCodec(FLOAT64)
    assert codec_for(first) is first
    assert codec_for(second) is second

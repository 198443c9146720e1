"""Codecs for scalars, containers and framed external messages.

This package provides one codec per supported wire type. Container codecs
are composed from the codecs of their element types.
"""

from binser.codecs.base import Codec
from binser.codecs.containers import (
    BOOL_LIST,
    BYTES,
    LENGTH,
    STRING,
    WSTRING,
    BoolSequenceCodec,
    BytesCodec,
    ComplexCodec,
    FixedArrayCodec,
    MapCodec,
    PairCodec,
    SequenceCodec,
    SetCodec,
    StringCodec,
    WideStringCodec,
)
from binser.codecs.framed import ExternalMessage, Framed, FramedCodec
from binser.codecs.integers import (
    INT16,
    INT32,
    INT64,
    UINT16,
    UINT32,
    UINT64,
    WCHAR,
    IntCodec,
)
from binser.codecs.msgpack_message import MsgpackMessage
from binser.codecs.scalars import (
    BOOL,
    BYTE,
    CHAR,
    FLOAT32,
    FLOAT64,
    SBYTE,
    BoolCodec,
    ByteCodec,
    CharCodec,
    FloatCodec,
)

__all__ = [
    "Codec",
    # Scalars
    "IntCodec",
    "ByteCodec",
    "CharCodec",
    "BoolCodec",
    "FloatCodec",
    "INT16",
    "INT32",
    "INT64",
    "UINT16",
    "UINT32",
    "UINT64",
    "WCHAR",
    "BYTE",
    "SBYTE",
    "CHAR",
    "BOOL",
    "FLOAT32",
    "FLOAT64",
    # Containers
    "PairCodec",
    "ComplexCodec",
    "SequenceCodec",
    "BoolSequenceCodec",
    "SetCodec",
    "MapCodec",
    "FixedArrayCodec",
    "BytesCodec",
    "StringCodec",
    "WideStringCodec",
    "LENGTH",
    "BYTES",
    "STRING",
    "WSTRING",
    "BOOL_LIST",
    # External messages
    "ExternalMessage",
    "Framed",
    "FramedCodec",
    "MsgpackMessage",
]

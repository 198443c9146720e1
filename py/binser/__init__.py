"""Binser - composable binary serialization for Python values.

This package provides a compact, self-delimiting wire format with support
for:
- Variable-length integers that round-trip across widths
- Bytes, characters, booleans and floating point numbers
- Pairs, lists, sets, dicts, fixed-length arrays and complex numbers
- Length-prefixed framing of externally serialized messages (msgpack)
"""

from binser import log  # noqa: F401  (registers the TRACE level)
from binser.api import deserialize, dumps, iter_records, loads, serialize
from binser.codecs import Codec, ExternalMessage, Framed, FramedCodec, MsgpackMessage
from binser.errors import ErrorKind, SerializationError
from binser.registry import (
    Array,
    Byte,
    Char,
    Float32,
    Float64,
    Int16,
    Int32,
    Int64,
    Length,
    SByte,
    UInt16,
    UInt32,
    UInt64,
    WChar,
    WStr,
    codec_for,
    parse_type,
    register_message,
)
from binser.stream import ByteReader, ByteWriter

__version__ = "0.1.0"

__all__ = [
    # Core API
    "serialize",
    "deserialize",
    "dumps",
    "loads",
    "iter_records",
    # Errors
    "SerializationError",
    "ErrorKind",
    # Streams
    "ByteReader",
    "ByteWriter",
    # Codecs and dispatch
    "Codec",
    "codec_for",
    "parse_type",
    # Annotations
    "Int16",
    "Int32",
    "Int64",
    "UInt16",
    "UInt32",
    "UInt64",
    "WChar",
    "Byte",
    "SByte",
    "Char",
    "WStr",
    "Float32",
    "Float64",
    "Array",
    "Length",
    # External messages
    "ExternalMessage",
    "Framed",
    "FramedCodec",
    "MsgpackMessage",
    "register_message",
]

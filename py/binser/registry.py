"""Resolution of Python types and type expressions to codecs.

codec_for() walks a type annotation the way a static type checker would
(``get_origin``/``get_args``) and builds the matching codec, delegating
element types recursively. parse_type() does the same for the textual type
expressions that codecs report as their ``name``; every codec name parses
back to an equal codec.
"""

import functools
import re
from dataclasses import dataclass
from typing import Annotated, Any, get_args, get_origin

from binser.codecs import (
    BOOL,
    BOOL_LIST,
    BYTE,
    BYTES,
    CHAR,
    FLOAT32,
    FLOAT64,
    INT16,
    INT32,
    INT64,
    SBYTE,
    STRING,
    UINT16,
    UINT32,
    UINT64,
    WCHAR,
    WSTRING,
    Codec,
    ComplexCodec,
    FixedArrayCodec,
    Framed,
    FramedCodec,
    MapCodec,
    MsgpackMessage,
    PairCodec,
    SequenceCodec,
    SetCodec,
)


@dataclass(frozen=True)
class Length:
    """Annotation metadata fixing the length of a list."""

    n: int


# Width aliases for annotations
Int16 = Annotated[int, INT16]
Int32 = Annotated[int, INT32]
Int64 = Annotated[int, INT64]
UInt16 = Annotated[int, UINT16]
UInt32 = Annotated[int, UINT32]
UInt64 = Annotated[int, UINT64]
WChar = Annotated[int, WCHAR]
Byte = Annotated[int, BYTE]
SByte = Annotated[int, SBYTE]
Char = Annotated[str, CHAR]
WStr = Annotated[str, WSTRING]
Float32 = Annotated[float, FLOAT32]
Float64 = Annotated[float, FLOAT64]


def Array(element: Any, length: int) -> Any:  # noqa: N802
    """Annotation for a list of exactly ``length`` elements."""
    return Annotated[list[element], Length(length)]


_PYTHON_TYPES: dict[Any, Codec[Any]] = {
    int: INT64,
    float: FLOAT64,
    bool: BOOL,
    str: STRING,
    bytes: BYTES,
    bytearray: BYTES,
    complex: ComplexCodec(FLOAT64),
}

_SCALAR_NAMES: dict[str, Codec[Any]] = {
    codec.name: codec
    for codec in (
        INT16,
        INT32,
        INT64,
        UINT16,
        UINT32,
        UINT64,
        WCHAR,
        BYTE,
        SBYTE,
        CHAR,
        BOOL,
        FLOAT32,
        FLOAT64,
        STRING,
        WSTRING,
        BYTES,
    )
}
_SCALAR_NAMES.update(
    {
        "int": INT64,
        "float": FLOAT64,
        "double": FLOAT64,
        "complex": ComplexCodec(FLOAT64),
    }
)

_MESSAGE_TYPES: dict[str, type] = {}


def register_message(cls: type) -> type:
    """Make an external message class available to ``framed[...]`` expressions.

    Usable as a class decorator.
    """
    _MESSAGE_TYPES[cls.__name__] = cls
    parse_type.cache_clear()
    _resolve.cache_clear()
    return cls


def sequence_codec(element: Codec[Any]) -> Codec[Any]:
    """Sequence codec for ``element``, with booleans packed as a raw buffer."""
    if element == BOOL:
        return BOOL_LIST
    return SequenceCodec(element)


def codec_for(tp: Any) -> Codec[Any]:
    """Resolve a type annotation (or expression, or codec) to a codec.

    Args:
        tp: A type such as ``dict[str, list[Int32]]``, a type expression
            string such as ``"dict[str, list[int32]]"``, or a Codec

    Returns:
        The codec for ``tp``

    Raises:
        TypeError: If no codec exists for the type
    """
    if isinstance(tp, Codec):
        return tp
    return _resolve(tp)


@functools.lru_cache(maxsize=None)
def _resolve(tp: Any) -> Codec[Any]:
    if isinstance(tp, str):
        return parse_type(tp)

    origin = get_origin(tp)
    args = get_args(tp)

    if origin is Annotated:
        base, *metadata = args
        for meta in metadata:
            if isinstance(meta, Codec):
                return meta
        for meta in metadata:
            if isinstance(meta, Length):
                if get_origin(base) is not list:
                    raise TypeError(f"Length() only applies to list types, got {base!r}")
                (element,) = get_args(base)
                return FixedArrayCodec(codec_for(element), meta.n)
        return codec_for(base)

    if origin is None:
        if tp in _PYTHON_TYPES:
            return _PYTHON_TYPES[tp]
        raise TypeError(f"No codec for type {tp!r}")

    if origin is list:
        (element,) = args
        return sequence_codec(codec_for(element))
    if origin in (set, frozenset):
        (element,) = args
        return SetCodec(codec_for(element))
    if origin is dict:
        key, value = args
        return MapCodec(codec_for(key), codec_for(value))
    if origin is tuple:
        if len(args) != 2 or args[1] is Ellipsis:
            raise TypeError(f"Only two-element tuples are supported, got {tp!r}")
        return PairCodec(codec_for(args[0]), codec_for(args[1]))
    if origin is Framed:
        (message,) = args
        return FramedCodec(message, type_name=message.__name__)

    raise TypeError(f"No codec for type {tp!r}")


_TOKEN = re.compile(r"\s*(?:(?P<name>[A-Za-z_][A-Za-z0-9_]*)|(?P<number>\d+)|(?P<punct>[\[\],]))")


def _tokenize(expr: str) -> list[str]:
    tokens = []
    pos = 0
    expr = expr.rstrip()
    while pos < len(expr):
        match = _TOKEN.match(expr, pos)
        if match is None:
            raise ValueError(f"Unexpected character {expr[pos]!r} in type expression {expr!r}")
        tokens.append(match.group(match.lastgroup))  # type: ignore[arg-type]
        pos = match.end()
    return tokens


class _Parser:
    def __init__(self, expr: str) -> None:
        self.expr = expr
        self.tokens = _tokenize(expr)
        self.pos = 0

    def peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self, expected: str | None = None) -> str:
        token = self.peek()
        if token is None or (expected is not None and token != expected):
            want = repr(expected) if expected else "a token"
            raise ValueError(f"Expected {want} at position {self.pos} in {self.expr!r}")
        self.pos += 1
        return token

    def parse(self) -> Codec[Any]:
        codec = self.parse_type()
        if self.peek() is not None:
            raise ValueError(f"Unexpected {self.peek()!r} in type expression {self.expr!r}")
        return codec

    def parse_args(self, name: str) -> list[Any]:
        self.take("[")
        args = [self.parse_arg(name)]
        while self.peek() == ",":
            self.take(",")
            args.append(self.parse_arg(name))
        self.take("]")
        return args

    def parse_arg(self, name: str) -> Any:
        token = self.peek()
        if token is not None and token.isdigit():
            return int(self.take())
        if name == "framed" and token in _MESSAGE_TYPES:
            return _MESSAGE_TYPES[self.take()]
        return self.parse_type()

    def parse_type(self) -> Codec[Any]:
        name = self.take()
        if self.peek() != "[":
            if name in _SCALAR_NAMES:
                return _SCALAR_NAMES[name]
            raise ValueError(f"Unknown type {name!r} in type expression {self.expr!r}")

        args = self.parse_args(name)
        if name == "list" and len(args) == 1:
            return sequence_codec(self._codec(args[0]))
        if name == "set" and len(args) == 1:
            return SetCodec(self._codec(args[0]))
        if name == "dict" and len(args) == 2:
            return MapCodec(self._codec(args[0]), self._codec(args[1]))
        if name in ("pair", "tuple") and len(args) == 2:
            return PairCodec(self._codec(args[0]), self._codec(args[1]))
        if name == "complex" and len(args) == 1:
            return ComplexCodec(self._codec(args[0]))
        if name == "array" and len(args) == 2 and isinstance(args[1], int):
            return FixedArrayCodec(self._codec(args[0]), args[1])
        if name == "framed" and len(args) == 1 and isinstance(args[0], type):
            return FramedCodec(args[0], type_name=args[0].__name__)
        raise ValueError(f"Invalid arguments for {name!r} in type expression {self.expr!r}")

    def _codec(self, arg: Any) -> Codec[Any]:
        if not isinstance(arg, Codec):
            raise ValueError(f"Expected a type, got {arg!r} in type expression {self.expr!r}")
        return arg


@functools.lru_cache(maxsize=None)
def parse_type(expr: str) -> Codec[Any]:
    """Parse a type expression such as ``"pair[str, list[uint32]]"``.

    Args:
        expr: Type expression

    Returns:
        The codec described by ``expr``

    Raises:
        ValueError: If the expression is malformed or names an unknown type
    """
    return _Parser(expr).parse()


register_message(MsgpackMessage)

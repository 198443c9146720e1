"""Serialization error type.

Every codec failure is surfaced as a SerializationError. Container codecs
catch errors raised by their element codecs and re-raise them with an extra
line naming the container, so the final message reads like a call stack:

    Error deserializing object of type int32
       while deserializing object of type list[int32]
       while deserializing object of type dict[str, list[int32]]
"""

from enum import Enum


class ErrorKind(Enum):
    """Logical causes of a serialization failure."""

    TRUNCATED = "truncated"  # Stream ended before the expected bytes
    OVERFLOW = "overflow"  # Value does not fit the target type
    MALFORMED = "malformed"  # Structurally invalid token
    LENGTH_MISMATCH = "length_mismatch"  # Fixed array length differs
    TOO_LARGE = "too_large"  # Framed payload exceeds the 32-bit prefix


class SerializationError(Exception):
    """Raised when a value cannot be written to or read from a stream.

    Attributes:
        info: Human readable message, including the context trail
        kind: Root cause of the failure
    """

    def __init__(self, info: str, kind: ErrorKind = ErrorKind.MALFORMED) -> None:
        super().__init__(info)
        self.info = info
        self.kind = kind

    def __str__(self) -> str:
        return self.info

    def wrap(self, type_name: str, reading: bool) -> "SerializationError":
        """Return a copy of this error with one more line of context.

        Args:
            type_name: Name of the enclosing type
            reading: True when deserializing, False when serializing

        Returns:
            New error carrying the same kind
        """
        action = "deserializing" if reading else "serializing"
        return SerializationError(
            f"{self.info}\n   while {action} object of type {type_name}", self.kind
        )

    @classmethod
    def writing(cls, type_name: str, kind: ErrorKind = ErrorKind.MALFORMED) -> "SerializationError":
        return cls(f"Error serializing object of type {type_name}", kind)

    @classmethod
    def reading(cls, type_name: str, kind: ErrorKind = ErrorKind.MALFORMED) -> "SerializationError":
        return cls(f"Error deserializing object of type {type_name}", kind)

"""Msgpack-backed external message.

MsgpackMessage wraps an arbitrary msgpack-able Python value and implements
the ExternalMessage protocol, so msgpack payloads can be embedded in a
binser stream through the framing adapter.
"""

from typing import Any

import msgpack


class MsgpackMessage:
    """External message whose payload is one msgpack object.

    Uses msgpack for compact binary serialization of dicts, lists, strings,
    numbers and bytes.
    """

    def __init__(self, value: Any = None) -> None:
        self.value = value

    def to_bytes(self) -> bytes | None:
        """Serialize the wrapped value to msgpack bytes.

        Returns:
            Msgpack-encoded bytes, or None if the value is not msgpack-able
        """
        try:
            return msgpack.packb(self.value, use_bin_type=True)  # type: ignore
        except (TypeError, ValueError, OverflowError):
            return None

    def from_bytes(self, data: bytes) -> bool:
        """Parse msgpack bytes into this message.

        Args:
            data: Exactly one msgpack-encoded object

        Returns:
            True if ``data`` held a single valid object, False otherwise
        """
        try:
            self.value = msgpack.unpackb(data, raw=False, strict_map_key=False)
        except (msgpack.ExtraData, msgpack.UnpackException, ValueError, TypeError):
            return False
        return True

    def to_plain(self) -> Any:
        return self.value

    def from_plain(self, data: Any) -> None:
        self.value = data

    def __eq__(self, other: object) -> bool:
        return isinstance(other, MsgpackMessage) and other.value == self.value

    def __repr__(self) -> str:
        return f"MsgpackMessage({self.value!r})"

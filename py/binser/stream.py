"""Byte stream adapters used by every codec.

Codecs never talk to a file object directly. They go through ByteWriter and
ByteReader, which turn short reads and rejected writes into
SerializationError and keep count of the bytes moved. The wrapped objects
must be opened in binary mode; no newline or encoding translation may
happen underneath.

A reader or writer belongs to one caller for the duration of a top-level
call. Nothing here is synchronized.
"""

from typing import BinaryIO

from binser.errors import ErrorKind, SerializationError

# Upper bound for a single read from the underlying stream
CHUNK_SIZE = 64 * 1024


class ByteWriter:
    """Append-only view of a binary output stream."""

    def __init__(self, out: BinaryIO) -> None:
        self.out = out
        self.written = 0

    def write(self, data: bytes, type_name: str) -> None:
        """Write all of ``data``.

        Args:
            data: Bytes to append
            type_name: Name reported if the sink rejects the write

        Raises:
            SerializationError: If the sink accepted fewer bytes than given
        """
        view = memoryview(data)
        while view:
            count = self.out.write(view)
            # None from a non-blocking raw stream means nothing was written
            if not count:
                raise SerializationError.writing(type_name, ErrorKind.TRUNCATED)
            view = view[count:]
            self.written += count

    def write_byte(self, value: int, type_name: str) -> None:
        self.write(bytes((value,)), type_name)


class ByteReader:
    """Strictly forward-consuming view of a binary input stream."""

    def __init__(self, inp: BinaryIO) -> None:
        self.inp = inp
        self.consumed = 0
        self._pending = b""

    def read(self, n: int) -> bytes:
        """Read up to ``n`` bytes; fewer only when the stream is exhausted."""
        chunks = []
        if self._pending:
            chunks.append(self._pending[:n])
            self._pending = self._pending[n:]
        remaining = n - sum(len(c) for c in chunks)
        while remaining > 0:
            chunk = self.inp.read(min(remaining, CHUNK_SIZE))
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        data = b"".join(chunks)
        self.consumed += len(data)
        return data

    def read_exact(self, n: int, type_name: str) -> bytes:
        """Read exactly ``n`` bytes.

        Args:
            n: Number of bytes to read
            type_name: Name reported if the stream ends early

        Returns:
            The bytes read

        Raises:
            SerializationError: If the stream ends before ``n`` bytes
        """
        data = self.read(n)
        if len(data) != n:
            raise SerializationError.reading(type_name, ErrorKind.TRUNCATED)
        return data

    def read_byte(self, type_name: str) -> int:
        return self.read_exact(1, type_name)[0]

    def at_end(self) -> bool:
        """Check whether the stream has no more bytes, without consuming any."""
        if self._pending:
            return False
        chunk = self.inp.read(1)
        if not chunk:
            return True
        self._pending = chunk
        return False


def as_writer(out: BinaryIO | ByteWriter) -> ByteWriter:
    return out if isinstance(out, ByteWriter) else ByteWriter(out)


def as_reader(inp: BinaryIO | ByteReader) -> ByteReader:
    return inp if isinstance(inp, ByteReader) else ByteReader(inp)

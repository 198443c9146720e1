import io
import logging

import pytest

from binser import ByteReader, ByteWriter


@pytest.fixture
def buffer():
    return io.BytesIO()


@pytest.fixture
def writer(buffer):
    return ByteWriter(buffer)


@pytest.fixture
def reader_of():
    def make(data: bytes) -> ByteReader:
        return ByteReader(io.BytesIO(data))
    return make


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    try:
        yield
    finally:
        root.handlers[:] = handlers
        root.setLevel(level)

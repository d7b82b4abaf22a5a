from __future__ import annotations

import errno
import io
import os

import pytest

from sercat.config import DeviceConfig
from sercat.device import OpenMode
from sercat.errors import RelayReadError, RelayWriteError, ShortWriteError
from sercat.relay import BUF_SIZE, relay, run_sercat


class FakeSource:
    def __init__(self, data=b"", error=None):
        self._buf = io.BytesIO(data)
        self.error = error
        self.reads = []

    def read(self, size):
        self.reads.append(size)
        chunk = self._buf.read(size)
        if not chunk and self.error:
            raise self.error
        return chunk


class FakeSink:
    def __init__(self, limit=None, error=None):
        self.data = bytearray()
        self.writes = []
        self.limit = limit
        self.error = error

    def write(self, b):
        self.writes.append(len(b))
        if self.error:
            raise self.error
        n = len(b) if self.limit is None else min(len(b), self.limit)
        self.data += b[:n]
        return n


def test_relay_hello():
    sink = FakeSink()
    assert relay(FakeSource(b"hello\n"), sink) == 6
    assert bytes(sink.data) == b"hello\n"
    assert sink.writes == [6]


def test_relay_empty_source():
    sink = FakeSink()
    assert relay(FakeSource(b""), sink) == 0
    assert sink.writes == []


def test_relay_multiple_chunks_in_order():
    payload = bytes(i % 251 for i in range(5000))
    src, sink = FakeSource(payload), FakeSink()

    assert relay(src, sink) == 5000

    assert bytes(sink.data) == payload
    assert sink.writes == [1024, 1024, 1024, 1024, 904]
    assert all(size == BUF_SIZE for size in src.reads)


def test_relay_custom_chunk_size():
    sink = FakeSink()
    relay(FakeSource(b"abcdefg"), sink, chunk_size=3)
    assert sink.writes == [3, 3, 1]


def test_short_write_is_fatal_without_retry():
    src, sink = FakeSource(b"0123456789"), FakeSink(limit=4)

    with pytest.raises(ShortWriteError) as ei:
        relay(src, sink)

    assert (ei.value.requested, ei.value.actual) == (10, 4)
    assert ei.value.message == "Short write 4 < 10"
    assert sink.writes == [10]
    assert bytes(sink.data) == b"0123"


def test_would_block_write_counts_as_short():
    class BlockedSink:
        def write(self, b):
            return None

    with pytest.raises(ShortWriteError) as ei:
        relay(FakeSource(b"x"), BlockedSink())
    assert ei.value.actual == 0


def test_read_error_is_fatal():
    src = FakeSource(b"abc", error=OSError(errno.EIO, "Input/output error"))
    sink = FakeSink()

    with pytest.raises(RelayReadError) as ei:
        relay(src, sink)

    assert ei.value.message == "Read error: Input/output error"
    # bytes before the failure were already delivered
    assert bytes(sink.data) == b"abc"


def test_write_error_is_fatal():
    sink = FakeSink(error=BrokenPipeError(errno.EPIPE, "Broken pipe"))

    with pytest.raises(RelayWriteError) as ei:
        relay(FakeSource(b"abc"), sink)

    assert ei.value.message == "Write error: Broken pipe"
    assert sink.writes == [3]


# ---------------- run_sercat on plain files ----------------

def test_run_read_mode_copies_file_to_stream(tmp_path):
    dev = tmp_path / "dev"
    dev.write_bytes(b"hello\n")
    out = tmp_path / "out"

    with open(out, "wb", buffering=0) as stream:
        total = run_sercat(str(dev), OpenMode.READ, DeviceConfig(), stream=stream)

    assert total == 6
    assert out.read_bytes() == b"hello\n"


def test_run_write_mode_copies_stream_to_file(tmp_path):
    dev = tmp_path / "dev"
    dev.write_bytes(b"")
    src = tmp_path / "in"
    src.write_bytes(b"x" * 3000)

    with open(src, "rb", buffering=0) as stream:
        total = run_sercat(str(dev), OpenMode.WRITE, DeviceConfig(), stream=stream)
        assert not stream.closed

    assert total == 3000
    assert dev.read_bytes() == b"x" * 3000


def test_nonblocking_source_without_data_is_read_error():
    r, w = os.pipe()
    os.set_blocking(r, False)
    try:
        with io.FileIO(r, "rb", closefd=False) as src:
            sink = FakeSink()
            with pytest.raises(RelayReadError) as ei:
                relay(src, sink)
        assert ei.value.reason == os.strerror(errno.EAGAIN)
        assert sink.writes == []
    finally:
        os.close(r)
        os.close(w)

import io
import os
import sys
from unittest.mock import MagicMock, patch

import pytest

# テストファイルから見たパッケージルートへのパス
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from packet_transcriber.protocol import ByteCursor, PushbackOverflow, StreamReadError


class ReadOnlySource:
    """read() だけを持つソース（read1 なし）"""

    def __init__(self, chunks):
        self.chunks = list(chunks)
        self.sizes = []

    def read(self, size):
        self.sizes.append(size)
        if not self.chunks:
            return b""
        return self.chunks.pop(0)


class FailingSource:
    def __init__(self, data=b""):
        self.data = data

    def read(self, size):
        if self.data:
            data, self.data = self.data, b""
            return data
        raise OSError("device disconnected")


def test_next_returns_bytes_in_order_then_none():
    cursor = ByteCursor(io.BytesIO(b"\x01\x02\x03"))
    assert [cursor.next(), cursor.next(), cursor.next()] == [1, 2, 3]
    assert cursor.next() is None
    assert cursor.next() is None
    assert cursor.at_eof
    assert cursor.position == 3

def test_empty_source():
    cursor = ByteCursor(io.BytesIO(b""))
    assert cursor.next() is None
    assert cursor.position == 0

def test_pushback_single_byte_is_read_again():
    cursor = ByteCursor(io.BytesIO(b"\x21\x41"))
    assert cursor.next() == 0x21
    b = cursor.next()
    cursor.pushback(b)
    assert cursor.position == 1
    assert cursor.next() == 0x41
    assert cursor.position == 2
    assert cursor.next() is None

def test_pushback_two_bytes_keeps_stream_order():
    cursor = ByteCursor(io.BytesIO(b"\x21\x22\x03"))
    a = cursor.next()
    b = cursor.next()
    cursor.pushback(a, b)
    assert list(cursor) == [0x21, 0x22, 0x03]

def test_pushback_is_lifo_across_calls():
    cursor = ByteCursor(io.BytesIO(b""))
    cursor.pushback(0x22)
    cursor.pushback(0x21)
    assert cursor.next() == 0x21
    assert cursor.next() == 0x22
    assert cursor.next() is None

def test_pushback_after_eof_still_returned():
    cursor = ByteCursor(io.BytesIO(b"\x7f"))
    value = cursor.next()
    assert cursor.next() is None
    cursor.pushback(value)
    assert cursor.next() == 0x7f
    assert cursor.next() is None

def test_pushback_overflow():
    cursor = ByteCursor(io.BytesIO(b"\x01\x02\x03"))
    cursor.pushback(1, 2)
    with pytest.raises(PushbackOverflow):
        cursor.pushback(3)
    with pytest.raises(ValueError):
        ByteCursor(io.BytesIO(b"")).pushback(1, 2, 3)

def test_reads_across_chunk_boundaries():
    source = ReadOnlySource([b"\x01", b"\x02\x03", b"\x04"])
    cursor = ByteCursor(source, chunk_size=2)
    assert list(cursor) == [1, 2, 3, 4]
    assert source.sizes[0] == 2

def test_uses_read1_when_available():
    source = MagicMock()
    source.read1.return_value = b"abc"
    cursor = ByteCursor(source, chunk_size=16)
    assert cursor.next() == ord("a")
    source.read1.assert_called_once_with(16)
    source.read.assert_not_called()

def test_default_chunk_size_from_config():
    with patch("packet_transcriber.protocol.byte_cursor.config") as mock_config:
        mock_config.READ_CHUNK_SIZE = 7
        cursor = ByteCursor(io.BytesIO(b""))
    assert cursor.chunk_size == 7

def test_io_error_is_not_end_of_stream():
    cursor = ByteCursor(FailingSource(b"\x01"))
    assert cursor.next() == 1
    with pytest.raises(StreamReadError) as excinfo:
        cursor.next()
    assert isinstance(excinfo.value, IOError)
    assert "offset 1" in str(excinfo.value)
    assert not cursor.at_eof

def test_non_blocking_source_is_retried():
    source = ReadOnlySource([None, b"\x05"])
    with patch("packet_transcriber.protocol.byte_cursor.time.sleep") as mock_sleep:
        cursor = ByteCursor(source)
        assert cursor.next() == 5
    mock_sleep.assert_called_once()

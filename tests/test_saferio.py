import io

import pytest

from golens.saferio import CHUNK, read_data, read_data_at, slice_cap


def test_read_data_small():
    r = io.BytesIO(b"hello world")
    assert read_data(r, 5) == b"hello"
    assert read_data(r, 6) == b" world"


def test_read_data_zero():
    assert read_data(io.BytesIO(b""), 0) == b""


def test_read_data_empty_stream_is_eof():
    with pytest.raises(EOFError, match="^EOF$"):
        read_data(io.BytesIO(b""), 4)


def test_read_data_partial_is_unexpected_eof():
    with pytest.raises(EOFError, match="unexpected EOF"):
        read_data(io.BytesIO(b"ab"), 4)


def test_read_data_too_large():
    with pytest.raises(EOFError, match="unexpected EOF"):
        read_data(io.BytesIO(b"abc"), 1 << 63)


def test_read_data_chunked():
    payload = bytes(range(256)) * ((CHUNK + 1000) // 256 + 1)
    payload = payload[: CHUNK + 1000]
    assert read_data(io.BytesIO(payload), len(payload)) == payload


def test_read_data_chunked_truncated():
    payload = b"x" * CHUNK
    with pytest.raises(EOFError, match="unexpected EOF"):
        read_data(io.BytesIO(payload), 2 * CHUNK)


def test_read_data_chunked_nothing():
    with pytest.raises(EOFError, match="^EOF$"):
        read_data(io.BytesIO(b""), CHUNK)


def test_read_data_at_offset():
    r = io.BytesIO(b"0123456789")
    assert read_data_at(r, 3, 4) == b"456"
    assert read_data_at(r, 2, 0) == b"01"


def test_read_data_at_zero_at_end():
    assert read_data_at(io.BytesIO(b"abc"), 0, 3) == b""


def test_read_data_at_short():
    with pytest.raises(EOFError):
        read_data_at(io.BytesIO(b"abc"), 5, 1)


def test_read_data_at_too_large():
    with pytest.raises(EOFError, match="unexpected EOF"):
        read_data_at(io.BytesIO(b"abc"), 1 << 64, 0)


def test_read_data_at_chunked():
    payload = b"ab" * (CHUNK // 2 + 10)
    r = io.BytesIO(b"zz" + payload)
    assert read_data_at(r, len(payload), 2) == payload


def test_slice_cap_small_count_kept():
    assert slice_cap(8, 100) == 100
    assert slice_cap(0, 12345) == 12345


def test_slice_cap_limited_by_chunk():
    c = slice_cap(8, 1 << 40)
    assert c == CHUNK // 8
    assert c * 8 <= CHUNK


def test_slice_cap_huge_element():
    assert slice_cap(CHUNK * 4, 3) == 1


def test_slice_cap_overflow():
    assert slice_cap(16, (1 << 62)) == -1
    assert slice_cap(1, 1 << 63) == -1
    assert slice_cap(1, -1) == -1


def test_slice_cap_negative_size():
    with pytest.raises(ValueError):
        slice_cap(-1, 10)
"""Reading helpers that avoid huge allocations when sizes come from input data."""

from __future__ import annotations

from typing import BinaryIO

CHUNK = 10 << 20
"""How many bytes may be allocated at once without concern."""

_INT64_LIMIT = 1 << 63
_UINT64_MAX = (1 << 64) - 1


def _too_large(n: int) -> bool:
    return n < 0 or n >= _INT64_LIMIT


def _read_full(r: BinaryIO, n: int) -> bytes:
    parts = []
    got = 0
    while got < n:
        piece = r.read(n - got)
        if not piece:
            break
        parts.append(piece)
        got += len(piece)
    data = b"".join(parts)
    if len(data) < n:
        if not data:
            raise EOFError("EOF")
        raise EOFError("unexpected EOF")
    return data


def read_data(r: BinaryIO, n: int) -> bytes:
    """Read exactly n bytes from r, allocating at most CHUNK bytes at a time.

    Raises EOFError("EOF") if nothing could be read and
    EOFError("unexpected EOF") if the input ended part way.
    """
    if _too_large(n):
        raise EOFError("unexpected EOF")
    if n < CHUNK:
        return _read_full(r, n)
    buf = bytearray()
    while n > 0:
        step = min(n, CHUNK)
        try:
            buf += _read_full(r, step)
        except EOFError as exc:
            if buf and str(exc) == "EOF":
                raise EOFError("unexpected EOF") from None
            raise
        n -= step
    return bytes(buf)


def _read_at(r: BinaryIO, n: int, off: int) -> bytes:
    r.seek(off)
    data = _read_full_or_short(r, n)
    if len(data) < n:
        raise EOFError("EOF")
    return data


def _read_full_or_short(r: BinaryIO, n: int) -> bytes:
    parts = []
    got = 0
    while got < n:
        piece = r.read(n - got)
        if not piece:
            break
        parts.append(piece)
        got += len(piece)
    return b"".join(parts)


def read_data_at(r: BinaryIO, n: int, off: int) -> bytes:
    """Read exactly n bytes from the seekable stream r at offset off.

    A short read raises EOFError; reading zero bytes always succeeds.
    """
    if _too_large(n):
        raise EOFError("unexpected EOF")
    if off < 0:
        raise ValueError(f"negative offset: {off}")
    if n < CHUNK:
        if n == 0:
            return b""
        return _read_at(r, n, off)
    buf = bytearray()
    while n > 0:
        step = min(n, CHUNK)
        buf += _read_at(r, step, off)
        n -= step
        off += step
    return bytes(buf)


def slice_cap(elem_size: int, c: int) -> int:
    """Return the capacity to preallocate for c elements of elem_size bytes.

    A negative result means the count is always too big.
    """
    if elem_size < 0:
        raise ValueError(f"negative element size: {elem_size}")
    if _too_large(c):
        return -1
    if elem_size > 0 and c > _UINT64_MAX // elem_size:
        return -1
    if c * elem_size > CHUNK:
        c = CHUNK // elem_size
        if c == 0:
            c = 1
    return c
"""Reading object files from an in-memory byte buffer.

The reader keeps the raw bytes and decodes records on demand: every
accessor takes a symbol index and finds its data through the block
offsets stored in the header.
"""

from __future__ import annotations

import struct

from golens.goobj_format import (
    AUX_SIZE,
    FINGERPRINT_SIZE,
    HASH64_SIZE,
    HASH_SIZE,
    IMPORTED_PKG_SIZE,
    MAGIC,
    N_BLK,
    REF_FLAGS_SIZE,
    REF_NAME_SIZE,
    RELOC_SIZE,
    STRING_REF_SIZE,
    SYM_SIZE,
    Aux,
    Block,
    Header,
    ImportedPkg,
    ObjFlag,
    RefFlags,
    RefName,
    Reloc,
    Sym,
)


class ObjectFormatError(ValueError):
    """Raised when bytes are not a well-formed object file."""


def read_header(r: Reader) -> Header:
    """Decode the header at the start of r's bytes."""
    magic = bytes(r._b[: len(MAGIC)])
    if magic != MAGIC:
        raise ObjectFormatError("wrong magic, not a Go object file")
    off = len(MAGIC)
    fingerprint = r.bytes_at(off, FINGERPRINT_SIZE)
    off += FINGERPRINT_SIZE
    flags = r._uint32_at(off)
    off += 4
    offsets = []
    for _ in range(N_BLK):
        offsets.append(r._uint32_at(off))
        off += 4
    return Header(magic=magic, fingerprint=fingerprint, flags=flags, offsets=offsets)


class Reader:
    """Random access to the blocks of an object file held in memory."""

    def __init__(self, b: bytes | bytearray | memoryview, readonly: bool = False) -> None:
        self._b = memoryview(b)
        self._readonly = readonly
        self._h = read_header(self)

    # Low-level access.

    def _check(self, off: int, length: int) -> None:
        if off < 0 or length < 0 or off + length > len(self._b):
            raise ObjectFormatError(
                f"object file truncated: need {length} bytes at offset {off}, "
                f"have {len(self._b)}"
            )

    def bytes_at(self, off: int, length: int) -> bytes:
        """Return length bytes starting at off."""
        if length == 0:
            return b""
        self._check(off, length)
        return bytes(self._b[off:off + length])

    def _view(self, off: int, length: int) -> memoryview:
        self._check(off, length)
        return self._b[off:off + length]

    def _unpack(self, fmt: str, off: int) -> int:
        self._check(off, struct.calcsize(fmt))
        return struct.unpack_from(fmt, self._b, off)[0]

    def _uint64_at(self, off: int) -> int:
        return self._unpack("<Q", off)

    def _uint32_at(self, off: int) -> int:
        return self._unpack("<I", off)

    def string_at(self, off: int, length: int) -> str:
        """Return the string of length bytes stored at off."""
        return self.bytes_at(off, length).decode("utf-8", "surrogateescape")

    def string_ref(self, off: int) -> str:
        """Return the string whose length and offset are stored at off."""
        length = self._uint32_at(off)
        return self.string_at(self._uint32_at(off + 4), length)

    def _block(self, blk: Block) -> int:
        return self._h.offsets[blk]

    def _count(self, blk: Block, size: int) -> int:
        return (self._h.offsets[blk + 1] - self._h.offsets[blk]) // size

    # Header information.

    @property
    def fingerprint(self) -> bytes:
        return self._h.fingerprint

    @property
    def flags(self) -> int:
        """The flag bits of the header."""
        return self._h.flags

    @property
    def readonly(self) -> bool:
        return self._readonly

    def shared(self) -> bool:
        return bool(self._h.flags & ObjFlag.SHARED)

    def from_assembly(self) -> bool:
        return bool(self._h.flags & ObjFlag.FROM_ASSEMBLY)

    def unlinkable(self) -> bool:
        return bool(self._h.flags & ObjFlag.UNLINKABLE)

    # Packages and files.

    def autolib(self) -> list[ImportedPkg]:
        """Return the imported packages with their fingerprints."""
        base = self._block(Block.AUTOLIB)
        result = []
        for k in range(self._count(Block.AUTOLIB, IMPORTED_PKG_SIZE)):
            off = base + k * IMPORTED_PKG_SIZE
            result.append(
                ImportedPkg(
                    pkg=self.string_ref(off),
                    fingerprint=self.bytes_at(off + STRING_REF_SIZE, FINGERPRINT_SIZE),
                )
            )
        return result

    def pkglist(self) -> list[str]:
        """Return the referenced packages, in index order."""
        return [self.pkg(k) for k in range(self.n_pkg())]

    def n_pkg(self) -> int:
        return self._count(Block.PKG_IDX, STRING_REF_SIZE)

    def pkg(self, i: int) -> str:
        return self.string_ref(self._block(Block.PKG_IDX) + i * STRING_REF_SIZE)

    def n_file(self) -> int:
        return self._count(Block.FILE, STRING_REF_SIZE)

    def file(self, i: int) -> str:
        return self.string_ref(self._block(Block.FILE) + i * STRING_REF_SIZE)

    # Symbols.

    def n_sym(self) -> int:
        return self._count(Block.SYMDEF, SYM_SIZE)

    def n_hashed64def(self) -> int:
        return self._count(Block.HASHED64DEF, SYM_SIZE)

    def n_hasheddef(self) -> int:
        return self._count(Block.HASHEDDEF, SYM_SIZE)

    def n_nonpkgdef(self) -> int:
        return self._count(Block.NONPKGDEF, SYM_SIZE)

    def n_nonpkgref(self) -> int:
        return self._count(Block.NONPKGREF, SYM_SIZE)

    def sym_off(self, i: int) -> int:
        """Return the offset of the i-th symbol."""
        return self._block(Block.SYMDEF) + i * SYM_SIZE

    def sym(self, i: int) -> Sym:
        """Return the i-th symbol, counting across all definition blocks."""
        return Sym(self._view(self.sym_off(i), SYM_SIZE))

    def n_ref_flags(self) -> int:
        return self._count(Block.REF_FLAGS, REF_FLAGS_SIZE)

    def ref_flags(self, i: int) -> RefFlags:
        """Return the i-th referenced-symbol flags record."""
        off = self._block(Block.REF_FLAGS) + i * REF_FLAGS_SIZE
        return RefFlags(self._view(off, REF_FLAGS_SIZE))

    def hash64(self, i: int) -> int:
        """Return the hash of the i-th short hashed symbol."""
        return self._uint64_at(self._block(Block.HASH64) + i * HASH64_SIZE)

    def hash(self, i: int) -> bytes:
        """Return the hash of the i-th hashed symbol."""
        return self.bytes_at(self._block(Block.HASH) + i * HASH_SIZE, HASH_SIZE)

    # Relocations.

    def n_reloc(self, i: int) -> int:
        idx = self._block(Block.RELOC_IDX) + i * 4
        return self._uint32_at(idx + 4) - self._uint32_at(idx)

    def reloc_off(self, i: int, j: int) -> int:
        """Return the offset of the j-th relocation of the i-th symbol."""
        first = self._uint32_at(self._block(Block.RELOC_IDX) + i * 4)
        return self._block(Block.RELOC) + (first + j) * RELOC_SIZE

    def reloc(self, i: int, j: int) -> Reloc:
        return Reloc(self._view(self.reloc_off(i, j), RELOC_SIZE))

    def relocs(self, i: int) -> list[Reloc]:
        """Return all relocations of the i-th symbol."""
        start = self.reloc_off(i, 0)
        n = self.n_reloc(i)
        return [Reloc(self._view(start + j * RELOC_SIZE, RELOC_SIZE)) for j in range(n)]

    # Auxiliary symbols.

    def n_aux(self, i: int) -> int:
        idx = self._block(Block.AUX_IDX) + i * 4
        return self._uint32_at(idx + 4) - self._uint32_at(idx)

    def aux_off(self, i: int, j: int) -> int:
        """Return the offset of the j-th aux symbol of the i-th symbol."""
        first = self._uint32_at(self._block(Block.AUX_IDX) + i * 4)
        return self._block(Block.AUX) + (first + j) * AUX_SIZE

    def aux(self, i: int, j: int) -> Aux:
        return Aux(self._view(self.aux_off(i, j), AUX_SIZE))

    def auxs(self, i: int) -> list[Aux]:
        """Return all aux symbols of the i-th symbol."""
        start = self.aux_off(i, 0)
        n = self.n_aux(i)
        return [Aux(self._view(start + j * AUX_SIZE, AUX_SIZE)) for j in range(n)]

    # Data.

    def _data_bounds(self, i: int) -> tuple[int, int]:
        idx = self._block(Block.DATA_IDX) + i * 4
        return self._uint32_at(idx), self._uint32_at(idx + 4)

    def data_off(self, i: int) -> int:
        """Return the file offset of the i-th symbol's data."""
        start, _end = self._data_bounds(i)
        return self._block(Block.DATA) + start

    def data_size(self, i: int) -> int:
        start, end = self._data_bounds(i)
        return end - start

    def data(self, i: int) -> bytes:
        start, end = self._data_bounds(i)
        return self.bytes_at(self._block(Block.DATA) + start, end - start)

    def data_string(self, i: int) -> str:
        start, end = self._data_bounds(i)
        return self.string_at(self._block(Block.DATA) + start, end - start)

    # Referenced names.

    def n_ref_name(self) -> int:
        return self._count(Block.REF_NAME, REF_NAME_SIZE)

    def ref_name(self, i: int) -> RefName:
        """Return the i-th referenced-symbol name record."""
        off = self._block(Block.REF_NAME) + i * REF_NAME_SIZE
        return RefName(self._view(off, REF_NAME_SIZE))
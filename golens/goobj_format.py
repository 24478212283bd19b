"""Fixed-size records and the writer of the object file format.

Every record is little-endian. A string is stored as a length and an
offset (two uint32s) that point at the string bytes written earlier.
"""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import BinaryIO, ClassVar, Protocol

STRING_REF_SIZE = 8
FINGERPRINT_SIZE = 8

MAGIC = b"\x00go120ld"

# Package indices with a special meaning; other packages count from 1.
PKG_IDX_NONE = (1 << 31) - 1
PKG_IDX_HASHED64 = PKG_IDX_NONE - 1
PKG_IDX_HASHED = PKG_IDX_NONE - 2
PKG_IDX_BUILTIN = PKG_IDX_NONE - 3
PKG_IDX_SELF = PKG_IDX_NONE - 4
PKG_IDX_SPECIAL = PKG_IDX_SELF
PKG_IDX_INVALID = 0


class Block(enum.IntEnum):
    """Blocks of an object file, in file order."""

    AUTOLIB = 0
    PKG_IDX = enum.auto()
    FILE = enum.auto()
    SYMDEF = enum.auto()
    HASHED64DEF = enum.auto()
    HASHEDDEF = enum.auto()
    NONPKGDEF = enum.auto()
    NONPKGREF = enum.auto()
    REF_FLAGS = enum.auto()
    HASH64 = enum.auto()
    HASH = enum.auto()
    RELOC_IDX = enum.auto()
    AUX_IDX = enum.auto()
    DATA_IDX = enum.auto()
    RELOC = enum.auto()
    AUX = enum.auto()
    DATA = enum.auto()
    REF_NAME = enum.auto()
    END = enum.auto()


N_BLK = len(Block)

SYM_SIZE = STRING_REF_SIZE + 2 + 1 + 1 + 1 + 4 + 4
SYM_ABI_STATIC = 0xFFFF
IMPORTED_PKG_SIZE = STRING_REF_SIZE + FINGERPRINT_SIZE
HASH64_SIZE = 8
HASH_SIZE = 16
RELOC_SIZE = 4 + 1 + 2 + 8 + 8
AUX_SIZE = 1 + 8
REF_FLAGS_SIZE = 8 + 1 + 1
REF_NAME_SIZE = 8 + STRING_REF_SIZE


class ObjFlag(enum.IntFlag):
    """Flags of the object file header."""

    SHARED = 1 << 0
    FROM_ASSEMBLY = 1 << 2
    UNLINKABLE = 1 << 3


class SymFlag(enum.IntFlag):
    """Bits of a symbol's first flag byte."""

    DUPOK = 1 << 0
    LOCAL = 1 << 1
    TYPELINK = 1 << 2
    LEAF = 1 << 3
    NOSPLIT = 1 << 4
    REFLECT_METHOD = 1 << 5
    GOTYPE = 1 << 6


class SymFlag2(enum.IntFlag):
    """Bits of a symbol's second flag byte."""

    USED_IN_IFACE = 1 << 0
    ITAB = 1 << 1
    DICT = 1 << 2
    PKG_INIT = 1 << 3


class AuxType(enum.IntEnum):
    """Kinds of auxiliary symbol."""

    GOTYPE = 0
    FUNC_INFO = enum.auto()
    FUNCDATA = enum.auto()
    DWARF_INFO = enum.auto()
    DWARF_LOC = enum.auto()
    DWARF_RANGES = enum.auto()
    DWARF_LINES = enum.auto()
    PCSP = enum.auto()
    PCFILE = enum.auto()
    PCLINE = enum.auto()
    PCINLINE = enum.auto()
    PCDATA = enum.auto()
    WASM_IMPORT = enum.auto()
    SEH_UNWIND_INFO = enum.auto()


class StringSource(Protocol):
    """Anything that can return the string stored at an offset."""

    def string_at(self, off: int, length: int) -> str: ...


@dataclass(frozen=True)
class SymRef:
    """A symbol reference: package index and symbol index."""

    pkg_idx: int = 0
    sym_idx: int = 0

    def is_zero(self) -> bool:
        """Report whether this is the nil reference {0, 0}."""
        return self.pkg_idx == 0 and self.sym_idx == 0


def _check_fingerprint(fp: bytes) -> None:
    if len(fp) != FINGERPRINT_SIZE:
        raise ValueError(f"fingerprint must be {FINGERPRINT_SIZE} bytes, got {len(fp)}")


class Writer:
    """Writes object file data to a binary stream, tracking the offset."""

    def __init__(self, wr: BinaryIO) -> None:
        self._wr = wr
        self._strings: dict[str, int] = {}
        self.offset = 0

    def add_string(self, s: str) -> None:
        """Write s unless it was already written, remembering its offset."""
        if s in self._strings:
            return
        self._strings[s] = self.offset
        self.raw_string(s)

    def _string_off(self, s: str) -> int:
        try:
            return self._strings[s]
        except KeyError:
            raise ValueError(f"string not added: {s!r}") from None

    def string_ref(self, s: str) -> None:
        """Write the length and offset of a string added earlier."""
        off = self._string_off(s)
        self.uint32(len(s.encode("utf-8")))
        self.uint32(off)

    def raw_string(self, s: str) -> None:
        """Write the bytes of s."""
        self.write_bytes(s.encode("utf-8"))

    def write_bytes(self, s: bytes) -> None:
        """Write raw bytes."""
        self._wr.write(s)
        self.offset += len(s)

    def uint64(self, x: int) -> None:
        self.write_bytes(struct.pack("<Q", x))

    def uint32(self, x: int) -> None:
        self.write_bytes(struct.pack("<I", x))

    def uint16(self, x: int) -> None:
        self.write_bytes(struct.pack("<H", x))

    def uint8(self, x: int) -> None:
        self.write_bytes(struct.pack("<B", x))


@dataclass
class Header:
    """The object file header."""

    magic: bytes = MAGIC
    fingerprint: bytes = bytes(FINGERPRINT_SIZE)
    flags: int = 0
    offsets: list[int] = field(default_factory=lambda: [0] * N_BLK)

    def __post_init__(self) -> None:
        _check_fingerprint(self.fingerprint)
        if len(self.offsets) != N_BLK:
            raise ValueError(f"header needs {N_BLK} block offsets, got {len(self.offsets)}")

    def write(self, w: Writer) -> None:
        w.write_bytes(self.magic)
        w.write_bytes(self.fingerprint)
        w.uint32(self.flags)
        for x in self.offsets:
            w.uint32(x)

    def size(self) -> int:
        """Return the header size as the format reckons it: magic, flags and offsets."""
        return len(self.magic) + 4 + 4 * len(self.offsets)


@dataclass
class ImportedPkg:
    """An imported package and its fingerprint."""

    pkg: str
    fingerprint: bytes = bytes(FINGERPRINT_SIZE)

    def __post_init__(self) -> None:
        _check_fingerprint(self.fingerprint)

    def write(self, w: Writer) -> None:
        w.string_ref(self.pkg)
        w.write_bytes(self.fingerprint)


class _Record:
    """A fixed-size little-endian record held as raw bytes."""

    SIZE: ClassVar[int] = 0
    __slots__ = ("_raw",)

    def __init__(self, data: bytes | bytearray | memoryview | None = None) -> None:
        if data is None:
            self._raw = bytearray(self.SIZE)
        else:
            if len(data) < self.SIZE:
                raise ValueError(
                    f"{type(self).__name__} needs {self.SIZE} bytes, got {len(data)}"
                )
            self._raw = bytearray(data[: self.SIZE])

    def __bytes__(self) -> bytes:
        return bytes(self._raw)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._raw == other._raw  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({bytes(self._raw)!r})"

    def _get(self, fmt: str, off: int) -> int:
        return struct.unpack_from(fmt, self._raw, off)[0]

    def _put(self, fmt: str, off: int, x: int) -> None:
        struct.pack_into(fmt, self._raw, off, x)

    def _get_sym(self, off: int) -> SymRef:
        return SymRef(*struct.unpack_from("<II", self._raw, off))

    def _put_sym(self, off: int, x: SymRef) -> None:
        struct.pack_into("<II", self._raw, off, x.pkg_idx, x.sym_idx)


class Sym(_Record):
    """A symbol definition: name, ABI, type, flags, size and alignment."""

    SIZE = SYM_SIZE
    __slots__ = ()

    def name_len(self) -> int:
        """Return the length of the symbol's name in bytes."""
        return self._get("<I", 0)

    def name(self, r: StringSource) -> str:
        return r.string_at(self._get("<I", 4), self._get("<I", 0))

    def set_name(self, x: str, w: Writer) -> None:
        """Point the name at string x, which must already be added to w."""
        self._put("<I", 0, len(x.encode("utf-8")))
        self._put("<I", 4, w._string_off(x))

    @property
    def abi(self) -> int:
        return self._get("<H", 8)

    @abi.setter
    def abi(self, x: int) -> None:
        self._put("<H", 8, x)

    @property
    def type(self) -> int:
        return self._raw[10]

    @type.setter
    def type(self, x: int) -> None:
        self._put("<B", 10, x)

    @property
    def flag(self) -> int:
        return self._raw[11]

    @flag.setter
    def flag(self, x: int) -> None:
        self._put("<B", 11, x)

    @property
    def flag2(self) -> int:
        return self._raw[12]

    @flag2.setter
    def flag2(self, x: int) -> None:
        self._put("<B", 12, x)

    @property
    def siz(self) -> int:
        return self._get("<I", 13)

    @siz.setter
    def siz(self, x: int) -> None:
        self._put("<I", 13, x)

    @property
    def align(self) -> int:
        return self._get("<I", 17)

    @align.setter
    def align(self, x: int) -> None:
        self._put("<I", 17, x)

    @property
    def dupok(self) -> bool:
        return bool(self.flag & SymFlag.DUPOK)

    @property
    def local(self) -> bool:
        return bool(self.flag & SymFlag.LOCAL)

    @property
    def typelink(self) -> bool:
        return bool(self.flag & SymFlag.TYPELINK)

    @property
    def leaf(self) -> bool:
        return bool(self.flag & SymFlag.LEAF)

    @property
    def no_split(self) -> bool:
        return bool(self.flag & SymFlag.NOSPLIT)

    @property
    def reflect_method(self) -> bool:
        return bool(self.flag & SymFlag.REFLECT_METHOD)

    @property
    def is_go_type(self) -> bool:
        return bool(self.flag & SymFlag.GOTYPE)

    @property
    def used_in_iface(self) -> bool:
        return bool(self.flag2 & SymFlag2.USED_IN_IFACE)

    @property
    def is_itab(self) -> bool:
        return bool(self.flag2 & SymFlag2.ITAB)

    @property
    def is_dict(self) -> bool:
        return bool(self.flag2 & SymFlag2.DICT)

    @property
    def is_pkg_init(self) -> bool:
        return bool(self.flag2 & SymFlag2.PKG_INIT)

    def write(self, w: Writer) -> None:
        w.write_bytes(bytes(self._raw))


class Reloc(_Record):
    """A relocation: offset, size, type, addend and target symbol."""

    SIZE = RELOC_SIZE
    __slots__ = ()

    @property
    def off(self) -> int:
        return self._get("<i", 0)

    @off.setter
    def off(self, x: int) -> None:
        self._put("<i", 0, x)

    @property
    def siz(self) -> int:
        return self._raw[4]

    @siz.setter
    def siz(self, x: int) -> None:
        self._put("<B", 4, x)

    @property
    def type(self) -> int:
        return self._get("<H", 5)

    @type.setter
    def type(self, x: int) -> None:
        self._put("<H", 5, x)

    @property
    def add(self) -> int:
        return self._get("<q", 7)

    @add.setter
    def add(self, x: int) -> None:
        self._put("<q", 7, x)

    @property
    def sym(self) -> SymRef:
        return self._get_sym(15)

    @sym.setter
    def sym(self, x: SymRef) -> None:
        self._put_sym(15, x)

    def set(self, off: int, size: int, typ: int, add: int, sym: SymRef) -> None:
        """Set every field at once."""
        self.off = off
        self.siz = size
        self.type = typ
        self.add = add
        self.sym = sym

    def write(self, w: Writer) -> None:
        w.write_bytes(bytes(self._raw))


class Aux(_Record):
    """An auxiliary symbol: its kind and the symbol it refers to."""

    SIZE = AUX_SIZE
    __slots__ = ()

    @property
    def type(self) -> int:
        return self._raw[0]

    @type.setter
    def type(self, x: int) -> None:
        self._put("<B", 0, x)

    @property
    def sym(self) -> SymRef:
        return self._get_sym(1)

    @sym.setter
    def sym(self, x: SymRef) -> None:
        self._put_sym(1, x)

    def write(self, w: Writer) -> None:
        w.write_bytes(bytes(self._raw))


class RefFlags(_Record):
    """Flags of a referenced symbol."""

    SIZE = REF_FLAGS_SIZE
    __slots__ = ()

    @property
    def sym(self) -> SymRef:
        return self._get_sym(0)

    @sym.setter
    def sym(self, x: SymRef) -> None:
        self._put_sym(0, x)

    @property
    def flag(self) -> int:
        return self._raw[8]

    @flag.setter
    def flag(self, x: int) -> None:
        self._put("<B", 8, x)

    @property
    def flag2(self) -> int:
        return self._raw[9]

    @flag2.setter
    def flag2(self, x: int) -> None:
        self._put("<B", 9, x)

    def write(self, w: Writer) -> None:
        w.write_bytes(bytes(self._raw))


class RefName(_Record):
    """The name of a referenced symbol."""

    SIZE = REF_NAME_SIZE
    __slots__ = ()

    @property
    def sym(self) -> SymRef:
        return self._get_sym(0)

    @sym.setter
    def sym(self, x: SymRef) -> None:
        self._put_sym(0, x)

    def name(self, r: StringSource) -> str:
        return r.string_at(self._get("<I", 12), self._get("<I", 8))

    def set_name(self, x: str, w: Writer) -> None:
        """Point the name at string x, which must already be added to w."""
        self._put("<I", 8, len(x.encode("utf-8")))
        self._put("<I", 12, w._string_off(x))

    def write(self, w: Writer) -> None:
        w.write_bytes(bytes(self._raw))
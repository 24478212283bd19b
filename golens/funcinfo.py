"""Function information stored as an auxiliary symbol, and its encoding."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import BinaryIO

from golens.goobj_format import SymRef

_NUM_FILE_OFF = 16
_INL_TREE_NODE_SIZE = 4 * 6
_INL_NODE = struct.Struct("<iIiIIi")


@dataclass
class InlTreeNode:
    """One node of a function's inlining tree."""

    parent: int = 0
    file: int = 0
    line: int = 0
    func: SymRef = field(default_factory=SymRef)
    parent_pc: int = 0

    def write(self, w: BinaryIO) -> None:
        w.write(
            _INL_NODE.pack(
                self.parent,
                self.file,
                self.line,
                self.func.pkg_idx,
                self.func.sym_idx,
                self.parent_pc,
            )
        )


def read_inl_tree_node(b: bytes) -> tuple[InlTreeNode, bytes]:
    """Decode an inlining-tree node from b; return it and the remaining bytes."""
    parent, file, line, pkg_idx, sym_idx, parent_pc = _INL_NODE.unpack_from(b)
    node = InlTreeNode(parent, file, line, SymRef(pkg_idx, sym_idx), parent_pc)
    return node, bytes(b[_INL_NODE.size:])


@dataclass
class FuncInfo:
    """Per-function metadata: frame sizes, IDs, start line, files and inlining."""

    args: int = 0
    locals: int = 0
    func_id: int = 0
    func_flag: int = 0
    start_line: int = 0
    file: list[int] = field(default_factory=list)
    inl_tree: list[InlTreeNode] = field(default_factory=list)

    def write(self, w: BinaryIO) -> None:
        w.write(
            struct.pack(
                "<IIBBxxi",
                self.args,
                self.locals,
                self.func_id,
                self.func_flag,
                self.start_line,
            )
        )
        w.write(struct.pack(f"<I{len(self.file)}I", len(self.file), *self.file))
        w.write(struct.pack("<I", len(self.inl_tree)))
        for node in self.inl_tree:
            node.write(w)


@dataclass
class FuncInfoLengths:
    """Counts and byte offsets of the variable-length parts of a FuncInfo."""

    num_file: int = 0
    file_off: int = 0
    num_inl_tree: int = 0
    inl_tree_off: int = 0
    initialized: bool = False


def _u32(b: bytes, off: int) -> int:
    return struct.unpack_from("<I", b, off)[0]


def read_func_info_lengths(b: bytes) -> FuncInfoLengths:
    """Locate the file table and inlining tree in an encoded FuncInfo."""
    num_file = _u32(b, _NUM_FILE_OFF)
    file_off = _NUM_FILE_OFF + 4
    num_inl_tree_off = file_off + 4 * num_file
    num_inl_tree = _u32(b, num_inl_tree_off)
    return FuncInfoLengths(
        num_file=num_file,
        file_off=file_off,
        num_inl_tree=num_inl_tree,
        inl_tree_off=num_inl_tree_off + 4,
        initialized=True,
    )


def read_args(b: bytes) -> int:
    return _u32(b, 0)


def read_locals(b: bytes) -> int:
    return _u32(b, 4)


def read_func_id(b: bytes) -> int:
    return b[8]


def read_func_flag(b: bytes) -> int:
    return b[9]


def read_start_line(b: bytes) -> int:
    return struct.unpack_from("<i", b, 12)[0]


def read_file(b: bytes, filesoff: int, k: int) -> int:
    """Return the k-th file index of the table starting at filesoff."""
    return _u32(b, filesoff + 4 * k)


def read_inl_tree(b: bytes, inltreeoff: int, k: int) -> InlTreeNode:
    """Return the k-th inlining-tree node of the tree starting at inltreeoff."""
    start = inltreeoff + k * _INL_TREE_NODE_SIZE
    node, _rest = read_inl_tree_node(b[start:start + _INL_TREE_NODE_SIZE])
    return node
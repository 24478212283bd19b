"""Symbols read from an executable or object file."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol


class RelocFormatter(Protocol):
    """Describes a relocation relative to the instruction that holds it."""

    def format(self, insn_offset: int) -> str:
        """Describe the relocation; insn_offset is the instruction's offset in its symbol."""
        ...


@dataclass
class SymbolReloc:
    """A relocation applied to the bytes of a symbol."""

    addr: int
    """Address of the first byte the relocation applies to."""
    size: int
    """Number of bytes covered."""
    stringer: RelocFormatter


@dataclass
class Symbol:
    """A symbol defined or referenced in a file."""

    name: str
    addr: int = 0
    size: int = 0
    code: str = "?"
    """nm-style code: T for text, D for data, U for undefined, and so on."""
    type: str = ""
    relocs: list[SymbolReloc] = field(default_factory=list)
    """Relocations, in increasing address order."""


def sort_by_addr(syms: Iterable[Symbol]) -> list[Symbol]:
    """Return the symbols ordered by address; equal addresses keep their order."""
    return sorted(syms, key=lambda s: s.addr)
from dataclasses import dataclass

from golens.symbols import Symbol, SymbolReloc, sort_by_addr


@dataclass
class _Fmt:
    label: str

    def format(self, insn_offset):
        return f"{self.label}@{insn_offset}"


def test_sort_by_addr_orders_by_address():
    syms = [Symbol("c", addr=30), Symbol("a", addr=10), Symbol("b", addr=20)]
    assert [s.name for s in sort_by_addr(syms)] == ["a", "b", "c"]


def test_sort_by_addr_keeps_order_of_equal_addresses():
    syms = [Symbol("x", addr=5), Symbol("y", addr=1), Symbol("z", addr=5)]
    assert [s.name for s in sort_by_addr(syms)] == ["y", "x", "z"]


def test_sort_by_addr_does_not_mutate_input():
    syms = [Symbol("b", addr=2), Symbol("a", addr=1)]
    result = sort_by_addr(syms)
    assert [s.name for s in syms] == ["b", "a"]
    assert sorted(s.addr for s in result) == [s.addr for s in result]


def test_sort_by_addr_accepts_generator():
    result = sort_by_addr(Symbol(n, addr=a) for n, a in (("q", 9), ("p", 3)))
    assert [s.name for s in result] == ["p", "q"]


def test_symbol_defaults():
    s = Symbol("main.f")
    assert s.addr == 0
    assert s.size == 0
    assert s.code == "?"
    assert s.relocs == []


def test_symbol_relocs_are_independent():
    a = Symbol("a")
    b = Symbol("b")
    a.relocs.append(SymbolReloc(addr=1, size=4, stringer=_Fmt("r")))
    assert b.relocs == []
    assert len(a.relocs) == 1


def test_symbol_reloc_uses_its_formatter():
    rel = SymbolReloc(addr=100, size=4, stringer=_Fmt("call"))
    assert rel.stringer.format(3) == "call@3"
    assert rel.addr == 100
    assert rel.size == 4
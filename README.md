# golens

A pure-Python library for the Go compiler's object file format (the
`go120ld` format). It reads the raw bytes of an object file, and writes
the fixed-size records it is built from. It also includes a few pieces
of toolchain metadata that help make sense of those files.

It has no dependencies beyond the standard library.

## Install

```
pip install golens
```

## Modules

- `golens.goobj_reader`: `Reader` wraps the bytes of an object file.
  On construction it checks the magic header and raises
  `ObjectFormatError` (a `ValueError`) if the bytes are not an object
  file. It also raises that error when a read would run past the end
  of the buffer. It gives access to:
  - imported packages (`autolib`) and referenced packages (`pkglist`,
    `n_pkg`, `pkg`);
  - file names (`n_file`, `file`);
  - symbol definitions (`n_sym`, `n_hashed64def`, `n_hasheddef`,
    `n_nonpkgdef`, `n_nonpkgref`, `sym`, `sym_off`);
  - referenced-symbol flags and names (`ref_flags`, `ref_name`);
  - hashes (`hash64`, `hash`);
  - per-symbol relocations (`relocs`, `reloc`, `n_reloc`), aux records
    (`auxs`, `aux`, `n_aux`) and data (`data`, `data_string`,
    `data_off`, `data_size`);
  - the header flags (`shared`, `from_assembly`, `unlinkable`).

  `read_header` decodes the header on its own.
- `golens.goobj_format`: the records of the format:
  - `Sym`, with properties for the ABI, type, flags, size and alignment;
  - `Reloc`, `Aux`, `RefFlags`, `RefName`, `SymRef`, `Header` and
    `ImportedPkg`;
  - the block, flag and aux-type enumerations;
  - `Writer`, which writes strings, integers and records to a binary
    stream and tracks the running offset.
- `golens.funcinfo`: `FuncInfo` and `InlTreeNode`, which write the
  function-info encoding. There are readers for its fields
  (`read_args`, `read_locals`, `read_func_id`, `read_func_flag`,
  `read_start_line`, `read_file`, `read_inl_tree`,
  `read_func_info_lengths`, `read_inl_tree_node`).
- `golens.symbols`: the `Symbol` and `SymbolReloc` records and
  `sort_by_addr`.
- `golens.builtins`: the table of compiler builtin symbols
  (`n_builtin`, `builtin_name`, `builtin_idx`).
- `golens.paths`: file-name rewriting (`apply_rewrites`, `abs_file`,
  `has_path_prefix`, `working_dir`), symbol-prefix escaping
  (`path_to_prefix`) and `is_runtime_package_path`.
- `golens.saferio`: `read_data` and `read_data_at` read a block of a
  given size, at most 10 MiB at a time, so a corrupt size does not
  cause one huge allocation. `slice_cap` picks a safe preallocation
  size.

## Examples

List the symbols defined in a package:

```python
from golens.goobj_reader import Reader

with open("pkg.o", "rb") as fh:
    reader = Reader(fh.read())

for i in range(reader.n_sym()):
    sym = reader.sym(i)
    print(sym.name(reader), sym.siz, len(reader.relocs(i)))
```

Look up builtins and rewrite paths:

```python
from golens.builtins import builtin_idx, builtin_name
from golens.paths import apply_rewrites, path_to_prefix

builtin_idx("runtime.newobject", 1)   # 0
builtin_name(0)                        # ("runtime.newobject", 1)
apply_rewrites("/home/u/src/x.go", "/home/u=>$HOME")  # ("$HOME/src/x.go", True)
path_to_prefix("example.com/a.b")      # "example.com/a%2eb"
```

## What it does not do

- It works on single object files held in memory. It does not open
  archives or native executables (ELF, Mach-O, PE).
- It does not disassemble machine code.
- It does not resolve relocation targets to symbol names.
- It does not map a pc to a file and line.
- Relocation types and symbol kinds are raw integers. It has no named
  enumerations for them.
- It has no command-line tool.

## Tests

```
pip install -e .[test]
pytest
```
"""Indices of compiler-generated (builtin) symbol references.

Builtin function and type references appear so often in object files that
they are referred to by a fixed index instead of by name.
"""

from __future__ import annotations

_BASIC_TYPES = (
    "int8", "uint8", "int16", "uint16",
    "int32", "uint32", "int64", "uint64",
    "float32", "float64", "complex64", "complex128",
    "unsafe.Pointer", "uintptr", "bool", "string", "error",
    "func(error) string",
)

# Runtime symbols in index order. Functions use ABIInternal (1); the names
# in _ABI0_RUNTIME are variables or assembly functions using ABI0.
_RUNTIME = (
    "newobject", "mallocgc", "panicdivide", "panicshift",
    "panicmakeslicelen", "panicmakeslicecap", "throwinit", "panicwrap",
    "gopanic", "gorecover", "goschedguarded",
    "goPanicIndex", "goPanicIndexU", "goPanicSliceAlen", "goPanicSliceAlenU",
    "goPanicSliceAcap", "goPanicSliceAcapU", "goPanicSliceB", "goPanicSliceBU",
    "goPanicSlice3Alen", "goPanicSlice3AlenU", "goPanicSlice3Acap",
    "goPanicSlice3AcapU", "goPanicSlice3B", "goPanicSlice3BU",
    "goPanicSlice3C", "goPanicSlice3CU", "goPanicSliceConvert",
    "printbool", "printfloat", "printint", "printhex", "printuint",
    "printcomplex", "printstring", "printpointer", "printuintptr",
    "printiface", "printeface", "printslice", "printnl", "printsp",
    "printlock", "printunlock",
    "concatstring2", "concatstring3", "concatstring4", "concatstring5",
    "concatstrings", "cmpstring", "intstring", "slicebytetostring",
    "slicebytetostringtmp", "slicerunetostring", "stringtoslicebyte",
    "stringtoslicerune", "slicecopy", "decoderune", "countrunes",
    "convI2I", "convT", "convTnoptr", "convT16", "convT32", "convT64",
    "convTstring", "convTslice",
    "assertE2I", "assertE2I2", "assertI2I", "assertI2I2",
    "panicdottypeE", "panicdottypeI", "panicnildottype",
    "ifaceeq", "efaceeq", "fastrand",
    "makemap64", "makemap", "makemap_small",
    "mapaccess1", "mapaccess1_fast32", "mapaccess1_fast64",
    "mapaccess1_faststr", "mapaccess1_fat",
    "mapaccess2", "mapaccess2_fast32", "mapaccess2_fast64",
    "mapaccess2_faststr", "mapaccess2_fat",
    "mapassign", "mapassign_fast32", "mapassign_fast32ptr",
    "mapassign_fast64", "mapassign_fast64ptr", "mapassign_faststr",
    "mapiterinit", "mapdelete", "mapdelete_fast32", "mapdelete_fast64",
    "mapdelete_faststr", "mapiternext", "mapclear",
    "makechan64", "makechan", "chanrecv1", "chanrecv2", "chansend1",
    "closechan", "writeBarrier", "typedmemmove", "typedmemclr",
    "typedslicecopy", "selectnbsend", "selectnbrecv", "selectsetpc",
    "selectgo", "block", "makeslice", "makeslice64", "makeslicecopy",
    "growslice", "unsafeslicecheckptr", "panicunsafeslicelen",
    "panicunsafeslicenilptr", "unsafestringcheckptr",
    "panicunsafestringlen", "panicunsafestringnilptr", "mulUintptr",
    "memmove", "memclrNoHeapPointers", "memclrHasPointers",
    "memequal", "memequal0", "memequal8", "memequal16", "memequal32",
    "memequal64", "memequal128", "f32equal", "f64equal", "c64equal",
    "c128equal", "strequal", "interequal", "nilinterequal",
    "memhash", "memhash0", "memhash8", "memhash16", "memhash32",
    "memhash64", "memhash128", "f32hash", "f64hash", "c64hash",
    "c128hash", "strhash", "interhash", "nilinterhash",
    "int64div", "uint64div", "int64mod", "uint64mod",
    "float64toint64", "float64touint64", "float64touint32",
    "int64tofloat64", "int64tofloat32", "uint64tofloat64",
    "uint64tofloat32", "uint32tofloat64", "complex128div",
    "getcallerpc", "getcallersp",
    "racefuncenter", "racefuncexit", "raceread", "racewrite",
    "racereadrange", "racewriterange",
    "msanread", "msanwrite", "msanmove", "asanread", "asanwrite",
    "checkptrAlignment", "checkptrArithmetic",
    "libfuzzerTraceCmp1", "libfuzzerTraceCmp2", "libfuzzerTraceCmp4",
    "libfuzzerTraceCmp8", "libfuzzerTraceConstCmp1",
    "libfuzzerTraceConstCmp2", "libfuzzerTraceConstCmp4",
    "libfuzzerTraceConstCmp8", "libfuzzerHookStrCmp",
    "libfuzzerHookEqualFold", "addCovMeta",
    "x86HasPOPCNT", "x86HasSSE41", "x86HasFMA", "armHasVFPv4",
    "arm64HasATOMICS",
    "deferproc", "deferprocStack", "deferreturn", "newproc",
    "panicoverflow", "sigpanic", "gcWriteBarrier", "duffzero", "duffcopy",
    "morestack", "morestackc", "morestack_noctxt",
)

_ABI0_RUNTIME = frozenset({
    "writeBarrier",
    "x86HasPOPCNT", "x86HasSSE41", "x86HasFMA", "armHasVFPv4",
    "arm64HasATOMICS",
    "morestack", "morestackc", "morestack_noctxt",
})


def _build_builtins() -> tuple[tuple[str, int], ...]:
    entries = [
        (f"runtime.{name}", 0 if name in _ABI0_RUNTIME else 1)
        for name in _RUNTIME
    ]
    for typ in _BASIC_TYPES:
        entries.append((f"type:{typ}", 0))
        entries.append((f"type:*{typ}", 0))
    return tuple(entries)


_BUILTINS = _build_builtins()
_BUILTIN_INDEX = {name: i for i, (name, _abi) in enumerate(_BUILTINS)}


def n_builtin() -> int:
    """Return the number of builtin symbols."""
    return len(_BUILTINS)


def builtin_name(i: int) -> tuple[str, int]:
    """Return the name and ABI of the i-th builtin symbol."""
    if not 0 <= i < len(_BUILTINS):
        raise IndexError(f"builtin index out of range: {i}")
    return _BUILTINS[i]


def builtin_idx(name: str, abi: int, regabi_wrappers: bool = True) -> int:
    """Return the index of the builtin with this name and ABI, or -1.

    The ABI only has to match when ABI wrappers are enabled.
    """
    i = _BUILTIN_INDEX.get(name)
    if i is None:
        return -1
    if regabi_wrappers and _BUILTINS[i][1] != abi:
        return -1
    return i
"""File-name rewriting and package-path escaping for symbol tables."""

from __future__ import annotations

import os

_HEX = "0123456789abcdef"


def working_dir() -> str:
    """Return the current directory with "/" separators, or "/???" if unknown."""
    try:
        path = os.getcwd()
    except OSError:
        path = ""
    if not path:
        path = "/???"
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    return path


def abs_file(dir: str, file: str, rewrites: str, goroot: str = "") -> str:
    """Return the absolute name of file in dir, rewritten by rewrites.

    Paths that no rewrite touched and that lie under goroot get the
    literal prefix "$GOROOT". An empty result becomes "??".
    """
    path = file
    if dir and not os.path.isabs(file):
        path = os.path.normpath(os.path.join(dir, file))

    path, rewritten = apply_rewrites(path, rewrites)
    if not rewritten and goroot and has_path_prefix(path, goroot):
        path = "$GOROOT" + path[len(goroot):]

    if os.name == "nt":
        path = path.replace("\\", "/")

    return path or "??"


def apply_rewrites(file: str, rewrites: str) -> tuple[str, bool]:
    """Apply the first matching rewrite from a ";"-separated list.

    Each rewrite is "prefix" or "prefix=>replace"; the prefix must match
    whole leading path elements. Returns the name and whether it changed.
    """
    for rewrite in rewrites.split(";"):
        new, ok = _apply_rewrite(file, rewrite)
        if ok:
            return new, True
    return file, False


def _apply_rewrite(path: str, rewrite: str) -> tuple[str, bool]:
    prefix, sep, replace = rewrite.rpartition("=>")
    if not sep:
        prefix, replace = rewrite, ""

    if not prefix or not has_path_prefix(path, prefix):
        return path, False
    if len(path) == len(prefix):
        return replace, True
    if not replace:
        return path[len(prefix) + 1:], True
    return replace + path[len(prefix):], True


def _fold(c: str) -> str:
    if "A" <= c <= "Z":
        return c.lower()
    if c == "\\":
        return "/"
    return c


def has_path_prefix(s: str, t: str) -> bool:
    """Report whether s equals t or starts with t followed by a slash.

    ASCII letters compare case-insensitively and "\\" matches "/".
    """
    if len(t) > len(s):
        return False
    if any(_fold(a) != _fold(b) for a, b in zip(s, t)):
        return False
    return len(s) == len(t) or s[len(t)] in "/\\"


def _needs_escape(c: int, after_slash: bool) -> bool:
    return (
        c <= 0x20
        or (c == 0x2E and after_slash)
        or c == 0x25
        or c == 0x22
        or c >= 0x7F
    )


def path_to_prefix(s: str) -> str:
    """Escape a package path for use as a symbol-name prefix.

    Control characters, space, "%", '"' and non-ASCII bytes become %xx;
    a period is escaped only in the last path element.
    """
    raw = s.encode("utf-8")
    slash = raw.rfind(b"/")
    flags = [_needs_escape(c, i > slash) for i, c in enumerate(raw)]
    if not any(flags):
        return s
    out = []
    for c, escape in zip(raw, flags):
        if escape:
            out.append("%" + _HEX[c >> 4] + _HEX[c & 0xF])
        else:
            out.append(chr(c))
    return "".join(out)


def is_runtime_package_path(pkgpath: str) -> bool:
    """Report whether pkgpath is one of the runtime-related packages."""
    if pkgpath in ("runtime", "reflect", "syscall", "internal/bytealg"):
        return True
    return pkgpath.startswith("runtime/internal")
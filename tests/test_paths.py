import os

import pytest

from golens.paths import (
    abs_file,
    apply_rewrites,
    has_path_prefix,
    is_runtime_package_path,
    path_to_prefix,
    working_dir,
)


def test_working_dir_uses_current_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    wd = working_dir()
    assert wd.endswith("/" + tmp_path.name)
    assert "\\" not in wd


def test_working_dir_unknown(monkeypatch):
    def fail():
        raise OSError("gone")

    monkeypatch.setattr(os, "getcwd", fail)
    assert working_dir() == "/???"


@pytest.mark.parametrize(
    "s, t, expected",
    [
        ("a/b/c", "A/B", True),
        ("a/b/c", "a\\b", True),
        ("a/b/c", "a/b/c", True),
        ("a/bc", "a/b", False),
        ("a/b", "a/b/c", False),
        ("x/b/c", "a/b", False),
        ("a\\b", "a", True),
    ],
)
def test_has_path_prefix(s, t, expected):
    assert has_path_prefix(s, t) is expected


def test_apply_rewrites_replace():
    assert apply_rewrites("/home/u/x.go", "/home/u=>/src") == ("/src/x.go", True)


def test_apply_rewrites_remove_prefix():
    assert apply_rewrites("/a/b/c.go", "/a/b") == ("c.go", True)


def test_apply_rewrites_whole_path():
    assert apply_rewrites("/a/b", "/a/b=>X") == ("X", True)


def test_apply_rewrites_no_match():
    assert apply_rewrites("/a/b/c.go", "/q;/z=>/y") == ("/a/b/c.go", False)
    assert apply_rewrites("/a/b/c.go", "") == ("/a/b/c.go", False)


def test_apply_rewrites_first_match_wins():
    assert apply_rewrites("/a/b/c.go", "/x;/a=>/one;/a/b=>/two") == ("/one/b/c.go", True)


def test_abs_file_joins_relative_name():
    assert abs_file("/d", "f.go", "") == "/d/f.go"


def test_abs_file_keeps_absolute_name():
    assert abs_file("/d", "/e/f.go", "") == "/e/f.go"


def test_abs_file_goroot_prefix():
    assert abs_file("", "/go/src/x.go", "", "/go") == "$GOROOT/src/x.go"


def test_abs_file_rewrite_preempts_goroot():
    assert abs_file("", "/go/src/x.go", "/go=>/r", "/go") == "/r/src/x.go"


def test_abs_file_empty_result():
    assert abs_file("", "/a", "/a", "") == "??"


def test_path_to_prefix_unchanged():
    assert path_to_prefix("example.com/plain/path") == "example.com/plain/path"


def test_path_to_prefix_escapes_last_dot_only():
    assert path_to_prefix("a.b/c.d") == "a.b/c%2ed"


def test_path_to_prefix_escapes_specials():
    result = path_to_prefix('x y%"')
    assert result == "x%20y%25%22"


def test_path_to_prefix_non_ascii_is_ascii():
    result = path_to_prefix("p/\u00e9")
    assert result.isascii()
    assert result.startswith("p/%")
    assert result.count("%") == len("\u00e9".encode("utf-8"))


@pytest.mark.parametrize(
    "pkg, expected",
    [
        ("runtime", True),
        ("reflect", True),
        ("syscall", True),
        ("internal/bytealg", True),
        ("runtime/internal/sys", True),
        ("fmt", False),
        ("internal/abi", False),
    ],
)
def test_is_runtime_package_path(pkg, expected):
    assert is_runtime_package_path(pkg) is expected
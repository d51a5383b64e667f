"""Tests for the file_resolver package: classification, probing, walking, globbing."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from artifactsets.file_resolver import (
    PathKind,
    expand_braces,
    expand_glob,
    is_glob_pattern,
    probe_path,
    walk_files,
)
from artifactsets.file_resolver.ignore import (
    _read_ignore_file,  # pyright: ignore[reportPrivateUsage]
    compile_patterns,
    load_ignore_file,
)

needs_symlinks = pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")


@pytest.mark.parametrize(
    "pattern",
    ["*.log", "logs/?.txt", "data/[abc].csv", "src/{a,b}", "@(x)", "!keep", "a]", "**"],
)
def test_is_glob_pattern_wildcards(pattern: str):
    assert is_glob_pattern(pattern)


@pytest.mark.parametrize(
    "pattern", ["logs", "reports/junit.xml", "/abs/path/file.txt", "./rel/../x", "", " "]
)
def test_is_glob_pattern_literals(pattern: str):
    assert not is_glob_pattern(pattern)


def test_expand_braces_simple():
    assert expand_braces("src/{a,b}/*.py") == ["src/a/*.py", "src/b/*.py"]


def test_expand_braces_multiple_groups():
    assert expand_braces("{x,y}.{log,txt}") == ["x.log", "x.txt", "y.log", "y.txt"]


def test_expand_braces_nested():
    assert expand_braces("a{b,c{d,e}}f") == ["abf", "acdf", "acef"]


def test_expand_braces_literal_groups():
    assert expand_braces("no-braces/*") == ["no-braces/*"]
    assert expand_braces("{single}") == ["{single}"]
    assert expand_braces("{unclosed,x") == ["{unclosed,x"]


def test_expand_braces_drops_duplicates():
    assert expand_braces("{a,a,b}") == ["a", "b"]


def test_probe_file_and_directory(tmp_path: Path):
    f = tmp_path / "app.log"
    f.write_text("log")
    assert probe_path(f) is PathKind.file
    assert probe_path(tmp_path) is PathKind.directory


def test_probe_missing(tmp_path: Path):
    assert probe_path(tmp_path / "nope") is PathKind.missing
    assert probe_path(tmp_path / "nope" / "deeper") is PathKind.missing


def test_probe_path_through_file_is_missing(tmp_path: Path):
    f = tmp_path / "file.txt"
    f.write_text("x")
    assert probe_path(f / "child") is PathKind.missing


@needs_symlinks
def test_probe_follows_symlinks(tmp_path: Path):
    target = tmp_path / "target.txt"
    target.write_text("x")
    link = tmp_path / "link.txt"
    link.symlink_to(target)
    dangling = tmp_path / "dangling"
    dangling.symlink_to(tmp_path / "gone")

    assert probe_path(link) is PathKind.file
    assert probe_path(dangling) is PathKind.missing


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs FIFOs")
def test_probe_other(tmp_path: Path):
    fifo = tmp_path / "pipe"
    os.mkfifo(fifo)
    assert probe_path(fifo) is PathKind.other


def test_probe_unreadable(tmp_path: Path):
    if os.name == "nt" or os.getuid() == 0:
        pytest.skip("permission bits are not enforced for this user")
    f = tmp_path / "secret.txt"
    f.write_text("x")
    f.chmod(0o000)
    try:
        assert probe_path(f) is PathKind.unreadable
    finally:
        f.chmod(stat.S_IRUSR | stat.S_IWUSR)


def test_walk_files_recursive(tmp_path: Path):
    (tmp_path / "a.txt").write_text("a")
    deep = tmp_path / "x" / "y" / "z"
    deep.mkdir(parents=True)
    (deep / "b.txt").write_text("b")
    (tmp_path / ".hidden").write_text("h")
    (tmp_path / "empty").mkdir()

    result = walk_files(tmp_path)
    assert sorted(p.relative_to(tmp_path).as_posix() for p in result) == [
        ".hidden",
        "a.txt",
        "x/y/z/b.txt",
    ]


def test_walk_files_only_empty_subdirectories(tmp_path: Path):
    (tmp_path / "one" / "two").mkdir(parents=True)
    (tmp_path / "three").mkdir()
    assert walk_files(tmp_path) == []


def test_walk_files_deep_tree_no_recursion_limit(tmp_path: Path):
    current = tmp_path
    for i in range(60):
        current = current / f"d{i}"
    current.mkdir(parents=True)
    (current / "leaf.txt").write_text("leaf")
    assert [p.name for p in walk_files(tmp_path)] == ["leaf.txt"]


@needs_symlinks
def test_walk_files_follows_symlinks(tmp_path: Path):
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "shared.txt").write_text("shared")
    target_file = tmp_path / "target.txt"
    target_file.write_text("t")

    root = tmp_path / "root"
    root.mkdir()
    (root / "linked_dir").symlink_to(outside, target_is_directory=True)
    (root / "linked_file.txt").symlink_to(target_file)

    names = sorted(p.relative_to(root).as_posix() for p in walk_files(root))
    assert names == ["linked_dir/shared.txt", "linked_file.txt"]


@needs_symlinks
def test_walk_files_symlink_cycle_terminates(tmp_path: Path):
    root = tmp_path / "root"
    sub = root / "sub"
    sub.mkdir(parents=True)
    (sub / "file.txt").write_text("x")
    (sub / "loop").symlink_to(root, target_is_directory=True)

    result = walk_files(root)
    assert [p.relative_to(root).as_posix() for p in result] == ["sub/file.txt"]


@needs_symlinks
def test_walk_files_lists_aliased_directory_under_both_paths(tmp_path: Path):
    dist = tmp_path / "dist"
    (dist / "v1").mkdir(parents=True)
    (dist / "v1" / "f.txt").write_text("f")
    (dist / "latest").symlink_to(dist / "v1", target_is_directory=True)

    names = sorted(p.relative_to(dist).as_posix() for p in walk_files(dist))
    assert names == ["latest/f.txt", "v1/f.txt"]


@needs_symlinks
def test_walk_files_nested_cycle_lists_each_file_once(tmp_path: Path):
    root = tmp_path / "root"
    (root / "a" / "b").mkdir(parents=True)
    (root / "a" / "b" / "leaf.txt").write_text("x")
    (root / "a" / "b" / "up").symlink_to(root / "a", target_is_directory=True)

    names = sorted(p.relative_to(root).as_posix() for p in walk_files(root))
    assert names == ["a/b/leaf.txt"]


def test_walk_files_reports_unlistable_directories(tmp_path: Path):
    if os.name == "nt" or os.getuid() == 0:
        pytest.skip("permission bits are not enforced for this user")
    (tmp_path / "ok.txt").write_text("ok")
    locked = tmp_path / "locked"
    locked.mkdir()
    (locked / "hidden.txt").write_text("x")
    locked.chmod(0o000)
    errors: list[Path] = []
    try:
        result = walk_files(tmp_path, on_error=lambda path, exc: errors.append(path))
    finally:
        locked.chmod(stat.S_IRWXU)
    assert [p.name for p in result] == ["ok.txt"]
    assert errors == [locked]


def test_expand_glob_files_and_dotfiles(tmp_path: Path):
    (tmp_path / "a.log").write_text("a")
    (tmp_path / ".hidden.log").write_text("h")
    (tmp_path / "b.txt").write_text("b")

    matches = expand_glob("*.log", tmp_path)
    assert sorted(p.name for p in matches.files) == [".hidden.log", "a.log"]
    assert matches.directories == []
    assert all(p.is_absolute() for p in matches.files)


def test_expand_glob_separates_directories(tmp_path: Path):
    (tmp_path / "coverage").mkdir()
    (tmp_path / "coverage" / "index.html").write_text("<html>")
    (tmp_path / "coverage.xml").write_text("<xml>")

    matches = expand_glob("cov*", tmp_path)
    assert [p.name for p in matches.files] == ["coverage.xml"]
    assert [p.name for p in matches.directories] == ["coverage"]


def test_expand_glob_globstar(tmp_path: Path):
    deep = tmp_path / "reports" / "unit" / "nested"
    deep.mkdir(parents=True)
    (deep / "junit.xml").write_text("<x/>")
    (tmp_path / "reports" / "top.xml").write_text("<x/>")

    matches = expand_glob("reports/**/*.xml", tmp_path)
    assert sorted(p.relative_to(tmp_path).as_posix() for p in matches.files) == [
        "reports/top.xml",
        "reports/unit/nested/junit.xml",
    ]


def test_expand_glob_braces(tmp_path: Path):
    for name in ["a.txt", "b.txt", "c.txt"]:
        (tmp_path / name).write_text(name)
    matches = expand_glob("{a,c}.txt", tmp_path)
    assert sorted(p.name for p in matches.files) == ["a.txt", "c.txt"]


def test_expand_glob_is_case_sensitive(tmp_path: Path):
    (tmp_path / "app.log").write_text("x")
    assert expand_glob("*.LOG", tmp_path).is_empty


def test_expand_glob_absolute_pattern(tmp_path: Path):
    (tmp_path / "a.txt").write_text("a")
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    matches = expand_glob(str(tmp_path / "*.txt"), elsewhere)
    assert matches.files == [tmp_path / "a.txt"]


def test_expand_glob_no_match(tmp_path: Path):
    matches = expand_glob("missing/**", tmp_path)
    assert matches.is_empty


def test_expand_glob_base_with_wildcard_characters(tmp_path: Path):
    base = tmp_path / "ws[1]"
    base.mkdir()
    (base / "a.txt").write_text("a")
    matches = expand_glob("*.txt", base)
    assert matches.files == [base / "a.txt"]


@needs_symlinks
def test_expand_glob_follows_symlinked_directories(tmp_path: Path):
    real = tmp_path / "real"
    real.mkdir()
    (real / "data.csv").write_text("1,2")
    (tmp_path / "alias").symlink_to(real, target_is_directory=True)

    matches = expand_glob("alias/*.csv", tmp_path)
    assert matches.files == [tmp_path / "alias" / "data.csv"]


def test_compile_patterns_skips_blanks_and_comments():
    assert compile_patterns(["", "  ", "# comment"]) is None
    spec = compile_patterns(["*.tmp", "# comment"])
    assert spec is not None
    assert spec.match_file("x.tmp")
    assert not spec.match_file("x.txt")


def test_read_ignore_file_missing(tmp_path: Path):
    assert _read_ignore_file(tmp_path / "nonexistent") is None


def test_read_ignore_file_non_utf8(tmp_path: Path):
    ignore_file = tmp_path / ".artifactsetsignore"
    ignore_file.write_bytes(b"\x80\x81\x82\xff\xfe")
    assert _read_ignore_file(ignore_file) is None


def test_load_ignore_file_walks_up(tmp_path: Path):
    (tmp_path / ".artifactsetsignore").write_text("*.tmp\n")
    sub = tmp_path / "a" / "b"
    sub.mkdir(parents=True)
    spec = load_ignore_file(".artifactsetsignore", sub)
    assert spec is not None
    assert spec.match_file("scratch.tmp")

from __future__ import annotations

import os
from pathlib import Path
from typing import List

import pytest

from kti.walk import iter_files


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    (tmp_path / "a.txt").write_bytes(b"a")
    (tmp_path / ".hidden.png").write_bytes(b"h")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "b.png").write_bytes(b"b")
    (tmp_path / "sub" / "deeper").mkdir()
    (tmp_path / "sub" / "deeper" / "c.gif").write_bytes(b"c")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "config").write_bytes(b"x")
    return tmp_path


def _names(paths) -> List[str]:
    return sorted(p.name for p in paths)


def test_recursive_skips_hidden(tree: Path):
    assert _names(iter_files(tree)) == ["a.txt", "b.png", "c.gif"]


def test_show_hidden(tree: Path):
    assert _names(iter_files(tree, show_hidden=True)) == [".hidden.png", "a.txt", "b.png", "c.gif", "config"]


def test_max_depth(tree: Path):
    assert _names(iter_files(tree, max_depth=1)) == ["a.txt"]
    assert _names(iter_files(tree, max_depth=2)) == ["a.txt", "b.png"]
    assert list(iter_files(tree, max_depth=0)) == []


def test_single_file_root(tree: Path):
    fp = tree / "a.txt"
    assert list(iter_files(fp)) == [fp]
    assert list(iter_files(fp, max_depth=0)) == [fp]


def test_hidden_root_is_still_walked(tmp_path: Path):
    root = tmp_path / ".photos"
    root.mkdir()
    (root / "x.jpg").write_bytes(b"x")
    assert _names(iter_files(root)) == ["x.jpg"]


def test_missing_root_yields_nothing(tmp_path: Path):
    assert list(iter_files(tmp_path / "nope")) == []


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_symlinked_dirs_need_follow_links(tmp_path: Path):
    target = tmp_path / "target"
    target.mkdir()
    (target / "t.png").write_bytes(b"t")
    root = tmp_path / "root"
    root.mkdir()
    try:
        (root / "link").symlink_to(target, target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    assert list(iter_files(root)) == []
    assert _names(iter_files(root, follow_links=True)) == ["t.png"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_symlink_loop_is_reported(tmp_path: Path):
    (tmp_path / "f.png").write_bytes(b"f")
    try:
        (tmp_path / "loop").symlink_to(tmp_path, target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    errors: List[OSError] = []
    found = list(iter_files(tmp_path, follow_links=True, on_error=errors.append))
    assert _names(found) == ["f.png"]
    assert len(errors) == 1
    assert "loop" in str(errors[0])


@pytest.mark.skipif(os.name == "nt" or (hasattr(os, "geteuid") and os.geteuid() == 0),
                    reason="permission bits are not enforced")
def test_unreadable_dir_is_reported_and_skipped(tmp_path: Path):
    (tmp_path / "ok.png").write_bytes(b"o")
    locked = tmp_path / "locked"
    locked.mkdir()
    (locked / "inner.png").write_bytes(b"i")
    locked.chmod(0)
    try:
        errors: List[OSError] = []
        found = list(iter_files(tmp_path, on_error=errors.append))
    finally:
        locked.chmod(0o755)
    assert _names(found) == ["ok.png"]
    assert len(errors) == 1


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_link_to_sibling_dir_is_walked_not_a_loop(tmp_path: Path):
    root = tmp_path / "root"
    albums = root / "albums"
    albums.mkdir(parents=True)
    (albums / "a.png").write_bytes(b"a")
    try:
        (root / "shortcut").symlink_to(albums, target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    errors: List[OSError] = []
    found = list(iter_files(root, follow_links=True, on_error=errors.append))
    assert errors == []
    assert sorted(p.relative_to(root).as_posix() for p in found) == ["albums/a.png", "shortcut/a.png"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_link_to_grandparent_is_a_loop(tmp_path: Path):
    inner = tmp_path / "outer" / "inner"
    inner.mkdir(parents=True)
    (inner / "x.gif").write_bytes(b"x")
    try:
        (inner / "up").symlink_to(tmp_path / "outer", target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    errors: List[OSError] = []
    found = list(iter_files(tmp_path, follow_links=True, on_error=errors.append))
    assert _names(found) == ["x.gif"]
    assert len(errors) == 1

from __future__ import annotations

"""
Unit tests for Directory Traversal.

Verifies:
1. Child listing, filtering and name lookups.
2. Pre-order recursive walks.
3. Glob evaluation with working-directory restoration.
4. Directory creation rules and temporary sub-directories.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from fsobject.core.directory import Dir
from fsobject.core.file import File
from fsobject.domain.errors import ExternalToolError, PathConflictError


# -----------------------------------------------------------------------------
# LISTING
# -----------------------------------------------------------------------------

def test_children_lists_immediate_entries(project_tree: Path) -> None:
    kids = Dir(project_tree).children()

    assert sorted(kids.names()) == [".git", "README.md", "data.json", "src"]
    assert isinstance(kids.by_name()["src"], Dir)
    assert isinstance(kids.by_name()["README.md"], File)


def test_children_of_empty_directory(tmp_path: Path) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()

    assert Dir(empty).children() == []
    assert list(Dir(empty).walk()) == []


def test_children_filters(project_tree: Path) -> None:
    d = Dir(project_tree)
    script = project_tree / "run.sh"
    script.write_text("#!/bin/sh\n", encoding="utf-8")
    script.chmod(0o755)
    os.symlink(project_tree / "README.md", project_tree / "link.md")

    assert sorted(d.dirs().names()) == [".git", "src"]
    assert "README.md" in d.files().names()
    assert d.executables().names() == ["run.sh"]
    assert d.symlinks().names() == ["link.md"]


def test_children_skips_vanished_entries(project_tree: Path) -> None:
    """TC-01: An entry removed between listing and probing is skipped."""
    listing = ["README.md", "ghost"]
    with patch("fsobject.core.directory.os.listdir", return_value=listing):
        kids = Dir(project_tree).children()

    assert kids.names() == ["README.md"]


# -----------------------------------------------------------------------------
# WALKING
# -----------------------------------------------------------------------------

def test_walk_is_pre_order(project_tree: Path) -> None:
    """TC-02: Each directory is followed immediately by its subtree."""
    order = [h.path_abs for h in Dir(project_tree).walk()]

    src = str(project_tree / "src")
    pkg = str(project_tree / "src" / "pkg")
    mod = str(project_tree / "src" / "pkg" / "mod.py")

    assert order.index(pkg) == order.index(src) + 1
    assert order.index(mod) == order.index(pkg) + 1
    assert len(order) == 6


def test_walk_non_recursive_equals_children(project_tree: Path) -> None:
    d = Dir(project_tree)

    assert list(d.walk(recursive=False)) == d.children()


def test_traverse_visits_every_entry(project_tree: Path) -> None:
    seen = []

    Dir(project_tree).traverse(seen.append)

    assert {h.name for h in seen} == {".git", "src", "pkg", "mod.py", "README.md", "data.json"}


# -----------------------------------------------------------------------------
# GLOB & LOOKUP
# -----------------------------------------------------------------------------

def test_glob_is_relative_to_directory(project_tree: Path, tmp_path: Path) -> None:
    os.chdir(tmp_path)
    d = Dir(project_tree)

    assert d.glob("*.md").names() == ["README.md"]
    assert d.glob("src/*/*.py")[0] == project_tree / "src" / "pkg" / "mod.py"
    assert os.getcwd() == str(tmp_path)


def test_glob_restores_cwd_on_error(project_tree: Path, tmp_path: Path) -> None:
    """TC-03: The working directory is restored when expansion fails."""
    os.chdir(tmp_path)

    with patch("fsobject.core.directory.globbing.glob", side_effect=RuntimeError("boom")):
        with pytest.raises(RuntimeError):
            Dir(project_tree).glob("*")

    assert os.getcwd() == str(tmp_path)


def test_existing_and_index_lookup(project_tree: Path) -> None:
    d = Dir(project_tree)

    assert d.existing("nope") is None
    assert d.existing(None) is None
    assert isinstance(d["README.md"], File)
    assert isinstance(d["src/pkg"], Dir)


def test_file_returns_new_handle_when_missing(project_tree: Path) -> None:
    d = Dir(project_tree)

    new = d.file("new.txt")

    assert isinstance(new, File)
    assert not new.exists()
    assert isinstance(d.file("src"), Dir)


def test_existing_all_plain_and_glob(project_tree: Path) -> None:
    d = Dir(project_tree)

    assert [h.name for h in d.existing_all("README.md", "missing", "data.json")] == ["README.md", "data.json"]
    assert [h.name for h in d.existing_all("*.json", glob=True)] == ["data.json"]


# -----------------------------------------------------------------------------
# CREATION
# -----------------------------------------------------------------------------

def test_mkdir_rules(tmp_path: Path) -> None:
    """TC-04: mkdir refuses existing paths unless 'ensure' and a directory."""
    d = Dir(tmp_path)
    (tmp_path / "plain").write_text("", encoding="utf-8")

    created = d.mkdir("a/b")
    assert created.is_dir

    with pytest.raises(PathConflictError, match="directory-already-exists"):
        d.mkdir("a/b")

    assert d.mkdir("a/b", ensure=True) == created

    with pytest.raises(PathConflictError, match="file-exists-but-not-directory"):
        d.mkdir("plain", ensure=True)


def test_ensure_creates_missing_parents(tmp_path: Path) -> None:
    d = Dir(tmp_path / "x" / "y" / "z").ensure()

    assert d.is_dir
    assert d.ensure() is d


def test_tmp_subdirectory_is_removed(tmp_path: Path) -> None:
    d = Dir(tmp_path)

    with d.tmp() as scratch:
        assert scratch.is_dir
        assert scratch.parent == d
        kept = scratch.path_abs

    assert not os.path.exists(kept)


def test_tmp_with_chdir(tmp_path: Path) -> None:
    start = os.getcwd()

    with Dir(tmp_path).tmp(chdir=True) as scratch:
        assert os.getcwd() == scratch.path_abs

    assert os.getcwd() == start


# -----------------------------------------------------------------------------
# WORKING DIRECTORY & PREDICATES
# -----------------------------------------------------------------------------

def test_chdir_scope_and_cd(tmp_path: Path, project_tree: Path) -> None:
    os.chdir(tmp_path)
    d = Dir(project_tree)

    with d.chdir():
        assert os.getcwd() == d.path_abs
    assert os.getcwd() == str(tmp_path)

    assert d.cd() is d
    assert os.getcwd() == d.path_abs


def test_root_predicate() -> None:
    assert Dir("/").is_root
    assert not Dir("/usr").is_root


def test_home_predicate(tmp_path: Path) -> None:
    with patch.dict(os.environ, {"HOME": str(tmp_path)}):
        assert Dir(tmp_path).is_home
        assert not Dir(tmp_path / "sub").is_home


@pytest.mark.parametrize("exit_code, expected", [(0, True), (1, False)])
def test_same_tree_exit_codes(tmp_path: Path, scripted_runner, exit_code, expected) -> None:
    scripted_runner.on("diff", exit_code=exit_code)

    assert Dir(tmp_path, runner=scripted_runner).same_tree(tmp_path) is expected
    assert scripted_runner.calls[0][0][:3] == ("diff", "--recursive", "--brief")


def test_same_tree_tool_failure(tmp_path: Path, scripted_runner) -> None:
    scripted_runner.on("diff", stderr="No such file", exit_code=2)

    with pytest.raises(ExternalToolError) as exc:
        Dir(tmp_path, runner=scripted_runner).same_tree(tmp_path / "missing")

    assert exc.value.operation == "directory-diff-error"


# -----------------------------------------------------------------------------
# ARCHIVE & EXPORT
# -----------------------------------------------------------------------------

def test_zip_runs_from_parent(project_tree: Path, scripted_runner) -> None:
    scripted_runner.on("zip")
    archive = project_tree.parent / "out.zip"

    result = Dir(project_tree / "src", runner=scripted_runner).zip(archive)

    argv, cwd = scripted_runner.calls[0]
    assert argv == ("zip", "-r", str(archive), "src")
    assert cwd == str(project_tree)
    assert result.subtype == "zip"


def test_to_dict_nests_children(project_tree: Path) -> None:
    os.symlink(project_tree / "README.md", project_tree / "link.md")

    tree = Dir(project_tree).to_dict(size=True)

    assert tree["children"]["src"]["children"]["pkg"]["children"]["mod.py"]["size"] > 0
    assert tree["children"]["link.md"] == "README.md"
    assert tree["children"][".git"] == {"children": {}}

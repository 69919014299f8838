from __future__ import annotations

"""
Unit tests for Handle Mutation and File Operations.

Verifies:
1. Idempotent deletion and handle-following moves.
2. The frozen flag guarding every mutating operation.
3. Symlink creation and inspection.
4. File content helpers and tool-backed operations.
"""

import os
import stat
from pathlib import Path

import pytest

from fsobject.core.directory import Dir
from fsobject.core.file import File
from fsobject.core.file_types import ZipFile
from fsobject.core.handle import FSO
from fsobject.domain.errors import ExternalToolError, FrozenHandleError, NotFoundError


# -----------------------------------------------------------------------------
# DELETE / MOVE / TOUCH
# -----------------------------------------------------------------------------

def test_delete_is_idempotent(project_tree: Path) -> None:
    """TC-01: Deleting twice succeeds; the tree is removed recursively."""
    src = Dir(project_tree / "src")

    assert src.delete() is True
    assert not src.exists()
    assert src.delete() is True


def test_delete_symlink_keeps_target(project_tree: Path) -> None:
    link = project_tree / "src_link"
    os.symlink(project_tree / "src", link)

    FSO(link).delete()

    assert not os.path.lexists(link)
    assert (project_tree / "src" / "pkg" / "mod.py").exists()


def test_move_into_directory_follows_entry(project_tree: Path) -> None:
    readme = File(project_tree / "README.md")

    readme.move(project_tree / "src")

    assert readme == project_tree / "src" / "README.md"
    assert readme.exists()
    assert not (project_tree / "README.md").exists()


def test_move_to_exact_path(project_tree: Path) -> None:
    readme = File(project_tree / "README.md")

    readme.move(project_tree / "NOTES.md")

    assert readme.name == "NOTES.md"
    assert readme.read().startswith("# foo")


def test_touch_creates_file(tmp_path: Path) -> None:
    handle = File(tmp_path / "new.txt").touch()

    assert handle.is_file
    assert handle.size == 0
    assert handle.inode == os.stat(tmp_path / "new.txt").st_ino


# -----------------------------------------------------------------------------
# FROZEN HANDLES
# -----------------------------------------------------------------------------

def test_frozen_handle_rejects_mutation(project_tree: Path) -> None:
    """TC-02: A frozen handle refuses writes, moves, deletes and mkdir."""
    readme = File(project_tree / "README.md").freeze()
    proj = Dir(project_tree).freeze()

    assert readme.frozen
    with pytest.raises(FrozenHandleError, match="cannot-write-with-frozen-file-object"):
        readme.write("x")
    with pytest.raises(FrozenHandleError, match="cannot-delete"):
        readme.delete()
    with pytest.raises(FrozenHandleError, match="cannot-move"):
        readme.move(project_tree / "elsewhere.md")
    with pytest.raises(FrozenHandleError, match="cannot-mkdir"):
        proj.mkdir("new")

    assert readme.read().startswith("# foo")


def test_freeze_is_per_handle(project_tree: Path) -> None:
    File(project_tree / "README.md").freeze()

    assert File(project_tree / "README.md").write("fresh") == 5


# -----------------------------------------------------------------------------
# SYMLINKS
# -----------------------------------------------------------------------------

def test_symlink_roundtrip(project_tree: Path) -> None:
    readme = File(project_tree / "README.md")

    link = readme.symlink(project_tree / "link.md")

    assert isinstance(link, File)
    assert link.is_working_symlink
    assert link.symlink_target() == readme
    assert link.target() == readme
    assert readme.symlink_target() is None


def test_broken_symlink_flags(tmp_path: Path) -> None:
    os.symlink("missing-target", tmp_path / "broken")
    link = FSO(tmp_path / "broken")

    assert link.is_broken_symlink
    assert not link.is_working_symlink
    assert link.symlink_target() == tmp_path / "missing-target"


# -----------------------------------------------------------------------------
# FILE CONTENT
# -----------------------------------------------------------------------------

def test_read_write(tmp_path: Path) -> None:
    f = File(tmp_path / "a.txt")

    f.write("héllo")

    assert f.read() == "héllo"


def test_json_hold_saves_back(tmp_path: Path) -> None:
    f = File(tmp_path / "state.json")

    hold = f.json()
    assert hold == {}
    hold["count"] = 3
    hold.save()

    assert File(tmp_path / "state.json").json() == {"count": 3}
    assert f.json() is hold


def test_json_rejects_non_object(tmp_path: Path) -> None:
    (tmp_path / "list.json").write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError):
        File(tmp_path / "list.json").json()


def test_executable_predicate_and_execute(tmp_path: Path) -> None:
    script = tmp_path / "hello.sh"
    script.write_text('#!/bin/sh\necho "hi $1"\n', encoding="utf-8")
    f = File(script)

    assert f.is_executable is False
    assert Dir(tmp_path).is_executable is False

    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    result = f.execute("there")

    assert f.is_executable is True
    assert result.ok
    assert result.stdout.strip() == "hi there"


# -----------------------------------------------------------------------------
# TOOL-BACKED OPERATIONS
# -----------------------------------------------------------------------------

def test_md5sum_parses_digest(tmp_path: Path, scripted_runner) -> None:
    target = tmp_path / "a.txt"
    target.write_text("", encoding="utf-8")
    scripted_runner.on("md5sum", stdout=f"d41d8cd98f00b204e9800998ecf8427e  {target}\n")

    assert File(target, runner=scripted_runner).md5sum() == "d41d8cd98f00b204e9800998ecf8427e"


def test_sample_returns_lines(tmp_path: Path, scripted_runner) -> None:
    target = tmp_path / "a.txt"
    scripted_runner.on("shuf", stdout="two\none\n")

    lines = File(target, runner=scripted_runner).sample(2)

    assert lines == ["two", "one"]
    assert scripted_runner.calls[0][0] == ("shuf", "-n", "2", str(target))


def test_file_zip_stores_base_name(project_tree: Path, scripted_runner) -> None:
    scripted_runner.on("zip")
    archive = project_tree / "out.zip"

    result = File(project_tree / "README.md", runner=scripted_runner).zip(archive)

    argv, cwd = scripted_runner.calls[0]
    assert argv == ("zip", str(archive), "README.md")
    assert cwd == str(project_tree)
    assert isinstance(result, ZipFile)


def test_file_zip_failure(project_tree: Path, scripted_runner) -> None:
    scripted_runner.on("zip", stderr="zip error", exit_code=15)

    with pytest.raises(ExternalToolError) as exc:
        File(project_tree / "README.md", runner=scripted_runner).zip(project_tree / "out.zip")

    assert exc.value.operation == "file-zip-error"
    assert exc.value.exit_code == 15


def test_root_file_handle_has_no_parent(tmp_path: Path, scripted_runner) -> None:
    """TC-03: Operations that need the containing directory fail cleanly at the root."""
    handle = File("/", runner=scripted_runner)

    with pytest.raises(NotFoundError, match="no-parent-directory"):
        handle.ancestors()
    with pytest.raises(NotFoundError, match="no-parent-directory"):
        handle.zip(tmp_path / "out.zip")

    assert scripted_runner.calls == []


def test_missing_tool_reports_no_exit_code(tmp_path: Path, scripted_runner) -> None:
    """TC-04: A tool that cannot start surfaces with exit_code None."""
    with pytest.raises(ExternalToolError) as exc:
        File(tmp_path / "a.txt", runner=scripted_runner).md5sum()

    assert exc.value.exit_code is None
    assert "could not be started" in str(exc.value)


def test_to_dict_options(tmp_path: Path, scripted_runner) -> None:
    target = tmp_path / "a.txt"
    target.write_text("abc", encoding="utf-8")
    scripted_runner.on("file", stdout="text/plain")
    f = File(target, runner=scripted_runner)
    f.misc["tag"] = "x"

    assert f.to_dict() == {"misc": {"tag": "x"}}
    assert f.to_dict(size=True, mime=True) == {"misc": {"tag": "x"}, "size": 3, "mime_type": "text/plain"}
    assert f.is_text

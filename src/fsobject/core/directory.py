from __future__ import annotations

"""
Directory Handles and Traversal.

Lists and walks directory contents, evaluates globs relative to the
directory, and implements the upward ancestor search. Every call re-reads
the filesystem; nothing is cached between calls.

Symlinked directories are followed during recursive walks and no cycle
detection is performed, so a symlink loop recurses until the interpreter's
recursion limit is hit.
"""

import glob as globbing
import logging
import os
import tempfile
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional, Type

from fsobject.core.file import File
from fsobject.core.handle import FSO, Children, to_fso
from fsobject.domain.config import tool_path
from fsobject.domain.errors import AncestorNotFoundError, PathConflictError
from fsobject.domain.models import (
    ExistingChild,
    Named,
    SameAs,
    SearchResult,
    ToRoot,
    as_ancestor_target,
)
from fsobject.infra.context import WorkingDirectory

logger = logging.getLogger(__name__)


def _resolve(path: str, runner: Any = None) -> Optional[FSO]:
    from fsobject.core.resolver import resolve_existing

    return resolve_existing(path, runner=runner)


class Dir(FSO):
    """Handle for a directory."""

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------
    def children(self) -> Children:
        """
        Immediate entries in the order the filesystem reports them.

        Entries that vanish between listing and probing are skipped.
        """
        rv = Children()
        for entry in os.listdir(self.path_abs):
            child = _resolve(os.path.join(self.path_abs, entry), self._runner)
            if child is not None:
                rv.append(child)
        return rv

    def files(self) -> Children:
        return Children(c for c in self.children() if c.is_file)

    def dirs(self) -> Children:
        return Children(c for c in self.children() if c.is_dir)

    def symlinks(self) -> Children:
        return Children(c for c in self.children() if os.path.islink(c.path_abs))

    def executables(self) -> Children:
        return Children(c for c in self.children() if c.is_executable)

    def walk(self, recursive: bool = True) -> Iterator[FSO]:
        """Pre-order walk: each child, then its subtree, then the next sibling."""
        for child in self.children():
            yield child

            if recursive and isinstance(child, Dir) and child.is_dir:
                yield from child.walk(recursive)

    def traverse(self, visit: Callable[[FSO], Any], recursive: bool = True) -> None:
        for child in self.walk(recursive):
            visit(child)

    def glob(self, pattern: str) -> Children:
        """
        Expand a shell-style pattern relative to this directory.

        The working directory is switched for the evaluation and restored
        afterwards, also when the expansion fails.
        """
        rv = Children()

        with self.chdir():
            matches = globbing.glob(pattern)

        for match in matches:
            found = _resolve(os.path.join(self.path_abs, match), self._runner)
            if found is not None:
                rv.append(found)

        return rv

    def existing(self, other_path: Any) -> Optional[FSO]:
        """Handle for an existing entry relative to this directory, or None."""
        if other_path is None:
            return None

        if isinstance(other_path, FSO):
            path_abs = other_path.path_abs
        else:
            path_abs = os.path.join(self.path_abs, os.fspath(other_path))

        return _resolve(path_abs, self._runner)

    # Same as existing
    __getitem__ = existing

    def file(self, file_name: str, cls: Type[FSO] = File) -> FSO:
        """The existing entry 'file_name', or a new 'cls' handle for it."""
        full = os.path.join(self.path_abs, file_name)
        return self.existing(full) or cls(full, runner=self._runner)

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------
    def ensure(self) -> "Dir":
        """Create the directory and missing parents; no-op if it exists."""
        if not self.exists():
            os.makedirs(self.path_abs, exist_ok=True)
        return self

    def mkdir(self, new_dir: Any, ensure: bool = False) -> "Dir":
        """
        Create a sub-directory (parents included).

        Args:
            new_dir: Path relative to this directory.
            ensure: Accept an already existing directory.

        Raises:
            PathConflictError: If the path exists and 'ensure' is False, or
                if it exists and is not a directory.
        """
        self._check_frozen("mkdir")
        new = Dir(os.path.join(self.path_abs, os.fspath(new_dir)), runner=self._runner)

        if new.exists():
            if not ensure:
                raise PathConflictError(f"directory-already-exists: {new.path_abs}")
            if not new.is_dir:
                raise PathConflictError(f"file-exists-but-not-directory: {new.path_abs}")
        else:
            new.ensure()

        return new

    @contextmanager
    def tmp(self, chdir: bool = False) -> Iterator["Dir"]:
        """Yield a fresh temporary sub-directory, removed on exit."""
        with tempfile.TemporaryDirectory(dir=self.path_abs) as tmp_path:
            nested = Dir(tmp_path, runner=self._runner)
            if chdir:
                with nested.chdir():
                    yield nested
            else:
                yield nested

    # -------------------------------------------------------------------------
    # Working directory
    # -------------------------------------------------------------------------
    def chdir(self) -> WorkingDirectory:
        """Scope that makes this the working directory until it exits."""
        return WorkingDirectory(self.path_abs)

    def cd(self) -> "Dir":
        """Make this the working directory for the rest of the process."""
        os.chdir(self.path_abs)
        return self

    # -------------------------------------------------------------------------
    # Predicates and comparison
    # -------------------------------------------------------------------------
    @property
    def is_root(self) -> bool:
        return os.path.dirname(self.path_abs) == self.path_abs

    @property
    def is_home(self) -> bool:
        from fsobject.core.locations import home

        return self.path_abs == home().path_abs

    def same_tree(self, other: Any) -> bool:
        """
        True if both trees have identical content (recursive brief diff).

        Raises:
            ExternalToolError: If diff fails for a reason other than a
                difference between the trees.
        """
        other = to_fso(other)
        cmd = [tool_path("diff"), "--recursive", "--brief", self.path_abs, other.path_abs]
        result = self.runner.run(cmd)

        if result.exit_code == 1:
            return False
        result.raise_on_failure("directory-diff-error")
        return True

    # -------------------------------------------------------------------------
    # Archive
    # -------------------------------------------------------------------------
    def zip(self, target: Any) -> FSO:
        """
        Archive the tree recursively; members are stored under the base name.

        Raises:
            ExternalToolError: If the zip tool fails.
        """
        from fsobject.core.file_types import ZipFile

        archive = to_fso(target)
        parent = self.parent or self
        member = self.name or "."
        cmd = [tool_path("zip"), "-r", archive.path_abs, member]
        self.runner.run(cmd, cwd=parent.path_abs).raise_on_failure("directory-zip-error")
        return ZipFile(archive.path_abs, runner=self._runner)

    # -------------------------------------------------------------------------
    # Ancestor search
    # -------------------------------------------------------------------------
    def ancestors(self, target: Any = None) -> Children:
        """
        Walk upward, nearest parent first, until 'target' is met.

        Args:
            target: None (up to the root), a directory name, a handle, a
                Location, or an AncestorTarget variant.

        Returns:
            Children: Ancestors up to and including the matching one. Empty
            when this directory itself matches.

        Raises:
            AncestorNotFoundError: If the root is reached without a match.
        """
        tgt = as_ancestor_target(target)
        rv = Children()
        current: Dir = self

        while True:
            if isinstance(tgt, ExistingChild) and current.exists(tgt.rel):
                break

            if current.is_root:
                if isinstance(tgt, ToRoot):
                    break
                if isinstance(tgt, SameAs) and tgt.handle == current:
                    break
                raise AncestorNotFoundError(tgt, tgt.describe())

            if isinstance(tgt, Named) and current.name == tgt.name:
                break
            if isinstance(tgt, SameAs) and current == tgt.handle:
                break

            parent = current._require_parent()
            rv.append(parent)
            current = parent

        logger.debug(f"{len(rv)} ancestors of {self.path_abs} until {tgt.describe()}")
        return rv

    def ancestor(self, target: Any = None) -> Optional["Dir"]:
        """The last ancestor of the chain, i.e. the matched one."""
        chain = self.ancestors(target)
        return chain[-1] if chain else None

    # -------------------------------------------------------------------------
    # Search and export
    # -------------------------------------------------------------------------
    def search(self, *terms: str) -> SearchResult:
        """Files under this tree with lines containing every term."""
        from fsobject.core.search import ContentSearch

        return ContentSearch(self, terms, runner=self._runner).found

    def to_dict(self, **opts: Any) -> Dict[str, Any]:
        rv: Dict[str, Any] = {"children": {}}
        kids = rv["children"]

        if self._misc is not None:
            rv["misc"] = self._misc

        for child in self.children():
            tgt = child.symlink_target()
            if tgt is not None:
                kids[child.name] = tgt.name
            elif isinstance(child, (File, Dir)):
                kids[child.name] = child.to_dict(**opts)
            else:
                kids[child.name] = {}

        return rv

from __future__ import annotations

"""
Filesystem Object Handle.

An FSO is a reference to a path: it stores the canonical absolute location
and re-probes the filesystem on every kind-sensitive call. It never owns the
entry it points at, so a handle may go stale when the entry is deleted or
moved by someone else.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Type

from fsobject.domain.config import get_settings
from fsobject.domain.constants import PATH_STYLE_ABSOLUTE
from fsobject.domain.errors import FrozenHandleError, InvalidComparandError, NotFoundError
from fsobject.domain.models import Kind
from fsobject.infra.mime import MimeDetector
from fsobject.infra.process import ProcessRunner, get_runner

if TYPE_CHECKING:
    from fsobject.core.attributes import AttributeStore
    from fsobject.core.directory import Dir

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PATH IDENTITY HELPERS
# -----------------------------------------------------------------------------

def canonicalize(path: Any) -> str:
    """
    Return the absolute, normalized form of 'path'.

    Relative input is resolved against the current working directory.
    Symlinks are not followed; '.' and '..' are collapsed textually.
    """
    if isinstance(path, FSO):
        return path.path_abs
    return os.path.abspath(os.fspath(path))


def to_path(obj: Any) -> str:
    """Return the absolute path of a handle, or the raw path unchanged."""
    return obj.path_abs if isinstance(obj, FSO) else os.fspath(obj)


def to_fso(obj: Any) -> "FSO":
    """Wrap a raw path in a generic handle; handles pass through."""
    return obj if isinstance(obj, FSO) else FSO(obj)


def ensure_fso(obj: Any) -> "FSO":
    """Return a handle for 'obj', typed by its current kind when it exists."""
    if isinstance(obj, FSO):
        return obj

    from fsobject.core.resolver import resolve_existing

    return resolve_existing(obj) or FSO(obj)


def _coerce_comparand(other: Any, op: str) -> "FSO":
    if isinstance(other, (FSO, str, os.PathLike)):
        return to_fso(other)
    raise InvalidComparandError(f"invalid-param-for-{op}: {type(other).__name__}")


class Children(list):
    """Ordered list of handles with name-based lookups."""

    def by_name(self) -> Dict[str, "FSO"]:
        return {kid.name: kid for kid in self}

    def names(self) -> List[str]:
        return list(self.by_name().keys())


# -----------------------------------------------------------------------------
# BASE HANDLE
# -----------------------------------------------------------------------------

class FSO:
    """
    Typed reference to a filesystem path.

    Two handles are equal iff their canonical absolute paths are equal,
    whatever their class. Construction performs no I/O.

    Args:
        path: Raw path (str, os.PathLike) or another handle.
        runner: Process runner used by tool-backed operations; the
            process-wide default is used when omitted.
    """

    # Subtype identifier for content-specific handle classes
    subtype: Optional[str] = None

    def __init__(self, path: Any, *, runner: Optional[ProcessRunner] = None) -> None:
        self._path_abs = canonicalize(path)
        self._runner = runner
        self._frozen = False
        self._attr: Optional["AttributeStore"] = None
        self._misc: Optional[Dict[str, Any]] = None
        self._found: Optional[List[str]] = None

    # -------------------------------------------------------------------------
    # Path rendering
    # -------------------------------------------------------------------------
    @property
    def path_abs(self) -> str:
        return self._path_abs

    @property
    def path(self) -> str:
        """The path rendered according to the configured path style."""
        if get_settings()["path_style"] == PATH_STYLE_ABSOLUTE:
            return self._path_abs
        return self.path_rel()

    def path_rel(self, base: Optional[str] = None) -> str:
        """
        Render the path relative to 'base' (the current directory by default).

        Entries directly inside 'base' are rendered with a leading './'
        rather than as a bare name.
        """
        base = canonicalize(base) if base is not None else os.getcwd()
        rv = os.path.relpath(self._path_abs, base)

        if self._path_abs != base and os.path.dirname(self._path_abs) == base:
            rv = f"./{rv}"

        return rv

    @property
    def name(self) -> str:
        return os.path.basename(self._path_abs)

    @property
    def extension(self) -> Optional[str]:
        """Extension without the leading dot, or None."""
        ext = os.path.splitext(self._path_abs)[1]
        return ext[1:] if ext else None

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._path_abs!r})"

    def __fspath__(self) -> str:
        return self._path_abs

    # -------------------------------------------------------------------------
    # Identity and containment
    # -------------------------------------------------------------------------
    def __eq__(self, other: Any) -> bool:
        return self._path_abs == _coerce_comparand(other, "==").path_abs

    def __ne__(self, other: Any) -> bool:
        return self._path_abs != _coerce_comparand(other, "!=").path_abs

    def __hash__(self) -> int:
        return hash(self._path_abs)

    def contains(self, other: Any) -> bool:
        """
        True if other's absolute path starts with this one.

        This is a textual prefix check: '/foo' contains '/foobar'.
        """
        other = _coerce_comparand(other, "contains")
        return other.path_abs.startswith(self._path_abs)

    def within(self, other: Any) -> bool:
        return _coerce_comparand(other, "within").contains(self)

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------
    @property
    def kind(self) -> Kind:
        """Current kind of the entry, probed on every access."""
        from fsobject.core.resolver import classify

        kind = classify(self._path_abs)
        if kind is Kind.FILE and self.subtype is not None:
            return Kind.TYPED_FILE
        return kind

    def exists(self, rel: Optional[str] = None) -> bool:
        if rel is not None:
            return self.relative(rel).exists()
        return os.path.exists(self._path_abs)

    @property
    def is_file(self) -> bool:
        return os.path.isfile(self._path_abs)

    @property
    def is_dir(self) -> bool:
        return os.path.isdir(self._path_abs)

    @property
    def is_executable(self) -> Optional[bool]:
        """None when missing; False for directories."""
        if not self.exists():
            return None
        return os.access(self._path_abs, os.X_OK) and not self.is_dir

    @property
    def size(self) -> int:
        return os.path.getsize(self._path_abs)

    @property
    def inode(self) -> int:
        return os.stat(self._path_abs).st_ino

    def mime(self) -> str:
        """Detect the MIME type with the external probe."""
        return MimeDetector(self._runner).detect(self._path_abs)

    @property
    def mime_type(self) -> str:
        return self.mime()

    @property
    def is_text(self) -> bool:
        return self.mime().startswith("text/")

    def typed(self) -> "FSO":
        """Re-instantiate as the most specific registered handle class."""
        from fsobject.core.resolver import resolve_existing

        return resolve_existing(self._path_abs, typed=True, runner=self._runner) or self

    # -------------------------------------------------------------------------
    # Side tables
    # -------------------------------------------------------------------------
    @property
    def misc(self) -> Dict[str, Any]:
        if self._misc is None:
            self._misc = {}
        return self._misc

    @property
    def found(self) -> List[str]:
        if self._found is None:
            self._found = []
        return self._found

    @property
    def attr(self) -> "AttributeStore":
        if self._attr is None:
            from fsobject.core.attributes import AttributeStore

            self._attr = AttributeStore(self, runner=self._runner)
        return self._attr

    @property
    def runner(self) -> ProcessRunner:
        return self._runner or get_runner()

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------
    @property
    def parent(self) -> Optional["Dir"]:
        """The containing directory, or None at the root."""
        parent_path = os.path.dirname(self._path_abs)
        if parent_path == self._path_abs:
            return None

        from fsobject.core.directory import Dir

        return Dir(parent_path, runner=self._runner)

    def _require_parent(self) -> "Dir":
        """
        The containing directory.

        Raises:
            NotFoundError: If this is the filesystem root.
        """
        parent = self.parent
        if parent is None:
            raise NotFoundError(f"no-parent-directory: {self._path_abs}")
        return parent

    def _base_dir(self) -> "Dir":
        from fsobject.core.directory import Dir

        if isinstance(self, Dir) or self.is_dir:
            return Dir(self._path_abs, runner=self._runner)
        return self._require_parent()

    def relative(self, rel_path: Any, cls: Optional[Type["FSO"]] = None) -> "FSO":
        """
        Build a handle for 'rel_path' resolved against this entry.

        Directories resolve against themselves; anything else against its
        parent directory.
        """
        cls = cls or FSO
        target = os.path.join(self._base_dir().path_abs, os.fspath(rel_path))
        return cls(target, runner=self._runner)

    def existing_all(self, *maybes: str, glob: bool = False) -> List["FSO"]:
        """
        Resolve several relative paths, keeping the ones that exist.

        With glob=True each argument is a pattern expanded in the base
        directory.
        """
        base = self._base_dir()
        rv: List[FSO] = []

        for maybe in maybes:
            if glob:
                rv.extend(base.glob(maybe))
            else:
                found = base.existing(maybe)
                if found is not None:
                    rv.append(found)

        return rv

    # -------------------------------------------------------------------------
    # Symlinks
    # -------------------------------------------------------------------------
    def symlink(self, link_path: Any) -> "FSO":
        """Create a symlink at 'link_path' pointing to this entry."""
        from fsobject.core.resolver import resolve_existing

        link_abs = canonicalize(link_path)
        os.symlink(self._path_abs, link_abs)
        return resolve_existing(link_abs, runner=self._runner) or FSO(link_abs)

    def symlink_target(self) -> Optional["FSO"]:
        """Handle for the link target, or None if this is not a symlink."""
        if not os.path.islink(self._path_abs):
            return None

        from fsobject.core.resolver import resolve_existing

        raw = os.readlink(self._path_abs)
        target = os.path.join(os.path.dirname(self._path_abs), raw)
        return resolve_existing(target, runner=self._runner) or FSO(target, runner=self._runner)

    # Same as symlink_target
    target = symlink_target

    @property
    def is_working_symlink(self) -> bool:
        return os.path.islink(self._path_abs) and os.path.exists(self._path_abs)

    @property
    def is_broken_symlink(self) -> bool:
        return os.path.islink(self._path_abs) and not os.path.exists(self._path_abs)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------
    def freeze(self) -> "FSO":
        """Forbid further writes, deletes and moves through this handle."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_frozen(self, action: str) -> None:
        if self._frozen:
            raise FrozenHandleError(f"cannot-{action}-with-frozen-file-object: {self._path_abs}")

    def delete(self) -> bool:
        """Remove the entry recursively. A missing entry is not an error."""
        self._check_frozen("delete")

        if os.path.isdir(self._path_abs) and not os.path.islink(self._path_abs):
            shutil.rmtree(self._path_abs)
        elif os.path.lexists(self._path_abs):
            os.remove(self._path_abs)
        else:
            logger.debug(f"Delete skipped, nothing at {self._path_abs}")

        return True

    def move(self, target: Any) -> "FSO":
        """
        Move the entry and follow it.

        Moving onto an existing directory relocates the entry inside it
        under its own name; any other target is the exact new path.
        """
        self._check_frozen("move")
        tgt = to_fso(target)

        if tgt.is_dir:
            new_path = os.path.join(tgt.path_abs, self.name)
        else:
            new_path = tgt.path_abs

        shutil.move(self._path_abs, tgt.path_abs)
        logger.debug(f"Moved {self._path_abs} -> {new_path}")
        self._path_abs = new_path
        return self

    def touch(self) -> "FSO":
        """Create the file if missing, otherwise update its timestamps."""
        Path(self._path_abs).touch()
        return self

from __future__ import annotations

"""
Well-Known Locations and Working-Directory Helpers.

Entry points that start from the process context rather than from an
existing handle: the root, home, temporary and current directories, plus
shortcuts that delegate to the current directory.
"""

import os
from typing import Any, List, Optional

from fsobject.core.directory import Dir
from fsobject.core.file import File
from fsobject.core.handle import FSO, ensure_fso, to_fso, to_path
from fsobject.core.resolver import resolve_existing
from fsobject.domain.config import get_settings
from fsobject.domain.errors import NotFoundError
from fsobject.domain.models import Location
from fsobject.infra.context import WorkingDirectory

__all__ = [
    "by_symbol",
    "chdir",
    "cwd_scope",
    "ensure_fso",
    "exist",
    "existing",
    "existing_all",
    "file",
    "home",
    "mkdir",
    "pwd",
    "root",
    "tmp",
    "to_fso",
    "to_path",
    "touch",
]


# -----------------------------------------------------------------------------
# WELL-KNOWN DIRECTORIES
# -----------------------------------------------------------------------------

def root() -> Dir:
    return Dir(os.path.abspath(os.sep))


def pwd() -> Dir:
    return Dir(os.getcwd())


def home() -> Dir:
    """
    The user's home directory, taken from $HOME.

    Raises:
        NotFoundError: If HOME is not defined.
    """
    path = os.environ.get("HOME")
    if not path:
        raise NotFoundError("home-directory-not-defined")
    return Dir(path)


def tmp() -> Dir:
    """The configured temporary directory."""
    return Dir(get_settings()["tmp_dir"])


_SYMBOLS = {
    Location.ROOT: root,
    Location.HOME: home,
    Location.TMP: tmp,
    Location.PWD: pwd,
}


def by_symbol(location: Location) -> Dir:
    return _SYMBOLS[location]()


# -----------------------------------------------------------------------------
# WORKING DIRECTORY
# -----------------------------------------------------------------------------

def chdir(target: Any) -> Dir:
    """
    Change the working directory for the rest of the process.

    Raises:
        NotFoundError: If 'target' is not an existing directory.
    """
    found = resolve_existing(target)
    if not isinstance(found, Dir):
        raise NotFoundError(f"not-a-directory: {to_path(target)}")
    return found.cd()


def cwd_scope(target: Any) -> WorkingDirectory:
    """Scoped working-directory change, restored when the block exits."""
    return WorkingDirectory(to_path(target))


# -----------------------------------------------------------------------------
# CURRENT DIRECTORY SHORTCUTS
# -----------------------------------------------------------------------------

def existing(path: Any) -> Optional[FSO]:
    return pwd().existing(path)


def existing_all(*paths: str, glob: bool = False) -> List[FSO]:
    return pwd().existing_all(*paths, glob=glob)


def mkdir(name: Any, ensure: bool = False) -> Dir:
    return pwd().mkdir(name, ensure=ensure)


def file(name: str) -> FSO:
    return pwd().file(name)


def exist(path: Any) -> bool:
    return to_fso(path).exists()


def touch(path: Any) -> FSO:
    """Touch 'path' relative to the working directory and return its handle."""
    handle = existing(path) or File(path)
    return handle.touch()

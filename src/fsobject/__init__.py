from __future__ import annotations

"""
Filesystem Object Handles.

Every path is represented by a typed handle (Dir, File, a content-specific
File subtype, or a generic FSO for dangling symlinks) that knows its
canonical location, renders itself relative to the working directory, and
can list, walk, glob, search and annotate its subtree.

Example:
    >>> from fsobject import ExistingChild, existing
    >>> project = existing("src")
    >>> project.ancestor(ExistingChild(".git"))
    >>> hits = project.search("def", "main")
"""

from fsobject.core.attributes import AttributeStore
from fsobject.core.directory import Dir
from fsobject.core.file import File, JsonHold
from fsobject.core.file_types import HtmlFile, JsonFile, XmlFile, ZipFile
from fsobject.core.handle import FSO, Children, canonicalize
from fsobject.core.locations import (
    by_symbol,
    chdir,
    cwd_scope,
    ensure_fso,
    exist,
    existing,
    existing_all,
    file,
    home,
    mkdir,
    pwd,
    root,
    tmp,
    to_fso,
    to_path,
    touch,
)
from fsobject.core.resolver import REGISTRY, TypeRegistry, classify, resolve_existing
from fsobject.core.search import ContentSearch
from fsobject.domain.errors import (
    AncestorNotFoundError,
    AttributeDeleteError,
    AttributeReadError,
    AttributeWriteError,
    ExternalToolError,
    FrozenHandleError,
    FsoError,
    InvalidComparandError,
    NotFoundError,
    PathConflictError,
)
from fsobject.domain.models import (
    ExistingChild,
    Kind,
    Location,
    Named,
    SameAs,
    SearchHit,
    ToRoot,
)

__version__ = "1.0.0"

__all__ = [
    "FSO",
    "Dir",
    "File",
    "JsonHold",
    "ZipFile",
    "JsonFile",
    "XmlFile",
    "HtmlFile",
    "Children",
    "AttributeStore",
    "ContentSearch",
    "TypeRegistry",
    "REGISTRY",
    "Kind",
    "Location",
    "ToRoot",
    "Named",
    "SameAs",
    "ExistingChild",
    "SearchHit",
    "canonicalize",
    "classify",
    "resolve_existing",
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
    "FsoError",
    "NotFoundError",
    "InvalidComparandError",
    "AncestorNotFoundError",
    "FrozenHandleError",
    "PathConflictError",
    "ExternalToolError",
    "AttributeReadError",
    "AttributeWriteError",
    "AttributeDeleteError",
]

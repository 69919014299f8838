from __future__ import annotations

"""
Type Resolution Service.

Turns a bare path into the most fitting handle: Dir for directories, File
for regular files (or a registered content-specific subtype when typed
resolution is requested), a generic FSO for dangling symlinks and special
entries, and None when nothing is there.
"""

import logging
import os
import stat
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Type

from fsobject.core.directory import Dir
from fsobject.core.file import File
from fsobject.core.file_types import HtmlFile, JsonFile, XmlFile, ZipFile
from fsobject.core.handle import FSO, canonicalize
from fsobject.domain.constants import MIME_SUBTYPES
from fsobject.domain.models import Kind
from fsobject.infra.mime import MimeDetector
from fsobject.infra.process import ProcessRunner

logger = logging.getLogger(__name__)

# Subtype identifier -> handle class
SUBTYPE_CLASSES: Dict[str, Type[File]] = {
    "zip": ZipFile,
    "json": JsonFile,
    "xml": XmlFile,
    "html": HtmlFile,
}


# -----------------------------------------------------------------------------
# CONTENT TYPE REGISTRY
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileTypeEntry:
    """
    Registered handle type for one MIME type.

    Attributes:
        subtype: Stable subtype identifier (e.g. 'json').
        loader: Handle class instantiated for matching files.
    """
    subtype: str
    loader: Type[File]


class TypeRegistry:
    """Read-only mapping from MIME type to handle type."""

    def __init__(self, entries: Mapping[str, FileTypeEntry]) -> None:
        self._entries: Mapping[str, FileTypeEntry] = MappingProxyType(dict(entries))

    @classmethod
    def default(cls) -> "TypeRegistry":
        return cls({
            mime: FileTypeEntry(subtype, SUBTYPE_CLASSES[subtype])
            for mime, subtype in MIME_SUBTYPES.items()
        })

    @property
    def entries(self) -> Mapping[str, FileTypeEntry]:
        return self._entries

    def lookup(self, mime_type: str) -> Optional[FileTypeEntry]:
        return self._entries.get(mime_type)


REGISTRY = TypeRegistry.default()


# -----------------------------------------------------------------------------
# CLASSIFICATION
# -----------------------------------------------------------------------------

def classify(path: str) -> Kind:
    """
    Probe 'path' once and return its kind.

    Symlinks to existing entries classify as their target; a symlink whose
    target cannot be reached is SYMLINK. Never consults MIME detection.
    """
    try:
        st = os.stat(path)
    except OSError:
        try:
            os.lstat(path)
        except OSError:
            return Kind.MISSING
        return Kind.SYMLINK

    if stat.S_ISDIR(st.st_mode):
        return Kind.DIRECTORY
    return Kind.FILE


def resolve_existing(
        path: Any,
        base: Optional[str] = None,
        *,
        typed: bool = False,
        runner: Optional[ProcessRunner] = None,
        registry: Optional[TypeRegistry] = None,
) -> Optional[FSO]:
    """
    Return the handle for whatever currently exists at 'path'.

    Args:
        path: Raw path or handle; relative paths resolve against 'base'
            (or the current directory).
        base: Optional directory to resolve relative paths against.
        typed: Run MIME detection on regular files and instantiate the
            registered subtype, if any.
        runner: Process runner passed on to the created handle.
        registry: Registry to consult instead of the default one.

    Returns:
        Optional[FSO]: The handle, or None when nothing exists there.
    """
    if base is not None and not isinstance(path, FSO):
        path = os.path.join(base, os.fspath(path))
    path_abs = canonicalize(path)

    kind = classify(path_abs)

    if kind is Kind.MISSING:
        logger.debug(f"Nothing at {path_abs}")
        return None
    if kind is Kind.SYMLINK:
        return FSO(path_abs, runner=runner)
    if kind is Kind.DIRECTORY:
        return Dir(path_abs, runner=runner)
    if not os.path.isfile(path_abs):
        # fifo, socket, device
        return FSO(path_abs, runner=runner)

    if typed:
        mime_type = MimeDetector(runner).detect(path_abs)
        entry = (registry or REGISTRY).lookup(mime_type)
        if entry is not None:
            return entry.loader(path_abs, runner=runner)

    return File(path_abs, runner=runner)

from __future__ import annotations

"""
Handle Domain Data Models.

Defines the entry classification enum, the ancestor search target variants
and the immutable content search result records.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Tuple, Union

from fsobject.domain.errors import InvalidComparandError

if TYPE_CHECKING:
    from fsobject.core.handle import FSO


# -----------------------------------------------------------------------------
# ENTRY CLASSIFICATION
# -----------------------------------------------------------------------------

class Kind(Enum):
    """Classification of the entry a handle currently points at."""
    DIRECTORY = "directory"
    FILE = "file"
    TYPED_FILE = "typed_file"
    SYMLINK = "symlink"
    MISSING = "missing"


class Location(Enum):
    """Symbolic well-known directories usable as ancestor targets."""
    ROOT = "root"
    HOME = "home"
    TMP = "tmp"
    PWD = "pwd"


# -----------------------------------------------------------------------------
# ANCESTOR SEARCH TARGETS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ToRoot:
    """Walk all the way up to the filesystem root."""

    def describe(self) -> str:
        return "/"


@dataclass(frozen=True)
class Named:
    """Stop at the first ancestor whose base name equals 'name'."""
    name: str

    def describe(self) -> str:
        return self.name


@dataclass(frozen=True)
class SameAs:
    """
    Stop at the ancestor equal to 'handle'.

    Attributes:
        handle: Target directory handle.
        label: Optional display form used in error detail (e.g. ':home').
    """
    handle: "FSO"
    label: str = ""

    def describe(self) -> str:
        return self.label or self.handle.path_abs


@dataclass(frozen=True)
class ExistingChild:
    """Stop at the first directory under which 'rel' exists."""
    rel: str

    def describe(self) -> str:
        return f"containing {self.rel}"


AncestorTarget = Union[ToRoot, Named, SameAs, ExistingChild]


def as_ancestor_target(obj: Any) -> AncestorTarget:
    """
    Coerce a loosely typed target into an AncestorTarget variant.

    Accepts None, a directory name, a handle, a Location or an already
    built variant.

    Raises:
        InvalidComparandError: If the object cannot describe a target.
    """
    from fsobject.core.handle import FSO

    if obj is None:
        return ToRoot()
    if isinstance(obj, (ToRoot, Named, SameAs, ExistingChild)):
        return obj
    if isinstance(obj, str):
        return Named(obj)
    if isinstance(obj, FSO):
        return SameAs(obj)
    if isinstance(obj, Location):
        from fsobject.core.locations import by_symbol
        return SameAs(by_symbol(obj), label=f":{obj.value}")
    raise InvalidComparandError(f"tgt-not-fso-or-string: {type(obj).__name__}")


# -----------------------------------------------------------------------------
# CONTENT SEARCH RESULTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SearchHit:
    """
    One file that matched every search term.

    Attributes:
        file: Handle of the matching file.
        lines: Matching lines in the order grep reported them.
    """
    file: "FSO"
    lines: Tuple[str, ...]


SearchResult = Tuple[SearchHit, ...]

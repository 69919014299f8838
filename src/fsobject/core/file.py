from __future__ import annotations

"""
File Handles.

Plain-file operations: content I/O, tool-backed checksums, sampling and
archiving, the editable JSON view, and ancestor lookup through the
containing directory.
"""

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from fsobject.core.handle import FSO, Children, to_fso
from fsobject.domain.config import tool_path
from fsobject.infra.process import ProcessResult

if TYPE_CHECKING:
    from fsobject.core.file_types import ZipFile

logger = logging.getLogger(__name__)


class JsonHold(dict):
    """Mutable JSON object bound to the file it was read from."""

    def __init__(self, file: "File", data: Dict[str, Any]) -> None:
        super().__init__(data)
        self.file = file

    def save(self) -> int:
        """Write the current content back to the bound file."""
        return self.file.write(json.dumps(self))


class File(FSO):
    """Handle for a regular file."""

    def __init__(self, path: Any, **kwargs: Any) -> None:
        super().__init__(path, **kwargs)
        self._hold: Optional[JsonHold] = None

    # -------------------------------------------------------------------------
    # Content
    # -------------------------------------------------------------------------
    def read(self, encoding: str = "utf-8") -> str:
        with open(self.path_abs, "r", encoding=encoding) as f:
            return f.read()

    def write(self, text: str, encoding: str = "utf-8") -> int:
        self._check_frozen("write")
        with open(self.path_abs, "w", encoding=encoding) as f:
            return f.write(text)

    def json(self) -> JsonHold:
        """
        Editable view of the file's JSON object, loaded once.

        A missing file starts as an empty object; call save() to persist.

        Raises:
            ValueError: If the file holds invalid JSON or a non-object value.
        """
        if self._hold is None:
            data: Any = json.loads(self.read()) if self.exists() else {}
            if not isinstance(data, dict):
                raise ValueError(f"Top-level JSON value is not an object: {self.path_abs}")
            self._hold = JsonHold(self, data)
        return self._hold

    # -------------------------------------------------------------------------
    # Tool-backed operations
    # -------------------------------------------------------------------------
    def execute(self, *args: Any) -> ProcessResult:
        """Run the file as a program and return its captured result."""
        return self.runner.run([self.path_abs, *[str(a) for a in args]])

    def md5sum(self) -> str:
        cmd = [tool_path("md5sum"), self.path_abs]
        result = self.runner.run(cmd).raise_on_failure("file-md5sum-error")
        return result.stdout.split()[0]

    def sample(self, n: int = 1) -> List[str]:
        """Return up to 'n' randomly chosen lines."""
        cmd = [tool_path("shuf"), "-n", str(n), self.path_abs]
        result = self.runner.run(cmd).raise_on_failure("file-sample-error")
        return result.stdout.splitlines()

    def zip(self, target: Any) -> "ZipFile":
        """
        Archive this file into 'target'; the member is stored by base name.

        Raises:
            ExternalToolError: If the zip tool fails.
        """
        from fsobject.core.file_types import ZipFile

        archive = to_fso(target)
        parent = self._require_parent()
        cmd = [tool_path("zip"), archive.path_abs, self.name]
        self.runner.run(cmd, cwd=parent.path_abs).raise_on_failure("file-zip-error")
        return ZipFile(archive.path_abs, runner=self._runner)

    # -------------------------------------------------------------------------
    # Navigation and export
    # -------------------------------------------------------------------------
    def ancestors(self, target: Any = None) -> Children:
        """The containing directory followed by its own ancestors."""
        parent = self._require_parent()
        rv = Children([parent])
        rv.extend(parent.ancestors(target))
        return rv

    def to_dict(self, size: bool = False, mime: bool = False, md5sum: bool = False) -> Dict[str, Any]:
        rv: Dict[str, Any] = {}

        if self._misc is not None:
            rv["misc"] = self._misc

        tgt = self.symlink_target()
        if tgt is not None:
            rv["symlink"] = tgt.path
        else:
            if size:
                rv["size"] = self.size
            if mime:
                rv["mime_type"] = self.mime_type
            if md5sum:
                rv["md5sum"] = self.md5sum()

        return rv

from __future__ import annotations

"""
Content-Specific File Handles.

Subtypes selected by the type registry from a file's MIME type. Each one
adds a loader for its format on top of the plain File operations.
"""

import json
import os
import zipfile
from typing import Any, List
from xml.etree import ElementTree

from fsobject.core.directory import Dir
from fsobject.core.file import File


class ZipFile(File):
    subtype = "zip"

    def names(self) -> List[str]:
        """Member names in archive order."""
        with zipfile.ZipFile(self.path_abs, "r") as zf:
            return zf.namelist()

    def extract(self, target_dir: Any) -> Dir:
        """Extract every member into 'target_dir', creating it if needed."""
        dest = Dir(target_dir, runner=self._runner).ensure()
        with zipfile.ZipFile(self.path_abs, "r") as zf:
            zf.extractall(dest.path_abs)
        return dest


class JsonFile(File):
    subtype = "json"

    def load(self) -> Any:
        return json.loads(self.read())


class XmlFile(File):
    subtype = "xml"

    def load(self) -> ElementTree.Element:
        """Parse the document and return its root element."""
        return ElementTree.parse(os.fspath(self)).getroot()


class HtmlFile(File):
    subtype = "html"

    def load(self) -> str:
        return self.read()

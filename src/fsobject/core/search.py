from __future__ import annotations

"""
Recursive Content Search.

Runs a single recursive grep for all terms (which matches lines containing
any of them), then keeps only the lines that contain every term and groups
them per file in first-seen order.
"""

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from fsobject.core.handle import FSO
from fsobject.core.resolver import resolve_existing
from fsobject.domain.config import tool_path
from fsobject.domain.errors import ExternalToolError
from fsobject.domain.models import SearchHit, SearchResult
from fsobject.infra.process import ProcessRunner, get_runner

if TYPE_CHECKING:
    from fsobject.core.directory import Dir

logger = logging.getLogger(__name__)


class ContentSearch:
    """
    One AND-query over a directory tree.

    Attributes:
        dir: Root of the searched tree.
        queries: Terms that must all appear in a line.
        found: Result, computed on construction.
    """

    def __init__(
            self,
            directory: "Dir",
            queries: Sequence[str],
            runner: Optional[ProcessRunner] = None,
    ) -> None:
        self.dir = directory
        self.queries: List[str] = list(queries)
        self._runner = runner
        self.found: SearchResult = self._list_files()

    @property
    def runner(self) -> ProcessRunner:
        return self._runner or get_runner()

    def all_queries(self, text: str) -> bool:
        return all(q in text for q in self.queries)

    def _build_command(self) -> List[str]:
        cmd = [tool_path("grep"), "-r", "-F", "-Z"]
        for q in self.queries:
            cmd.extend(["-e", q])
        cmd.extend(["--", self.dir.path_abs])
        return cmd

    def _list_files(self) -> SearchResult:
        if not self.queries:
            return ()

        result = self.runner.run(self._build_command(), errors="surrogateescape")

        # grep: 0 = lines selected, 1 = none, >1 = error
        if result.exit_code not in (0, 1):
            if not result.stdout:
                raise ExternalToolError("content-search-error", result.argv, result.exit_code, result.stderr)
            logger.warning(f"Search under {self.dir.path_abs} was partial: {result.stderr.strip()}")

        handles: Dict[str, FSO] = {}
        lines: Dict[str, List[str]] = {}

        for raw in result.stdout.split("\n"):
            path, sep, text = raw.partition("\0")
            if not sep:
                continue

            text = text.rstrip("\r")
            if not self.all_queries(text):
                continue

            if path not in handles:
                handle = resolve_existing(path, runner=self._runner)
                if handle is None:
                    continue
                handles[path] = handle
                lines[path] = []

            handles[path].found.append(text)
            lines[path].append(text)

        logger.debug(f"Search {self.queries!r}: {len(handles)} files under {self.dir.path_abs}")
        return tuple(SearchHit(handles[p], tuple(ls)) for p, ls in lines.items())

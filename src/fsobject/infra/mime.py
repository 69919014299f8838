from __future__ import annotations

"""
MIME Type Detection.

Thin wrapper around 'file --mime-type --brief'. Only invoked on demand so
that plain traversal never spawns a process per entry.
"""

import logging
from typing import Optional

from fsobject.domain.config import tool_path
from fsobject.infra.process import ProcessRunner, get_runner

logger = logging.getLogger(__name__)


class MimeDetector:
    """Probes a path's content type with the configured 'file' tool."""

    def __init__(self, runner: Optional[ProcessRunner] = None) -> None:
        self._runner = runner

    @property
    def runner(self) -> ProcessRunner:
        return self._runner or get_runner()

    def detect(self, path: str) -> str:
        """
        Detect the MIME type of 'path'.

        Raises:
            ExternalToolError: If the probe fails.
        """
        cmd = [tool_path("file"), "--mime-type", "--brief", str(path)]
        result = self.runner.run(cmd).raise_on_failure("error-getting-mime-type")
        mime_type = " ".join(result.stdout.split())
        logger.debug(f"MIME {path}: {mime_type}")
        return mime_type

from __future__ import annotations

"""
Scoped Working-Directory Context.

The working directory is process-global state. Every temporary change goes
through WorkingDirectory so that the previous directory is restored on all
exit paths, including exceptions raised by the enclosed block.
"""

import logging
import os
from typing import List, Optional

logger = logging.getLogger(__name__)


class WorkingDirectory:
    """
    Context manager that enters a directory and restores the previous one.

    Re-entrant: nested uses of the same instance unwind in LIFO order.
    """

    def __init__(self, target: "os.PathLike[str] | str") -> None:
        self.target = os.path.abspath(os.fspath(target))
        self._saved: List[str] = []

    def __enter__(self) -> str:
        previous = os.getcwd()
        os.chdir(self.target)
        self._saved.append(previous)
        logger.debug(f"Entered {self.target}")
        return self.target

    def __exit__(self, *exc_info: object) -> Optional[bool]:
        previous = self._saved.pop()
        os.chdir(previous)
        logger.debug(f"Restored {previous}")
        return None

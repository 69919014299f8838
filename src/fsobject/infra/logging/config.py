from __future__ import annotations

"""
Logging Settings for the Handle Engine.

The library modules only create named loggers and never install handlers.
Handlers are installed once by whoever owns the process, which in this
project is the command line front end. Library use stays silent unless the
host application configures logging itself.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings passed to configure_logging.

    Handle operations log tool invocations and traversal at DEBUG, partial
    search failures at WARNING, and configuration problems at ERROR.

    Attributes:
        level: Name of the lowest level that is emitted. Unknown names fall
            back to INFO.
        console: Write records to stderr, keeping stdout free for command output.
        log_file: Optional path of a rotating log file.
        max_bytes: Size at which the log file is rotated.
        backup_count: Number of rotated files kept next to the log file.
        console_fmt: Record format on stderr.
        file_fmt: Record format in the log file.
        datefmt: Timestamp format in the log file.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def for_cli(cls, debug: bool = False, log_file: Optional[str] = None) -> "LoggingConfig":
        """
        Settings used by the command line tool.

        Only warnings and errors reach stderr unless '--debug' is given, in
        which case every tool invocation is traced as well.
        """
        return cls(level="DEBUG" if debug else "WARNING", console=True, log_file=log_file)

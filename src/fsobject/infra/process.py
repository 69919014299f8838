from __future__ import annotations

"""
External Process Invocation.

Narrow, synchronous boundary used by every operation that delegates to a
shell tool (MIME probing, attributes, archives, checksums, sampling, text
search, tree diffs). Nothing here retries or times out: a call blocks until
the tool exits and the caller decides what a non-zero status means.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Type

from fsobject.domain.errors import ExternalToolError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """
    Captured outcome of one tool invocation.

    Attributes:
        argv: Command line that was executed.
        stdout: Decoded standard output.
        stderr: Decoded standard error.
        exit_code: Exit status, or None if the tool could not be started.
    """
    argv: Tuple[str, ...]
    stdout: str = ""
    stderr: str = ""
    exit_code: Optional[int] = 0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def raise_on_failure(
            self,
            operation: str,
            error_cls: Type[ExternalToolError] = ExternalToolError,
    ) -> "ProcessResult":
        """
        Raise 'error_cls' unless the tool exited with status 0.

        Returns:
            ProcessResult: self, to allow chaining.
        """
        if not self.ok:
            raise error_cls(operation, self.argv, self.exit_code, self.stderr)
        return self


class ProcessRunner:
    """Runs tools through subprocess, capturing text output."""

    def run(
            self,
            argv: Sequence[str],
            cwd: Optional[str] = None,
            errors: str = "replace",
    ) -> ProcessResult:
        """
        Execute a command and wait for it to finish.

        Args:
            argv: Program and arguments. No shell is involved.
            cwd: Optional working directory for the child process only.
            errors: Decoding error handler for the captured output. Use
                "surrogateescape" when the output carries file names, so
                they round-trip to the same bytes as os.listdir entries.

        Returns:
            ProcessResult: Captured output and exit status. A missing or
            non-executable program yields exit_code None.
        """
        args = tuple(str(a) for a in argv)
        logger.debug(f"Running: {' '.join(args)}")
        try:
            proc = subprocess.run(
                args,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors=errors,
            )
        except OSError as e:
            logger.debug(f"Could not start '{args[0]}': {e}")
            return ProcessResult(argv=args, stderr=str(e), exit_code=None)

        return ProcessResult(
            argv=args,
            stdout=proc.stdout,
            stderr=proc.stderr,
            exit_code=proc.returncode,
        )


_default_runner: ProcessRunner = ProcessRunner()


def get_runner() -> ProcessRunner:
    """Return the process-wide default runner."""
    return _default_runner


def set_runner(runner: ProcessRunner) -> ProcessRunner:
    """
    Replace the process-wide default runner.

    Returns:
        ProcessRunner: The previously installed runner.
    """
    global _default_runner
    previous = _default_runner
    _default_runner = runner
    return previous

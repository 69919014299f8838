from __future__ import annotations

"""
Error Taxonomy.

Every failure raised by the handle engine derives from FsoError and carries
a stable machine-readable 'kind' plus a human-readable 'detail' (usually the
offending path). External tool failures keep the raw invocation data so
callers can report exactly what was executed.
"""

from typing import Any, Optional, Sequence, Tuple


class FsoError(Exception):
    """Base class for all handle engine failures."""

    kind: str = "fso-error"

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(f"{self.kind}: {detail}" if detail else self.kind)


class NotFoundError(FsoError):
    """Resolution found nothing and the operation required existence."""

    kind = "not-found"


class InvalidComparandError(FsoError, TypeError):
    """Equality or containment against an unsupported type."""

    kind = "invalid-comparand"


class AncestorNotFoundError(FsoError):
    """Ancestor search reached the root without matching its target."""

    kind = "did-not-find-target-ancestor"

    def __init__(self, target: Any, detail: str) -> None:
        self.target = target
        super().__init__(detail)


class FrozenHandleError(FsoError):
    """A mutating operation was attempted on a frozen handle."""

    kind = "frozen-handle"


class PathConflictError(FsoError):
    """The requested path is already taken by an incompatible entry."""

    kind = "path-conflict"


# -----------------------------------------------------------------------------
# EXTERNAL TOOL FAILURES
# -----------------------------------------------------------------------------

class ExternalToolError(FsoError):
    """
    Wraps a failed invocation of an external collaborator.

    Attributes:
        operation: Stable name of the operation that failed.
        argv: Command line that was executed.
        exit_code: Process exit status, or None if the tool could not start.
        stderr: Captured diagnostic output.
    """

    kind = "external-tool-error"

    def __init__(
            self,
            operation: str,
            argv: Sequence[str] = (),
            exit_code: Optional[int] = None,
            stderr: str = "",
    ) -> None:
        self.operation = operation
        self.argv: Tuple[str, ...] = tuple(str(a) for a in argv)
        self.exit_code = exit_code
        self.stderr = stderr

        detail = operation
        if exit_code is None:
            detail += " (tool could not be started)"
        else:
            detail += f" (exit {exit_code})"
        if stderr.strip():
            detail += f": {stderr.strip()}"
        super().__init__(detail)


class AttributeReadError(ExternalToolError):
    kind = "attribute-read-error"


class AttributeWriteError(ExternalToolError):
    kind = "attribute-write-error"


class AttributeDeleteError(ExternalToolError):
    kind = "attribute-delete-error"

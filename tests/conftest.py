from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Isolation of the process-wide active settings and working directory.
3. Fake process runners standing in for the external tools.
4. A small on-disk project tree shared by the handle tests.
"""

import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from fsobject.domain.config import reset_settings  # noqa: E402
from fsobject.infra.process import ProcessResult, ProcessRunner  # noqa: E402


# -----------------------------------------------------------------------------
# Fake Runners
# -----------------------------------------------------------------------------
class ScriptedRunner(ProcessRunner):
    """
    Runner that answers from a script instead of spawning processes.

    Responses are matched on the argv prefix; the most recently registered
    match wins. Unmatched commands behave like a missing program.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[Tuple[str, ...], Optional[str]]] = []
        self.decoders: List[str] = []
        self._script: List[Tuple[Tuple[str, ...], ProcessResult]] = []

    def on(self, *prefix: str, stdout: str = "", stderr: str = "", exit_code: Optional[int] = 0) -> None:
        self._script.append((tuple(prefix), ProcessResult(tuple(prefix), stdout, stderr, exit_code)))

    def run(self, argv: Sequence[str], cwd: Optional[str] = None, errors: str = "replace") -> ProcessResult:
        args = tuple(str(a) for a in argv)
        self.calls.append((args, cwd))
        self.decoders.append(errors)
        for prefix, canned in reversed(self._script):
            if args[:len(prefix)] == prefix:
                return ProcessResult(args, canned.stdout, canned.stderr, canned.exit_code)
        return ProcessResult(args, stderr=f"{args[0]}: not found", exit_code=None)


class AttrToolStub(ProcessRunner):
    """In-memory stand-in for the 'attr' tool, keyed by absolute path."""

    def __init__(self) -> None:
        self.tables: Dict[str, Dict[str, str]] = {}
        self.calls: List[Tuple[str, ...]] = []

    def run(self, argv: Sequence[str], cwd: Optional[str] = None, errors: str = "replace") -> ProcessResult:
        args = tuple(str(a) for a in argv)
        self.calls.append(args)
        path = args[-1]
        table = self.tables.setdefault(path, {})
        opts = list(args[1:-1])

        if "-l" in opts:
            return ProcessResult(args, "".join(f"{k}\n" for k in table))
        if "-g" in opts:
            key = opts[opts.index("-g") + 1]
            if key not in table:
                return ProcessResult(args, stderr="No such attribute", exit_code=1)
            return ProcessResult(args, table[key])
        if "-s" in opts:
            table[opts[opts.index("-s") + 1]] = opts[opts.index("-V") + 1]
            return ProcessResult(args)
        if "-r" in opts:
            key = opts[opts.index("-r") + 1]
            if table.pop(key, None) is None:
                return ProcessResult(args, stderr="No such attribute", exit_code=1)
            return ProcessResult(args)
        return ProcessResult(args, stderr="usage", exit_code=1)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def isolated_process_state():
    """Restore the default settings and the working directory around each test."""
    cwd = os.getcwd()
    reset_settings()
    yield
    reset_settings()
    os.chdir(cwd)


@pytest.fixture
def scripted_runner() -> ScriptedRunner:
    return ScriptedRunner()


@pytest.fixture
def attr_stub() -> AttrToolStub:
    return AttrToolStub()


@pytest.fixture
def project_tree(tmp_path: Path) -> Path:
    """
    Create a small project tree.

    Structure:
    /proj
      /.git
      /src
        /pkg
          mod.py
      README.md
      data.json
    """
    proj = tmp_path / "proj"
    (proj / ".git").mkdir(parents=True)
    pkg = proj / "src" / "pkg"
    pkg.mkdir(parents=True)
    (pkg / "mod.py").write_text("import os\nprint('foo bar')\n", encoding="utf-8")
    (proj / "README.md").write_text("# foo\nfoo and bar\nbar only\n", encoding="utf-8")
    (proj / "data.json").write_text('{"a": 1}', encoding="utf-8")
    return proj

from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration loading
and overrides, dispatch to the selected handle operation, and rendering of
the result as text or JSON.
"""

import argparse
import json
import os
import sys
from typing import Any, Callable, Dict, List, Optional

from fsobject.core.directory import Dir
from fsobject.core.file import File
from fsobject.core.handle import FSO
from fsobject.core.resolver import resolve_existing
from fsobject.domain.config import load_config, set_settings
from fsobject.domain.errors import FsoError
from fsobject.domain.models import ExistingChild
from fsobject.infra.logging import LoggingConfig, configure_logging, get_logger
from fsobject.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success, 1 on a handled failure, 2 if the input path is missing.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    configure_logging(LoggingConfig.for_cli(debug=args.debug))

    config = load_config(args.config_file)
    config.update(cli_args.args_to_overrides(args))
    set_settings(config)

    handle = resolve_existing(args.path)
    if handle is None:
        print(f"ERROR: path does not exist: {args.path}", file=sys.stderr)
        return 2

    logger.debug(f"Command '{args.command}' on {handle.path_abs}")
    try:
        payload = _COMMANDS[args.command](handle, args)
    except FsoError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    _render(payload, args.json_output)
    return 0


# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

def _require_dir(handle: FSO) -> Dir:
    if not isinstance(handle, Dir):
        raise FsoError(f"not a directory: {handle.path}")
    return handle


def _entry(handle: FSO) -> Dict[str, Any]:
    return {"path": handle.path, "kind": handle.kind.value}


def _cmd_ls(handle: FSO, args: argparse.Namespace) -> List[Dict[str, Any]]:
    return [_entry(c) for c in _require_dir(handle).children()]


def _cmd_tree(handle: FSO, args: argparse.Namespace) -> List[Dict[str, Any]]:
    return [_entry(c) for c in _require_dir(handle).walk(recursive=not args.shallow)]


def _cmd_ancestors(handle: FSO, args: argparse.Namespace) -> List[Dict[str, Any]]:
    target: Any = None
    if args.name is not None:
        target = args.name
    elif args.until is not None:
        target = FSO(args.until)
    elif args.marker is not None:
        target = ExistingChild(args.marker)

    if not isinstance(handle, (Dir, File)):
        raise FsoError(f"ancestors not supported for: {handle.path}")
    return [_entry(a) for a in handle.ancestors(target)]


def _cmd_search(handle: FSO, args: argparse.Namespace) -> List[Dict[str, Any]]:
    return [
        {"path": hit.file.path, "lines": list(hit.lines)}
        for hit in _require_dir(handle).search(*args.terms)
    ]


def _cmd_attr(handle: FSO, args: argparse.Namespace) -> Any:
    store = handle.attr
    if args.action == "keys":
        return store.keys()
    if args.key is None:
        raise FsoError(f"attr {args.action} requires a key")
    if args.action == "get":
        return store.get(args.key)
    if args.action == "set":
        store.set(args.key, args.value or "")
        return args.value or ""
    return store.delete(args.key)


def _cmd_mime(handle: FSO, args: argparse.Namespace) -> Dict[str, Any]:
    typed = handle.typed()
    return {"path": handle.path, "mime_type": handle.mime(), "handle": type(typed).__name__}


_COMMANDS: Dict[str, Callable[[FSO, argparse.Namespace], Any]] = {
    "ls": _cmd_ls,
    "tree": _cmd_tree,
    "ancestors": _cmd_ancestors,
    "search": _cmd_search,
    "attr": _cmd_attr,
    "mime": _cmd_mime,
}


# -----------------------------------------------------------------------------
# OUTPUT RENDERING
# -----------------------------------------------------------------------------

def _render(payload: Any, as_json: bool) -> None:
    if as_json:
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    if payload is None:
        return
    if isinstance(payload, dict):
        for key, value in payload.items():
            print(f"{key}: {value}")
        return
    if not isinstance(payload, list):
        print(payload)
        return

    for item in payload:
        if isinstance(item, dict) and "lines" in item:
            for line in item["lines"]:
                print(f"{item['path']}:{line}")
        elif isinstance(item, dict):
            print(item["path"] + (os.sep if item["kind"] == "directory" else ""))
        else:
            print(item)

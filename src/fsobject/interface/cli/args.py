from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema (global flags and one sub-command per
handle operation) and translates parsed namespaces into configuration
overrides.
"""

import argparse
from typing import Any, Dict

from fsobject.domain.constants import PATH_STYLE_ABSOLUTE

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the fsobject CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="fsobject",
        description="Inspect filesystem entries through typed handles.",
    )

    # --- Global Flags ---
    p.add_argument("--debug", action="store_true", help="Enable verbose diagnostics.")
    p.add_argument("--absolute", action="store_true", help="Print absolute instead of relative paths.")
    p.add_argument("--json", dest="json_output", action="store_true", help="Emit machine-readable JSON.")
    p.add_argument("--config", dest="config_file", default=None, help="Configuration file to load.")

    sub = p.add_subparsers(dest="command", required=True)

    # --- Listing ---
    ls = sub.add_parser("ls", help="List the immediate entries of a directory.")
    ls.add_argument("path", nargs="?", default=".")

    tree = sub.add_parser("tree", help="Walk a directory tree (pre-order).")
    tree.add_argument("path", nargs="?", default=".")
    tree.add_argument("--shallow", action="store_true", help="Do not descend into sub-directories.")

    # --- Ancestor Search ---
    anc = sub.add_parser("ancestors", help="List the ancestors of an entry, nearest first.")
    anc.add_argument("path", nargs="?", default=".")
    target = anc.add_mutually_exclusive_group()
    target.add_argument("--name", default=None, help="Stop at the ancestor with this base name.")
    target.add_argument("--until", default=None, help="Stop at this directory.")
    target.add_argument("--marker", default=None, help="Stop at the directory containing this path.")

    # --- Content Search ---
    search = sub.add_parser("search", help="Find lines containing every term.")
    search.add_argument("path")
    search.add_argument("terms", nargs="+")

    # --- Attributes ---
    attr = sub.add_parser("attr", help="Read or modify extended attributes.")
    attr.add_argument("action", choices=("keys", "get", "set", "rm"))
    attr.add_argument("path")
    attr.add_argument("key", nargs="?", default=None)
    attr.add_argument("value", nargs="?", default=None)

    # --- Content Type ---
    mime = sub.add_parser("mime", help="Detect the content type of a file.")
    mime.add_argument("path")

    return p


# -----------------------------------------------------------------------------
# OVERRIDE MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate global flags into configuration overrides.

    Args:
        args: Parsed namespace.

    Returns:
        Dict[str, Any]: Keys to merge over the loaded configuration.
    """
    overrides: Dict[str, Any] = {}
    if args.absolute:
        overrides["path_style"] = PATH_STYLE_ABSOLUTE
    return overrides

from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the default external tool commands, the recognized MIME types
and the identifiers used by the configuration subsystem.
"""

from typing import Dict

CURRENT_CONFIG_VERSION = "1.0.0"

APP_DIR_NAME = "fsobject"
UNIX_APP_DIR_NAME = ".fsobject"

PATH_STYLE_RELATIVE = "relative"
PATH_STYLE_ABSOLUTE = "absolute"
PATH_STYLES = (PATH_STYLE_RELATIVE, PATH_STYLE_ABSOLUTE)


# -----------------------------------------------------------------------------
# EXTERNAL TOOLS
# -----------------------------------------------------------------------------
# Bare command names are resolved on PATH at invocation time.
DEFAULT_TOOLS: Dict[str, str] = {
    "file": "file",
    "zip": "zip",
    "diff": "diff",
    "shuf": "shuf",
    "md5sum": "md5sum",
    "grep": "grep",
    "attr": "attr",
}

# -----------------------------------------------------------------------------
# CONTENT TYPE REGISTRY
# -----------------------------------------------------------------------------
# MIME type -> subtype identifier. Identifiers are bound to handle classes
# in fsobject.core.resolver.
MIME_SUBTYPES: Dict[str, str] = {
    "application/zip": "zip",
    "application/json": "json",
    "text/xml": "xml",
    "application/xml": "xml",
    "image/svg+xml": "xml",
    "text/html": "html",
}

from __future__ import annotations

"""
Configuration Domain Management.

Handles the JSON-persisted settings of the handle engine (path rendering
style, temporary directory, external tool commands) and the process-wide
active copy that handles consult at call time.
"""

import json
import logging
import os
import tempfile
from typing import Any, Dict, List, Optional, Tuple

from fsobject.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_TOOLS,
    PATH_STYLE_RELATIVE,
    PATH_STYLES,
)
from fsobject.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"

_active: Optional[Dict[str, Any]] = None


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,
        "path_style": PATH_STYLE_RELATIVE,
        "tmp_dir": tempfile.gettempdir(),
        "tools": dict(DEFAULT_TOOLS),
    }


def get_config_file() -> str:
    """Return the absolute path of the persisted configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------
def validate_config(config: Any, *, strict: bool = False) -> Tuple[Dict[str, Any], List[str]]:
    """
    Merge a raw configuration over the defaults and normalize its schema.

    Never touches the filesystem.

    Args:
        config: Raw configuration (usually parsed JSON).
        strict: Raise instead of correcting invalid values.

    Returns:
        Tuple[Dict[str, Any], List[str]]: (Normalized config, warnings).

    Raises:
        TypeError: In strict mode, if config or one of its sections has the wrong type.
        ValueError: In strict mode, if path_style is not recognized.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config: expected dict, got {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(msg + " Using defaults.")
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if k != "tools"})

    style = merged.get("path_style")
    if style not in PATH_STYLES:
        msg = f"Unknown path_style {style!r}; expected one of {', '.join(PATH_STYLES)}."
        if strict:
            raise ValueError(msg)
        warnings.append(msg)
        merged["path_style"] = defaults["path_style"]

    tmp_dir = merged.get("tmp_dir")
    if not isinstance(tmp_dir, str) or not tmp_dir.strip():
        msg = "'tmp_dir' must be a non-empty string."
        if strict:
            raise TypeError(msg)
        warnings.append(msg)
        merged["tmp_dir"] = defaults["tmp_dir"]

    tools = dict(defaults["tools"])
    raw_tools = config.get("tools", {})
    if isinstance(raw_tools, dict):
        for name, command in raw_tools.items():
            if isinstance(command, str) and command.strip():
                tools[name] = command.strip()
            else:
                msg = f"Tool '{name}' must map to a command string."
                if strict:
                    raise TypeError(msg)
                warnings.append(msg)
    else:
        msg = "'tools' must be a mapping of tool name to command."
        if strict:
            raise TypeError(msg)
        warnings.append(msg)
    merged["tools"] = tools

    merged["version"] = CURRENT_CONFIG_VERSION
    return merged, warnings


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the configuration from disk.

    Args:
        path: Explicit config file; defaults to the user data directory copy.

    Returns:
        Dict[str, Any]: The validated config, or defaults on any failure.
    """
    config_path = path or get_config_file()

    if not os.path.exists(config_path):
        logger.debug("Config file not found. Returning defaults.")
        return get_default_config()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return get_default_config()

    clean, warnings = validate_config(data)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")
    return clean


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> None:
    """
    Persist the configuration to disk.

    Args:
        config: The configuration dictionary to save.
        path: Explicit target file; defaults to the user data directory copy.
    """
    config_path = path or get_config_file()
    try:
        os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)
        config["version"] = CURRENT_CONFIG_VERSION
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(config, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_path}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")


# -----------------------------------------------------------------------------
# Active Settings
# -----------------------------------------------------------------------------
def get_settings() -> Dict[str, Any]:
    """Return the process-wide active configuration (defaults until set)."""
    global _active
    if _active is None:
        _active = get_default_config()
    return _active


def set_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate and install a configuration as the active one.

    Raises:
        TypeError, ValueError: If the configuration is invalid.
    """
    global _active
    clean, _ = validate_config(config, strict=True)
    _active = clean
    return clean


def reset_settings() -> None:
    """Drop the active configuration so defaults apply again."""
    global _active
    _active = None


def tool_path(name: str) -> str:
    """Return the command configured for an external tool."""
    return get_settings()["tools"].get(name, name)

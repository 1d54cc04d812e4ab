from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent user preferences stored as JSON in the user data
directory, with default fallback and normalization of loaded values.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from fstree.core.hashing.content import DEFAULT_CHUNK_SIZE
from fstree.infra.fs import ensure_parent_dir, get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE_NAME = "config.json"
OUTPUT_FORMATS = ("hash", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_config_path() -> str:
    """Absolute path of the persistent configuration file."""
    return os.path.join(get_user_data_dir(create=False), CONFIG_FILE_NAME)


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "output_format": "hash",
        "json_indent": 2,
        "chunk_size": DEFAULT_CHUNK_SIZE,
        "log_level": "INFO",
        "log_file": None,
    }

# -----------------------------------------------------------------------------
# Persistence
# -----------------------------------------------------------------------------

def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the persisted configuration merged over the defaults.

    A missing file yields the defaults. An unreadable or malformed file is
    reported as a warning and also yields the defaults. Unknown keys are
    dropped.

    Args:
        path: Optional configuration file path. Defaults to the user data dir.

    Returns:
        Dict[str, Any]: The effective configuration.
    """
    cfg = get_default_config()
    target = path or get_config_path()

    if not os.path.exists(target):
        return cfg

    try:
        with open(target, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable configuration '{target}': {e}")
        return cfg

    if not isinstance(data, dict):
        logger.warning(f"Ignoring configuration '{target}': top level is not an object")
        return cfg

    for key in cfg:
        if key in data:
            cfg[key] = data[key]
    return cfg


def save_config(cfg: Dict[str, Any], path: Optional[str] = None) -> str:
    """
    Persist the known configuration keys as JSON.

    Args:
        cfg: Configuration to store.
        path: Optional target path. Defaults to the user data dir.

    Returns:
        str: Path written.
    """
    target = path or get_config_path()
    known = {k: cfg[k] for k in get_default_config() if k in cfg}

    ensure_parent_dir(target)
    with open(target, "w", encoding="utf-8") as f:
        json.dump(known, f, ensure_ascii=False, indent=2)
    logger.debug(f"Configuration saved to: {target}")
    return target

# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------

def validate_config(cfg: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """
    Normalize configuration values, replacing invalid ones with defaults.

    Args:
        cfg: Raw configuration.

    Returns:
        Tuple[Dict[str, Any], List[str]]: (clean configuration, warnings).
    """
    defaults = get_default_config()
    clean = dict(defaults)
    warnings: List[str] = []

    fmt = str(cfg.get("output_format", defaults["output_format"])).strip().lower()
    if fmt in OUTPUT_FORMATS:
        clean["output_format"] = fmt
    else:
        warnings.append(f"Invalid output_format '{fmt}', using '{defaults['output_format']}'.")

    indent = cfg.get("json_indent", defaults["json_indent"])
    if indent is None or (isinstance(indent, int) and not isinstance(indent, bool) and indent >= 0):
        clean["json_indent"] = indent
    else:
        warnings.append(f"Invalid json_indent '{indent}', using {defaults['json_indent']}.")

    chunk = cfg.get("chunk_size", defaults["chunk_size"])
    if isinstance(chunk, int) and not isinstance(chunk, bool) and chunk > 0:
        clean["chunk_size"] = chunk
    else:
        warnings.append(f"Invalid chunk_size '{chunk}', using {defaults['chunk_size']}.")

    level = str(cfg.get("log_level") or defaults["log_level"]).strip().upper()
    if level in LOG_LEVELS:
        clean["log_level"] = level
    else:
        warnings.append(f"Invalid log_level '{level}', using '{defaults['log_level']}'.")

    log_file = cfg.get("log_file")
    clean["log_file"] = str(log_file) if log_file else None

    return clean, warnings

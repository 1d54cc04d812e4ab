from __future__ import annotations

"""
Logging Handler Factories.

Builds the concrete handlers attached behind the queue listener and tags
them so reconfiguration only ever removes handlers installed by fstree.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from fstree.infra.fs import ensure_parent_dir

_HANDLER_TAG_ATTR: str = "_fstree_handler"


def _tag_handler(handler: logging.Handler) -> None:
    """Mark a handler as managed by fstree."""
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _is_our_handler(handler: logging.Handler) -> bool:
    """Check whether a handler carries the fstree tag."""
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def _create_stream_handler(level_int: int, formatter: logging.Formatter) -> logging.StreamHandler:
    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(level_int)
    sh.setFormatter(formatter)
    _tag_handler(sh)
    return sh


def _create_rotating_file_handler(
        log_file: str,
        level_int: int,
        formatter: logging.Formatter,
        max_bytes: int,
        backup_count: int,
) -> Optional[RotatingFileHandler]:
    """
    Initialize a RotatingFileHandler, creating its directory when needed.

    Args:
        log_file: Target path for the log file.
        level_int: Numeric logging level.
        formatter: Formatter for file entries.
        max_bytes: Rollover threshold in bytes.
        backup_count: Number of archived files to keep.

    Returns:
        Optional[RotatingFileHandler]: Configured handler, or None if the
        file cannot be opened (a warning is written to stderr).
    """
    try:
        ensure_parent_dir(log_file)
        fh = RotatingFileHandler(
            log_file,
            maxBytes=int(max_bytes),
            backupCount=int(backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: cannot open log file '{log_file}': {e}\n")
        return None

    fh.setLevel(level_int)
    fh.setFormatter(formatter)
    _tag_handler(fh)
    return fh

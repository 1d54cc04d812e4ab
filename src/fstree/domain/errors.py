from __future__ import annotations

"""
Tree Construction Error Hierarchy.

Every failure raised while building a tree derives from TreeError and
records the filesystem path that triggered it, so callers can report
or retry the whole build.
"""

from typing import Optional

# -----------------------------------------------------------------------------
# BASE ERROR
# -----------------------------------------------------------------------------

class TreeError(Exception):
    """
    Base class for all tree construction failures.

    Attributes:
        path: Filesystem path that caused the failure.
        message: Human-readable description without the path.
    """

    default_message = "tree construction failed"

    def __init__(self, path: str, message: Optional[str] = None) -> None:
        self.path = path
        self.message = message or self.default_message
        super().__init__(f"{self.message}: {path}")

# -----------------------------------------------------------------------------
# CONCRETE ERRORS
# -----------------------------------------------------------------------------

class PathStatError(TreeError):
    """Raised when a path cannot be stat'ed (missing, permission denied)."""

    default_message = "failed to stat file"


class RootNotDirectoryError(TreeError):
    """Raised when the build entry point is given something other than a directory."""

    default_message = "file tree building is only supported for directory"


class DirectoryReadError(TreeError):
    """Raised when the entries of a directory cannot be listed."""

    default_message = "failed to read directory"


class SymlinkReadError(TreeError):
    """Raised when the target of a symbolic link cannot be read."""

    default_message = "invalid symbolic link"


class UnsupportedFileTypeError(TreeError):
    """Raised for FIFOs, sockets, device files and other special entries."""

    default_message = "unsupported file type"


class ContentHashError(TreeError):
    """Raised when the content digest of a regular file cannot be computed."""

    default_message = "failed to calculate merkle root"

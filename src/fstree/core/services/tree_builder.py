from __future__ import annotations

"""
Filesystem Tree Builder.

Walks a local directory depth-first and produces a content-addressed
snapshot of it. Symbolic links are recorded as links (never followed),
regular files are digested by a pluggable content hasher, and any other
entry type aborts the whole build.
"""

import dataclasses
import logging
import os
import stat
from dataclasses import dataclass, field
from typing import List, Optional, Union

from fstree.core.hashing.content import ContentHasher, merkle_root
from fstree.domain.errors import (
    ContentHashError,
    DirectoryReadError,
    PathStatError,
    RootNotDirectoryError,
    SymlinkReadError,
    TreeError,
    UnsupportedFileTypeError,
)
from fstree.domain.tree_models import (
    Node,
    new_directory_node,
    new_file_node,
    new_symbolic_node,
)

logger = logging.getLogger(__name__)

ROOT_NAME = "."

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_file_tree(path: str, content_hasher: Optional[ContentHasher] = None) -> Node:
    """
    Build the content-addressed tree of a directory.

    Symbolic links are followed only to check that the path is a directory.
    The node itself is classified without following a final link, so a path
    that is a link to a directory yields a symbolic node. The returned root
    is always named ".".

    Args:
        path: Directory to snapshot.
        content_hasher: Callable mapping a file path to its 32-byte digest.
                        Defaults to the chunked keccak Merkle root.

    Returns:
        Node: Root of the built tree.

    Raises:
        TreeError: On the first failure anywhere in the walk. No partial
                   tree is returned.
    """
    try:
        info = os.stat(path)
    except OSError as e:
        raise PathStatError(path) from e

    if not stat.S_ISDIR(info.st_mode):
        raise RootNotDirectoryError(path)

    logger.info(f"Building file tree for: {path}")
    root = _build(path, content_hasher or merkle_root)

    root = dataclasses.replace(root, name=ROOT_NAME)
    logger.info(f"File tree built: {root.type.value} root {root.digest.hex()}")
    return root

# -----------------------------------------------------------------------------
# DEPTH-FIRST WALK
# -----------------------------------------------------------------------------

@dataclass
class _PendingDirectory:
    """Directory whose entries are still being built."""
    path: str
    remaining: List[str]
    children: List[Node] = field(default_factory=list)


def _build(path: str, hasher: ContentHasher) -> Node:
    """
    Build the node of a path and, for directories, of everything below it.

    Uses an explicit stack of open directories so nesting depth is bounded
    by the filesystem, not by the interpreter's recursion limit.
    """
    first = _visit(path, hasher)
    if not isinstance(first, _PendingDirectory):
        return first

    stack: List[_PendingDirectory] = [first]
    while True:
        top = stack[-1]
        if top.remaining:
            visited = _visit(os.path.join(top.path, top.remaining.pop()), hasher)
            if isinstance(visited, _PendingDirectory):
                stack.append(visited)
            else:
                top.children.append(visited)
            continue

        stack.pop()
        node = new_directory_node(_base_name(top.path), top.children)
        if not stack:
            return node
        stack[-1].children.append(node)


def _visit(path: str, hasher: ContentHasher) -> Union[Node, _PendingDirectory]:
    """Classify a path without following a final symlink."""
    try:
        info = os.lstat(path)
    except OSError as e:
        raise PathStatError(path) from e

    mode = info.st_mode
    if stat.S_ISDIR(mode):
        return _open_directory(path)
    if stat.S_ISLNK(mode):
        return _build_symbolic_node(path)
    if stat.S_ISREG(mode):
        return _build_file_node(path, info, hasher)

    raise UnsupportedFileTypeError(path)


def _open_directory(path: str) -> _PendingDirectory:
    try:
        names = os.listdir(path)
    except OSError as e:
        raise DirectoryReadError(path) from e

    logger.debug(f"Directory with {len(names)} entries: {path}")
    # Entries are popped from the end; reverse to visit them in listing order
    names.reverse()
    return _PendingDirectory(path=path, remaining=names)


def _build_symbolic_node(path: str) -> Node:
    try:
        target = os.readlink(path)
    except OSError as e:
        raise SymlinkReadError(path) from e

    logger.debug(f"Symbolic link -> {target}: {path}")
    return new_symbolic_node(_base_name(path), target)


def _build_file_node(path: str, info: os.stat_result, hasher: ContentHasher) -> Node:
    try:
        digest = hasher(path)
    except TreeError:
        raise
    except OSError as e:
        raise ContentHashError(path) from e

    logger.debug(f"File of {info.st_size} bytes: {path}")
    return new_file_node(_base_name(path), digest, info.st_size)


def _base_name(path: str) -> str:
    """Entry name of a path, tolerating trailing separators."""
    return os.path.basename(os.path.normpath(path))

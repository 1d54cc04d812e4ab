from __future__ import annotations

"""
Filesystem Tree Data Models.

Defines the tagged node variants (file, directory, symbolic link) that make
up a content-addressed snapshot of a directory, their constructors, and the
name lookup used to navigate a built tree.
"""

import bisect
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from fstree.core.hashing.digest import combine_digests, keccak256

# -----------------------------------------------------------------------------
# NODE TYPES
# -----------------------------------------------------------------------------

class FileType(str, Enum):
    """Serialized type tag of a node."""
    FILE = "file"
    DIRECTORY = "directory"
    SYMBOLIC = "symbolic"


@dataclass(frozen=True)
class FileNode:
    """
    Regular file entry.

    Attributes:
        name: Entry name, unique among siblings.
        digest: 32-byte content digest of the file bytes.
        size: File size in bytes.
    """
    name: str
    digest: bytes
    size: int
    type: FileType = field(default=FileType.FILE, init=False)

    def search(self, name: str) -> Tuple[Optional[Node], bool]:
        return None, False


@dataclass(frozen=True)
class SymbolicNode:
    """
    Symbolic link entry.

    Attributes:
        name: Entry name, unique among siblings.
        digest: Keccak-256 of the raw link target bytes.
        target: Link text as stored on disk, never resolved.
    """
    name: str
    digest: bytes
    target: str
    type: FileType = field(default=FileType.SYMBOLIC, init=False)

    def search(self, name: str) -> Tuple[Optional[Node], bool]:
        return None, False


@dataclass(frozen=True)
class DirectoryNode:
    """
    Directory entry owning its children.

    Attributes:
        name: Entry name ("." for the root of a built tree).
        digest: Hash chain over the children's digests.
        children: Child nodes sorted ascending by name.
    """
    name: str
    digest: bytes
    children: List[Node] = field(default_factory=list)
    type: FileType = field(default=FileType.DIRECTORY, init=False)

    def search(self, name: str) -> Tuple[Optional[Node], bool]:
        """
        Binary-search the sorted children for an entry.

        Args:
            name: Entry name to look up.

        Returns:
            Tuple[Optional[Node], bool]: (child, True) or (None, False).
        """
        key = name_key(name)
        i = bisect.bisect_left(self.children, key, key=_node_key)
        if i < len(self.children) and self.children[i].name == name:
            return self.children[i], True
        return None, False


Node = Union[FileNode, DirectoryNode, SymbolicNode]

# -----------------------------------------------------------------------------
# CONSTRUCTORS
# -----------------------------------------------------------------------------

def new_file_node(name: str, digest: bytes, size: int) -> FileNode:
    """Create a file node from an already computed content digest."""
    return FileNode(name=name, digest=digest, size=size)


def new_symbolic_node(name: str, target: Union[str, bytes]) -> SymbolicNode:
    """
    Create a symbolic link node hashed over its raw target text.

    Args:
        name: Entry name.
        target: Link text; str values are encoded with the filesystem encoding.

    Returns:
        SymbolicNode: Node whose digest is keccak256(target bytes).
    """
    raw = os.fsencode(target)
    return SymbolicNode(name=name, digest=keccak256(raw), target=os.fsdecode(raw))


def new_directory_node(name: str, children: List[Node]) -> DirectoryNode:
    """
    Create a directory node, sorting the given children in place.

    The supplied list is reordered by name and becomes the node's children;
    callers must not rely on the order they passed in.

    Args:
        name: Entry name.
        children: Child nodes, in any order.

    Returns:
        DirectoryNode: Node whose digest chains the sorted child digests.
    """
    children.sort(key=_node_key)
    return DirectoryNode(
        name=name,
        digest=combine_digests([c.digest for c in children]),
        children=children,
    )

# -----------------------------------------------------------------------------
# LOOKUP
# -----------------------------------------------------------------------------

def search(node: Node, name: str) -> Tuple[Optional[Node], bool]:
    """
    Look up an immediate child by name.

    Files and symbolic links have no children and always report not found.
    """
    return node.search(name)


def name_key(name: str) -> bytes:
    """Byte-wise ordering key for entry names, matching raw filesystem bytes."""
    return name.encode("utf-8", "surrogateescape")


def _node_key(node: Node) -> bytes:
    return name_key(node.name)

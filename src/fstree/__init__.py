"""
fstree
~~~~~~

Deterministic, content-addressed snapshots of local directory trees.
Every file, directory and symbolic link carries a keccak-256 based digest,
so identical trees always share the same root hash.
"""

from fstree.core.hashing.digest import ZERO_DIGEST, combine_digests, keccak256
from fstree.core.services.tree_builder import build_file_tree
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
    DirectoryNode,
    FileNode,
    FileType,
    Node,
    SymbolicNode,
    new_directory_node,
    new_file_node,
    new_symbolic_node,
    search,
)

__version__ = "0.1.0"
__all__ = [
    "build_file_tree",
    "search",
    "new_file_node",
    "new_symbolic_node",
    "new_directory_node",
    "FileNode",
    "DirectoryNode",
    "SymbolicNode",
    "FileType",
    "Node",
    "keccak256",
    "combine_digests",
    "ZERO_DIGEST",
    "TreeError",
    "PathStatError",
    "RootNotDirectoryError",
    "DirectoryReadError",
    "SymlinkReadError",
    "UnsupportedFileTypeError",
    "ContentHashError",
]

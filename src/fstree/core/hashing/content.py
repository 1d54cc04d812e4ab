from __future__ import annotations

"""
Default File Content Hasher.

Computes a chunked keccak Merkle root over a file's bytes. The tree
builder treats any callable mapping a path to a 32-byte digest as its
content hasher; this is the one used when none is injected.
"""

import logging
from typing import Callable, List

from fstree.core.hashing.digest import ZERO_DIGEST, keccak256
from fstree.domain.errors import ContentHashError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 256
_READ_BLOCK_CHUNKS = 1024

ContentHasher = Callable[[str], bytes]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def merkle_root(path: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """
    Compute the Merkle root of a file's content.

    The file is split into fixed-size chunks, the last one zero-padded.
    Each chunk is hashed into a leaf, then neighbouring nodes are hashed
    pairwise level by level. An odd trailing node is promoted unchanged.
    An empty file yields the zero digest.

    Args:
        path: Path to a regular file.
        chunk_size: Leaf chunk size in bytes.

    Returns:
        bytes: 32-byte Merkle root.

    Raises:
        ContentHashError: If the file cannot be read.
        ValueError: If chunk_size is not positive.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    try:
        leaves = _hash_leaves(path, chunk_size)
    except OSError as e:
        raise ContentHashError(path) from e

    if not leaves:
        return ZERO_DIGEST

    logger.debug(f"Merkle root over {len(leaves)} chunk(s): {path}")
    return _reduce_levels(leaves)


def make_merkle_hasher(chunk_size: int = DEFAULT_CHUNK_SIZE) -> ContentHasher:
    """
    Bind a chunk size into a single-argument content hasher.

    Args:
        chunk_size: Leaf chunk size in bytes.

    Returns:
        ContentHasher: Callable accepted by the tree builder.
    """
    if chunk_size == DEFAULT_CHUNK_SIZE:
        return merkle_root

    def _hasher(path: str) -> bytes:
        return merkle_root(path, chunk_size)

    return _hasher

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _hash_leaves(path: str, chunk_size: int) -> List[bytes]:
    """Stream the file and hash every (zero-padded) chunk."""
    leaves: List[bytes] = []
    block_size = chunk_size * _READ_BLOCK_CHUNKS

    with open(path, "rb") as f:
        pending = b""
        for block in iter(lambda: f.read(block_size), b""):
            pending += block
            full = len(pending) - len(pending) % chunk_size
            for offset in range(0, full, chunk_size):
                leaves.append(keccak256(pending[offset:offset + chunk_size]))
            pending = pending[full:]

    if pending:
        leaves.append(keccak256(pending.ljust(chunk_size, b"\x00")))
    return leaves


def _reduce_levels(nodes: List[bytes]) -> bytes:
    """Hash pairs level by level until a single root remains."""
    while len(nodes) > 1:
        next_level = [
            keccak256(nodes[i], nodes[i + 1])
            for i in range(0, len(nodes) - 1, 2)
        ]
        if len(nodes) % 2:
            next_level.append(nodes[-1])
        nodes = next_level
    return nodes[0]

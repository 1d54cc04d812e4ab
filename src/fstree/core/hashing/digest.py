from __future__ import annotations

"""
Digest Primitives and Directory Hash Chain.

Provides the keccak-256 hash primitive shared by every node type and the
combinator that folds a directory's child digests into a single value.
"""

from typing import Sequence

from Crypto.Hash import keccak

# -----------------------------------------------------------------------------
# CONSTANTS
# -----------------------------------------------------------------------------

DIGEST_SIZE = 32
ZERO_DIGEST = bytes(DIGEST_SIZE)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def keccak256(*parts: bytes) -> bytes:
    """
    Compute the Keccak-256 (Ethereum flavour) digest of the concatenated parts.

    Args:
        parts: Byte strings hashed in order, without separators.

    Returns:
        bytes: 32-byte digest.
    """
    h = keccak.new(digest_bits=256)
    for part in parts:
        h.update(part)
    return h.digest()


def combine_digests(digests: Sequence[bytes]) -> bytes:
    """
    Fold an ordered sequence of child digests into a directory digest.

    The fold is right-associative: the last digest is hashed alone and
    every preceding digest is prepended to the accumulator and rehashed,
    i.e. H(d0 || H(d1 || ... H(dn-1))). An empty sequence yields the
    zero digest. This shape is shared with trees built by other clients
    and must not be replaced by a balanced Merkle tree.

    Args:
        digests: Child digests in sorted-name order.

    Returns:
        bytes: 32-byte directory digest.
    """
    if not digests:
        return ZERO_DIGEST

    acc = keccak256(digests[-1])
    for d in reversed(digests[:-1]):
        acc = keccak256(d, acc)
    return acc

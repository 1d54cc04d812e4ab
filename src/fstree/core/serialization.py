from __future__ import annotations

"""
Tree Serialization.

Converts built trees to and from plain dictionaries and JSON. Each node
carries "name" and "type"; "hash" is present unless it is the zero digest;
"size" (when non-zero), "link" and "entries" appear only on files,
symbolic links and directories respectively. Names and link targets that
are not valid UTF-8 on disk are written with U+FFFD in place of each
invalid byte, so the output is always encodable.
"""

import json
from typing import Any, Dict, List, Optional

from fstree.core.hashing.digest import DIGEST_SIZE, ZERO_DIGEST
from fstree.domain.tree_models import (
    DirectoryNode,
    FileNode,
    FileType,
    Node,
    SymbolicNode,
)

# -----------------------------------------------------------------------------
# DIGEST ENCODING
# -----------------------------------------------------------------------------

def digest_to_hex(digest: bytes) -> str:
    """Encode a digest as 0x-prefixed fixed-width lowercase hex."""
    return "0x" + digest.hex()


def digest_from_hex(text: str) -> bytes:
    """
    Decode a 0x-prefixed (or bare) hex digest.

    Raises:
        ValueError: If the text is not exactly 32 bytes of hex.
    """
    raw = text[2:] if text[:2].lower() == "0x" else text
    digest = bytes.fromhex(raw)
    if len(digest) != DIGEST_SIZE:
        raise ValueError(f"digest must be {DIGEST_SIZE} bytes, got {len(digest)}")
    return digest

# -----------------------------------------------------------------------------
# DICTIONARY MAPPING
# -----------------------------------------------------------------------------

def node_to_dict(node: Node) -> Dict[str, Any]:
    """
    Map a node (recursively) onto its serializable dictionary form.

    Args:
        node: Any tree node.

    Returns:
        Dict[str, Any]: JSON-compatible representation.
    """
    out: Dict[str, Any] = {"name": _to_text(node.name), "type": node.type.value}
    if node.digest != ZERO_DIGEST:
        out["hash"] = digest_to_hex(node.digest)

    if isinstance(node, FileNode):
        if node.size:
            out["size"] = node.size
    elif isinstance(node, SymbolicNode):
        out["link"] = _to_text(node.target)
    elif isinstance(node, DirectoryNode):
        out["entries"] = [node_to_dict(c) for c in node.children]
    return out


def node_from_dict(data: Dict[str, Any]) -> Node:
    """
    Rebuild a node (recursively) from its dictionary form.

    Stored hashes are taken as-is and entries keep their stored order.

    Args:
        data: Representation produced by node_to_dict.

    Returns:
        Node: The reconstructed node.

    Raises:
        ValueError: On a missing name or type, an unknown type tag or a
                    malformed hash.
    """
    if not isinstance(data, dict):
        raise ValueError(f"node must be an object, got {type(data).__name__}")
    for key in ("name", "type"):
        if key not in data:
            raise ValueError(f"node is missing required field {key!r}")

    name = data["name"]
    raw_hash = data.get("hash")
    digest = digest_from_hex(raw_hash) if raw_hash else ZERO_DIGEST

    try:
        node_type = FileType(data["type"])
    except ValueError:
        raise ValueError(f"unknown node type: {data['type']!r}") from None

    if node_type is FileType.FILE:
        return FileNode(name=name, digest=digest, size=int(data.get("size", 0)))
    if node_type is FileType.SYMBOLIC:
        return SymbolicNode(name=name, digest=digest, target=data.get("link", ""))

    children: List[Node] = [node_from_dict(e) for e in data.get("entries") or []]
    return DirectoryNode(name=name, digest=digest, children=children)

# -----------------------------------------------------------------------------
# JSON
# -----------------------------------------------------------------------------

def to_json(node: Node, indent: Optional[int] = None) -> str:
    """Serialize a tree to a JSON document."""
    return json.dumps(node_to_dict(node), ensure_ascii=False, indent=indent)


def from_json(text: str) -> Node:
    """Parse a JSON document produced by to_json."""
    return node_from_dict(json.loads(text))

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _to_text(value: str) -> str:
    """Replace undecodable filesystem bytes (surrogate escapes) with U+FFFD."""
    return value.encode("utf-8", "surrogateescape").decode("utf-8", "replace")

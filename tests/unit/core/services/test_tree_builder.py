from __future__ import annotations

"""
Unit tests for the Filesystem Tree Builder.

Verifies classification of entries, root naming, the end-to-end snapshot
of a mixed directory and the abort-on-first-failure error policy.
"""

import os
import socket
from pathlib import Path
from unittest.mock import patch

import pytest

from fstree.core.hashing.content import merkle_root
from fstree.core.hashing.digest import ZERO_DIGEST, keccak256
from fstree.core.services.tree_builder import build_file_tree
from fstree.domain.errors import (
    ContentHashError,
    DirectoryReadError,
    PathStatError,
    RootNotDirectoryError,
    SymlinkReadError,
    UnsupportedFileTypeError,
)
from fstree.domain.tree_models import (
    DirectoryNode,
    FileNode,
    FileType,
    SymbolicNode,
    search,
)

BUILDER = "fstree.core.services.tree_builder"


def test_build_sample_tree(sample_tree: Path) -> None:
    root = build_file_tree(str(sample_tree))

    assert isinstance(root, DirectoryNode)
    assert root.type is FileType.DIRECTORY
    assert root.name == "."
    assert [c.name for c in root.children] == ["f.txt", "s", "sub"]


def test_build_file_node(sample_tree: Path) -> None:
    root = build_file_tree(str(sample_tree))
    node, found = search(root, "f.txt")

    assert found
    assert isinstance(node, FileNode)
    assert node.digest == merkle_root(str(sample_tree / "f.txt"))
    assert node.size == len(b"content")


def test_build_symbolic_node(sample_tree: Path) -> None:
    link_target = str(sample_tree / "f.txt")
    root = build_file_tree(str(sample_tree))
    node, found = search(root, "s")

    assert found
    assert isinstance(node, SymbolicNode)
    assert node.target == link_target
    assert node.digest == keccak256(os.fsencode(link_target))


def test_build_subdirectory(sample_tree: Path) -> None:
    root = build_file_tree(str(sample_tree))
    sub, found = search(root, "sub")

    assert found
    assert isinstance(sub, DirectoryNode)
    assert sub.name == "sub"
    assert len(sub.children) == 1

    inner, found = search(sub, "inner.txt")
    assert found
    assert inner.type is FileType.FILE
    assert sub.digest == keccak256(inner.digest)


def test_root_digest_chains_children(sample_tree: Path) -> None:
    root = build_file_tree(str(sample_tree))
    d = [c.digest for c in root.children]
    assert root.digest == keccak256(d[0] + keccak256(d[1] + keccak256(d[2])))


def test_identical_trees_share_root_digest(tmp_path: Path) -> None:
    for name in ("one", "two"):
        base = tmp_path / name
        (base / "nested").mkdir(parents=True)
        (base / "a.txt").write_bytes(b"alpha")
        (base / "nested" / "b.txt").write_bytes(b"beta")
        os.symlink("a.txt", str(base / "link"))

    one = build_file_tree(str(tmp_path / "one"))
    two = build_file_tree(str(tmp_path / "two"))
    assert one.digest == two.digest
    assert one == two


@pytest.mark.parametrize("mutate", ["content", "rename", "link"])
def test_any_change_alters_root_digest(tmp_path: Path, mutate: str) -> None:
    (tmp_path / "a.txt").write_bytes(b"alpha")
    (tmp_path / "b.txt").write_bytes(b"beta")
    os.symlink("a.txt", str(tmp_path / "link"))
    before = build_file_tree(str(tmp_path)).digest

    if mutate == "content":
        (tmp_path / "a.txt").write_bytes(b"alphA")
    elif mutate == "rename":
        # Swapping names reorders the chained digests
        os.rename(str(tmp_path / "a.txt"), str(tmp_path / "tmp"))
        os.rename(str(tmp_path / "b.txt"), str(tmp_path / "a.txt"))
        os.rename(str(tmp_path / "tmp"), str(tmp_path / "b.txt"))
    else:
        os.remove(str(tmp_path / "link"))
        os.symlink("b.txt", str(tmp_path / "link"))

    assert build_file_tree(str(tmp_path)).digest != before


def test_empty_directory(tmp_path: Path) -> None:
    root = build_file_tree(str(tmp_path))
    assert root.children == []
    assert root.digest == ZERO_DIGEST


def test_dangling_symlink_is_recorded(tmp_path: Path) -> None:
    os.symlink("does/not/exist", str(tmp_path / "broken"))
    node, found = search(build_file_tree(str(tmp_path)), "broken")

    assert found
    assert isinstance(node, SymbolicNode)
    assert node.target == "does/not/exist"


def test_symlink_to_directory_is_not_followed(tmp_path: Path) -> None:
    (tmp_path / "real").mkdir()
    (tmp_path / "real" / "x").write_bytes(b"x")
    os.symlink("real", str(tmp_path / "alias"))

    node, _ = search(build_file_tree(str(tmp_path)), "alias")
    assert isinstance(node, SymbolicNode)


def test_root_symlink_to_directory_is_recorded_as_link(tmp_path: Path) -> None:
    """Links are followed only to check the root is a directory, never to walk it."""
    (tmp_path / "real").mkdir()
    (tmp_path / "real" / "x").write_bytes(b"x")
    os.symlink("real", str(tmp_path / "alias"))

    root = build_file_tree(str(tmp_path / "alias"))

    assert isinstance(root, SymbolicNode)
    assert root.name == "."
    assert root.target == "real"
    assert root.digest == keccak256(b"real")
    assert search(root, "x") == (None, False)


def test_deeply_nested_directories(tmp_path: Path) -> None:
    """Nesting deeper than a recursive walk could handle still builds."""
    depth = 600
    deepest = tmp_path
    for _ in range(depth):
        deepest = deepest / "a"
        deepest.mkdir()
    (deepest / "leaf.txt").write_bytes(b"leaf")

    root = build_file_tree(str(tmp_path))

    node = root
    for _ in range(depth):
        node, found = search(node, "a")
        assert found
        assert isinstance(node, DirectoryNode)
    leaf, found = search(node, "leaf.txt")
    assert found
    assert leaf.size == 4

    expected = keccak256(leaf.digest)
    for _ in range(depth):
        expected = keccak256(expected)
    assert root.digest == expected


def test_trailing_separator_is_tolerated(sample_tree: Path) -> None:
    root = build_file_tree(str(sample_tree) + os.sep)
    assert root.name == "."
    assert len(root.children) == 3


def test_custom_content_hasher(sample_tree: Path) -> None:
    calls = []

    def fake_hasher(path: str) -> bytes:
        calls.append(os.path.basename(path))
        return keccak256(b"fixed")

    root = build_file_tree(str(sample_tree), content_hasher=fake_hasher)

    assert sorted(calls) == ["f.txt", "inner.txt"]
    node, _ = search(root, "f.txt")
    assert node.digest == keccak256(b"fixed")

# -----------------------------------------------------------------------------
# Error handling
# -----------------------------------------------------------------------------

def test_missing_root(tmp_path: Path) -> None:
    missing = str(tmp_path / "missing")
    with pytest.raises(PathStatError) as exc_info:
        build_file_tree(missing)
    assert exc_info.value.path == missing


def test_root_is_file(sample_tree: Path) -> None:
    with pytest.raises(RootNotDirectoryError):
        build_file_tree(str(sample_tree / "f.txt"))


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="requires named pipes")
def test_fifo_aborts_build(sample_tree: Path) -> None:
    fifo = sample_tree / "sub" / "pipe"
    os.mkfifo(str(fifo))

    with pytest.raises(UnsupportedFileTypeError) as exc_info:
        build_file_tree(str(sample_tree))
    assert exc_info.value.path == str(fifo)


@pytest.mark.skipif(not hasattr(socket, "AF_UNIX"), reason="requires unix sockets")
def test_socket_aborts_build(tmp_path: Path) -> None:
    sock_path = tmp_path / "s.sock"
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as s:
        s.bind(str(sock_path))
        with pytest.raises(UnsupportedFileTypeError):
            build_file_tree(str(tmp_path))


def test_directory_listing_failure(sample_tree: Path) -> None:
    real_listdir = os.listdir

    def failing_listdir(path):
        if os.path.basename(path) == "sub":
            raise PermissionError(13, "Permission denied", path)
        return real_listdir(path)

    with patch(f"{BUILDER}.os.listdir", side_effect=failing_listdir):
        with pytest.raises(DirectoryReadError) as exc_info:
            build_file_tree(str(sample_tree))

    assert exc_info.value.path.endswith("sub")
    assert isinstance(exc_info.value.__cause__, PermissionError)


def test_symlink_read_failure(sample_tree: Path) -> None:
    with patch(f"{BUILDER}.os.readlink", side_effect=OSError("boom")):
        with pytest.raises(SymlinkReadError):
            build_file_tree(str(sample_tree))


def test_entry_stat_failure(sample_tree: Path) -> None:
    with patch(f"{BUILDER}.os.lstat", side_effect=FileNotFoundError("gone")):
        with pytest.raises(PathStatError):
            build_file_tree(str(sample_tree))


def test_hasher_oserror_is_wrapped(sample_tree: Path) -> None:
    def failing_hasher(path: str) -> bytes:
        raise IOError("disk error")

    with pytest.raises(ContentHashError) as exc_info:
        build_file_tree(str(sample_tree), content_hasher=failing_hasher)
    assert isinstance(exc_info.value.__cause__, OSError)


def test_hasher_tree_error_propagates_unchanged(sample_tree: Path) -> None:
    raised = ContentHashError("/elsewhere", "custom failure")

    def failing_hasher(path: str) -> bytes:
        raise raised

    with pytest.raises(ContentHashError) as exc_info:
        build_file_tree(str(sample_tree), content_hasher=failing_hasher)
    assert exc_info.value is raised

from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

Puts the 'src' directory on the import path and provides shared
filesystem scenarios and digests used across the suite.
"""

import os
import sys
from pathlib import Path
from typing import Callable

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def make_digest() -> Callable[[int], bytes]:
    """Return a factory producing distinct 32-byte digests from small integers."""
    def _make(value: int) -> bytes:
        return value.to_bytes(32, "big")
    return _make


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    Create a small directory used by builder and CLI tests.

    Structure:
        root/
            f.txt          ("content")
            s -> <abs path of f.txt>
            sub/
                inner.txt  ("subdir content")
    """
    root = tmp_path / "root"
    root.mkdir()

    (root / "f.txt").write_bytes(b"content")
    os.symlink(str(root / "f.txt"), str(root / "s"))

    (root / "sub").mkdir()
    (root / "sub" / "inner.txt").write_bytes(b"subdir content")

    return root

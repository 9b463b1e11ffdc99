"""
Common fixture factories shared across hashtree tests.
"""

from __future__ import annotations

from typing import Any

from hashtree.crypto.hashing import HashOracle, hash_leaf, sha256
from hashtree.merkle import MerkleTree


def make_blocks(count: int, prefix: str = "block") -> list[str]:
    """Create `count` distinct text blocks."""
    return [f"{prefix}-{i}" for i in range(count)]


def make_leaves(count: int, hasher: HashOracle = sha256) -> list[bytes]:
    """Create leaf digests for `count` distinct blocks."""
    return [hash_leaf(block.encode("utf-8"), hasher) for block in make_blocks(count)]


def make_tree(blocks: list[Any] | None = None, hasher: HashOracle = sha256) -> MerkleTree:
    """Build a tree over the given blocks (default: three letters)."""
    return MerkleTree.build(blocks if blocks is not None else ["a", "b", "c"], hasher=hasher)


class CountingHasher:
    """SHA-256 oracle that records how often it was called."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, data: bytes) -> bytes:
        self.calls += 1
        return sha256(data)

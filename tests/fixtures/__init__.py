"""Shared fixture factories for hashtree tests."""

from .common import CountingHasher, make_blocks, make_leaves, make_tree

__all__ = [
    "CountingHasher",
    "make_blocks",
    "make_leaves",
    "make_tree",
]

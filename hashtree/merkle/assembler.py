"""
Module 03 - Tree Assembly
Drives level construction from the leaves up to a single root and lays
every level out in one flat, root-first sequence.

Owner: Protocol/Crypto Engineer
Module ID: M03

Storage Layout (Hard Contract):
- nodes holds every stored level, root first, then each level below it,
  left to right, ending with the leaf level.
- Every stored level except the root has even length: an odd level is
  stored with its last digest duplicated.
- Node indices are 1-based: the root is index 1 and the leaf level is the
  trailing leaf_count entries.
- Within a level, the children of position j sit at positions 2j and
  2j + 1 of the level below. While every level above the leaves is a
  power of two in size this reduces to heap arithmetic over the flat
  array: parent(i) = i // 2, children 2i and 2i + 1.

Example (3 blocks):
    leaves  [a, b, c, c]
    level 1 [ab, cc]
    root    [abcc]
    nodes = (abcc, ab, cc, a, b, c, c)   # 7 entries, leaf_count 4
"""
from __future__ import annotations

from typing import Sequence

from hashtree.crypto.hashing import HashOracle, sha256
from hashtree.merkle.levels import build_parent_level, pad_level
from hashtree.schemas.errors import EmptyInputException


ROOT_INDEX = 1


def parent(index: int) -> int:
    """
    Heap index of a node's parent. The root has no parent.

    Exact over the flat array only while every level above the leaves is a
    power of two in size (any tree of at most 8 blocks, or a power-of-two
    block count). Larger padded trees shift later levels; walk them with
    level_offsets() or MerkleTree.children() instead.
    """
    if index <= ROOT_INDEX:
        raise ValueError(f"Node index {index} has no parent")
    return index // 2


def left_child(index: int) -> int:
    """Heap index of a node's left child. Same validity range as parent()."""
    return 2 * index


def right_child(index: int) -> int:
    """Heap index of a node's right child. Same validity range as parent()."""
    return 2 * index + 1


def level_sizes(leaf_count: int) -> list[int]:
    """
    Stored size of every level, root first, for a (padded) leaf level of
    leaf_count entries. sum(level_sizes(n)) is the length of the flat array.
    """
    if leaf_count < 1:
        raise ValueError(f"leaf_count must be positive, got {leaf_count}")

    sizes = [leaf_count]
    n = leaf_count
    while n > 1:
        n = (n + 1) // 2
        if n > 1 and n % 2 == 1:
            n += 1
        sizes.append(n)

    sizes.reverse()
    return sizes


def level_offsets(leaf_count: int) -> list[int]:
    """1-based index of the first node of every level, root first."""
    offsets = []
    start = ROOT_INDEX
    for size in level_sizes(leaf_count):
        offsets.append(start)
        start += size
    return offsets


def assemble_levels(leaf_level: Sequence[bytes], hasher: HashOracle = sha256) -> list[list[bytes]]:
    """
    Build every level from the leaves up, leaves first.

    Each returned level is stored padded; the last one holds only the root.

    Raises:
        EmptyInputException: If leaf_level is empty
    """
    if len(leaf_level) == 0:
        raise EmptyInputException("Cannot assemble a tree from an empty leaf level")

    current = pad_level(leaf_level)
    levels = [current]

    while len(current) > 1:
        current = pad_level(build_parent_level(current, hasher))
        levels.append(current)

    return levels


def flatten_levels(levels: Sequence[Sequence[bytes]]) -> tuple[bytes, ...]:
    """Concatenate leaves-first levels into the root-first flat array."""
    return tuple(digest for level in reversed(levels) for digest in level)


def assemble_nodes(
    leaf_level: Sequence[bytes],
    hasher: HashOracle = sha256,
) -> tuple[tuple[bytes, ...], int]:
    """
    Assemble the flat node array for a leaf level.

    Returns:
        (nodes, leaf_count) where leaf_count counts a padding duplicate
    """
    levels = assemble_levels(leaf_level, hasher)
    return flatten_levels(levels), len(levels[0])


__all__ = [
    "ROOT_INDEX",
    "parent",
    "left_child",
    "right_child",
    "level_sizes",
    "level_offsets",
    "assemble_levels",
    "flatten_levels",
    "assemble_nodes",
]

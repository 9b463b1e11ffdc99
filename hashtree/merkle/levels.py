"""
Module 03 - Tree Levels
Builds one tree level from the level below it.

Owner: Protocol/Crypto Engineer
Module ID: M03

Padding Rule: an odd-length level is paired as if its last digest were
duplicated. Example: [a, b, c] -> [a, b, c, c] -> [node(a,b), node(c,c)]
"""
from __future__ import annotations

from typing import Sequence

from hashtree.crypto.hashing import HashOracle, hash_node, sha256
from hashtree.schemas.errors import EmptyLevelException


def pad_level(level: Sequence[bytes]) -> list[bytes]:
    """
    Return a copy of a level, with its last digest duplicated if the level
    has an odd length greater than one. A single digest (the root) is
    never padded.
    """
    padded = list(level)
    if len(padded) > 1 and len(padded) % 2 == 1:
        padded.append(padded[-1])
    return padded


def build_parent_level(level: Sequence[bytes], hasher: HashOracle = sha256) -> list[bytes]:
    """
    Compute the level above the given one.

    Each consecutive pair (left, right) of the padded level becomes
    H(0x01 || left || right), in left-to-right order. The input level is
    not modified.

    Args:
        level: Non-empty sequence of digests at one depth
        hasher: Hash oracle to use

    Returns:
        Parent level of length ceil(len(level) / 2)

    Raises:
        EmptyLevelException: If level is empty
    """
    if len(level) == 0:
        raise EmptyLevelException()

    working = list(level)
    if len(working) % 2 == 1:
        working.append(working[-1])

    return [
        hash_node(working[i], working[i + 1], hasher)
        for i in range(0, len(working), 2)
    ]


__all__ = [
    "pad_level",
    "build_parent_level",
]

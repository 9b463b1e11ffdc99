"""
Core cryptographic utilities.

Module 02 provides hash oracles and domain-separated hashing.
"""
from .hashing import (
    HashOracle,
    LEAF_TAG,
    NODE_TAG,
    DEFAULT_HASH_ALGORITHM,
    sha256,
    double_sha256,
    get_hasher,
    hasher_name,
    supported_hash_algorithms,
    hash_leaf,
    hash_node,
    to_hex,
    from_hex,
)

__all__ = [
    "HashOracle",
    "LEAF_TAG",
    "NODE_TAG",
    "DEFAULT_HASH_ALGORITHM",
    "sha256",
    "double_sha256",
    "get_hasher",
    "hasher_name",
    "supported_hash_algorithms",
    "hash_leaf",
    "hash_node",
    "to_hex",
    "from_hex",
]

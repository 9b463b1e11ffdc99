"""
Module 02 - Hashing Utilities
Hash oracles and domain-separated hashing for hash tree commitments.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- SHA-256 hashing for raw bytes (the default oracle)
- A registry of named oracles, including a doubled SHA-256 construction
- Domain-separated leaf and node hashing
- Hex encoding/decoding with 0x prefix

Domain Separation (Hard Contract):
1. Leaf hashing: leaf = H(0x00 || block_bytes)
2. Node hashing: node = H(0x01 || left || right)
No digest in a tree is ever computed without one of these tags, so a
leaf digest can never be presented as an internal node (or vice versa).
"""
from __future__ import annotations

import hashlib
from typing import Callable

from hashtree.schemas.errors import UnsupportedHashAlgorithmException


# Given a byte sequence, return a fixed-size digest.
HashOracle = Callable[[bytes], bytes]

LEAF_TAG: bytes = b"\x00"
NODE_TAG: bytes = b"\x01"

DEFAULT_HASH_ALGORITHM = "sha256"


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def double_sha256(data: bytes) -> bytes:
    """Compute SHA-256(SHA-256(data)), 32 bytes."""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def sha512(data: bytes) -> bytes:
    return hashlib.sha512(data).digest()


def sha3_256(data: bytes) -> bytes:
    return hashlib.sha3_256(data).digest()


def blake2b(data: bytes) -> bytes:
    return hashlib.blake2b(data).digest()


_HASHERS: dict[str, HashOracle] = {
    "sha256": sha256,
    "double_sha256": double_sha256,
    "sha512": sha512,
    "sha3_256": sha3_256,
    "blake2b": blake2b,
}


def supported_hash_algorithms() -> list[str]:
    """Names accepted by get_hasher(), sorted."""
    return sorted(_HASHERS)


def get_hasher(name: str = DEFAULT_HASH_ALGORITHM) -> HashOracle:
    """
    Look up a registered hash oracle by name.

    Args:
        name: Oracle name (case-insensitive), e.g. "sha256"

    Returns:
        The hash oracle callable

    Raises:
        UnsupportedHashAlgorithmException: If the name is not registered
    """
    try:
        return _HASHERS[name.lower()]
    except KeyError:
        raise UnsupportedHashAlgorithmException(
            name, supported_hash_algorithms()
        ) from None


def hasher_name(hasher: HashOracle) -> str | None:
    """Reverse lookup of a registered oracle; None for custom callables."""
    for name, registered in _HASHERS.items():
        if registered is hasher:
            return name
    return None


def hash_leaf(data: bytes, hasher: HashOracle = sha256) -> bytes:
    """
    Hash a leaf: H(0x00 || data).

    Args:
        data: Encoded block bytes
        hasher: Hash oracle to use

    Returns:
        Leaf digest
    """
    return hasher(LEAF_TAG + data)


def hash_node(left: bytes, right: bytes, hasher: HashOracle = sha256) -> bytes:
    """
    Hash an internal node: H(0x01 || left || right).

    Args:
        left: Left child digest
        right: Right child digest
        hasher: Hash oracle to use

    Returns:
        Node digest
    """
    return hasher(NODE_TAG + left + right)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "HashOracle",
    "LEAF_TAG",
    "NODE_TAG",
    "DEFAULT_HASH_ALGORITHM",
    "sha256",
    "double_sha256",
    "sha512",
    "sha3_256",
    "blake2b",
    "supported_hash_algorithms",
    "get_hasher",
    "hasher_name",
    "hash_leaf",
    "hash_node",
    "to_hex",
    "from_hex",
]

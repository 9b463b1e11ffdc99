"""
Module 05 - Certified Verification
Two-phase verification with the root check enforced by type.

Owner: Protocol/Crypto Engineer
Module ID: M05

Phase 1 (leaf-set certification): rebuild a tree from untrusted leaf
digests and compare its root with a securely obtained root. A single
comparison certifies the entire leaf set. Only a successful comparison
yields a CertifiedTree.

Phase 2 (block verification): blocks arrive in any order and are checked
one by one against the certified leaf digests.

Usage:
    certified = certify_manifest(manifest, commitment)
    receiver = BlockReceiver(certified)
    for index, block in incoming:
        receiver.receive(index, block)
    assert receiver.is_complete
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from hashtree.crypto.hashing import HashOracle, from_hex
from hashtree.merkle.assembler import assemble_nodes
from hashtree.merkle.merkle_tree import MerkleTree
from hashtree.schemas.canonical import ByteEncoder
from hashtree.schemas.errors import (
    IndexOutOfRangeException,
    ManifestMismatchException,
    RootMismatchException,
)
from hashtree.schemas.transport import LeafManifest, RootCommitment
from hashtree.schemas.versioning import SUPPORTED_PROTOCOL_VERSIONS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CertifiedTree:
    """
    A MerkleTree whose root has been matched against a trusted root.

    Construction rebuilds every internal node from the tree's leaves and
    compares the result with the trusted root, so holding an instance means
    the leaf set was certified. The stored root is not taken on faith.
    A trusted_root given as 0x hex is decoded first.

    Raises:
        RootMismatchException: On construction, if the roots differ or the
            stored nodes do not follow from the leaves
    """
    tree: MerkleTree
    trusted_root: bytes

    def __post_init__(self) -> None:
        if isinstance(self.trusted_root, str):
            object.__setattr__(self, "trusted_root", from_hex(self.trusted_root))

        rebuilt, _ = assemble_nodes(list(self.tree.leaves()), self.tree.hasher)
        actual = rebuilt[0]
        if actual != self.trusted_root or rebuilt != self.tree.nodes:
            logger.warning(
                f"Root mismatch: expected {self.trusted_root.hex()}, got {actual.hex()}"
            )
            raise RootMismatchException(
                expected=self.trusted_root,
                actual=actual,
                details={
                    "leaf_count": self.tree.leaf_count,
                    "nodes_consistent": rebuilt == self.tree.nodes,
                },
            )
        logger.info(f"Certified {self.tree.leaf_count} leaves against root {actual.hex()}")

    @property
    def leaf_count(self) -> int:
        return self.tree.leaf_count

    @property
    def block_count(self) -> Optional[int]:
        return self.tree.block_count

    def root_hash(self) -> bytes:
        return self.tree.root_hash()

    def leaves(self) -> tuple[bytes, ...]:
        return self.tree.leaves()

    def verify(self, block_index: int, block: Any) -> bool:
        """Check a block against its certified leaf digest."""
        return self.tree.verify(block_index, block)


def certify_leaves(
    leaf_digests: Iterable[bytes],
    trusted_root: bytes | str,
    hasher: Optional[HashOracle] = None,
    encoder: Optional[ByteEncoder] = None,
    block_count: Optional[int] = None,
) -> CertifiedTree:
    """
    Rebuild a tree from untrusted leaf digests and certify it.

    Args:
        leaf_digests: Leaf digests received over an untrusted channel
        trusted_root: Root digest received over a trusted channel
        hasher: Hash oracle the sender used
        encoder: Block encoder the sender used
        block_count: Number of real blocks, when known

    Returns:
        CertifiedTree

    Raises:
        EmptyInputException: If leaf_digests is empty
        RootMismatchException: If the rebuilt root differs from trusted_root
    """
    tree = MerkleTree.build_from_leaves(
        leaf_digests,
        hasher=hasher,
        encoder=encoder,
        block_count=block_count,
    )
    return tree.certify(trusted_root)


def certify_manifest(
    manifest: LeafManifest,
    commitment: RootCommitment,
    encoder: Optional[ByteEncoder] = None,
) -> CertifiedTree:
    """
    Certify a received LeafManifest against a trusted RootCommitment.

    Raises:
        ManifestMismatchException: If version, algorithm, leaf count or
            block count disagree
        RootMismatchException: If the rebuilt root differs from the commitment
    """
    for model in (manifest, commitment):
        if model.version not in SUPPORTED_PROTOCOL_VERSIONS:
            raise ManifestMismatchException(
                f"Unsupported protocol version: {model.version}",
                details={"version": model.version},
            )

    if manifest.hash_algorithm != commitment.hash_algorithm:
        raise ManifestMismatchException(
            "Manifest and commitment use different hash algorithms",
            details={
                "manifest": manifest.hash_algorithm,
                "commitment": commitment.hash_algorithm,
            },
        )

    tree = MerkleTree.from_manifest(manifest, encoder=encoder)
    if tree.leaf_count != commitment.leaf_count:
        raise ManifestMismatchException(
            "Manifest leaf count does not match the commitment",
            details={
                "manifest": tree.leaf_count,
                "commitment": commitment.leaf_count,
            },
        )
    if manifest.block_count != commitment.block_count:
        raise ManifestMismatchException(
            "Manifest block count does not match the commitment",
            details={
                "manifest": manifest.block_count,
                "commitment": commitment.block_count,
            },
        )

    return tree.certify(from_hex(commitment.root))


class BlockReceiver:
    """
    Tracks incremental verification of blocks against a CertifiedTree.

    Blocks may arrive in any order and more than once. A block that has
    verified stays verified; later bad copies are only counted as
    rejections for that index until a good copy arrives.

    Indices at or beyond block_count address the padding duplicate and are
    refused. Not thread-safe.
    """

    def __init__(self, certified: CertifiedTree, block_count: Optional[int] = None) -> None:
        leaf_count = certified.leaf_count
        block_count = block_count or certified.block_count or leaf_count
        if block_count < 1 or block_count not in (leaf_count, leaf_count - 1):
            raise ValueError(
                f"block_count {block_count} inconsistent with {leaf_count} leaves"
            )

        self.certified = certified
        self.block_count = block_count
        self._verified: set[int] = set()
        self._rejected: set[int] = set()

    def receive(self, index: int, block: Any) -> bool:
        """
        Verify one arriving block.

        Returns:
            True if the block matches its certified leaf digest

        Raises:
            IndexOutOfRangeException: If index is outside [0, block_count)
        """
        if not 0 <= index < self.block_count:
            raise IndexOutOfRangeException(index, self.block_count)

        if self.certified.verify(index, block):
            self._verified.add(index)
            self._rejected.discard(index)
            return True

        if index not in self._verified:
            self._rejected.add(index)
        logger.warning(f"Block {index} failed verification")
        return False

    @property
    def verified(self) -> frozenset[int]:
        return frozenset(self._verified)

    @property
    def rejected(self) -> frozenset[int]:
        return frozenset(self._rejected)

    def missing(self) -> list[int]:
        """Indices of blocks not yet verified, ascending."""
        return [i for i in range(self.block_count) if i not in self._verified]

    @property
    def is_complete(self) -> bool:
        return len(self._verified) == self.block_count


__all__ = [
    "CertifiedTree",
    "certify_leaves",
    "certify_manifest",
    "BlockReceiver",
]

"""
Module 04 - Merkle Tree
Immutable hash tree over an ordered sequence of blocks.

Owner: Protocol/Crypto Engineer
Module ID: M04

This module provides:
- MerkleTree.build: tree from raw blocks (encode, leaf-hash, assemble)
- MerkleTree.build_from_leaves: tree from externally supplied leaf digests
- root_hash / leaves: read access to the flat node array
- verify: compare one block against its stored leaf digest

Verification Protocol:
verify() is a single leaf-digest equality check, not a sibling path
recomputation. It only means something once the whole leaf set has been
certified against a trusted root:

    tree = MerkleTree.build_from_leaves(untrusted_leaves)
    certified = tree.certify(trusted_root)    # raises on mismatch
    certified.verify(i, block)

Use CertifiedTree (see verification.py) to make that ordering explicit.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Optional

from hashtree.config.runtime import get_default_config
from hashtree.crypto.hashing import (
    HashOracle,
    from_hex,
    get_hasher,
    hash_leaf,
    hasher_name,
    sha256,
    to_hex,
)
from hashtree.merkle.assembler import (
    ROOT_INDEX,
    assemble_nodes,
    level_offsets,
    level_sizes,
)
from hashtree.schemas.canonical import ByteEncoder, encode_block
from hashtree.schemas.errors import EmptyInputException, IndexOutOfRangeException
from hashtree.schemas.transport import LeafManifest, RootCommitment

if TYPE_CHECKING:
    from hashtree.merkle.verification import CertifiedTree

logger = logging.getLogger(__name__)


def _resolve_hasher(hasher: Optional[HashOracle]) -> HashOracle:
    if hasher is not None:
        return hasher
    return get_default_config().tree.hasher()


@dataclass(frozen=True)
class MerkleTree:
    """
    An immutable hash tree stored as one flat, root-first digest array.

    Attributes:
        nodes: Every stored digest, root first, leaf level last
        leaf_count: Length of the leaf level, including a padding duplicate
        hasher: Hash oracle the tree was built with
        encoder: Block encoder used by verify()
        block_count: Number of real blocks, when known
    """
    nodes: tuple[bytes, ...]
    leaf_count: int
    hasher: HashOracle = field(default=sha256, repr=False, compare=False)
    encoder: ByteEncoder = field(default=encode_block, repr=False, compare=False)
    block_count: Optional[int] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        expected = sum(level_sizes(self.leaf_count))
        if len(self.nodes) != expected:
            raise ValueError(
                f"Node array of length {len(self.nodes)} does not match "
                f"{self.leaf_count} leaves (expected {expected} nodes)"
            )
        if self.block_count is not None and (
            self.block_count < 1
            or self.block_count not in (self.leaf_count, self.leaf_count - 1)
        ):
            raise ValueError(
                f"block_count {self.block_count} inconsistent with {self.leaf_count} leaves"
            )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def build(
        cls,
        blocks: Iterable[Any],
        hasher: Optional[HashOracle] = None,
        encoder: Optional[ByteEncoder] = None,
    ) -> MerkleTree:
        """
        Build a tree from raw blocks.

        Each block is encoded to bytes and hashed as H(0x00 || bytes).

        Args:
            blocks: Ordered, non-empty blocks
            hasher: Hash oracle (defaults to the configured one)
            encoder: Block encoder (defaults to encode_block)

        Returns:
            The assembled MerkleTree

        Raises:
            EmptyInputException: If blocks is empty
        """
        hasher = _resolve_hasher(hasher)
        encoder = encoder or encode_block

        leaves = [hash_leaf(encoder(block), hasher) for block in blocks]
        if not leaves:
            raise EmptyInputException("Cannot build a tree from zero blocks")

        return assemble(leaves, hasher, encoder=encoder, block_count=len(leaves))

    @classmethod
    def build_from_leaves(
        cls,
        leaf_digests: Iterable[bytes],
        hasher: Optional[HashOracle] = None,
        encoder: Optional[ByteEncoder] = None,
        block_count: Optional[int] = None,
    ) -> MerkleTree:
        """
        Build a tree from already computed leaf digests.

        The digests are trusted to carry the leaf domain tag; nothing beyond
        non-emptiness is checked. Compare root_hash() with a trusted root
        (or call certify()) before relying on any leaf.

        Raises:
            EmptyInputException: If leaf_digests is empty
        """
        leaves = [bytes(d) for d in leaf_digests]
        if not leaves:
            raise EmptyInputException("Cannot build a tree from zero leaf digests")

        return assemble(
            leaves,
            _resolve_hasher(hasher),
            encoder=encoder or encode_block,
            block_count=block_count,
        )

    @classmethod
    def from_manifest(
        cls,
        manifest: LeafManifest,
        encoder: Optional[ByteEncoder] = None,
    ) -> MerkleTree:
        """Rebuild a tree from a received LeafManifest."""
        return cls.build_from_leaves(
            [from_hex(leaf) for leaf in manifest.leaves],
            hasher=get_hasher(manifest.hash_algorithm),
            encoder=encoder,
            block_count=manifest.block_count,
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def root_hash(self) -> bytes:
        """The root digest."""
        return self.nodes[0]

    def leaves(self) -> tuple[bytes, ...]:
        """The leaf digests, left to right, including a padding duplicate."""
        return self.nodes[-self.leaf_count:]

    def node(self, index: int) -> bytes:
        """Digest at a 1-based node index (the root is 1)."""
        if not ROOT_INDEX <= index <= len(self.nodes):
            raise IndexOutOfRangeException(
                index,
                self.leaf_count,
                message=f"Node index {index} out of range for {len(self.nodes)} nodes",
            )
        return self.nodes[index - 1]

    def children(self, index: int) -> Optional[tuple[int, int]]:
        """
        1-based indices of a node's two children, or None for leaves and
        for padding duplicates, which have no children of their own.
        """
        self.node(index)
        offsets = level_offsets(self.leaf_count)
        sizes = level_sizes(self.leaf_count)

        for level, start in enumerate(offsets):
            if start <= index < start + sizes[level]:
                break
        if level == len(offsets) - 1:
            return None

        position = 2 * (index - start)
        if position + 1 >= sizes[level + 1]:
            return None
        child = offsets[level + 1] + position
        return child, child + 1

    @property
    def depth(self) -> int:
        """Number of stored levels, root and leaves included."""
        return len(level_sizes(self.leaf_count))

    @property
    def digest_size(self) -> int:
        return len(self.nodes[0])

    @property
    def hash_algorithm(self) -> Optional[str]:
        """Registered name of the tree's hash oracle, or None if custom."""
        return hasher_name(self.hasher)

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def verify(self, block_index: int, block: Any) -> bool:
        """
        Check a block against its stored leaf digest.

        Args:
            block_index: 0-based position in the leaf level
            block: The received block value

        Returns:
            True if H(0x00 || encode(block)) equals the stored leaf digest

        Raises:
            IndexOutOfRangeException: If block_index is outside [0, leaf_count)
        """
        if not 0 <= block_index < self.leaf_count:
            raise IndexOutOfRangeException(block_index, self.leaf_count)

        expected = self.leaves()[block_index]
        return hash_leaf(self.encoder(block), self.hasher) == expected

    def certify(self, trusted_root: bytes | str) -> CertifiedTree:
        """
        Certify the whole leaf set against a securely obtained root, given
        as bytes or 0x hex.

        Raises:
            RootMismatchException: If the roots differ
        """
        from hashtree.merkle.verification import CertifiedTree

        return CertifiedTree(tree=self, trusted_root=trusted_root)

    # ------------------------------------------------------------------
    # Wire models
    # ------------------------------------------------------------------

    def _require_hash_algorithm(self) -> str:
        name = self.hash_algorithm
        if name is None:
            raise ValueError("Trees built with a custom hasher cannot be described on the wire")
        return name

    def commitment(self) -> RootCommitment:
        """The root commitment to publish over the trusted channel."""
        return RootCommitment(
            root=to_hex(self.root_hash()),
            leaf_count=self.leaf_count,
            block_count=self.block_count or self.leaf_count,
            hash_algorithm=self._require_hash_algorithm(),
        )

    def manifest(self) -> LeafManifest:
        """The leaf digests to send over the untrusted channel."""
        return LeafManifest(
            leaves=[to_hex(leaf) for leaf in self.leaves()],
            block_count=self.block_count or self.leaf_count,
            hash_algorithm=self._require_hash_algorithm(),
        )


def assemble(
    leaf_level: list[bytes],
    hasher: HashOracle = sha256,
    encoder: ByteEncoder = encode_block,
    block_count: Optional[int] = None,
) -> MerkleTree:
    """
    Assemble a MerkleTree from a leaf level.

    Raises:
        EmptyInputException: If leaf_level is empty
    """
    nodes, leaf_count = assemble_nodes(leaf_level, hasher)
    tree = MerkleTree(
        nodes=nodes,
        leaf_count=leaf_count,
        hasher=hasher,
        encoder=encoder,
        block_count=block_count,
    )
    logger.debug(
        f"Assembled tree: {len(leaf_level)} leaves -> {leaf_count} stored, "
        f"{len(nodes)} nodes, depth {tree.depth}"
    )
    return tree


__all__ = [
    "MerkleTree",
    "assemble",
]

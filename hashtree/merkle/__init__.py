"""
Hash Tree Construction and Certified Verification

This package provides:
- build_parent_level: One level up, with odd-level duplication
- assemble_nodes / assemble: Leaves to root, flattened root first
- MerkleTree: Immutable tree with build, build_from_leaves and verify
- CertifiedTree / BlockReceiver: Two-phase verification on the receiver side

Usage:
    from hashtree.merkle import MerkleTree, BlockReceiver, certify_leaves

    # Sender
    tree = MerkleTree.build(blocks)
    publish_trusted(tree.root_hash())
    send_untrusted(tree.leaves())

    # Receiver
    certified = certify_leaves(received_leaves, trusted_root)
    receiver = BlockReceiver(certified)
    receiver.receive(2, block_2)
"""
from .levels import (
    pad_level,
    build_parent_level,
)

from .assembler import (
    ROOT_INDEX,
    parent,
    left_child,
    right_child,
    level_sizes,
    level_offsets,
    assemble_levels,
    flatten_levels,
    assemble_nodes,
)

from .merkle_tree import (
    MerkleTree,
    assemble,
)

from .verification import (
    CertifiedTree,
    certify_leaves,
    certify_manifest,
    BlockReceiver,
)


__all__ = [
    # Levels
    "pad_level",
    "build_parent_level",
    # Assembly and index arithmetic
    "ROOT_INDEX",
    "parent",
    "left_child",
    "right_child",
    "level_sizes",
    "level_offsets",
    "assemble_levels",
    "flatten_levels",
    "assemble_nodes",
    "assemble",
    # Tree
    "MerkleTree",
    # Certified verification
    "CertifiedTree",
    "certify_leaves",
    "certify_manifest",
    "BlockReceiver",
]

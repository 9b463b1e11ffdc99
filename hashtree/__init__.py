"""
hashtree - build and verify hash trees over ordered data blocks.

A sender publishes a root hash over a trusted channel and leaf digests over
an untrusted one. A receiver certifies the leaf set against the root once,
then checks arriving blocks individually.
"""

__version__ = "0.1.0"

from hashtree.crypto.hashing import LEAF_TAG, NODE_TAG, HashOracle, get_hasher
from hashtree.merkle import BlockReceiver, CertifiedTree, MerkleTree, certify_leaves, certify_manifest
from hashtree.schemas import (
    ByteEncoder,
    EmptyInputException,
    HashTreeException,
    IndexOutOfRangeException,
    LeafManifest,
    ManifestMismatchException,
    RootCommitment,
    RootMismatchException,
    encode_block,
)

__all__ = [
    "BlockReceiver",
    "ByteEncoder",
    "CertifiedTree",
    "EmptyInputException",
    "HashOracle",
    "HashTreeException",
    "IndexOutOfRangeException",
    "LEAF_TAG",
    "LeafManifest",
    "ManifestMismatchException",
    "MerkleTree",
    "NODE_TAG",
    "RootCommitment",
    "RootMismatchException",
    "certify_leaves",
    "certify_manifest",
    "encode_block",
    "get_hasher",
]

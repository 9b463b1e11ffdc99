"""
Module 01 - Schemas & Canonicalization
File: transport.py

Purpose: Wire models for the two channels of the certification protocol.

- RootCommitment travels over the trusted channel (root hash only).
- LeafManifest travels over the untrusted channel (the trailing leaf slice
  of the flat, root-first node array).

Digests are carried as 0x-prefixed hex strings.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .versioning import PROTOCOL_VERSION, ProtocolVersion


def _check_hex_digest(value: str) -> str:
    if not value.startswith("0x"):
        raise ValueError(f"Digest must start with '0x' prefix, got: {value[:10]}...")
    body = value[2:]
    if not body or len(body) % 2 != 0:
        raise ValueError(f"Digest must have a non-empty even-length body, got length {len(body)}")
    bytes.fromhex(body)
    return value.lower()


class RootCommitment(BaseModel):
    """
    The securely published summary of a tree.

    Receivers compare the root they reconstruct from a LeafManifest
    against this value before trusting any leaf digest. The real block
    count travels here too, since a manifest's own count is unverified.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: ProtocolVersion = Field(
        default=PROTOCOL_VERSION,
        description="Wire protocol version",
    )
    root: str = Field(
        ...,
        description="Root digest as 0x-prefixed hex",
    )
    leaf_count: int = Field(
        ...,
        description="Number of stored leaves, including a padding duplicate",
        ge=1,
    )
    block_count: int = Field(
        ...,
        description="Number of real blocks (excludes a padding duplicate)",
        ge=1,
    )
    hash_algorithm: str = Field(
        ...,
        description="Name of the hash oracle used to build the tree",
        min_length=1,
    )

    @field_validator("root")
    @classmethod
    def _validate_root(cls, v: str) -> str:
        return _check_hex_digest(v)

    @model_validator(mode="after")
    def _validate_block_count(self) -> "RootCommitment":
        if self.block_count not in (self.leaf_count, self.leaf_count - 1):
            raise ValueError(
                f"block_count {self.block_count} inconsistent with "
                f"{self.leaf_count} leaves"
            )
        return self


class LeafManifest(BaseModel):
    """
    The leaf digests of a tree, as sent over an untrusted channel.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: ProtocolVersion = Field(
        default=PROTOCOL_VERSION,
        description="Wire protocol version",
    )
    leaves: list[str] = Field(
        ...,
        description="Leaf digests in left-to-right order, 0x-prefixed hex",
        min_length=1,
    )
    block_count: int = Field(
        ...,
        description="Number of real blocks (excludes a padding duplicate)",
        ge=1,
    )
    hash_algorithm: str = Field(
        ...,
        description="Name of the hash oracle used to build the tree",
        min_length=1,
    )

    @field_validator("leaves")
    @classmethod
    def _validate_leaves(cls, v: list[str]) -> list[str]:
        return [_check_hex_digest(leaf) for leaf in v]

    @model_validator(mode="after")
    def _validate_block_count(self) -> "LeafManifest":
        if self.block_count not in (len(self.leaves), len(self.leaves) - 1):
            raise ValueError(
                f"block_count {self.block_count} inconsistent with "
                f"{len(self.leaves)} leaves"
            )
        return self

    @property
    def leaf_count(self) -> int:
        return len(self.leaves)

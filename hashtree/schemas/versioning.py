"""
Module 01 - Schemas & Canonicalization
File: versioning.py

Purpose: Centralize wire protocol version constants.
This file must stay tiny and have no imports from other schema files
to avoid circular dependencies.
"""

from typing import Literal

# Protocol version for wire format compatibility
PROTOCOL_VERSION: str = "v1"

# Type alias for protocol version
ProtocolVersion = Literal["v1"]

SUPPORTED_PROTOCOL_VERSIONS: frozenset[str] = frozenset({"v1"})

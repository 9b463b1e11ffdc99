"""
Schemas, canonical block encoding, wire models and the error taxonomy.
"""

from .canonical import (
    ByteEncoder,
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
    encode_block,
    ensure_utc,
    format_datetime_canonical,
)
from .errors import (
    CanonicalizationException,
    EmptyInputException,
    EmptyLevelException,
    ErrorCodes,
    HashTreeError,
    HashTreeException,
    IndexOutOfRangeException,
    ManifestMismatchException,
    RootMismatchException,
    UnsupportedHashAlgorithmException,
)
from .transport import LeafManifest, RootCommitment
from .versioning import PROTOCOL_VERSION, SUPPORTED_PROTOCOL_VERSIONS

__all__ = [
    # Canonical encoding
    "ByteEncoder",
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    "encode_block",
    "ensure_utc",
    "format_datetime_canonical",
    # Errors
    "CanonicalizationException",
    "EmptyInputException",
    "EmptyLevelException",
    "ErrorCodes",
    "HashTreeError",
    "HashTreeException",
    "IndexOutOfRangeException",
    "ManifestMismatchException",
    "RootMismatchException",
    "UnsupportedHashAlgorithmException",
    # Wire models
    "LeafManifest",
    "RootCommitment",
    "PROTOCOL_VERSION",
    "SUPPORTED_PROTOCOL_VERSIONS",
]

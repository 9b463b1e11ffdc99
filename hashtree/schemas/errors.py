"""
Module 01 - Schemas & Errors
File: errors.py

Purpose: Standard error taxonomy for hash tree construction and verification.
Defines both Pydantic models for structured error reporting
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Construction Errors
    EMPTY_INPUT = "EMPTY_INPUT"
    EMPTY_LEVEL = "EMPTY_LEVEL"

    # Encoding & Hashing Errors
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    UNSUPPORTED_HASH_ALGORITHM = "UNSUPPORTED_HASH_ALGORITHM"

    # Verification Errors
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    ROOT_MISMATCH = "ROOT_MISMATCH"
    MANIFEST_MISMATCH = "MANIFEST_MISMATCH"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class HashTreeError(BaseModel):
    """
    Base error model for structured error reporting.

    Lets callers pass failures around (e.g. in a transfer report)
    without holding on to live exception objects.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.ROOT_MISMATCH],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "HashTreeException":
        """Convert this error model to a raised exception."""
        return HashTreeException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class HashTreeException(Exception):
    """
    Base exception for all hash tree errors.

    Carries structured error information and can be converted
    to/from HashTreeError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "HASHTREE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> HashTreeError:
        """Convert this exception to a HashTreeError model."""
        return HashTreeError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputException(HashTreeException, ValueError):
    """Raised when a tree is built from zero blocks or zero leaf digests."""

    def __init__(
        self,
        message: str = "Cannot build a tree from an empty sequence",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
            details=details,
            retryable=False,
        )


class EmptyLevelException(HashTreeException, ValueError):
    """Raised when a parent level is requested for a zero-length level."""

    def __init__(
        self,
        message: str = "Cannot build a parent level from an empty level",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_LEVEL,
            details=details,
            retryable=False,
        )


class IndexOutOfRangeException(HashTreeException, IndexError):
    """Raised when a block index falls outside the leaf level."""

    def __init__(
        self,
        index: int,
        leaf_count: int,
        message: str | None = None,
    ) -> None:
        super().__init__(
            message=message or f"Block index {index} out of range for {leaf_count} leaves",
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details={"index": index, "leaf_count": leaf_count},
            retryable=False,
        )
        self.index = index
        self.leaf_count = leaf_count


class RootMismatchException(HashTreeException):
    """Raised when a reconstructed root differs from the trusted root."""

    def __init__(
        self,
        expected: bytes,
        actual: bytes,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["expected_root"] = expected.hex()
        full_details["actual_root"] = actual.hex()
        super().__init__(
            message="Reconstructed root hash does not match the trusted root hash",
            code=ErrorCodes.ROOT_MISMATCH,
            details=full_details,
            retryable=False,
        )


class ManifestMismatchException(HashTreeException):
    """Raised when a leaf manifest is inconsistent with its root commitment."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.MANIFEST_MISMATCH,
            details=details,
            retryable=False,
        )


class CanonicalizationException(HashTreeException):
    """Exception raised when a block cannot be encoded to canonical bytes."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class UnsupportedHashAlgorithmException(HashTreeException, ValueError):
    """Raised when a hash oracle name is not registered."""

    def __init__(
        self,
        name: str,
        supported: list[str] | None = None,
    ) -> None:
        supported = supported or []
        super().__init__(
            message=f"Unsupported hash algorithm: '{name}'. Supported: {supported}",
            code=ErrorCodes.UNSUPPORTED_HASH_ALGORITHM,
            details={"name": name, "supported": supported},
            retryable=False,
        )

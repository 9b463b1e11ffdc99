"""
Module 01 - Schemas & Canonicalization
File: canonical.py

Purpose: Deterministic block encoding. Every block is hashed through its
byte representation, so the same logical value MUST always produce
identical bytes on the building and the verifying side.

Encoding rules (encode_block):
1. bytes / bytearray / memoryview: used as-is
2. str: UTF-8
3. Objects with a no-argument to_bytes(): their own encoding
4. Everything else: canonical JSON (sorted keys, no whitespace), UTF-8
"""

import json
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel

from .errors import CanonicalizationException

# Given a block value, return its byte representation.
ByteEncoder = Callable[[Any], bytes]

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are treated as UTC; aware ones are converted.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_datetime_canonical(dt: datetime) -> str:
    """Format a datetime as ISO-8601 with Z suffix for UTC."""
    utc_dt = ensure_utc(dt)
    if utc_dt.microsecond == 0:
        return utc_dt.strftime("%Y-%m-%dT%H:%M:%SZ")
    return utc_dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _validate_float(value: float, path: str = "") -> None:
    if not math.isfinite(value):
        raise CanonicalizationException(
            message=f"Non-finite float value encountered: {value}",
            details={"path": path, "value": str(value)},
        )


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Recursively canonicalize a value for deterministic JSON serialization.

    Args:
        value: Any Python value to canonicalize.
        path: Current path for error reporting.

    Returns:
        A JSON-serializable canonical representation.

    Raises:
        CanonicalizationException: If the value cannot be canonicalized
            (e.g., contains NaN/Infinity floats).
    """
    if value is None:
        return None

    if isinstance(value, bool):
        # Must check bool before int since bool is subclass of int
        return value

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        _validate_float(value, path)
        return value

    if isinstance(value, str):
        return value

    if isinstance(value, datetime):
        return format_datetime_canonical(value)

    if isinstance(value, Enum):
        return value.value

    if isinstance(value, BaseModel):
        dumped = value.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
        )
        return canonicalize_value(dumped, path)

    if isinstance(value, dict):
        # Keys are sorted during JSON serialization
        return {
            str(k): canonicalize_value(v, f"{path}.{k}" if path else str(k))
            for k, v in value.items()
            if v is not None
        }

    if isinstance(value, (list, tuple)):
        return [
            canonicalize_value(item, f"{path}[{i}]")
            for i, item in enumerate(value)
        ]

    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Args:
        obj: A Pydantic model, dict, list or primitive.

    Returns:
        A canonical JSON string with:
            - Sorted keys
            - No extra whitespace
            - None fields excluded
            - Datetimes as ISO-8601 with Z suffix
            - Enums as their values
            - No NaN/Infinity floats

    Raises:
        CanonicalizationException: If serialization fails.

    Example:
        >>> dumps_canonical({"b": 2, "a": 1})
        '{"a":1,"b":2}'
    """
    try:
        canonicalized = canonicalize_value(obj)
        return json.dumps(
            canonicalized,
            sort_keys=True,
            separators=CANONICAL_JSON_SEPARATORS,
            ensure_ascii=False,
        )
    except CanonicalizationException:
        raise
    except (TypeError, ValueError) as e:
        raise CanonicalizationException(
            message=f"Failed to serialize to canonical JSON: {e}",
            details={"type": type(obj).__name__, "error": str(e)},
        ) from e


def encode_block(block: Any) -> bytes:
    """
    Default ByteEncoder: turn a block value into its byte representation.

    Args:
        block: Raw bytes, text, an object with to_bytes(), or any
            canonically serializable value.

    Returns:
        Deterministic byte encoding of the block.

    Raises:
        CanonicalizationException: If the block cannot be encoded.
    """
    if isinstance(block, bytes):
        return block

    if isinstance(block, (bytearray, memoryview)):
        return bytes(block)

    if isinstance(block, str):
        return block.encode("utf-8")

    to_bytes = getattr(block, "to_bytes", None)
    if callable(to_bytes) and not isinstance(block, int):
        encoded = to_bytes()
        if not isinstance(encoded, (bytes, bytearray)):
            raise CanonicalizationException(
                message=f"{type(block).__name__}.to_bytes() must return bytes",
                details={"type": type(block).__name__, "result_type": type(encoded).__name__},
            )
        return bytes(encoded)

    return dumps_canonical(block).encode("utf-8")

"""
Canonical JSON serialization and hashing helpers for schemas.

Provides a single canonical JSON policy and SHA-256 helpers so schema identities
are stable across runs and consumers. Callers that cache derived delta schemas
key the cache by `schema_fingerprint` of the source schema. This module is
zero-IO and uses only the Python standard library.

Notes:
    - Canonical JSON:
        - sort_keys=True
        - separators=(",", ":")
        - ensure_ascii=False
    - Hashing is performed over the UTF-8 encoded canonical JSON string.
"""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .schema import Schema

__all__ = [
    "json_dumps_canonical",
    "hash_json",
    "schema_fingerprint",
]


def json_dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Args:
        obj (Any): JSON-serializable object.

    Returns:
        str: Canonical JSON string with sort_keys=True, compact separators,
        and ensure_ascii=False.

    Notes:
        This function assumes the input is JSON-serializable and does not perform
        coercion of unsupported types.
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _sha256_hexdigest(s: str) -> str:
    """Compute SHA-256 hex digest of a UTF-8 string."""
    h = hashlib.sha256()
    h.update(s.encode("utf-8"))
    return h.hexdigest()


def hash_json(obj: Any) -> str:
    """
    Compute a stable hash of a JSON-like value by hashing its canonical JSON.

    Notes:
        Re-ordering mapping keys does not change the result; list order does.
    """
    return _sha256_hexdigest(json_dumps_canonical(obj))


def schema_fingerprint(schema: Schema) -> str:
    """
    SHA-256 fingerprint of a schema's canonical JSON form.

    Args:
        schema (Schema): Schema tree to fingerprint.

    Returns:
        str: Hex digest; structurally equal schemas share a fingerprint.

    Examples:
        >>> from deltaschema.core.hashing import schema_fingerprint
        >>> from deltaschema.core.schema import primitive
        >>> schema_fingerprint(primitive("int")) == schema_fingerprint(primitive("int"))
        True
    """
    from .serde import schema_to_json

    return hash_json(schema_to_json(schema))

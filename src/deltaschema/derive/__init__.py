"""
deltaschema.derive — delta-schema derivation engine and operation classifier.

## Public API
- derive_delta_schema — value record schema → ``[<Name>WriteOpRecord, DelOp]`` union.
- classify_field_delta — decoded field value → OperationKind.
- is_whole_value_delete — decoded top-level value is the DelOp marker.
- field_operations — classify every field of a decoded derived record.

## Import DAG discipline
- Depends only on deltaschema.core and deltaschema.logging; no IO.
"""

from __future__ import annotations

from .classify import classify_field_delta, field_operations, is_whole_value_delete
from .converter import derive_delta_schema

__all__ = [
    "derive_delta_schema",
    "classify_field_delta",
    "is_whole_value_delete",
    "field_operations",
]

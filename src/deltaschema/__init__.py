"""
deltaschema — derive partial-update (delta) schemas from record schemas.

A delta schema lets a store accept compact update records that describe *how*
to mutate a stored value (no-op, replace, delete, collection merges) instead
of shipping the entire value.

## Packages
- deltaschema.core — schema models, wire names, serde, hashing, decoded values.
- deltaschema.derive — derivation engine and operation classifier.
- deltaschema.io — configuration, schema/update files, polars reports.

## Examples
```python
from deltaschema import derive_delta_schema, classify_field_delta
from deltaschema.core.datum import read_json_datum

delta = derive_delta_schema({
    "type": "record", "name": "User",
    "fields": [
        {"name": "id", "type": "int", "default": 0},
        {"name": "tags", "type": {"type": "array", "items": "string"}, "default": []},
    ],
})
update = read_json_datum(delta, {"UserWriteOpRecord": {"tags": {"tagsListOps": {"setUnion": ["a"]}}}})
classify_field_delta(update["tags"])  # OperationKind.LIST_OPS
classify_field_delta(update["id"])    # OperationKind.NO_OP
```
"""

from __future__ import annotations

from .core.grammar import OperationKind
from .derive import (
    classify_field_delta,
    derive_delta_schema,
    field_operations,
    is_whole_value_delete,
)

__all__ = [
    "OperationKind",
    "derive_delta_schema",
    "classify_field_delta",
    "is_whole_value_delete",
    "field_operations",
]

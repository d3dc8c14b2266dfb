"""
deltaschema.io — configuration, schema/update files, and polars reports.

## Responsibilities
- DeltaSettings: runtime configuration (env > TOML > defaults).
- Read/write schema files (atomic tmp → fsync → rename writes).
- Decode JSON-lines update files against derived delta schemas.
- Tabulate decoded update operations as polars DataFrames.

## Import DAG discipline
- Depends on stdlib, polars, deltaschema.core, and deltaschema.derive.
- Keep deltaschema.core as the source of truth for schemas, names, and errors.

## Examples
```python
from deltaschema.derive import derive_delta_schema
from deltaschema.io import read_schema_file, read_update_records, operations_frame

delta = derive_delta_schema(read_schema_file("user.avsc"))  # doctest: +SKIP
frame = operations_frame(read_update_records("updates.jsonl", delta))  # doctest: +SKIP
```
"""

from __future__ import annotations

from .config import DeltaSettings
from .files import read_schema_file, read_update_records, write_schema_file
from .report import operation_counts, operations_frame

__all__ = [
    "DeltaSettings",
    "read_schema_file",
    "write_schema_file",
    "read_update_records",
    "operations_frame",
    "operation_counts",
]

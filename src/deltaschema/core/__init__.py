"""
Core package aggregator for delta-schema contracts (grammar, schema models, serde, hashing, datums).

## Contracts (single source of truth)
- Constants — wire names of the delta protocol (NoOp, DelOp, ListOps, MapOps, setUnion, ...).
- Grammar — schema kinds, operation kinds, and naming helpers.
- Schema — immutable pydantic models of the schema tree and the union-flattening helper.
- Serde/Hashing — JSON form of schemas, canonical JSON, fingerprints.
- Datum — GenericRecord values and the JSON-encoding decoder.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO.
- Marker names are a backward-compatibility contract; never rename them.

## Downstream usage
- deltaschema.derive — derives delta schemas and classifies decoded delta values.
- deltaschema.io — reads/writes schema files, decodes update files, builds polars reports.

## Examples
```python
from deltaschema.core.serde import parse_schema, schema_to_json
schema = parse_schema({"type": "record", "name": "User",
                       "fields": [{"name": "id", "type": "int", "default": 0}]})
schema_to_json(schema)["fields"][0]["default"]  # 0
```
"""

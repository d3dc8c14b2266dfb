"""
Delta-schema derivation: value record schema → partial-update schema.

Given the schema of a stored value (a record whose fields all declare defaults),
build the schema of update records that describe *how* to change a stored value:

    [ <Name>WriteOpRecord, DelOp ]

where every field of ``<Name>WriteOpRecord`` has the type
``[NoOp, <transformed field type>...]`` with default ``{}`` (i.e., NoOp).

Transformation rules (top level only)
- record field   → passed through unchanged (replace or no-op, never partial).
- array<T>       → [<field>ListOps, array<T>]
- map<V>         → [<field>MapOps, map<V>]
- union          → members transformed in place (records unchanged) and spliced;
                   at most one array/map member is allowed.
- anything else  → unchanged.

Example
-------
Source ``{id: int = 0, tags: array<string> = []}`` derives to::

    [ {"name": "UserWriteOpRecord", "fields": [
         {"name": "id",   "type": ["NoOp", "int"], "default": {}},
         {"name": "tags", "type": ["NoOp",
              {"name": "tagsListOps", "fields": [
                  {"name": "setUnion", "type": {"type": "array", "items": "string"}, "default": []},
                  {"name": "setDiff",  "type": {"type": "array", "items": "string"}, "default": []}]},
              {"type": "array", "items": "string"}], "default": {}}]},
      {"name": "DelOp", "fields": []} ]

Notes
- Nested collections and fields of nested records are not transformed; nested
  merges would need a different downstream merge protocol.
- Derivation is pure and deterministic; callers cache results (e.g., keyed by
  ``deltaschema.core.hashing.schema_fingerprint`` of the source schema).
- Failures abort the whole derivation; no partial schema is returned.
"""

from __future__ import annotations

from typing import Any

from deltaschema.core.constants import DELTA_RECORD_SUFFIX
from deltaschema.core.errors import (
    AmbiguousUnionCollections,
    InvalidInputSchemaKind,
    MissingFieldDefault,
)
from deltaschema.core.schema import (
    ArraySchema,
    MapSchema,
    RecordField,
    RecordSchema,
    Schema,
    UnionSchema,
    flattened_union,
    is_collection,
)
from deltaschema.core.serde import parse_schema

from .operations import collection_op_schema, del_op_schema, no_op_schema

__all__ = [
    "derive_delta_schema",
    "delta_record_name",
    "ensure_field_defaults",
    "ensure_single_collection",
]


def delta_record_name(source_name: str) -> str:
    """Name of the derived record for a source record named ``source_name``."""
    return source_name + DELTA_RECORD_SUFFIX


def derive_delta_schema(schema: RecordSchema | Any) -> UnionSchema:
    """
    Derive the delta (partial-update) schema of a value record schema.

    Args:
        schema: Source value schema, either a RecordSchema or any JSON form accepted
            by ``deltaschema.core.serde.parse_schema``.

    Returns:
        UnionSchema: ``[<Name>WriteOpRecord, DelOp]``, both in the source namespace.

    Raises:
        InvalidInputSchemaKind: If ``schema`` is None or not a record.
        MissingFieldDefault: If any source field lacks a default value.
        AmbiguousUnionCollections: If a field union has more than one array/map member.
        SchemaError: If the source JSON is malformed.

    Examples:
        >>> from deltaschema.derive import derive_delta_schema
        >>> delta = derive_delta_schema({"type": "record", "name": "User",
        ...     "fields": [{"name": "id", "type": "int", "default": 0}]})
        >>> [t.name for t in delta.types]
        ['UserWriteOpRecord', 'DelOp']
    """
    if schema is None:
        raise InvalidInputSchemaKind("cannot derive a delta schema from None")
    if not isinstance(schema, RecordSchema):
        schema = parse_schema(schema)
    if not isinstance(schema, RecordSchema):
        raise InvalidInputSchemaKind(
            f"cannot derive a delta schema from non-record value schema: {schema.kind.value}"
        )
    derived = _convert_record(schema, delta_record_name(schema.name))
    delta = flattened_union([derived, del_op_schema(derived.namespace)])
    return delta


def ensure_field_defaults(record: RecordSchema) -> None:
    """
    Check that every field of ``record`` declares a default value.

    Raises:
        MissingFieldDefault: Naming the first field without a default.
    """
    for f in record.fields:
        if not f.has_default:
            raise MissingFieldDefault(
                f"cannot generate derived schema because field {f.name!r} "
                f"of record {record.fullname!r} does not have a default value"
            )


def ensure_single_collection(union: UnionSchema) -> None:
    """
    Check that ``union`` holds at most one collection-typed (array/map) member.

    Raises:
        AmbiguousUnionCollections: If two or more members are arrays or maps.
    """
    collections = [t.kind.value for t in union.types if is_collection(t)]
    if len(collections) > 1:
        raise AmbiguousUnionCollections(
            f"union contains more than one collection member: {collections!r}"
        )


def _convert(schema: Schema, name: str | None, namespace: str | None) -> Schema:
    if isinstance(schema, RecordSchema):
        return _convert_record(schema, name)
    if isinstance(schema, (ArraySchema, MapSchema)):
        return flattened_union([collection_op_schema(schema, name, namespace), schema])
    if isinstance(schema, UnionSchema):
        return _convert_union(schema, name, namespace)
    return schema


def _convert_record(record: RecordSchema, derived_name: str | None) -> RecordSchema:
    ensure_field_defaults(record)
    namespace = record.namespace
    fields = []
    for f in record.fields:
        transformed = f.type if isinstance(f.type, RecordSchema) else _convert(f.type, f.name, namespace)
        fields.append(
            RecordField(
                name=f.name,
                type=_wrap_no_op(namespace, transformed),
                default={},
                order=f.order,
                doc=f.doc,
            )
        )
    return RecordSchema(
        name=derived_name or record.name,
        namespace=namespace,
        doc=record.doc,
        fields=tuple(fields),
        is_error=record.is_error,
    )


def _convert_union(union: UnionSchema, name: str | None, namespace: str | None) -> UnionSchema:
    ensure_single_collection(union)
    return flattened_union(
        t if isinstance(t, RecordSchema) else _convert(t, name, namespace) for t in union.types
    )


def _wrap_no_op(namespace: str | None, *schemas: Schema) -> UnionSchema:
    # NoOp first: the first member is the union's default branch.
    return flattened_union([no_op_schema(namespace), *schemas])

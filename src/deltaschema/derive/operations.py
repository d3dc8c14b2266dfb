"""
Builders for the operation records of a delta schema.

Each builder returns a fresh record schema with the exact wire shape consumed
downstream:

- ``NoOp``: empty record; "leave the field unchanged".
- ``DelOp``: empty record; "delete the whole stored value".
- ``<name>ListOps``: ``{setUnion: array<T> default [], setDiff: array<T> default []}``.
- ``<name>MapOps``: ``{mapUnion: map<V> default {}, mapDiff: array<string> default []}``.

Notes:
    - Element and value types are used verbatim; nested collections stay opaque.
    - Field names setUnion/setDiff/mapUnion/mapDiff are a wire contract.
"""

from __future__ import annotations

from deltaschema.core.constants import (
    DEL_OP_NAME,
    MAP_DIFF,
    MAP_UNION,
    NO_OP_NAME,
    SET_DIFF,
    SET_UNION,
)
from deltaschema.core.grammar import OperationKind, operation_type_name
from deltaschema.core.schema import (
    ArraySchema,
    MapSchema,
    RecordField,
    RecordSchema,
    primitive,
)

__all__ = [
    "no_op_schema",
    "del_op_schema",
    "list_ops_schema",
    "map_ops_schema",
    "collection_op_schema",
]


def no_op_schema(namespace: str | None) -> RecordSchema:
    """Empty ``NoOp`` marker record in ``namespace``."""
    return RecordSchema(name=NO_OP_NAME, namespace=namespace, fields=())


def del_op_schema(namespace: str | None) -> RecordSchema:
    """Empty ``DelOp`` marker record in ``namespace``."""
    return RecordSchema(name=DEL_OP_NAME, namespace=namespace, fields=())


def list_ops_schema(array: ArraySchema, name: str | None, namespace: str | None) -> RecordSchema:
    """
    Merge-operation record for an array type.

    Args:
        array (ArraySchema): Original array schema; its item type is reused as-is.
        name (str | None): Enclosing field or schema name qualifying the record name.
        namespace (str | None): Namespace of the generated record.

    Examples:
        >>> from deltaschema.core.schema import ArraySchema, primitive
        >>> ops = list_ops_schema(ArraySchema(items=primitive("float")), "scores", None)
        >>> ops.name, ops.field_names
        ('scoresListOps', ('setUnion', 'setDiff'))
    """
    return RecordSchema(
        name=operation_type_name(OperationKind.LIST_OPS, name),
        namespace=namespace,
        fields=(
            RecordField(name=SET_UNION, type=ArraySchema(items=array.items), default=[]),
            RecordField(name=SET_DIFF, type=ArraySchema(items=array.items), default=[]),
        ),
    )


def map_ops_schema(map_schema: MapSchema, name: str | None, namespace: str | None) -> RecordSchema:
    """Merge-operation record for a map type (upsert entries, delete keys)."""
    return RecordSchema(
        name=operation_type_name(OperationKind.MAP_OPS, name),
        namespace=namespace,
        fields=(
            RecordField(name=MAP_UNION, type=MapSchema(values=map_schema.values), default={}),
            RecordField(name=MAP_DIFF, type=ArraySchema(items=primitive("string")), default=[]),
        ),
    )


def collection_op_schema(
    collection: ArraySchema | MapSchema,
    name: str | None,
    namespace: str | None,
) -> RecordSchema:
    """Dispatch to the list or map operation builder by collection kind."""
    if isinstance(collection, ArraySchema):
        return list_ops_schema(collection, name, namespace)
    return map_ops_schema(collection, name, namespace)

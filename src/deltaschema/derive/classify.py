"""
Runtime classification of decoded delta values.

Called once per field per update record on the update-apply path, so these
functions are allocation-light, stateless, and do not log.

Classification is by runtime type name only:
- exactly ``NoOp``            → OperationKind.NO_OP
- name ends with ``ListOps``  → OperationKind.LIST_OPS
- name ends with ``MapOps``   → OperationKind.MAP_OPS
- anything else               → OperationKind.PUT_NEW_FIELD

Suffix matching is required because operation record names are field-qualified
(``tagsListOps``). Any non-marker value is, by construction of the delta schema,
a value of the original field type, hence a replacement.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from deltaschema.core.constants import DEL_OP_NAME, LIST_OPS_SUFFIX, MAP_OPS_SUFFIX, NO_OP_NAME
from deltaschema.core.datum import GenericRecord
from deltaschema.core.errors import UnclassifiableDelta
from deltaschema.core.grammar import OperationKind
from deltaschema.core.schema import (
    ArraySchema,
    EnumSchema,
    FixedSchema,
    MapSchema,
    PrimitiveSchema,
    RecordSchema,
    Schema,
    UnionSchema,
)

__all__ = [
    "classify_field_delta",
    "is_whole_value_delete",
    "field_operations",
]


def classify_field_delta(value: Any, *, field_schema: Schema | None = None) -> OperationKind:
    """
    Classify the decoded value of one delta-record field.

    Args:
        value (Any): Decoded field value (GenericRecord for record members, plain
            Python values otherwise).
        field_schema (Schema | None): Derived union type of the field. When given,
            replacement values are checked against the union's members (strict mode).

    Returns:
        OperationKind: NO_OP, LIST_OPS, MAP_OPS, or PUT_NEW_FIELD.

    Raises:
        ValueError: If ``value`` is None.
        UnclassifiableDelta: In strict mode, if a replacement value matches no member.

    Examples:
        >>> from deltaschema.core.datum import GenericRecord
        >>> from deltaschema.core.schema import RecordSchema
        >>> classify_field_delta(GenericRecord(RecordSchema(name="tagsListOps"), {})).value
        'list_ops'
        >>> classify_field_delta(42).value
        'put_new_field'
    """
    if value is None:
        raise ValueError("delta field value must not be None")
    if isinstance(value, GenericRecord):
        name = value.schema.name
        if name == NO_OP_NAME:
            return OperationKind.NO_OP
        if name.endswith(LIST_OPS_SUFFIX):
            return OperationKind.LIST_OPS
        if name.endswith(MAP_OPS_SUFFIX):
            return OperationKind.MAP_OPS
    if field_schema is not None and not _matches_member(field_schema, value):
        raise UnclassifiableDelta(
            f"value of type {_runtime_name(value)!r} matches no member of the field's delta type"
        )
    return OperationKind.PUT_NEW_FIELD


def is_whole_value_delete(value: Any) -> bool:
    """
    Return True iff a decoded top-level delta value is the ``DelOp`` marker.

    Raises:
        ValueError: If ``value`` is None.
        TypeError: If ``value`` is not a decoded record.
    """
    if value is None:
        raise ValueError("delta value must not be None")
    if not isinstance(value, GenericRecord):
        raise TypeError(f"expected a decoded delta record, got {type(value).__name__}")
    return value.schema.name == DEL_OP_NAME


def field_operations(record: GenericRecord, *, strict: bool = False) -> dict[str, OperationKind]:
    """
    Classify every field of a decoded derived (``...WriteOpRecord``) record.

    Args:
        record (GenericRecord): Decoded top-level delta value that is not a delete.
        strict (bool): Check replacement values against each field's delta type.

    Returns:
        dict[str, OperationKind]: Field name → operation, in field order. A decoded
        null (the null member of a nullable field) is a PUT_NEW_FIELD.

    Raises:
        ValueError: If ``record`` is the whole-value delete marker.
    """
    if is_whole_value_delete(record):
        raise ValueError("a whole-value delete carries no field operations")
    ops: dict[str, OperationKind] = {}
    for f in record.schema.fields:
        value = record[f.name]
        if value is None:
            # Decoded null member of a nullable field: set the field to null.
            ops[f.name] = OperationKind.PUT_NEW_FIELD
            continue
        ops[f.name] = classify_field_delta(value, field_schema=f.type if strict else None)
    return ops


def _runtime_name(value: Any) -> str:
    if isinstance(value, GenericRecord):
        return value.schema.fullname
    return type(value).__name__


def _matches_member(schema: Schema, value: Any) -> bool:
    members = schema.types if isinstance(schema, UnionSchema) else (schema,)
    return any(_matches(m, value) for m in members)


def _matches(schema: Schema, value: Any) -> bool:
    # Shallow structural check; element values were validated when decoded.
    if isinstance(value, GenericRecord):
        return isinstance(schema, RecordSchema) and schema.fullname == value.schema.fullname
    if isinstance(schema, PrimitiveSchema):
        t = schema.type
        if t == "boolean":
            return isinstance(value, bool)
        if t in ("int", "long"):
            return isinstance(value, int) and not isinstance(value, bool)
        if t in ("float", "double"):
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        if t == "string":
            return isinstance(value, str)
        if t == "bytes":
            return isinstance(value, bytes)
        return False
    if isinstance(schema, EnumSchema):
        return isinstance(value, str) and value in schema.symbols
    if isinstance(schema, FixedSchema):
        return isinstance(value, bytes) and len(value) == schema.size
    if isinstance(schema, ArraySchema):
        return isinstance(value, list)
    if isinstance(schema, MapSchema):
        return isinstance(value, Mapping)
    return False

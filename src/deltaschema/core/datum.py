"""
Decoded values of schema trees.

Provides `GenericRecord`, the runtime value of a record schema that carries its
schema (and therefore its runtime type name), and `read_json_datum`, a decoder
for JSON-encoded data.

JSON encoding
- null → None; boolean/int/long/float/double/string → JSON scalars.
- bytes and fixed → strings whose code points are byte values (ISO-8859-1).
- enum → symbol string; array → list; map → object.
- record → object keyed by field name. Missing fields take the field default.
- union → None for the null member, else ``{"<member>": value}`` where the key is
  the member's full name (named types; the simple name is also accepted) or its
  kind name (``"int"``, ``"array"``, ...).

Defaults
- Field defaults are written unwrapped. A union default applies to the union's
  first member; for delta schemas that member is ``NoOp``, so a delta record that
  mentions no field decodes with every field set to a ``NoOp`` record.

Notes:
    - Zero-IO; failures raise DatumError carrying a JSON path of the offending value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import DatumError
from .schema import (
    ArraySchema,
    EnumSchema,
    FixedSchema,
    MapSchema,
    PrimitiveSchema,
    RecordSchema,
    Schema,
    UnionSchema,
    member_key,
)

__all__ = [
    "GenericRecord",
    "read_json_datum",
    "read_default",
]


@dataclass(frozen=True, slots=True)
class GenericRecord:
    """
    Record value bound to its record schema.

    Attributes:
        schema (RecordSchema): Schema the value was decoded against.
        values (Mapping[str, Any]): Field name → decoded value.

    Examples:
        >>> from deltaschema.core.datum import GenericRecord
        >>> from deltaschema.core.schema import RecordSchema
        >>> rec = GenericRecord(RecordSchema(name="NoOp"), {})
        >>> rec.name
        'NoOp'
    """

    schema: RecordSchema
    values: Mapping[str, Any]

    @property
    def name(self) -> str:
        return self.schema.name

    def __getitem__(self, key: str) -> Any:
        return self.values[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)


def read_json_datum(schema: Schema, datum: Any) -> Any:
    """
    Decode a JSON-encoded value against ``schema``.

    Args:
        schema (Schema): Writer schema of the value.
        datum (Any): Decoded JSON (e.g., from ``json.loads``).

    Returns:
        Any: Python value; records become GenericRecord instances.

    Raises:
        DatumError: If the value does not conform to the schema.
    """
    return _read(schema, datum, "$")


def read_default(schema: Schema, default: Any) -> Any:
    """Decode a field default value (unions use their first member)."""
    return _read_default(schema, default, "$")


def _read(schema: Schema, datum: Any, path: str) -> Any:
    if isinstance(schema, PrimitiveSchema):
        return _read_primitive(schema, datum, path)
    if isinstance(schema, EnumSchema):
        if not isinstance(datum, str) or datum not in schema.symbols:
            raise DatumError(f"{path}: {datum!r} is not a symbol of enum {schema.fullname!r}")
        return datum
    if isinstance(schema, FixedSchema):
        raw = _read_bytes(datum, path)
        if len(raw) != schema.size:
            raise DatumError(f"{path}: fixed {schema.fullname!r} expects {schema.size} bytes, got {len(raw)}")
        return raw
    if isinstance(schema, ArraySchema):
        if not isinstance(datum, list):
            raise DatumError(f"{path}: expected array, got {type(datum).__name__}")
        return [_read(schema.items, v, f"{path}[{i}]") for i, v in enumerate(datum)]
    if isinstance(schema, MapSchema):
        if not isinstance(datum, Mapping):
            raise DatumError(f"{path}: expected map, got {type(datum).__name__}")
        return {str(k): _read(schema.values, v, f"{path}.{k}") for k, v in datum.items()}
    if isinstance(schema, RecordSchema):
        return _read_record(schema, datum, path, defaults_only=False)
    return _read_union(schema, datum, path)


def _read_primitive(schema: PrimitiveSchema, datum: Any, path: str) -> Any:
    t = schema.type
    if t == "null":
        if datum is not None:
            raise DatumError(f"{path}: expected null, got {datum!r}")
        return None
    if t == "boolean":
        if not isinstance(datum, bool):
            raise DatumError(f"{path}: expected boolean, got {datum!r}")
        return datum
    if t in ("int", "long"):
        if isinstance(datum, bool) or not isinstance(datum, int):
            raise DatumError(f"{path}: expected {t}, got {datum!r}")
        return datum
    if t in ("float", "double"):
        if isinstance(datum, bool) or not isinstance(datum, (int, float)):
            raise DatumError(f"{path}: expected {t}, got {datum!r}")
        return float(datum)
    if t == "string":
        if not isinstance(datum, str):
            raise DatumError(f"{path}: expected string, got {datum!r}")
        return datum
    return _read_bytes(datum, path)


def _read_bytes(datum: Any, path: str) -> bytes:
    if not isinstance(datum, str):
        raise DatumError(f"{path}: expected bytes as string, got {datum!r}")
    try:
        return datum.encode("latin-1")
    except UnicodeEncodeError as exc:
        raise DatumError(f"{path}: bytes string has code points above 255") from exc


def _read_record(schema: RecordSchema, datum: Any, path: str, *, defaults_only: bool) -> GenericRecord:
    if not isinstance(datum, Mapping):
        raise DatumError(f"{path}: expected record {schema.fullname!r}, got {type(datum).__name__}")
    unknown = set(datum) - set(schema.field_names)
    if unknown:
        raise DatumError(f"{path}: unknown fields for record {schema.fullname!r}: {sorted(unknown)!r}")
    values: dict[str, Any] = {}
    for f in schema.fields:
        fpath = f"{path}.{f.name}"
        if f.name in datum:
            if defaults_only:
                values[f.name] = _read_default(f.type, datum[f.name], fpath)
            else:
                values[f.name] = _read(f.type, datum[f.name], fpath)
        elif f.has_default:
            values[f.name] = _read_default(f.type, f.default, fpath)
        else:
            raise DatumError(f"{fpath}: missing value for field without default")
    return GenericRecord(schema, values)


def _read_union(schema: UnionSchema, datum: Any, path: str) -> Any:
    if datum is None:
        for t in schema.types:
            if isinstance(t, PrimitiveSchema) and t.type == "null":
                return None
        raise DatumError(f"{path}: null is not a member of the union")
    if not isinstance(datum, Mapping) or len(datum) != 1:
        raise DatumError(f"{path}: union value must be null or a single-key object, got {datum!r}")
    ((key, value),) = datum.items()
    for t in schema.types:
        if key == member_key(t) or (isinstance(t, (RecordSchema, EnumSchema, FixedSchema)) and key == t.name):
            return _read(t, value, f"{path}<{key}>")
    raise DatumError(f"{path}: {key!r} is not a member of the union")


def _read_default(schema: Schema, default: Any, path: str) -> Any:
    if isinstance(schema, UnionSchema):
        return _read_default(schema.types[0], default, path)
    if isinstance(schema, RecordSchema):
        return _read_record(schema, default, path, defaults_only=True)
    if isinstance(schema, ArraySchema):
        if not isinstance(default, list):
            raise DatumError(f"{path}: expected array default, got {default!r}")
        return [_read_default(schema.items, v, f"{path}[{i}]") for i, v in enumerate(default)]
    if isinstance(schema, MapSchema):
        if not isinstance(default, Mapping):
            raise DatumError(f"{path}: expected map default, got {default!r}")
        return {str(k): _read_default(schema.values, v, f"{path}.{k}") for k, v in default.items()}
    return _read(schema, default, path)

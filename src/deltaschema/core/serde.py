"""
JSON serialization/deserialization of schema trees.

Provides `parse_schema` (JSON form → schema models) and `schema_to_json`
(schema models → JSON form), plus `json_loads` and a re-export of
`json_dumps_canonical` from `deltaschema.core.hashing` so there is a single
canonical JSON policy across the codebase. This module is zero-IO.

Notes:
    - Named types (record, enum, fixed) are defined once; later occurrences are
      references by name. Namespaces are inherited from the enclosing named type
      when a nested definition does not declare one.
    - Writing two different definitions under one full name raises SchemaError.
      This is the definition conflict that field-qualified operation record names
      avoid (see ``deltaschema.core.grammar.operation_type_name``).
    - Recursive named types cannot be represented by frozen models and are rejected.
    - Declared field defaults are decoded against the field type (a union default
      against its first member); a mismatch raises SchemaError naming the field.
    - Unknown attributes (``aliases``, custom properties) are ignored on parse.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

# Re-export canonical dumps to keep a single canonicalization policy.
from .hashing import json_dumps_canonical  # noqa: F401
from .datum import read_default
from .errors import DatumError, SchemaError
from .grammar import PRIMITIVE_TYPES, split_fullname
from .schema import (
    ArraySchema,
    EnumSchema,
    FixedSchema,
    MapSchema,
    PrimitiveSchema,
    RecordField,
    RecordSchema,
    Schema,
    UnionSchema,
    ensure_distinct_members,
    validation_message,
)
from .typing import JsonDict, SchemaJson

__all__ = [
    "json_loads",
    "json_dumps_canonical",
    "parse_schema",
    "schema_to_json",
    "schema_to_json_str",
]


def json_loads(s: str) -> Any:
    """
    Deserialize a JSON string to Python objects using the stdlib json module.

    Args:
        s (str): JSON string to parse.

    Returns:
        Any: Decoded Python object (dict, list, str, int, float, bool, or None).
    """
    return json.loads(s)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class _Parser:
    """Single-use parser holding the named types defined so far."""

    def __init__(self) -> None:
        self.names: dict[str, Schema] = {}
        self.pending: set[str] = set()

    def parse(self, obj: Any, namespace: str | None) -> Schema:
        if isinstance(obj, str):
            return self._parse_name(obj, namespace)
        if isinstance(obj, list):
            members = tuple(self.parse(t, namespace) for t in obj)
            ensure_distinct_members(members)
            return self._build(UnionSchema, types=members)
        if isinstance(obj, Mapping):
            return self._parse_object(obj, namespace)
        raise SchemaError(f"cannot parse schema from {type(obj).__name__}: {obj!r}")

    def _parse_name(self, name: str, namespace: str | None) -> Schema:
        if name in PRIMITIVE_TYPES:
            return PrimitiveSchema(type=name)
        simple, ns = split_fullname(name, namespace)
        for candidate in (f"{ns}.{simple}" if ns else simple, simple):
            if candidate in self.pending:
                raise SchemaError(f"recursive reference to {candidate!r} is not supported")
            if candidate in self.names:
                return self.names[candidate]
        raise SchemaError(f"unknown type name: {name!r}")

    def _parse_object(self, obj: Mapping[str, Any], namespace: str | None) -> Schema:
        t = obj.get("type")
        if t is None:
            raise SchemaError(f"schema object has no 'type': {dict(obj)!r}")
        if t in ("record", "error"):
            return self._parse_record(obj, namespace)
        if t == "enum":
            name, ns = self._declared_name(obj, namespace)
            return self._register(
                self._build(
                    EnumSchema,
                    name=name,
                    namespace=ns,
                    symbols=tuple(obj.get("symbols", ())),
                    doc=obj.get("doc"),
                    default=obj.get("default"),
                )
            )
        if t == "fixed":
            name, ns = self._declared_name(obj, namespace)
            return self._register(
                self._build(
                    FixedSchema,
                    name=name,
                    namespace=ns,
                    size=obj.get("size", -1),
                    logical_type=obj.get("logicalType"),
                )
            )
        if t == "array":
            if "items" not in obj:
                raise SchemaError("array schema requires 'items'")
            return ArraySchema(items=self.parse(obj["items"], namespace))
        if t == "map":
            if "values" not in obj:
                raise SchemaError("map schema requires 'values'")
            return MapSchema(values=self.parse(obj["values"], namespace))
        if isinstance(t, str) and t in PRIMITIVE_TYPES:
            return self._build(PrimitiveSchema, type=t, logical_type=obj.get("logicalType"))
        # {"type": <nested schema>} is an alias for the nested schema itself.
        return self.parse(t, namespace)

    def _parse_record(self, obj: Mapping[str, Any], namespace: str | None) -> RecordSchema:
        name, ns = self._declared_name(obj, namespace)
        fullname = f"{ns}.{name}" if ns else name
        if fullname in self.names:
            raise SchemaError(f"can't redefine: {fullname!r}")
        raw_fields = obj.get("fields")
        if not isinstance(raw_fields, list):
            raise SchemaError(f"record {fullname!r} requires a 'fields' list")
        self.pending.add(fullname)
        try:
            fields = []
            for f in raw_fields:
                if not isinstance(f, Mapping) or "name" not in f or "type" not in f:
                    raise SchemaError(f"record {fullname!r} has a malformed field: {f!r}")
                kwargs: dict[str, Any] = {
                    "name": f["name"],
                    "type": self.parse(f["type"], ns),
                    "order": f.get("order", "ascending"),
                    "doc": f.get("doc"),
                }
                if "default" in f:
                    kwargs["default"] = f["default"]
                field = self._build(RecordField, **kwargs)
                if field.has_default:
                    _check_default(field, fullname)
                fields.append(field)
        finally:
            self.pending.discard(fullname)
        record = self._build(
            RecordSchema,
            name=name,
            namespace=ns,
            doc=obj.get("doc"),
            fields=tuple(fields),
            is_error=obj.get("type") == "error",
        )
        return self._register(record)

    @staticmethod
    def _declared_name(obj: Mapping[str, Any], namespace: str | None) -> tuple[str, str | None]:
        name = obj.get("name")
        if not isinstance(name, str) or not name:
            raise SchemaError(f"named schema requires a 'name': {dict(obj)!r}")
        ns = obj.get("namespace", namespace)
        return split_fullname(name, ns)

    def _register(self, schema: Any) -> Any:
        fullname = schema.fullname
        if fullname in self.names:
            raise SchemaError(f"can't redefine: {fullname!r}")
        self.names[fullname] = schema
        return schema

    @staticmethod
    def _build(model: type, **kwargs: Any) -> Any:
        try:
            return model(**kwargs)
        except ValidationError as exc:
            raise SchemaError(f"invalid {model.__name__}: {validation_message(exc)}") from exc


def _check_default(field: RecordField, record_name: str) -> None:
    try:
        read_default(field.type, field.default)
    except DatumError as exc:
        raise SchemaError(
            f"invalid default for field {field.name!r} of record {record_name!r}: {exc}"
        ) from exc


_SCHEMA_MODELS = (
    PrimitiveSchema,
    EnumSchema,
    FixedSchema,
    RecordSchema,
    ArraySchema,
    MapSchema,
    UnionSchema,
)


def parse_schema(source: SchemaJson | Schema) -> Schema:
    """
    Parse a schema from its JSON form.

    Args:
        source: JSON text, a decoded JSON value (mapping, list, or type-name string),
            or an already-built schema model (returned unchanged).

    Returns:
        Schema: The parsed schema tree.

    Raises:
        SchemaError: On malformed JSON, unknown or recursive type references,
            invalid names, duplicate fields/members, or named-type redefinitions.

    Examples:
        >>> from deltaschema.core.serde import parse_schema
        >>> s = parse_schema('{"type": "record", "name": "User", "namespace": "com.acme",'
        ...                  ' "fields": [{"name": "id", "type": "int", "default": 0}]}')
        >>> s.fullname, s.fields[0].has_default
        ('com.acme.User', True)
    """
    if isinstance(source, _SCHEMA_MODELS):
        return source
    obj: Any = source
    if isinstance(source, str):
        text = source.strip()
        if text[:1] in ("{", "[", '"'):
            try:
                obj = json_loads(text)
            except json.JSONDecodeError as exc:
                raise SchemaError(f"schema is not valid JSON: {exc}") from exc
        else:
            obj = text
    return _Parser().parse(obj, None)


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


class _Writer:
    """Single-use writer tracking which named types were already emitted."""

    def __init__(self) -> None:
        self.names: dict[str, Schema] = {}

    def write(self, schema: Schema, namespace: str | None) -> Any:
        if isinstance(schema, PrimitiveSchema):
            if schema.logical_type is None:
                return schema.type
            return {"type": schema.type, "logicalType": schema.logical_type}
        if isinstance(schema, ArraySchema):
            return {"type": "array", "items": self.write(schema.items, namespace)}
        if isinstance(schema, MapSchema):
            return {"type": "map", "values": self.write(schema.values, namespace)}
        if isinstance(schema, UnionSchema):
            return [self.write(t, namespace) for t in schema.types]
        return self._write_named(schema, namespace)

    def _write_named(self, schema: RecordSchema | EnumSchema | FixedSchema, namespace: str | None) -> Any:
        fullname = schema.fullname
        seen = self.names.get(fullname)
        if seen is not None:
            if seen != schema:
                raise SchemaError(f"can't redefine: {fullname!r}")
            return schema.name if schema.namespace == namespace else fullname
        self.names[fullname] = schema

        out: JsonDict = {}
        if isinstance(schema, RecordSchema):
            out["type"] = "error" if schema.is_error else "record"
        elif isinstance(schema, EnumSchema):
            out["type"] = "enum"
        else:
            out["type"] = "fixed"
        out["name"] = schema.name
        if schema.namespace != namespace:
            out["namespace"] = schema.namespace or ""

        if isinstance(schema, RecordSchema):
            if schema.doc is not None:
                out["doc"] = schema.doc
            out["fields"] = [self._write_field(f, schema.namespace) for f in schema.fields]
        elif isinstance(schema, EnumSchema):
            if schema.doc is not None:
                out["doc"] = schema.doc
            out["symbols"] = list(schema.symbols)
            if schema.default is not None:
                out["default"] = schema.default
        else:
            out["size"] = schema.size
            if schema.logical_type is not None:
                out["logicalType"] = schema.logical_type
        return out

    def _write_field(self, field: RecordField, namespace: str | None) -> JsonDict:
        out: JsonDict = {"name": field.name, "type": self.write(field.type, namespace)}
        if field.doc is not None:
            out["doc"] = field.doc
        if field.has_default:
            out["default"] = field.default
        if field.order != "ascending":
            out["order"] = field.order
        return out


def schema_to_json(schema: Schema) -> Any:
    """
    Convert a schema tree to its JSON form (dict, list, or type-name string).

    Raises:
        SchemaError: If two different named types share a full name.
    """
    return _Writer().write(schema, None)


def schema_to_json_str(schema: Schema, *, indent: int | None = None) -> str:
    """
    Serialize a schema tree to JSON text.

    Args:
        schema (Schema): Schema to serialize.
        indent (int | None): Pretty-print indentation; None or 0 yields canonical compact JSON.

    Returns:
        str: JSON text. Field and member order is preserved when indenting; canonical
        output sorts object keys.
    """
    obj = schema_to_json(schema)
    if not indent:
        return json_dumps_canonical(obj)
    return json.dumps(obj, indent=indent, ensure_ascii=False)

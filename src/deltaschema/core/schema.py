"""
Pydantic v2 models for the host schema tree: primitives, named types (record,
enum, fixed), collections (array, map), and unions. Validators enforce naming
rules, record field uniqueness, and union well-formedness.

Responsibilities
- Define the immutable schema variants consumed and produced by delta derivation.
- Guard union shape (non-empty, no directly nested unions) and provide the
  pairwise type-distinctness check used by the parser and flattened_union.
- Provide the single union-flattening helper used wherever unions are built.

Style
- Zero-IO (stdlib + pydantic only).
- Models are frozen; structural equality is model equality, so two derivations of
  equal inputs compare equal with ``==``.
- Models are hashable; equal models hash equally, list and dict defaults included.
- Recursive (self-referencing) named types are not representable; see serde.

References
- grammar: src/deltaschema/core/grammar.py (SchemaKind, name helpers)
- serde: src/deltaschema/core/serde.py (JSON form, named-type references)
- tests: tests/core/test_schema_models.py
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from .errors import SchemaError
from .grammar import (
    COLLECTION_KINDS,
    NAMED_KINDS,
    SchemaKind,
    assert_valid_name,
    make_fullname,
)
from .hashing import json_dumps_canonical

__all__ = [
    "PrimitiveSchema",
    "EnumSchema",
    "FixedSchema",
    "RecordSchema",
    "RecordField",
    "ArraySchema",
    "MapSchema",
    "UnionSchema",
    "Schema",
    "primitive",
    "member_key",
    "is_collection",
    "is_named",
    "ensure_distinct_members",
    "flattened_union",
]

PrimitiveName = Literal["null", "boolean", "int", "long", "float", "double", "bytes", "string"]
FieldOrder = Literal["ascending", "descending", "ignore"]


class _SchemaModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    def __hash__(self) -> int:
        # Field defaults are JSON values (lists, dicts), so hash the canonical dump.
        return hash((type(self).__name__, json_dumps_canonical(self.model_dump(mode="json"))))

    @property
    def kind(self) -> SchemaKind:  # pragma: no cover - overridden by every variant
        raise NotImplementedError


class _NamedSchema(_SchemaModel):
    """Shared name/namespace handling for record, enum, and fixed schemas."""

    name: str
    namespace: str | None = None

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        return assert_valid_name(v)

    @field_validator("namespace")
    @classmethod
    def _validate_namespace(cls, v: str | None) -> str | None:
        if not v:
            return None
        for part in v.split("."):
            assert_valid_name(part)
        return v

    @property
    def fullname(self) -> str:
        return make_fullname(self.name, self.namespace)


class PrimitiveSchema(_SchemaModel):
    """
    Primitive type, optionally annotated with a logical type.

    Attributes:
        type (str): One of null, boolean, int, long, float, double, bytes, string.
        logical_type (str | None): Optional logical type annotation (e.g., "timestamp-millis").

    Examples:
        >>> from deltaschema.core.schema import PrimitiveSchema
        >>> PrimitiveSchema(type="int").kind.value
        'int'
    """

    type: PrimitiveName
    logical_type: str | None = None

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind(self.type)


class EnumSchema(_NamedSchema):
    """Named enumeration of symbols."""

    symbols: tuple[str, ...]
    doc: str | None = None
    default: str | None = None

    @model_validator(mode="after")
    def _check_symbols(self) -> EnumSchema:
        for s in self.symbols:
            assert_valid_name(s)
        if len(set(self.symbols)) != len(self.symbols):
            raise SchemaError(f"duplicate symbols in enum {self.fullname!r}")
        if self.default is not None and self.default not in self.symbols:
            raise SchemaError(f"enum {self.fullname!r} default {self.default!r} is not a symbol")
        return self

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind.ENUM


class FixedSchema(_NamedSchema):
    """Named fixed-size byte sequence."""

    size: int
    logical_type: str | None = None

    @field_validator("size")
    @classmethod
    def _check_size(cls, v: int) -> int:
        if v < 0:
            raise SchemaError(f"fixed size must be non-negative, got {v}")
        return v

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind.FIXED


class RecordField(_SchemaModel):
    """
    Field descriptor of a record schema.

    Attributes:
        name (str): Field name, unique within its record.
        type (Schema): Field schema.
        default (Any): JSON form of the default value; meaningful only when has_default.
        has_default (bool): Whether the field declares a default. Set automatically
            when ``default`` is passed explicitly (``default=None`` is a real null default).
        order (str): Sort order, one of ascending, descending, ignore.
        doc (str | None): Optional documentation string.

    Examples:
        >>> from deltaschema.core.schema import RecordField, primitive
        >>> RecordField(name="id", type=primitive("int"), default=0).has_default
        True
        >>> RecordField(name="id", type=primitive("int")).has_default
        False
    """

    name: str
    type: Schema
    default: Any = None
    has_default: bool = False
    order: FieldOrder = "ascending"
    doc: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _mark_explicit_default(cls, data: Any) -> Any:
        if isinstance(data, dict) and "default" in data and "has_default" not in data:
            data = {**data, "has_default": True}
        return data

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        return assert_valid_name(v)


class RecordSchema(_NamedSchema):
    """
    Named record with an ordered sequence of fields.

    Attributes:
        name (str): Simple record name.
        namespace (str | None): Dotted namespace, None for the null namespace.
        doc (str | None): Optional documentation string.
        fields (tuple[RecordField, ...]): Ordered fields with unique names.
        is_error (bool): True for error records (``"type": "error"``).

    Raises:
        pydantic.ValidationError: On invalid names or duplicate field names.
    """

    doc: str | None = None
    fields: tuple[RecordField, ...] = ()
    is_error: bool = False

    @model_validator(mode="after")
    def _check_unique_fields(self) -> RecordSchema:
        seen: set[str] = set()
        for f in self.fields:
            if f.name in seen:
                raise SchemaError(f"duplicate field {f.name!r} in record {self.fullname!r}")
            seen.add(f.name)
        return self

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind.RECORD

    def field(self, name: str) -> RecordField:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(f"record {self.fullname!r} has no field {name!r}")

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)


class ArraySchema(_SchemaModel):
    """Array of ``items``."""

    items: Schema

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind.ARRAY


class MapSchema(_SchemaModel):
    """String-keyed map with ``values``."""

    values: Schema

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind.MAP


class UnionSchema(_SchemaModel):
    """
    Ordered union of members.

    Members may not be unions themselves; build unions through ``flattened_union``
    to splice nested unions instead of nesting them. Pairwise type-distinctness is a
    well-formedness rule checked by ``ensure_distinct_members`` (called by the parser
    and by ``flattened_union``), not by the model, so hand-built trees can still be
    inspected by derivation checks.

    Raises:
        pydantic.ValidationError: If the union is empty or nests a union.
    """

    types: tuple[Schema, ...]

    @model_validator(mode="after")
    def _check_members(self) -> UnionSchema:
        if not self.types:
            raise SchemaError("union must have at least one member")
        for t in self.types:
            if isinstance(t, UnionSchema):
                raise SchemaError("unions may not immediately contain other unions")
        return self

    @property
    def kind(self) -> SchemaKind:
        return SchemaKind.UNION


Schema = Union[
    PrimitiveSchema,
    EnumSchema,
    FixedSchema,
    RecordSchema,
    ArraySchema,
    MapSchema,
    UnionSchema,
]

for _model in (RecordField, RecordSchema, ArraySchema, MapSchema, UnionSchema):
    _model.model_rebuild()


def primitive(name: str, logical_type: str | None = None) -> PrimitiveSchema:
    """Shorthand constructor for primitive schemas (``primitive("string")``)."""
    return PrimitiveSchema(type=name, logical_type=logical_type)


def is_named(schema: Schema) -> bool:
    return schema.kind in NAMED_KINDS


def is_collection(schema: Schema) -> bool:
    """True for array and map schemas."""
    return schema.kind in COLLECTION_KINDS


def member_key(schema: Schema) -> str:
    """
    Identity of a schema as a union member.

    Named types are identified by full name; every other kind by its kind name.
    """
    if isinstance(schema, (RecordSchema, EnumSchema, FixedSchema)):
        return schema.fullname
    return schema.kind.value


def ensure_distinct_members(members: Iterable[Schema]) -> None:
    """
    Check that union members are pairwise type-distinct.

    Unnamed kinds may appear at most once; named members must have distinct full names.

    Raises:
        SchemaError: Naming the first repeated member.
    """
    seen: set[str] = set()
    for t in members:
        key = member_key(t)
        if key in seen:
            raise SchemaError(f"duplicate member in union: {key!r}")
        seen.add(key)


def flattened_union(members: Iterable[Schema]) -> UnionSchema:
    """
    Build a union from ``members``, splicing the members of any union among them.

    Args:
        members (Iterable[Schema]): Schemas in union order.

    Returns:
        UnionSchema: A union that never contains another union.

    Raises:
        SchemaError: If the spliced members are not pairwise type-distinct.

    Examples:
        >>> from deltaschema.core.schema import flattened_union, primitive, UnionSchema
        >>> u = flattened_union([primitive("int"), UnionSchema(types=(primitive("null"), primitive("string")))])
        >>> [t.kind.value for t in u.types]
        ['int', 'null', 'string']
    """
    flat: list[Schema] = []
    for m in members:
        if isinstance(m, UnionSchema):
            flat.extend(m.types)
        else:
            flat.append(m)
    ensure_distinct_members(flat)
    try:
        return UnionSchema(types=tuple(flat))
    except ValidationError as exc:
        raise SchemaError(f"invalid union: {validation_message(exc)}") from exc


def validation_message(exc: ValidationError) -> str:
    """First human-readable message of a pydantic ValidationError."""
    errors = exc.errors()
    return str(errors[0]["msg"]) if errors else str(exc)

"""
Core exception types raised by schema parsing, delta-schema derivation, and classification.

Provides typed exceptions for core-domain failures:
- SchemaError for schema-level constraints (shape, names, unions, conflicts).
- InvalidInputSchemaKind when derivation is asked for a non-record value schema.
- MissingFieldDefault when a source record field declares no default value.
- AmbiguousUnionCollections when a union holds more than one array/map member.
- UnclassifiableDelta when strict classification cannot place a decoded value.
- DatumError when a JSON-encoded value does not conform to its schema.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Derivation errors are raised immediately and abort the whole derivation;
      no partial schema is ever returned.

Examples:
    Catch any derivation precondition failure through the common base.

    >>> from deltaschema.core.errors import MissingFieldDefault, SchemaError
    >>> try:
    ...     raise MissingFieldDefault("field 'id' does not have a default value")
    ... except SchemaError as e:
    ...     msg = str(e)
    >>> "default" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "SchemaError",
    "InvalidInputSchemaKind",
    "MissingFieldDefault",
    "AmbiguousUnionCollections",
    "UnclassifiableDelta",
    "DatumError",
]


class SchemaError(ValueError):
    """Schema-level validation failure (shape, names, union membership, redefinitions)."""


class InvalidInputSchemaKind(SchemaError):
    """Delta-schema derivation was called on a schema that is not a record."""


class MissingFieldDefault(SchemaError):
    """A source record field lacks a default value, so no delta schema can be built."""


class AmbiguousUnionCollections(SchemaError):
    """A union under inspection contains more than one collection-typed (array/map) member."""


class UnclassifiableDelta(ValueError):
    """A decoded delta value matches none of the operation markers or original field types."""


class DatumError(ValueError):
    """A JSON-encoded datum does not conform to the schema it is decoded against."""

"""
Canonical delta-protocol grammar and naming helpers.

Defines the schema kinds of the host representation, the closed set of delta
operations, and zero-IO helpers for names and full names.

Design principles
-----------------
1) One naming standard:
   - Enum classes: PascalCase
   - Enum member names: UPPER_SNAKE (Python constants)
   - Enum serialized values: lower_snake
   - Wire names of marker records keep the protocol spelling (``NoOp``, ``DelOp``,
     ``ListOps``, ``MapOps``); see ``deltaschema.core.constants``.

2) Naming is pure string formatting:
   - Collection-operation record names are ``<enclosing><Suffix>`` when an
     enclosing (field or schema) name is known, else the bare suffix.
   - No registry or global state is involved.

Examples
--------
>>> from deltaschema.core.grammar import OperationKind, operation_type_name
>>> operation_type_name(OperationKind.LIST_OPS, "tags")
'tagsListOps'
>>> operation_type_name(OperationKind.MAP_OPS, None)
'MapOps'
>>> OperationKind.NO_OP.wire_name
'NoOp'
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Final

from .constants import DEL_OP_NAME, LIST_OPS_SUFFIX, MAP_OPS_SUFFIX, NO_OP_NAME
from .errors import SchemaError

__all__ = [
    "SchemaKind",
    "OperationKind",
    "PRIMITIVE_TYPES",
    "NAMED_KINDS",
    "COLLECTION_KINDS",
    "is_valid_name",
    "assert_valid_name",
    "split_fullname",
    "make_fullname",
    "operation_type_name",
]


class SchemaKind(str, Enum):
    """Kinds of the host schema representation (tag of the schema variant)."""

    NULL = "null"
    BOOLEAN = "boolean"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BYTES = "bytes"
    STRING = "string"
    ENUM = "enum"
    FIXED = "fixed"
    RECORD = "record"
    ARRAY = "array"
    MAP = "map"
    UNION = "union"


class OperationKind(str, Enum):
    """
    Closed set of delta operations recognized by the classifier.

    Members:
        NO_OP: Leave the field unchanged.
        PUT_NEW_FIELD: Replace the field with the carried value.
        LIST_OPS: Add (``setUnion``) and remove (``setDiff``) array elements.
        MAP_OPS: Upsert (``mapUnion``) and delete (``mapDiff``) map entries.
        DEL_RECORD_OP: Delete the whole stored value (top level only).
    """

    NO_OP = "no_op"
    PUT_NEW_FIELD = "put_new_field"
    LIST_OPS = "list_ops"
    MAP_OPS = "map_ops"
    DEL_RECORD_OP = "del_record_op"

    @property
    def wire_name(self) -> str:
        """Marker record name (or name suffix) carried on the wire for this operation."""
        return _WIRE_NAMES[self]


_WIRE_NAMES: Final[dict[OperationKind, str]] = {
    OperationKind.NO_OP: NO_OP_NAME,
    OperationKind.PUT_NEW_FIELD: "",
    OperationKind.LIST_OPS: LIST_OPS_SUFFIX,
    OperationKind.MAP_OPS: MAP_OPS_SUFFIX,
    OperationKind.DEL_RECORD_OP: DEL_OP_NAME,
}

PRIMITIVE_TYPES: Final[frozenset[str]] = frozenset(
    {"null", "boolean", "int", "long", "float", "double", "bytes", "string"}
)

NAMED_KINDS: Final[frozenset[SchemaKind]] = frozenset(
    {SchemaKind.RECORD, SchemaKind.ENUM, SchemaKind.FIXED}
)

COLLECTION_KINDS: Final[frozenset[SchemaKind]] = frozenset({SchemaKind.ARRAY, SchemaKind.MAP})

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def is_valid_name(name: str) -> bool:
    """Return True if ``name`` is a simple (undotted) schema name."""
    return bool(_NAME_RE.match(name))


def assert_valid_name(name: str) -> str:
    """
    Validate a simple schema name and return it unchanged.

    Raises:
        SchemaError: If ``name`` is empty or contains characters outside [A-Za-z0-9_],
            or starts with a digit.
    """
    if not isinstance(name, str) or not is_valid_name(name):
        raise SchemaError(f"invalid schema name: {name!r}")
    return name


def split_fullname(name: str, namespace: str | None) -> tuple[str, str | None]:
    """
    Split a possibly dotted name into (simple name, namespace).

    A dotted name carries its own namespace and ignores ``namespace``; an
    empty namespace is normalized to None.

    Examples:
        >>> split_fullname("com.acme.User", "ignored")
        ('User', 'com.acme')
        >>> split_fullname("User", "com.acme")
        ('User', 'com.acme')
    """
    if "." in name:
        ns, _, simple = name.rpartition(".")
        return simple, ns or None
    return name, namespace or None


def make_fullname(name: str, namespace: str | None) -> str:
    return f"{namespace}.{name}" if namespace else name


def operation_type_name(operation: OperationKind, enclosing_name: str | None) -> str:
    """
    Build the record name of a collection-operation type.

    Args:
        operation (OperationKind): LIST_OPS or MAP_OPS.
        enclosing_name (str | None): Field or schema name qualifying the operation record.

    Returns:
        str: ``<enclosing_name><Suffix>`` or the bare suffix when no name is known.

    Raises:
        ValueError: If ``operation`` is not a collection operation.

    Notes:
        Two identically named operation records with different element types in one
        namespace would be a definition conflict; qualifying by field name avoids it
        for records carrying several collection fields.
    """
    if operation not in (OperationKind.LIST_OPS, OperationKind.MAP_OPS):
        raise ValueError(f"not a collection operation: {operation!r}")
    if enclosing_name is None:
        return operation.wire_name
    return enclosing_name + operation.wire_name

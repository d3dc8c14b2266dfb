"""
Schema and update files.

Overview
- read_schema_file(): parse a JSON schema file (``.avsc``-style) into a schema tree.
- write_schema_file(): serialize a schema tree and write it atomically.
- read_update_records(): decode a JSON-lines file of update records against a
  delta schema, one decoded value per non-blank line.

Source of truth
- Schema models and JSON form come from deltaschema.core.schema / deltaschema.core.serde.
- Decoding rules (union encoding, defaults) come from deltaschema.core.datum.

Notes
- JSON/parse errors surface as IoSchemaFileError with the offending path (and line);
  schema-level problems keep their deltaschema.core error types.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterator
from typing import Any

from deltaschema.core.datum import read_json_datum
from deltaschema.core.schema import Schema
from deltaschema.core.serde import parse_schema, schema_to_json_str
from deltaschema.logging import get_logger

from .errors import IoSchemaFileError
from .fs import write_text_atomic

__all__ = [
    "read_schema_file",
    "write_schema_file",
    "read_update_records",
]

logger = get_logger(__name__)


def _read_text(path: str | os.PathLike[str]) -> str:
    try:
        with open(path, encoding="utf-8") as fh:
            return fh.read()
    except OSError as exc:
        raise IoSchemaFileError(f"cannot read {os.fspath(path)!r}: {exc}") from exc


def read_schema_file(path: str | os.PathLike[str]) -> Schema:
    """
    Read and parse a JSON schema file.

    Args:
        path: Path to a file holding the schema's JSON form.

    Returns:
        Schema: Parsed schema tree.

    Raises:
        IoSchemaFileError: If the file is missing, unreadable, or not valid JSON.
        SchemaError: If the JSON is not a well-formed schema.
    """
    text = _read_text(path)
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as exc:
        raise IoSchemaFileError(f"{os.fspath(path)!r} is not valid JSON: {exc}") from exc
    schema = parse_schema(obj)
    logger.debug("schema_file_read", path=os.fspath(path), kind=schema.kind.value)
    return schema


def write_schema_file(schema: Schema, path: str | os.PathLike[str], *, indent: int = 2) -> str:
    """
    Serialize ``schema`` and write it atomically to ``path``.

    Args:
        schema (Schema): Schema tree to write.
        path: Destination path.
        indent (int): JSON indentation; 0 writes compact canonical JSON.

    Returns:
        str: The destination path.

    Raises:
        SchemaError: If the schema cannot be serialized (named-type conflict).
        IoWriteError: If the atomic write fails.
    """
    dest = os.fspath(path)
    text = schema_to_json_str(schema, indent=indent) + "\n"
    write_text_atomic(dest, text)
    logger.info("schema_file_written", path=dest, bytes=len(text.encode("utf-8")))
    return dest


def read_update_records(path: str | os.PathLike[str], delta_schema: Schema) -> Iterator[Any]:
    """
    Decode a JSON-lines file of update records against ``delta_schema``.

    Args:
        path: JSON-lines file; blank lines are skipped.
        delta_schema (Schema): Derived top-level delta schema (``[<Name>WriteOpRecord, DelOp]``).

    Yields:
        Any: Decoded values (GenericRecord instances for the derived union).

    Raises:
        IoSchemaFileError: If the file cannot be read or a line is not valid JSON.
        DatumError: If a line does not conform to ``delta_schema``.
    """
    text = _read_text(path)
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError as exc:
            raise IoSchemaFileError(f"{os.fspath(path)}:{lineno}: invalid JSON: {exc}") from exc
        yield read_json_datum(delta_schema, obj)

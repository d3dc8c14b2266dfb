"""
Polars reports over decoded update records.

Overview
- operations_frame(): one row per (record_index, field, operation) for a stream of
  decoded delta values. A whole-value delete yields a single row with a null field.
- operation_counts(): row counts per (field, operation).

Columns
- record_index (i64): Position of the update record in its stream.
- field (str, nullable): Field name; null for whole-value deletes.
- operation (str): OperationKind value (lower_snake), e.g. "list_ops".

Notes
- Classification is delegated to deltaschema.derive; this module only tabulates.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import polars as pl

from deltaschema.core.grammar import OperationKind
from deltaschema.derive.classify import field_operations, is_whole_value_delete

__all__ = [
    "OPERATIONS_SCHEMA",
    "operations_frame",
    "operation_counts",
]

OPERATIONS_SCHEMA: dict[str, Any] = {
    "record_index": pl.Int64,
    "field": pl.Utf8,
    "operation": pl.Utf8,
}


def operations_frame(records: Iterable[Any], *, strict: bool = False) -> pl.DataFrame:
    """
    Tabulate the operation of every field of every decoded update record.

    Args:
        records (Iterable[Any]): Decoded top-level delta values.
        strict (bool): Check replacement values against each field's delta type.

    Returns:
        pl.DataFrame: Columns per OPERATIONS_SCHEMA, in record then field order.

    Raises:
        UnclassifiableDelta: In strict mode, on a value that matches no member.
    """
    idx: list[int] = []
    fields: list[str | None] = []
    ops: list[str] = []
    for i, rec in enumerate(records):
        if is_whole_value_delete(rec):
            idx.append(i)
            fields.append(None)
            ops.append(OperationKind.DEL_RECORD_OP.value)
            continue
        for name, op in field_operations(rec, strict=strict).items():
            idx.append(i)
            fields.append(name)
            ops.append(op.value)
    return pl.DataFrame(
        {"record_index": idx, "field": fields, "operation": ops},
        schema=OPERATIONS_SCHEMA,
    )


def operation_counts(frame: pl.DataFrame, *, skip_no_op: bool = False) -> pl.DataFrame:
    """
    Count rows per (field, operation).

    Args:
        frame (pl.DataFrame): Output of operations_frame().
        skip_no_op (bool): Drop "no_op" rows before counting.

    Returns:
        pl.DataFrame: Columns field, operation, count (u32), sorted by field then operation
        with whole-value deletes (null field) first.
    """
    if skip_no_op:
        frame = frame.filter(pl.col("operation") != OperationKind.NO_OP.value)
    return (
        frame.group_by(["field", "operation"])
        .agg(pl.len().alias("count"))
        .sort(["field", "operation"], nulls_last=False)
    )

"""
Wire-level names of the delta (partial-update) protocol.

Defines the marker record names, collection-operation suffixes, and the field
names of the collection-operation records. This module is zero-IO and uses only
the Python standard library.

Notes:
    - These names are a backward-compatibility contract shared by every producer
      and consumer of delta records. Renaming any of them breaks classification of
      records written by older producers.
    - Collection-operation record names are field-qualified
      (``<fieldName>ListOps``), so consumers match them by suffix.
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "NO_OP_NAME",
    "DEL_OP_NAME",
    "LIST_OPS_SUFFIX",
    "MAP_OPS_SUFFIX",
    "DELTA_RECORD_SUFFIX",
    "SET_UNION",
    "SET_DIFF",
    "MAP_UNION",
    "MAP_DIFF",
]

# Marker records (empty records used purely as tags).
NO_OP_NAME: Final[str] = "NoOp"
DEL_OP_NAME: Final[str] = "DelOp"

# Collection-operation record names/suffixes.
LIST_OPS_SUFFIX: Final[str] = "ListOps"
MAP_OPS_SUFFIX: Final[str] = "MapOps"

# Appended to the source record name so the derived record never collides with it.
DELTA_RECORD_SUFFIX: Final[str] = "WriteOpRecord"

# Field names of the collection-operation records. Consumed downstream; never rename.
SET_UNION: Final[str] = "setUnion"
SET_DIFF: Final[str] = "setDiff"
MAP_UNION: Final[str] = "mapUnion"
MAP_DIFF: Final[str] = "mapDiff"

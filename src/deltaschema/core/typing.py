"""
Lightweight typing aliases used across core schemas and serde.

Provides minimal aliases to improve readability and static checks.
This module contains no runtime logic and is zero-IO.

Examples:
    >>> from deltaschema.core.typing import JsonDict
    >>> def payload() -> JsonDict:
    ...     return {"type": "record", "name": "User", "fields": []}
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "JsonDict",
    "SchemaJson",
]

# Convenient JSON-like mapping alias. Kept intentionally broad for serde boundaries.
JsonDict = dict[str, Any]

# Any JSON form a schema may take: a type name, a definition object, or a union list.
SchemaJson = str | JsonDict | list[Any]

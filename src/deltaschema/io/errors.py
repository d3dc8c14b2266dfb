"""
Custom exceptions for the deltaschema.io module.

Purpose
- Provide IO-layer specific error types that map cleanly to responsibilities in deltaschema.io.
- Keep deltaschema.core as the source of truth for schema/derivation/datum errors
  (see deltaschema.core.errors).

Source of truth and boundaries
- deltaschema.core.errors.SchemaError (and subclasses) are raised by parsing and derivation.
- deltaschema.io raises Io* errors for filesystem/config concerns:
  - IoConfigError: invalid or unsupported configuration.
  - IoSchemaFileError: a schema or update file is missing or unreadable.
  - IoWriteError: atomic write path failed (tmp write/fsync/rename).

Notes
- These exceptions do not perform any IO and are stdlib-only.
"""

from __future__ import annotations


class IoError(Exception):
    """
    Base class for IO-related errors in deltaschema.io.

    Notes:
        Use this as a catch-all for IO-layer failures, distinct from deltaschema.core errors.
    """


class IoConfigError(IoError):
    """
    Raised when configuration is invalid or unsupported.

    Examples:
        - Non-integer DELTASCHEMA_INDENT
        - Unknown log level
    """


class IoSchemaFileError(IoError):
    """Raised when a schema or update file cannot be read or is not valid JSON."""


class IoWriteError(IoError):
    """
    Raised when a write fails to complete atomically.

    Notes:
        The write path is tmp file → fsync → os.replace(tmp, final). Failures at any step
        surface as IoWriteError (with best-effort cleanup of the tmp file).
    """

"""
Filesystem helpers for deltaschema.io (file protocol baseline).

Responsibilities
- Provide a minimal stdlib-only abstraction for the filesystem operations used by
  deltaschema.io: directory creation, fsync, and atomic text writes.
- Establish clear semantics for the atomic write path: tmp write → fsync → atomic rename.

Notes
- Atomicity via os.replace is guaranteed only when src and dst reside on the same filesystem;
  the tmp file is therefore created next to its destination.
"""

from __future__ import annotations

import os
from typing import BinaryIO

from .errors import IoWriteError


def makedirs(path: str, exist_ok: bool = True) -> None:
    """Create directories recursively (no-op for an empty path)."""
    if path:
        os.makedirs(path, exist_ok=exist_ok)


def fsync_file(fh: BinaryIO) -> None:
    """
    Flush and fsync an open file handle.

    Notes:
        Ensures file contents reach the storage device (subject to OS/filesystem semantics).
    """
    fh.flush()
    os.fsync(fh.fileno())


def write_text_atomic(path: str, text: str) -> None:
    """
    Write ``text`` (UTF-8) to ``path`` atomically.

    Args:
        path (str): Final destination path.
        text (str): Content to write.

    Raises:
        IoWriteError: If writing, syncing, or renaming fails. The tmp file is removed.
    """
    makedirs(os.path.dirname(path))
    tmp = f"{path}.tmp"
    try:
        with open(tmp, "wb") as fh:
            fh.write(text.encode("utf-8"))
            fsync_file(fh)
        os.replace(tmp, path)
    except OSError as exc:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise IoWriteError(f"failed to write {path!r}: {exc}") from exc

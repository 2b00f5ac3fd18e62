# pkgconnector/core/hashing.py
from __future__ import annotations

import hashlib
from pathlib import Path

__all__ = ["fileStateHash"]



def fileStateHash(path: str | Path) -> str | None:
    """
    Returns a SHA-256 hex digest over the file's size and modification time,
    or None if the file does not exist.

    Content is not read: a rewrite that keeps both size and mtime (within the
    filesystem's timestamp granularity) yields the same digest.
    """
    path = Path(path)
    if not path.is_file():
        return None

    stat = path.stat()
    sha = hashlib.sha256()
    sha.update(str(stat.st_size).encode("utf-8"))
    sha.update(str(stat.st_mtime_ns).encode("utf-8"))
    return sha.hexdigest()

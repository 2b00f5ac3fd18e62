# pkgconnector/core/paths.py
from __future__ import annotations

import re
from os import PathLike
from pathlib import Path

__all__ = ["normalizePath", "joinPath"]



_PREFIX_RE = re.compile(r"^([0-9a-z]+:(?://(?:[a-z]:)?)?)", re.IGNORECASE)



def normalizePath(path: str | PathLike[str]) -> str:
    """
    Normalizes a path string.

    Backslashes become slashes, trailing and repeated separators are dropped,
    `.` segments are removed and `..` segments collapse against a preceding
    segment. Leading `..` of a relative path are kept. Scheme or drive
    prefixes (`C:`, `file://`) are preserved.
    """
    text = str(path).replace("\\", "/")
    prefix = ""
    match = _PREFIX_RE.match(text)
    if match:
        prefix = match.group(1)
        text = text[len(prefix):]

    absolute = text.startswith("/")
    if absolute:
        text = text[1:]

    parts: list[str] = []
    for chunk in text.split("/"):
        if chunk in ("", "."):
            continue
        if chunk == ".." and (absolute or (parts and parts[-1] != "..")):
            if parts:
                parts.pop()
            continue
        parts.append(chunk)

    return prefix + ("/" if absolute else "") + "/".join(parts)



def joinPath(*segments: str | PathLike[str]) -> Path:
    """Joins segments with '/' and returns the normalized result as a Path."""
    joined = "/".join(str(seg) for seg in segments if str(seg))
    return Path(normalizePath(joined) or ".")

# pkgconnector/core/dictpath.py
from __future__ import annotations
from typing import Any
from collections.abc import Mapping

__all__ = ["splitPath", "getByPath", "hasPath"]



_SEPARATORS = frozenset("./")
_MISSING = object()



def splitPath(path: str) -> tuple[str, ...]:
    """
    Splits a settings path into keys. Both '.' and '/' separate keys;
    a backslash makes the next character literal.

        "files.manifest"            -> ("files", "manifest")
        "config/github\\.com.token" -> ("config", "github.com", "token")

    Raises:
        ValueError: empty path, empty key, or trailing backslash
    """
    if not isinstance(path, str) or not path:
        raise ValueError("Path must be a non-empty string")

    keys: list[str] = []
    buf: list[str] = []
    chars = iter(path)
    for ch in chars:
        if ch == "\\":
            escaped = next(chars, None)
            if escaped is None:
                raise ValueError(f"Path '{path}' ends with a bare escape")
            buf.append(escaped)
        elif ch in _SEPARATORS:
            keys.append("".join(buf))
            buf.clear()
        else:
            buf.append(ch)
    keys.append("".join(buf))

    if "" in keys:
        raise ValueError(f"Path '{path}' has an empty key")
    return tuple(keys)



def getByPath(obj: Any, path: str, default: Any | None = None) -> Any:
    """
    Walks nested mappings along `path`. Returns `default` when the path is
    malformed or leads through something that is not a mapping. Attributes
    are never read.
    """
    try:
        keys = splitPath(path)
    except ValueError:
        return default

    node: Any = obj
    for key in keys:
        if not isinstance(node, Mapping):
            return default
        node = node.get(key, _MISSING)
        if node is _MISSING:
            return default
    return node



def hasPath(obj: Any, path: str) -> bool:
    return getByPath(obj, path, _MISSING) is not _MISSING

# pkgconnector/core/jsonutils.py
from __future__ import annotations

import json
import math
from collections.abc import Mapping, Iterable
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import PurePath
from typing import Any

from pydantic import BaseModel

__all__ = ["safeJsonDumps", "tryJSONify"]



_DUMP_OPTS: dict[str, Any] = {"ensure_ascii": False, "allow_nan": False, "separators": (",", ":")}



def safeJsonDumps(obj: object | BaseModel) -> str:
    """
    Compact JSON for snapshots and log records.

    Pydantic models go through `model_dump(mode="json")`. Anything the json
    module rejects (paths, records, cycles) is converted with tryJSONify
    first, so log formatting never raises.
    """
    payload = obj.model_dump(mode="json") if isinstance(obj, BaseModel) else obj
    try:
        return json.dumps(payload, **_DUMP_OPTS)
    except (TypeError, ValueError):
        return json.dumps(tryJSONify(payload, _maxDepth=None), **_DUMP_OPTS)



def tryJSONify(obj: Any, *, _seen: frozenset[int] = frozenset(), _depth: int = 0, _maxDepth: int | None = 10) -> Any:
    """
    Best-effort conversion to JSON-compatible values.

    Paths and datetimes become strings, enums their value, models and
    dataclasses dicts, other iterables lists. Cycles and nesting beyond
    `_maxDepth` are replaced by a marker string; unknown objects by repr().
    """
    if obj is None or isinstance(obj, (bool, int, str)):
        return obj
    if isinstance(obj, float):
        return obj if math.isfinite(obj) else str(obj)
    if isinstance(obj, (PurePath, date, datetime)):
        return obj.isoformat() if isinstance(obj, date) else str(obj)
    if isinstance(obj, Enum):
        return tryJSONify(obj.value, _seen=_seen, _depth=_depth, _maxDepth=_maxDepth)
    if isinstance(obj, BaseException):
        return {"type": type(obj).__name__, "message": str(obj)}

    if id(obj) in _seen:
        return f"<circular_ref {type(obj).__name__}>"
    if _maxDepth is not None and _depth > _maxDepth:
        return f"<max_depth_exceeded {type(obj).__name__}>"
    seen = _seen | {id(obj)}

    def _child(value: Any) -> Any:
        return tryJSONify(value, _seen=seen, _depth=_depth + 1, _maxDepth=_maxDepth)

    if isinstance(obj, BaseModel):
        return {key: _child(value) for key, value in obj.model_dump().items()}
    if is_dataclass(obj) and not isinstance(obj, type):
        # asdict() deep-copies and fails on mappingproxy fields
        return {f.name: _child(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, Mapping):
        return {str(key): _child(value) for key, value in obj.items()}
    if isinstance(obj, Iterable) and not isinstance(obj, (bytes, bytearray)):
        return [_child(value) for value in obj]
    return repr(obj)

# pkgconnector/core/logging/context.py
from __future__ import annotations
import contextvars
from typing import Any

__all__ = ["setLogContext", "clearLogContext", "getLogContext"]

# Values a host attaches around one request (basePath, requestId, ...)
_logContext: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar("pkgconnector.logctx", default=None)



def setLogContext(**values: Any) -> None:
    """Adds values to the current log context; None values are skipped."""
    merged = {**(_logContext.get() or {}), **{k: v for k, v in values.items() if v is not None}}
    _logContext.set(merged)



def clearLogContext() -> None:
    _logContext.set(None)



def getLogContext() -> dict[str, Any] | None:
    return _logContext.get()

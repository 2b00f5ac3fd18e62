# pkgconnector/core/logging/formatters.py
from __future__ import annotations

import logging
from typing import Any

from pkgconnector.core.jsonutils import safeJsonDumps
from pkgconnector.core.redaction import redactText
from .context import getLogContext

__all__ = ["RedactingFormatter", "JsonFormatter", "DevFormatter"]

# Context keys shown inline by DevFormatter, in this order
_DEV_CONTEXT_KEYS = ("requestId", "basePath")



class RedactingFormatter(logging.Formatter):
    """Scrubs credentials from whatever the wrapped formatter produced."""

    def __init__(self, inner: logging.Formatter) -> None:
        super().__init__()
        self._inner = inner

    def format(self, record: logging.LogRecord) -> str:
        return redactText(self._inner.format(record))



class JsonFormatter(logging.Formatter):
    """One JSON object per line, for the rotating log file."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": int(record.created * 1000),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
            "ctx": getLogContext() or {},
            "proc": {"pid": record.process, "name": record.processName},
        }
        if record.exc_info and record.exc_info[1] is not None:
            err = record.exc_info[1]
            payload["exc"] = {
                "type": type(err).__name__,
                "message": str(err),
                "stack": self.formatException(record.exc_info),
            }
        return safeJsonDumps(payload)



class DevFormatter(logging.Formatter):
    """`LEVEL: [logger] message [requestId/basePath]` for the console."""

    def format(self, record: logging.LogRecord) -> str:
        text = record.getMessage()
        extras = [self.formatException(record.exc_info)] if record.exc_info else []
        if record.stack_info:
            extras.append(record.stack_info)
        if extras:
            text = "\n".join([text, *extras])

        ctx = getLogContext() or {}
        shown = [str(ctx[key]) for key in _DEV_CONTEXT_KEYS if ctx.get(key)]
        suffix = f" [{'/'.join(shown)}]" if shown else ""
        return f"{record.levelname}: [{record.name}] {text}{suffix}"

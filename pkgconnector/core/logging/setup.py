# pkgconnector/core/logging/setup.py
from __future__ import annotations
import logging
import logging.handlers

from pkgconnector.app.settings import settings, settingsBool
from .formatters import DevFormatter, JsonFormatter, RedactingFormatter

__all__ = ["LIBRARY_LOGGER", "configureLogging"]



LIBRARY_LOGGER = "pkgconnector"



def configureLogging(*, level: int | None = None) -> logging.Logger:
    """
    Configures the library's logger tree (not the root logger).

    Dev:
      - Console pretty logs (DEBUG)
    Prod:
      - Console INFO
    Both:
      - JSON file log with rotation when `logging.file` is set
      - Credential scrubbing when `logging.redact` is on (default)
    """
    devMode = settingsBool("logging.devMode", True)
    rootLevel = level if level is not None else (logging.DEBUG if devMode else logging.INFO)
    redact = settingsBool("logging.redact", True)

    logger = logging.getLogger(LIBRARY_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(rootLevel)
    logger.propagate = False

    devFmt: logging.Formatter = DevFormatter()
    jsonFmt: logging.Formatter = JsonFormatter()
    if redact:
        devFmt = RedactingFormatter(devFmt)
        jsonFmt = RedactingFormatter(jsonFmt)

    consoleHandler = logging.StreamHandler()
    consoleHandler.setLevel(rootLevel)
    consoleHandler.setFormatter(devFmt)
    logger.addHandler(consoleHandler)

    logFile = settings("logging.file")
    if logFile:
        fileHandler = logging.handlers.RotatingFileHandler(
            str(logFile),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        fileHandler.setLevel(rootLevel)
        fileHandler.setFormatter(jsonFmt)
        logger.addHandler(fileHandler)

    return logger

# pkgconnector/core/jsonfile.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pkgconnector.core.errors import EncodingError, JsonSyntaxError, NotFoundError, UnreadableFileError

__all__ = ["readJsonFile", "parseJson"]



def parseJson(text: str, file: str | Path | None = None) -> Any:
    """
    Parses a JSON document.

    Raises:
        JsonSyntaxError: with the parser's message and position as `msg`.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as err:
        raise JsonSyntaxError(file=str(file) if file is not None else "", msg=str(err)) from err



def readJsonFile(path: str | Path) -> Any:
    """
    Reads and parses a UTF-8 JSON file.

    Raises:
        NotFoundError: file is missing or empty
        UnreadableFileError: the OS refused the read (permissions, I/O error)
        EncodingError: content is not valid UTF-8
        JsonSyntaxError: content is not valid JSON
    """
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(str(path))

    try:
        raw = path.read_bytes()
    except FileNotFoundError as err:
        raise NotFoundError(str(path)) from err
    except OSError as err:
        raise UnreadableFileError(str(path), err.strerror or type(err).__name__) from err
    if not raw.strip():
        raise NotFoundError(str(path))

    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as err:
        raise EncodingError(str(path)) from err

    return parseJson(text, path)

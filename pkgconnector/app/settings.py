# pkgconnector/app/settings.py
from __future__ import annotations
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

import json5
from pydantic import JsonValue

from pkgconnector.core.dictpath import getByPath

import logging
logger = logging.getLogger(__name__)

__all__ = [
    "SETTINGS", "SETTINGS_ENV_VAR", "userSettingsPath", "loadUserSettings",
    "loadSettings", "reloadSettings", "deepMerge", "settings", "settingsBool",
]


SETTINGS_ENV_VAR = "PKGCONNECTOR_SETTINGS"
DEFAULT_USER_SETTINGS = "~/.pkgconnector/settings.json5"

SETTINGS: JsonValue = {
    "__source": "PKGCONNECTOR_DEFAULTS",
    "files": {"manifest": "composer.json", "lock": "composer.lock"},
    "vendor": {"defaultDir": "vendor"},
    "autoload": {"fileName": "autoload.php"},
    "errors": {"stackSize": 5},
    "packageTypes": {
        "plugin": ["cotonti-siena-plugin"],
        "module": ["cotonti-siena-module"],
        "theme": ["cotonti-siena-theme"],
    },
    "logging": {"devMode": True, "file": None, "redact": True},
}



def userSettingsPath() -> Path:
    return Path(os.environ.get(SETTINGS_ENV_VAR) or DEFAULT_USER_SETTINGS).expanduser()



def loadUserSettings() -> JsonValue:
    """
    Reads the user's json5 settings file. A missing file is normal; a broken
    one is logged and ignored so the shipped defaults still apply.
    """
    filePath = userSettingsPath()
    if not filePath.is_file():
        return {}
    try:
        loaded = json5.loads(filePath.read_text(encoding="utf-8"))
    except (ValueError, OSError) as err:
        logger.error("Failed to parse '%s': %s", filePath, err)
        return {}
    if not isinstance(loaded, dict):
        logger.error("Ignoring '%s': top level must be an object", filePath)
        return {}
    return cast(JsonValue, loaded)



@lru_cache(maxsize=1)
def loadSettings() -> JsonValue:
    return deepMerge(SETTINGS, loadUserSettings())



def reloadSettings() -> JsonValue:
    """Drops the cached merge so the next read picks up user file changes."""
    loadSettings.cache_clear()
    return loadSettings()



def deepMerge(first: JsonValue, second: JsonValue) -> JsonValue:
    """
    Overlays `second` on `first` without mutating either. Objects merge key
    by key; any other value in `second` (lists included) replaces the one in
    `first` wholesale.
    """
    if not (isinstance(first, dict) and isinstance(second, dict)):
        return second

    merged: dict[str, JsonValue] = dict(first)
    for key, value in second.items():
        merged[key] = deepMerge(merged[key], value) if key in merged else value
    return cast(JsonValue, merged)

# ---------- Accessors ----------

def settings(path: str, default: Any = None) -> Any:
    """Value at dotted `path` (`files.lock`), or `default` when unset or null."""
    value = getByPath(loadSettings(), path)
    return default if value is None else value



def settingsBool(path: str, default: bool = False) -> bool:
    value = settings(path)
    return default if value is None else bool(value)

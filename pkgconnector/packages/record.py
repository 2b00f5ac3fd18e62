# pkgconnector/packages/record.py
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field as dataclassField
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

from pkgconnector.core.naming import toComposerKey

__all__ = ["PackageRecord", "splitName", "isFullName", "parseInstallTime"]



_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)

# `06:08:09+0200` -> `06:08:09+02:00`; fromisoformat() only takes the compact form from 3.11
_COMPACT_OFFSET_RE = re.compile(r"(\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?)([+-]\d{2})(\d{2})$")



def isFullName(packageName: str) -> bool:
    """True for `vendor/package` names (a '/' past the first character)."""
    return packageName.find("/") > 0



def splitName(packageName: str) -> tuple[str, str | None]:
    """Splits `vendor/package` on the first '/'. Names without '/' yield (name, None)."""
    vendor, sep, package = packageName.partition("/")
    if not sep:
        return packageName, None
    return vendor, package



def parseInstallTime(value: Any) -> datetime | None:
    """
    Parses a lock file `time` value (`2015-07-15 06:08:09`,
    `2015-06-17T01:01:01+00:00`, `2015-11-01`, ...). Naive times are taken
    as UTC. Returns None for missing or unparseable values.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _COMPACT_OFFSET_RE.sub(r"\1\2:\3", text)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed



@dataclass(frozen=True, slots=True)
class PackageRecord:
    """
    One installed package from the lock file's `packages` list.

    The well-known fields are lifted out of the raw entry; the entry itself
    is kept verbatim in `data` for field lookups (description, homepage,
    notification-url, ...).
    """
    fullName: str
    version: str
    type: str
    time: str | None
    installedAt: datetime | None
    data: Mapping[str, Any] = dataclassField(default_factory=dict, compare=False, repr=False)

    @classmethod
    def fromLockEntry(cls, entry: Mapping[str, Any]) -> PackageRecord:
        """
        Raises:
            ValueError: entry is not an object or has no string `name`
        """
        if not isinstance(entry, Mapping):
            raise ValueError(f"Package entry must be an object, not '{type(entry).__name__}'")
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"Package entry has no name: {dict(entry)!r}")
        timeRaw = entry.get("time")
        return cls(
            fullName=name.strip(),
            version=str(entry.get("version") or ""),
            type=str(entry.get("type") or ""),
            time=timeRaw if isinstance(timeRaw, str) else None,
            installedAt=parseInstallTime(timeRaw),
            data=MappingProxyType(dict(entry)),
        )

    # ----- Derived names -----

    @property
    def vendor(self) -> str:
        return splitName(self.fullName)[0]

    @property
    def shortName(self) -> str | None:
        return splitName(self.fullName)[1]

    @property
    def sortKey(self) -> datetime:
        return self.installedAt or _EARLIEST

    # ----- Field bag -----

    def field(self, key: str) -> Any | None:
        """
        Returns a raw entry field, or None when absent. `key` may be given in
        camelCase (`notificationUrl`) or in the file's own form (`notification-url`).
        """
        if key in self.data:
            return self.data[key]
        return self.data.get(toComposerKey(key))

    def toDict(self) -> dict[str, Any]:
        return dict(self.data)

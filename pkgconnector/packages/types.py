# pkgconnector/packages/types.py
from __future__ import annotations

from collections.abc import Mapping, Iterable
from dataclasses import dataclass
from enum import IntFlag

from pkgconnector.app.settings import settings

__all__ = [
    "PackageTypeFlag",
    "ExactType",
    "TypeFlags",
    "TypeFilter",
    "TypeFilterLike",
    "DEFAULT_PACKAGE_TYPES",
    "normalizeCategories",
    "packageTypeCategories",
    "coerceTypeFilter",
    "isType",
]



class PackageTypeFlag(IntFlag):
    PLUGIN = 1
    MODULE = 2
    THEME = 4
    # Native Composer types and anything unrecognized
    OTHER = 64
    ALL = 255



DEFAULT_PACKAGE_TYPES: dict[PackageTypeFlag, frozenset[str]] = {
    PackageTypeFlag.PLUGIN: frozenset({"cotonti-siena-plugin"}),
    PackageTypeFlag.MODULE: frozenset({"cotonti-siena-module"}),
    PackageTypeFlag.THEME: frozenset({"cotonti-siena-theme"}),
}



@dataclass(frozen=True, slots=True)
class ExactType:
    """Matches a single type string, case-insensitively."""
    type: str



@dataclass(frozen=True, slots=True)
class TypeFlags:
    """Matches any type belonging to a category whose bit is set."""
    mask: int



TypeFilter = ExactType | TypeFlags | None
TypeFilterLike = TypeFilter | str | int



def normalizeCategories(categories: Mapping[PackageTypeFlag, Iterable[str]]) -> dict[PackageTypeFlag, frozenset[str]]:
    """Lowercased type strings per category, ready for isType()."""
    return {PackageTypeFlag(flag): frozenset(str(value).lower() for value in values) for flag, values in categories.items()}



def packageTypeCategories() -> dict[PackageTypeFlag, frozenset[str]]:
    """
    Category -> recognized type strings, from `packageTypes.<flag name>` settings.
    Categories missing from settings fall back to the built-in defaults.
    """
    configured = settings("packageTypes", {})
    result: dict[PackageTypeFlag, Iterable[str]] = {}
    for flag, defaults in DEFAULT_PACKAGE_TYPES.items():
        values = configured.get(flag.name.lower()) if isinstance(configured, Mapping) else None
        if isinstance(values, Iterable) and not isinstance(values, (str, bytes)):
            result[flag] = values
        else:
            result[flag] = defaults
    return normalizeCategories(result)



def coerceTypeFilter(value: TypeFilterLike) -> TypeFilter:
    """
    Builds a TypeFilter from the loose forms accepted by the public API:
    None/""/0 -> no filter, str -> ExactType, int/PackageTypeFlag -> TypeFlags.
    """
    if value is None or isinstance(value, (ExactType, TypeFlags)):
        return value
    if isinstance(value, bool):
        raise TypeError("Type filter must be a type string or PackageTypeFlag bitmask, not bool")
    if isinstance(value, str):
        return ExactType(value) if value else None
    if isinstance(value, int):
        return TypeFlags(int(value)) if value else None
    raise TypeError(f"Unsupported type filter {value!r}")



def isType(
    packageType: str | None,
    typeFilter: TypeFilterLike,
    *,
    categories: Mapping[PackageTypeFlag, Iterable[str]] | None = None,
) -> bool:
    """
    Checks whether `packageType` satisfies `typeFilter`.

      - no filter: always matches
      - ExactType: case-insensitive equality
      - TypeFlags: matches when the mask exceeds OTHER, when the type belongs
        to a category whose bit is set, or when the type belongs to no
        category and the OTHER bit is set

    `categories` type strings must already be lowercase (see normalizeCategories).
    """
    filterValue = coerceTypeFilter(typeFilter)
    if filterValue is None:
        return True

    typeNorm = (packageType or "").lower()

    if isinstance(filterValue, ExactType):
        return typeNorm == filterValue.type.lower()

    mask = filterValue.mask
    if mask > PackageTypeFlag.OTHER:
        return True

    if categories is None:
        categories = packageTypeCategories()

    recognized = False
    for flag, allowedTypes in categories.items():
        if typeNorm in allowedTypes:
            recognized = True
            if mask & flag:
                return True

    return not recognized and bool(mask & PackageTypeFlag.OTHER)

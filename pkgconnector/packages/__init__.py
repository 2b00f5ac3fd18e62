# pkgconnector/packages/__init__.py
from .index import PackageIndex, Selection
from .record import PackageRecord, isFullName, splitName, parseInstallTime
from .types import (
    PackageTypeFlag,
    ExactType,
    TypeFlags,
    TypeFilter,
    coerceTypeFilter,
    isType,
)

__all__ = [
    "PackageIndex",
    "Selection",
    "PackageRecord",
    "isFullName",
    "splitName",
    "parseInstallTime",
    "PackageTypeFlag",
    "ExactType",
    "TypeFlags",
    "TypeFilter",
    "coerceTypeFilter",
    "isType",
]

# pkgconnector/packages/index.py
from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pkgconnector.core.error_stack import DEFAULT_MESSAGES, ErrorStack
from pkgconnector.core.errors import NoMatchingPackageError
from pkgconnector.core.naming import toComposerKey
from pkgconnector.packages.record import PackageRecord, isFullName, splitName
from pkgconnector.packages.types import (
    PackageTypeFlag,
    TypeFilter,
    TypeFilterLike,
    coerceTypeFilter,
    isType,
    normalizeCategories,
    packageTypeCategories,
)

logger = logging.getLogger(__name__)

__all__ = ["Selection", "PackageIndex"]



@dataclass(frozen=True, slots=True)
class Selection:
    """Currently selected package plus the query that selected it."""
    record: PackageRecord
    vendor: str
    name: str
    fullName: str
    type: str
    version: str
    queryKey: tuple[str, TypeFilter]



class PackageIndex:
    """
    In-memory index over installed packages.

    Responsibilities:
      - Hold the PackageRecords of one loaded lock file.
      - Index them by short name (the part after `vendor/`), each group
        ordered by install time, oldest first.
      - Resolve short or full names under an optional type filter and keep
        the result as the current selection for field reads.

    Names are compared lowercased on both sides. When several packages share
    a short name, the earliest installed one that passes the type filter wins.
    Type categories come from settings and are read once per initPackagesData().
    """

    def __init__(
        self,
        packagesData: Iterable[PackageRecord | Mapping[str, Any]] | None = None,
        *,
        errors: ErrorStack | None = None,
        categories: Mapping[PackageTypeFlag, Iterable[str]] | None = None,
    ) -> None:
        self.errors = errors if errors is not None else ErrorStack(DEFAULT_MESSAGES)
        self._categories = normalizeCategories(categories) if categories is not None else None
        self._resolvedCategories = self._resolveCategories()
        self._records: list[PackageRecord] = []
        self._byShortName: dict[str, list[PackageRecord]] = {}
        self._selection: Selection | None = None
        self._lastQueryKey: tuple[str, TypeFilter] | None = None
        if packagesData is not None:
            self.initPackagesData(packagesData)

    # ----- Loading -----

    def initPackagesData(self, packagesData: Any) -> bool:
        """
        Replaces the whole package set and rebuilds the short-name index.
        Anything that is not a list of package entries is ignored.
        """
        if not isinstance(packagesData, Sequence) or isinstance(packagesData, (str, bytes)):
            return False

        records: list[PackageRecord] = []
        for entry in packagesData:
            if isinstance(entry, PackageRecord):
                records.append(entry)
                continue
            try:
                records.append(PackageRecord.fromLockEntry(entry))
            except ValueError as err:
                logger.warning("Skipping unusable lock entry: %s", err)

        self._records = records
        self._resolvedCategories = self._resolveCategories()
        self._buildNamesList()
        self.resetSelection()
        self._lastQueryKey = None
        logger.debug(
            "Package index rebuilt: %d packages, %d short names",
            len(self._records),
            len(self._byShortName),
        )
        return True

    def _buildNamesList(self) -> None:
        groups: dict[str, list[PackageRecord]] = defaultdict(list)
        for record in self._records:
            _vendor, shortName = splitName(record.fullName)
            if shortName:
                groups[shortName.lower()].append(record)

        # sorted() is stable, so equal install times keep lock file order
        self._byShortName = {
            shortName: sorted(group, key=lambda rec: rec.sortKey)
            for shortName, group in sorted(groups.items())
        }

    # ----- Read-only views -----

    @property
    def packages(self) -> tuple[PackageRecord, ...]:
        return tuple(self._records)

    @property
    def namesIndex(self) -> dict[str, tuple[PackageRecord, ...]]:
        return {shortName: tuple(group) for shortName, group in self._byShortName.items()}

    def __len__(self) -> int:
        return len(self._records)

    def listPackages(self, typeFilter: TypeFilterLike = None) -> list[PackageRecord]:
        """Records passing `typeFilter`, in lock file order."""
        return [rec for rec in self._records if self.isType(rec.type, typeFilter)]

    # ----- Lookup -----

    def _resolveCategories(self) -> dict[PackageTypeFlag, frozenset[str]]:
        return self._categories if self._categories is not None else packageTypeCategories()

    def isType(self, packageType: str | None, typeFilter: TypeFilterLike = None) -> bool:
        return isType(packageType, typeFilter, categories=self._resolvedCategories)

    def getInfo(self, fullName: str, typeFilter: TypeFilterLike = None) -> PackageRecord | None:
        """First record in lock file order matching the full name and type filter."""
        needle = fullName.lower()
        for record in self._records:
            if record.fullName.lower() == needle and self.isType(record.type, typeFilter):
                return record
        return None

    def isInstalled(self, fullName: str, typeFilter: TypeFilterLike = None) -> bool:
        return self.getInfo(fullName, typeFilter) is not None

    def expandName(self, shortName: str, typeFilter: TypeFilterLike = None) -> str | None:
        """
        Expands a short package name to `vendor/package`.

        Returns None when no installed package with that short name passes
        the type filter.
        """
        group = self._byShortName.get(shortName.lower())
        if not group:
            return None

        # Nothing to disambiguate
        if len(group) == 1 and coerceTypeFilter(typeFilter) is None:
            return group[0].fullName

        for record in group:
            if self.isType(record.type, typeFilter):
                return record.fullName
        return None

    # ----- Selection -----

    def select(self, packageName: str, typeFilter: TypeFilterLike = None, forceReselect: bool = False) -> bool:
        """
        Selects a package by short or full name for further field reads.

        Repeating the last successful query is a no-op unless `forceReselect`
        is set. Any failure clears the selection.
        """
        queryKey = (packageName.lower(), coerceTypeFilter(typeFilter))
        if self._selection is not None and not forceReselect and queryKey == self._lastQueryKey:
            logger.debug("Package %r already selected", packageName)
            return True
        self._lastQueryKey = queryKey

        name = queryKey[0]
        fullName: str | None
        if isFullName(name):
            fullName = name if self.isInstalled(name, typeFilter) else None
        else:
            fullName = self.expandName(name, typeFilter)

        record = self.getInfo(fullName, typeFilter) if fullName else None
        if record is None:
            self.errors.record(NoMatchingPackageError(name=packageName, type=typeFilter))
            self.resetSelection()
            return False

        vendor, shortName = splitName(record.fullName)
        self._selection = Selection(
            record=record,
            vendor=vendor,
            name=shortName or record.fullName,
            fullName=record.fullName,
            type=record.type,
            version=record.version,
            queryKey=queryKey,
        )
        return True

    def resetSelection(self) -> None:
        self._selection = None

    @property
    def selected(self) -> bool:
        return self._selection is not None

    @property
    def selection(self) -> Selection | None:
        return self._selection

    # ----- Selected package fields -----

    @property
    def vendor(self) -> str | None:
        return self._selection.vendor if self._selection else None

    @property
    def name(self) -> str | None:
        return self._selection.name if self._selection else None

    @property
    def fullName(self) -> str | None:
        return self._selection.fullName if self._selection else None

    @property
    def type(self) -> str | None:
        return self._selection.type if self._selection else None

    @property
    def version(self) -> str | None:
        return self._selection.version if self._selection else None

    def getVendor(self) -> str | None:
        return self.vendor

    def getName(self) -> str | None:
        return self.name

    def getFullName(self) -> str | None:
        return self.fullName

    def getType(self) -> str | None:
        return self.type

    def getVersion(self) -> str | None:
        return self.version

    def field(self, propertyName: str) -> Any | None:
        """
        Raw field of the selected package; `notificationUrl` reads
        `notification-url`. None when nothing is selected or the field is absent.
        """
        if self._selection is None:
            return None
        return self._selection.record.field(propertyName)

    def callGetter(self, methodName: str) -> Any | None:
        """Method-style read: `getNotificationUrl` reads `notification-url`."""
        if not methodName.startswith("get") or len(methodName) <= 3:
            return None
        if self._selection is None:
            return None
        return self._selection.record.data.get(toComposerKey(methodName[3:]))

# pkgconnector/connector/connector.py
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Literal, TypeVar

from pydantic import ValidationError

from pkgconnector.app.settings import settings
from pkgconnector.connector.project import ProjectState
from pkgconnector.connector.snapshot import ConnectorSnapshot
from pkgconnector.core.error_stack import DEFAULT_MESSAGES, ErrorStack
from pkgconnector.core.errors import (
    ConnectorError,
    FormatError,
    NoAutoloadError,
    NoInstalledPackagesError,
    NoLockDataError,
    NoPackageError,
    NotInitializedError,
    PackageNotInstalledError,
)
from pkgconnector.core.jsonutils import safeJsonDumps
from pkgconnector.packages.index import PackageIndex
from pkgconnector.packages.record import PackageRecord
from pkgconnector.packages.types import TypeFilterLike

logger = logging.getLogger(__name__)

__all__ = ["PackageConnector"]

T = TypeVar("T")



class PackageConnector:
    """
    Read-only view of the packages Composer installed into a project.

    One instance per request: call setup() with the directory holding
    composer.json, then query it. Failed queries return False/None and leave
    a message retrievable through getLastError().

        connector = PackageConnector()
        if connector.setup("/srv/site"):
            version = connector.isInstalled("components/bootstrap")
            info = connector.package("bootstrap")
            homepage = info.field("homepage")
    """

    def __init__(self, *, messages: Mapping[str, str] | None = None, stackSize: int | None = None) -> None:
        self.errors = ErrorStack(
            DEFAULT_MESSAGES,
            stackSize=stackSize if stackSize is not None else int(settings("errors.stackSize", 5)),
        )
        if messages is not None:
            self.errors.messagesInit(messages)
        self.index = PackageIndex(errors=self.errors)
        self.project = ProjectState(self.index, self.errors)

    # ----- Lifecycle -----

    def setup(self, basePath: str | Path | None = None) -> bool:
        """
        Loads composer.json (and composer.lock when present) from `basePath`,
        the current directory by default. On failure the connector is left
        empty and the reason is on the error stack.
        """
        self.flush()
        return self.project.load(basePath)

    def flush(self) -> None:
        """Resets every piece of loaded state and the error history."""
        self.project.reset()
        self.errors.flushErrors()

    @property
    def setuped(self) -> bool:
        return self.project.files.setuped

    def stateChanged(self) -> bool:
        """True when composer.lock (or composer.json without a lock) changed since setup."""
        return self.project.stateChanged()

    # ----- Derived paths and data -----

    @property
    def basePath(self) -> Path | None:
        return self.project.files.basePath

    @property
    def vendorDir(self) -> Path | None:
        return self.project.files.vendorDir

    @property
    def composerFilePath(self) -> Path | None:
        return self.project.files.composerFilePath

    @property
    def lockFilePath(self) -> Path | None:
        return self.project.files.lockFilePath

    @property
    def autoloadFile(self) -> Path | None:
        return self.project.files.autoloadFile

    @property
    def locked(self) -> bool:
        return self.project.files.locked

    @property
    def stateHash(self) -> str | None:
        return self.project.files.stateHash

    @property
    def config(self) -> dict[str, Any]:
        return dict(self.project.files.storedJson.get("config") or {})

    @property
    def extra(self) -> dict[str, Any]:
        return dict(self.project.files.storedJson.get("extra") or {})

    @property
    def require(self) -> dict[str, str]:
        return dict(self.project.files.storedJson.get("require") or {})

    def getPackagesData(self) -> list[Any] | None:
        return self.project.getPackagesData()

    # ----- Autoloader -----

    def connectAutoloader(self, loader: Callable[[Path], T] | None = None) -> T | Path | Literal[False]:
        """
        Hands Composer's autoload entry point to `loader` and returns its
        result, or returns the entry point path when no loader is given.
        """
        try:
            if not self.setuped:
                raise NotInitializedError()
            autoloadFile = self.project.files.autoloadFile
            if autoloadFile is None:
                vendorDir = self.project.files.vendorDir or Path(".")
                raise NoAutoloadError(str(vendorDir / settings("autoload.fileName", "autoload.php")))
            if not autoloadFile.is_file():
                raise NoAutoloadError(str(autoloadFile))
        except ConnectorError as err:
            self.errors.record(err)
            return False

        if loader is None:
            return autoloadFile
        return loader(autoloadFile)

    # ----- Package queries -----

    def isExists(self, packageName: str, vendorPath: str | Path | None = None) -> bool:
        """
        Checks that `<vendor>/<packageName>/composer.json` exists. Used for
        packages shipped with the host or placed manually, so only that file
        is looked at, not the package's integrity or lock data.
        """
        return self.project.isExists(packageName, vendorPath)

    def isInstalled(self, packageName: str, autoloadCheck: bool = False) -> str | Literal[False]:
        """
        Returns the installed version of `vendor/package`, or False.

        The package directory must exist under the vendor dir and the lock
        data must list it. With `autoloadCheck`, the autoload entry point must
        exist as well.
        """
        try:
            if not self.setuped:
                raise NotInitializedError()
            if not self.isExists(packageName):
                raise NoPackageError(packageName)
            if autoloadCheck:
                autoloadFile = self.project.files.autoloadFile
                if autoloadFile is None or not autoloadFile.is_file():
                    raise NoAutoloadError(str(autoloadFile or self.project.files.vendorDir))
            if self.project.files.lockFilePath is None or not self.locked:
                raise NoLockDataError()
            if not self.getPackagesData():
                raise NoInstalledPackagesError()
            record = self.index.getInfo(packageName)
            if record is None:
                raise PackageNotInstalledError(packageName)
        except ConnectorError as err:
            self.errors.record(err)
            return False
        return record.version

    def listInstalled(self, typeFilter: TypeFilterLike = None) -> list[PackageRecord]:
        """Installed packages passing `typeFilter`, in lock file order."""
        return self.index.listPackages(typeFilter)

    def package(self, packageName: str | None = None, typeFilter: TypeFilterLike = None) -> PackageIndex:
        """Returns the package index, selecting `packageName` first when given."""
        if packageName:
            self.index.select(packageName, typeFilter)
        return self.index

    def select(self, packageName: str, typeFilter: TypeFilterLike = None, forceReselect: bool = False) -> bool:
        return self.index.select(packageName, typeFilter, forceReselect)

    # ----- Errors -----

    def messagesInit(self, messages: Mapping[str, str] | None = None) -> None:
        self.errors.messagesInit(messages)

    def hasErrors(self) -> bool:
        return self.errors.hasErrors()

    def getLastError(self) -> str | None:
        return self.errors.getLastError()

    def getAllErrors(self) -> list[str]:
        return self.errors.getAllErrors()

    # ----- Snapshot -----

    def snapshot(self) -> ConnectorSnapshot:
        return self.project.toSnapshot()

    @classmethod
    def fromSnapshot(cls, snapshot: ConnectorSnapshot, **kwargs: Any) -> PackageConnector:
        connector = cls(**kwargs)
        connector.project.restore(snapshot)
        return connector

    def dumps(self) -> str:
        return safeJsonDumps(self.snapshot())

    @classmethod
    def loads(cls, text: str | bytes, **kwargs: Any) -> PackageConnector:
        """
        Raises:
            FormatError: `text` is not a serialized ConnectorSnapshot
        """
        try:
            snapshot = ConnectorSnapshot.model_validate_json(text)
        except ValidationError as err:
            raise FormatError("<snapshot>") from err
        return cls.fromSnapshot(snapshot, **kwargs)

# pkgconnector/connector/project.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pkgconnector.app.settings import settings
from pkgconnector.connector.manifest import ComposerLock, ComposerManifest
from pkgconnector.connector.snapshot import ConnectorSnapshot
from pkgconnector.core.error_stack import ErrorStack
from pkgconnector.core.errors import ConnectorError, FormatError, InvalidBlockError
from pkgconnector.core.hashing import fileStateHash
from pkgconnector.core.jsonfile import readJsonFile
from pkgconnector.core.paths import joinPath, normalizePath
from pkgconnector.packages.index import PackageIndex

logger = logging.getLogger(__name__)

__all__ = ["ProjectFiles", "ProjectState"]



@dataclass(slots=True)
class ProjectFiles:
    """Everything one successful load derives from a project directory."""
    basePath: Path | None = None
    composerFilePath: Path | None = None
    lockFilePath: Path | None = None
    vendorDir: Path | None = None
    autoloadFile: Path | None = None
    locked: bool = False
    stateHash: str | None = None
    storedJson: dict[str, Any] = field(default_factory=dict)
    storedLock: dict[str, Any] = field(default_factory=dict)
    setuped: bool = False



class ProjectState:
    """
    Loads composer.json / composer.lock from a project directory and tracks
    whether they changed since.

    A load either commits a complete ProjectFiles or leaves the state empty;
    the package list of a locked project is handed to the PackageIndex.
    """

    def __init__(self, index: PackageIndex, errors: ErrorStack) -> None:
        self.index = index
        self.errors = errors
        self.files = ProjectFiles()

    # ----- Loading -----

    def load(self, basePath: str | Path | None = None) -> bool:
        self.reset()
        base = Path(str(basePath)) if basePath else Path(".")
        composerFile = joinPath(base, settings("files.manifest", "composer.json"))

        try:
            files = self._loadFiles(base, composerFile)
        except ConnectorError as err:
            self.errors.record(err)
            self.reset()
            return False

        self.files = files
        packages = files.storedLock.get("packages")
        if files.locked:
            self.index.initPackagesData(packages)
        logger.info(
            "Composer project loaded from '%s': locked=%s, %d packages",
            base,
            files.locked,
            len(packages) if isinstance(packages, list) else 0,
        )
        return True

    def _loadFiles(self, base: Path, composerFile: Path) -> ProjectFiles:
        """
        Raises:
            ConnectorError: manifest is missing, unreadable or not a non-empty object
        """
        rawJson = readJsonFile(composerFile)
        if not isinstance(rawJson, dict) or not rawJson:
            raise FormatError(str(composerFile))
        manifest, droppedBlocks = ComposerManifest.fromRaw(rawJson)
        for block in droppedBlocks:
            self.errors.record(InvalidBlockError(block=block, file=str(composerFile)))

        vendorDirName = manifest.vendorDir or settings("vendor.defaultDir", "vendor")
        if Path(vendorDirName).is_absolute():
            vendorDir = Path(normalizePath(vendorDirName))
        else:
            vendorDir = joinPath(base, vendorDirName)

        autoloadFile = joinPath(vendorDir, settings("autoload.fileName", "autoload.php"))

        files = ProjectFiles(
            basePath=base,
            composerFilePath=composerFile,
            vendorDir=vendorDir,
            autoloadFile=autoloadFile if autoloadFile.is_file() else None,
            storedJson=manifest.stored(),
            setuped=True,
        )

        lockFile = joinPath(base, settings("files.lock", "composer.lock"))
        if lockFile.exists():
            files.lockFilePath = lockFile
            lock = self._loadLock(lockFile)
            if lock is not None and lock.packages is not None:
                files.locked = True
                files.storedLock = lock.stored()

        files.stateHash = self._stateHashFor(files)
        return files

    def _loadLock(self, lockFile: Path) -> ComposerLock | None:
        """Lock problems are recorded but never fail the load."""
        try:
            rawLock = readJsonFile(lockFile)
        except ConnectorError as err:
            self.errors.record(err)
            return None
        if not isinstance(rawLock, dict):
            self.errors.error("no_lock")
            return None
        try:
            return ComposerLock.fromRaw(rawLock)
        except ValidationError as err:
            logger.debug("Lock file '%s' failed validation: %s", lockFile, err)
            self.errors.error("no_lock")
            return None

    def reset(self) -> None:
        self.files = ProjectFiles()
        self.index.initPackagesData([])

    # ----- State tracking -----

    @staticmethod
    def fingerprint(filePath: str | Path | None) -> str | None:
        if filePath is None:
            return None
        return fileStateHash(filePath)

    def _stateHashFor(self, files: ProjectFiles) -> str | None:
        # The lock file is authoritative once it exists, even if it appeared after load
        lockFile = files.lockFilePath
        if lockFile is None and files.basePath is not None:
            candidate = joinPath(files.basePath, settings("files.lock", "composer.lock"))
            if candidate.exists():
                lockFile = candidate
        if lockFile is not None:
            return self.fingerprint(lockFile)
        return self.fingerprint(files.composerFilePath)

    def currentStateHash(self) -> str | None:
        return self._stateHashFor(self.files)

    def stateChanged(self) -> bool:
        return self.currentStateHash() != self.files.stateHash

    # ----- Queries -----

    def getPackagesData(self) -> list[Any] | None:
        packages = self.files.storedLock.get("packages")
        return packages if isinstance(packages, list) else None

    def packageManifestPath(self, packageName: str, vendorPath: str | Path | None = None) -> Path | None:
        vendor = vendorPath or self.files.vendorDir
        if not vendor:
            return None
        return joinPath(vendor, packageName, settings("files.manifest", "composer.json"))

    def isExists(self, packageName: str, vendorPath: str | Path | None = None) -> bool:
        """
        True when `<vendor>/<packageName>/composer.json` exists. Only that file
        is checked, not the package's integrity.
        """
        manifestPath = self.packageManifestPath(packageName, vendorPath)
        return manifestPath is not None and manifestPath.is_file()

    # ----- Snapshot -----

    def toSnapshot(self) -> ConnectorSnapshot:
        files = self.files

        def _str(path: Path | None) -> str | None:
            return str(path) if path is not None else None

        return ConnectorSnapshot(
            setuped=files.setuped,
            basePath=_str(files.basePath),
            composerFilePath=_str(files.composerFilePath),
            lockFilePath=_str(files.lockFilePath),
            vendorDir=_str(files.vendorDir),
            autoloadFile=_str(files.autoloadFile),
            locked=files.locked,
            stateHash=files.stateHash,
            storedJson=dict(files.storedJson),
            storedLock=dict(files.storedLock),
        )

    def restore(self, snapshot: ConnectorSnapshot) -> None:
        def _path(value: str | None) -> Path | None:
            return Path(value) if value is not None else None

        self.files = ProjectFiles(
            basePath=_path(snapshot.basePath),
            composerFilePath=_path(snapshot.composerFilePath),
            lockFilePath=_path(snapshot.lockFilePath),
            vendorDir=_path(snapshot.vendorDir),
            autoloadFile=_path(snapshot.autoloadFile),
            locked=snapshot.locked,
            stateHash=snapshot.stateHash,
            storedJson=dict(snapshot.storedJson),
            storedLock=dict(snapshot.storedLock),
            setuped=snapshot.setuped,
        )
        packages = self.getPackagesData()
        self.index.initPackagesData(packages if packages is not None else [])

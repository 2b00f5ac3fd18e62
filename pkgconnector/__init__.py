# pkgconnector/__init__.py
from pkgconnector.connector.connector import PackageConnector
from pkgconnector.connector.project import ProjectState
from pkgconnector.connector.snapshot import ConnectorSnapshot
from pkgconnector.core.error_stack import ErrorStack
from pkgconnector.core.errors import ConnectorError
from pkgconnector.packages import (
    PackageIndex,
    PackageRecord,
    PackageTypeFlag,
    ExactType,
    TypeFlags,
)

__all__ = [
    "PackageConnector",
    "ProjectState",
    "ConnectorSnapshot",
    "ErrorStack",
    "ConnectorError",
    "PackageIndex",
    "PackageRecord",
    "PackageTypeFlag",
    "ExactType",
    "TypeFlags",
]

__version__ = "0.3.0"

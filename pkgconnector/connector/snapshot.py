# pkgconnector/connector/snapshot.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["SNAPSHOT_FORMAT", "ConnectorSnapshot"]



SNAPSHOT_FORMAT = 1



class ConnectorSnapshot(BaseModel):
    """
    Connector state that survives serialization between requests.

    The short-name index and the selection are not part of it: restoring a
    snapshot rebuilds the index from `storedLock["packages"]`.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    format: int = SNAPSHOT_FORMAT
    setuped: bool = False
    basePath: str | None = None
    composerFilePath: str | None = None
    lockFilePath: str | None = None
    vendorDir: str | None = None
    autoloadFile: str | None = None
    locked: bool = False
    stateHash: str | None = None
    storedJson: dict[str, Any] = Field(default_factory=dict)
    storedLock: dict[str, Any] = Field(default_factory=dict)

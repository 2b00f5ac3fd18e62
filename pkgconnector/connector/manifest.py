# pkgconnector/connector/manifest.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = ["ComposerManifest", "ComposerLock", "lowerKeys"]



def lowerKeys(data: Mapping[str, Any]) -> dict[str, Any]:
    """Lowercases top-level keys. A later duplicate differing only in case wins."""
    return {str(key).lower(): value for key, value in data.items()}



class ComposerManifest(BaseModel):
    """
    The retained part of composer.json. Keys other than the four below are
    dropped on load.
    """
    model_config = ConfigDict(extra="ignore", frozen=True)

    require: dict[str, str] | None = None
    repositories: list[Any] | dict[str, Any] | None = None
    config: dict[str, Any] | None = None
    extra: dict[str, Any] | None = None

    @field_validator("require", "config", "extra", mode="before")
    @classmethod
    def _emptyListAsObject(cls, value: Any) -> Any:
        # PHP's json_encode writes an empty object block as []
        if isinstance(value, list) and not value:
            return {}
        return value

    @classmethod
    def fromRaw(cls, data: Mapping[str, Any]) -> tuple[ComposerManifest, list[str]]:
        """
        Validates the retained blocks. A block with an unexpected value type
        is left out instead of failing the whole manifest; the names of the
        dropped blocks are returned alongside the model.
        """
        raw = lowerKeys(data)
        try:
            return cls.model_validate(raw), []
        except ValidationError as err:
            dropped = sorted({str(item["loc"][0]) for item in err.errors() if item["loc"]})
        kept = {key: value for key, value in raw.items() if key not in dropped}
        return cls.model_validate(kept), dropped

    @property
    def vendorDir(self) -> str | None:
        value = (self.config or {}).get("vendor-dir")
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    def stored(self) -> dict[str, Any]:
        """Retained blocks that were present in the file."""
        return self.model_dump(exclude_none=True)



class ComposerLock(BaseModel):
    """The retained part of composer.lock."""
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    hash: str | None = None
    contentHash: str | None = Field(default=None, alias="content-hash")
    packages: list[Any] | None = None

    @classmethod
    def fromRaw(cls, data: Mapping[str, Any]) -> ComposerLock:
        return cls.model_validate(lowerKeys(data))

    def stored(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

# pkgconnector/core/errors.py
from __future__ import annotations

from typing import Any

__all__ = [
    "ConnectorError",
    "FormatError",
    "NotInitializedError",
    "NoAutoloadError",
    "NoPackageError",
    "NoLockDataError",
    "NoInstalledPackagesError",
    "NotFoundError",
    "EncodingError",
    "JsonSyntaxError",
    "PackageNotInstalledError",
    "NoMatchingPackageError",
    "InvalidBlockError",
    "UnreadableFileError",
]



class ConnectorError(Exception):
    """
    Base class for recoverable connector errors.

    `code` is the message id used by ErrorStack to render a human-readable
    message, `params` are the template variables for that message.
    """
    code: str = "connector_error"

    def __init__(self, *args: Any, **params: Any) -> None:
        self.params: dict[str, Any] = {str(idx): value for idx, value in enumerate(args)}
        self.params.update(params)
        super().__init__(self.code, self.params)

    def __str__(self) -> str:
        if not self.params:
            return self.code
        rendered = ", ".join(f"{key}={value!r}" for key, value in self.params.items())
        return f"{self.code}: {rendered}"



class FormatError(ConnectorError):
    """Manifest is unparseable or empty."""
    code = "format_error"



class NotInitializedError(ConnectorError):
    """Query attempted before a successful setup."""
    code = "not_setuped"



class NoAutoloadError(ConnectorError):
    code = "no_autoload"



class NoPackageError(ConnectorError):
    """Package directory (its composer.json) not found under the vendor dir."""
    code = "no_package"



class NoLockDataError(ConnectorError):
    code = "no_lock"



class NoInstalledPackagesError(ConnectorError):
    code = "no_installed"



class NotFoundError(ConnectorError):
    """File is missing or empty."""
    code = "not_found"



class EncodingError(ConnectorError):
    code = "not_utf8"



class JsonSyntaxError(ConnectorError):
    """Malformed JSON. Carries `file` and the parser message as `msg`."""
    code = "not_json"



class PackageNotInstalledError(ConnectorError):
    """Package directory exists but the lock data does not list it."""
    code = "not_installed"



class NoMatchingPackageError(ConnectorError):
    """Name/type filter pair did not resolve to an installed package."""
    code = "no_match"



class InvalidBlockError(ConnectorError):
    """A retained manifest block has an unexpected value type and was ignored."""
    code = "bad_block"



class UnreadableFileError(ConnectorError):
    """File exists but the OS refused to read it."""
    code = "not_readable"

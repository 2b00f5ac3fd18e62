# pkgconnector/core/naming.py
import re

_CAMEL_BOUNDARY_RE = re.compile(r"([a-z])([A-Z])")


def toComposerKey(name: str) -> str:
    """`notificationUrl` -> `notification-url`. Already hyphenated names pass through."""
    return _CAMEL_BOUNDARY_RE.sub(r"\1-\2", name).lower()

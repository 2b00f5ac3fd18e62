# pkgconnector/core/error_stack.py
from __future__ import annotations

import logging
import re
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pkgconnector.core.errors import ConnectorError

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_MESSAGES", "ErrorEntry", "ErrorStack", "renderMessage"]



DEFAULT_MESSAGES: dict[str, str] = {
    "format_error": 'Can not get data from "{0}". Check its format.',
    "not_setuped": "Connector not set up yet. Use PackageConnector.setup() method.",
    "no_autoload": 'Can not locate autoload file "{0}".',
    "no_package": 'No composer.json found for package "{0}".',
    "no_lock": "No composer.lock data found.",
    "no_installed": "No installed packages found.",
    "not_found": 'File not found "{0}" or empty.',
    "not_utf8": '"{0}" is not UTF-8, could not parse as JSON.',
    "not_json": '"{file}" does not contain valid JSON: {msg}',
    "not_installed": 'Package "{0}" is not listed in lock data.',
    "no_match": 'No package found for given name "{name}" and type {type}',
    "bad_block": 'Ignored "{block}" in "{file}": unexpected value type.',
    "not_readable": 'Can not read "{0}": {1}',
}

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")



def renderMessage(template: str, params: Mapping[str, Any]) -> str:
    """
    Substitutes `{name}` / `{0}` placeholders with values from `params`.
    Placeholders without a value are left as-is.
    """
    def _sub(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in params:
            return str(params[key])
        return match.group(0)
    return _PLACEHOLDER_RE.sub(_sub, template)



@dataclass(frozen=True, slots=True)
class ErrorEntry:
    id: str
    msg: str



class ErrorStack:
    """
    Bounded history of recent error messages.

    Messages are rendered from templates keyed by message id at the time the
    error is recorded. getLastError() pops the most recent one, so a caller
    can walk back through the failures of a compound operation.
    """

    def __init__(self, defaultMessages: Mapping[str, str] | None = None, *, stackSize: int = 5) -> None:
        self._defaultMsg: dict[str, str] = dict(defaultMessages or {})
        self._msg: dict[str, str] = {}
        self._stack: deque[ErrorEntry] = deque()
        self._stackSize = 5
        self.setStackSize(stackSize)
        self.messagesInit()

    # ----- Messages -----

    def messagesInit(self, messages: Mapping[str, str] | None = None) -> None:
        """
        Merges `messages` over the current templates (used for l10n).
        Without arguments, restores the default template for every default id.
        """
        if messages is None:
            self._msg.update(self._defaultMsg)
            return
        self._msg.update(messages)

    @property
    def messages(self) -> dict[str, str]:
        return dict(self._msg)

    def getMessage(self, messageId: str, *args: Any, **params: Any) -> str:
        template = self._msg.get(messageId)
        if template is None:
            return f"Error: code `{messageId}`"
        values: dict[str, Any] = {str(idx): value for idx, value in enumerate(args)}
        values.update(params)
        return renderMessage(template, values)

    # ----- Recording -----

    @property
    def stackSize(self) -> int:
        return self._stackSize

    def setStackSize(self, size: int) -> None:
        if isinstance(size, int) and not isinstance(size, bool) and size > 0:
            self._stackSize = size
        while len(self._stack) > self._stackSize:
            self._stack.popleft()

    def error(self, messageId: str, *args: Any, **params: Any) -> str:
        """Records an error by message id and returns the rendered message."""
        message = self.getMessage(messageId, *args, **params)
        self._push(ErrorEntry(id=messageId, msg=message))
        return message

    def record(self, err: ConnectorError) -> str:
        """Records a ConnectorError and returns the rendered message."""
        return self.error(err.code, **err.params)

    def _push(self, entry: ErrorEntry) -> None:
        while len(self._stack) >= self._stackSize:
            self._stack.popleft()
        self._stack.append(entry)
        logger.debug("Recorded error [%s]: %s", entry.id, entry.msg)

    # ----- Reading -----

    def hasErrors(self) -> bool:
        return bool(self._stack)

    def lastErrorCode(self) -> str | None:
        """Message id of the most recent error without consuming it."""
        return self._stack[-1].id if self._stack else None

    def getLastError(self) -> str | None:
        if not self._stack:
            return None
        return self._stack.pop().msg

    def getAllErrors(self) -> list[str]:
        """Drains the stack, most recent message first."""
        messages = [entry.msg for entry in reversed(self._stack)]
        self._stack.clear()
        return messages

    def flushErrors(self) -> None:
        self._stack.clear()

    def __len__(self) -> int:
        return len(self._stack)

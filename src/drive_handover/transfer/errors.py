"""Error classification for transfer failures."""

from __future__ import annotations

from drive_handover.graph.client import GraphApiError
from drive_handover.graph.models import (
    STATUS_ACCESS_DENIED,
    STATUS_NOT_FOUND,
    STATUS_WRONG_TYPE,
    Resolution,
)
from drive_handover.transfer.models import ErrorKind

UNSUPPORTED_TRANSFER_MESSAGE = (
    "Ownership of this item cannot be transferred to the target account "
    "(the provider does not allow it, e.g. across organizations). "
    "Use Share mode to give the account edit access instead."
)

# Graph error codes returned when the owner role cannot be granted.
_UNSUPPORTED_CODES = frozenset({"notSupported", "notAllowed"})
_UNSUPPORTED_HINTS = (
    "cross-tenant",
    "another organization",
    "outside your organization",
    "external user",
    "different domain",
)

_RESOLUTION_KINDS = {
    STATUS_NOT_FOUND: ErrorKind.NOT_FOUND,
    STATUS_ACCESS_DENIED: ErrorKind.ACCESS_DENIED,
    STATUS_WRONG_TYPE: ErrorKind.WRONG_TYPE,
}


class ItemResolutionError(Exception):
    """Raised when an item ID does not resolve to the requested kind."""

    def __init__(self, resolution: Resolution) -> None:
        super().__init__(f"Cannot resolve {resolution.item_id}: {resolution.error}")
        self.resolution = resolution

    @property
    def kind(self) -> ErrorKind:
        return kind_for_resolution(self.resolution)


def kind_for_resolution(resolution: Resolution) -> ErrorKind:
    return _RESOLUTION_KINDS.get(resolution.status, ErrorKind.UNKNOWN)


def is_unsupported_transfer(exc: Exception) -> bool:
    """Return True if a failed ownership mutation was refused by provider policy."""
    if not isinstance(exc, GraphApiError):
        return False
    if exc.code in _UNSUPPORTED_CODES:
        return True
    message = exc.message.lower()
    return any(hint in message for hint in _UNSUPPORTED_HINTS)


def classify_error(exc: Exception) -> ErrorKind:
    """Map a provider exception to an ErrorKind."""
    if not isinstance(exc, GraphApiError):
        return ErrorKind.UNKNOWN
    if exc.status_code == 404 or exc.code == "itemNotFound":
        return ErrorKind.NOT_FOUND
    if exc.status_code in (401, 403) or exc.code == "accessDenied":
        return ErrorKind.ACCESS_DENIED
    return ErrorKind.UNKNOWN


def describe_error(exc: Exception) -> str:
    """Return the provider's message verbatim where there is one."""
    if isinstance(exc, GraphApiError):
        return exc.message
    return str(exc)

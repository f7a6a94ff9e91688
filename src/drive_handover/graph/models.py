"""Data models for Microsoft Graph API drive items."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Graph API JSON field names
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_FOLDER = "folder"
FIELD_DELETED = "deleted"
FIELD_ROOT = "root"
FIELD_SIZE = "size"
FIELD_LAST_MODIFIED = "lastModifiedDateTime"
FIELD_PARENT_REFERENCE = "parentReference"
FIELD_SHARED = "shared"
FIELD_OWNER = "owner"
FIELD_CREATED_BY = "createdBy"
FIELD_USER = "user"
FIELD_EMAIL = "email"

# OData response keys
ODATA_DELTA_LINK = "@odata.deltaLink"
ODATA_NEXT_LINK = "@odata.nextLink"
ODATA_VALUE = "value"

KIND_FILE = "file"
KIND_FOLDER = "folder"

# Resolution statuses
STATUS_OK = "ok"
STATUS_NOT_FOUND = "not_found"
STATUS_ACCESS_DENIED = "access_denied"
STATUS_WRONG_TYPE = "wrong_type"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class DriveItem:
    """Snapshot of a single OneDrive item (file or folder)."""

    id: str
    name: str
    is_folder: bool
    owner: str = ""
    size: int = 0
    last_modified: str = ""
    parent_id: str = ""

    @property
    def kind(self) -> str:
        return KIND_FOLDER if self.is_folder else KIND_FILE

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind,
            "owner": self.owner,
            "size": self.size,
            "last_modified": self.last_modified,
        }


@dataclass(frozen=True)
class Resolution:
    """Tagged result of looking up an item by id.

    Exactly one of ``item`` (status "ok") or ``error`` (any other status)
    is meaningful.
    """

    item_id: str
    status: str
    item: DriveItem | None = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


def _user_email(identity_set: dict[str, Any]) -> str:
    user = identity_set.get(FIELD_USER, {})
    return str(user.get(FIELD_EMAIL, ""))


def parse_drive_item(raw: dict[str, Any], default_owner: str = "") -> DriveItem:
    """Map a raw Graph API driveItem dict to a DriveItem.

    The owner is taken from ``shared.owner`` when Graph reports one, then
    from ``createdBy``, falling back to ``default_owner`` (the drive user).
    """
    owner = _user_email(raw.get(FIELD_SHARED, {}).get(FIELD_OWNER, {}))
    if not owner:
        owner = _user_email(raw.get(FIELD_CREATED_BY, {}))
    return DriveItem(
        id=raw.get(FIELD_ID, ""),
        name=raw.get(FIELD_NAME, ""),
        is_folder=FIELD_FOLDER in raw,
        owner=owner or default_owner,
        size=int(raw.get(FIELD_SIZE, 0) or 0),
        last_modified=raw.get(FIELD_LAST_MODIFIED, ""),
        parent_id=raw.get(FIELD_PARENT_REFERENCE, {}).get(FIELD_ID, ""),
    )

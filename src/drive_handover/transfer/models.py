"""Data models for transfer requests and reports."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class TransferMode(str, Enum):
    """What a transfer does to each item."""

    SHARE = "share"
    TRANSFER_OWNERSHIP = "transfer_ownership"

    @classmethod
    def from_flag(cls, share: bool) -> TransferMode:
        """Map a boolean share flag (True = share) to a mode."""
        return cls.SHARE if share else cls.TRANSFER_OWNERSHIP


class ErrorKind(str, Enum):
    """Classification attached to every failure record."""

    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    WRONG_TYPE = "wrong_type"
    UNSUPPORTED_TRANSFER = "unsupported_transfer"
    UNKNOWN = "unknown"


class SkipReason(str, Enum):
    """Why part of a folder tree was left out of the working list."""

    CYCLE = "cycle"
    DEPTH_LIMIT = "depth_limit"
    UNLISTED = "unlisted"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class TransferRequest:
    """A batch of root items to hand over to one target account.

    Attributes:
        root_ids: Root item IDs in request order. Duplicates are allowed.
        target_account: Email of the account receiving access or ownership.
        mode: Share or transfer-ownership.
    """

    root_ids: list[str]
    target_account: str
    mode: TransferMode

    @classmethod
    def from_payload(cls, payload: Any) -> TransferRequest:
        """Build a request from a decoded JSON payload.

        Expected shape::

            {"root_ids": ["id1", ...], "target_account": "bob@contoso.com",
             "mode": "share" | "transfer_ownership"}

        ``mode`` may also be given as a boolean ``share`` flag.

        Raises:
            ValueError: If any field is missing or malformed.
        """
        if not isinstance(payload, dict):
            raise ValueError("Request body must be a JSON object")

        root_ids = payload.get("root_ids")
        if (
            not isinstance(root_ids, list)
            or not root_ids
            or not all(isinstance(r, str) and r for r in root_ids)
        ):
            raise ValueError("root_ids must be a non-empty list of item IDs")

        target = payload.get("target_account")
        if not isinstance(target, str) or not _EMAIL_PATTERN.match(target.strip()):
            raise ValueError("target_account must be an email address")

        if "share" in payload and "mode" not in payload:
            if not isinstance(payload["share"], bool):
                raise ValueError("share must be a boolean")
            mode = TransferMode.from_flag(payload["share"])
        else:
            try:
                mode = TransferMode(payload.get("mode", TransferMode.SHARE.value))
            except ValueError:
                raise ValueError("mode must be 'share' or 'transfer_ownership'") from None

        return cls(root_ids=list(root_ids), target_account=target.strip(), mode=mode)


@dataclass(frozen=True)
class TransferSuccess:
    item_id: str
    name: str


@dataclass(frozen=True)
class TransferFailure:
    item_id: str
    error: str
    kind: ErrorKind = ErrorKind.UNKNOWN


@dataclass(frozen=True)
class TransferSkip:
    """A folder whose subtree (or, for a cycle, the folder itself) was not expanded."""

    folder_id: str
    root_id: str
    reason: SkipReason


@dataclass
class TransferReport:
    """Outcome of one transfer batch.

    ``total`` is the size of the expanded working list; once the batch has
    been processed it equals ``len(successes) + len(failures)``. ``skipped``
    lists the folders whose contents the walk could not reach, so a report
    with an empty ``failures`` list is only complete when ``skipped`` is
    empty too.
    """

    target_account: str
    mode: TransferMode
    total: int = 0
    successes: list[TransferSuccess] = field(default_factory=list)
    failures: list[TransferFailure] = field(default_factory=list)
    skipped: list[TransferSkip] = field(default_factory=list)
    report_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    started_at: str = field(default_factory=_utc_now)
    completed_at: str = ""

    def add_success(self, item_id: str, name: str) -> None:
        self.successes.append(TransferSuccess(item_id=item_id, name=name))

    def add_failure(self, item_id: str, error: str, kind: ErrorKind) -> None:
        self.failures.append(TransferFailure(item_id=item_id, error=error, kind=kind))

    def add_skip(self, folder_id: str, root_id: str, reason: SkipReason) -> None:
        self.skipped.append(TransferSkip(folder_id=folder_id, root_id=root_id, reason=reason))

    def complete(self) -> None:
        self.completed_at = _utc_now()

    def to_dict(self) -> dict[str, Any]:
        """Serialize the report to a JSON-compatible dict."""
        return {
            "report_id": self.report_id,
            "target_account": self.target_account,
            "mode": self.mode.value,
            "total": self.total,
            "successes": [{"id": s.item_id, "name": s.name} for s in self.successes],
            "failures": [
                {"id": f.item_id, "error": f.error, "kind": f.kind.value} for f in self.failures
            ],
            "skipped": [
                {"id": s.folder_id, "root_id": s.root_id, "reason": s.reason.value}
                for s in self.skipped
            ],
            "started_at": self.started_at,
            "completed_at": self.completed_at,
        }

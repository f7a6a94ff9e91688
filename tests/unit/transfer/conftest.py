"""Shared fixtures for transfer tests — an in-memory drive behind a mocked GraphClient."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from drive_handover.graph.client import GraphApiError
from drive_handover.graph.gateway import DriveGateway

DRIVE_USER = "alice@contoso.com"


class FakeDrive:
    """Serves Graph item, children and invite requests from a dict of items."""

    def __init__(self, drive_user: str = DRIVE_USER) -> None:
        self.drive_user = drive_user
        self.items: dict[str, dict[str, Any]] = {}
        self.children: dict[str, list[str]] = {}
        self.errors: dict[tuple[str, str], Exception] = {}
        self.invites: list[tuple[str, str, str]] = []
        self.client = MagicMock()
        self.client.get.side_effect = self._get
        self.client.post.side_effect = self._post

    @property
    def _prefix(self) -> str:
        return f"/users/{self.drive_user}/drive/items/"

    def add_folder(self, id: str, parent: str | None = None, name: str | None = None) -> None:
        self.items[id] = {"id": id, "name": name or id, "folder": {"childCount": 0}}
        self.children.setdefault(id, [])
        if parent is not None:
            self.children[parent].append(id)

    def add_file(self, id: str, parent: str | None = None, name: str | None = None) -> None:
        self.items[id] = {"id": id, "name": name or id, "file": {}, "size": 10}
        if parent is not None:
            self.children[parent].append(id)

    def link(self, parent: str, child: str) -> None:
        """Add an extra reference to an existing item under another folder."""
        self.children[parent].append(child)

    def fail(self, action: str, item_id: str, error: Exception) -> None:
        """Make ``action`` ("get", "children" or "invite") fail for an item."""
        self.errors[(action, item_id)] = error

    def _check(self, action: str, item_id: str) -> None:
        if (action, item_id) in self.errors:
            raise self.errors[(action, item_id)]
        if item_id not in self.items:
            raise GraphApiError(404, "Item not found", "itemNotFound")

    def _get(self, path: str) -> dict[str, Any]:
        rest = path[len(self._prefix) :]
        if rest.endswith("/children"):
            item_id = rest[: -len("/children")]
            self._check("children", item_id)
            return {"value": [self.items[c] for c in self.children.get(item_id, [])]}
        self._check("get", rest)
        return self.items[rest]

    def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        item_id = path[len(self._prefix) : -len("/invite")]
        self._check("invite", item_id)
        self.invites.append((item_id, body["recipients"][0]["email"], body["roles"][0]))
        return {"value": [{"id": f"perm-{item_id}", "roles": body["roles"]}]}


@pytest.fixture
def drive() -> FakeDrive:
    return FakeDrive()


@pytest.fixture
def gateway(drive: FakeDrive) -> DriveGateway:
    return DriveGateway(graph_client=drive.client, drive_user=drive.drive_user)

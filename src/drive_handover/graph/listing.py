"""Owned item enumeration via the OneDrive delta API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from drive_handover.graph.client import GraphClient, relative_path
from drive_handover.graph.models import (
    FIELD_DELETED,
    FIELD_ROOT,
    ODATA_DELTA_LINK,
    ODATA_NEXT_LINK,
    ODATA_VALUE,
    DriveItem,
    parse_drive_item,
)

if TYPE_CHECKING:
    from drive_handover.config import AppConfig

logger = logging.getLogger(__name__)


class OwnedItemLister:
    """Lists the files and folders a OneDrive user owns in their own drive."""

    def __init__(self, graph_client: GraphClient, drive_user: str) -> None:
        """Initialise the lister.

        Args:
            graph_client: Authenticated GraphClient instance.
            drive_user: UPN or object ID of the user whose drive is enumerated.
        """
        self._graph = graph_client
        self._drive_user = drive_user

    def list_owned_items(self) -> list[DriveItem]:
        """Enumerate every item the drive user owns.

        Calls /users/{drive_user}/drive/root/delta without a token, which
        returns the current state of the whole drive, and follows
        @odata.nextLink pagination until @odata.deltaLink is reached.
        Deleted items and the drive root are skipped, as are items whose
        owner is someone other than the drive user.

        Returns:
            Owned DriveItem objects in enumeration order.
        """
        owner = self._drive_user.lower()
        items: list[DriveItem] = []

        next_path: str | None = f"/users/{self._drive_user}/drive/root/delta"
        while next_path is not None:
            response = self._graph.get(next_path)

            for raw in response.get(ODATA_VALUE, []):
                if FIELD_DELETED in raw or FIELD_ROOT in raw:
                    continue
                item = parse_drive_item(raw, default_owner=self._drive_user)
                if item.owner.lower() == owner:
                    items.append(item)

            if ODATA_DELTA_LINK in response:
                next_path = None
            elif ODATA_NEXT_LINK in response:
                next_path = relative_path(response[ODATA_NEXT_LINK])
            else:
                # Malformed response, stop paginating.
                logger.warning(
                    "[list_owned_items] delta response has neither nextLink nor deltaLink; stopping"
                )
                next_path = None

        logger.info("[list_owned_items] enumerated owned items; item_count:%d", len(items))
        return items

    def list_owned_files(self) -> list[DriveItem]:
        """Return only the owned files."""
        return [item for item in self.list_owned_items() if not item.is_folder]

    def list_owned_folders(self) -> list[DriveItem]:
        """Return only the owned folders."""
        return [item for item in self.list_owned_items() if item.is_folder]


def owned_item_lister_from_config(graph_client: GraphClient, config: AppConfig) -> OwnedItemLister:
    """Construct an OwnedItemLister from application configuration.

    Args:
        graph_client: Authenticated GraphClient instance.
        config: Application configuration instance.

    Returns:
        Configured OwnedItemLister instance.
    """
    return OwnedItemLister(graph_client=graph_client, drive_user=config.drive_user)

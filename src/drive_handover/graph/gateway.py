"""Drive item gateway — item lookup, child listing and permission mutations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from drive_handover.graph.client import GraphApiError, GraphAuthError, GraphClient, relative_path
from drive_handover.graph.models import (
    ODATA_NEXT_LINK,
    ODATA_VALUE,
    STATUS_ACCESS_DENIED,
    STATUS_ERROR,
    STATUS_NOT_FOUND,
    STATUS_OK,
    STATUS_WRONG_TYPE,
    DriveItem,
    Resolution,
    parse_drive_item,
)

if TYPE_CHECKING:
    from drive_handover.config import AppConfig

logger = logging.getLogger(__name__)

ROLE_WRITE = "write"
ROLE_OWNER = "owner"

# Failures a provider call can surface: Graph errors plus raw transport or
# decode errors from clients that do not wrap them.
PROVIDER_ERRORS = (GraphApiError, GraphAuthError, OSError, ValueError)


def _status_for(exc: GraphApiError) -> str:
    if exc.status_code == 404 or exc.code == "itemNotFound":
        return STATUS_NOT_FOUND
    if exc.status_code in (401, 403) or exc.code == "accessDenied":
        return STATUS_ACCESS_DENIED
    return STATUS_ERROR


class DriveGateway:
    """Provider-facing adapter over the drive of a single OneDrive user.

    Lookups return a tagged ``Resolution`` instead of raising, so callers
    can tell a missing item from a denied one from an item of the wrong kind.
    Listing and mutations raise ``GraphApiError`` / ``GraphAuthError``.
    """

    def __init__(
        self,
        graph_client: GraphClient,
        drive_user: str,
        send_invitation: bool = False,
    ) -> None:
        """Initialise the gateway.

        Args:
            graph_client: Authenticated GraphClient instance.
            drive_user: UPN or object ID of the user whose drive is addressed
                (e.g. "alice@contoso.onmicrosoft.com"). Required when using app
                permissions (client credentials flow) where /me is not available.
            send_invitation: Whether Graph emails recipients when a role is granted.
        """
        self._graph = graph_client
        self._drive_user = drive_user
        self._send_invitation = send_invitation

    @property
    def drive_user(self) -> str:
        return self._drive_user

    def _item_path(self, item_id: str) -> str:
        return f"/users/{self._drive_user}/drive/items/{item_id}"

    def resolve(self, item_id: str) -> Resolution:
        """Look up an item of either kind.

        Args:
            item_id: OneDrive item ID.

        Returns:
            Resolution with status "ok" and the DriveItem, or the failure status
            ("not_found", "access_denied", "error") and the provider message.
        """
        try:
            raw = self._graph.get(self._item_path(item_id))
        except GraphApiError as exc:
            status = _status_for(exc)
            logger.info(
                "[resolve] item lookup failed; item_id:%s;status:%s;code:%s",
                item_id,
                status,
                exc.code,
            )
            return Resolution(item_id=item_id, status=status, error=exc.message)
        except (GraphAuthError, OSError, ValueError) as exc:
            logger.warning("[resolve] item lookup failed; item_id:%s;error:%s", item_id, exc)
            return Resolution(item_id=item_id, status=STATUS_ERROR, error=str(exc) or type(exc).__name__)
        item = parse_drive_item(raw, default_owner=self._drive_user)
        return Resolution(item_id=item_id, status=STATUS_OK, item=item)

    def _resolve_kind(self, item_id: str, want_folder: bool) -> Resolution:
        resolution = self.resolve(item_id)
        if resolution.item is not None and resolution.item.is_folder != want_folder:
            wanted = "folder" if want_folder else "file"
            return Resolution(
                item_id=item_id,
                status=STATUS_WRONG_TYPE,
                error=f"Item {item_id} is not a {wanted}",
            )
        return resolution

    def resolve_file(self, item_id: str) -> Resolution:
        """Look up an item that must be a file."""
        return self._resolve_kind(item_id, want_folder=False)

    def resolve_folder(self, item_id: str) -> Resolution:
        """Look up an item that must be a folder."""
        return self._resolve_kind(item_id, want_folder=True)

    def list_children(self, folder_id: str) -> tuple[list[DriveItem], list[DriveItem]]:
        """List the direct children of a folder, following pagination.

        Args:
            folder_id: OneDrive item ID of the folder.

        Returns:
            A tuple of (files, folders), each in Graph listing order.

        Raises:
            GraphAuthError: If token acquisition fails.
            GraphApiError: If any page request fails.
        """
        files: list[DriveItem] = []
        folders: list[DriveItem] = []
        next_path: str | None = f"{self._item_path(folder_id)}/children"
        while next_path is not None:
            response = self._graph.get(next_path)
            for raw in response.get(ODATA_VALUE, []):
                item = parse_drive_item(raw, default_owner=self._drive_user)
                if item.is_folder:
                    folders.append(item)
                else:
                    files.append(item)
            next_link = response.get(ODATA_NEXT_LINK)
            next_path = relative_path(next_link) if next_link else None
        return files, folders

    def _invite(self, item_id: str, account: str, role: str) -> dict[str, Any]:
        body = {
            "recipients": [{"email": account}],
            "roles": [role],
            "requireSignIn": True,
            "sendInvitation": self._send_invitation,
        }
        return self._graph.post(f"{self._item_path(item_id)}/invite", body)

    def add_editor(self, item_id: str, account: str) -> dict[str, Any]:
        """Grant edit permission on an item to an account.

        Re-granting an existing role returns the existing permission, so the
        call is idempotent at the provider.
        """
        response = self._invite(item_id, account, ROLE_WRITE)
        logger.info("[add_editor] granted edit access; item_id:%s;account:%s", item_id, account)
        return response

    def set_owner(self, item_id: str, account: str) -> dict[str, Any]:
        """Make an account the owner of an item.

        Raises:
            GraphApiError: Graph rejects the owner role for items that cannot
                change hands (e.g. across tenants), typically with code
                "notSupported" or "notAllowed".
        """
        response = self._invite(item_id, account, ROLE_OWNER)
        logger.info("[set_owner] assigned ownership; item_id:%s;account:%s", item_id, account)
        return response


def drive_gateway_from_config(graph_client: GraphClient, config: AppConfig) -> DriveGateway:
    """Construct a DriveGateway from application configuration.

    Args:
        graph_client: Authenticated GraphClient instance.
        config: Application configuration instance.

    Returns:
        Configured DriveGateway instance.
    """
    return DriveGateway(
        graph_client=graph_client,
        drive_user=config.drive_user,
        send_invitation=config.send_invitation,
    )

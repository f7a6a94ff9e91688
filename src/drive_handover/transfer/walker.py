"""Depth-first folder tree walker."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from drive_handover.graph.gateway import PROVIDER_ERRORS, DriveGateway
from drive_handover.transfer.errors import ItemResolutionError

if TYPE_CHECKING:
    from drive_handover.config import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_MAX_WALK_DEPTH = 64


class TreeWalker:
    """Flattens a OneDrive folder tree into a list of item IDs.

    After each ``walk`` the following hold the anomalies of that walk:

    - ``cycles``: folder IDs found inside their own subtree (skipped).
    - ``truncated``: folder IDs deeper than ``max_depth`` (emitted, not descended into).
    - ``unlisted``: folder IDs whose children could not be listed.
    """

    def __init__(self, gateway: DriveGateway, max_depth: int = DEFAULT_MAX_WALK_DEPTH) -> None:
        """Initialise the walker.

        Args:
            gateway: DriveGateway for folder lookup and child listing.
            max_depth: Deepest folder level below the root to descend into.
        """
        self._gateway = gateway
        self._max_depth = max_depth
        self.cycles: list[str] = []
        self.truncated: list[str] = []
        self.unlisted: list[str] = []

    def walk(self, folder_id: str) -> list[str]:
        """Return the IDs of every item below a folder, in depth-first pre-order.

        Direct child files come first in listing order, then each child folder
        followed immediately by its own descendants. The root itself is not
        included. No deduplication is performed.

        Args:
            folder_id: OneDrive item ID of the root folder.

        Returns:
            Flat list of descendant item IDs (empty for an empty folder).

        Raises:
            ItemResolutionError: If folder_id does not resolve to an accessible folder.
        """
        self.cycles = []
        self.truncated = []
        self.unlisted = []

        resolution = self._gateway.resolve_folder(folder_id)
        if not resolution.ok:
            raise ItemResolutionError(resolution)

        result: list[str] = []
        try:
            self._walk(folder_id, 1, {folder_id}, result)
        except PROVIDER_ERRORS as exc:
            # The root resolved but its children could not be listed.
            logger.warning(
                "[walk] failed to list root folder; folder_id:%s;error:%s", folder_id, exc
            )
            self.unlisted.append(folder_id)

        logger.info(
            "[walk] walk complete; folder_id:%s;item_count:%d;cycles:%d;truncated:%d;unlisted:%d",
            folder_id,
            len(result),
            len(self.cycles),
            len(self.truncated),
            len(self.unlisted),
        )
        return result

    def _walk(self, folder_id: str, depth: int, ancestors: set[str], out: list[str]) -> None:
        # ancestors holds the folders on the current path only, so a folder
        # linked from two unrelated places is still emitted for each reference.
        files, folders = self._gateway.list_children(folder_id)
        out.extend(f.id for f in files)

        for child in folders:
            if child.id in ancestors:
                logger.warning(
                    "[_walk] cycle detected; folder_id:%s;parent_id:%s", child.id, folder_id
                )
                self.cycles.append(child.id)
                continue
            out.append(child.id)

            if depth >= self._max_depth:
                logger.warning(
                    "[_walk] max depth reached; folder_id:%s;depth:%d", child.id, depth
                )
                self.truncated.append(child.id)
                continue

            ancestors.add(child.id)
            try:
                self._walk(child.id, depth + 1, ancestors, out)
            except PROVIDER_ERRORS as exc:
                logger.warning(
                    "[_walk] failed to list folder; folder_id:%s;error:%s", child.id, exc
                )
                self.unlisted.append(child.id)
            finally:
                ancestors.discard(child.id)


def tree_walker_from_config(gateway: DriveGateway, config: AppConfig) -> TreeWalker:
    """Construct a TreeWalker from application configuration.

    Args:
        gateway: DriveGateway instance.
        config: Application configuration instance.

    Returns:
        Configured TreeWalker instance.
    """
    return TreeWalker(gateway=gateway, max_depth=config.max_walk_depth)

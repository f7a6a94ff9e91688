"""Batch transfer engine — expands roots and applies per-item mutations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from drive_handover.graph.client import graph_client_from_config
from drive_handover.graph.gateway import DriveGateway, drive_gateway_from_config
from drive_handover.transfer.errors import (
    UNSUPPORTED_TRANSFER_MESSAGE,
    ItemResolutionError,
    classify_error,
    describe_error,
    is_unsupported_transfer,
    kind_for_resolution,
)
from drive_handover.transfer.models import ErrorKind, SkipReason, TransferMode, TransferReport
from drive_handover.transfer.walker import TreeWalker, tree_walker_from_config

if TYPE_CHECKING:
    from drive_handover.config import AppConfig

logger = logging.getLogger(__name__)


class TransferEngine:
    """Hands a set of OneDrive items over to another account.

    Processing is best-effort: every item in the expanded list produces
    exactly one success or failure record, a failing item never stops the
    batch, and nothing is retried or rolled back.
    """

    def __init__(self, gateway: DriveGateway, walker: TreeWalker) -> None:
        """Initialise the engine.

        Args:
            gateway: DriveGateway used to resolve and mutate items.
            walker: TreeWalker used to expand folder roots.
        """
        self._gateway = gateway
        self._walker = walker

    def expand(self, root_ids: list[str], report: TransferReport | None = None) -> list[str]:
        """Build the working list of item IDs for a batch.

        Each root is appended, followed immediately by all its descendants
        when it resolves to a folder. Roots that are files, or that cannot be
        resolved, stay as single entries.

        Args:
            root_ids: Root item IDs in request order.
            report: When given, folders the walk skipped (cycles, depth limit,
                unlistable subtrees) are recorded on it.

        Returns:
            Expanded list of item IDs.
        """
        working: list[str] = []
        for root_id in root_ids:
            working.append(root_id)
            try:
                working.extend(self._walker.walk(root_id))
            except ItemResolutionError as exc:
                logger.debug(
                    "[expand] root not expanded; item_id:%s;status:%s",
                    root_id,
                    exc.resolution.status,
                )
                continue
            if report is not None:
                self._record_skips(root_id, report)
        logger.info(
            "[expand] expanded roots; root_count:%d;item_count:%d", len(root_ids), len(working)
        )
        return working

    def _record_skips(self, root_id: str, report: TransferReport) -> None:
        for reason, folder_ids in (
            (SkipReason.CYCLE, self._walker.cycles),
            (SkipReason.DEPTH_LIMIT, self._walker.truncated),
            (SkipReason.UNLISTED, self._walker.unlisted),
        ):
            for folder_id in folder_ids:
                report.add_skip(folder_id, root_id, reason)

    def transfer(
        self,
        root_ids: list[str],
        target_account: str,
        mode: TransferMode,
    ) -> TransferReport:
        """Share or transfer ownership of every item under the given roots.

        Args:
            root_ids: Root item IDs (files or folders) in request order.
            target_account: Email of the account receiving access or ownership.
            mode: TransferMode.SHARE grants edit access; TransferMode.TRANSFER_OWNERSHIP
                assigns the owner role.

        Returns:
            TransferReport with one entry per expanded item, plus the
            folders the walk skipped. Never raises for per-item provider failures.
        """
        report = TransferReport(target_account=target_account, mode=mode)
        working = self.expand(root_ids, report)
        report.total = len(working)

        for item_id in working:
            self._process_item(item_id, target_account, mode, report)

        report.complete()
        logger.info(
            "[transfer] batch complete; report_id:%s;mode:%s;total:%d;"
            "succeeded:%d;failed:%d;skipped:%d",
            report.report_id,
            mode.value,
            report.total,
            len(report.successes),
            len(report.failures),
            len(report.skipped),
        )
        return report

    def _process_item(
        self,
        item_id: str,
        target_account: str,
        mode: TransferMode,
        report: TransferReport,
    ) -> None:
        resolution = self._gateway.resolve(item_id)
        if resolution.item is None:
            logger.warning(
                "[_process_item] item not resolved; item_id:%s;status:%s",
                item_id,
                resolution.status,
            )
            report.add_failure(item_id, resolution.error, kind_for_resolution(resolution))
            return

        item = resolution.item
        try:
            if mode is TransferMode.SHARE:
                self._gateway.add_editor(item.id, target_account)
            else:
                self._gateway.set_owner(item.id, target_account)
        except Exception as exc:
            if mode is TransferMode.TRANSFER_OWNERSHIP and is_unsupported_transfer(exc):
                error, kind = UNSUPPORTED_TRANSFER_MESSAGE, ErrorKind.UNSUPPORTED_TRANSFER
            else:
                error, kind = describe_error(exc), classify_error(exc)
            logger.warning(
                "[_process_item] mutation failed; item_id:%s;kind:%s;mode:%s;error:%s",
                item_id,
                kind.value,
                mode.value,
                exc,
            )
            report.add_failure(item_id, error, kind)
            return

        report.add_success(item_id, item.name)


def transfer_engine_from_config(config: AppConfig) -> TransferEngine:
    """Construct a TransferEngine from application configuration.

    Creates a GraphClient, DriveGateway and TreeWalker from the config, then
    wires them into a TransferEngine.

    Args:
        config: Application configuration instance.

    Returns:
        Configured TransferEngine instance.
    """
    client = graph_client_from_config(config)
    gateway = drive_gateway_from_config(client, config)
    walker = tree_walker_from_config(gateway, config)
    return TransferEngine(gateway=gateway, walker=walker)

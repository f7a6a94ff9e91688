"""Transfer report archive backed by Azure Blob Storage."""

from __future__ import annotations

import contextlib
import json
import logging
from typing import TYPE_CHECKING, Any

from azure.core.exceptions import ResourceNotFoundError
from azure.storage.blob import BlobServiceClient

from drive_handover.transfer.models import TransferReport

if TYPE_CHECKING:
    from drive_handover.config import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_REPORT_CONTAINER = "drive-handover-state"
DEFAULT_REPORT_BLOB_PREFIX = "transfer-reports/"


class ReportArchive:
    """Stores transfer reports as JSON blobs keyed by report ID.

    Reports are written once when a batch finishes and never updated.
    """

    def __init__(
        self,
        storage_connection_string: str,
        container: str = DEFAULT_REPORT_CONTAINER,
        blob_prefix: str = DEFAULT_REPORT_BLOB_PREFIX,
    ) -> None:
        """Initialise the report archive.

        Args:
            storage_connection_string: Azure Storage connection string.
            container: Blob container name for archived reports.
            blob_prefix: Prefix for report blob paths (e.g. "transfer-reports/").
        """
        self._blob_service = BlobServiceClient.from_connection_string(storage_connection_string)
        self._container = container
        self._blob_prefix = blob_prefix

    def _blob_path(self, report_id: str) -> str:
        return f"{self._blob_prefix}{report_id}.json"

    def save(self, report: TransferReport) -> str:
        """Write a report to blob storage, creating the container if needed.

        Args:
            report: Completed TransferReport.

        Returns:
            Blob path the report was written to.
        """
        blob_path = self._blob_path(report.report_id)
        container_client = self._blob_service.get_container_client(self._container)
        with contextlib.suppress(Exception):
            container_client.create_container()

        blob_client = container_client.get_blob_client(blob_path)
        blob_client.upload_blob(json.dumps(report.to_dict()).encode("utf-8"), overwrite=True)
        logger.info(
            "[report_archive] stored; report_id:%s;blob:%s",
            report.report_id,
            blob_path,
        )
        return blob_path

    def load(self, report_id: str) -> dict[str, Any] | None:
        """Read an archived report.

        Args:
            report_id: ID of a previously saved report.

        Returns:
            The report as a dict, or None if no such report exists.
        """
        try:
            container_client = self._blob_service.get_container_client(self._container)
            blob_client = container_client.get_blob_client(self._blob_path(report_id))
            data = blob_client.download_blob().readall()
        except ResourceNotFoundError:
            logger.info("[report_archive] report not found; report_id:%s", report_id)
            return None
        return json.loads(data.decode("utf-8"))  # type: ignore[no-any-return]


def report_archive_from_config(config: AppConfig) -> ReportArchive:
    """Construct a ReportArchive from application configuration.

    Args:
        config: Application configuration instance.

    Returns:
        Configured ReportArchive instance.
    """
    return ReportArchive(
        storage_connection_string=config.storage_connection_string,
        container=config.report_container,
        blob_prefix=config.report_blob_prefix,
    )

"""Unit tests for transfer/archive.py — ReportArchive behaviour."""

import json
from unittest.mock import MagicMock, patch

from azure.core.exceptions import ResourceNotFoundError

from drive_handover.transfer.archive import ReportArchive, report_archive_from_config
from drive_handover.transfer.models import ErrorKind, TransferMode, TransferReport

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_archive() -> tuple[ReportArchive, MagicMock, MagicMock]:
    """Return (archive, mock_container_client, mock_blob_client)."""
    mock_blob_service = MagicMock()
    mock_container = MagicMock()
    mock_blob = MagicMock()
    mock_blob_service.get_container_client.return_value = mock_container
    mock_container.get_blob_client.return_value = mock_blob

    with patch(
        "drive_handover.transfer.archive.BlobServiceClient.from_connection_string",
        return_value=mock_blob_service,
    ):
        archive = ReportArchive(
            storage_connection_string="DefaultEndpointsProtocol=https;...",
            container="test-container",
            blob_prefix="reports/",
        )

    return archive, mock_container, mock_blob


def _report() -> TransferReport:
    report = TransferReport(target_account="bob@contoso.com", mode=TransferMode.SHARE, total=2)
    report.add_success("f1", "a.txt")
    report.add_failure("f2", "Access denied", ErrorKind.ACCESS_DENIED)
    report.complete()
    return report


# ---------------------------------------------------------------------------
# save tests
# ---------------------------------------------------------------------------


class TestSave:
    def test_uploads_json_under_report_id(self) -> None:
        archive, mock_container, mock_blob = _make_archive()
        report = _report()

        path = archive.save(report)

        assert path == f"reports/{report.report_id}.json"
        mock_container.get_blob_client.assert_called_once_with(path)
        uploaded = mock_blob.upload_blob.call_args[0][0]
        assert json.loads(uploaded.decode("utf-8")) == report.to_dict()
        assert mock_blob.upload_blob.call_args[1] == {"overwrite": True}

    def test_creates_container(self) -> None:
        archive, mock_container, _ = _make_archive()

        archive.save(_report())

        mock_container.create_container.assert_called_once()

    def test_existing_container_is_not_an_error(self) -> None:
        archive, mock_container, mock_blob = _make_archive()
        mock_container.create_container.side_effect = Exception("ContainerAlreadyExists")

        archive.save(_report())

        mock_blob.upload_blob.assert_called_once()


# ---------------------------------------------------------------------------
# load tests
# ---------------------------------------------------------------------------


class TestLoad:
    def test_returns_stored_report(self) -> None:
        archive, mock_container, mock_blob = _make_archive()
        stored = {"report_id": "abc", "total": 0}
        mock_blob.download_blob.return_value.readall.return_value = json.dumps(stored).encode()

        result = archive.load("abc")

        assert result == stored
        mock_container.get_blob_client.assert_called_once_with("reports/abc.json")

    def test_returns_none_when_missing(self) -> None:
        archive, _, mock_blob = _make_archive()
        mock_blob.download_blob.side_effect = ResourceNotFoundError("not found")

        assert archive.load("missing") is None


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


class TestReportArchiveFromConfig:
    def test_uses_config_values(self) -> None:
        config = MagicMock(
            storage_connection_string="conn",
            report_container="c",
            report_blob_prefix="p/",
        )

        with patch(
            "drive_handover.transfer.archive.BlobServiceClient.from_connection_string"
        ) as mock_from_conn:
            archive = report_archive_from_config(config)

        mock_from_conn.assert_called_once_with("conn")
        assert archive._container == "c"
        assert archive._blob_prefix == "p/"

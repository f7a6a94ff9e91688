"""Unit tests for graph/models.py — DriveItem parsing and Resolution."""

from drive_handover.graph.models import (
    KIND_FILE,
    KIND_FOLDER,
    STATUS_NOT_FOUND,
    STATUS_OK,
    DriveItem,
    Resolution,
    parse_drive_item,
)

# ---------------------------------------------------------------------------
# parse_drive_item tests
# ---------------------------------------------------------------------------


class TestParseDriveItem:
    def test_parses_file_fields(self) -> None:
        raw = {
            "id": "f1",
            "name": "budget.xlsx",
            "file": {"mimeType": "application/vnd.ms-excel"},
            "size": 2048,
            "lastModifiedDateTime": "2026-03-01T10:00:00Z",
            "parentReference": {"id": "p1", "path": "/drive/root:/Finance"},
            "createdBy": {"user": {"email": "alice@contoso.com"}},
        }

        item = parse_drive_item(raw)

        assert item == DriveItem(
            id="f1",
            name="budget.xlsx",
            is_folder=False,
            owner="alice@contoso.com",
            size=2048,
            last_modified="2026-03-01T10:00:00Z",
            parent_id="p1",
        )
        assert item.kind == KIND_FILE

    def test_folder_facet_marks_folder(self) -> None:
        item = parse_drive_item({"id": "d1", "name": "Docs", "folder": {"childCount": 3}})

        assert item.is_folder is True
        assert item.kind == KIND_FOLDER

    def test_shared_owner_takes_precedence(self) -> None:
        raw = {
            "id": "f1",
            "name": "x",
            "shared": {"owner": {"user": {"email": "carol@fabrikam.com"}}},
            "createdBy": {"user": {"email": "alice@contoso.com"}},
        }

        assert parse_drive_item(raw).owner == "carol@fabrikam.com"

    def test_owner_falls_back_to_default(self) -> None:
        item = parse_drive_item({"id": "f1", "name": "x"}, default_owner="alice@contoso.com")

        assert item.owner == "alice@contoso.com"

    def test_missing_fields_use_defaults(self) -> None:
        item = parse_drive_item({})

        assert item.id == ""
        assert item.size == 0
        assert item.parent_id == ""

    def test_to_dict_exposes_kind(self) -> None:
        item = DriveItem(id="d1", name="Docs", is_folder=True, owner="a@b.com")

        assert item.to_dict()["kind"] == "folder"
        assert item.to_dict()["owner"] == "a@b.com"


# ---------------------------------------------------------------------------
# Resolution tests
# ---------------------------------------------------------------------------


class TestResolution:
    def test_ok_when_status_ok(self) -> None:
        item = DriveItem(id="f1", name="x", is_folder=False)
        assert Resolution(item_id="f1", status=STATUS_OK, item=item).ok is True

    def test_not_ok_otherwise(self) -> None:
        resolution = Resolution(item_id="f1", status=STATUS_NOT_FOUND, error="Item not found")
        assert resolution.ok is False
        assert resolution.item is None

"""HTTP trigger blueprint — health, listing, walk preview and transfer endpoints."""

import json
import logging
from typing import Any

import azure.functions as func

from drive_handover import __version__
from drive_handover.config import load_config
from drive_handover.graph.client import graph_client_from_config
from drive_handover.graph.gateway import drive_gateway_from_config
from drive_handover.graph.listing import owned_item_lister_from_config
from drive_handover.graph.models import KIND_FILE, KIND_FOLDER
from drive_handover.transfer.archive import report_archive_from_config
from drive_handover.transfer.engine import transfer_engine_from_config
from drive_handover.transfer.errors import ItemResolutionError
from drive_handover.transfer.models import ErrorKind, TransferRequest
from drive_handover.transfer.walker import tree_walker_from_config

logger = logging.getLogger(__name__)

bp = func.Blueprint()

_RESOLUTION_STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ACCESS_DENIED: 403,
    ErrorKind.WRONG_TYPE: 400,
}


def _json_response(body: dict[str, Any], status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(body), status_code=status_code, mimetype="application/json"
    )


def _error_response(message: str, status_code: int) -> func.HttpResponse:
    return _json_response({"status": "error", "message": message}, status_code)


@bp.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint — returns service status and version."""
    logger.info("[health_check] health check requested")

    try:
        return _json_response({"status": "ok", "version": __version__})

    except Exception:
        logger.error("[health_check] health check failed", exc_info=True)
        return _error_response("Internal server error", 500)


@bp.route(route="items", methods=["GET"], auth_level=func.AuthLevel.FUNCTION)
def list_items(req: func.HttpRequest) -> func.HttpResponse:
    """List the items the configured drive user owns.

    Optional query parameter ``kind`` ("file" or "folder") narrows the result.
    """
    kind = req.params.get("kind")
    logger.info("[list_items] listing requested; kind:%s", kind)
    if kind not in (None, KIND_FILE, KIND_FOLDER):
        return _error_response("kind must be 'file' or 'folder'", 400)

    try:
        config = load_config()
        lister = owned_item_lister_from_config(graph_client_from_config(config), config)
        if kind == KIND_FILE:
            items = lister.list_owned_files()
        elif kind == KIND_FOLDER:
            items = lister.list_owned_folders()
        else:
            items = lister.list_owned_items()

        return _json_response(
            {"status": "ok", "count": len(items), "items": [i.to_dict() for i in items]}
        )

    except Exception:
        logger.error("[list_items] listing failed", exc_info=True)
        return _error_response("Internal server error", 500)


@bp.route(route="folders/{folder_id}/walk", methods=["GET"], auth_level=func.AuthLevel.FUNCTION)
def walk_folder(req: func.HttpRequest) -> func.HttpResponse:
    """Preview the item IDs a transfer of this folder would touch."""
    folder_id = req.route_params.get("folder_id", "")
    logger.info("[walk_folder] walk requested; folder_id:%s", folder_id)

    try:
        config = load_config()
        gateway = drive_gateway_from_config(graph_client_from_config(config), config)
        walker = tree_walker_from_config(gateway, config)
        item_ids = walker.walk(folder_id)

        return _json_response(
            {
                "status": "ok",
                "folder_id": folder_id,
                "count": len(item_ids),
                "item_ids": item_ids,
                "cycles": walker.cycles,
                "truncated": walker.truncated,
                "unlisted": walker.unlisted,
            }
        )

    except ItemResolutionError as exc:
        logger.info(
            "[walk_folder] folder not resolved; folder_id:%s;status:%s",
            folder_id,
            exc.resolution.status,
        )
        return _error_response(exc.resolution.error, _RESOLUTION_STATUS_CODES.get(exc.kind, 502))

    except Exception:
        logger.error("[walk_folder] walk failed", exc_info=True)
        return _error_response("Internal server error", 500)


@bp.route(route="transfer", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def run_transfer(req: func.HttpRequest) -> func.HttpResponse:
    """Share or transfer ownership of a batch of items.

    Body: ``{"root_ids": [...], "target_account": "...", "mode": "share"}``.
    The report is returned in the response and archived to blob storage.
    Partial failure is reported in the body with status 200.
    """
    logger.info("[run_transfer] transfer requested")

    try:
        request = TransferRequest.from_payload(req.get_json())
    except ValueError as exc:
        return _error_response(str(exc), 400)

    try:
        config = load_config()
        engine = transfer_engine_from_config(config)
        report = engine.transfer(request.root_ids, request.target_account, request.mode)

        body: dict[str, Any] = {"status": "ok", "report": report.to_dict()}
        try:
            body["archived_as"] = report_archive_from_config(config).save(report)
        except Exception:
            logger.error(
                "[run_transfer] failed to archive report; report_id:%s",
                report.report_id,
                exc_info=True,
            )
        return _json_response(body)

    except Exception:
        logger.error("[run_transfer] transfer failed", exc_info=True)
        return _error_response("Internal server error", 500)


@bp.route(route="transfer/{report_id}", methods=["GET"], auth_level=func.AuthLevel.FUNCTION)
def get_report(req: func.HttpRequest) -> func.HttpResponse:
    """Fetch an archived transfer report by ID."""
    report_id = req.route_params.get("report_id", "")
    logger.info("[get_report] report requested; report_id:%s", report_id)

    try:
        config = load_config()
        report = report_archive_from_config(config).load(report_id)
        if report is None:
            return _error_response("Report not found", 404)
        return _json_response({"status": "ok", "report": report})

    except Exception:
        logger.error("[get_report] report lookup failed", exc_info=True)
        return _error_response("Internal server error", 500)

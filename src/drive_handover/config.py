"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class AppConfig:
    """Centralized application configuration.

    Required fields have no defaults and will cause a KeyError at startup
    if the corresponding environment variable is missing. Domain constants
    have sensible defaults but can be overridden via environment variables.
    """

    # Required: no defaults, fail at startup if missing
    client_id: str
    client_secret: str
    tenant_id: str
    drive_user: str
    storage_connection_string: str

    # Domain constants: defaults provided, overridable via env
    report_container: str = "drive-handover-state"
    report_blob_prefix: str = "transfer-reports/"
    max_walk_depth: int = 64
    send_invitation: bool = False


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def load_config() -> AppConfig:
    """Construct an AppConfig from environment variables.

    Required environment variables:
        DH_CLIENT_ID: Azure AD application (client) ID.
        DH_CLIENT_SECRET: Azure AD application client secret.
        DH_TENANT_ID: Azure AD tenant ID.
        DH_DRIVE_USER: UPN or object ID of the OneDrive user whose items are handed over.
        AzureWebJobsStorage: Azure Storage account connection string.

    Optional environment variables (with defaults):
        DH_REPORT_CONTAINER: Blob container for archived transfer reports.
        DH_REPORT_BLOB_PREFIX: Blob path prefix for archived reports.
        DH_MAX_WALK_DEPTH: Deepest folder level the tree walker descends into (default: 64).
        DH_SEND_INVITATION: Whether Graph emails the target account on share (default: false).

    Returns:
        Configured AppConfig instance.
    """
    return AppConfig(
        client_id=os.environ["DH_CLIENT_ID"],
        client_secret=os.environ["DH_CLIENT_SECRET"],
        tenant_id=os.environ["DH_TENANT_ID"],
        drive_user=os.environ["DH_DRIVE_USER"],
        storage_connection_string=os.environ["AzureWebJobsStorage"],  # noqa: SIM112
        report_container=os.environ.get("DH_REPORT_CONTAINER", "drive-handover-state"),
        report_blob_prefix=os.environ.get("DH_REPORT_BLOB_PREFIX", "transfer-reports/"),
        max_walk_depth=int(os.environ.get("DH_MAX_WALK_DEPTH", "64")),
        send_invitation=_env_flag("DH_SEND_INVITATION", False),
    )

"""Microsoft Graph API client with MSAL authentication."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any
from urllib import request as urllib_request
from urllib.error import HTTPError, URLError

import msal

if TYPE_CHECKING:
    from drive_handover.config import AppConfig

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
GRAPH_SCOPES = ["https://graph.microsoft.com/.default"]
AUTHORITY_BASE_URL = "https://login.microsoftonline.com"


class GraphAuthError(Exception):
    """Raised when MSAL token acquisition fails."""


class GraphApiError(Exception):
    """Raised when the Graph API returns a non-2xx response.

    Attributes:
        status_code: HTTP status code of the response.
        message: Human-readable message from the Graph error body.
        code: Graph error code (e.g. "itemNotFound", "accessDenied"), or ""
            when the body carried none.
    """

    def __init__(self, status_code: int, message: str, code: str = "") -> None:
        super().__init__(f"Graph API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.code = code


def relative_path(full_url: str) -> str:
    """Convert a full Graph API URL (e.g. an @odata.nextLink) to a relative path."""
    if full_url.startswith(GRAPH_BASE_URL):
        return full_url[len(GRAPH_BASE_URL) :]
    return full_url


class GraphClient:
    """Authenticated client for Microsoft Graph API."""

    def __init__(self, client_id: str, client_secret: str, tenant_id: str) -> None:
        """Initialise the MSAL confidential client application.

        Args:
            client_id: Azure AD application (client) ID.
            client_secret: Azure AD application client secret.
            tenant_id: Azure AD tenant ID.
        """
        authority = f"{AUTHORITY_BASE_URL}/{tenant_id}"
        self._app = msal.ConfidentialClientApplication(
            client_id=client_id,
            client_credential=client_secret,
            authority=authority,
        )

    def _acquire_token(self) -> str:
        """Acquire a Bearer token using client credentials flow.

        Returns:
            Access token string.

        Raises:
            GraphAuthError: If MSAL cannot acquire a token.
        """
        result: dict[str, Any] = self._app.acquire_token_for_client(scopes=GRAPH_SCOPES) or {}
        if "access_token" not in result:
            error = result.get("error", "unknown_error")
            description = result.get("error_description", "No description provided")
            logger.error("[_acquire_token] MSAL token acquisition failed; error:%s", error)
            raise GraphAuthError(f"Token acquisition failed: {error}: {description}")
        return str(result["access_token"])

    def _send(self, method: str, path: str, body: dict[str, Any] | None = None) -> dict[str, Any]:
        """Send an authenticated JSON request and parse the JSON response.

        Raises:
            GraphAuthError: If token acquisition fails.
            GraphApiError: If the API returns a non-2xx status code, the request
                fails in transport (status_code 0), or the body is not valid JSON.
        """
        token = self._acquire_token()
        url = f"{GRAPH_BASE_URL}{path}"
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }
        data = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"
        req = urllib_request.Request(url, data=data, headers=headers, method=method)
        try:
            with urllib_request.urlopen(req) as resp:
                raw = resp.read()
                if not raw:
                    return {}
                return json.loads(raw)  # type: ignore[no-any-return]
        except HTTPError as exc:
            raw = exc.read()
            code = ""
            try:
                error = json.loads(raw).get("error", {})
                detail = error.get("message", exc.reason)
                code = error.get("code", "")
            except Exception:
                detail = exc.reason
            raise GraphApiError(exc.code, detail, code) from exc
        except URLError as exc:
            logger.warning("[_send] request failed; method:%s;path:%s;reason:%s", method, path, exc.reason)
            raise GraphApiError(0, str(exc.reason)) from exc
        except OSError as exc:
            logger.warning("[_send] request failed; method:%s;path:%s;error:%s", method, path, exc)
            raise GraphApiError(0, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise GraphApiError(0, f"Invalid JSON in Graph response: {exc}") from exc

    def get(self, path: str) -> dict[str, Any]:
        """Perform an authenticated GET request to the Graph API.

        Args:
            path: URL path relative to BASE_URL (must start with '/').

        Returns:
            Parsed JSON response body as a dict.

        Raises:
            GraphAuthError: If token acquisition fails.
            GraphApiError: If the API returns a non-2xx status code.
        """
        return self._send("GET", path)

    def post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        """Perform an authenticated POST request with a JSON body.

        Args:
            path: URL path relative to BASE_URL (must start with '/').
            body: JSON-serializable request body.

        Returns:
            Parsed JSON response body as a dict (empty for 204 responses).

        Raises:
            GraphAuthError: If token acquisition fails.
            GraphApiError: If the API returns a non-2xx status code.
        """
        return self._send("POST", path, body)


def graph_client_from_config(config: AppConfig) -> GraphClient:
    """Construct a GraphClient from application configuration.

    Args:
        config: Application configuration instance.

    Returns:
        Configured GraphClient instance.
    """
    return GraphClient(
        client_id=config.client_id,
        client_secret=config.client_secret,
        tenant_id=config.tenant_id,
    )

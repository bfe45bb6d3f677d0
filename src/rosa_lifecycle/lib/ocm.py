"""HTTP client for the OpenShift Cluster Manager (OCM) API.

Authenticates with an offline token from console.redhat.com, exchanged at
the Red Hat SSO for short-lived access tokens. All methods return Result;
httpx exceptions never escape.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any

import httpx

from rosa_lifecycle.lib.errors import (
    DecodeError,
    ExternalCallFailedError,
    OperationCancelledError,
    OutputError,
)
from rosa_lifecycle.lib.result import Err, Ok, Result

logger = logging.getLogger(__name__)

PRODUCTION = "https://api.openshift.com"
STAGE = "https://api.stage.openshift.com"
INTEGRATION = "https://api.integration.openshift.com"

ENVIRONMENTS = {
    "production": PRODUCTION,
    "stage": STAGE,
    "integration": INTEGRATION,
}

SSO_TOKEN_URL = "https://sso.redhat.com/auth/realms/redhat-external/protocol/openid-connect/token"
SSO_CLIENT_ID = "cloud-services"

CLUSTERS_PATH = "/api/clusters_mgmt/v1/clusters"
OIDC_CONFIGS_PATH = "/api/clusters_mgmt/v1/oidc_configs"

# Refresh the access token this many seconds before it expires
_TOKEN_EXPIRY_MARGIN = 30.0
_DEFAULT_PAGE_SIZE = 100


@dataclass(frozen=True, slots=True)
class ClusterPage:
    """One page of a cluster search."""

    total: int
    items: list[dict[str, Any]]


class OcmClient:
    """Synchronous OCM client.

    Example:
        ocm = OcmClient(token=os.environ["OCM_TOKEN"], url=STAGE)
        match ocm.list_clusters("name = 'c1'"):
            case Ok(page): ...
    """

    def __init__(
        self,
        *,
        token: str,
        url: str = PRODUCTION,
        sso_url: str = SSO_TOKEN_URL,
        http_client: httpx.Client | None = None,
        timeout_seconds: float = 30.0,
        cancel: threading.Event | None = None,
    ) -> None:
        if not token:
            raise ValueError("token is required")

        self._offline_token = token
        self._url = url.rstrip("/")
        self._sso_url = sso_url
        self._client = http_client or httpx.Client(timeout=timeout_seconds)
        self._cancel = cancel
        self._access_token: str | None = None
        self._access_token_expires_at = 0.0

    @property
    def url(self) -> str:
        return self._url

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> OcmClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ── auth ────────────────────────────────────────────────────

    def _token(self) -> Result[str, ExternalCallFailedError]:
        now = time.monotonic()
        if self._access_token and now < self._access_token_expires_at:
            return Ok(self._access_token)

        try:
            resp = self._client.post(
                self._sso_url,
                data={
                    "grant_type": "refresh_token",
                    "client_id": SSO_CLIENT_ID,
                    "refresh_token": self._offline_token,
                },
            )
        except httpx.HTTPError as e:
            return Err(ExternalCallFailedError("ocm token exchange", str(e)))

        if resp.status_code >= 400:
            return Err(
                ExternalCallFailedError("ocm token exchange", f"HTTP {resp.status_code}: {resp.text[:200]}")
            )

        try:
            payload = resp.json()
            token = payload["access_token"]
        except (ValueError, KeyError) as e:
            return Err(ExternalCallFailedError("ocm token exchange", f"malformed token response: {e}"))

        expires_in = float(payload.get("expires_in", 300))
        self._access_token = token
        self._access_token_expires_at = now + max(expires_in - _TOKEN_EXPIRY_MARGIN, 0.0)
        return Ok(token)

    # ── transport ───────────────────────────────────────────────

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Result[Any, OutputError]:
        operation = f"ocm GET {path}"
        if self._cancel is not None and self._cancel.is_set():
            return Err(OperationCancelledError(operation))

        match self._token():
            case Err() as e:
                return e
            case Ok(token):
                pass

        try:
            resp = self._client.get(
                f"{self._url}{path}",
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            return Err(ExternalCallFailedError(operation, str(e)))

        if resp.status_code >= 400:
            return Err(ExternalCallFailedError(operation, _error_reason(resp)))

        try:
            return Ok(resp.json())
        except ValueError as e:
            return Err(DecodeError(operation, f"response is not JSON: {e}"))

    # ── clusters ────────────────────────────────────────────────

    def list_clusters(
        self, search: str, page: int = 1, size: int = 1
    ) -> Result[ClusterPage, OutputError]:
        """Search clusters. `total` counts every match, not just this page."""
        match self._get(CLUSTERS_PATH, {"search": search, "page": page, "size": size}):
            case Err() as e:
                return e
            case Ok(body):
                pass
        if not isinstance(body, dict):
            return Err(DecodeError(f"ocm GET {CLUSTERS_PATH}", "expected a JSON object"))
        items = body.get("items") or []
        return Ok(ClusterPage(total=int(body.get("total", len(items))), items=items))

    def get_cluster(self, cluster_id: str) -> Result[dict[str, Any], OutputError]:
        path = f"{CLUSTERS_PATH}/{cluster_id}"
        match self._get(path):
            case Err() as e:
                return e
            case Ok(dict() as body):
                return Ok(body)
            case Ok(_):
                return Err(DecodeError(f"ocm GET {path}", "expected a JSON object"))

    def get_kubeconfig(self, cluster_id: str) -> Result[str, OutputError]:
        """Admin kubeconfig of a cluster (the credentials endpoint)."""
        path = f"{CLUSTERS_PATH}/{cluster_id}/credentials"
        match self._get(path):
            case Err() as e:
                return e
            case Ok({"kubeconfig": str(kubeconfig)}) if kubeconfig:
                return Ok(kubeconfig)
            case Ok(_):
                return Err(DecodeError(f"ocm GET {path}", "response has no kubeconfig"))

    # ── oidc configs ────────────────────────────────────────────

    def list_oidc_configs(self) -> Result[list[dict[str, Any]], OutputError]:
        """All OIDC configs of the organization, across pages."""
        configs: list[dict[str, Any]] = []
        page = 1
        while True:
            match self._get(OIDC_CONFIGS_PATH, {"page": page, "size": _DEFAULT_PAGE_SIZE}):
                case Err() as e:
                    return e
                case Ok(dict() as body):
                    pass
                case Ok(_):
                    return Err(DecodeError(f"ocm GET {OIDC_CONFIGS_PATH}", "expected a JSON object"))

            items = body.get("items") or []
            configs.extend(items)
            total = int(body.get("total", len(configs)))
            if not items or len(configs) >= total:
                return Ok(configs)
            page += 1


def _error_reason(resp: httpx.Response) -> str:
    """OCM errors are JSON with a `reason`; fall back to the raw body."""
    try:
        payload = resp.json()
        if isinstance(payload, dict) and payload.get("reason"):
            return f"HTTP {resp.status_code}: {payload['reason']}"
    except ValueError:
        pass
    return f"HTTP {resp.status_code}: {resp.text[:200]}"

"""
==============================================================================
Backend Client Module
==============================================================================

Async HTTP client for the demo backend.

Endpoints:
----------
- GET /health
- GET /emergency/{identifier}?hospital_key=...
- GET /forms/{identifier}/{form_type}
- GET /vault/{identifier}

Every call returns the decoded JSON object. Application-level failures are
reported by the backend as an "error" key and are returned as-is; HTTP error
statuses are folded into the same shape. Transport failures, timeouts and
non-JSON bodies raise BACKEND_UNAVAILABLE. There are no retries.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from healthchain.config import get_settings
from healthchain.core import exceptions


# Module logger
logger = logging.getLogger(__name__)


def _segment(value: str) -> str:
    """Quote a value for use as a single path segment."""
    return quote(str(value), safe="")


class BackendClient:
    """
    Client for the four demo backend endpoints.

    Example:
        >>> client = BackendClient()
        >>> data = await client.emergency("123456789012")
        >>> data["emergency_data"]["blood_type"]
        'O+'
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        hospital_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Backend base URL (defaults to settings.api_base)
            hospital_key: Simulated access key (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            transport: Custom httpx transport (used by tests)
        """
        settings = get_settings()

        self._base_url = (base_url or settings.api_base).rstrip("/")
        self._hospital_key = hospital_key or settings.hospital_key
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout or settings.request_timeout_seconds,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    # =========================================================================
    # ENDPOINTS
    # =========================================================================

    async def health(self) -> Dict[str, Any]:
        """Fetch backend health."""
        return await self._get_json("/health")

    async def emergency(self, identifier: str) -> Dict[str, Any]:
        """Fetch emergency medical data for an identifier."""
        return await self._get_json(
            f"/emergency/{_segment(identifier)}",
            params={"hospital_key": self._hospital_key},
        )

    async def forms(self, identifier: str, form_type: str) -> Dict[str, Any]:
        """Fetch auto-fill values for a form type."""
        return await self._get_json(
            f"/forms/{_segment(identifier)}/{_segment(form_type)}"
        )

    async def vault(self, identifier: str) -> Dict[str, Any]:
        """Fetch the data vault overview."""
        return await self._get_json(f"/vault/{_segment(identifier)}")

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    async def _get_json(
        self,
        path: str,
        params: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException:
            logger.warning(f"Backend timeout: GET {path}")
            raise exceptions.backend_unavailable("Backend request timed out")
        except httpx.HTTPError as e:
            logger.warning(f"Backend request failed: GET {path}: {e}")
            raise exceptions.backend_unavailable(str(e) or "Backend request failed")

        try:
            data = response.json()
        except ValueError:
            logger.warning(
                f"Backend returned non-JSON body: GET {path} ({response.status_code})"
            )
            if response.is_error:
                raise exceptions.backend_unavailable(
                    f"Backend returned HTTP {response.status_code}"
                )
            raise exceptions.backend_unavailable("Backend returned invalid JSON")

        if not isinstance(data, dict):
            raise exceptions.backend_unavailable("Unexpected backend response")

        if response.is_error and not data.get("error"):
            detail = data.get("detail")
            message = detail if isinstance(detail, str) and detail else (
                f"Backend returned HTTP {response.status_code}"
            )
            logger.info(f"Backend error: GET {path}: {message}")
            return {"error": message}

        return data

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()


# =============================================================================
# DEPENDENCY
# =============================================================================

_client: Optional[BackendClient] = None


def get_backend_client() -> BackendClient:
    """Get the shared backend client (FastAPI dependency)."""
    global _client
    if _client is None:
        _client = BackendClient()
        logger.info(f"🔌 Backend client ready: {_client.base_url}")
    return _client


async def close_backend_client() -> None:
    """Close the shared backend client, if it was created."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None

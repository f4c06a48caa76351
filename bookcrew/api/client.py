"""HTTP client for the BookCrew backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from bookcrew.api.errors import ApiError, ApplicationError, NetworkError

logger = logging.getLogger(__name__)


@dataclass
class ApiResponse:
    """Decoded backend response."""

    data: Any
    status: int

    @property
    def body(self) -> Any:
        """The envelope's `data` field, or the raw payload if it has none."""
        if isinstance(self.data, dict) and "data" in self.data:
            return self.data["data"]
        return self.data

    @property
    def meta(self) -> dict:
        if isinstance(self.data, dict) and isinstance(self.data.get("meta"), dict):
            return self.data["meta"]
        return {}


class ApiClient:
    """
    HTTP client for the BookCrew backend.

    Attaches the session's bearer token to every call. No retries and no
    timeout: failures surface to the caller immediately.
    """

    def __init__(
        self,
        api_url: str,
        token: str | None = None,
        http: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.token = token
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(timeout=None, transport=transport)

    def _headers(self) -> dict:
        """Build request headers."""
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict | None = None,
    ) -> ApiResponse:
        """
        Issue one backend call.

        Raises:
            NetworkError: no response was received
            ApiError: non-2xx response
            ApplicationError: 2xx response with {"success": false}
        """
        url = f"{self.api_url}{path}"
        logger.debug("%s %s", method, path)
        try:
            res = await self.http.request(
                method,
                url,
                json=json,
                params={k: v for k, v in (params or {}).items() if v is not None},
                headers=self._headers(),
            )
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise NetworkError(e) from e

        payload = _decode(res)
        if not res.is_success:
            logger.warning("%s %s -> %s", method, path, res.status_code)
            raise ApiError(res.status_code, payload)
        if isinstance(payload, dict) and payload.get("success") is False:
            logger.info("%s %s -> success=false", method, path)
            raise ApplicationError(res.status_code, payload)
        return ApiResponse(data=payload, status=res.status_code)

    async def get(self, path: str, params: dict | None = None) -> ApiResponse:
        """Make GET request."""
        return await self.request("GET", path, params=params)

    async def post(self, path: str, data: Any = None, params: dict | None = None) -> ApiResponse:
        """Make POST request."""
        return await self.request("POST", path, json=data, params=params)

    async def patch(self, path: str, data: Any = None) -> ApiResponse:
        """Make PATCH request."""
        return await self.request("PATCH", path, json=data)

    async def put(self, path: str, data: Any = None) -> ApiResponse:
        """Make PUT request."""
        return await self.request("PUT", path, json=data)

    async def delete(self, path: str, data: Any = None) -> ApiResponse:
        """Make DELETE request. The backend reads the target from the body."""
        return await self.request("DELETE", path, json=data)

    async def forward(
        self,
        method: str,
        path: str,
        content: bytes,
        params: list[tuple[str, str]],
        content_type: str | None,
    ) -> httpx.Response:
        """
        Relay a raw request to the backend and return the raw response.

        Used by the same-origin proxy; no envelope checks are applied.
        """
        headers = self._headers()
        if content_type:
            headers["Content-Type"] = content_type
        try:
            return await self.http.request(
                method,
                f"{self.api_url}/{path.lstrip('/')}",
                content=content or None,
                params=params,
                headers=headers,
            )
        except httpx.TransportError as e:
            logger.warning("proxy %s /%s failed: %s", method, path, e)
            raise NetworkError(e) from e

    async def close(self):
        """Close client."""
        if self._owns_http:
            await self.http.aclose()


def _decode(res: httpx.Response) -> Any:
    try:
        return res.json()
    except ValueError:
        return None

"""HTTP client for the storefront backend.

The client never owns session or connectivity state. It reports outcomes
into the state layer: an unauthorized response that cannot be refreshed
calls ``AuthStore.mark_expired`` and a request that never got a response
publishes ``network-error`` on the bus.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, Optional

import httpx

from storefront.shared.core import events
from storefront.shared.core.event_bus import EventBus
from storefront.buyer.state.auth_store import AuthStore

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001/api"
DEFAULT_TIMEOUT = 30.0


class ApiError(Exception):
    """Request failed; ``status`` is None when no response arrived."""

    def __init__(self, message: str, status: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data


class ApiClient:
    def __init__(
        self,
        event_bus: EventBus,
        auth: AuthStore,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.bus = event_bus
        self.auth = auth
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None
        self._refresh_lock: Optional[asyncio.Lock] = None
        self._loop_id: Optional[int] = None
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    def set_tokens(self, access: Optional[str], refresh: Optional[str]) -> None:
        self.access_token = access
        self.refresh_token = refresh

    def clear_tokens(self) -> None:
        self.access_token = None
        self.refresh_token = None

    async def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", url, params=params)

    async def post(self, url: str, data: Any = None) -> Any:
        return await self.request("POST", url, json=data)

    async def put(self, url: str, data: Any = None) -> Any:
        return await self.request("PUT", url, json=data)

    async def patch(self, url: str, data: Any = None) -> Any:
        return await self.request("PATCH", url, json=data)

    async def delete(self, url: str) -> Any:
        return await self.request("DELETE", url)

    async def request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            ApiError: On transport failure or a non-success status
        """
        sent_token = self.access_token
        response = await self._send(method, url, **kwargs)

        if response.status_code == 401 and self.refresh_token:
            if await self._refresh_once(sent_token):
                response = await self._send(method, url, **kwargs)
            else:
                self.auth.mark_expired("Your session has expired. Please sign in again.")
                raise ApiError("Session expired", status=401)

        if response.status_code == 401:
            self.auth.mark_expired("Unauthorized")

        if response.is_error:
            data = _json_or_none(response)
            message = (data or {}).get("message") if isinstance(data, dict) else None
            raise ApiError(message or response.reason_phrase or "An unexpected error occurred", response.status_code, data)

        return _json_or_none(response)

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        started = time.perf_counter()
        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.TransportError as e:
            logger.warning(f"[API] {method} {url} failed: {e}")
            self.bus.publish(events.TOPIC_NETWORK_ERROR, events.create_network_error_event(url, str(e)))
            raise ApiError(str(e) or "Network error") from e

        logger.debug(f"[API] {method} {url} - {response.status_code} in {(time.perf_counter() - started) * 1000:.0f}ms")
        return response

    def _ensure_lock(self) -> asyncio.Lock:
        """Get or create the refresh lock for the current event loop."""
        loop_id = id(asyncio.get_running_loop())
        if self._refresh_lock is None or self._loop_id != loop_id:
            self._refresh_lock = asyncio.Lock()
            self._loop_id = loop_id
        return self._refresh_lock

    async def _refresh_once(self, stale_token: Optional[str]) -> bool:
        """Refresh at most once for every request rejected with the same token.

        Requests that hit a 401 together queue on the lock. The first one
        exchanges the refresh token and the rest reuse its new access token.
        """
        async with self._ensure_lock():
            if self.access_token and self.access_token != stale_token:
                return True
            if not self.refresh_token:
                return False
            return await self._refresh()

    async def _refresh(self) -> bool:
        """Exchange the refresh token for a new access token."""
        try:
            response = await self._client.post("/auth/refresh", json={"refreshToken": self.refresh_token})
        except httpx.TransportError as e:
            logger.warning(f"[API] token refresh failed: {e}")
            self.clear_tokens()
            return False

        data = _json_or_none(response)
        tokens = data.get("data") if isinstance(data, dict) else None
        if response.is_error or not isinstance(tokens, dict) or not tokens.get("accessToken"):
            self.clear_tokens()
            return False

        self.set_tokens(tokens["accessToken"], tokens.get("refreshToken", self.refresh_token))
        expires_in = tokens.get("expiresIn")
        if expires_in:
            self.auth.refresh_session(expires_in)
        logger.info("[API] access token refreshed")
        return True

    async def aclose(self) -> None:
        await self._client.aclose()


def _json_or_none(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None

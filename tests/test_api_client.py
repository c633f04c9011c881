"""Tests for the backend boundary client."""

import asyncio
import json

import httpx
import pytest

from storefront.buyer.services.api import ApiClient, ApiError
from storefront.buyer.state.auth_store import AuthStore
from storefront.shared.core import events


def make_client(bus, auth, handler):
    return ApiClient(bus, auth, base_url="https://shop.test/api", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_returns_json_and_sends_bearer_token(bus, clock):
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"success": True, "data": [1, 2]})

    client = make_client(bus, AuthStore(bus, clock=clock), handler)
    client.set_tokens("abc", None)

    body = await client.get("/products")

    assert body["data"] == [1, 2]
    assert seen["auth"] == "Bearer abc"
    await client.aclose()


@pytest.mark.asyncio
async def test_transport_failure_raises_network_error(bus, clock, signals):
    network_errors = signals(events.TOPIC_NETWORK_ERROR)

    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(bus, AuthStore(bus, clock=clock), handler)

    with pytest.raises(ApiError) as excinfo:
        await client.get("/cart")

    assert excinfo.value.status is None
    assert len(network_errors) == 1
    assert network_errors[0]["url"] == "/cart"
    await client.aclose()


@pytest.mark.asyncio
async def test_unauthorized_without_refresh_marks_session_expired(bus, clock, user, signals):
    expired = signals(events.TOPIC_SESSION_EXPIRED)
    auth = AuthStore(bus, clock=clock)
    auth.login(user, 3600)

    client = make_client(bus, auth, lambda request: httpx.Response(401, json={"message": "Unauthorized"}))

    with pytest.raises(ApiError) as excinfo:
        await client.get("/orders")
    with pytest.raises(ApiError):
        await client.get("/orders")

    assert excinfo.value.status == 401
    assert auth.is_authenticated() is False
    assert len(expired) == 1
    await client.aclose()


@pytest.mark.asyncio
async def test_unauthorized_refreshes_and_retries(bus, clock, user, signals):
    expired = signals(events.TOPIC_SESSION_EXPIRED)
    auth = AuthStore(bus, clock=clock)
    auth.login(user, 10)
    calls = []

    def handler(request):
        calls.append(request.url.path)
        if request.url.path.endswith("/auth/refresh"):
            return httpx.Response(200, json={"data": {"accessToken": "new", "refreshToken": "r2", "expiresIn": 900}})
        if request.headers.get("Authorization") == "Bearer new":
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(401)

    client = make_client(bus, auth, handler)
    client.set_tokens("old", "r1")

    assert await client.get("/profile") == {"ok": True}

    assert calls == ["/api/profile", "/api/auth/refresh", "/api/profile"]
    assert client.refresh_token == "r2"
    clock.advance(600)
    assert auth.is_authenticated() is True
    assert expired == []
    await client.aclose()


@pytest.mark.asyncio
async def test_failed_refresh_expires_session(bus, clock, user, signals):
    expired = signals(events.TOPIC_SESSION_EXPIRED)
    auth = AuthStore(bus, clock=clock)
    auth.login(user, 3600)

    client = make_client(bus, auth, lambda request: httpx.Response(401))
    client.set_tokens("old", "r1")

    with pytest.raises(ApiError):
        await client.post("/cart/items", {"productId": "p1"})

    assert client.access_token is None
    assert auth.error is not None
    assert len(expired) == 1
    await client.aclose()


@pytest.mark.asyncio
async def test_error_status_carries_server_message(bus, clock):
    client = make_client(
        bus,
        AuthStore(bus, clock=clock),
        lambda request: httpx.Response(422, json={"message": "Out of stock"}),
    )

    with pytest.raises(ApiError) as excinfo:
        await client.post("/cart/items", {"productId": "p1"})

    assert excinfo.value.status == 422
    assert excinfo.value.message == "Out of stock"
    await client.aclose()


@pytest.mark.asyncio
async def test_concurrent_unauthorized_requests_share_one_refresh(bus, clock, user, signals):
    expired = signals(events.TOPIC_SESSION_EXPIRED)
    auth = AuthStore(bus, clock=clock)
    auth.login(user, 10)
    valid_refresh = {"r1"}
    refresh_calls = []

    def handler(request):
        if request.url.path.endswith("/auth/refresh"):
            token = json.loads(request.content)["refreshToken"]
            refresh_calls.append(token)
            # Refresh tokens rotate and are single-use
            if token not in valid_refresh:
                return httpx.Response(401)
            valid_refresh.discard(token)
            return httpx.Response(200, json={"data": {"accessToken": "new", "refreshToken": "r2", "expiresIn": 900}})
        if request.headers.get("Authorization") == "Bearer new":
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(401)

    client = make_client(bus, auth, handler)
    client.set_tokens("old", "r1")

    results = await asyncio.gather(client.get("/orders"), client.get("/wishlist"), client.get("/profile"))

    assert results == [{"ok": True}] * 3
    assert refresh_calls == ["r1"]
    assert client.access_token == "new"
    assert auth.is_authenticated() is True
    assert expired == []
    await client.aclose()

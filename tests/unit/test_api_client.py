"""
Tests for the game API client using httpx.MockTransport.
"""

import json

import httpx
import pytest
from tycoon.core.exceptions import ApiError
from tycoon.services import GameApiClient, PropertyAction

BASE_URL = "http://game.test/api"


def _client(handler, **kwargs):
    return GameApiClient(BASE_URL, transport=httpx.MockTransport(handler), **kwargs)


def _envelope(data, success=True, message=None):
    return {"success": success, "data": data, "message": message}


@pytest.mark.asyncio
async def test_incoming_trades_parsed(trade_data):
    seen = []

    def handler(request):
        seen.append(request.url.path)
        return httpx.Response(200, json=_envelope([trade_data(42), trade_data(43, status="declined")]))

    async with _client(handler) as client:
        trades = await client.get_incoming_trades(5, 1)

    assert seen == ["/api/game-trade-requests/incoming/5/player/1"]
    assert [t.id for t in trades] == [42, 43]
    assert trades[1].status == "declined"


@pytest.mark.asyncio
async def test_initiated_trades_path():
    seen = []

    def handler(request):
        seen.append(request.url.path)
        return httpx.Response(200, json=_envelope([]))

    async with _client(handler) as client:
        assert await client.get_initiated_trades(5, 1) == []
    assert seen == ["/api/game-trade-requests/my/5/player/1"]


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    _envelope(None),
    _envelope({"trades": []}),
    {"unexpected": True},
    ["not", "an", "envelope"],
])
async def test_unexpected_shapes_become_empty(body):
    async with _client(lambda request: httpx.Response(200, json=body)) as client:
        assert await client.get_incoming_trades(1, 1) == []


@pytest.mark.asyncio
async def test_non_json_body_becomes_empty():
    async with _client(lambda request: httpx.Response(200, text="<html>oops</html>")) as client:
        assert await client.get_incoming_trades(1, 1) == []


@pytest.mark.asyncio
async def test_malformed_items_skipped(trade_data):
    body = _envelope([trade_data(1), {"status": "pending"}, "junk"])
    async with _client(lambda request: httpx.Response(200, json=body)) as client:
        trades = await client.get_incoming_trades(1, 1)
    assert [t.id for t in trades] == [1]


@pytest.mark.asyncio
async def test_error_status_raises():
    async with _client(lambda request: httpx.Response(500, json={"success": False})) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.get_incoming_trades(1, 1)
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.get_initiated_trades(1, 1)
    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_respond_to_trade():
    requests = []

    def handler(request):
        requests.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"success": True, "message": "Trade accepted"})

    async with _client(handler) as client:
        accepted = await client.respond_to_trade(42, accept=True)
        await client.respond_to_trade(43, accept=False)

    assert accepted.success
    assert accepted.message == "Trade accepted"
    assert requests == [
        ("POST", "/api/game-trade-requests/accept", {"id": 42}),
        ("POST", "/api/game-trade-requests/decline", {"id": 43}),
    ]


@pytest.mark.asyncio
async def test_create_trade():
    requests = []

    def handler(request):
        requests.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"success": True, "data": {"id": 77}})

    async with _client(handler) as client:
        result = await client.create_trade(
            12, 7, 1, offer_properties=[1], offer_amount=140, requested_properties=[19],
        )

    assert result.success
    assert result.data == {"id": 77}
    assert requests == [(
        "POST",
        "/api/game-trade-requests",
        {
            "game_id": 12,
            "player_id": 7,
            "target_player_id": 1,
            "offer_properties": [1],
            "offer_amount": 140,
            "requested_properties": [19],
            "requested_amount": 0,
            "status": "pending",
        },
    )]


@pytest.mark.asyncio
async def test_property_action():
    requests = []

    def handler(request):
        requests.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"success": False, "message": "Not enough cash"})

    async with _client(handler) as client:
        result = await client.property_action(PropertyAction.DEVELOPMENT, 5, 1, 39)

    assert not result.success
    assert result.message == "Not enough cash"
    assert requests == [("/api/game-properties/development", {"game_id": 5, "user_id": 1, "property_id": 39})]


@pytest.mark.asyncio
async def test_bearer_token_sent():
    headers = []

    def handler(request):
        headers.append(request.headers.get("Authorization"))
        return httpx.Response(200, json=_envelope([]))

    async with _client(handler, auth_token="s3cret") as client:
        await client.get_incoming_trades(1, 1)
    assert headers == ["Bearer s3cret"]

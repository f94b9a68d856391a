import asyncio
import json

import httpx
import pytest

from fermi_sdk.errors import AirdropError, MarketNotFoundError, RpcError, SerializationError
from fermi_sdk.rpc.client import RpcClient

SOL_PERP = {
    "uuid": "m-1",
    "base_mint": "11111111111111111111111111111112",
    "quote_mint": "11111111111111111111111111111113",
    "name": "SOL-PERP",
    "created_at": 1_700_000_000,
    "kind": "perp",
    "base_decimals": 9,
    "quote_decimals": 6,
}


def _client(handler) -> RpcClient:
    transport = httpx.MockTransport(handler)
    return RpcClient("http://node.test/", client=httpx.AsyncClient(transport=transport))


def _run(coro_fn):
    async def runner():
        return await coro_fn()

    return asyncio.run(runner())


def test_list_and_find_market():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=[SOL_PERP])

    rpc = _client(handler)
    market = _run(lambda: rpc.get_market("m-1"))
    assert market.quote_decimals == 6
    assert market.base_decimals == 9
    assert market.is_perp()
    assert seen == ["http://node.test/markets"]

    with pytest.raises(MarketNotFoundError):
        _run(lambda: rpc.get_market("missing"))


def test_market_resource_4xx_is_market_not_found():
    rpc = _client(lambda request: httpx.Response(404, text="no such market"))
    with pytest.raises(MarketNotFoundError):
        _run(lambda: rpc.get_orderbook("m-404"))


def test_orderbook_and_depth_parse():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/orderbook"):
            entry = {"order_id": 1, "owner": "o", "price": 10, "quantity": 2, "side": "Buy", "expiry": 5}
            return httpx.Response(200, json={"buys": [entry], "sells": []})
        return httpx.Response(200, json={"lastUpdateId": 9, "bids": [["1.0", "2"]], "asks": []})

    rpc = _client(handler)
    book = _run(lambda: rpc.get_orderbook("m-1"))
    assert book.best_bid().price == 10
    assert book.best_ask() is None

    depth = _run(lambda: rpc.get_depth("m-1"))
    assert depth.last_update_id == 9
    assert depth.bids == [("1.0", "2")]


def test_server_error_is_rpc_error():
    rpc = _client(lambda request: httpx.Response(500))
    with pytest.raises(RpcError, match="500"):
        _run(rpc.list_markets)


def test_transport_failure_is_rpc_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    rpc = _client(handler)
    with pytest.raises(RpcError):
        _run(rpc.list_markets)


def test_invalid_json_is_serialization_error():
    rpc = _client(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(SerializationError):
        _run(rpc.list_markets)


def test_unknown_account_reads_as_empty():
    rpc = _client(lambda request: httpx.Response(404))
    account = _run(lambda: rpc.get_account("owner-1"))
    assert account.usdc_collateral == 0.0
    assert account.owner == "owner-1"

    balances = _run(lambda: rpc.get_balances("owner-1"))
    assert balances.tokens == {}


def test_positions_filter_by_owner():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(dict(request.url.params))
        return httpx.Response(200, json=[])

    rpc = _client(handler)
    _run(lambda: rpc.get_positions("owner-1"))
    _run(lambda: rpc.get_positions(None))
    assert seen == [{"owner": "owner-1"}, {}]


def test_airdrop_posts_payload():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"ok": True})

    rpc = _client(handler)
    _run(lambda: rpc.airdrop("owner-1", "mint-1", 1_000_000))
    assert bodies == [{"recipient": "owner-1", "token_mint": "mint-1", "amount": 1_000_000}]


def test_airdrop_error_field_fails_even_on_200():
    rpc = _client(lambda request: httpx.Response(200, json={"error": "faucet empty"}))
    with pytest.raises(AirdropError, match="faucet empty"):
        _run(lambda: rpc.airdrop("owner-1", "mint-1", 1))


def test_airdrop_unparseable_failure():
    rpc = _client(lambda request: httpx.Response(503, text="down"))
    with pytest.raises(AirdropError, match="Failed to parse response"):
        _run(lambda: rpc.airdrop("owner-1", "mint-1", 1))

from __future__ import annotations

import json
import logging
from typing import Any, Callable, TypeVar

import httpx

from fermi_sdk.domain.market import (
    AccountSummary,
    Balances,
    Depth,
    FundingEvent,
    MarketInfo,
    NodeStatus,
    OpenOrder,
    Orderbook,
    Position,
    Trade,
)
from fermi_sdk.errors import AirdropError, MarketNotFoundError, RpcError, SerializationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RPC_REQUEST_TIMEOUT = 10.0


class RpcClient:
    """
    REST client for the rollup node's read API and the testnet faucet.

    Responses are parsed into the read-side models as-is; the SDK only relies
    on market decimals and mints from them.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = RPC_REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> RpcClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # -------------------
    # Internal
    # -------------------

    async def _get(self, path: str, params: dict[str, str] | None = None) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            return await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise RpcError(f"GET {url} failed: {type(exc).__name__}: {exc}") from exc

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise SerializationError(f"Invalid JSON from {response.request.url}: {exc}") from exc

    @classmethod
    def _parse(cls, response: httpx.Response, parse: Callable[[Any], T]) -> T:
        body = cls._json(response)
        try:
            return parse(body)
        except (KeyError, TypeError, ValueError) as exc:
            raise SerializationError(f"Unexpected response shape from {response.request.url}: {exc}") from exc

    @staticmethod
    def _require_success(response: httpx.Response, what: str) -> None:
        if not response.is_success:
            raise RpcError(f"Failed to fetch {what}: {response.status_code}")

    async def _market_resource(self, market_id: str, resource: str) -> httpx.Response:
        response = await self._get(f"/markets/{market_id}/{resource}")
        if response.is_client_error:
            raise MarketNotFoundError(market_id)
        self._require_success(response, resource)
        return response

    # -------------------
    # Market queries
    # -------------------

    async def list_markets(self) -> list[MarketInfo]:
        response = await self._get("/markets")
        self._require_success(response, "markets")
        return self._parse(response, lambda body: [MarketInfo.from_dict(m) for m in body])

    async def get_market(self, market_id: str) -> MarketInfo:
        for market in await self.list_markets():
            if market.uuid == market_id:
                return market
        raise MarketNotFoundError(market_id)

    async def get_orderbook(self, market_id: str) -> Orderbook:
        response = await self._market_resource(market_id, "orderbook")
        return self._parse(response, Orderbook.from_dict)

    async def get_depth(self, market_id: str) -> Depth:
        response = await self._market_resource(market_id, "depth")
        return self._parse(response, Depth.from_dict)

    async def get_trades(self, market_id: str) -> list[Trade]:
        response = await self._market_resource(market_id, "trades")
        return self._parse(response, lambda body: [Trade.from_dict(t) for t in body])

    async def get_funding(self, market_id: str) -> list[FundingEvent]:
        response = await self._market_resource(market_id, "funding")
        return self._parse(response, lambda body: [FundingEvent.from_dict(e) for e in body])

    # -------------------
    # Account queries
    # -------------------

    async def get_account(self, owner: str) -> AccountSummary:
        response = await self._get(f"/accounts/{owner}")
        if response.is_client_error:
            # Accounts the node has never seen answer 4xx.
            return AccountSummary.empty(owner)
        self._require_success(response, "account")
        return self._parse(response, AccountSummary.from_dict)

    async def get_balances(self, owner: str) -> Balances:
        response = await self._get(f"/balances/{owner}")
        if response.is_client_error:
            return Balances()
        self._require_success(response, "balances")
        return self._parse(response, Balances.from_dict)

    async def get_positions(self, owner: str | None = None) -> list[Position]:
        params = {"owner": owner} if owner else None
        response = await self._get("/positions", params=params)
        self._require_success(response, "positions")
        return self._parse(response, lambda body: [Position.from_dict(p) for p in body])

    async def get_user_orders(self, owner: str) -> list[OpenOrder]:
        response = await self._get(f"/orders/user/{owner}")
        self._require_success(response, "user orders")
        return self._parse(response, lambda body: [OpenOrder.from_dict(o) for o in body])

    # -------------------
    # Airdrop (testnet only)
    # -------------------

    async def airdrop(self, recipient: str, token_mint: str, amount: int) -> None:
        url = f"{self.base_url}/airdrop"
        payload = {"recipient": recipient, "token_mint": token_mint, "amount": int(amount)}
        try:
            response = await self._client.post(url, json=payload)
        except httpx.HTTPError as exc:
            raise AirdropError(f"POST {url} failed: {type(exc).__name__}: {exc}") from exc

        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            body = {"error": "Failed to parse response"}
        error = body.get("error") if isinstance(body, dict) else None

        if not response.is_success:
            raise AirdropError(error or f"HTTP {response.status_code}")
        if error:
            raise AirdropError(str(error))

        logger.info(f"Airdropped {amount} of {token_mint} to {recipient}")

    # -------------------
    # Status
    # -------------------

    async def get_status(self) -> NodeStatus:
        response = await self._get("/status")
        self._require_success(response, "status")
        return self._parse(response, NodeStatus.from_dict)

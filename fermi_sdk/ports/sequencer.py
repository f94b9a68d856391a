from __future__ import annotations

from typing import Protocol

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
from fermi_sdk.domain.models import CancelResult, OrderResult, SequencerStatus, SignedCancel, SignedOrder


class SequencerPort(Protocol):
    async def submit_order(self, signed: SignedOrder) -> OrderResult: ...

    async def submit_cancel(self, signed: SignedCancel) -> CancelResult: ...

    async def get_status(self) -> SequencerStatus: ...

    async def close(self) -> None: ...


class MarketDataPort(Protocol):
    async def list_markets(self) -> list[MarketInfo]: ...

    async def get_market(self, market_id: str) -> MarketInfo: ...

    async def get_orderbook(self, market_id: str) -> Orderbook: ...

    async def get_depth(self, market_id: str) -> Depth: ...

    async def get_trades(self, market_id: str) -> list[Trade]: ...

    async def get_funding(self, market_id: str) -> list[FundingEvent]: ...

    async def get_account(self, owner: str) -> AccountSummary: ...

    async def get_balances(self, owner: str) -> Balances: ...

    async def get_positions(self, owner: str | None = None) -> list[Position]: ...

    async def get_user_orders(self, owner: str) -> list[OpenOrder]: ...

    async def airdrop(self, recipient: str, token_mint: str, amount: int) -> None: ...

    async def get_status(self) -> NodeStatus: ...

    async def close(self) -> None: ...

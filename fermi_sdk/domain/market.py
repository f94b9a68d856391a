"""
Read-side models for the REST API.

These mirror the JSON returned by the rollup node and are consumed as-is;
only the fields the SDK uses (decimals, mints, owner) matter to the signing
path. Optional fields fall back to the same defaults the node omits them with.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _opt_int(v: Any) -> int | None:
    return None if v is None else int(v)


def _opt_float(v: Any) -> float | None:
    return None if v is None else float(v)


@dataclass(frozen=True)
class MarketInfo:
    uuid: str
    base_mint: str
    quote_mint: str
    name: str
    created_at: int
    kind: str = ""
    base_decimals: int = 0
    quote_decimals: int = 0
    base_lot_size: int = 0
    quote_lot_size: int = 0
    price_decimals: int | None = None
    open_interest: int | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> MarketInfo:
        return cls(
            uuid=str(d["uuid"]),
            base_mint=str(d["base_mint"]),
            quote_mint=str(d["quote_mint"]),
            name=str(d["name"]),
            created_at=int(d["created_at"]),
            kind=str(d.get("kind") or ""),
            base_decimals=int(d.get("base_decimals") or 0),
            quote_decimals=int(d.get("quote_decimals") or 0),
            base_lot_size=int(d.get("base_lot_size") or 0),
            quote_lot_size=int(d.get("quote_lot_size") or 0),
            price_decimals=_opt_int(d.get("price_decimals")),
            open_interest=_opt_int(d.get("open_interest")),
        )

    def is_perp(self) -> bool:
        return self.kind == "perp" or "PERP" in self.name


@dataclass(frozen=True)
class OrderbookEntry:
    order_id: int
    owner: str
    price: int
    quantity: int
    side: str
    expiry: int

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> OrderbookEntry:
        return cls(
            order_id=int(d["order_id"]),
            owner=str(d["owner"]),
            price=int(d["price"]),
            quantity=int(d["quantity"]),
            side=str(d["side"]),
            expiry=int(d["expiry"]),
        )


@dataclass(frozen=True)
class Orderbook:
    buys: list[OrderbookEntry]
    sells: list[OrderbookEntry]

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Orderbook:
        return cls(
            buys=[OrderbookEntry.from_dict(e) for e in d.get("buys") or []],
            sells=[OrderbookEntry.from_dict(e) for e in d.get("sells") or []],
        )

    def best_bid(self) -> OrderbookEntry | None:
        return self.buys[0] if self.buys else None

    def best_ask(self) -> OrderbookEntry | None:
        return self.sells[0] if self.sells else None


@dataclass(frozen=True)
class Depth:
    """Binance-style depth snapshot: [price, quantity] string pairs."""

    last_update_id: int
    bids: list[tuple[str, str]]
    asks: list[tuple[str, str]]

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Depth:
        return cls(
            last_update_id=int(d["lastUpdateId"]),
            bids=[(str(p), str(q)) for p, q in d.get("bids") or []],
            asks=[(str(p), str(q)) for p, q in d.get("asks") or []],
        )


@dataclass(frozen=True)
class Trade:
    buyer_owner: str
    seller_owner: str
    price: int
    quantity: int
    timestamp: int
    base_mint: str
    quote_mint: str

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Trade:
        return cls(
            buyer_owner=str(d["buyer_owner"]),
            seller_owner=str(d["seller_owner"]),
            price=int(d["price"]),
            quantity=int(d["quantity"]),
            timestamp=int(d["timestamp"]),
            base_mint=str(d["base_mint"]),
            quote_mint=str(d["quote_mint"]),
        )


@dataclass(frozen=True)
class FundingEvent:
    market_id: str
    timestamp: int
    interval_seconds: int
    mark_price: int
    index_price: int
    premium_rate_bps: int
    funding_rate_bps: int
    total_payment: str

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> FundingEvent:
        return cls(
            market_id=str(d["market_id"]),
            timestamp=int(d["timestamp"]),
            interval_seconds=int(d["interval_seconds"]),
            mark_price=int(d["mark_price"]),
            index_price=int(d["index_price"]),
            premium_rate_bps=int(d["premium_rate_bps"]),
            funding_rate_bps=int(d["funding_rate_bps"]),
            total_payment=str(d["total_payment"]),
        )


@dataclass(frozen=True)
class Position:
    owner: str
    market_id: str
    base_position: str
    average_entry_price: str
    mark_price: str
    realized_pnl: str
    unrealized_pnl: str
    market_name: str | None = None
    cumulative_funding: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Position:
        return cls(
            owner=str(d["owner"]),
            market_id=str(d["market_id"]),
            base_position=str(d["base_position"]),
            average_entry_price=str(d["average_entry_price"]),
            mark_price=str(d["mark_price"]),
            realized_pnl=str(d["realized_pnl"]),
            unrealized_pnl=str(d["unrealized_pnl"]),
            market_name=d.get("market_name"),
            cumulative_funding=d.get("cumulative_funding"),
        )


@dataclass(frozen=True)
class OpenOrder:
    order_id: int
    market_id: str
    owner: str
    side: str
    price: int
    quantity: int
    expiry: int
    market_name: str | None = None
    timestamp: int | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> OpenOrder:
        return cls(
            order_id=int(d["order_id"]),
            market_id=str(d["market_id"]),
            owner=str(d["owner"]),
            side=str(d["side"]),
            price=int(d["price"]),
            quantity=int(d["quantity"]),
            expiry=int(d["expiry"]),
            market_name=d.get("market_name"),
            timestamp=_opt_int(d.get("timestamp")),
        )


@dataclass(frozen=True)
class AccountSummary:
    usdc_collateral: float
    owner: str | None = None
    equity_snapshot: float | None = None
    realized_pnl_snapshot: float | None = None
    unrealized_pnl_snapshot: float | None = None
    initial_margin_snapshot: float | None = None
    maintenance_margin_snapshot: float | None = None
    free_collateral_snapshot: float | None = None
    available_withdrawal_snapshot: float | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> AccountSummary:
        return cls(
            usdc_collateral=float(d["usdc_collateral"]),
            owner=d.get("owner"),
            equity_snapshot=_opt_float(d.get("equity_snapshot")),
            realized_pnl_snapshot=_opt_float(d.get("realized_pnl_snapshot")),
            unrealized_pnl_snapshot=_opt_float(d.get("unrealized_pnl_snapshot")),
            initial_margin_snapshot=_opt_float(d.get("initial_margin_snapshot")),
            maintenance_margin_snapshot=_opt_float(d.get("maintenance_margin_snapshot")),
            free_collateral_snapshot=_opt_float(d.get("free_collateral_snapshot")),
            available_withdrawal_snapshot=_opt_float(d.get("available_withdrawal_snapshot")),
        )

    @classmethod
    def empty(cls, owner: str) -> AccountSummary:
        # The node answers 4xx for accounts it has never seen.
        return cls(usdc_collateral=0.0, owner=owner)


@dataclass(frozen=True)
class TokenBalance:
    available: str
    reserved: str

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TokenBalance:
        return cls(available=str(d["available"]), reserved=str(d["reserved"]))


@dataclass(frozen=True)
class Balances:
    tokens: dict[str, TokenBalance] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Balances:
        return cls(tokens={str(mint): TokenBalance.from_dict(v) for mint, v in d.items()})


@dataclass(frozen=True)
class NodeStatus:
    block_height: int
    applied_batches: int

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> NodeStatus:
        return cls(block_height=int(d["block_height"]), applied_batches=int(d["applied_batches"]))

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

import base58

from fermi_sdk.errors import InvalidPubkeyError

PUBKEY_LENGTH = 32
SIGNATURE_LENGTH = 64

# Mainnet mints
SOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

# Testnet mints
TESTNET_SOL = "11111111111111111111111111111112"
TESTNET_USDC = "11111111111111111111111111111113"


@dataclass(frozen=True)
class Pubkey:
    """32-byte account identity. Text form is base58."""

    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray)):
            raise InvalidPubkeyError(f"Pubkey must be bytes; got {type(self.raw).__name__}")
        if len(self.raw) != PUBKEY_LENGTH:
            raise InvalidPubkeyError(f"Expected {PUBKEY_LENGTH} bytes, got {len(self.raw)}")
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def from_string(cls, text: str) -> Pubkey:
        try:
            raw = base58.b58decode(text.strip())
        except ValueError as exc:
            raise InvalidPubkeyError(f"Invalid base58: {exc}") from exc
        return cls(raw)

    def to_bytes(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return base58.b58encode(self.raw).decode("ascii")

    def __repr__(self) -> str:
        return f"Pubkey({self})"


# -------------------
# Enumerations
# -------------------
#
# Discriminant codes live in explicit tables next to each enum. They are part
# of the signed byte layout and must never follow declaration order.


class Side(Enum):
    BUY = "Buy"
    SELL = "Sell"

    @property
    def code(self) -> int:
        return SIDE_CODES[self]

    def __str__(self) -> str:
        return self.value.lower()


class MarketKind(Enum):
    PERP = "perp"

    @property
    def code(self) -> int:
        return MARKET_KIND_CODES[self]


class PositionEffect(Enum):
    OPEN = "open"
    CLOSE = "close"

    @property
    def code(self) -> int:
        return POSITION_EFFECT_CODES[self]

    def __str__(self) -> str:
        return self.value


class MarginMode(Enum):
    CROSS = "cross"
    ISOLATED = "isolated"

    @property
    def code(self) -> int:
        return MARGIN_MODE_CODES[self]

    def __str__(self) -> str:
        return self.value


SIDE_CODES: dict[Side, int] = {Side.BUY: 0, Side.SELL: 1}
MARKET_KIND_CODES: dict[MarketKind, int] = {MarketKind.PERP: 0}
POSITION_EFFECT_CODES: dict[PositionEffect, int] = {PositionEffect.OPEN: 0, PositionEffect.CLOSE: 1}
MARGIN_MODE_CODES: dict[MarginMode, int] = {MarginMode.CROSS: 0, MarginMode.ISOLATED: 1}


class IntentCategory(Enum):
    ORDER = "order"
    CANCEL = "cancel"


# -------------------
# Intents
# -------------------


@dataclass(frozen=True)
class OrderIntent:
    order_id: int
    owner: Pubkey
    side: Side
    price: int
    quantity: int
    expiry: int
    base_mint: Pubkey
    quote_mint: Pubkey
    market_kind: MarketKind = MarketKind.PERP
    leverage: int | None = None
    position_effect: PositionEffect | None = None
    reduce_only: bool = False
    margin_mode: MarginMode | None = None
    margin_amount: int | None = None
    liquidation: bool = False

    category = IntentCategory.ORDER

    def to_dict(self) -> dict[str, Any]:
        """JSON-style view in wire order; absent optionals are omitted."""
        out: dict[str, Any] = {
            "order_id": int(self.order_id),
            "owner": str(self.owner),
            "side": self.side.value,
            "price": int(self.price),
            "quantity": int(self.quantity),
            "expiry": int(self.expiry),
            "base_mint": str(self.base_mint),
            "quote_mint": str(self.quote_mint),
            "market_kind": self.market_kind.value,
        }
        if self.leverage is not None:
            out["leverage"] = int(self.leverage)
        if self.position_effect is not None:
            out["position_effect"] = self.position_effect.value
        out["reduce_only"] = bool(self.reduce_only)
        if self.margin_mode is not None:
            out["margin_mode"] = self.margin_mode.value
        if self.margin_amount is not None:
            out["margin_amount"] = int(self.margin_amount)
        out["liquidation"] = bool(self.liquidation)
        return out


@dataclass(frozen=True)
class CancelIntent:
    order_id: int
    owner: Pubkey
    base_mint: Pubkey
    quote_mint: Pubkey

    category = IntentCategory.CANCEL

    def to_dict(self) -> dict[str, Any]:
        return {
            "order_id": int(self.order_id),
            "owner": str(self.owner),
            "base_mint": str(self.base_mint),
            "quote_mint": str(self.quote_mint),
        }


# -------------------
# Signed artifacts
# -------------------


@dataclass(frozen=True)
class SignedOrder:
    intent: OrderIntent
    signature: bytes
    public_key: bytes

    @property
    def order_id(self) -> int:
        return self.intent.order_id

    @property
    def category(self) -> IntentCategory:
        return IntentCategory.ORDER

    @property
    def signature_hex(self) -> str:
        return self.signature.hex()

    def to_request(self) -> dict[str, Any]:
        return {"intent": self.intent.to_dict(), "signature": self.signature_hex}

    def to_json(self) -> str:
        return json.dumps(self.to_request(), separators=(",", ":"))


@dataclass(frozen=True)
class SignedCancel:
    intent: CancelIntent
    signature: bytes
    public_key: bytes

    @property
    def order_id(self) -> int:
        return self.intent.order_id

    @property
    def category(self) -> IntentCategory:
        return IntentCategory.CANCEL

    @property
    def signature_hex(self) -> str:
        return self.signature.hex()

    def to_request(self) -> dict[str, Any]:
        out = self.intent.to_dict()
        out["signature"] = self.signature_hex
        return out

    def to_json(self) -> str:
        return json.dumps(self.to_request(), separators=(",", ":"))


# -------------------
# Transport
# -------------------


@dataclass(frozen=True)
class TransactionEnvelope:
    tx_id: str
    payload: bytes
    signature: bytes
    public_key: bytes
    nonce: int
    timestamp: int

    @property
    def payload_text(self) -> str:
        return self.payload.decode("utf-8")


@dataclass(frozen=True)
class SubmissionResult:
    sequence_number: int
    expected_tick: int
    tx_hash: str


@dataclass(frozen=True)
class OrderResult:
    order_id: int
    sequence_number: int
    expected_tick: int
    tx_hash: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "order_id": int(self.order_id),
            "sequence_number": int(self.sequence_number),
            "expected_tick": int(self.expected_tick),
            "tx_hash": self.tx_hash,
        }


@dataclass(frozen=True)
class CancelResult:
    order_id: int
    sequence_number: int
    expected_tick: int
    tx_hash: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "order_id": int(self.order_id),
            "sequence_number": int(self.sequence_number),
            "expected_tick": int(self.expected_tick),
            "tx_hash": self.tx_hash,
        }


@dataclass(frozen=True)
class SequencerStatus:
    current_tick: int
    total_transactions: int
    pending_transactions: int
    uptime_seconds: int
    transactions_per_second: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_tick": int(self.current_tick),
            "total_transactions": int(self.total_transactions),
            "pending_transactions": int(self.pending_transactions),
            "uptime_seconds": int(self.uptime_seconds),
            "transactions_per_second": float(self.transactions_per_second),
        }


# -------------------
# Human-unit order request
# -------------------


@dataclass(frozen=True)
class PerpOrder:
    side: Side = Side.BUY
    price: float = 0.0
    quantity: float = 0.0
    leverage: int = 1
    position_effect: PositionEffect = PositionEffect.OPEN
    margin_mode: MarginMode = MarginMode.CROSS
    reduce_only: bool = False

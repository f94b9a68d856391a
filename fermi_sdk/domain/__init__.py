"""
Domain models: identities, intents, signed artifacts, envelopes and the
read-side market/account types.
"""

from fermi_sdk.domain.market import (
    AccountSummary,
    Balances,
    Depth,
    FundingEvent,
    MarketInfo,
    NodeStatus,
    OpenOrder,
    Orderbook,
    OrderbookEntry,
    Position,
    TokenBalance,
    Trade,
)
from fermi_sdk.domain.models import (
    SOL_MINT,
    TESTNET_SOL,
    TESTNET_USDC,
    USDC_MINT,
    CancelIntent,
    CancelResult,
    IntentCategory,
    MarginMode,
    MarketKind,
    OrderIntent,
    OrderResult,
    PerpOrder,
    PositionEffect,
    Pubkey,
    SequencerStatus,
    Side,
    SignedCancel,
    SignedOrder,
    SubmissionResult,
    TransactionEnvelope,
)

__all__ = [
    # Identity and enums
    "Pubkey",
    "Side",
    "MarketKind",
    "PositionEffect",
    "MarginMode",
    "IntentCategory",
    # Intents and signing
    "OrderIntent",
    "CancelIntent",
    "SignedOrder",
    "SignedCancel",
    "TransactionEnvelope",
    # Results
    "SubmissionResult",
    "OrderResult",
    "CancelResult",
    "SequencerStatus",
    "PerpOrder",
    # Read side
    "MarketInfo",
    "OrderbookEntry",
    "Orderbook",
    "Depth",
    "Trade",
    "FundingEvent",
    "Position",
    "OpenOrder",
    "AccountSummary",
    "Balances",
    "TokenBalance",
    "NodeStatus",
    # Mints
    "SOL_MINT",
    "USDC_MINT",
    "TESTNET_SOL",
    "TESTNET_USDC",
]

"""
Fermi trade SDK.

Signs perpetual orders and cancels locally and submits them to the Continuum
sequencer; reads markets, accounts and positions from the rollup node's REST
API.

    keypair = TradingKeypair.from_file("./my_keypair.json")
    async with await FermiClient.create(keypair, ClientConfig.from_env()) as client:
        await client.airdrop(1000.0)
        markets = await client.get_markets()
        result = await client.place_perp_order(
            markets[0].uuid,
            PerpOrder(side=Side.BUY, price=185.50, quantity=1.0, leverage=10),
        )
"""

from fermi_sdk.client import ClientConfig, FermiClient, generate_order_id
from fermi_sdk.domain import (
    SOL_MINT,
    TESTNET_SOL,
    TESTNET_USDC,
    USDC_MINT,
    AccountSummary,
    Balances,
    CancelIntent,
    CancelResult,
    Depth,
    FundingEvent,
    MarginMode,
    MarketInfo,
    OpenOrder,
    OrderIntent,
    Orderbook,
    OrderbookEntry,
    OrderResult,
    PerpOrder,
    Position,
    PositionEffect,
    Pubkey,
    SequencerStatus,
    Side,
    TokenBalance,
    Trade,
)
from fermi_sdk.errors import (
    AirdropError,
    ConfigError,
    DecimalConversionError,
    InvalidPubkeyError,
    KeypairError,
    MarketNotFoundError,
    NotFoundError,
    RpcError,
    SdkError,
    SequencerConnectionError,
    SerializationError,
    SigningError,
    SubmissionError,
)
from fermi_sdk.signing import TradingKeypair

__version__ = "0.1.0"

__all__ = [
    "ClientConfig",
    "FermiClient",
    "generate_order_id",
    "TradingKeypair",
    # Enums
    "Side",
    "PositionEffect",
    "MarginMode",
    # Orders
    "PerpOrder",
    "OrderIntent",
    "CancelIntent",
    "OrderResult",
    "CancelResult",
    "SequencerStatus",
    # Market / account
    "MarketInfo",
    "Orderbook",
    "OrderbookEntry",
    "Depth",
    "Trade",
    "FundingEvent",
    "Position",
    "OpenOrder",
    "AccountSummary",
    "Balances",
    "TokenBalance",
    "Pubkey",
    # Mints
    "SOL_MINT",
    "USDC_MINT",
    "TESTNET_SOL",
    "TESTNET_USDC",
    # Errors
    "SdkError",
    "KeypairError",
    "InvalidPubkeyError",
    "SerializationError",
    "SigningError",
    "SequencerConnectionError",
    "SubmissionError",
    "RpcError",
    "NotFoundError",
    "MarketNotFoundError",
    "DecimalConversionError",
    "AirdropError",
    "ConfigError",
]

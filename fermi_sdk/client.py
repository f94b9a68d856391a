from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

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
from fermi_sdk.domain.models import (
    TESTNET_USDC,
    CancelIntent,
    CancelResult,
    MarketKind,
    OrderIntent,
    OrderResult,
    PerpOrder,
    Pubkey,
    SequencerStatus,
)
from fermi_sdk.errors import ConfigError, InvalidPubkeyError
from fermi_sdk.ports.sequencer import MarketDataPort, SequencerPort
from fermi_sdk.rpc.client import RPC_REQUEST_TIMEOUT, RpcClient
from fermi_sdk.sequencer.connection import CONTINUUM_CONNECT_TIMEOUT, ContinuumConnection
from fermi_sdk.sequencer.envelope import now_micros
from fermi_sdk.signing.keypair import TradingKeypair
from fermi_sdk.signing.signer import sign_cancel, sign_perp_order
from fermi_sdk.utils.config_loader import env_config
from fermi_sdk.utils.units import COLLATERAL_DECIMALS, calculate_margin, to_canonical, to_canonical_pair

logger = logging.getLogger(__name__)

# Orders always expire one hour after they are signed.
ORDER_EXPIRY_SECONDS = 3600


@dataclass(frozen=True)
class ClientConfig:
    continuum_endpoint: str
    rpc_endpoint: str
    connect_timeout: float = CONTINUUM_CONNECT_TIMEOUT
    rpc_timeout: float = RPC_REQUEST_TIMEOUT

    @classmethod
    def from_config(cls, cfg: dict[str, Any]) -> ClientConfig:
        continuum = cfg.get("continuum") or {}
        rpc = cfg.get("rpc") or {}
        if not continuum.get("endpoint") or not rpc.get("endpoint"):
            raise ConfigError("Both continuum.endpoint and rpc.endpoint must be set")
        return cls(
            continuum_endpoint=str(continuum["endpoint"]),
            rpc_endpoint=str(rpc["endpoint"]),
            connect_timeout=float(continuum.get("connect_timeout_seconds") or CONTINUUM_CONNECT_TIMEOUT),
            rpc_timeout=float(rpc.get("timeout_seconds") or RPC_REQUEST_TIMEOUT),
        )

    @classmethod
    def from_env(cls) -> ClientConfig:
        """FERMI_CONTINUUM_ENDPOINT / FERMI_RPC_ENDPOINT, else localhost defaults."""
        return cls.from_config(env_config())


def generate_order_id(clock: Callable[[], int] = now_micros) -> int:
    """
    Order id from the microsecond wall clock.

    Two calls in the same microsecond collide; whether the sequencer
    deduplicates by order id is unresolved, so keep this in one place.
    """
    return int(clock())


def _parse_mint(value: str, what: str) -> Pubkey:
    try:
        return Pubkey.from_string(value)
    except InvalidPubkeyError as exc:
        raise InvalidPubkeyError(f"{what}: {exc}") from exc


class FermiClient:
    """
    Trading facade.

    - Orders and cancels are signed locally and sent to the Continuum sequencer.
    - Market data, accounts and the testnet faucet go through the REST API.
    - Prices and quantities are taken in human units and converted with the
      market's decimals before signing.
    """

    def __init__(
        self,
        keypair: TradingKeypair,
        sequencer: SequencerPort,
        rpc: MarketDataPort,
        *,
        clock: Callable[[], int] = now_micros,
    ) -> None:
        self.keypair = keypair
        self.sequencer = sequencer
        self.rpc = rpc
        self._clock = clock
        logger.info(f"FermiClient initialized for account: {keypair.pubkey_string()}")

    @classmethod
    async def create(cls, keypair: TradingKeypair, config: ClientConfig | None = None) -> FermiClient:
        config = config or ClientConfig.from_env()
        sequencer = await ContinuumConnection.open(
            config.continuum_endpoint,
            connect_timeout=config.connect_timeout,
        )
        rpc = RpcClient(config.rpc_endpoint, timeout=config.rpc_timeout)
        return cls(keypair, sequencer, rpc)

    async def close(self) -> None:
        await self.sequencer.close()
        await self.rpc.close()

    async def __aenter__(self) -> FermiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def pubkey(self) -> str:
        return self.keypair.pubkey_string()

    def pubkey_bytes(self) -> Pubkey:
        return self.keypair.pubkey()

    # -------------------
    # Intent construction
    # -------------------

    def build_order_intent(self, market: MarketInfo, order: PerpOrder) -> OrderIntent:
        price, quantity = to_canonical_pair(
            order.price,
            order.quantity,
            quote_decimals=market.quote_decimals,
            base_decimals=market.base_decimals,
        )
        margin_amount = calculate_margin(order.price, order.quantity, order.leverage)

        now = int(self._clock())
        return OrderIntent(
            order_id=generate_order_id(lambda: now),
            owner=self.keypair.pubkey(),
            side=order.side,
            price=price,
            quantity=quantity,
            expiry=now // 1_000_000 + ORDER_EXPIRY_SECONDS,
            base_mint=_parse_mint(market.base_mint, "base_mint"),
            quote_mint=_parse_mint(market.quote_mint, "quote_mint"),
            market_kind=MarketKind.PERP,
            leverage=int(order.leverage),
            position_effect=order.position_effect,
            reduce_only=bool(order.reduce_only),
            margin_mode=order.margin_mode,
            margin_amount=margin_amount,
            liquidation=False,
        )

    def build_cancel_intent(self, market: MarketInfo, order_id: int) -> CancelIntent:
        return CancelIntent(
            order_id=int(order_id),
            owner=self.keypair.pubkey(),
            base_mint=_parse_mint(market.base_mint, "base_mint"),
            quote_mint=_parse_mint(market.quote_mint, "quote_mint"),
        )

    # -------------------
    # Trading (Continuum)
    # -------------------

    async def place_perp_order(self, market_id: str, order: PerpOrder) -> OrderResult:
        """
        Place a perpetual order.

        1. Fetch market decimals and mints.
        2. Convert price/quantity to canonical units and compute margin.
        3. Sign with a fresh order id and a one-hour expiry.
        4. Submit to the sequencer.

        A failed submission is not retried; calling again signs a new order id.
        """
        market = await self.rpc.get_market(market_id)
        intent = self.build_order_intent(market, order)
        signed = sign_perp_order(self.keypair, intent)

        logger.info(
            f"Placing {order.side} perp order: price={order.price}, qty={order.quantity}, leverage={order.leverage}x"
        )
        result = await self.sequencer.submit_order(signed)
        logger.info(f"Order {result.order_id} placed successfully, tx_hash: {result.tx_hash}")
        return result

    async def cancel_order(self, market_id: str, order_id: int) -> CancelResult:
        market = await self.rpc.get_market(market_id)
        signed = sign_cancel(self.keypair, self.build_cancel_intent(market, order_id))

        logger.info(f"Cancelling order {order_id}")
        result = await self.sequencer.submit_cancel(signed)
        logger.info(f"Order {result.order_id} cancelled successfully, tx_hash: {result.tx_hash}")
        return result

    async def get_sequencer_status(self) -> SequencerStatus:
        return await self.sequencer.get_status()

    async def get_node_status(self) -> NodeStatus:
        return await self.rpc.get_status()

    # -------------------
    # Testnet funding
    # -------------------

    async def airdrop(self, amount: float) -> None:
        """Airdrop `amount` USDC (human units) to this account. Testnet only."""
        await self.rpc.airdrop(self.pubkey(), TESTNET_USDC, to_canonical(amount, COLLATERAL_DECIMALS))

    async def airdrop_to(self, recipient: str, token_mint: str, amount: int) -> None:
        await self.rpc.airdrop(recipient, token_mint, amount)

    # -------------------
    # Reads (REST)
    # -------------------

    async def get_markets(self) -> list[MarketInfo]:
        return await self.rpc.list_markets()

    async def get_market(self, market_id: str) -> MarketInfo:
        return await self.rpc.get_market(market_id)

    async def get_orderbook(self, market_id: str) -> Orderbook:
        return await self.rpc.get_orderbook(market_id)

    async def get_depth(self, market_id: str) -> Depth:
        return await self.rpc.get_depth(market_id)

    async def get_trades(self, market_id: str) -> list[Trade]:
        return await self.rpc.get_trades(market_id)

    async def get_funding(self, market_id: str) -> list[FundingEvent]:
        return await self.rpc.get_funding(market_id)

    async def get_positions(self) -> list[Position]:
        return await self.rpc.get_positions(self.pubkey())

    async def get_all_positions(self) -> list[Position]:
        return await self.rpc.get_positions(None)

    async def get_my_orders(self) -> list[OpenOrder]:
        return await self.rpc.get_user_orders(self.pubkey())

    async def get_account(self) -> AccountSummary:
        return await self.rpc.get_account(self.pubkey())

    async def get_balances(self) -> Balances:
        return await self.rpc.get_balances(self.pubkey())

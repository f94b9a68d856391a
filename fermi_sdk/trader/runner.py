from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import os
import sys
from typing import Any, NoReturn

from fermi_sdk.client import ClientConfig, FermiClient
from fermi_sdk.domain.models import (
    TESTNET_SOL,
    TESTNET_USDC,
    IntentCategory,
    MarginMode,
    OrderIntent,
    PerpOrder,
    PositionEffect,
    Pubkey,
    Side,
)
from fermi_sdk.errors import SdkError
from fermi_sdk.sequencer.envelope import TransactionEnvelopeBuilder
from fermi_sdk.signing.encoder import CanonicalEncoder
from fermi_sdk.signing.keypair import TradingKeypair
from fermi_sdk.signing.signer import DigestSigner, sign_perp_order
from fermi_sdk.utils.config_loader import default_config_path, env_config, load_config

logger = logging.getLogger(__name__)


def _die(msg: str, code: int = 2) -> NoReturn:
    print(msg, file=sys.stderr)
    raise SystemExit(code)


def _jsonable(o: Any) -> Any:
    if dataclasses.is_dataclass(o) and not isinstance(o, type):
        return dataclasses.asdict(o)
    return str(o)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=_jsonable))


def _load_cfg(config_path: str | None) -> dict[str, Any]:
    # Library defaults + env overrides when no config file is around.
    if config_path is None and not default_config_path().exists():
        return env_config()
    return load_config(config_path)


def _resolve_keypair(args: argparse.Namespace, cfg: dict[str, Any]) -> TradingKeypair:
    path = args.keypair or (cfg.get("keypair") or {}).get("path")
    if path:
        return TradingKeypair.from_file(path)

    secret = (os.environ.get("FERMI_SECRET_KEY") or "").strip()
    if secret:
        return TradingKeypair.from_base58_secret(secret)

    keypair = TradingKeypair.generate()
    logger.warning(f"No keypair configured; using throwaway account {keypair.pubkey_string()}")
    return keypair


# -------------------
# Commands
# -------------------


async def _cmd_status(client: FermiClient, args: argparse.Namespace) -> None:
    _print_json(
        {
            "account": client.pubkey(),
            "sequencer": (await client.get_sequencer_status()).to_dict(),
            "node": await client.get_node_status(),
        }
    )


async def _cmd_markets(client: FermiClient, args: argparse.Namespace) -> None:
    for m in await client.get_markets():
        print(f"{m.name:<12} {m.kind or '-':<6} {m.uuid}  base_dec={m.base_decimals} quote_dec={m.quote_decimals}")


async def _cmd_account(client: FermiClient, args: argparse.Namespace) -> None:
    account = await client.get_account()
    balances = await client.get_balances()
    positions = await client.get_positions()
    orders = await client.get_my_orders()
    _print_json(
        {
            "account": account,
            "balances": balances.tokens,
            "positions": positions,
            "open_orders": orders,
        }
    )


async def _cmd_airdrop(client: FermiClient, args: argparse.Namespace) -> None:
    await client.airdrop(args.amount)
    print(f"Airdropped {args.amount} USDC to {client.pubkey()}")


async def _cmd_place(client: FermiClient, args: argparse.Namespace) -> None:
    order = PerpOrder(
        side=Side.BUY if args.side == "buy" else Side.SELL,
        price=args.price,
        quantity=args.quantity,
        leverage=args.leverage,
        position_effect=PositionEffect.CLOSE if args.close else PositionEffect.OPEN,
        margin_mode=MarginMode.ISOLATED if args.isolated else MarginMode.CROSS,
        reduce_only=args.reduce_only,
    )
    result = await client.place_perp_order(args.market_id, order)
    _print_json(result.to_dict())


async def _cmd_cancel(client: FermiClient, args: argparse.Namespace) -> None:
    result = await client.cancel_order(args.market_id, args.order_id)
    _print_json(result.to_dict())


def _cmd_sign_debug(keypair: TradingKeypair) -> None:
    """Sign a fixed sample order offline and show every intermediate value."""
    intent = OrderIntent(
        order_id=12345,
        owner=keypair.pubkey(),
        side=Side.BUY,
        price=185_500_000,
        quantity=1_000_000_000,
        expiry=1_700_000_000,
        base_mint=Pubkey.from_string(TESTNET_SOL),
        quote_mint=Pubkey.from_string(TESTNET_USDC),
        leverage=10,
        position_effect=PositionEffect.OPEN,
        reduce_only=False,
        margin_mode=MarginMode.CROSS,
        margin_amount=18_550_000,
    )
    encoded = CanonicalEncoder().encode_order(intent)
    signed = sign_perp_order(keypair, intent)
    envelope = TransactionEnvelopeBuilder().build(signed)
    _print_json(
        {
            "account": keypair.pubkey_string(),
            "encoded_len": len(encoded),
            "encoded_hex": encoded.hex(),
            "digest_hex": DigestSigner.signing_message(IntentCategory.ORDER, encoded).decode("ascii"),
            "signature_hex": signed.signature_hex,
            "tx_id": envelope.tx_id,
            "payload": envelope.payload_text,
        }
    )


_COMMANDS = {
    "status": _cmd_status,
    "markets": _cmd_markets,
    "account": _cmd_account,
    "airdrop": _cmd_airdrop,
    "place": _cmd_place,
    "cancel": _cmd_cancel,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fermi perpetuals trading client.")
    parser.add_argument("--config", default=None, help="Path to config.yaml (default: config/config.yaml).")
    parser.add_argument("--keypair", default=None, help="Keypair JSON file (64-byte array).")
    parser.add_argument("--log-level", default=None, help="Override logging level.")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("status", help="Show sequencer status.")
    sub.add_parser("markets", help="List markets.")
    sub.add_parser("account", help="Show account, balances, positions and open orders.")
    sub.add_parser("sign-debug", help="Sign a sample order offline and print the envelope.")

    p = sub.add_parser("airdrop", help="Request testnet USDC.")
    p.add_argument("amount", type=float)

    p = sub.add_parser("place", help="Place a perpetual order (human units).")
    p.add_argument("market_id")
    p.add_argument("side", choices=["buy", "sell"])
    p.add_argument("price", type=float)
    p.add_argument("quantity", type=float)
    p.add_argument("--leverage", type=int, default=1)
    p.add_argument("--close", action="store_true", help="Close exposure instead of opening it.")
    p.add_argument("--isolated", action="store_true", help="Isolated margin (default: cross).")
    p.add_argument("--reduce-only", action="store_true")

    p = sub.add_parser("cancel", help="Cancel an order.")
    p.add_argument("market_id")
    p.add_argument("order_id", type=int)
    return parser


async def _run(args: argparse.Namespace, cfg: dict[str, Any], keypair: TradingKeypair) -> None:
    client = await FermiClient.create(keypair, ClientConfig.from_config(cfg))
    async with client:
        await _COMMANDS[args.command](client, args)


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        cfg = _load_cfg(args.config)
    except (FileNotFoundError, ValueError) as e:
        _die(f"Config error: {e}")

    level = (args.log_level or (cfg.get("logging") or {}).get("level") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        keypair = _resolve_keypair(args, cfg)
        if args.command == "sign-debug":
            _cmd_sign_debug(keypair)
            return
        asyncio.run(_run(args, cfg, keypair))
    except SdkError as e:
        logger.error(f"{args.command} failed: {type(e).__name__}: {e}")
        raise SystemExit(1) from e

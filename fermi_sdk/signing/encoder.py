"""
Canonical binary encoding of order and cancel intents.

The layout is Borsh-compatible and byte-matched by the remote verifier:

    u64      8 bytes, little-endian
    Pubkey   32 raw bytes
    enum     1-byte discriminant from the explicit code table of the enum
    Option   0x00 when absent; 0x01 followed by the encoded value
    bool     0x00 / 0x01

Field order and optional fields are fixed. Changing either breaks every
signature the verifier checks.
"""

from __future__ import annotations

import logging
import struct
from typing import Callable, TypeVar

from fermi_sdk.domain.models import CancelIntent, OrderIntent, Pubkey
from fermi_sdk.errors import SerializationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_U64 = struct.Struct("<Q")
_U8 = struct.Struct("<B")

OPTION_NONE = b"\x00"
OPTION_SOME = b"\x01"


def encode_u64(value: int) -> bytes:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SerializationError(f"u64 field must be an int; got {type(value).__name__}")
    try:
        return _U64.pack(value)
    except struct.error as exc:
        raise SerializationError(f"u64 out of range: {value}") from exc


def encode_bool(value: bool) -> bytes:
    return b"\x01" if value else b"\x00"


def encode_pubkey(value: Pubkey) -> bytes:
    if not isinstance(value, Pubkey):
        raise SerializationError(f"Expected Pubkey; got {type(value).__name__}")
    return value.to_bytes()


def encode_enum(variant) -> bytes:
    """Encode an enum variant through its `code` table entry."""
    try:
        return _U8.pack(variant.code)
    except (AttributeError, KeyError, struct.error) as exc:
        raise SerializationError(f"No discriminant for {variant!r}") from exc


def encode_option(value: T | None, encode: Callable[[T], bytes]) -> bytes:
    if value is None:
        return OPTION_NONE
    return OPTION_SOME + encode(value)


class CanonicalEncoder:
    """Serializes intents into their fixed signing layout."""

    def encode_order(self, intent: OrderIntent) -> bytes:
        parts = [
            encode_u64(intent.order_id),
            encode_pubkey(intent.owner),
            encode_enum(intent.side),
            encode_u64(intent.price),
            encode_u64(intent.quantity),
            encode_u64(intent.expiry),
            encode_pubkey(intent.base_mint),
            encode_pubkey(intent.quote_mint),
            encode_enum(intent.market_kind),
            encode_option(intent.leverage, encode_u64),
            encode_option(intent.position_effect, encode_enum),
            encode_bool(intent.reduce_only),
            encode_option(intent.margin_mode, encode_enum),
            encode_option(intent.margin_amount, encode_u64),
            encode_bool(intent.liquidation),
        ]
        data = b"".join(parts)
        logger.debug(f"Encoded order {intent.order_id} ({len(data)} bytes): {data[:100].hex()}")
        return data

    def encode_cancel(self, intent: CancelIntent) -> bytes:
        data = b"".join(
            [
                encode_u64(intent.order_id),
                encode_pubkey(intent.owner),
                encode_pubkey(intent.base_mint),
                encode_pubkey(intent.quote_mint),
            ]
        )
        logger.debug(f"Encoded cancel {intent.order_id} ({len(data)} bytes)")
        return data

    def encode(self, intent: OrderIntent | CancelIntent) -> bytes:
        if isinstance(intent, OrderIntent):
            return self.encode_order(intent)
        if isinstance(intent, CancelIntent):
            return self.encode_cancel(intent)
        raise SerializationError(f"Unsupported intent type: {type(intent).__name__}")

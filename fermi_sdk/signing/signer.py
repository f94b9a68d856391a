from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass

from fermi_sdk.domain.models import (
    SIGNATURE_LENGTH,
    CancelIntent,
    IntentCategory,
    OrderIntent,
    SignedCancel,
    SignedOrder,
)
from fermi_sdk.errors import SigningError
from fermi_sdk.signing.encoder import CanonicalEncoder
from fermi_sdk.signing.keypair import TradingKeypair

logger = logging.getLogger(__name__)

# Domain-separation prefixes; byte-matched by the verifier.
SIGNED_ORDER_PREFIX = b"FRM_DEX_ORDER:"
CANCEL_ORDER_PREFIX = b"FRM_DEX_CANCEL:"

SIGNING_PREFIXES: dict[IntentCategory, bytes] = {
    IntentCategory.ORDER: SIGNED_ORDER_PREFIX,
    IntentCategory.CANCEL: CANCEL_ORDER_PREFIX,
}


@dataclass(frozen=True)
class Signature:
    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != SIGNATURE_LENGTH:
            raise SigningError(f"Expected a {SIGNATURE_LENGTH}-byte signature, got {len(self.raw)}")

    @property
    def hex(self) -> str:
        return self.raw.hex()


class DigestSigner:
    """
    Signs encoded intents.

    message = lowercase_hex(SHA256(prefix || encoded)).encode("utf-8")

    The hex text is what gets signed, not the raw digest. The verifier
    re-derives the same text, so this step must not be "simplified".
    """

    def __init__(self, keypair: TradingKeypair) -> None:
        self.keypair = keypair

    @staticmethod
    def digest(category: IntentCategory, encoded: bytes) -> bytes:
        return hashlib.sha256(SIGNING_PREFIXES[category] + encoded).digest()

    @classmethod
    def signing_message(cls, category: IntentCategory, encoded: bytes) -> bytes:
        return cls.digest(category, encoded).hex().encode("utf-8")

    def sign(self, category: IntentCategory, encoded: bytes) -> Signature:
        message = self.signing_message(category, encoded)
        logger.debug(f"{category.value} SHA256 hash: {message.decode('ascii')}")
        signature = Signature(self.keypair.sign(message))
        logger.debug(f"{category.value} signature: {signature.hex}")
        return signature


def _require_owner(keypair: TradingKeypair, intent: OrderIntent | CancelIntent) -> None:
    if intent.owner.to_bytes() != keypair.pubkey_bytes():
        raise SigningError(
            f"Intent owner {intent.owner} does not match signing key {keypair.pubkey_string()}"
        )


def sign_perp_order(
    keypair: TradingKeypair,
    intent: OrderIntent,
    encoder: CanonicalEncoder | None = None,
) -> SignedOrder:
    _require_owner(keypair, intent)
    encoded = (encoder or CanonicalEncoder()).encode_order(intent)
    signature = DigestSigner(keypair).sign(IntentCategory.ORDER, encoded)
    return SignedOrder(intent=intent, signature=signature.raw, public_key=keypair.pubkey_bytes())


def sign_cancel(
    keypair: TradingKeypair,
    intent: CancelIntent,
    encoder: CanonicalEncoder | None = None,
) -> SignedCancel:
    _require_owner(keypair, intent)
    encoded = (encoder or CanonicalEncoder()).encode_cancel(intent)
    signature = DigestSigner(keypair).sign(IntentCategory.CANCEL, encoded)
    return SignedCancel(intent=intent, signature=signature.raw, public_key=keypair.pubkey_bytes())

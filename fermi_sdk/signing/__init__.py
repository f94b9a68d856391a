"""
Signing: canonical intent encoding, domain-separated digests and Ed25519 keys.
"""

from fermi_sdk.signing.encoder import CanonicalEncoder
from fermi_sdk.signing.keypair import TradingKeypair
from fermi_sdk.signing.signer import (
    CANCEL_ORDER_PREFIX,
    SIGNED_ORDER_PREFIX,
    DigestSigner,
    Signature,
    sign_cancel,
    sign_perp_order,
)

__all__ = [
    "CanonicalEncoder",
    "TradingKeypair",
    "DigestSigner",
    "Signature",
    "SIGNED_ORDER_PREFIX",
    "CANCEL_ORDER_PREFIX",
    "sign_perp_order",
    "sign_cancel",
]

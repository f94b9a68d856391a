import hashlib
from dataclasses import replace

import pytest
from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

from fermi_sdk.domain.models import (
    TESTNET_SOL,
    TESTNET_USDC,
    CancelIntent,
    IntentCategory,
    MarginMode,
    OrderIntent,
    PositionEffect,
    Pubkey,
    Side,
)
from fermi_sdk.errors import SigningError
from fermi_sdk.signing.encoder import CanonicalEncoder
from fermi_sdk.signing.keypair import TradingKeypair
from fermi_sdk.signing.signer import (
    CANCEL_ORDER_PREFIX,
    SIGNED_ORDER_PREFIX,
    DigestSigner,
    sign_cancel,
    sign_perp_order,
)

KEYPAIR = TradingKeypair.from_seed(bytes(range(32)))


def _order(**overrides) -> OrderIntent:
    intent = OrderIntent(
        order_id=12345,
        owner=KEYPAIR.pubkey(),
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
    return replace(intent, **overrides)


def _cancel() -> CancelIntent:
    return CancelIntent(
        order_id=12345,
        owner=KEYPAIR.pubkey(),
        base_mint=Pubkey.from_string(TESTNET_SOL),
        quote_mint=Pubkey.from_string(TESTNET_USDC),
    )


def test_signing_is_deterministic():
    a = sign_perp_order(KEYPAIR, _order())
    b = sign_perp_order(KEYPAIR, _order())
    assert a.signature == b.signature
    assert len(a.signature) == 64
    assert len(a.signature_hex) == 128


@pytest.mark.parametrize(
    "change",
    [
        {"quantity": 1_000_000_001},
        {"leverage": 11},
        {"reduce_only": True},
        {"side": Side.SELL},
        {"margin_mode": MarginMode.ISOLATED},
        {"margin_amount": None},
    ],
)
def test_any_field_change_changes_the_signature(change):
    base = sign_perp_order(KEYPAIR, _order())
    changed = sign_perp_order(KEYPAIR, _order(**change))
    assert base.signature != changed.signature


def test_signed_message_is_hex_text_of_prefixed_digest():
    encoded = CanonicalEncoder().encode_order(_order())
    signed = sign_perp_order(KEYPAIR, _order())

    expected = hashlib.sha256(SIGNED_ORDER_PREFIX + encoded).hexdigest().encode("utf-8")
    assert DigestSigner.signing_message(IntentCategory.ORDER, encoded) == expected

    verify_key = VerifyKey(KEYPAIR.pubkey_bytes())
    assert verify_key.verify(expected, signed.signature) == expected
    with pytest.raises(BadSignatureError):
        verify_key.verify(hashlib.sha256(SIGNED_ORDER_PREFIX + encoded).digest(), signed.signature)


def test_order_and_cancel_prefixes_separate_digests():
    encoded = b"\x00" * 104
    assert DigestSigner.digest(IntentCategory.ORDER, encoded) != DigestSigner.digest(IntentCategory.CANCEL, encoded)
    assert DigestSigner.digest(IntentCategory.CANCEL, encoded) == hashlib.sha256(CANCEL_ORDER_PREFIX + encoded).digest()


def test_signed_order_request_shape():
    signed = sign_perp_order(KEYPAIR, _order())
    assert signed.public_key == KEYPAIR.pubkey_bytes()
    assert signed.order_id == 12345

    request = signed.to_request()
    assert list(request) == ["intent", "signature"]
    assert request["intent"]["market_kind"] == "perp"
    assert request["intent"]["side"] == "Buy"
    assert request["intent"]["owner"] == KEYPAIR.pubkey_string()
    assert request["signature"] == signed.signature_hex


def test_cancel_signature_verifies_over_cancel_prefix():
    intent = _cancel()
    signed = sign_cancel(KEYPAIR, intent)
    encoded = CanonicalEncoder().encode_cancel(intent)
    message = hashlib.sha256(CANCEL_ORDER_PREFIX + encoded).hexdigest().encode("utf-8")

    VerifyKey(KEYPAIR.pubkey_bytes()).verify(message, signed.signature)
    request = signed.to_request()
    assert list(request) == ["order_id", "owner", "base_mint", "quote_mint", "signature"]


def test_owner_mismatch_is_rejected():
    other = TradingKeypair.from_seed(bytes([7]) * 32)
    with pytest.raises(SigningError):
        sign_perp_order(other, _order())
    with pytest.raises(SigningError):
        sign_cancel(other, _cancel())


def test_to_json_is_compact_request():
    signed = sign_cancel(KEYPAIR, _cancel())
    text = signed.to_json()
    assert text.startswith('{"order_id":12345,"owner":"')
    assert text.endswith(f'"signature":"{signed.signature_hex}"}}')


def test_cancel_signature_differs_from_order_with_same_fields():
    order = _order()
    cancel = _cancel()
    assert (order.order_id, order.owner, order.base_mint, order.quote_mint) == (
        cancel.order_id,
        cancel.owner,
        cancel.base_mint,
        cancel.quote_mint,
    )

    encoder = CanonicalEncoder()
    assert DigestSigner.digest(IntentCategory.ORDER, encoder.encode(order)) != DigestSigner.digest(
        IntentCategory.CANCEL, encoder.encode(cancel)
    )
    assert sign_perp_order(KEYPAIR, order).signature != sign_cancel(KEYPAIR, cancel).signature

import json

import pytest

from fermi_sdk.domain.models import (
    TESTNET_SOL,
    TESTNET_USDC,
    CancelIntent,
    OrderIntent,
    Pubkey,
    Side,
)
from fermi_sdk.errors import SerializationError, SigningError
from fermi_sdk.sequencer.envelope import PAYLOAD_PREFIX, FieldMap, TransactionEnvelopeBuilder
from fermi_sdk.signing.keypair import TradingKeypair
from fermi_sdk.signing.signer import sign_cancel, sign_perp_order

KEYPAIR = TradingKeypair.from_seed(bytes(range(32)))
NOW_MICROS = 1_700_000_000_123_456


def _builder(now: int = NOW_MICROS) -> TransactionEnvelopeBuilder:
    return TransactionEnvelopeBuilder(clock=lambda: now)


def _signed_order(price: int = 185_500_000):
    intent = OrderIntent(
        order_id=12345,
        owner=KEYPAIR.pubkey(),
        side=Side.BUY,
        price=price,
        quantity=1_000_000_000,
        expiry=1_700_000_000,
        base_mint=Pubkey.from_string(TESTNET_SOL),
        quote_mint=Pubkey.from_string(TESTNET_USDC),
    )
    return sign_perp_order(KEYPAIR, intent)


def _signed_cancel():
    intent = CancelIntent(
        order_id=777,
        owner=KEYPAIR.pubkey(),
        base_mint=Pubkey.from_string(TESTNET_SOL),
        quote_mint=Pubkey.from_string(TESTNET_USDC),
    )
    return sign_cancel(KEYPAIR, intent)


def _payload_json(envelope) -> dict:
    text = envelope.payload_text
    assert text.startswith(PAYLOAD_PREFIX)
    return json.loads(text[len(PAYLOAD_PREFIX):])


def test_order_envelope_fields():
    signed = _signed_order()
    env = _builder().build(signed)

    assert env.tx_id == "frm_order_12345_1700000000123456"
    assert env.nonce == 12345
    assert env.timestamp == NOW_MICROS
    assert env.signature == signed.signature
    assert env.public_key == KEYPAIR.pubkey_bytes()


def test_order_payload_layout():
    env = _builder().build(_signed_order())
    assert env.payload_text.startswith('FRM_v1.0:{"version":"1.0",')
    assert ": " not in env.payload_text

    body = _payload_json(env)
    assert list(body) == ["version", "intent", "signature", "local_sequencer_id", "type", "timestamp_ms"]
    assert body["local_sequencer_id"] == "fermi_trade_sdk"
    assert body["type"] == "order"
    assert body["timestamp_ms"] == "1700000000123"
    assert body["intent"]["market_kind"] == "perp"
    assert "leverage" not in body["intent"]


def test_cancel_payload_is_flat():
    env = _builder().build(_signed_cancel())
    assert env.tx_id == "frm_cancel_777_1700000000123456"

    body = _payload_json(env)
    assert list(body) == [
        "version",
        "order_id",
        "owner",
        "base_mint",
        "quote_mint",
        "signature",
        "local_sequencer_id",
        "type",
        "timestamp_ms",
    ]
    assert body["type"] == "cancel"


def test_u64_max_survives_payload_rendering():
    env = _builder().build(_signed_order(price=2**64 - 1))
    assert _payload_json(env)["intent"]["price"] == 2**64 - 1


def test_negative_clock_is_a_signing_error():
    with pytest.raises(SigningError):
        _builder(now=-1).build(_signed_order())


def test_field_map_keeps_existing_type():
    fields = FieldMap()
    fields.extend({"type": "custom", "a": 1})
    fields.setdefault("type", "order")
    fields.set("a", 2)
    assert fields.keys() == ["type", "a"]
    assert fields["type"] == "custom"
    assert fields.render() == '{"type":"custom","a":2}'


def test_field_map_rejects_nan():
    fields = FieldMap()
    fields.set("x", float("nan"))
    with pytest.raises(SerializationError):
        fields.render()

"""
Transport envelope construction.

The envelope payload is a separate, auditable rendering of the signed intent:

    FRM_v1.0:{"version":"1.0", <request DTO fields>, "local_sequencer_id":...,
              "type":..., "timestamp_ms":...}

The signature inside it covers only the canonical binary encoding, never this
text. Keys render in the order `field_map` adds them.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable

from fermi_sdk.domain.models import SignedCancel, SignedOrder, TransactionEnvelope
from fermi_sdk.errors import SerializationError, SigningError

logger = logging.getLogger(__name__)

PROTOCOL_ID = "FRM"
PROTOCOL_VERSION = "1.0"
PAYLOAD_PREFIX = f"{PROTOCOL_ID}_v{PROTOCOL_VERSION}:"
SOURCE_TAG = "fermi_trade_sdk"
TX_ID_PREFIX = "frm"


def now_micros() -> int:
    return time.time_ns() // 1_000


class FieldMap:
    """String-keyed map that renders in insertion order."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def setdefault(self, key: str, value: Any) -> Any:
        return self._values.setdefault(key, value)

    def extend(self, items: dict[str, Any]) -> None:
        for k, v in items.items():
            self.set(str(k), v)

    def keys(self) -> list[str]:
        return list(self._values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def render(self) -> str:
        try:
            return json.dumps(self._values, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Failed to render payload: {exc}") from exc


class TransactionEnvelopeBuilder:
    def __init__(self, clock: Callable[[], int] = now_micros) -> None:
        self._clock = clock

    def _timestamp(self) -> int:
        try:
            ts = int(self._clock())
        except (OSError, OverflowError, ValueError) as exc:
            raise SigningError(f"Clock read failed: {exc}") from exc
        if ts < 0:
            raise SigningError(f"Clock returned a pre-epoch timestamp: {ts}")
        return ts

    @staticmethod
    def transaction_id(category: str, order_id: int, timestamp_micros: int) -> str:
        return f"{TX_ID_PREFIX}_{category}_{order_id}_{timestamp_micros}"

    @staticmethod
    def field_map(signed: SignedOrder | SignedCancel, timestamp_micros: int) -> FieldMap:
        fields = FieldMap()
        fields.set("version", PROTOCOL_VERSION)
        fields.extend(signed.to_request())
        fields.set("local_sequencer_id", SOURCE_TAG)
        fields.setdefault("type", signed.category.value)
        fields.set("timestamp_ms", str(timestamp_micros // 1_000))
        return fields

    def build(self, signed: SignedOrder | SignedCancel) -> TransactionEnvelope:
        timestamp = self._timestamp()
        tx_id = self.transaction_id(signed.category.value, signed.order_id, timestamp)

        payload_text = PAYLOAD_PREFIX + self.field_map(signed, timestamp).render()
        logger.debug(f"{tx_id} payload: {payload_text}")

        return TransactionEnvelope(
            tx_id=tx_id,
            payload=payload_text.encode("utf-8"),
            signature=bytes(signed.signature),
            public_key=bytes(signed.public_key),
            nonce=int(signed.order_id),
            timestamp=timestamp,
        )

"""
Continuum sequencer transport: envelope construction and the gRPC channel.
"""

from fermi_sdk.sequencer.connection import ContinuumConnection, parse_endpoint
from fermi_sdk.sequencer.envelope import (
    PAYLOAD_PREFIX,
    PROTOCOL_VERSION,
    SOURCE_TAG,
    FieldMap,
    TransactionEnvelopeBuilder,
)

__all__ = [
    "ContinuumConnection",
    "parse_endpoint",
    "TransactionEnvelopeBuilder",
    "FieldMap",
    "PAYLOAD_PREFIX",
    "PROTOCOL_VERSION",
    "SOURCE_TAG",
]

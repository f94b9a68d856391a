from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable
from urllib.parse import urlparse

import grpc

from fermi_sdk.domain.models import (
    CancelResult,
    OrderResult,
    SequencerStatus,
    SignedCancel,
    SignedOrder,
    SubmissionResult,
    TransactionEnvelope,
)
from fermi_sdk.errors import SequencerConnectionError, SubmissionError
from fermi_sdk.sequencer import proto
from fermi_sdk.sequencer.envelope import TransactionEnvelopeBuilder

logger = logging.getLogger(__name__)

# Upper bound on waiting for the channel to become ready; submissions themselves
# rely on the transport's own deadlines.
CONTINUUM_CONNECT_TIMEOUT = 10.0

ChannelFactory = Callable[[str, bool], Any]


def parse_endpoint(endpoint: str) -> tuple[str, bool]:
    """
    Split an endpoint URL into a gRPC target and a TLS flag.

    "http://localhost:9090" -> ("localhost:9090", False)
    "https://seq.example"   -> ("seq.example:443", True)
    "localhost:9090"        -> ("localhost:9090", False)
    """
    endpoint = (endpoint or "").strip()
    if not endpoint:
        raise SequencerConnectionError("Invalid endpoint: empty")
    if "://" not in endpoint:
        return endpoint.rstrip("/"), False

    u = urlparse(endpoint)
    if u.scheme not in ("http", "https") or not u.hostname:
        raise SequencerConnectionError(f"Invalid endpoint: {endpoint}")
    secure = u.scheme == "https"
    port = u.port or (443 if secure else 80)
    return f"{u.hostname}:{port}", secure


def default_channel_factory(target: str, secure: bool) -> grpc.aio.Channel:
    if secure:
        return grpc.aio.secure_channel(target, grpc.ssl_channel_credentials())
    return grpc.aio.insecure_channel(target)


class ContinuumConnection:
    """
    Persistent gRPC channel to the Continuum sequencer.

    - One channel per instance, reused across calls.
    - Connect, close and every call are serialised by one asyncio.Lock: at most
      one submission in flight per connection, and the channel is never opened
      twice or closed under a running call. Callers that need parallel
      submission open more connections.
    - No retries and no local validation; the sequencer decides.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        connect_timeout: float = CONTINUUM_CONNECT_TIMEOUT,
        channel_factory: ChannelFactory = default_channel_factory,
        envelope_builder: TransactionEnvelopeBuilder | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.connect_timeout = float(connect_timeout)
        self._channel_factory = channel_factory
        self._envelopes = envelope_builder or TransactionEnvelopeBuilder()

        self._channel: Any = None
        self._submit_rpc: Any = None
        self._status_rpc: Any = None
        self._lock = asyncio.Lock()

    @classmethod
    async def open(cls, endpoint: str, **kwargs: Any) -> ContinuumConnection:
        conn = cls(endpoint, **kwargs)
        await conn.connect()
        return conn

    async def __aenter__(self) -> ContinuumConnection:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def is_connected(self) -> bool:
        return self._channel is not None

    async def connect(self) -> None:
        async with self._lock:
            await self._connect_locked()

    async def _connect_locked(self) -> None:
        # Caller holds self._lock.
        if self._channel is not None:
            return

        target, secure = parse_endpoint(self.endpoint)
        logger.info(f"Connecting to Continuum sequencer at: {target} (tls={secure})")

        channel = self._channel_factory(target, secure)
        try:
            await asyncio.wait_for(channel.channel_ready(), timeout=self.connect_timeout)
        except asyncio.TimeoutError as exc:
            await channel.close()
            raise SequencerConnectionError(
                f"Connection failed: {target} not ready after {self.connect_timeout}s"
            ) from exc
        except grpc.RpcError as exc:
            await channel.close()
            raise SequencerConnectionError(f"Connection failed: {exc}") from exc

        self._channel = channel
        self._submit_rpc = channel.unary_unary(
            proto.SUBMIT_TRANSACTION_METHOD,
            request_serializer=proto.SubmitTransactionRequest.SerializeToString,
            response_deserializer=proto.SubmitTransactionResponse.FromString,
        )
        self._status_rpc = channel.unary_unary(
            proto.GET_STATUS_METHOD,
            request_serializer=proto.GetStatusRequest.SerializeToString,
            response_deserializer=proto.GetStatusResponse.FromString,
        )
        logger.info(f"Successfully connected to Continuum sequencer at {target}")

    async def close(self) -> None:
        async with self._lock:
            channel, self._channel = self._channel, None
            self._submit_rpc = None
            self._status_rpc = None
            if channel is not None:
                await channel.close()
                logger.info("Disconnected from Continuum sequencer.")

    # -------------------
    # Submission
    # -------------------

    async def submit(self, envelope: TransactionEnvelope) -> SubmissionResult:
        request = proto.SubmitTransactionRequest(
            transaction=proto.Transaction(
                tx_id=envelope.tx_id,
                payload=envelope.payload,
                signature=envelope.signature,
                public_key=envelope.public_key,
                nonce=envelope.nonce,
                timestamp=envelope.timestamp,
            )
        )

        async with self._lock:
            await self._connect_locked()
            logger.debug(f"Submitting {envelope.tx_id} to Continuum endpoint {self.endpoint}")
            try:
                response = await self._submit_rpc(request)
            except grpc.RpcError as exc:
                raise _map_rpc_error(exc, envelope.tx_id) from exc

        return SubmissionResult(
            sequence_number=int(response.sequence_number),
            expected_tick=int(response.expected_tick),
            tx_hash=str(response.tx_hash),
        )

    async def submit_order(self, signed: SignedOrder) -> OrderResult:
        envelope = self._envelopes.build(signed)
        result = await self.submit(envelope)
        logger.info(
            f"Order {envelope.tx_id} submitted successfully, sequence: {result.sequence_number}, "
            f"expected_tick: {result.expected_tick}, hash: {result.tx_hash}"
        )
        return OrderResult(
            order_id=signed.order_id,
            sequence_number=result.sequence_number,
            expected_tick=result.expected_tick,
            tx_hash=result.tx_hash,
        )

    async def submit_cancel(self, signed: SignedCancel) -> CancelResult:
        envelope = self._envelopes.build(signed)
        result = await self.submit(envelope)
        logger.info(
            f"Cancel {envelope.tx_id} submitted successfully, sequence: {result.sequence_number}, "
            f"expected_tick: {result.expected_tick}, hash: {result.tx_hash}"
        )
        return CancelResult(
            order_id=signed.order_id,
            sequence_number=result.sequence_number,
            expected_tick=result.expected_tick,
            tx_hash=result.tx_hash,
        )

    # -------------------
    # Status
    # -------------------

    async def get_status(self) -> SequencerStatus:
        async with self._lock:
            await self._connect_locked()
            try:
                response = await self._status_rpc(proto.GetStatusRequest())
            except grpc.RpcError as exc:
                raise _map_rpc_error(exc, "GetStatus") from exc

        return SequencerStatus(
            current_tick=int(response.current_tick),
            total_transactions=int(response.total_transactions),
            pending_transactions=int(response.pending_transactions),
            uptime_seconds=int(response.uptime_seconds),
            transactions_per_second=float(response.transactions_per_second),
        )


def _map_rpc_error(exc: grpc.RpcError, what: str) -> Exception:
    code = exc.code() if callable(getattr(exc, "code", None)) else None
    details = exc.details() if callable(getattr(exc, "details", None)) else str(exc)
    code_name = getattr(code, "name", None) or "UNKNOWN"

    if code == grpc.StatusCode.UNAVAILABLE:
        logger.error(f"Continuum unavailable while sending {what}: {details}")
        return SequencerConnectionError(f"Sequencer unavailable: {details}")

    logger.error(f"Continuum rejected {what}: {code_name}: {details}")
    return SubmissionError(code_name, details or "")

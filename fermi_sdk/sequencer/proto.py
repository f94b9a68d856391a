"""
Protobuf messages for `continuum.sequencer.v1.SequencerService`.

Equivalent .proto:

    syntax = "proto3";
    package continuum.sequencer.v1;

    message Transaction {
      string tx_id = 1;
      bytes payload = 2;
      bytes signature = 3;
      bytes public_key = 4;
      uint64 nonce = 5;
      uint64 timestamp = 6;
    }
    message SubmitTransactionRequest { Transaction transaction = 1; }
    message SubmitTransactionResponse {
      uint64 sequence_number = 1;
      uint64 expected_tick = 2;
      string tx_hash = 3;
    }
    message GetStatusRequest {}
    message GetStatusResponse {
      uint64 current_tick = 1;
      uint64 total_transactions = 2;
      uint64 pending_transactions = 3;
      uint64 uptime_seconds = 4;
      double transactions_per_second = 5;
    }

The descriptors are built here instead of shipping generated *_pb2 modules, so
no protoc step is needed to install the SDK.
"""

from __future__ import annotations

from google.protobuf import descriptor_pb2, descriptor_pool
from google.protobuf.message_factory import GetMessageClass

PACKAGE = "continuum.sequencer.v1"
SERVICE = f"{PACKAGE}.SequencerService"
SUBMIT_TRANSACTION_METHOD = f"/{SERVICE}/SubmitTransaction"
GET_STATUS_METHOD = f"/{SERVICE}/GetStatus"

_F = descriptor_pb2.FieldDescriptorProto


def _add_message(fdp: descriptor_pb2.FileDescriptorProto, name: str, fields: list[tuple]) -> None:
    msg = fdp.message_type.add()
    msg.name = name
    for field_name, number, field_type, *type_name in fields:
        f = msg.field.add()
        f.name = field_name
        f.number = number
        f.type = field_type
        f.label = _F.LABEL_OPTIONAL
        if type_name:
            f.type_name = type_name[0]


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    fdp = descriptor_pb2.FileDescriptorProto()
    fdp.name = "continuum/sequencer/v1/sequencer.proto"
    fdp.package = PACKAGE
    fdp.syntax = "proto3"

    _add_message(
        fdp,
        "Transaction",
        [
            ("tx_id", 1, _F.TYPE_STRING),
            ("payload", 2, _F.TYPE_BYTES),
            ("signature", 3, _F.TYPE_BYTES),
            ("public_key", 4, _F.TYPE_BYTES),
            ("nonce", 5, _F.TYPE_UINT64),
            ("timestamp", 6, _F.TYPE_UINT64),
        ],
    )
    _add_message(
        fdp,
        "SubmitTransactionRequest",
        [("transaction", 1, _F.TYPE_MESSAGE, f".{PACKAGE}.Transaction")],
    )
    _add_message(
        fdp,
        "SubmitTransactionResponse",
        [
            ("sequence_number", 1, _F.TYPE_UINT64),
            ("expected_tick", 2, _F.TYPE_UINT64),
            ("tx_hash", 3, _F.TYPE_STRING),
        ],
    )
    _add_message(fdp, "GetStatusRequest", [])
    _add_message(
        fdp,
        "GetStatusResponse",
        [
            ("current_tick", 1, _F.TYPE_UINT64),
            ("total_transactions", 2, _F.TYPE_UINT64),
            ("pending_transactions", 3, _F.TYPE_UINT64),
            ("uptime_seconds", 4, _F.TYPE_UINT64),
            ("transactions_per_second", 5, _F.TYPE_DOUBLE),
        ],
    )

    service = fdp.service.add()
    service.name = "SequencerService"
    for method_name, input_type, output_type in (
        ("SubmitTransaction", "SubmitTransactionRequest", "SubmitTransactionResponse"),
        ("GetStatus", "GetStatusRequest", "GetStatusResponse"),
    ):
        m = service.method.add()
        m.name = method_name
        m.input_type = f".{PACKAGE}.{input_type}"
        m.output_type = f".{PACKAGE}.{output_type}"
    return fdp


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file().SerializeToString())


def _message_class(name: str):
    return GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.{name}"))


Transaction = _message_class("Transaction")
SubmitTransactionRequest = _message_class("SubmitTransactionRequest")
SubmitTransactionResponse = _message_class("SubmitTransactionResponse")
GetStatusRequest = _message_class("GetStatusRequest")
GetStatusResponse = _message_class("GetStatusResponse")

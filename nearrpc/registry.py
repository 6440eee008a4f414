"""Static table of the remote methods the client exposes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from nearrpc.types import (
    BlockReference,
    BlockView,
    ChunkView,
    EpochValidatorInfo,
    FinalExecutionOutcomeView,
    GasPriceView,
    ProtocolConfigRequest,
    ProtocolConfigResponse,
    QueryRequest,
    QueryResponse,
    ReceiptRequest,
    ReceiptResponse,
    StateChangesRequest,
    StateChangesResponse,
    StatusResponse,
    ValidatorsOrderedRequest,
    ValidatorStakeView,
)


@dataclass(frozen=True, slots=True)
class RpcMethodSpec:
    """One remote operation: wire name, parameter shape and result type.

    ``params`` names positional parameters sent as a JSON array; when
    ``request_type`` is set the method instead takes one object-shaped
    request model.
    """

    name: str
    result_type: Any
    params: tuple[str, ...] = ()
    request_type: type | None = None
    description: str = ""

    @property
    def takes_object(self) -> bool:
        return self.request_type is not None


BROADCAST_TX_ASYNC = RpcMethodSpec("broadcast_tx_async", str, ("tx",), description="Submit a signed transaction, return its hash")
BROADCAST_TX_COMMIT = RpcMethodSpec(
    "broadcast_tx_commit", FinalExecutionOutcomeView, ("tx",), description="Submit a signed transaction and wait for it"
)
STATUS = RpcMethodSpec("status", StatusResponse, description="Node version, chain id and sync state")
HEALTH = RpcMethodSpec("health", None, description="Returns null while the node is healthy")
TX = RpcMethodSpec("tx", FinalExecutionOutcomeView, ("hash", "account_id"), description="Transaction status by hash and sender")
CHUNK = RpcMethodSpec("chunk", ChunkView, ("chunk_id",), description="Chunk by hash or [block_id, shard_id]")
VALIDATORS = RpcMethodSpec("validators", EpochValidatorInfo, ("block_id",), description="Epoch validators (null block id = latest)")
GAS_PRICE = RpcMethodSpec("gas_price", GasPriceView, ("block_id",), description="Gas price at a block (null = latest)")
QUERY = RpcMethodSpec("query", QueryResponse, request_type=QueryRequest, description="View account, access keys, state or call a view function")
QUERY_BY_PATH = RpcMethodSpec("query", QueryResponse, ("path", "data"), description="Legacy path/data form of query")
BLOCK = RpcMethodSpec("block", BlockView, request_type=BlockReference, description="Block by finality, id or sync checkpoint")
BLOCK_BY_ID = RpcMethodSpec("block", BlockView, ("block_id",), description="Block by height or hash")
EXPERIMENTAL_CHECK_TX = RpcMethodSpec("EXPERIMENTAL_check_tx", Any, ("tx",), description="Validate a signed transaction without submitting it")
EXPERIMENTAL_GENESIS_CONFIG = RpcMethodSpec("EXPERIMENTAL_genesis_config", Any, description="Genesis configuration")
EXPERIMENTAL_BROADCAST_TX_SYNC = RpcMethodSpec(
    "EXPERIMENTAL_broadcast_tx_sync", Any, ("tx",), description="Submit a signed transaction after validation"
)
EXPERIMENTAL_TX_STATUS = RpcMethodSpec("EXPERIMENTAL_tx_status", Any, ("tx",), description="Transaction status including receipts")
EXPERIMENTAL_CHANGES = RpcMethodSpec(
    "EXPERIMENTAL_changes", StateChangesResponse, request_type=StateChangesRequest, description="State changes in a block by type"
)
EXPERIMENTAL_VALIDATORS_ORDERED = RpcMethodSpec(
    "EXPERIMENTAL_validators_ordered",
    list[ValidatorStakeView],
    request_type=ValidatorsOrderedRequest,
    description="Block producers in order",
)
EXPERIMENTAL_RECEIPT = RpcMethodSpec("EXPERIMENTAL_receipt", ReceiptResponse, request_type=ReceiptRequest, description="Receipt by id")
EXPERIMENTAL_PROTOCOL_CONFIG = RpcMethodSpec(
    "EXPERIMENTAL_protocol_config",
    ProtocolConfigResponse,
    request_type=ProtocolConfigRequest,
    description="Protocol configuration at a block",
)

# Keyed by client method name; several client methods may share a wire name.
METHODS: dict[str, RpcMethodSpec] = {
    "broadcast_tx_async": BROADCAST_TX_ASYNC,
    "broadcast_tx_commit": BROADCAST_TX_COMMIT,
    "status": STATUS,
    "health": HEALTH,
    "tx": TX,
    "chunk": CHUNK,
    "validators": VALIDATORS,
    "gas_price": GAS_PRICE,
    "query": QUERY,
    "query_by_path": QUERY_BY_PATH,
    "block": BLOCK,
    "block_by_id": BLOCK_BY_ID,
    "experimental_check_tx": EXPERIMENTAL_CHECK_TX,
    "experimental_genesis_config": EXPERIMENTAL_GENESIS_CONFIG,
    "experimental_broadcast_tx_sync": EXPERIMENTAL_BROADCAST_TX_SYNC,
    "experimental_tx_status": EXPERIMENTAL_TX_STATUS,
    "experimental_changes": EXPERIMENTAL_CHANGES,
    "experimental_validators_ordered": EXPERIMENTAL_VALIDATORS_ORDERED,
    "experimental_receipt": EXPERIMENTAL_RECEIPT,
    "experimental_protocol_config": EXPERIMENTAL_PROTOCOL_CONFIG,
}


def get_method(name: str) -> RpcMethodSpec:
    """Look up an entry by client method name or, failing that, by wire name.

    A wire name shared by several entries resolves to the object-shaped one
    (``block`` -> ``block``, ``query`` -> ``query``).
    """
    if name in METHODS:
        return METHODS[name]
    for spec in METHODS.values():
        if spec.name == name:
            return spec
    raise KeyError(name)

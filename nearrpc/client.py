"""Typed JSON-RPC client for NEAR nodes."""

from __future__ import annotations

from typing import Any, Sequence

from pydantic import BaseModel, ValidationError

from nearrpc import registry
from nearrpc.config.schema import ClientConfig, TransportConfig, resolve_server_addr
from nearrpc.errors import RpcInternalError
from nearrpc.pipeline import RpcTransport, call_method
from nearrpc.registry import RpcMethodSpec
from nearrpc.transport import HttpTransport
from nearrpc.types import (
    BlockId,
    BlockReference,
    BlockView,
    ChunkId,
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


class JsonRpcClient:
    """
    One client per endpoint. Every method sends exactly one request through
    the shared transport and either returns the typed result or raises an
    ``RpcError`` subclass.

    Use as ``async with new_client(url) as client:`` to release pooled
    connections on exit.
    """

    def __init__(self, server_addr: str, transport: RpcTransport | None = None):
        self.server_addr = server_addr
        self.transport: RpcTransport = transport or HttpTransport()

    async def call(self, method: str, params: Any = None, result_type: Any = Any) -> Any:
        """Call any wire method; ``result_type`` defaults to the raw JSON value."""
        return await call_method(self.transport, self.server_addr, method, params, result_type)

    async def _dispatch(self, spec: RpcMethodSpec, params: Any = None) -> Any:
        return await call_method(self.transport, self.server_addr, spec.name, params, spec.result_type)

    async def invoke(self, name: str, params: Any = None) -> Any:
        """
        Table-driven dispatch by registry name (client or wire name).

        Positional methods accept a list in declaration order or a dict keyed
        by parameter name; object methods accept a dict or their request model.
        """
        try:
            spec = registry.get_method(name)
        except KeyError:
            raise RpcInternalError(f"unknown method {name!r}") from None
        return await self._dispatch(spec, _coerce_params(spec, params))

    async def aclose(self) -> None:
        aclose = getattr(self.transport, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> JsonRpcClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def broadcast_tx_async(self, tx: str) -> str:
        return await self._dispatch(registry.BROADCAST_TX_ASYNC, (tx,))

    async def broadcast_tx_commit(self, tx: str) -> FinalExecutionOutcomeView:
        return await self._dispatch(registry.BROADCAST_TX_COMMIT, (tx,))

    async def status(self) -> StatusResponse:
        return await self._dispatch(registry.STATUS)

    async def health(self) -> None:
        return await self._dispatch(registry.HEALTH)

    async def tx(self, hash: str, account_id: str) -> FinalExecutionOutcomeView:
        return await self._dispatch(registry.TX, (hash, account_id))

    async def chunk(self, chunk_id: ChunkId) -> ChunkView:
        return await self._dispatch(registry.CHUNK, (chunk_id,))

    async def validators(self, block_id: BlockId | None = None) -> EpochValidatorInfo:
        return await self._dispatch(registry.VALIDATORS, (block_id,))

    async def gas_price(self, block_id: BlockId | None = None) -> GasPriceView:
        return await self._dispatch(registry.GAS_PRICE, (block_id,))

    async def query(self, request: QueryRequest) -> QueryResponse:
        return await self._dispatch(registry.QUERY, request)

    async def query_by_path(self, path: str, data: str) -> QueryResponse:
        """Soft-deprecated positional form of ``query``."""
        return await self._dispatch(registry.QUERY_BY_PATH, (path, data))

    async def block(self, reference: BlockReference | None = None) -> BlockView:
        """Block at ``reference``; the latest final block by default."""
        return await self._dispatch(registry.BLOCK, reference or BlockReference.final())

    async def block_by_id(self, block_id: BlockId) -> BlockView:
        return await self._dispatch(registry.BLOCK_BY_ID, (block_id,))

    async def experimental_check_tx(self, tx: str) -> Any:
        return await self._dispatch(registry.EXPERIMENTAL_CHECK_TX, (tx,))

    async def experimental_genesis_config(self) -> Any:
        return await self._dispatch(registry.EXPERIMENTAL_GENESIS_CONFIG)

    async def experimental_broadcast_tx_sync(self, tx: str) -> Any:
        return await self._dispatch(registry.EXPERIMENTAL_BROADCAST_TX_SYNC, (tx,))

    async def experimental_tx_status(self, tx: str) -> Any:
        return await self._dispatch(registry.EXPERIMENTAL_TX_STATUS, (tx,))

    async def experimental_changes(self, request: StateChangesRequest) -> StateChangesResponse:
        return await self._dispatch(registry.EXPERIMENTAL_CHANGES, request)

    async def experimental_validators_ordered(
        self, request: ValidatorsOrderedRequest | None = None
    ) -> list[ValidatorStakeView]:
        return await self._dispatch(registry.EXPERIMENTAL_VALIDATORS_ORDERED, request or ValidatorsOrderedRequest())

    async def experimental_receipt(self, request: ReceiptRequest) -> ReceiptResponse:
        return await self._dispatch(registry.EXPERIMENTAL_RECEIPT, request)

    async def experimental_protocol_config(self, request: ProtocolConfigRequest) -> ProtocolConfigResponse:
        return await self._dispatch(registry.EXPERIMENTAL_PROTOCOL_CONFIG, request)


def _coerce_params(spec: RpcMethodSpec, params: Any) -> Any:
    if spec.request_type is not None:
        if isinstance(params, BaseModel):
            return params
        try:
            return spec.request_type.model_validate(params or {})
        except ValidationError as exc:
            raise RpcInternalError(f"invalid params for {spec.name}: {exc}") from exc

    if params is None:
        values: Sequence[Any] = ()
    elif isinstance(params, dict):
        missing = [p for p in spec.params if p not in params]
        if missing:
            raise RpcInternalError(f"missing params for {spec.name}: {', '.join(missing)}")
        values = [params[p] for p in spec.params]
    elif isinstance(params, (list, tuple)):
        values = params
    else:
        values = (params,)
    if len(values) != len(spec.params):
        expected = ", ".join(spec.params) or "none"
        raise RpcInternalError(f"{spec.name} takes {len(spec.params)} params ({expected}), got {len(values)}")
    return tuple(values)


def create_transport(config: TransportConfig | None = None) -> HttpTransport:
    """HTTP transport with a 30 s connect timeout and 30 s keep-alive unless configured."""
    return HttpTransport(config or TransportConfig())


def new_client(server_addr: str, config: TransportConfig | None = None) -> JsonRpcClient:
    """Create a client for ``server_addr`` (a URL or a network name such as ``testnet``)."""
    return JsonRpcClient(resolve_server_addr(server_addr), create_transport(config))


def client_from_config(config: ClientConfig) -> JsonRpcClient:
    return JsonRpcClient(config.resolved_server_addr(), create_transport(config.transport))

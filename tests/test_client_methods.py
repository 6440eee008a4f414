import json
from typing import Any, get_origin

import pytest
from pydantic import BaseModel

from nearrpc.client import JsonRpcClient, _coerce_params, new_client
from nearrpc.errors import RpcInternalError
from nearrpc.registry import METHODS
from nearrpc.transport import HttpTransport
from nearrpc.types import (
    BlockReference,
    BlockView,
    EpochValidatorInfo,
    FinalExecutionOutcomeView,
    GasPriceView,
    ProtocolConfigRequest,
    QueryRequest,
    ReceiptRequest,
    StateChangesRequest,
    StatusResponse,
    ValidatorsOrderedRequest,
)

from near_samples import BLOCK, BLOCK_HASH, CHUNK_HEADER, OUTCOME, QUERY, STATUS, VALIDATOR, VALIDATORS

# client method -> (call args, expected wire method, expected params, canned result)
CASES: dict[str, tuple[tuple, str, Any, Any]] = {
    "broadcast_tx_async": (("BASE64TX",), "broadcast_tx_async", ["BASE64TX"], "6zgh2u9DqHHiXzdy9ouTP7oGky2T4nugqzqt9wJZwNFm"),
    "broadcast_tx_commit": (("BASE64TX",), "broadcast_tx_commit", ["BASE64TX"], OUTCOME),
    "status": ((), "status", [], STATUS),
    "health": ((), "health", [], None),
    "tx": (("tx1", "alice.near"), "tx", ["tx1", "alice.near"], OUTCOME),
    "chunk": (((17, 0),), "chunk", [[17, 0]], {"author": "test.near", "header": CHUNK_HEADER}),
    "validators": ((), "validators", [None], VALIDATORS),
    "gas_price": ((17,), "gas_price", [17], {"gas_price": "100000000"}),
    "query": (
        (QueryRequest.view_account("alice.near"),),
        "query",
        {"request_type": "view_account", "account_id": "alice.near", "finality": "final"},
        QUERY,
    ),
    "query_by_path": (("account/alice.near", ""), "query", ["account/alice.near", ""], QUERY),
    "block": ((), "block", {"finality": "final"}, BLOCK),
    "block_by_id": ((17,), "block", [17], BLOCK),
    "experimental_check_tx": (("BASE64TX",), "EXPERIMENTAL_check_tx", ["BASE64TX"], {"ok": True}),
    "experimental_genesis_config": ((), "EXPERIMENTAL_genesis_config", [], {"chain_id": "testnet"}),
    "experimental_broadcast_tx_sync": (("BASE64TX",), "EXPERIMENTAL_broadcast_tx_sync", ["BASE64TX"], {"ok": True}),
    "experimental_tx_status": (("BASE64TX",), "EXPERIMENTAL_tx_status", ["BASE64TX"], OUTCOME),
    "experimental_changes": (
        (StateChangesRequest(changes_type="account_changes", account_ids=["alice.near"], block_id=17),),
        "EXPERIMENTAL_changes",
        {"changes_type": "account_changes", "account_ids": ["alice.near"], "block_id": 17},
        {"block_hash": BLOCK_HASH, "changes": []},
    ),
    "experimental_validators_ordered": ((), "EXPERIMENTAL_validators_ordered", {}, [VALIDATOR]),
    "experimental_receipt": (
        (ReceiptRequest(receipt_id="r1"),),
        "EXPERIMENTAL_receipt",
        {"receipt_id": "r1"},
        {"receipt_id": "r1", "predecessor_id": "alice.near", "receiver_id": "bob.near", "receipt": {"Action": {}}},
    ),
    "experimental_protocol_config": (
        (ProtocolConfigRequest(finality="final"),),
        "EXPERIMENTAL_protocol_config",
        {"finality": "final"},
        {"protocol_version": 58, "chain_id": "testnet", "genesis_height": 1},
    ),
}


class RecordingTransport:
    """Answers every request with a canned result and records the decoded request."""

    def __init__(self, result: Any = None):
        self.result = result
        self.requests: list[dict] = []
        self.closed = False

    async def send(self, server_addr: str, body: bytes) -> bytes:
        request = json.loads(body)
        self.requests.append(request)
        return json.dumps({"jsonrpc": "2.0", "id": request["id"], "result": self.result}).encode()

    async def aclose(self) -> None:
        self.closed = True


def test_every_method_has_a_case() -> None:
    assert set(CASES) == set(METHODS)


@pytest.mark.asyncio
@pytest.mark.parametrize("name", sorted(CASES))
async def test_wrapper_sends_wire_method_and_params(name) -> None:
    args, wire, params, result = CASES[name]
    transport = RecordingTransport(result)
    client = JsonRpcClient("http://node.test", transport)

    value = await getattr(client, name)(*args)

    assert len(transport.requests) == 1
    request = transport.requests[0]
    assert request["jsonrpc"] == "2.0"
    assert request["method"] == wire
    assert request["params"] == params
    result_type = METHODS[name].result_type
    if result_type in (str, None) or get_origin(result_type) is not None:
        return
    if isinstance(result_type, type) and issubclass(result_type, BaseModel):
        assert isinstance(value, result_type)


@pytest.mark.asyncio
async def test_typed_results_expose_fields() -> None:
    transport = RecordingTransport(STATUS)
    client = JsonRpcClient("http://node.test", transport)
    status = await client.status()
    assert isinstance(status, StatusResponse)
    assert status.sync_info.latest_block_height == 17
    assert status.validators[0].account_id == "node0"

    transport.result = OUTCOME
    outcome = await client.tx("tx1", "alice.near")
    assert isinstance(outcome, FinalExecutionOutcomeView)
    assert outcome.is_success

    transport.result = QUERY
    account = await client.query(QueryRequest.view_account("alice.near"))
    assert account.block_height == 17
    assert account.amount == "100"


@pytest.mark.asyncio
async def test_health_returns_none() -> None:
    client = JsonRpcClient("http://node.test", RecordingTransport(None))
    assert await client.health() is None


@pytest.mark.asyncio
async def test_block_by_reference_variants() -> None:
    transport = RecordingTransport(BLOCK)
    client = JsonRpcClient("http://node.test", transport)

    block = await client.block(BlockReference.of_block_id(BLOCK_HASH))
    assert isinstance(block, BlockView)
    await client.block(BlockReference.of_finality("optimistic"))
    await client.block(BlockReference.genesis())

    assert [r["params"] for r in transport.requests] == [
        {"block_id": BLOCK_HASH},
        {"finality": "optimistic"},
        {"sync_checkpoint": "genesis"},
    ]


@pytest.mark.asyncio
async def test_validators_at_block_and_ordered_at_block() -> None:
    transport = RecordingTransport(VALIDATORS)
    client = JsonRpcClient("http://node.test", transport)
    info = await client.validators(17)
    assert isinstance(info, EpochValidatorInfo)
    assert info.current_validators[0].shards == [0]

    transport.result = [VALIDATOR]
    ordered = await client.experimental_validators_ordered(ValidatorsOrderedRequest(block_id=17))
    assert ordered[0].account_id == "node0"
    assert transport.requests[-1]["params"] == {"block_id": 17}


@pytest.mark.asyncio
async def test_gas_price_for_latest_block() -> None:
    transport = RecordingTransport({"gas_price": "100000000"})
    client = JsonRpcClient("http://node.test", transport)
    price = await client.gas_price()
    assert isinstance(price, GasPriceView)
    assert price.gas_price == "100000000"
    assert transport.requests[0]["params"] == [None]


@pytest.mark.asyncio
async def test_chunk_by_hash() -> None:
    transport = RecordingTransport({"author": "test.near", "header": CHUNK_HEADER})
    client = JsonRpcClient("http://node.test", transport)
    await client.chunk(CHUNK_HEADER["chunk_hash"])
    assert transport.requests[0]["params"] == [CHUNK_HEADER["chunk_hash"]]


@pytest.mark.asyncio
async def test_invoke_accepts_named_positional_params() -> None:
    transport = RecordingTransport(OUTCOME)
    client = JsonRpcClient("http://node.test", transport)
    await client.invoke("tx", {"account_id": "alice.near", "hash": "tx1"})
    await client.invoke("tx", ["tx1", "alice.near"])
    assert [r["params"] for r in transport.requests] == [["tx1", "alice.near"], ["tx1", "alice.near"]]


@pytest.mark.asyncio
async def test_invoke_by_wire_name_uses_object_form() -> None:
    transport = RecordingTransport(BLOCK)
    client = JsonRpcClient("http://node.test", transport)
    block = await client.invoke("block", {"finality": "final"})
    assert isinstance(block, BlockView)
    assert transport.requests[0]["method"] == "block"

    transport.result = {"ok": True}
    await client.invoke("EXPERIMENTAL_check_tx", ["BASE64TX"])
    assert transport.requests[1]["method"] == "EXPERIMENTAL_check_tx"


@pytest.mark.asyncio
async def test_invoke_wraps_scalar_for_single_param_method() -> None:
    transport = RecordingTransport({"gas_price": "1"})
    client = JsonRpcClient("http://node.test", transport)
    await client.invoke("gas_price", 17)
    assert transport.requests[0]["params"] == [17]


@pytest.mark.asyncio
async def test_invoke_unknown_method_fails_without_request() -> None:
    transport = RecordingTransport()
    client = JsonRpcClient("http://node.test", transport)
    with pytest.raises(RpcInternalError, match="unknown method"):
        await client.invoke("no_such_method")
    assert transport.requests == []


@pytest.mark.parametrize(
    "name,params,match",
    [
        ("tx", ["tx1"], "takes 2 params"),
        ("tx", {"hash": "tx1"}, "missing params"),
        ("status", ["extra"], "takes 0 params"),
        ("query", {"account_id": "alice.near"}, "invalid params"),
        ("block", {"finality": "final", "block_id": 1}, "invalid params"),
    ],
)
def test_coerce_params_rejects_bad_shapes(name, params, match) -> None:
    with pytest.raises(RpcInternalError, match=match):
        _coerce_params(METHODS[name], params)


def test_coerce_params_passes_models_through() -> None:
    reference = BlockReference.final()
    assert _coerce_params(METHODS["block"], reference) is reference
    assert _coerce_params(METHODS["status"], None) == ()


def test_block_reference_requires_exactly_one_selector() -> None:
    with pytest.raises(ValueError):
        BlockReference()
    with pytest.raises(ValueError):
        BlockReference(block_id=1, finality="final")


@pytest.mark.asyncio
async def test_new_client_resolves_network_names() -> None:
    client = new_client("testnet")
    try:
        assert client.server_addr == "https://rpc.testnet.near.org"
        assert isinstance(client.transport, HttpTransport)
    finally:
        await client.aclose()


def test_new_client_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="Unknown network"):
        new_client("moonnet")


@pytest.mark.asyncio
async def test_async_with_closes_transport() -> None:
    transport = RecordingTransport(None)
    async with JsonRpcClient("http://node.test", transport) as client:
        await client.health()
    assert transport.closed is True


@pytest.mark.asyncio
async def test_closing_http_client_closes_pool(make_client, reply) -> None:
    client = make_client(lambda request: reply(request, result=None))
    async with client:
        await client.health()
    assert client.transport.is_closed

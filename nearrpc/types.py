"""Request and result shapes of the NEAR JSON-RPC methods.

Result views declare the fields callers rely on and keep everything else
the node sends as extra attributes, so newer node versions still decode.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

BlockId = Union[int, str]  # height or base58 block hash
ShardId = int
# Untagged on the wire: a chunk hash string or a [block_id, shard_id] pair.
ChunkId = Union[str, Tuple[BlockId, ShardId]]


class Finality(str, Enum):
    """Finality levels accepted in block references."""

    OPTIMISTIC = "optimistic"
    NEAR_FINAL = "near-final"
    FINAL = "final"


SyncCheckpoint = Literal["genesis", "earliest_available"]


class BlockScoped(BaseModel):
    """Block reference fields; request models flatten them into their own body."""

    block_id: Optional[BlockId] = None
    finality: Optional[Finality] = None
    sync_checkpoint: Optional[SyncCheckpoint] = None

    @model_validator(mode="after")
    def _exactly_one_reference(self) -> "BlockScoped":
        chosen = [v for v in (self.block_id, self.finality, self.sync_checkpoint) if v is not None]
        if len(chosen) != 1:
            raise ValueError("exactly one of block_id, finality or sync_checkpoint must be set")
        return self


class BlockReference(BlockScoped):
    """Selects a block by id, by finality or by sync checkpoint."""

    @classmethod
    def final(cls) -> "BlockReference":
        return cls(finality=Finality.FINAL)

    @classmethod
    def of_finality(cls, finality: Finality | str) -> "BlockReference":
        return cls(finality=Finality(finality))

    @classmethod
    def of_block_id(cls, block_id: BlockId) -> "BlockReference":
        return cls(block_id=block_id)

    @classmethod
    def genesis(cls) -> "BlockReference":
        return cls(sync_checkpoint="genesis")


class QueryRequest(BlockScoped):
    """Body of the ``query`` method."""

    model_config = ConfigDict(extra="allow")

    request_type: str
    account_id: Optional[str] = None
    method_name: Optional[str] = None
    args_base64: Optional[str] = None
    prefix_base64: Optional[str] = None
    public_key: Optional[str] = None
    include_proof: Optional[bool] = None

    @classmethod
    def view_account(cls, account_id: str, finality: Finality = Finality.FINAL) -> "QueryRequest":
        return cls(request_type="view_account", account_id=account_id, finality=finality)

    @classmethod
    def view_access_key_list(cls, account_id: str, finality: Finality = Finality.FINAL) -> "QueryRequest":
        return cls(request_type="view_access_key_list", account_id=account_id, finality=finality)

    @classmethod
    def call_function(
        cls,
        account_id: str,
        method_name: str,
        args_base64: str = "",
        finality: Finality = Finality.FINAL,
    ) -> "QueryRequest":
        return cls(
            request_type="call_function",
            account_id=account_id,
            method_name=method_name,
            args_base64=args_base64,
            finality=finality,
        )


class StateChangesRequest(BlockScoped):
    """Body of ``EXPERIMENTAL_changes``."""

    model_config = ConfigDict(extra="allow")

    changes_type: str
    account_ids: Optional[list[str]] = None
    keys: Optional[list[dict[str, Any]]] = None
    key_prefix_base64: Optional[str] = None


class ValidatorsOrderedRequest(BaseModel):
    """Body of ``EXPERIMENTAL_validators_ordered``; no block id means the latest block."""

    block_id: Optional[BlockId] = None


class ReceiptRequest(BaseModel):
    """Body of ``EXPERIMENTAL_receipt``."""

    receipt_id: str


class ProtocolConfigRequest(BlockScoped):
    """Body of ``EXPERIMENTAL_protocol_config``."""


class NearView(BaseModel):
    """Base for result views."""

    model_config = ConfigDict(extra="allow")


class VersionView(NearView):
    version: str
    build: str
    rustc_version: Optional[str] = None


class SyncInfoView(NearView):
    latest_block_hash: str
    latest_block_height: int
    latest_state_root: str
    latest_block_time: str
    syncing: bool
    earliest_block_hash: Optional[str] = None
    earliest_block_height: Optional[int] = None


class StatusValidatorView(NearView):
    account_id: str
    is_slashed: Optional[bool] = None


class StatusResponse(NearView):
    """Result of ``status``."""

    version: VersionView
    chain_id: str
    protocol_version: int
    latest_protocol_version: int
    rpc_addr: Optional[str] = None
    validators: list[StatusValidatorView] = Field(default_factory=list)
    sync_info: SyncInfoView
    validator_account_id: Optional[str] = None


class BlockHeaderView(NearView):
    height: int
    hash: str
    prev_hash: str
    epoch_id: str
    timestamp: int
    gas_price: Optional[str] = None
    total_supply: Optional[str] = None


class ChunkHeaderView(NearView):
    chunk_hash: str
    prev_block_hash: str
    height_created: int
    shard_id: ShardId
    gas_used: int
    gas_limit: int
    height_included: int = 0


class BlockView(NearView):
    """Result of ``block``."""

    author: str
    header: BlockHeaderView
    chunks: list[ChunkHeaderView]


class ChunkView(NearView):
    """Result of ``chunk``."""

    author: str
    header: ChunkHeaderView
    transactions: list[dict[str, Any]] = Field(default_factory=list)
    receipts: list[dict[str, Any]] = Field(default_factory=list)


class GasPriceView(NearView):
    """Result of ``gas_price``; yoctoNEAR as a decimal string."""

    gas_price: str


class ValidatorStakeView(NearView):
    account_id: str
    public_key: str
    stake: str


class CurrentEpochValidatorInfo(ValidatorStakeView):
    is_slashed: bool = False
    shards: list[ShardId] = Field(default_factory=list)
    num_produced_blocks: Optional[int] = None
    num_expected_blocks: Optional[int] = None


class NextEpochValidatorInfo(ValidatorStakeView):
    shards: list[ShardId] = Field(default_factory=list)


class EpochValidatorInfo(NearView):
    """Result of ``validators``."""

    current_validators: list[CurrentEpochValidatorInfo]
    next_validators: list[NextEpochValidatorInfo]
    current_fishermen: list[ValidatorStakeView] = Field(default_factory=list)
    next_fishermen: list[ValidatorStakeView] = Field(default_factory=list)
    current_proposals: list[ValidatorStakeView] = Field(default_factory=list)
    prev_epoch_kickout: list[dict[str, Any]] = Field(default_factory=list)
    epoch_start_height: int
    epoch_height: Optional[int] = None


class ExecutionOutcomeWithIdView(NearView):
    id: str
    block_hash: str
    outcome: dict[str, Any]
    proof: list[dict[str, Any]] = Field(default_factory=list)


class FinalExecutionOutcomeView(NearView):
    """Result of ``tx`` and ``broadcast_tx_commit``."""

    status: Union[str, dict[str, Any]]
    transaction: dict[str, Any]
    transaction_outcome: ExecutionOutcomeWithIdView
    receipts_outcome: list[ExecutionOutcomeWithIdView] = Field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return isinstance(self.status, dict) and ("SuccessValue" in self.status or "SuccessReceiptId" in self.status)


class QueryResponse(NearView):
    """Result of ``query``; the kind-specific fields (``amount``, ``result``, ``keys``...) are extras."""

    block_height: int
    block_hash: str


class StateChangesResponse(NearView):
    """Result of ``EXPERIMENTAL_changes``."""

    block_hash: str
    changes: list[dict[str, Any]]


class ReceiptResponse(NearView):
    """Result of ``EXPERIMENTAL_receipt``."""

    receipt_id: str
    predecessor_id: str
    receiver_id: str
    receipt: dict[str, Any]


class ProtocolConfigResponse(NearView):
    """Result of ``EXPERIMENTAL_protocol_config``."""

    protocol_version: int
    chain_id: str
    genesis_height: Optional[int] = None

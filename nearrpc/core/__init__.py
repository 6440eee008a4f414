"""Envelope codec: request/response models and their wire serialization."""

from .protocol import JSONRPC_VERSION, RpcErrorObject, RpcFailure, RpcRequest, RpcResponse, RpcSuccess
from .serialization import (
    build_request,
    decode_response,
    decode_result,
    encode_request,
    new_request_id,
    normalize_params,
    normalize_rpc_error,
)

__all__ = [
    "JSONRPC_VERSION",
    "RpcErrorObject",
    "RpcFailure",
    "RpcRequest",
    "RpcResponse",
    "RpcSuccess",
    "build_request",
    "decode_response",
    "decode_result",
    "encode_request",
    "new_request_id",
    "normalize_params",
    "normalize_rpc_error",
]

"""Generic request pipeline shared by every remote method."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

from loguru import logger

from nearrpc.core.protocol import RpcFailure
from nearrpc.core.serialization import decode_response, decode_result, encode_request, new_request_id
from nearrpc.errors import (
    CodecError,
    EncodeError,
    RpcInternalError,
    RpcParseError,
    RpcServerError,
    RpcTransportError,
    TransportError,
)

R = TypeVar("R")


@runtime_checkable
class RpcTransport(Protocol):
    """Anything that can POST a body to an address and return the response body."""

    async def send(self, server_addr: str, body: bytes) -> bytes: ...


async def call_method(
    transport: RpcTransport,
    server_addr: str,
    method: str,
    params: Any,
    result_type: type[R] | Any,
) -> R:
    """
    Perform one JSON-RPC call and return the decoded result.

    Every failure surfaces as an ``RpcError`` subclass with the lower-level
    exception chained as ``__cause__``:

    - parameters that cannot be encoded -> ``RpcInternalError``
    - transport failure -> ``RpcTransportError`` (also an ``RpcInternalError``)
    - malformed envelope or result shape mismatch -> ``RpcParseError``
    - error envelope -> ``RpcServerError``

    Exactly one request is sent; there is no retry.
    """
    request_id = new_request_id()
    try:
        body = encode_request(method, params, request_id=request_id)
    except EncodeError as exc:
        raise RpcInternalError(f"cannot encode {method} request: {exc}") from exc

    logger.debug("RPC -> {} id={} ({} bytes)", method, request_id, len(body))
    try:
        raw = await transport.send(server_addr, body)
    except TransportError as exc:
        logger.warning("RPC {} id={} transport failure: {}", method, request_id, exc)
        raise RpcTransportError(exc.kind, exc.message) from exc

    try:
        envelope = decode_response(raw, expected_id=request_id)
    except CodecError as exc:
        logger.warning("RPC {} id={} bad response: {}", method, request_id, exc)
        raise RpcParseError(exc.kind, exc.message) from exc

    if isinstance(envelope, RpcFailure):
        error = envelope.error
        logger.debug("RPC <- {} id={} error code={} message={}", method, request_id, error.code, error.message)
        raise RpcServerError(
            error.message,
            code=error.code,
            data=error.data,
            name=error.name,
            cause=error.cause,
        )

    try:
        result = decode_result(envelope.result, result_type)
    except CodecError as exc:
        logger.warning("RPC {} id={} unexpected result shape: {}", method, request_id, exc)
        raise RpcParseError(exc.kind, exc.message) from exc
    logger.debug("RPC <- {} id={} ok", method, request_id)
    return result

"""Serialization helpers for JSON-RPC envelopes."""

from __future__ import annotations

import json
import uuid
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from nearrpc.errors import CodecError, CodecErrorKind, EncodeError

from .protocol import JSONRPC_VERSION, RpcErrorObject, RpcFailure, RpcRequest, RpcResponse, RpcSuccess

_EXCERPT_CHARS = 200


def safe_dict(value: Any) -> dict[str, Any]:
    """Return the value when dict-like, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}


def new_request_id() -> str:
    return uuid.uuid4().hex


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return to_jsonable_python(value)


def normalize_params(params: Any) -> list[Any] | dict[str, Any]:
    """
    Turn caller parameters into a JSON-RPC ``params`` value.

    ``None`` and empty sequences become ``[]`` (nodes reject ``null`` params),
    tuples and lists become positional arrays, models and mappings become
    named-parameter objects.
    """
    if params is None:
        return []
    try:
        if isinstance(params, (list, tuple)):
            return [_jsonable(item) for item in params]
        converted = _jsonable(params)
    except (PydanticSerializationError, TypeError, ValueError) as exc:
        raise EncodeError(f"params are not JSON serializable: {exc}") from exc
    if not isinstance(converted, (list, dict)):
        raise EncodeError(f"params must serialize to an array or object, got {type(converted).__name__}")
    return converted


def build_request(method: str, params: Any = None, *, request_id: str | None = None) -> RpcRequest:
    """Build a request envelope with a fresh id unless one is given."""
    return RpcRequest(id=request_id or new_request_id(), method=method, params=normalize_params(params))


def encode_request(method: str, params: Any = None, *, request_id: str | None = None) -> bytes:
    """Encode a request envelope into UTF-8 JSON bytes."""
    request = build_request(method, params, request_id=request_id)
    try:
        text = json.dumps(request.to_dict(), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"request for {method!r} is not JSON serializable: {exc}") from exc
    return text.encode("utf-8")


def _excerpt(raw: bytes) -> str:
    text = raw.decode("utf-8", errors="replace").strip()
    if len(text) > _EXCERPT_CHARS:
        return text[:_EXCERPT_CHARS] + "..."
    return text or "<empty body>"


def normalize_rpc_error(error: dict[str, Any]) -> RpcErrorObject:
    """Copy a server error object into RpcErrorObject without reinterpreting it."""
    code = error.get("code")
    if code is not None and not isinstance(code, (int, str)):
        code = str(code)
    name = error.get("name")
    message = error.get("message")
    if message is None:
        message = ""
    elif not isinstance(message, str):
        message = str(message)
    return RpcErrorObject(
        code=code,
        message=message,
        data=error.get("data"),
        name=str(name) if name is not None else None,
        cause=safe_dict(error.get("cause")),
    )


def decode_response(raw: bytes, *, expected_id: str | None = None) -> RpcResponse:
    """
    Parse raw bytes into a success or failure envelope.

    ``jsonrpc`` and ``id`` may be missing; when present they must be ``"2.0"``
    and (if ``expected_id`` is given) match the request id. ``"error": null``
    counts as no error.

    Raises:
        CodecError: with kind MALFORMED for anything that is not exactly one
            valid response envelope.
    """
    try:
        body = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise CodecError(CodecErrorKind.MALFORMED, f"response is not valid JSON ({exc}): {_excerpt(raw)}") from exc
    if not isinstance(body, dict):
        raise CodecError(CodecErrorKind.MALFORMED, f"response is not a JSON object: {_excerpt(raw)}")

    version = body.get("jsonrpc")
    if version is not None and version != JSONRPC_VERSION:
        raise CodecError(CodecErrorKind.MALFORMED, f"unsupported jsonrpc version {version!r}")

    response_id = body.get("id")
    if expected_id is not None and response_id is not None and response_id != expected_id:
        raise CodecError(
            CodecErrorKind.MALFORMED,
            f"response id {response_id!r} does not match request id {expected_id!r}",
        )

    has_result = "result" in body
    has_error = body.get("error") is not None
    if has_result and has_error:
        raise CodecError(CodecErrorKind.MALFORMED, "response carries both result and error")
    if has_error:
        error = body["error"]
        if not isinstance(error, dict):
            raise CodecError(CodecErrorKind.MALFORMED, f"error member is not an object: {error!r}")
        return RpcFailure(id=response_id, error=normalize_rpc_error(error))
    if has_result:
        return RpcSuccess(id=response_id, result=body["result"])
    raise CodecError(CodecErrorKind.MALFORMED, f"response has neither result nor error: {_excerpt(raw)}")


@lru_cache(maxsize=256)
def _cached_adapter(result_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(result_type)


def _adapter_for(result_type: Any) -> TypeAdapter[Any]:
    try:
        return _cached_adapter(result_type)
    except TypeError:
        # unhashable type expressions
        return TypeAdapter(result_type)


def _type_label(result_type: Any) -> str:
    return getattr(result_type, "__name__", None) or repr(result_type)


def decode_result(value: Any, result_type: Any) -> Any:
    """
    Structurally decode a raw ``result`` value into ``result_type``.

    Validation is strict JSON validation: a string or bool is never accepted
    where a number is expected, and no float is truncated into an int.

    Raises:
        CodecError: with kind SHAPE_MISMATCH when validation fails.
    """
    try:
        text = json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError, RecursionError) as exc:
        raise CodecError(CodecErrorKind.SHAPE_MISMATCH, f"result is not plain JSON: {exc}") from exc
    try:
        return _adapter_for(result_type).validate_json(text, strict=True)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in exc.errors()[:5]
        )
        raise CodecError(
            CodecErrorKind.SHAPE_MISMATCH,
            f"result does not match {_type_label(result_type)}: {problems}",
        ) from exc

"""JSON-RPC 2.0 envelope models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

JSONRPC_VERSION = "2.0"


@dataclass(slots=True)
class RpcRequest:
    """Request envelope. ``params`` is already JSON-compatible (list or dict)."""

    id: str
    method: str
    params: list[Any] | dict[str, Any]
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "id": self.id, "method": self.method, "params": self.params}


@dataclass(slots=True)
class RpcErrorObject:
    """Structured error object reported by the server."""

    code: int | str | None
    message: str
    data: Any = None
    name: str | None = None
    cause: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class RpcSuccess:
    """Response envelope carrying a raw ``result`` value."""

    id: Any
    result: Any


@dataclass(slots=True)
class RpcFailure:
    """Response envelope carrying a structured error."""

    id: Any
    error: RpcErrorObject


RpcResponse = Union[RpcSuccess, RpcFailure]

"""Shared fixtures: an in-process NEAR node behind httpx.MockTransport."""

import json
from typing import Any, Callable

import httpx
import pytest

from nearrpc.client import JsonRpcClient
from nearrpc.transport import HttpTransport

SERVER_ADDR = "http://node.test/"


def rpc_reply(request: httpx.Request, *, result: Any = None, error: dict | None = None) -> httpx.Response:
    """Build a JSON-RPC response echoing the request id."""
    body = json.loads(request.content)
    payload: dict[str, Any] = {"jsonrpc": "2.0", "id": body["id"]}
    if error is not None:
        payload["error"] = error
    else:
        payload["result"] = result
    return httpx.Response(200, json=payload)


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], Any]], JsonRpcClient]:
    """Factory: JsonRpcClient whose HTTP traffic goes to ``handler``."""

    def _make(handler: Callable[[httpx.Request], Any]) -> JsonRpcClient:
        transport = HttpTransport(transport=httpx.MockTransport(handler))
        return JsonRpcClient(SERVER_ADDR, transport)

    return _make


@pytest.fixture
def reply() -> Callable[..., httpx.Response]:
    return rpc_reply

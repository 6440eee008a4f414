"""
nearrpc - typed async JSON-RPC 2.0 client for NEAR nodes.
"""

from loguru import logger

from nearrpc.client import JsonRpcClient, client_from_config, create_transport, new_client
from nearrpc.errors import (
    CodecErrorKind,
    RpcError,
    RpcErrorKind,
    RpcInternalError,
    RpcParseError,
    RpcServerError,
    RpcTransportError,
    TransportErrorKind,
)
from nearrpc.transport import HttpTransport

__version__ = "0.1.0"

# Library default: silent until an application enables it.
logger.disable("nearrpc")

__all__ = [
    "CodecErrorKind",
    "HttpTransport",
    "JsonRpcClient",
    "RpcError",
    "RpcErrorKind",
    "RpcInternalError",
    "RpcParseError",
    "RpcServerError",
    "RpcTransportError",
    "TransportErrorKind",
    "client_from_config",
    "create_transport",
    "new_client",
    "__version__",
]

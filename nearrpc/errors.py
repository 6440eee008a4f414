"""
Exception hierarchy for nearrpc.

Provides:
- Low-level errors raised by the transport and the envelope codec
- The caller-facing RpcError family raised by every client call
- Kind enums that keep transport, codec and server failures distinguishable

Transport and codec errors never reach the caller directly: the request
pipeline wraps them into RpcError subclasses and chains the original
exception as ``__cause__``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class RpcErrorKind(Enum):
    """Top-level categories of a failed call."""
    INTERNAL = "internal"
    PARSE_ERROR = "parse_error"
    SERVER_ERROR = "server_error"


class TransportErrorKind(Enum):
    """Why the HTTP exchange could not complete."""
    CONNECT_FAILED = "connect_failed"
    TIMEOUT = "timeout"
    IO_ERROR = "io_error"


class CodecErrorKind(Enum):
    """Why a response could not be decoded."""
    MALFORMED = "malformed"
    SHAPE_MISMATCH = "shape_mismatch"


class TransportError(Exception):
    """Raised by the transport when no response body could be obtained."""

    def __init__(self, kind: TransportErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class CodecError(Exception):
    """Raised by the codec for malformed envelopes or mismatched result shapes."""

    def __init__(self, kind: CodecErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class EncodeError(Exception):
    """Raised when request parameters cannot be serialized to JSON."""


class RpcError(Exception):
    """Base exception for every failed call made through the client."""

    def __init__(
        self,
        message: str,
        kind: RpcErrorKind = RpcErrorKind.INTERNAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


class RpcInternalError(RpcError):
    """The call could not be completed (request encoding or transport)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, kind=RpcErrorKind.INTERNAL, details=details)


class RpcTransportError(RpcInternalError):
    """Transport failure: connection refused, timeout, broken stream."""

    def __init__(self, transport_kind: TransportErrorKind, message: str):
        super().__init__(message, details={"transport_kind": transport_kind.value})
        self.transport_kind = transport_kind

    @property
    def is_timeout(self) -> bool:
        return self.transport_kind is TransportErrorKind.TIMEOUT


class RpcParseError(RpcError):
    """The server's response was malformed or did not match the expected type."""

    def __init__(self, codec_kind: CodecErrorKind, message: str):
        super().__init__(message, kind=RpcErrorKind.PARSE_ERROR, details={"codec_kind": codec_kind.value})
        self.codec_kind = codec_kind


class RpcServerError(RpcError):
    """The server understood the request and reported an error for it.

    ``code``, ``message`` and ``data`` are copied verbatim from the error
    object. NEAR nodes additionally send a structured ``name`` (for example
    ``HANDLER_ERROR``) and a ``cause`` of the form ``{"name": ..., "info": ...}``.
    """

    def __init__(
        self,
        message: str,
        *,
        code: int | str | None = None,
        data: Any = None,
        name: str | None = None,
        cause: dict[str, Any] | None = None,
    ):
        details: dict[str, Any] = {"code": code}
        if data is not None:
            details["data"] = data
        if name:
            details["name"] = name
        if cause:
            details["cause"] = cause
        super().__init__(message, kind=RpcErrorKind.SERVER_ERROR, details=details)
        self.code = code
        self.data = data
        self.name = name
        self.cause = cause or {}

    @property
    def cause_name(self) -> str | None:
        value = self.cause.get("name")
        return str(value) if value is not None else None

    @property
    def cause_info(self) -> Any:
        return self.cause.get("info")

    def __str__(self) -> str:
        prefix = f"[{self.kind.value}:{self.code}]"
        label = self.cause_name or self.name
        if label and self.message:
            return f"{prefix} {label}: {self.message}"
        # message is kept as sent, even when empty
        return f"{prefix} {label or self.message or 'rpc error'}"

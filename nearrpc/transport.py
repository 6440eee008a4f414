"""HTTP transport for JSON-RPC calls."""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from nearrpc.config.schema import TransportConfig
from nearrpc.errors import TransportError, TransportErrorKind

JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


def build_timeout(config: TransportConfig) -> httpx.Timeout:
    """Connect is bounded; read/write/pool follow ``read_timeout`` (unbounded by default)."""
    return httpx.Timeout(
        connect=config.connect_timeout,
        read=config.read_timeout,
        write=config.read_timeout,
        pool=config.read_timeout,
    )


def build_limits(config: TransportConfig) -> httpx.Limits:
    kwargs: dict[str, Any] = {"keepalive_expiry": config.keepalive_expiry}
    if config.max_connections is not None:
        kwargs["max_connections"] = config.max_connections
    return httpx.Limits(**kwargs)


class HttpTransport:
    """
    Owns a single ``httpx.AsyncClient`` shared by every call of a client.

    The client is safe for concurrent requests; its pool reuses idle
    connections for ``keepalive_expiry`` seconds.
    """

    def __init__(
        self,
        config: TransportConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            config: Timeouts, pool limits and extra headers.
            transport: Optional httpx transport (e.g. ``httpx.MockTransport``).
        """
        self.config = config or TransportConfig()
        kwargs: dict[str, Any] = {
            "timeout": build_timeout(self.config),
            "limits": build_limits(self.config),
            "headers": {**JSON_HEADERS, **self.config.headers},
        }
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**kwargs)
        logger.debug(
            "Opened RPC HTTP client (connect_timeout={}s, keepalive={}s)",
            self.config.connect_timeout,
            self.config.keepalive_expiry,
        )

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def send(self, server_addr: str, body: bytes) -> bytes:
        """
        POST ``body`` to ``server_addr`` and return the full response body.

        The body is returned whatever the HTTP status: nodes report JSON-RPC
        errors on non-2xx statuses too, and the envelope decides the outcome.

        Raises:
            TransportError: TIMEOUT, CONNECT_FAILED or IO_ERROR.
        """
        if self._client.is_closed:
            raise TransportError(TransportErrorKind.IO_ERROR, "transport is closed")
        try:
            resp = await self._client.post(server_addr, content=body)
        except httpx.TimeoutException as exc:
            raise TransportError(
                TransportErrorKind.TIMEOUT,
                f"{type(exc).__name__} talking to {server_addr}: {exc}",
            ) from exc
        except httpx.ConnectError as exc:
            raise TransportError(
                TransportErrorKind.CONNECT_FAILED,
                f"cannot connect to {server_addr}: {exc}",
            ) from exc
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise TransportError(
                TransportErrorKind.CONNECT_FAILED,
                f"invalid server address {server_addr!r}: {exc}",
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                TransportErrorKind.IO_ERROR,
                f"{type(exc).__name__} talking to {server_addr}: {exc}",
            ) from exc

        if resp.status_code >= 400:
            logger.warning("RPC endpoint {} answered HTTP {}", server_addr, resp.status_code)
        return resp.content

    async def aclose(self) -> None:
        """Release pooled connections. Sending afterwards fails with IO_ERROR."""
        if not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed RPC HTTP client")

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

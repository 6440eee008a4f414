"""Configuration schema using Pydantic.

The single data model for client settings, persisted to ~/.nearrpc/config.json
and overridable through NEARRPC_* environment variables.
"""

from pydantic import BaseModel, Field, ConfigDict
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

DEFAULT_SERVER_ADDR = "https://rpc.mainnet.near.org"

# Public endpoints addressable by name from the CLI and config.
NETWORKS: dict[str, str] = {
    "mainnet": "https://rpc.mainnet.near.org",
    "testnet": "https://rpc.testnet.near.org",
    "betanet": "https://rpc.betanet.near.org",
    "localnet": "http://127.0.0.1:3030",
}


class TransportConfig(BaseModel):
    """HTTP transport settings."""
    connect_timeout: float = 30.0  # Ceiling on establishing a connection, seconds
    keepalive_expiry: float = 30.0  # Idle pooled connections are kept this long, seconds
    # None keeps the wait for a response body unbounded; only connect is limited by default.
    read_timeout: float | None = None
    max_connections: int | None = None  # None keeps the httpx default pool size
    headers: dict[str, str] = Field(default_factory=dict)  # Extra headers, e.g. API keys for hosted RPC


class ClientConfig(BaseSettings):
    """Root configuration for nearrpc."""
    server_addr: str = DEFAULT_SERVER_ADDR
    network: str | None = None  # Name from NETWORKS; wins over server_addr when set
    transport: TransportConfig = Field(default_factory=TransportConfig)

    model_config = ConfigDict(
        env_prefix="NEARRPC_",
        env_nested_delimiter="__"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # NEARRPC_* variables override values read from the config file
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    def resolved_server_addr(self) -> str:
        if self.network:
            return resolve_server_addr(self.network)
        return self.server_addr


def resolve_server_addr(value: str) -> str:
    """Map a network name to its endpoint; URLs pass through unchanged."""
    key = (value or "").strip()
    if key.lower() in NETWORKS:
        return NETWORKS[key.lower()]
    if "://" in key:
        return key
    raise ValueError(f"Unknown network {value!r}. Use one of {', '.join(NETWORKS)} or a full URL.")

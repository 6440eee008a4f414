"""Configuration module for nearrpc."""

from nearrpc.config.loader import load_config, get_config_path, save_config
from nearrpc.config.schema import ClientConfig, NETWORKS, TransportConfig, resolve_server_addr

__all__ = [
    "ClientConfig",
    "NETWORKS",
    "TransportConfig",
    "load_config",
    "get_config_path",
    "save_config",
    "resolve_server_addr",
]

"""CLI commands for nearrpc.

Entry point ``nearrpc``: list the method table, call any registered method
with JSON params, and print node status or a block summary.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Awaitable, Callable

import typer
from pydantic_core import to_jsonable_python
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from nearrpc import __version__
from nearrpc.cli.logging_utils import ensure_stderr_logging
from nearrpc.client import JsonRpcClient, client_from_config
from nearrpc.config.loader import load_config
from nearrpc.config.schema import resolve_server_addr
from nearrpc.errors import RpcError, RpcServerError
from nearrpc.registry import METHODS
from nearrpc.types import BlockReference, Finality

app = typer.Typer(
    name="nearrpc",
    help="nearrpc - typed JSON-RPC client for NEAR nodes",
    no_args_is_help=True,
)

console = Console()

EXIT_SERVER_ERROR = 1
EXIT_CALL_FAILED = 2

UrlOption = typer.Option(None, "--url", "-u", help="RPC endpoint URL (overrides config)")
NetworkOption = typer.Option(None, "--network", "-n", help="mainnet, testnet, betanet or localnet")
ConfigOption = typer.Option(None, "--config", "-c", help="Config file (default ~/.nearrpc/config.json)")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"nearrpc v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every request and response"),
    version: bool = typer.Option(None, "--version", callback=_version_callback, is_eager=True),
) -> None:
    """nearrpc - typed JSON-RPC client for NEAR nodes."""
    ensure_stderr_logging(verbose)


def _build_client(url: str | None, network: str | None, config_path: Path | None) -> JsonRpcClient:
    try:
        config = load_config(config_path)
        if url or network:
            config.server_addr = resolve_server_addr(url or network or "")
            config.network = None
        return client_from_config(config)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(EXIT_CALL_FAILED)


def _run(client: JsonRpcClient, fn: Callable[[JsonRpcClient], Awaitable[Any]]) -> Any:
    async def _go() -> Any:
        async with client:
            return await fn(client)

    try:
        return asyncio.run(_go())
    except RpcServerError as e:
        console.print(f"[red]Server error {e.code}:[/red] {escape(e.message or e.name or 'rpc error')}")
        if e.cause_name:
            console.print(f"[dim]cause: {e.cause_name}[/dim]")
        raise typer.Exit(EXIT_SERVER_ERROR)
    except RpcError as e:
        console.print(f"[red]Call failed ({e.kind.value}):[/red] {escape(e.message)}")
        raise typer.Exit(EXIT_CALL_FAILED)


def _print_json(value: Any) -> None:
    console.print_json(json.dumps(to_jsonable_python(value), ensure_ascii=False))


def _parse_params(raw: str | None) -> Any:
    if raw is None or not raw.strip():
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        console.print(f"[red]PARAMS is not valid JSON:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_CALL_FAILED)


@app.command("methods")
def methods_command() -> None:
    """List the remote methods this client knows."""
    table = Table(title="RPC methods")
    table.add_column("Command", style="cyan")
    table.add_column("Wire method")
    table.add_column("Params")
    table.add_column("Description", style="dim")
    for name, spec in METHODS.items():
        if spec.request_type is not None:
            params = f"{{{spec.request_type.__name__}}}"
        else:
            params = f"[{', '.join(spec.params)}]"
        table.add_row(name, spec.name, params, spec.description)
    console.print(table)


@app.command("call")
def call_command(
    method: str = typer.Argument(..., help="Method name from `nearrpc methods` (or any wire name with --raw)"),
    params: str = typer.Argument(None, help="Params as JSON: an array, or an object"),
    raw: bool = typer.Option(False, "--raw", help="Skip the method table and return the untyped result"),
    url: str = UrlOption,
    network: str = NetworkOption,
    config_path: Path = ConfigOption,
) -> None:
    """Call a method and print its result as JSON."""
    parsed = _parse_params(params)
    client = _build_client(url, network, config_path)
    if raw:
        result = _run(client, lambda c: c.call(method, parsed))
    else:
        result = _run(client, lambda c: c.invoke(method, parsed))
    _print_json(result)


@app.command("status")
def status_command(
    url: str = UrlOption,
    network: str = NetworkOption,
    config_path: Path = ConfigOption,
) -> None:
    """Show node version, chain and sync state."""
    client = _build_client(url, network, config_path)
    status = _run(client, lambda c: c.status())
    sync = status.sync_info
    console.print(f"Endpoint: {client.server_addr}")
    console.print(f"Chain: {status.chain_id} (protocol {status.protocol_version})")
    console.print(f"Version: {status.version.version} ({status.version.build})")
    console.print(f"Latest block: {sync.latest_block_height} {sync.latest_block_hash}")
    syncing = "[yellow]syncing[/yellow]" if sync.syncing else "[green]synced[/green]"
    console.print(f"Sync: {syncing}")


@app.command("block")
def block_command(
    block_id: str = typer.Option(None, "--block-id", "-b", help="Block height or hash"),
    finality: Finality = typer.Option(Finality.FINAL, "--finality", "-f", help="Used when no --block-id"),
    url: str = UrlOption,
    network: str = NetworkOption,
    config_path: Path = ConfigOption,
) -> None:
    """Show a block header summary."""
    if block_id is None:
        reference = BlockReference.of_finality(finality)
    elif block_id.isdigit():
        reference = BlockReference.of_block_id(int(block_id))
    else:
        reference = BlockReference.of_block_id(block_id)
    client = _build_client(url, network, config_path)
    block = _run(client, lambda c: c.block(reference))
    header = block.header
    console.print(f"Height: {header.height}")
    console.print(f"Hash: {header.hash}")
    console.print(f"Author: {block.author}")
    console.print(f"Chunks: {len(block.chunks)}")


if __name__ == "__main__":
    app()

"""
tz_sdk.cli.main
===============

`tz-sdk`: command-line helpers around a node RPC.

Examples
--------
    $ tz-sdk --rpc http://127.0.0.1:8732 version
    $ tz-sdk counter tz1...
    $ tz-sdk entrypoints KT1...
    $ tz-sdk prepare batch.json --source tz1...

`prepare` only assigns counters and prints the batch; nothing is signed or
injected.

Configuration
-------------
- RPC URL   : `--rpc` or env `TZ_SDK_RPC_URL` (default: http://127.0.0.1:8732)
- Chain     : `--chain` or env `TZ_SDK_CHAIN` (default: main)
- Timeout   : `--timeout` or env `TZ_SDK_TIMEOUT` seconds (default: 10.0)
- Log level : `--log-level` or env `TZ_SDK_LOG_LEVEL` (default: WARNING)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer

from ..config import SDKConfig
from ..errors import TzSdkError
from ..preparer import CounterPreparer, PreparerContext
from ..rpc.http import RpcClient
from ..version import __version__ as SDK_VERSION

app = typer.Typer(
    name="tz-sdk",
    help="tz-sdk CLI: inspect accounts and contracts, preview counter assignment.",
    no_args_is_help=True,
    add_completion=False,
)

__all__ = ["app", "main"]


def _print_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _fail(e: Exception) -> None:
    typer.secho(f"error: {e}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.callback()
def _root(
    ctx: typer.Context,
    rpc: Optional[str] = typer.Option(None, "--rpc", help="Node RPC URL.", envvar="TZ_SDK_RPC_URL"),
    chain: Optional[str] = typer.Option(None, "--chain", help="Chain selector.", envvar="TZ_SDK_CHAIN"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="HTTP timeout in seconds.", envvar="TZ_SDK_TIMEOUT"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level.", envvar="TZ_SDK_LOG_LEVEL"),
) -> None:
    """Resolve the effective configuration for this process."""
    try:
        cfg = SDKConfig.with_overrides(
            SDKConfig.from_env(),
            rpc_url=rpc,
            chain=chain,
            request_timeout=timeout,
            log_level=log_level,
        )
    except TzSdkError as e:
        _fail(e)
        return

    # Basic logging if caller hasn't configured it
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=cfg.log_level_value,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    ctx.obj = cfg


def _client(ctx: typer.Context) -> RpcClient:
    return RpcClient.from_config(ctx.obj)


@app.command("version")
def version() -> None:
    """Print the SDK version."""
    typer.echo(f"tz-sdk {SDK_VERSION}")


@app.command("env")
def env(ctx: typer.Context) -> None:
    """Show the effective configuration."""
    _print_json(ctx.obj.to_dict())


@app.command("counter")
def counter(ctx: typer.Context, address: str = typer.Argument(..., help="Account address.")) -> None:
    """Print the account's current on-chain counter (0 if unknown)."""
    try:
        with _client(ctx) as rpc:
            typer.echo(str(rpc.get_account_counter(address)))
    except TzSdkError as e:
        _fail(e)


@app.command("entrypoints")
def entrypoints(ctx: typer.Context, address: str = typer.Argument(..., help="Contract address.")) -> None:
    """List the contract's entrypoints and their parameter types."""
    try:
        with _client(ctx) as rpc:
            res = rpc.get_entrypoints(address)
    except TzSdkError as e:
        _fail(e)
        return
    if res is None:
        typer.echo("node does not report entrypoints (legacy contract)")
        return
    _print_json(res["entrypoints"])


@app.command("prepare")
def prepare(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON list of operation requests."),
    source: str = typer.Option(..., "--source", "-s", help="Account signing the batch."),
) -> None:
    """Assign counters to a batch and print it (nothing is signed or injected)."""
    try:
        ops = json.loads(file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        _fail(e)
        return
    if not isinstance(ops, list) or not all(isinstance(op, dict) for op in ops):
        _fail(ValueError("batch file must contain a JSON list of objects"))
        return
    try:
        with _client(ctx) as rpc:
            prepared = CounterPreparer().prepare(ops, PreparerContext(source=source, chain=rpc))
    except TzSdkError as e:
        _fail(e)
        return
    _print_json(prepared)


def main() -> None:  # pragma: no cover - console entrypoint
    app()


if __name__ == "__main__":  # pragma: no cover
    main()

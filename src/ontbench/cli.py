"""
Ontbench CLI

Command-line interface for the Ontology benchmark adapter.

Commands:
  whoami      - Show the wallet account address
  new-wallet  - Create a wallet file with a fresh key
  height      - Show the current block height
  block-txs   - List the transactions of a block
  confirm     - Show the confirmation status of a transaction
  bench       - Deploy the configured contracts and submit invocations
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click

from .adapter import OntologyAdapter
from .chain.status import ConfirmationOutcome
from .config import AdapterConfig, load_adapter_config
from .errors import AdapterError
from .keys.crypto import ScryptParams
from .keys.wallet import create_wallet
from .logging import setup_logging

VERSION = "0.3.0"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    required=True,
    envvar="ONTBENCH_CONFIG",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Benchmark or network configuration file",
)


@click.group()
@click.version_option(version=VERSION, prog_name="ontbench")
@click.option("--log-level", default="WARNING", type=click.Choice(LOG_LEVELS, case_sensitive=False))
@click.option("--log-file", default=None, type=click.Path(dir_okay=False, path_type=Path))
def cli(log_level: str, log_file: Optional[Path]) -> None:
    """Ontbench: Ontology backend for blockchain benchmarks."""
    setup_logging(log_file, level=getattr(logging, log_level.upper()))


def _load_config(config_path: Path) -> AdapterConfig:
    try:
        return load_adapter_config(config_path)
    except AdapterError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)


def _run(config: AdapterConfig, action: Any) -> Any:
    """Build an adapter, run ``action(adapter)`` and close the adapter."""

    async def _main() -> Any:
        async with OntologyAdapter(config) as adapter:
            return await action(adapter)

    try:
        return asyncio.run(_main())
    except AdapterError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)


# ============ Identity ============


@cli.command()
@config_option
def whoami(config_path: Path) -> None:
    """Show the wallet account address."""
    config = _load_config(config_path)

    async def action(adapter: OntologyAdapter) -> str:
        return adapter.address

    click.echo(f"Address: {_run(config, action)}")


@cli.command("new-wallet")
@click.option("--out", "out_path", required=True, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--label", default="default", help="Account label")
@click.option("--scrypt-n", default=16384, type=int, help="scrypt cost factor")
def new_wallet(out_path: Path, password: str, label: str, scrypt_n: int) -> None:
    """Create a wallet file holding one fresh account."""
    if out_path.exists():
        click.secho(f"ERROR: {out_path} already exists.", fg="red")
        sys.exit(1)
    wallet, _ = create_wallet(password, label=label, scrypt=ScryptParams(n=scrypt_n))
    wallet.write(out_path)
    click.echo(f"Address: {wallet.default_account.address}")
    click.echo(f"Wallet:  {out_path}")


# ============ Chain queries ============


@cli.command()
@config_option
def height(config_path: Path) -> None:
    """Show the current block height."""
    config = _load_config(config_path)

    async def action(adapter: OntologyAdapter) -> int:
        return await adapter.current_height()

    click.echo(str(_run(config, action)))


@cli.command("block-txs")
@config_option
@click.argument("block_height", type=int)
def block_txs(config_path: Path, block_height: int) -> None:
    """List the transaction hashes of a block."""
    config = _load_config(config_path)

    async def action(adapter: OntologyAdapter) -> list[str]:
        return await adapter.transaction_hashes_at_height(block_height)

    for tx_hash in _run(config, action):
        click.echo(tx_hash)


@cli.command()
@config_option
@click.argument("tx_hash")
def confirm(config_path: Path, tx_hash: str) -> None:
    """Show the confirmation status of a transaction."""
    config = _load_config(config_path)

    async def action(adapter: OntologyAdapter) -> ConfirmationOutcome:
        return await adapter.confirmation_status(tx_hash)

    outcome = _run(config, action)
    color = {"confirmed": "green", "failed": "red"}.get(outcome.value, "yellow")
    click.secho(f"{tx_hash}: {outcome.value}", fg=color)
    if outcome is ConfirmationOutcome.FAILED:
        sys.exit(1)


# ============ Benchmark ============


@cli.command()
@config_option
@click.option("--contract", required=True, help="Contract name to invoke")
@click.option("--func", "func_name", required=True, help="Function name to call")
@click.option("--args", "args_json", default="[]", help="Function args as JSON array")
@click.option("--count", default=1, type=click.IntRange(min=1), help="Number of invocations")
def bench(config_path: Path, contract: str, func_name: str, args_json: str, count: int) -> None:
    """
    Deploy the configured contracts, then invoke one function repeatedly.

    Invocations are submitted concurrently; each status is printed.
    """
    try:
        args = json.loads(args_json)
        if not isinstance(args, list):
            raise ValueError("Args must be a JSON array")
    except (json.JSONDecodeError, ValueError) as exc:
        click.secho(f"ERROR: Invalid args: {exc}", fg="red")
        sys.exit(1)

    config = _load_config(config_path)

    async def action(adapter: OntologyAdapter) -> list:
        deployed = await adapter.deploy()
        for status in deployed:
            click.echo(f"deploy {status.tx_hash} {status.state.value}")
        calls = [{"func": func_name, "args": args} for _ in range(count)]
        return await adapter.invoke_smart_contract(None, contract, "", calls)

    statuses = _run(config, action)
    failed = 0
    for status in statuses:
        click.echo(f"invoke {status.tx_hash} {status.state.value}")
        failed += status.failed
    click.echo(f"{count - failed}/{count} submitted")
    if failed:
        sys.exit(1)


def main() -> None:
    """Ontbench CLI entry point."""
    cli()


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
explorers/cli.py - Command line front end for MultiExplorer.

Usage:
    multiexplorer hash 0
    multiexplorer info 000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f
    multiexplorer --network bitcoin-testnet --include-blockstream verify 1000
    multiexplorer --explorer https://a.example/api --explorer https://b.example/api \
        --kind insight hash 0

Exit codes: 0 consensus, 1 no consensus, 2 conflict, 3 configuration error.
"""

import asyncio
import json
import sys
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

import click

from config import load_settings
from core.constants import ExitCode, ExplorerKind, QueryType
from core.exceptions import ConfigError, ConflictError, NoConsensusError
from core.logging import set_global_context, setup_logging
from core.models import BlockInfo, Outcome, ProviderSpec
from explorers.aggregator import MultiExplorer, decide
from explorers.registry import default_registry


@dataclass
class CliOptions:
    """Options shared by all subcommands."""
    network: str
    timeout_seconds: int
    min_explorers: int
    explorer_urls: tuple[str, ...]
    kind: ExplorerKind
    include_blockstream: bool
    as_json: bool
    verbose: bool


def build_multi_explorer(options: CliOptions) -> MultiExplorer:
    """Create the aggregator described by the command line options."""
    explorers: Optional[list[ProviderSpec]] = None
    if options.explorer_urls:
        explorers = [
            ProviderSpec(url=url, kind=options.kind, timeout_seconds=options.timeout_seconds)
            for url in options.explorer_urls
        ]
    elif options.include_blockstream:
        explorers = default_registry().specs(
            options.network,
            timeout_seconds=options.timeout_seconds,
            include_blockstream=True,
        )

    return MultiExplorer(
        network=options.network,
        explorers=explorers,
        timeout_seconds=options.timeout_seconds,
        min_explorers=options.min_explorers,
    )


def _render_value(value: Any) -> Any:
    return value.to_dict() if isinstance(value, BlockInfo) else value


def _echo_outcomes(outcomes: list[Outcome]) -> None:
    for outcome in outcomes:
        if outcome.ok:
            click.echo(f"  ok    {outcome.url} -> {_render_value(outcome.value)}", err=True)
        else:
            click.echo(f"  fail  {outcome.url} -> [{outcome.code.value}] {outcome.error.message}", err=True)


def _run(options: CliOptions, query: Callable[[MultiExplorer], Awaitable[dict]]) -> None:
    """Build the aggregator, run one query and exit with its status."""

    async def runner() -> dict:
        async with build_multi_explorer(options) as multi:
            return await query(multi)

    try:
        result = asyncio.run(runner())
    except (ConfigError, ValueError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(ExitCode.CONFIG_INVALID)
    except NoConsensusError as e:
        click.echo(f"No consensus: {e}", err=True)
        sys.exit(ExitCode.NO_CONSENSUS)
    except ConflictError as e:
        click.echo(f"Conflict: {e}", err=True)
        if options.verbose:
            click.echo(json.dumps(e.details, indent=2, default=str), err=True)
        sys.exit(ExitCode.CONFLICT)

    if options.as_json:
        click.echo(json.dumps(result, indent=2, sort_keys=True))
    else:
        for key, value in result.items():
            click.echo(f"{key}: {value}")


@click.group()
@click.option("--network", "-n", default=None, help="Registry network id (env: EXPLORER_NETWORK)")
@click.option("--timeout", "-t", type=click.IntRange(min=1), default=None,
              help="Per-request timeout in seconds (env: EXPLORER_TIMEOUT_SECONDS)")
@click.option("--min-explorers", type=click.IntRange(min=1), default=None,
              help="Minimum number of explorers (env: EXPLORER_MIN_COUNT)")
@click.option("--explorer", "-e", "explorer_urls", multiple=True,
              help="Explorer base URL; repeat for several")
@click.option("--kind", "-k", type=click.Choice([k.value for k in ExplorerKind]),
              default=ExplorerKind.BLOCKSTREAM.value, show_default=True,
              help="API family of the --explorer URLs")
@click.option("--include-blockstream", is_flag=True,
              help="Also query the registry's Blockstream endpoints")
@click.option("--json", "as_json", is_flag=True, help="Print JSON output")
@click.option("--verbose", "-v", is_flag=True, help="Print per-explorer outcomes")
@click.option("--log-level", "-l", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
              help="Log level (env: EXPLORER_LOG_LEVEL)")
@click.pass_context
def cli(
    ctx: click.Context,
    network: Optional[str],
    timeout: Optional[int],
    min_explorers: Optional[int],
    explorer_urls: tuple[str, ...],
    kind: str,
    include_blockstream: bool,
    as_json: bool,
    verbose: bool,
    log_level: Optional[str],
) -> None:
    """Resolve block metadata agreed by several block explorers."""
    try:
        settings = load_settings()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(ExitCode.CONFIG_INVALID)

    setup_logging(level=log_level or settings.log_level)
    options = CliOptions(
        network=network or settings.network,
        timeout_seconds=timeout or settings.timeout_seconds,
        min_explorers=min_explorers or settings.min_explorers,
        explorer_urls=explorer_urls,
        kind=ExplorerKind(kind),
        include_blockstream=include_blockstream,
        as_json=as_json,
        verbose=verbose,
    )
    set_global_context(network=options.network)
    ctx.obj = options


@cli.command("hash")
@click.argument("height", type=click.IntRange(min=0))
@click.pass_obj
def hash_command(options: CliOptions, height: int) -> None:
    """Resolve the block hash at HEIGHT."""

    async def query(multi: MultiExplorer) -> dict:
        outcomes = await multi.settle_block_hash(height)
        if options.verbose:
            _echo_outcomes(outcomes)
        return {"height": height, "hash": decide(outcomes, QueryType.BLOCK_HASH, height)}

    _run(options, query)


@cli.command("info")
@click.argument("block_hash")
@click.pass_obj
def info_command(options: CliOptions, block_hash: str) -> None:
    """Resolve merkle root and time of BLOCK_HASH."""

    async def query(multi: MultiExplorer) -> dict:
        outcomes = await multi.settle_block_info(block_hash)
        if options.verbose:
            _echo_outcomes(outcomes)
        info = decide(outcomes, QueryType.BLOCK_INFO, block_hash.strip())
        return {"hash": block_hash, **info.to_dict()}

    _run(options, query)


@cli.command("verify")
@click.argument("height", type=click.IntRange(min=0))
@click.pass_obj
def verify_command(options: CliOptions, height: int) -> None:
    """Resolve hash, merkle root and time of the block at HEIGHT."""

    async def query(multi: MultiExplorer) -> dict:
        block_hash, info = await multi.verify_block(height)
        return {"height": height, "hash": block_hash, **info.to_dict()}

    _run(options, query)


def main() -> None:
    cli(prog_name="multiexplorer")


if __name__ == "__main__":
    main()

import time
from pathlib import Path

import click

from arbscan.arbitrage import (
    ArbitrageEngine,
    ArbitrageOpportunity,
    build_arbitrage_params,
    encode_execute_transactions,
)
from arbscan.cli import cli
from arbscan.cli.utils import get_web3_from_config, load_settings
from arbscan.config import Settings
from arbscan.exceptions import StateFetchError
from arbscan.logging import logger
from arbscan.providers import (
    PendingBlockMonitor,
    PendingOperationsSource,
    Web3PoolStateProvider,
)
from arbscan.registry import RelatedPairIndex

config_argument = click.argument(
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)


def build_components(settings: Settings) -> tuple[ArbitrageEngine, PendingOperationsSource]:
    """
    Connect to the configured RPC and build the engine and the pending operations source.
    """

    w3 = get_web3_from_config(settings)
    engine = ArbitrageEngine(
        state_provider=Web3PoolStateProvider(w3),
        related_pairs=RelatedPairIndex.from_pair_config(settings.pairs),
    )
    return engine, PendingBlockMonitor(w3, settings.router_address)


def run_cycle(
    engine: ArbitrageEngine,
    source: PendingOperationsSource,
    settings: Settings,
) -> list[ArbitrageOpportunity]:
    """
    Run a single scan cycle over the pending operations, reporting each opportunity found with the
    encoded executor calldata.
    """

    operations = source.get_pending_operations()
    if operations is None:
        click.echo("No pending operations.")
        return []

    opportunities = engine.simulate_swaps_and_find_arbitrage(operations)
    if not opportunities:
        click.echo(f"No arbitrage opportunities found for {len(operations)} pending operations.")
        return []

    pools = engine.pools
    params = []
    for opportunity in opportunities:
        click.echo(
            f"Buy {opportunity.buy_amount} at {opportunity.buy_pool}, "
            f"sell {opportunity.buy_amount_out} at {opportunity.sell_pool}, "
            f"profit {opportunity.profit}"
        )
        params.append(build_arbitrage_params(opportunity, pools, settings.slippage_bps))

    calldata = encode_execute_transactions(params)
    click.echo(f"Executor {settings.executor_address} calldata: 0x{calldata.hex()}")
    return opportunities


@cli.command()
@config_argument
def scan(config_path: Path) -> None:
    """
    Run a single scan cycle against the earliest pending block.
    """

    settings = load_settings(config_path)
    engine, source = build_components(settings)
    try:
        run_cycle(engine, source, settings)
    except StateFetchError as exc:
        raise click.ClickException(str(exc.message)) from exc


@cli.command()
@config_argument
@click.option(
    "--cycles",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Stop after this many cycles. Zero runs until interrupted.",
)
def run(config_path: Path, cycles: int) -> None:
    """
    Run scan cycles continuously, waiting for the poll interval between each.
    """

    settings = load_settings(config_path)
    engine, source = build_components(settings)

    completed = 0
    while True:
        try:
            run_cycle(engine, source, settings)
        except StateFetchError as exc:
            logger.error(f"Cycle aborted: {exc.message}")

        completed += 1
        if cycles and completed >= cycles:
            break
        time.sleep(settings.poll_interval)

from pathlib import Path

import click

from arbscan.cli import cli
from arbscan.cli.utils import load_settings
from arbscan.registry import RelatedPairIndex


@cli.group()
def pairs() -> None:
    """
    Related pair commands
    """


@pairs.command("check")
@click.argument(
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def pairs_check(config_path: Path) -> None:
    """
    Validate the pairs in a config file and display the related pair index.
    """

    settings = load_settings(config_path)
    index = RelatedPairIndex.from_pair_config(settings.pairs)

    if not index:
        raise click.ClickException(f"No pairs are defined in {config_path}.")

    for base_token in index:
        related_pools = index.get_related_pools(base_token)
        click.echo(f"{base_token} ({len(related_pools)} pools)")
        for pool in related_pools:
            click.echo(f"  • {pool}")

    click.echo(f"{len(settings.pairs)} pairs OK")

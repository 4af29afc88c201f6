from pathlib import Path

import click
import tomlkit

from arbscan.cli import cli
from arbscan.cli.utils import load_settings
from arbscan.config import CONFIG_FILE


@cli.group()
def config() -> None:
    """
    Configuration commands
    """


@config.command("show")
@click.option(
    "--config-file",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=CONFIG_FILE,
    show_default=True,
    help="The config file to display.",
)
@click.option("--json", "as_json", is_flag=True, help="Display the config as JSON.")
def config_show(config_path: Path, *, as_json: bool) -> None:
    """
    Display the validated configuration, with environment overrides applied.
    """

    settings = load_settings(config_path)
    if as_json:
        click.echo(settings.model_dump_json(indent=2))
    else:
        click.echo(tomlkit.dumps(settings.model_dump(mode="json")))

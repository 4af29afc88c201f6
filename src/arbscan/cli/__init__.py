import click


@click.group()
@click.version_option()
def cli() -> None: ...


from . import config, pairs, scan  # noqa: F401, E402

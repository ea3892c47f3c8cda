import logging

import click
from importlib.metadata import version as importlib_version

from .classify import classify, zones
from .dashboard import dashboard
from .sos import sos
from .watch import watch

LOG_LEVELS = ["error", "warning", "info", "debug"]

_LOGGER = logging.getLogger(__name__)


@click.group()
@click.option("--log-level", type=click.Choice(LOG_LEVELS), default="warning")
def cli(log_level: str) -> None:
    level = getattr(logging, log_level.upper())
    logging.basicConfig(level=level)
    _LOGGER.debug("safezone version: %s", get_version())


@cli.command()
def version() -> None:
    """Print installed package version."""
    print(get_version())


def get_version() -> str:
    return importlib_version("safezone")


cli.add_command(classify)
cli.add_command(zones)
cli.add_command(watch)
cli.add_command(dashboard)
cli.add_command(sos)

if __name__ == "__main__":
    cli()

"""rosa-lifecycle CLI entry point."""

import logging

import click

from . import __version__
from .commands.cluster import create, delete


@click.group()
@click.version_option(version=__version__, prog_name="rosa-lifecycle")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def cli(verbose: bool):
    """rosa-lifecycle - create and delete ROSA clusters with their AWS prerequisites."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Register subcommands
cli.add_command(create)
cli.add_command(delete)


if __name__ == "__main__":
    cli()

"""Click CLI entry point for autoreset."""

from __future__ import annotations

import logging

import click

from autoreset._version import __version__


@click.group()
@click.version_option(version=__version__, prog_name="autoreset")
@click.option("--verbose", "-v", is_flag=True, help="Log pipeline decisions to stderr")
def cli(verbose: bool):
    """autoreset - generate auto_reset() methods for @auto_resettable classes.

    Each mutable field is reset to its declared default, or to None when
    its type is optional. Fields without either are left for you.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


# Import and register subcommands
from autoreset.cli.expand_cmd import expand  # noqa: E402
from autoreset.cli.check_cmd import check  # noqa: E402
from autoreset.cli.undo_cmd import undo  # noqa: E402

cli.add_command(expand)
cli.add_command(check)
cli.add_command(undo)


if __name__ == "__main__":
    cli()

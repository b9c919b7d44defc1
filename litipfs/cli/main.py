"""Main CLI entry point for lit-ipfs."""

import logging

import click
from colorama import init

from litipfs import __version__
from litipfs.log_utils import default_logging_config
from litipfs.cli.output import BANNER
from litipfs.cli.commands import (init_cmd, config_cmd, remote_cmd, push_cmd, fetch_cmd,
                                  ls_remote_cmd, history_cmd, migrate_cmd)

# Initialize colorama for cross-platform colored output
init(autoreset=True)

_VERBOSITY_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


class LitIpfsGroup(click.Group):
    """Custom Group class to display banner before help."""

    def format_help(self, ctx, formatter):
        click.echo(BANNER)
        super().format_help(ctx, formatter)


@click.group(cls=LitIpfsGroup)
@click.version_option(version=__version__)
@click.option('-v', '--verbose', count=True, help='Log more (-v info, -vv debug)')
@click.pass_context
def cli(ctx, verbose):
    ctx.ensure_object(dict)
    default_logging_config(_VERBOSITY_LEVELS[min(verbose, len(_VERBOSITY_LEVELS) - 1)])


cli.add_command(init_cmd)
cli.add_command(config_cmd)
cli.add_command(remote_cmd)
cli.add_command(push_cmd)
cli.add_command(fetch_cmd)
cli.add_command(ls_remote_cmd)
cli.add_command(history_cmd)
cli.add_command(migrate_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()

"""Commands for looking at a remote without changing the local repository."""

import click
import requests

from litipfs.core.errors import LitIpfsError
from litipfs.cli.context import open_manager
from litipfs.cli.output import success, error, info, short


@click.command('ls-remote')
@click.argument('remote', default='origin')
@click.pass_context
def ls_remote_cmd(ctx, remote):
    """List the refs published in a remote's index."""
    manager = open_manager(ctx)
    try:
        refs = manager.ls_remote(remote)
    except (LitIpfsError, requests.RequestException) as e:
        click.echo(error(f"Failed to read remote: {e}"))
        raise click.Abort()

    if not refs:
        click.echo(info("No refs published yet"))
        return
    for ref_name, obj_hash in refs.items():
        click.echo(f"{obj_hash}\t{ref_name}")


@click.command('history')
@click.argument('remote', default='origin')
@click.option('-n', '--limit', type=int, default=None, help='Show at most this many indices')
@click.pass_context
def history_cmd(ctx, remote, limit):
    """
    Show the chain of indices published for a remote, newest first.
    """
    manager = open_manager(ctx)
    try:
        entries = manager.history(remote, limit)
    except (LitIpfsError, requests.RequestException) as e:
        click.echo(error(f"Failed to read remote history: {e}"))
        raise click.Abort()

    if not entries:
        click.echo(info("Nothing published yet"))
        return
    for link, index in entries:
        click.echo(f"{link}  refs={len(index.refs)} objects={len(index.objects)}")
        for ref_name, obj_hash in sorted(index.refs.items()):
            click.echo(f"    {short(obj_hash)} {ref_name}")


@click.command('migrate')
@click.argument('remote', default='origin')
@click.pass_context
def migrate_cmd(ctx, remote):
    """Republish a remote's index in the current protocol version."""
    manager = open_manager(ctx)
    try:
        new_address = manager.migrate(remote)
    except (LitIpfsError, ValueError, requests.RequestException) as e:
        click.echo(error(f"Migration failed: {e}"))
        raise click.Abort()

    if new_address is None:
        click.echo(info(f"'{remote}' is already up to date"))
    else:
        click.echo(success(f"Migrated '{remote}' to {new_address}"))

"""Fetch command - download refs and objects from a lit-ipfs remote."""

import click
import requests

from litipfs.core.errors import LitIpfsError
from litipfs.cli.context import open_manager
from litipfs.cli.output import success, error, info, short


@click.command('fetch')
@click.argument('remote', default='origin')
@click.argument('refs', nargs=-1)
@click.pass_context
def fetch_cmd(ctx, remote, refs):
    """
    Download objects and refs from a remote.

    Branches update remote-tracking refs (refs/remotes/<remote>/*), tags
    land in refs/tags. Local branches are never touched.

    Examples:
        litipfs fetch              # Fetch every ref from origin
        litipfs fetch origin main  # Fetch one branch
    """
    manager = open_manager(ctx)
    old_refs = manager.repo.refs.list_refs()

    try:
        click.echo(info(f"Fetching from {remote}..."))
        fetched = manager.fetch(remote, refs or None)
    except (LitIpfsError, requests.RequestException) as e:
        click.echo(error(f"Failed to fetch: {e}"))
        raise click.Abort()

    updated = 0
    for ref_name, obj_hash in sorted(fetched.items()):
        old = old_refs.get(ref_name)
        if old is None:
            click.echo(success(f"  * [new] {ref_name} -> {short(obj_hash)}"))
            updated += 1
        elif old != obj_hash:
            click.echo(success(f"  {short(old)}..{short(obj_hash)} {ref_name}"))
            updated += 1

    if not updated:
        click.echo(info("  Already up to date."))
    click.echo(success("Fetch complete"))

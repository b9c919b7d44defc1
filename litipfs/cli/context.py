"""Helpers shared by the CLI commands."""

import click

from litipfs.core.config import get_config
from litipfs.core.repository import Repository
from litipfs.remote.ipfs import IpfsClient
from litipfs.remote.manager import RemoteManager
from litipfs.cli.output import error


def find_repository() -> Repository:
    """Find the enclosing repository or abort the command."""
    repo = Repository.find_repository()
    if not repo:
        click.echo(error("Not a lit repository"))
        raise click.Abort()
    return repo


def open_manager(ctx: click.Context) -> RemoteManager:
    """
    Build a RemoteManager for the enclosing repository.

    A content store placed in the context object under 'store' is used as
    is; otherwise an IpfsClient is configured from the [ipfs] settings.
    """
    repo = find_repository()
    settings = get_config(repo).ipfs_settings()

    obj = ctx.obj or {}
    store = obj.get('store')
    if store is None:
        store = IpfsClient(settings.api_url, settings.timeout)

    return RemoteManager(repo, store, key=settings.key)

"""Remote command - manage lit-ipfs remotes."""

import click

from litipfs.core.errors import AddressError
from litipfs.cli.context import open_manager
from litipfs.cli.output import success, error, info


@click.group('remote', invoke_without_command=True)
@click.pass_context
def remote_cmd(ctx):
    """Manage remotes. Lists them when no subcommand is given."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(remote_list)


@remote_cmd.command('add')
@click.argument('name')
@click.argument('address')
@click.pass_context
def remote_add(ctx, name, address):
    """
    Add a remote.

    NAME: Remote name (e.g., 'origin')
    ADDRESS: /ipfs/<hash>, /ipns/<hash>, new-ipfs or new-ipns

    Examples:
        litipfs remote add origin new-ipns
        litipfs remote add mirror /ipfs/QmdT2sVhj8UicZsGY7x687FgdJPrzR9idGyavi5282CPH3
    """
    manager = open_manager(ctx)

    existing = manager.list_remotes().get(name)
    if existing:
        click.echo(error(f"Remote '{name}' already exists: {existing}"))
        raise click.Abort()

    try:
        manager.add_remote(name, address)
    except AddressError as e:
        click.echo(error(f"Invalid remote address: {e}"))
        raise click.Abort()

    click.echo(success(f"Added remote '{name}': {address}"))


@remote_cmd.command('list')
@click.pass_context
def remote_list(ctx):
    """List configured remotes."""
    manager = open_manager(ctx)
    remotes = manager.list_remotes()
    if not remotes:
        click.echo(info("No remotes configured"))
        return
    for name, address in sorted(remotes.items()):
        click.echo(f"{name}\t{address}")


@remote_cmd.command('remove')
@click.argument('name')
@click.pass_context
def remote_remove(ctx, name):
    """Remove a remote."""
    manager = open_manager(ctx)
    if not manager.remove_remote(name):
        click.echo(error(f"Remote '{name}' not found"))
        raise click.Abort()
    click.echo(success(f"Removed remote '{name}'"))

"""Push command - publish local refs to a lit-ipfs remote."""

import click
import requests

from litipfs.core.errors import FetchFirst, LitIpfsError
from litipfs.cli.context import open_manager
from litipfs.cli.output import success, error, info


@click.command('push')
@click.argument('remote', default='origin')
@click.argument('refspecs', nargs=-1)
@click.option('--force', '-f', is_flag=True, help='Overwrite remote refs even if objects are missing locally')
@click.pass_context
def push_cmd(ctx, remote, refspecs, force):
    """
    Upload local refs and their objects, then publish a new index.

    REMOTE: Name of remote to push to (default: origin)
    REFSPECS: [+]<src>[:<dst>] (default: the current branch);
    ':<dst>' deletes dst from the remote

    Examples:
        litipfs push
        litipfs push origin main
        litipfs push origin v1.0:refs/tags/v1.0
        litipfs push origin :old-branch
    """
    manager = open_manager(ctx)

    if not refspecs:
        head = manager.repo.head_file.read_text().strip()
        if not head.startswith('ref: refs/heads/'):
            click.echo(error("Cannot push from detached HEAD state"))
            click.echo(info("Specify a refspec: litipfs push origin <branch>"))
            raise click.Abort()
        refspecs = (head[5:],)

    try:
        click.echo(info(f"Pushing to '{remote}'..."))
        new_address = manager.push(remote, refspecs, force=force)
    except FetchFirst as e:
        click.echo(error(f"Push rejected: {e}"))
        click.echo(info("Fetch the latest changes first: litipfs fetch"))
        click.echo(info("Or force push (dangerous): litipfs push --force"))
        raise click.Abort()
    except (LitIpfsError, ValueError, requests.RequestException) as e:
        click.echo(error(f"Push failed: {e}"))
        raise click.Abort()

    for spec in refspecs:
        click.echo(info(f"  {spec}"))
    click.echo(success(f"Published '{remote}' at {new_address}"))

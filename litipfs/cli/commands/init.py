"""Initialize a new repository."""

from pathlib import Path

import click

from litipfs.core.repository import Repository
from litipfs.cli.output import success, error, info


@click.command('init')
@click.argument('path', default='.')
def init_cmd(path):
    """
    Initialize a new lit repository.

    Creates the .lit directory lit-ipfs pushes from and fetches into.

    Examples:
        litipfs init                # Initialize in current directory
        litipfs init my-project     # Initialize in my-project directory
    """
    repo_path = Path(path).resolve()

    if (repo_path / '.lit').exists():
        click.echo(error(f"Repository already exists at {repo_path}"))
        raise click.Abort()

    try:
        if not repo_path.exists():
            repo_path.mkdir(parents=True)
            click.echo(info(f"Created directory {repo_path}"))
        repo = Repository(str(repo_path)).init()
    except PermissionError:
        click.echo(error(f"Permission denied: Cannot create repository at {path}"))
        raise click.Abort()

    click.echo(success(f"Initialized empty lit repository in {repo.lit_dir}"))
    click.echo(info("Add a remote with: litipfs remote add origin new-ipns"))

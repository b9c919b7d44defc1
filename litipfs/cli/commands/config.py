"""Config command - read and change lit-ipfs settings."""

import click

from litipfs.core.config import Config, get_config
from litipfs.core.repository import Repository
from litipfs.cli.output import success, error


def _split_key(key):
    section, _, option = key.partition('.')
    if not option:
        click.echo(error(f"Config keys look like <section>.<key>, got '{key}'"))
        raise click.Abort()
    return section, option


@click.group('config')
def config_cmd():
    """Get and set repository or global options."""


@config_cmd.command('set')
@click.argument('key')
@click.argument('value')
@click.option('--global', 'is_global', is_flag=True, help='Set global config')
def config_set(key, value, is_global):
    """
    Set a config value.

    Examples:
        litipfs config set ipfs.api http://127.0.0.1:5001
        litipfs config set --global ipfs.timeout 120
    """
    section, option = _split_key(key)

    if is_global:
        config = Config()
    else:
        repo = Repository.find_repository()
        if not repo:
            click.echo(error("Not a lit repository (use --global for global config)"))
            raise click.Abort()
        config = get_config(repo)

    config.set(section, option, value, global_config=is_global)

    scope = "global" if is_global else "repository"
    click.echo(success(f"Set {scope} config: {key} = {value}"))


@config_cmd.command('get')
@click.argument('key')
def config_get(key):
    """
    Print the effective value of a config key.

    Environment variables win over the repository config, which wins over
    the global one.
    """
    section, option = _split_key(key)
    value = get_config(Repository.find_repository()).get(section, option)
    if value is None:
        click.echo(error(f"Config key not found: {key}"))
        raise click.Abort()
    click.echo(value)

"""CLI commands for lit-ipfs."""

from litipfs.cli.commands.init import init_cmd
from litipfs.cli.commands.config import config_cmd
from litipfs.cli.commands.remote import remote_cmd
from litipfs.cli.commands.push import push_cmd
from litipfs.cli.commands.fetch import fetch_cmd
from litipfs.cli.commands.inspect import ls_remote_cmd, history_cmd, migrate_cmd

__all__ = ['init_cmd', 'config_cmd', 'remote_cmd', 'push_cmd', 'fetch_cmd',
           'ls_remote_cmd', 'history_cmd', 'migrate_cmd']

"""Integration tests for the litipfs command line."""

import logging

import pytest
from click.testing import CliRunner

from litipfs.cli.main import cli
from litipfs.core.config import Config, get_config


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI installs a stderr handler; drop it again after each test."""
    logger = logging.getLogger('litipfs')
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def run(store, monkeypatch):
    """Invoke the CLI in a directory against the in-memory store."""
    runner = CliRunner()

    def invoke(cwd, *args):
        monkeypatch.chdir(cwd)
        return runner.invoke(cli, list(args), obj={'store': store})

    return invoke


def test_help_shows_banner():
    result = CliRunner().invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'lit-ipfs' in result.output
    assert 'push' in result.output


def test_init(run, temp_dir):
    result = run(temp_dir, 'init', 'project')
    assert result.exit_code == 0
    assert (temp_dir / 'project' / '.lit' / 'HEAD').exists()

    again = run(temp_dir, 'init', 'project')
    assert again.exit_code != 0
    assert 'already exists' in again.output


def test_outside_repository(run, temp_dir):
    result = run(temp_dir, 'remote')
    assert result.exit_code != 0
    assert 'Not a lit repository' in result.output


def test_remote_add_list_remove(run, repo):
    assert 'No remotes configured' in run(repo.work_tree, 'remote').output

    result = run(repo.work_tree, 'remote', 'add', 'origin', 'new-ipns')
    assert result.exit_code == 0

    listing = run(repo.work_tree, 'remote', 'list')
    assert 'origin\tnew-ipns' in listing.output

    duplicate = run(repo.work_tree, 'remote', 'add', 'origin', 'new-ipfs')
    assert duplicate.exit_code != 0

    assert run(repo.work_tree, 'remote', 'remove', 'origin').exit_code == 0
    assert run(repo.work_tree, 'remote', 'remove', 'origin').exit_code != 0


def test_remote_add_rejects_bad_address(run, repo):
    result = run(repo.work_tree, 'remote', 'add', 'origin', '/ipfs/short')
    assert result.exit_code != 0
    assert 'Invalid remote address' in result.output


def test_push_fetch_ls_remote(run, repo, other_repo, single_commit):
    """Push the current branch, list it and fetch it elsewhere."""
    run(repo.work_tree, 'remote', 'add', 'origin', 'new-ipns')

    pushed = run(repo.work_tree, 'push')
    assert pushed.exit_code == 0, pushed.output
    assert "Published 'origin'" in pushed.output

    listed = run(repo.work_tree, 'ls-remote')
    assert f"{single_commit}\trefs/heads/main" in listed.output

    address = repo.config_file.read_text().split('address = ')[1].split()[0]
    run(other_repo.work_tree, 'remote', 'add', 'origin', address)

    fetched = run(other_repo.work_tree, 'fetch')
    assert fetched.exit_code == 0, fetched.output
    assert '[new] refs/remotes/origin/main' in fetched.output
    assert other_repo.refs.read_ref('refs/remotes/origin/main') == single_commit

    again = run(other_repo.work_tree, 'fetch')
    assert 'Already up to date.' in again.output


def test_push_rejected_without_fetch(run, repo, other_repo, other_graph, single_commit):
    run(repo.work_tree, 'remote', 'add', 'origin', 'new-ipns')
    run(repo.work_tree, 'push')
    address = repo.config_file.read_text().split('address = ')[1].split()[0]

    other_graph.commit({'other.txt': b"diverged\n"}, ref='refs/heads/main')
    run(other_repo.work_tree, 'remote', 'add', 'origin', address)

    rejected = run(other_repo.work_tree, 'push')
    assert rejected.exit_code != 0
    assert 'Push rejected' in rejected.output

    forced = run(other_repo.work_tree, 'push', '--force')
    assert forced.exit_code == 0, forced.output


def test_push_missing_branch(run, repo):
    run(repo.work_tree, 'remote', 'add', 'origin', 'new-ipfs')
    result = run(repo.work_tree, 'push', 'origin', 'nope')
    assert result.exit_code != 0
    assert 'Push failed' in result.output


def test_history_and_migrate(run, repo, graph, single_commit):
    run(repo.work_tree, 'remote', 'add', 'origin', 'new-ipfs')
    assert 'Nothing published yet' in run(repo.work_tree, 'history').output

    run(repo.work_tree, 'push')
    graph.commit({'hello.txt': b"v2\n"}, parents=[single_commit], ref='refs/heads/main')
    run(repo.work_tree, 'push')

    history = run(repo.work_tree, 'history')
    assert history.exit_code == 0
    assert history.output.count('refs=1') == 2
    assert run(repo.work_tree, 'history', '-n', '1').output.count('refs=1') == 1

    migrated = run(repo.work_tree, 'migrate')
    assert 'already up to date' in migrated.output


def test_config_set_and_get(run, repo, temp_dir, monkeypatch):
    """Repository settings win over global ones; the environment wins over both."""
    monkeypatch.setattr(Config, 'GLOBAL_CONFIG_PATH', temp_dir / 'global.ini')
    monkeypatch.delenv('LITIPFS_IPFS_API', raising=False)

    assert run(repo.work_tree, 'config', 'set', '--global', 'ipfs.api', 'http://global:5001').exit_code == 0
    assert run(repo.work_tree, 'config', 'get', 'ipfs.api').output.strip() == 'http://global:5001'

    result = run(repo.work_tree, 'config', 'set', 'ipfs.api', 'http://repo:5001')
    assert result.exit_code == 0
    assert 'Set repository config' in result.output
    assert get_config(repo).ipfs_settings().api_url == 'http://repo:5001'
    assert run(repo.work_tree, 'config', 'get', 'ipfs.api').output.strip() == 'http://repo:5001'

    monkeypatch.setenv('LITIPFS_IPFS_API', 'http://env:5001')
    assert run(repo.work_tree, 'config', 'get', 'ipfs.api').output.strip() == 'http://env:5001'


def test_config_errors(run, repo, temp_dir, monkeypatch):
    monkeypatch.setattr(Config, 'GLOBAL_CONFIG_PATH', temp_dir / 'global.ini')

    missing = run(repo.work_tree, 'config', 'get', 'ipfs.nothing')
    assert missing.exit_code != 0
    assert 'not found' in missing.output

    bad_key = run(repo.work_tree, 'config', 'set', 'timeout', '3')
    assert bad_key.exit_code != 0

    outside = run(temp_dir, 'config', 'set', 'ipfs.timeout', '3')
    assert outside.exit_code != 0
    assert 'Not a lit repository' in outside.output

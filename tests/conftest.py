"""Shared pytest fixtures for lit-ipfs tests."""

import shutil
import tempfile
from pathlib import Path

import pytest

from litipfs.core.index import Index
from litipfs.core.objects import Blob, Commit, Tag, Tree
from litipfs.core.repository import Repository
from litipfs.remote.memory import MemoryContentStore

AUTHOR = "Test User <test@example.com>"


class GraphBuilder:
    """
    Writes small object graphs into a repository.

    Timestamps are fixed so the same calls produce the same hashes in any
    repository.
    """

    def __init__(self, repo):
        self.repo = repo
        self.clock = 1700000000

    def blob(self, data: bytes) -> str:
        return self.repo.write_object(Blob(data))

    def tree(self, files: dict, submodules: dict = None) -> str:
        """
        Write a tree from {name: bytes | dict} (dicts become subtrees) and
        {name: commit hash} submodule tips.
        """
        tree = Tree()
        for name, content in files.items():
            if isinstance(content, dict):
                tree.add_entry('040000', 'tree', self.tree(content), name)
            else:
                tree.add_entry('100644', 'blob', self.blob(content), name)
        for name, commit_hash in (submodules or {}).items():
            tree.add_submodule(commit_hash, name)
        return self.repo.write_object(tree)

    def commit(self, files: dict, parents=(), message="Test commit",
               ref: str = None, submodules: dict = None) -> str:
        self.clock += 60
        commit = Commit.create(
            tree_hash=self.tree(files, submodules),
            parent_hashes=list(parents),
            author=AUTHOR,
            committer=AUTHOR,
            message=message,
            timestamp=self.clock,
        )
        commit_hash = self.repo.write_object(commit)
        if ref:
            self.repo.refs.write_ref(ref, commit_hash)
        return commit_hash

    def tag(self, target: str, name: str, ref: bool = True) -> str:
        self.clock += 60
        tag = Tag.create(target, name, AUTHOR, f"Release {name}", timestamp=self.clock)
        tag_hash = self.repo.write_object(tag)
        if ref:
            self.repo.refs.write_ref(f'refs/tags/{name}', tag_hash)
        return tag_hash

    def history(self, length: int, ref: str = 'refs/heads/main') -> list:
        """Write a linear history; returns commit hashes oldest first."""
        hashes = []
        for i in range(length):
            hashes.append(self.commit(
                {'file.txt': f"version {i}\n".encode()},
                parents=hashes[-1:],
                message=f"Commit {i}",
            ))
        if ref and hashes:
            self.repo.refs.write_ref(ref, hashes[-1])
        return hashes


def _make_repo(path: Path) -> Repository:
    path.mkdir(parents=True, exist_ok=True)
    return Repository(str(path)).init()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def repo(temp_dir):
    """An initialized repository to push from."""
    return _make_repo(temp_dir / 'local')


@pytest.fixture
def other_repo(temp_dir):
    """A second, empty repository to fetch into."""
    return _make_repo(temp_dir / 'other')


@pytest.fixture
def store():
    return MemoryContentStore()


@pytest.fixture
def graph(repo):
    return GraphBuilder(repo)


@pytest.fixture
def other_graph(other_repo):
    return GraphBuilder(other_repo)


@pytest.fixture
def index():
    return Index()


@pytest.fixture
def single_commit(graph):
    """One commit, one tree, one blob, no parents, on refs/heads/main."""
    return graph.commit({'hello.txt': b"Hello, World!\n"}, ref='refs/heads/main')

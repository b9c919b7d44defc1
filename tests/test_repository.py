"""Tests for the local repository and its refs."""

import zlib

import pytest

from litipfs.core.errors import ObjectNotFound, UnsupportedObjectKind
from litipfs.core.objects import Blob, Commit, Tree
from litipfs.core.repository import Repository


def test_init_creates_structure(repo):
    """Test repository initialization creates the .lit layout."""
    assert repo.lit_dir.is_dir()
    assert repo.objects_dir.is_dir()
    assert repo.heads_dir.is_dir()
    assert repo.tags_dir.is_dir()
    assert repo.remotes_dir.is_dir()
    assert repo.head_file.read_text() == 'ref: refs/heads/main\n'
    assert repo.config_file.exists()


def test_init_twice_fails(repo):
    with pytest.raises(Exception, match="already exists"):
        Repository(str(repo.work_tree)).init()


def test_find_repository_from_subdirectory(repo):
    """Test finding the repository from a nested directory."""
    nested = repo.work_tree / 'a' / 'b'
    nested.mkdir(parents=True)
    found = Repository.find_repository(str(nested))
    assert found is not None
    assert found.lit_dir == repo.lit_dir


def test_find_repository_outside(temp_dir):
    assert Repository.find_repository(str(temp_dir)) is None


def test_write_raw_stores_loose_object(repo):
    """Raw bodies are stored zlib-compressed behind a kind/size header."""
    obj_hash = repo.write_raw('blob', b"hello\n")

    assert obj_hash == 'ce013625030ba8dba906f756967f9e9ca394464a'
    stored = zlib.decompress(repo.object_path(obj_hash).read_bytes())
    assert stored == b"blob 6\0hello\n"


def test_write_raw_is_idempotent(repo):
    assert repo.write_raw('blob', b"x") == repo.write_raw('blob', b"x")


def test_write_raw_rejects_unknown_kind(repo):
    with pytest.raises(UnsupportedObjectKind):
        repo.write_raw('note', b"hi")


def test_read_raw_returns_body(repo):
    obj_hash = repo.write_object(Blob(b"data"))
    assert repo.read_raw(obj_hash) == ('blob', b"data")
    assert repo.object_kind(obj_hash) == 'blob'


def test_read_raw_missing(repo):
    with pytest.raises(ObjectNotFound):
        repo.read_raw('0' * 40)


def test_read_raw_size_mismatch(repo):
    """A body that disagrees with its header is reported as corrupt."""
    path = repo.object_path('1' * 40)
    path.parent.mkdir(parents=True)
    path.write_bytes(zlib.compress(b"blob 10\0short"))
    with pytest.raises(ValueError, match="size mismatch"):
        repo.read_raw('1' * 40)


def test_read_object_keeps_stored_hash(graph, repo):
    """Parsed objects keep the id they were read under."""
    commit_hash = graph.commit({'a.txt': b"a"})
    commit = repo.read_object(commit_hash)
    assert isinstance(commit, Commit)
    assert commit.hash == commit_hash
    assert isinstance(repo.read_object(commit.tree), Tree)


def test_write_and_read_ref(repo, single_commit):
    assert repo.refs.read_ref('refs/heads/main') == single_commit
    assert repo.refs.read_ref('main') == single_commit
    assert repo.refs.read_ref('HEAD') == single_commit


def test_write_ref_requires_object(repo):
    with pytest.raises(ObjectNotFound):
        repo.refs.write_ref('refs/heads/main', 'f' * 40)


def test_read_missing_ref(repo):
    assert repo.refs.read_ref('refs/heads/nope') is None
    assert repo.refs.resolve_head() is None


def test_list_refs(graph, repo):
    """list_refs returns full names below the prefix."""
    first = graph.commit({'a.txt': b"a"}, ref='refs/heads/main')
    second = graph.commit({'b.txt': b"b"}, ref='refs/remotes/origin/dev')
    tag_hash = graph.tag(first, 'v1')

    assert repo.refs.list_refs() == {
        'refs/heads/main': first,
        'refs/remotes/origin/dev': second,
        'refs/tags/v1': tag_hash,
    }
    assert repo.refs.list_refs('refs/remotes/') == {'refs/remotes/origin/dev': second}


def test_delete_ref(repo, single_commit):
    assert repo.refs.delete_ref('refs/heads/main') is True
    assert repo.refs.delete_ref('refs/heads/main') is False
    assert repo.refs.read_ref('refs/heads/main') is None

"""Content-store representation of a single local object.

A RemoteObject links to the object's raw body in the content store and
carries just enough relationship data (parents, tree, tag target, tree
entries) to walk the graph without downloading any raw bodies.

Wire format: header ++ msgpack([git_hash, raw_link, metadata]) where
metadata is one of

    ['commit', [parent, ...], tree]
    ['tag', target]
    ['tree', [entry, ...]]
    ['blob']
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Tuple, Union

import msgpack

from .errors import MalformedPayload, ObjectTreeInconsistency, UnsupportedObjectKind, VersionMismatch
from .header import PROTOCOL_VERSION, encode_header, split_header
from .objects import Blob, Commit, LitObject, Tag, Tree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitMetadata:
    parents: FrozenSet[str]
    tree: str

    kind = 'commit'

    def referenced_hashes(self) -> Tuple[str, ...]:
        return (self.tree,) + tuple(sorted(self.parents))

    def to_raw(self) -> list:
        return ['commit', sorted(self.parents), self.tree]


@dataclass(frozen=True)
class TagMetadata:
    target: str

    kind = 'tag'

    def referenced_hashes(self) -> Tuple[str, ...]:
        return (self.target,)

    def to_raw(self) -> list:
        return ['tag', self.target]


@dataclass(frozen=True)
class TreeMetadata:
    """Tree entries, submodule tips excluded."""

    entries: FrozenSet[str] = field(default_factory=frozenset)

    kind = 'tree'

    def referenced_hashes(self) -> Tuple[str, ...]:
        return tuple(sorted(self.entries))

    def to_raw(self) -> list:
        return ['tree', sorted(self.entries)]


@dataclass(frozen=True)
class BlobMetadata:
    kind = 'blob'

    def referenced_hashes(self) -> Tuple[str, ...]:
        return ()

    def to_raw(self) -> list:
        return ['blob']


ObjectMetadata = Union[CommitMetadata, TagMetadata, TreeMetadata, BlobMetadata]


def _str_list(value) -> list:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise MalformedPayload(f"Expected a list of hashes, got {value!r}")
    return value


def _str(value) -> str:
    if not isinstance(value, str):
        raise MalformedPayload(f"Expected a hash, got {value!r}")
    return value


def metadata_from_raw(raw) -> ObjectMetadata:
    """Rebuild a metadata variant from its decoded payload form."""
    if not isinstance(raw, list) or not raw:
        raise MalformedPayload(f"Invalid object metadata: {raw!r}")

    tag, args = raw[0], raw[1:]
    if tag == 'commit' and len(args) == 2:
        return CommitMetadata(frozenset(_str_list(args[0])), _str(args[1]))
    if tag == 'tag' and len(args) == 1:
        return TagMetadata(_str(args[0]))
    if tag == 'tree' and len(args) == 1:
        return TreeMetadata(frozenset(_str_list(args[0])))
    if tag == 'blob' and not args:
        return BlobMetadata()
    raise MalformedPayload(f"Invalid object metadata: {raw!r}")


def unpack_payload(payload: bytes):
    """Decode a headerless msgpack payload into plain lists and dicts."""
    try:
        return msgpack.unpackb(payload, raw=False)
    except (ValueError, TypeError, msgpack.UnpackException) as exc:
        raise MalformedPayload(f"Could not decode payload: {exc}") from exc


def pack_payload(raw) -> bytes:
    return msgpack.packb(raw, use_bin_type=True)


@dataclass(frozen=True)
class RemoteObject:
    """A local object as published to the content store."""

    git_hash: str
    raw_link: str
    metadata: ObjectMetadata

    @property
    def kind(self) -> str:
        return self.metadata.kind

    # Construction from local objects

    @staticmethod
    def _upload_raw(obj: LitObject, repo, store) -> str:
        _kind, data = repo.read_raw(obj.hash)
        return store.put(data)

    @classmethod
    def from_commit(cls, commit: Commit, repo, store) -> 'RemoteObject':
        return cls(
            git_hash=commit.hash,
            raw_link=cls._upload_raw(commit, repo, store),
            metadata=CommitMetadata(frozenset(commit.parents), commit.tree),
        )

    @classmethod
    def from_tree(cls, tree: Tree, repo, store) -> 'RemoteObject':
        # Submodule tips are the caller's business, see Index.push_ref
        entries = frozenset(e.hash for e in tree.entries if not e.is_submodule)
        return cls(
            git_hash=tree.hash,
            raw_link=cls._upload_raw(tree, repo, store),
            metadata=TreeMetadata(entries),
        )

    @classmethod
    def from_blob(cls, blob: Blob, repo, store) -> 'RemoteObject':
        return cls(
            git_hash=blob.hash,
            raw_link=cls._upload_raw(blob, repo, store),
            metadata=BlobMetadata(),
        )

    @classmethod
    def from_tag(cls, tag: Tag, repo, store) -> 'RemoteObject':
        return cls(
            git_hash=tag.hash,
            raw_link=cls._upload_raw(tag, repo, store),
            metadata=TagMetadata(tag.target),
        )

    @classmethod
    def from_local(cls, git_hash: str, repo, store) -> 'RemoteObject':
        """Build the remote form of a local object, uploading its raw body."""
        obj = repo.read_object(git_hash)
        if isinstance(obj, Commit):
            return cls.from_commit(obj, repo, store)
        if isinstance(obj, Tree):
            return cls.from_tree(obj, repo, store)
        if isinstance(obj, Blob):
            return cls.from_blob(obj, repo, store)
        if isinstance(obj, Tag):
            return cls.from_tag(obj, repo, store)
        raise UnsupportedObjectKind(obj.type, git_hash)

    # Serialization

    def to_raw(self) -> list:
        return [self.git_hash, self.raw_link, self.metadata.to_raw()]

    @classmethod
    def from_raw(cls, raw) -> 'RemoteObject':
        if not isinstance(raw, list) or len(raw) != 3:
            raise MalformedPayload(f"Invalid object payload: {raw!r}")
        git_hash, raw_link, metadata = raw
        return cls(_str(git_hash), _str(raw_link), metadata_from_raw(metadata))

    def encode(self) -> bytes:
        return encode_header() + pack_payload(self.to_raw())

    @classmethod
    def decode(cls, data: bytes) -> 'RemoteObject':
        """
        Decode an object serialized by this protocol version.

        Raises:
            MalformedHeader: If the header is invalid
            VersionMismatch: If the object comes from any other version
            MalformedPayload: If the payload has the wrong shape
        """
        version, payload = split_header(data)
        if version != PROTOCOL_VERSION:
            raise VersionMismatch(version, PROTOCOL_VERSION)
        return cls.from_raw(unpack_payload(payload))

    # Content store round trips

    def upload(self, store) -> str:
        """Put self on the content store and return the link."""
        return store.put(self.encode())

    @classmethod
    def download(cls, link: str, store) -> 'RemoteObject':
        """Download and strictly decode an object."""
        return cls.decode(store.get(link))

    @classmethod
    def load(cls, link: str, store, git_hash: str) -> 'RemoteObject':
        """
        Download an object, upgrading it if it predates this version.

        Raises:
            ObjectTreeInconsistency: If the object describes another hash
        """
        from litipfs.migrations import migrate_object

        version, payload = split_header(store.get(link))
        if version == PROTOCOL_VERSION:
            obj = cls.from_raw(unpack_payload(payload))
        else:
            logger.debug("Object %s at %s is version %d, migrating", git_hash, link, version)
            obj = migrate_object(payload, version, git_hash)

        if obj.git_hash != git_hash:
            msg = f"Object at {link} describes {obj.git_hash}, expected {git_hash}"
            logger.error(msg)
            raise ObjectTreeInconsistency(git_hash, obj.git_hash, link)
        return obj

    def write_raw(self, repo, store) -> str:
        """
        Download the raw body and write it into the local repository.

        Returns:
            str: Hash the local repository computed for the written body
        """
        data = store.get(self.raw_link)
        return repo.write_raw(self.metadata.kind, data)



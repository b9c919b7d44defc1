"""Local version-control objects.

These mirror the objects lit stores under .lit/objects: blobs, trees,
commits and annotated tags. Their hashes are computed exactly like git's
loose objects, so a body written back locally reproduces its id.
"""

import time
from abc import ABC, abstractmethod
from typing import List, Optional

from .hash import hash_object

TREE_MODES = ('40000', '040000')
GITLINK_MODE = '160000'


def entry_type_for_mode(mode: str) -> str:
    """
    Map a tree entry mode to the kind of object it points at.

    Mode 160000 is a commit embedded in a tree: the tip of a submodule.
    """
    if mode in TREE_MODES:
        return 'tree'
    if mode == GITLINK_MODE:
        return 'commit'
    return 'blob'


class LitObject(ABC):
    """Base class for all local objects."""

    def __init__(self):
        self._hash: Optional[str] = None

    @abstractmethod
    def serialize(self) -> bytes:
        """Serialize object body to bytes."""

    @abstractmethod
    def deserialize(self, data: bytes) -> None:
        """Populate object from its serialized body."""

    @property
    def type(self) -> str:
        """Object kind name (blob, tree, commit, tag)."""
        return self.__class__.__name__.lower()

    def compute_hash(self) -> str:
        """
        Compute and cache object hash.

        Objects are hashed with a header containing the type and size.
        Format: <type> <size>\\0<content>

        Returns:
            str: 40-character SHA-1 hash
        """
        if self._hash is None:
            data = self.serialize()
            header = f"{self.type} {len(data)}\0".encode()
            self._hash = hash_object(header + data)
        return self._hash

    @property
    def hash(self) -> str:
        return self.compute_hash()


class Blob(LitObject):
    """File content without any metadata."""

    def __init__(self, data: Optional[bytes] = None):
        super().__init__()
        self.data = data or b''

    def serialize(self) -> bytes:
        return self.data

    def deserialize(self, data: bytes) -> None:
        self.data = data
        self._hash = None

    def __repr__(self) -> str:
        return f"Blob(hash={self.hash[:7]}, size={len(self.data)})"


class TreeEntry:
    """
    A single entry in a tree.

    - mode: e.g. '100644' for a file, '040000' for a directory,
      '160000' for a submodule tip
    - type: kind of the object the entry points at
    - hash: SHA-1 hash of that object
    - name: filename or directory name
    """

    def __init__(self, mode: str, obj_type: str, obj_hash: str, name: str):
        self.mode = mode
        self.type = obj_type
        self.hash = obj_hash
        self.name = name

    @property
    def is_submodule(self) -> bool:
        return self.type == 'commit'

    def __repr__(self) -> str:
        return f"TreeEntry({self.mode} {self.type} {self.hash[:7]} {self.name})"

    def __lt__(self, other: 'TreeEntry') -> bool:
        return self.name < other.name


class Tree(LitObject):
    """Directory structure pointing to blobs, subtrees and submodule tips."""

    def __init__(self):
        super().__init__()
        self.entries: List[TreeEntry] = []

    def add_entry(self, mode: str, obj_type: str, obj_hash: str, name: str) -> None:
        self.entries.append(TreeEntry(mode, obj_type, obj_hash, name))
        self.entries.sort()
        self._hash = None

    def add_submodule(self, commit_hash: str, name: str) -> None:
        """Record a submodule tip, a commit living in another repository."""
        self.add_entry(GITLINK_MODE, 'commit', commit_hash, name)

    def serialize(self) -> bytes:
        """
        Serialize tree.

        Format: <mode> <name>\\0<20-byte hash>, repeated for each entry
        """
        result = b''
        for entry in sorted(self.entries):
            mode_name = f"{entry.mode} {entry.name}".encode()
            result += mode_name + b'\0' + bytes.fromhex(entry.hash)
        return result

    def deserialize(self, data: bytes) -> None:
        self.entries = []
        pos = 0

        while pos < len(data):
            space_pos = data.index(b' ', pos)
            mode = data[pos:space_pos].decode()

            null_pos = data.index(b'\0', space_pos)
            name = data[space_pos + 1:null_pos].decode('utf-8', 'surrogateescape')

            obj_hash = data[null_pos + 1:null_pos + 21].hex()
            self.entries.append(
                TreeEntry(mode, entry_type_for_mode(mode), obj_hash, name)
            )

            pos = null_pos + 21

        self.entries.sort()
        self._hash = None

    def __repr__(self) -> str:
        return f"Tree(entries={len(self.entries)})"


def _split_headers(data: bytes):
    """Split a commit or tag body into (header lines, message)."""
    head, sep, message = data.partition(b'\n\n')
    lines = head.split(b'\n') if head else []
    return lines, message.decode('utf-8', 'replace') if sep else ''


class Commit(LitObject):
    """
    A commit: tree snapshot, parent commits, authorship and message.

    Headers other than tree/parent/author/committer (signatures, encodings)
    are skipped when parsing; the raw body is never re-serialized for
    transfer, so they survive a push/fetch round trip untouched.
    """

    def __init__(self):
        super().__init__()
        self.tree: str = ''
        self.parents: List[str] = []
        self.author: str = ''
        self.author_time: int = 0
        self.author_timezone: str = '+0000'
        self.committer: str = ''
        self.committer_time: int = 0
        self.committer_timezone: str = '+0000'
        self.message: str = ''

    def serialize(self) -> bytes:
        lines = [f'tree {self.tree}']
        for parent in self.parents:
            lines.append(f'parent {parent}')
        lines.append(f'author {self.author} {self.author_time} {self.author_timezone}')
        lines.append(
            f'committer {self.committer} {self.committer_time} {self.committer_timezone}'
        )
        lines.append('')
        lines.append(self.message)
        return '\n'.join(lines).encode()

    def deserialize(self, data: bytes) -> None:
        self.tree = ''
        self.parents = []
        lines, self.message = _split_headers(data)

        for raw_line in lines:
            # Continuation lines of multi-line headers (gpgsig) start with a space
            if raw_line.startswith(b' '):
                continue
            line = raw_line.decode('utf-8', 'replace')

            if line.startswith('tree '):
                self.tree = line[5:]
            elif line.startswith('parent '):
                self.parents.append(line[7:])
            elif line.startswith('author '):
                self.author, self.author_time, self.author_timezone = _parse_ident(line[7:])
            elif line.startswith('committer '):
                (self.committer, self.committer_time,
                 self.committer_timezone) = _parse_ident(line[10:])

        self._hash = None

    @classmethod
    def create(
        cls,
        tree_hash: str,
        parent_hashes: List[str],
        author: str,
        committer: str,
        message: str,
        timestamp: Optional[int] = None,
        timezone: str = '+0000'
    ) -> 'Commit':
        """
        Create a new commit.

        Args:
            tree_hash: Hash of tree object
            parent_hashes: List of parent commit hashes
            author: Author name and email (e.g., "Name <email>")
            committer: Committer name and email
            message: Commit message
            timestamp: Unix timestamp (defaults to current time)
            timezone: Timezone offset (e.g., "+0000", "-0500")
        """
        commit = cls()
        commit.tree = tree_hash
        commit.parents = list(parent_hashes)
        commit.author = author
        commit.committer = committer
        commit.message = message

        if timestamp is None:
            timestamp = int(time.time())

        commit.author_time = timestamp
        commit.committer_time = timestamp
        commit.author_timezone = timezone
        commit.committer_timezone = timezone
        return commit

    def __repr__(self) -> str:
        parent_info = f", parents={len(self.parents)}" if self.parents else ""
        msg_preview = self.message.split('\n')[0][:50]
        return f"Commit(hash={self.hash[:7]}{parent_info}, msg='{msg_preview}')"


class Tag(LitObject):
    """
    An annotated tag pointing at another object.

    Format:
    object <target-hash>
    type <target-kind>
    tag <name>
    tagger Name <email> <timestamp> <timezone>

    <tag message>
    """

    def __init__(self):
        super().__init__()
        self.target: str = ''
        self.target_type: str = 'commit'
        self.name: str = ''
        self.tagger: str = ''
        self.tagger_time: int = 0
        self.tagger_timezone: str = '+0000'
        self.message: str = ''

    def serialize(self) -> bytes:
        lines = [
            f'object {self.target}',
            f'type {self.target_type}',
            f'tag {self.name}',
        ]
        if self.tagger:
            lines.append(f'tagger {self.tagger} {self.tagger_time} {self.tagger_timezone}')
        lines.append('')
        lines.append(self.message)
        return '\n'.join(lines).encode()

    def deserialize(self, data: bytes) -> None:
        lines, self.message = _split_headers(data)

        for raw_line in lines:
            if raw_line.startswith(b' '):
                continue
            line = raw_line.decode('utf-8', 'replace')

            if line.startswith('object '):
                self.target = line[7:]
            elif line.startswith('type '):
                self.target_type = line[5:]
            elif line.startswith('tag '):
                self.name = line[4:]
            elif line.startswith('tagger '):
                self.tagger, self.tagger_time, self.tagger_timezone = _parse_ident(line[7:])

        self._hash = None

    @classmethod
    def create(
        cls,
        target_hash: str,
        name: str,
        tagger: str,
        message: str,
        target_type: str = 'commit',
        timestamp: Optional[int] = None,
        timezone: str = '+0000'
    ) -> 'Tag':
        tag = cls()
        tag.target = target_hash
        tag.target_type = target_type
        tag.name = name
        tag.tagger = tagger
        tag.message = message
        tag.tagger_time = int(time.time()) if timestamp is None else timestamp
        tag.tagger_timezone = timezone
        return tag

    def __repr__(self) -> str:
        return f"Tag(hash={self.hash[:7]}, name={self.name}, target={self.target[:7]})"


def _parse_ident(value: str):
    """Split 'Name <email> <time> <tz>' into (identity, time, tz)."""
    parts = value.rsplit(' ', 2)
    if len(parts) != 3:
        return value, 0, '+0000'
    try:
        return parts[0], int(parts[1]), parts[2]
    except ValueError:
        return value, 0, '+0000'


OBJECT_CLASSES = {
    'blob': Blob,
    'tree': Tree,
    'commit': Commit,
    'tag': Tag,
}

"""Local repository: the object database lit-ipfs reads from and writes to."""

import zlib
from pathlib import Path
from typing import Optional, Tuple

from .errors import ObjectNotFound, UnsupportedObjectKind
from .hash import hash_raw
from .objects import OBJECT_CLASSES, LitObject


class Repository:
    """
    A lit repository on disk.

    Manages the .lit directory structure and provides raw and parsed access
    to the loose objects stored in it.
    """

    def __init__(self, path: str = '.'):
        self.work_tree = Path(path).resolve()
        self.lit_dir = self.work_tree / '.lit'
        self.objects_dir = self.lit_dir / 'objects'
        self.refs_dir = self.lit_dir / 'refs'
        self.heads_dir = self.refs_dir / 'heads'
        self.tags_dir = self.refs_dir / 'tags'
        self.remotes_dir = self.refs_dir / 'remotes'
        self.head_file = self.lit_dir / 'HEAD'
        self.config_file = self.lit_dir / 'config'

        self._ref_manager = None

    @property
    def refs(self):
        """Get RefManager instance."""
        if self._ref_manager is None:
            from .refs import RefManager
            self._ref_manager = RefManager(self)
        return self._ref_manager

    def init(self) -> 'Repository':
        """
        Initialize a new repository.

        Creates the .lit directory structure:
        .lit/
        ├── objects/       # Object database
        ├── refs/
        │   ├── heads/     # Branch references
        │   ├── tags/      # Tag references
        │   └── remotes/   # Remote-tracking references
        ├── HEAD           # Current branch
        └── config         # Repository configuration

        Raises:
            Exception: If repository already exists
        """
        if self.lit_dir.exists():
            raise Exception(f"Repository already exists at {self.lit_dir}")

        self.lit_dir.mkdir(parents=True)
        self.objects_dir.mkdir()
        self.refs_dir.mkdir()
        self.heads_dir.mkdir()
        self.tags_dir.mkdir()
        self.remotes_dir.mkdir()

        self.head_file.write_text('ref: refs/heads/main\n')
        self.config_file.write_text('[core]\n\trepositoryformatversion = 0\n')

        return self

    @classmethod
    def find_repository(cls, path: str = '.') -> Optional['Repository']:
        """
        Find repository by searching up the directory tree.

        Returns:
            Repository if found, None otherwise
        """
        current = Path(path).resolve()

        while True:
            if (current / '.lit').is_dir():
                return cls(str(current))

            if current == current.parent:
                return None

            current = current.parent

    def object_path(self, hash: str) -> Path:
        """
        Get filesystem path for an object.

        Objects are stored in subdirectories named by the first 2 characters
        of the hash, with the remaining 38 characters as the filename.
        """
        return self.objects_dir / hash[:2] / hash[2:]

    def write_raw(self, kind: str, data: bytes) -> str:
        """
        Store an object body verbatim.

        Args:
            kind: Object kind (blob, tree, commit, tag)
            data: Object body, without the loose-object header

        Returns:
            str: SHA-1 hash computed locally from kind and body
        """
        if kind not in OBJECT_CLASSES:
            raise UnsupportedObjectKind(kind)

        hash = hash_raw(kind, data)
        path = self.object_path(hash)

        if path.exists():
            return hash

        content = f"{kind} {len(data)}\0".encode() + data
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(zlib.compress(content))

        return hash

    def write_object(self, obj: LitObject) -> str:
        """Serialize and store a parsed object, returning its hash."""
        return self.write_raw(obj.type, obj.serialize())

    def _read_loose(self, hash: str) -> bytes:
        path = self.object_path(hash)
        if not path.is_file():
            raise ObjectNotFound(hash)
        return zlib.decompress(path.read_bytes())

    def read_raw(self, hash: str) -> Tuple[str, bytes]:
        """
        Read an object body exactly as stored.

        Returns:
            Tuple of (kind, body)

        Raises:
            ObjectNotFound: If the object is not in the database
            ValueError: If the stored object is corrupt
        """
        content = self._read_loose(hash)

        null_idx = content.index(b'\0')
        header = content[:null_idx].decode()
        data = content[null_idx + 1:]

        try:
            kind, size_str = header.split(' ', 1)
            size = int(size_str)
        except ValueError:
            raise ValueError(f"Invalid object header: {header}")

        if len(data) != size:
            raise ValueError(f"Object size mismatch: expected {size}, got {len(data)}")

        return kind, data

    def object_kind(self, hash: str) -> str:
        """Return the kind of a stored object."""
        content = self._read_loose(hash)
        return content[:content.index(b' ')].decode()

    def read_object(self, hash: str) -> LitObject:
        """
        Read and parse an object.

        The returned object keeps `hash` as its id, even if re-serializing
        it would not reproduce the exact stored body.

        Raises:
            ObjectNotFound: If the object is not in the database
            UnsupportedObjectKind: If the stored kind is unknown
        """
        kind, data = self.read_raw(hash)

        cls = OBJECT_CLASSES.get(kind)
        if cls is None:
            raise UnsupportedObjectKind(kind, hash)

        obj = cls()
        obj.deserialize(data)
        obj._hash = hash
        return obj

    def object_exists(self, hash: str) -> bool:
        """Check if object exists in repository."""
        return self.object_path(hash).is_file()

    def __repr__(self) -> str:
        return f"Repository(path={self.work_tree})"

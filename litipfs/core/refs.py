"""Reference management for the local repository."""

from typing import Dict, Optional

from .errors import ObjectNotFound


class RefManager:
    """
    Manages references (branches, tags, remote-tracking refs, HEAD).

    Refs are plain files under .lit/refs holding a 40-character hash, or
    'ref: <name>' for symbolic references.
    """

    def __init__(self, repo):
        self.repo = repo
        self.lit_dir = repo.lit_dir
        self.refs_dir = self.lit_dir / 'refs'
        self.heads_dir = self.refs_dir / 'heads'
        self.tags_dir = self.refs_dir / 'tags'
        self.head_file = self.lit_dir / 'HEAD'

    def read_ref(self, ref_name: str) -> Optional[str]:
        """
        Read a reference and return the hash it points to.

        Args:
            ref_name: Reference name (e.g., 'refs/heads/main', 'HEAD', 'main')

        Returns:
            Object hash or None if reference doesn't exist
        """
        if ref_name == 'HEAD':
            return self.resolve_head()

        for ref_path in (self.lit_dir / ref_name,
                         self.heads_dir / ref_name,
                         self.tags_dir / ref_name):
            if ref_path.is_file():
                content = ref_path.read_text().strip()
                if content.startswith('ref: '):
                    return self.read_ref(content[5:])
                return content

        return None

    def write_ref(self, ref_name: str, obj_hash: str) -> None:
        """
        Point a reference at an object.

        Raises:
            ObjectNotFound: If the object is not in the local database
        """
        if not self.repo.object_exists(obj_hash):
            raise ObjectNotFound(obj_hash)

        ref_path = self.lit_dir / ref_name
        ref_path.parent.mkdir(parents=True, exist_ok=True)
        ref_path.write_text(obj_hash + '\n')

    def delete_ref(self, ref_name: str) -> bool:
        """
        Delete a reference.

        Returns:
            True if deleted, False if not found
        """
        ref_path = self.lit_dir / ref_name
        if ref_path.is_file():
            ref_path.unlink()
            return True
        return False

    def resolve_head(self) -> Optional[str]:
        """Resolve HEAD to a hash, or None if it doesn't exist yet."""
        if not self.head_file.exists():
            return None

        content = self.head_file.read_text().strip()

        if content.startswith('ref: '):
            return self.read_ref(content[5:])

        return content

    def list_refs(self, prefix: str = 'refs/') -> Dict[str, str]:
        """
        List all references below `prefix`.

        Returns:
            Dict mapping full ref names to hashes
        """
        refs = {}
        base = self.lit_dir / prefix
        if not base.is_dir():
            return refs

        for ref_file in sorted(base.rglob('*')):
            if ref_file.is_file():
                ref_name = ref_file.relative_to(self.lit_dir).as_posix()
                target = self.read_ref(ref_name)
                if target:
                    refs[ref_name] = target

        return refs

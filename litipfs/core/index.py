"""The index: root structure of every lit-ipfs remote.

Every published remote address points at an Index. It stores:

- refs: {ref name -> object hash}
- objects: {object hash -> content link of its RemoteObject}, or the
  submodule tip marker for commits that belong to another repository
- prev_index_link: content link of the index this one superseded

Wire format: header ++ msgpack([refs, objects, prev_index_link]), both maps
sorted by key.

Push walks the local graph, using the object table as the "already present"
filter. Fetch walks the object table, using the local repository as the
"already present" filter. Both walks use an explicit stack and a
caller-owned visited set.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from .address import (
    SUBMODULE_TIP_MARKER,
    ExistingContentAddress,
    ExistingNameAddress,
    NewContentAddress,
    NewNameAddress,
    RemoteAddress,
    content_address_for_link,
    is_submodule_marker,
    parse_address,
)
from .errors import (
    FetchFirst,
    MalformedPayload,
    ObjectNotIndexed,
    ObjectTreeInconsistency,
    RefNotFound,
    UnsupportedObjectKind,
    VersionMismatch,
)
from .header import PROTOCOL_VERSION, encode_header, split_header
from .objects import Blob, Commit, Tag, Tree
from .remote_object import RemoteObject, pack_payload, unpack_payload

logger = logging.getLogger(__name__)


def _str_map(value) -> Dict[str, str]:
    if not isinstance(value, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        raise MalformedPayload(f"Expected a string map, got {value!r}")
    return dict(value)


@dataclass
class Index:
    """
    Lit-ipfs index.

    An Index is exclusively owned by whoever runs push/fetch/publish on it;
    it is mutated by push_ref only and superseded by every publish.
    """

    refs: Dict[str, str] = field(default_factory=dict)
    objects: Dict[str, str] = field(default_factory=dict)
    prev_index_link: Optional[str] = None

    # Loading and publishing

    @classmethod
    def from_address(cls, address: RemoteAddress, store) -> 'Index':
        """
        Download and decode the index `address` points at.

        Name addresses are resolved first; placeholder addresses give a new,
        empty index. Older protocol versions go through the migration engine.
        """
        from litipfs.migrations import migrate_index

        if isinstance(address, ExistingContentAddress):
            logger.debug("Fetching index from %s", address)
            data = store.get(address.link)
            version, payload = split_header(data)
            logger.debug("Index protocol version %d", version)
            if version < PROTOCOL_VERSION:
                logger.info(
                    "Index at %s is %d protocol version(s) behind, migrating...",
                    address, PROTOCOL_VERSION - version,
                )
            return migrate_index(payload, version, store)

        if isinstance(address, ExistingNameAddress):
            link = store.resolve_name(address.link)
            logger.debug("%s resolved to %s", address, link)
            return cls.from_address(content_address_for_link(link), store)

        if isinstance(address, (NewContentAddress, NewNameAddress)):
            logger.debug("Creating new index")
            return cls()

        raise TypeError(f"Not a remote address: {address!r}")

    def publish(self, store, prev_address: Optional[RemoteAddress] = None,
                key: str = 'self') -> RemoteAddress:
        """
        Upload self and return the address of the new index.

        `prev_address` is recorded as prev_index_link (name addresses are
        resolved to the content link they currently point at). When it was
        name-addressed, the name under `key` is re-published to point at the
        new index.
        """
        if isinstance(prev_address, ExistingContentAddress):
            self.prev_index_link = prev_address.link
        elif isinstance(prev_address, ExistingNameAddress):
            self.prev_index_link = store.resolve_name(prev_address.link)
        else:
            self.prev_index_link = None

        link = store.put(self.encode())
        logger.debug("Index uploaded to %s", link)

        if prev_address is not None and prev_address.is_name_addressed:
            logger.debug("Previous remote %s was name-addressed, republishing", prev_address)
            name = store.publish_name(key, link)
            return parse_address(f"/ipns/{name}")

        return content_address_for_link(link)

    # Serialization

    def to_raw(self) -> list:
        return [
            dict(sorted(self.refs.items())),
            dict(sorted(self.objects.items())),
            self.prev_index_link,
        ]

    @classmethod
    def from_raw(cls, raw) -> 'Index':
        if not isinstance(raw, list) or len(raw) != 3:
            raise MalformedPayload(f"Invalid index payload: {raw!r}")
        refs, objects, prev = raw
        if prev is not None and not isinstance(prev, str):
            raise MalformedPayload(f"Invalid previous index link: {prev!r}")
        return cls(_str_map(refs), _str_map(objects), prev)

    def encode(self) -> bytes:
        return encode_header() + pack_payload(self.to_raw())

    @classmethod
    def decode(cls, data: bytes) -> 'Index':
        """Decode an index serialized by this exact protocol version."""
        version, payload = split_header(data)
        if version != PROTOCOL_VERSION:
            raise VersionMismatch(version, PROTOCOL_VERSION)
        return cls.from_raw(unpack_payload(payload))

    # Push

    def push_ref(self, src_ref: str, dst_ref: str, force: bool, repo, store) -> None:
        """
        Make `dst_ref` in the index point at what `src_ref` points at locally.

        An empty `src_ref` deletes `dst_ref`.

        Raises:
            RefNotFound: If src_ref does not exist locally
            UnsupportedObjectKind: If src_ref is neither a tag nor a commit
            FetchFirst: If not forced and the remote dst_ref has objects
                missing locally
        """
        if not src_ref:
            if self.refs.pop(dst_ref, None) is None:
                logger.warning("Ref %s not present in the index, nothing to delete", dst_ref)
            else:
                logger.info("Deleted ref %s", dst_ref)
            return

        obj_hash = repo.refs.read_ref(src_ref)
        if obj_hash is None:
            raise RefNotFound(src_ref)

        # Annotated tags are pushed as tags, not as the commits they point at
        kind = repo.object_kind(obj_hash)
        if kind not in ('tag', 'commit'):
            logger.error("%s points at a %s, expected a commit or tag", src_ref, kind)
            raise UnsupportedObjectKind(kind, obj_hash)
        logger.debug("%s dereferenced to %s %s", src_ref, kind, obj_hash)

        if not force and dst_ref in self.refs:
            missing = self.enumerate_for_fetch(self.refs[dst_ref], repo, store, set())
            if missing:
                logger.error(
                    "%s has %d object(s) missing locally", dst_ref, len(missing)
                )
                raise FetchFirst(dst_ref, missing)

        submodule_tips: Set[str] = set()
        objs_for_push = self.enumerate_for_push(obj_hash, repo, set(), submodule_tips)
        logger.debug("Counted %d object(s) for push", len(objs_for_push))

        self.push_objects(objs_for_push, repo, store)

        for tip in sorted(submodule_tips):
            if tip in self.objects:
                continue
            logger.debug("Recording submodule tip %s", tip)
            self.objects[tip] = SUBMODULE_TIP_MARKER

        self.refs[dst_ref] = obj_hash

    def enumerate_for_push(self, root: str, repo, already_pushed: Set[str],
                           submodule_tips: Set[str]) -> Set[str]:
        """
        Find objects reachable from `root` locally but missing from the index.

        A branch ends at hashes already uploaded to the index or already in
        `already_pushed`. Commits found as tree entries are submodule tips:
        they go into `submodule_tips` and are never traversed.

        Returns:
            Hashes newly added to `already_pushed` by this call
        """
        found = set()
        stack = [root]

        while stack:
            obj_hash = stack.pop()

            if self.is_uploaded(obj_hash):
                logger.debug("Object %s already in the index", obj_hash)
                continue
            if obj_hash in already_pushed:
                continue

            obj = repo.read_object(obj_hash)
            already_pushed.add(obj_hash)
            found.add(obj_hash)

            if isinstance(obj, Commit):
                logger.debug("Counting commit %s", obj_hash)
                # Every commit has a tree; popped before the parents
                stack.extend(reversed(obj.parents))
                stack.append(obj.tree)
            elif isinstance(obj, Tree):
                logger.debug("Counting tree %s", obj_hash)
                for entry in obj.entries:
                    if entry.is_submodule:
                        logger.debug("Tree %s: submodule tip %s (%s)", obj_hash, entry.hash, entry.name)
                        submodule_tips.add(entry.hash)
                    else:
                        stack.append(entry.hash)
            elif isinstance(obj, Tag):
                logger.debug("Counting tag %s", obj_hash)
                stack.append(obj.target)
            elif isinstance(obj, Blob):
                logger.debug("Counting blob %s", obj_hash)
            else:
                raise UnsupportedObjectKind(obj.type, obj_hash)

        return found

    def push_objects(self, hashes: Set[str], repo, store) -> None:
        """Upload the local objects in `hashes` and record them in the index."""
        total = len(hashes)
        for i, obj_hash in enumerate(sorted(hashes)):
            if self.is_uploaded(obj_hash):
                logger.warning("push_objects: Object %s already in the index", obj_hash)
                continue

            remote_obj = RemoteObject.from_local(obj_hash, repo, store)
            link = remote_obj.upload(store)
            self.objects[obj_hash] = link

            logger.debug(
                "[%d/%d] %s %s uploaded to %s",
                i + 1, total, remote_obj.kind.capitalize(), obj_hash, link,
            )

    # Fetch

    def fetch_ref(self, obj_hash: str, ref_name: str, repo, store) -> None:
        """
        Fetch `obj_hash` and everything it needs, then point `ref_name` at it.

        Tag refs are left alone: lightweight tags (commits under refs/tags)
        and annotated tags are written by the caller.

        Raises:
            UnsupportedObjectKind: If the fetched tip is not a commit or tag
        """
        logger.debug("Fetching %s for %s", obj_hash, ref_name)

        objs_for_fetch = self.enumerate_for_fetch(obj_hash, repo, store, set())
        logger.debug("Counted %d object(s) for fetch", len(objs_for_fetch))

        self.fetch_objects(objs_for_fetch, repo, store)

        kind = repo.object_kind(obj_hash)
        if kind == 'commit' and ref_name.startswith('refs/tags'):
            logger.debug("Not setting ref for lightweight tag %s", ref_name)
        elif kind == 'commit':
            repo.refs.write_ref(ref_name, obj_hash)
        elif kind == 'tag':
            logger.debug("Not setting ref for tag %s", ref_name)
        else:
            logger.error("New tip turned out to be a %s after fetch", kind)
            raise UnsupportedObjectKind(kind, obj_hash)

        logger.debug("Fetched %s for %s OK.", obj_hash, ref_name)

    def enumerate_for_fetch(self, obj_hash: str, repo, store,
                            already_fetched: Set[str]) -> Set[str]:
        """
        Find objects reachable from `obj_hash` in the index but missing locally.

        A branch ends at hashes present in the local repository or already in
        `already_fetched`. Submodule tips end a branch without being fetched.

        Returns:
            Hashes newly added to `already_fetched` by this call

        Raises:
            ObjectNotIndexed: If a needed hash is absent from the object table
        """
        found = set()
        stack = [obj_hash]

        while stack:
            current = stack.pop()

            if repo.object_exists(current):
                logger.debug("Object %s already present locally", current)
                continue
            if current in already_fetched:
                continue

            link = self.objects.get(current)
            if link is None:
                logger.error("Could not find object %s in the index", current)
                raise ObjectNotIndexed(current)

            if is_submodule_marker(link):
                logger.debug("Skipping submodule tip %s", current)
                continue

            already_fetched.add(current)
            found.add(current)

            remote_obj = RemoteObject.load(link, store, current)
            logger.debug("Counting %s %s", remote_obj.kind, link)
            stack.extend(reversed(remote_obj.metadata.referenced_hashes()))

        return found

    def fetch_objects(self, hashes: Set[str], repo, store) -> None:
        """
        Download the objects in `hashes` into the local repository.

        Raises:
            ObjectNotIndexed: If a hash is absent from the object table
            ObjectTreeInconsistency: If written bytes hash to another id
        """
        total = len(hashes)
        for i, obj_hash in enumerate(sorted(hashes)):
            logger.debug("[%d/%d] Fetching object %s", i + 1, total, obj_hash)

            link = self.objects.get(obj_hash)
            if link is None:
                logger.error("Could not find object %s in the index", obj_hash)
                raise ObjectNotIndexed(obj_hash)

            remote_obj = RemoteObject.load(link, store, obj_hash)

            if repo.object_exists(obj_hash):
                logger.warning("fetch_objects: Object %s already present locally", obj_hash)
                continue

            written = remote_obj.write_raw(repo, store)
            if written != obj_hash:
                logger.error(
                    "Object tree inconsistency detected: fetched %s from %s, "
                    "but write result hashes to %s", obj_hash, link, written,
                )
                raise ObjectTreeInconsistency(obj_hash, written, link)
            logger.debug("Fetched object %s to %s", link, written)

    # Inspection

    def is_uploaded(self, obj_hash: str) -> bool:
        """
        Whether `obj_hash` has a real object in the content store.

        A submodule tip marker doesn't count: the commit may still be pushed
        as a tip of its own, which replaces the marker with a link.
        """
        link = self.objects.get(obj_hash)
        return link is not None and not is_submodule_marker(link)

    def submodule_tips(self) -> List[str]:
        return sorted(h for h, link in self.objects.items() if is_submodule_marker(link))

    def __repr__(self) -> str:
        return f"Index(refs={len(self.refs)}, objects={len(self.objects)})"

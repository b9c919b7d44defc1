"""Remote operations: push to and fetch from lit-ipfs remotes."""

import configparser
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from litipfs.core.address import RemoteAddress, content_address_for_link, parse_address
from litipfs.core.errors import LitIpfsError
from litipfs.core.header import PROTOCOL_VERSION, split_header
from litipfs.core.index import Index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefSpec:
    """A parsed '[+]<src>[:<dst>]' push refspec; empty src deletes dst."""

    src: str
    dst: str
    force: bool = False

    @classmethod
    def parse(cls, spec: str) -> 'RefSpec':
        force = spec.startswith('+')
        if force:
            spec = spec[1:]

        src, sep, dst = spec.partition(':')
        if not sep:
            dst = src
        if not dst:
            raise ValueError(f"Invalid refspec: {spec!r}")
        return cls(_full_ref_name(src) if src else '', _full_ref_name(dst), force)


def _full_ref_name(name: str) -> str:
    if name == 'HEAD' or name.startswith('refs/'):
        return name
    return f'refs/heads/{name}'


class RemoteManager:
    """
    Manages lit-ipfs remotes of a repository.

    A remote is a name mapped to a remote address in the repository config:

        [remote "origin"]
        address = /ipns/Qm...

    Content-addressed remotes move to a new address on every push; the
    config is updated accordingly.
    """

    def __init__(self, repo, store, key: str = 'self'):
        """
        Args:
            repo: Local Repository
            store: Content store client (IpfsClient, MemoryContentStore)
            key: Key used when re-publishing name-addressed remotes
        """
        self.repo = repo
        self.store = store
        self.key = key

    # Remote configuration

    def _read_config(self) -> configparser.ConfigParser:
        config = configparser.ConfigParser()
        if self.repo.config_file.exists():
            config.read(self.repo.config_file)
        return config

    def _write_config(self, config: configparser.ConfigParser) -> None:
        with open(self.repo.config_file, 'w') as f:
            config.write(f)

    def add_remote(self, name: str, address: str) -> None:
        """
        Add a remote.

        Raises:
            AddressError: If address is not a valid remote address
        """
        parse_address(address)
        config = self._read_config()
        section = f'remote "{name}"'
        if not config.has_section(section):
            config.add_section(section)
        config.set(section, 'address', address)
        self._write_config(config)

    def list_remotes(self) -> Dict[str, str]:
        """Map remote names to their address text."""
        config = self._read_config()
        remotes = {}
        for section in config.sections():
            if section.startswith('remote "') and section.endswith('"'):
                if config.has_option(section, 'address'):
                    remotes[section[8:-1]] = config.get(section, 'address')
        return remotes

    def get_remote_address(self, name: str) -> RemoteAddress:
        """
        Raises:
            LitIpfsError: If the remote is not configured
        """
        text = self.list_remotes().get(name)
        if text is None:
            raise LitIpfsError(f"Remote '{name}' not found")
        return parse_address(text)

    def set_remote_address(self, name: str, address: RemoteAddress) -> None:
        config = self._read_config()
        config.set(f'remote "{name}"', 'address', str(address))
        self._write_config(config)

    def remove_remote(self, name: str) -> bool:
        config = self._read_config()
        section = f'remote "{name}"'
        if not config.has_section(section):
            return False
        config.remove_section(section)
        self._write_config(config)
        return True

    # Remote operations

    def load_index(self, remote: str) -> Tuple[RemoteAddress, Index]:
        address = self.get_remote_address(remote)
        return address, Index.from_address(address, self.store)

    def push(self, remote: str, refspecs: Iterable[str], force: bool = False) -> RemoteAddress:
        """
        Push refs to a remote and publish the updated index.

        Args:
            remote: Remote name
            refspecs: '[+]<src>[:<dst>]' strings; ':<dst>' deletes dst
            force: Force every refspec

        Returns:
            RemoteAddress: Where the new index was published
        """
        specs = [RefSpec.parse(spec) for spec in refspecs]
        if not specs:
            raise ValueError("Nothing to push")

        address, index = self.load_index(remote)
        for spec in specs:
            logger.info("Pushing %s -> %s", spec.src or '(delete)', spec.dst)
            index.push_ref(spec.src, spec.dst, force or spec.force, self.repo, self.store)

        new_address = index.publish(self.store, address, self.key)
        logger.info("Published index to %s", new_address)
        if new_address != address:
            self.set_remote_address(remote, new_address)
        return new_address

    def fetch(self, remote: str, refs: Optional[Iterable[str]] = None) -> Dict[str, str]:
        """
        Fetch refs from a remote.

        Branches land in refs/remotes/<remote>/<branch>, tags in refs/tags.

        Args:
            remote: Remote name
            refs: Remote ref names to fetch (default: all of them)

        Returns:
            Dict mapping local ref names to the fetched hashes
        """
        _address, index = self.load_index(remote)

        wanted = sorted(index.refs) if refs is None else [_full_ref_name(r) for r in refs]
        fetched = {}
        for ref_name in wanted:
            obj_hash = index.refs.get(ref_name)
            if obj_hash is None:
                raise LitIpfsError(f"Remote '{remote}' has no ref {ref_name}")

            local_ref = self._local_ref_name(remote, ref_name)
            index.fetch_ref(obj_hash, local_ref, self.repo, self.store)
            if local_ref.startswith('refs/tags/'):
                # The core leaves tag refs to whoever drives the fetch
                self.repo.refs.write_ref(local_ref, obj_hash)
            fetched[local_ref] = obj_hash

        return fetched

    @staticmethod
    def _local_ref_name(remote: str, ref_name: str) -> str:
        if ref_name.startswith('refs/heads/'):
            return f'refs/remotes/{remote}/{ref_name[len("refs/heads/"):]}'
        return ref_name

    def ls_remote(self, remote: str) -> Dict[str, str]:
        _address, index = self.load_index(remote)
        return dict(sorted(index.refs.items()))

    def history(self, remote: str, limit: Optional[int] = None) -> List[Tuple[str, Index]]:
        """
        Walk the chain of previously published indices, newest first.

        Returns:
            List of (content link, Index) pairs
        """
        address = self.get_remote_address(remote)
        if address.link is None:
            return []
        if address.is_name_addressed:
            address = content_address_for_link(self.store.resolve_name(address.link))

        entries = []
        link = address.link
        while link and (limit is None or len(entries) < limit):
            index = Index.from_address(content_address_for_link(link), self.store)
            entries.append((link, index))
            link = index.prev_index_link
        return entries

    def migrate(self, remote: str) -> Optional[RemoteAddress]:
        """
        Republish an index from an older protocol version in the current one.

        Returns:
            The new address, or None if the index is already current
        """
        address = self.get_remote_address(remote)
        if address.link is None:
            return None

        link = address.link
        if address.is_name_addressed:
            link = self.store.resolve_name(link)
        version, _payload = split_header(self.store.get(link))
        if version == PROTOCOL_VERSION:
            logger.info("Index at %s is already at version %d", link, version)
            return None

        index = Index.from_address(address, self.store)
        new_address = index.publish(self.store, address, self.key)
        if new_address != address:
            self.set_remote_address(remote, new_address)
        return new_address

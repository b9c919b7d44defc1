"""In-memory content store, for tests and offline dry runs."""

import hashlib
import logging
from typing import Dict

logger = logging.getLogger(__name__)

_B58_ALPHABET = '123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz'

# sha2-256 multihash prefix: function code, digest length
_MULTIHASH_PREFIX = b'\x12\x20'


def _b58encode(data: bytes) -> str:
    num = int.from_bytes(data, 'big')
    encoded = ''
    while num:
        num, rem = divmod(num, 58)
        encoded = _B58_ALPHABET[rem] + encoded
    pad = len(data) - len(data.lstrip(b'\0'))
    return '1' * pad + encoded


def content_hash(data: bytes) -> str:
    """46-character base58 sha2-256 multihash of `data` (a CIDv0 lookalike)."""
    return _b58encode(_MULTIHASH_PREFIX + hashlib.sha256(data).digest())


class MemoryContentStore:
    """
    Dictionary-backed content store.

    Addresses are derived from content, so putting identical bytes twice
    returns the same link. Names are derived from the publishing key.
    """

    def __init__(self):
        self.blobs: Dict[str, bytes] = {}
        self.names: Dict[str, str] = {}
        self.puts = 0
        self.gets = 0

    @staticmethod
    def _strip(link: str, scheme: str) -> str:
        prefix = f'/{scheme}/'
        return link[len(prefix):] if link.startswith(prefix) else link

    def put(self, data: bytes) -> str:
        self.puts += 1
        hash = content_hash(data)
        self.blobs[hash] = bytes(data)
        return f'/ipfs/{hash}'

    def get(self, link: str) -> bytes:
        self.gets += 1
        try:
            return self.blobs[self._strip(link, 'ipfs')]
        except KeyError:
            raise KeyError(f"No content stored under {link}") from None

    def resolve_name(self, name: str) -> str:
        try:
            return self.names[self._strip(name, 'ipns')]
        except KeyError:
            raise KeyError(f"Could not resolve name {name}") from None

    def publish_name(self, key: str, link: str) -> str:
        name = content_hash(f'key:{key}'.encode())
        self.names[name] = link
        logger.debug("Published %s as /ipns/%s", link, name)
        return name

    def __contains__(self, link: str) -> bool:
        return self._strip(link, 'ipfs') in self.blobs

    def __repr__(self) -> str:
        return f"MemoryContentStore(blobs={len(self.blobs)}, names={len(self.names)})"

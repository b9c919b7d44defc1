"""Remote addresses: where a lit-ipfs index lives, or will live.

Four forms exist:

    /ipfs/<hash>    an index already published under a content address
    /ipns/<hash>    an index already published under a mutable name
    new-ipfs        no index yet, publish under a content address
    new-ipns        no index yet, publish under a mutable name
"""

from dataclasses import dataclass
from typing import Optional, Union

from litipfs.core.errors import InvalidHashLength, InvalidLinkFormat

HASH_LEN = 46

CONTENT_SCHEME = 'ipfs'
NAME_SCHEME = 'ipns'

NEW_CONTENT_TOKEN = 'new-ipfs'
NEW_NAME_TOKEN = 'new-ipns'

# Stored in place of a content link in the index object table. Submodule tips
# are recorded but never uploaded, traversed or fetched.
SUBMODULE_TIP_MARKER = 'submodule-tip'


@dataclass(frozen=True)
class ExistingContentAddress:
    hash: str

    is_name_addressed = False

    @property
    def link(self) -> str:
        return f'/{CONTENT_SCHEME}/{self.hash}'

    def __str__(self) -> str:
        return self.link


@dataclass(frozen=True)
class ExistingNameAddress:
    hash: str

    is_name_addressed = True

    @property
    def link(self) -> str:
        return f'/{NAME_SCHEME}/{self.hash}'

    def __str__(self) -> str:
        return self.link


@dataclass(frozen=True)
class NewContentAddress:
    """Placeholder for a remote that doesn't have an index yet."""

    is_name_addressed = False
    link = None

    def __str__(self) -> str:
        return NEW_CONTENT_TOKEN


@dataclass(frozen=True)
class NewNameAddress:
    """Same as NewContentAddress, but publishes under a mutable name."""

    is_name_addressed = True
    link = None

    def __str__(self) -> str:
        return NEW_NAME_TOKEN


RemoteAddress = Union[
    ExistingContentAddress, ExistingNameAddress, NewContentAddress, NewNameAddress
]


def _parse_hash(text: str, scheme: str) -> str:
    parts = text.split('/')
    # '/ipfs/<hash>' splits into ['', 'ipfs', '<hash>']
    if len(parts) != 3 or parts[1] != scheme or not parts[2]:
        raise InvalidLinkFormat(text)
    hash = parts[2]
    if len(hash) != HASH_LEN:
        raise InvalidHashLength(len(hash), HASH_LEN)
    return hash


def parse_address(text: str) -> RemoteAddress:
    """
    Parse the textual form of a remote address.

    Examples:
        new-ipfs -> NewContentAddress()
        /ipns/Qm... -> ExistingNameAddress('Qm...')

    Raises:
        InvalidLinkFormat: If text is none of the known forms
        InvalidHashLength: If the hash is not exactly HASH_LEN characters
    """
    if text == NEW_CONTENT_TOKEN:
        return NewContentAddress()
    if text == NEW_NAME_TOKEN:
        return NewNameAddress()
    if text.startswith(f'/{CONTENT_SCHEME}/'):
        return ExistingContentAddress(_parse_hash(text, CONTENT_SCHEME))
    if text.startswith(f'/{NAME_SCHEME}/'):
        return ExistingNameAddress(_parse_hash(text, NAME_SCHEME))
    raise InvalidLinkFormat(text)


def content_address_for_link(link: str) -> ExistingContentAddress:
    """Turn a content store link (/ipfs/<hash>) into an address."""
    address = parse_address(link)
    if not isinstance(address, ExistingContentAddress):
        raise InvalidLinkFormat(link)
    return address


def is_submodule_marker(value: Optional[str]) -> bool:
    return value == SUBMODULE_TIP_MARKER

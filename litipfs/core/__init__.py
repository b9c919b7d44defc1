"""Core functionality for lit-ipfs.

This module contains the core data structures:
- Local objects (Blob, Tree, Commit, Tag) and the repository holding them
- The protocol header and remote addresses
- Remote objects and the index with its push/fetch graph walks
- Configuration and errors

For content stores and remote management, see litipfs.remote
For protocol migrations, see litipfs.migrations
"""

from litipfs.core.address import (
    SUBMODULE_TIP_MARKER,
    ExistingContentAddress,
    ExistingNameAddress,
    NewContentAddress,
    NewNameAddress,
    RemoteAddress,
    parse_address,
)
from litipfs.core.config import Config, get_config
from litipfs.core.header import PROTOCOL_VERSION, decode_header, encode_header
from litipfs.core.index import Index
from litipfs.core.objects import Blob, Commit, LitObject, Tag, Tree, TreeEntry
from litipfs.core.remote_object import RemoteObject
from litipfs.core.repository import Repository
from litipfs.core.refs import RefManager

__all__ = [
    'SUBMODULE_TIP_MARKER',
    'ExistingContentAddress',
    'ExistingNameAddress',
    'NewContentAddress',
    'NewNameAddress',
    'RemoteAddress',
    'parse_address',
    'Config',
    'get_config',
    'PROTOCOL_VERSION',
    'decode_header',
    'encode_header',
    'Index',
    'LitObject',
    'Blob',
    'Tree',
    'TreeEntry',
    'Commit',
    'Tag',
    'RemoteObject',
    'Repository',
    'RefManager',
]

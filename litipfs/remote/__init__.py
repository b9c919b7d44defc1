"""Remote module: content stores and remote operations.

This module handles:
- The IPFS HTTP API client
- An in-memory content store
- Remote management, push and fetch
"""

from litipfs.remote.ipfs import IpfsClient
from litipfs.remote.memory import MemoryContentStore
from litipfs.remote.manager import RefSpec, RemoteManager

__all__ = [
    'IpfsClient',
    'MemoryContentStore',
    'RefSpec',
    'RemoteManager',
]

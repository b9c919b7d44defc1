"""Lit-IPFS - publish and fetch lit repositories through IPFS."""

__version__ = '0.1.0'
__author__ = 'Flambeau Iriho'
__email__ = 'irihoflambeau@gmail.com'

from litipfs import log_utils  # noqa: F401
from litipfs.core.index import Index
from litipfs.core.remote_object import RemoteObject
from litipfs.core.repository import Repository

__all__ = [
    'Index',
    'RemoteObject',
    'Repository',
]

"""Migration helpers keeping indices and objects from older protocol versions readable.

Both entry points take a headerless payload plus the version its header
declared. Older payloads are decoded and passed through a chain of upgrade
steps, one per version, each turning a decoded payload of version N into the
decoded payload of version N + 1:

    UPGRADES[N](raw, context) -> raw of version N + 1

The context carries whatever a newer shape needs that an older one lacked
(the object's hash, a content store to re-upload rewritten objects).
"""

import logging
from typing import Callable, Dict

from litipfs.core.address import is_submodule_marker
from litipfs.core.errors import InvalidVersion, LitIpfsError, TooNew
from litipfs.core.header import PROTOCOL_VERSION
from litipfs.core.index import Index
from litipfs.core.remote_object import RemoteObject, unpack_payload
from litipfs.migrations.object_v1 import RemoteObjectV1

logger = logging.getLogger(__name__)

__all__ = ['migrate_index', 'migrate_object', 'INDEX_UPGRADES', 'OBJECT_UPGRADES']


def _object_v1_to_v2(raw, git_hash: str):
    return RemoteObjectV1.from_raw(raw).to_v2(git_hash).to_raw()


def _index_v1_to_v2(raw, store):
    # The index shape stayed the same between v1 and v2, but every object it
    # links to is a v1 object that has to be rewritten and re-uploaded.
    if store is None:
        raise ValueError("Migrating a version 1 index requires a content store")

    idx = Index.from_raw(raw)
    total = len(idx.objects)
    for i, (git_hash, link) in enumerate(sorted(idx.objects.items())):
        if is_submodule_marker(link):
            logger.debug("Skipping submodule tip %s", git_hash)
            continue

        new_link = RemoteObjectV1.decode(store.get(link)).to_v2(git_hash).upload(store)
        logger.debug("[%d/%d] Object %s: %s -> %s", i + 1, total, git_hash, link, new_link)
        idx.objects[git_hash] = new_link

    return idx.to_raw()


OBJECT_UPGRADES: Dict[int, Callable] = {
    1: _object_v1_to_v2,
}

INDEX_UPGRADES: Dict[int, Callable] = {
    1: _index_v1_to_v2,
}


def _check_version(version: int) -> None:
    if version == 0:
        raise InvalidVersion(version)
    if version > PROTOCOL_VERSION:
        logger.error(
            "Payload is %d protocol version(s) ahead, please upgrade lit-ipfs to use it",
            version - PROTOCOL_VERSION,
        )
        raise TooNew(version, PROTOCOL_VERSION)


def _upgrade(raw, version: int, steps: Dict[int, Callable], context, what: str):
    for from_version in range(version, PROTOCOL_VERSION):
        step = steps.get(from_version)
        if step is None:
            raise LitIpfsError(f"No {what} migration from version {from_version}")
        logger.debug("Migrating %s: version %d -> %d", what, from_version, from_version + 1)
        raw = step(raw, context)
    return raw


def migrate_index(payload: bytes, version: int, store=None) -> Index:
    """
    Return the present-day equivalent of a headerless index payload.

    Args:
        payload: Index payload, header stripped
        version: Protocol version the header declared
        store: Content store, needed when linked objects must be rewritten

    Raises:
        InvalidVersion: For version 0
        TooNew: For versions above the running protocol version
    """
    _check_version(version)
    if version == PROTOCOL_VERSION:
        logger.debug("Trivial migration of current version %d, decoding", version)
    raw = _upgrade(unpack_payload(payload), version, INDEX_UPGRADES, store, 'index')
    return Index.from_raw(raw)


def migrate_object(payload: bytes, version: int, git_hash: str) -> RemoteObject:
    """
    Return the present-day equivalent of a headerless object payload.

    Args:
        payload: Object payload, header stripped
        version: Protocol version the header declared
        git_hash: Hash of the local object the payload describes

    Raises:
        InvalidVersion: For version 0
        TooNew: For versions above the running protocol version
    """
    _check_version(version)
    raw = _upgrade(unpack_payload(payload), version, OBJECT_UPGRADES, git_hash, 'object')
    return RemoteObject.from_raw(raw)

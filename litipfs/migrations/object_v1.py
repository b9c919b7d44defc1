"""Protocol version 1 remote objects.

v1 objects had no `git_hash` field: [raw_link, metadata]. The metadata
variants are unchanged in v2.
"""

from dataclasses import dataclass

from litipfs.core.errors import MalformedPayload, VersionMismatch
from litipfs.core.header import encode_header, split_header
from litipfs.core.remote_object import (
    ObjectMetadata,
    RemoteObject,
    metadata_from_raw,
    pack_payload,
    unpack_payload,
)

VERSION = 1


@dataclass(frozen=True)
class RemoteObjectV1:
    raw_link: str
    metadata: ObjectMetadata

    @classmethod
    def from_raw(cls, raw) -> 'RemoteObjectV1':
        if not isinstance(raw, list) or len(raw) != 2 or not isinstance(raw[0], str):
            raise MalformedPayload(f"Invalid v1 object payload: {raw!r}")
        return cls(raw[0], metadata_from_raw(raw[1]))

    def to_raw(self) -> list:
        return [self.raw_link, self.metadata.to_raw()]

    def encode(self) -> bytes:
        return encode_header(VERSION) + pack_payload(self.to_raw())

    @classmethod
    def decode(cls, data: bytes) -> 'RemoteObjectV1':
        version, payload = split_header(data)
        if version != VERSION:
            raise VersionMismatch(version, VERSION)
        return cls.from_raw(unpack_payload(payload))

    def to_v2(self, git_hash: str) -> RemoteObject:
        return RemoteObject(git_hash=git_hash, raw_link=self.raw_link, metadata=self.metadata)

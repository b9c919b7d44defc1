"""Protocol header placed in front of every serialized lit-ipfs structure.

The header is 8 bytes wide and independent of the payload encoding:

    <6-byte magic> <2-byte big-endian protocol version>

Decoders read the version first and decide what to do with the rest.
"""

import logging
import struct
from typing import Optional, Tuple

from litipfs.core.errors import MalformedHeader

logger = logging.getLogger(__name__)

MAGIC = b'LITIPF'

# Bump on every breaking change to the Index or RemoteObject payloads
PROTOCOL_VERSION = 2

HEADER_LEN = 8

_HEADER_FORMAT = '>6sH'


def encode_header(version: Optional[int] = None) -> bytes:
    """
    Build a protocol header.

    Args:
        version: Protocol version to write (defaults to the running version)

    Returns:
        bytes: 8-byte header
    """
    if version is None:
        version = PROTOCOL_VERSION
    return struct.pack(_HEADER_FORMAT, MAGIC, version)


def decode_header(data: bytes) -> int:
    """
    Parse a protocol header and return its version.

    Only the first 8 bytes are looked at; anything after them is ignored.

    Raises:
        MalformedHeader: If data is too short or the magic does not match
    """
    if len(data) < HEADER_LEN:
        msg = f"Supplied {len(data)} byte(s) wouldn't even fit the header"
        logger.error(msg)
        raise MalformedHeader(msg)

    magic, version = struct.unpack(_HEADER_FORMAT, data[:HEADER_LEN])
    if magic != MAGIC:
        msg = f"Malformed magic: {magic!r}, expected {MAGIC!r}"
        logger.error(msg)
        raise MalformedHeader(msg)

    return version


def split_header(data: bytes) -> Tuple[int, bytes]:
    """Return (version, payload) for a serialized structure."""
    return decode_header(data), data[HEADER_LEN:]

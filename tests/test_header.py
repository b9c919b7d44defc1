"""Tests for the protocol header."""

import struct

import pytest

from litipfs.core.errors import MalformedHeader
from litipfs.core.header import (
    HEADER_LEN,
    MAGIC,
    PROTOCOL_VERSION,
    decode_header,
    encode_header,
    split_header,
)


def test_encode_header_layout():
    """Header is the magic followed by a big-endian u16 version."""
    header = encode_header()
    assert len(header) == HEADER_LEN
    assert header[:6] == MAGIC
    assert header[6:] == struct.pack('>H', PROTOCOL_VERSION)


def test_encode_header_explicit_version():
    """An explicit version is written as given."""
    assert encode_header(1)[6:] == b'\x00\x01'
    assert encode_header(0x0102)[6:] == b'\x01\x02'


def test_decode_header_reads_version():
    """Only the first 8 bytes matter; trailing payload is ignored."""
    assert decode_header(encode_header(7) + b'payload') == 7


def test_split_header():
    """split_header separates the version from the payload."""
    version, payload = split_header(encode_header(1) + b'\x93abc')
    assert version == 1
    assert payload == b'\x93abc'


def test_decode_header_too_short():
    """Fewer than 8 bytes can't hold a header."""
    with pytest.raises(MalformedHeader):
        decode_header(MAGIC)
    with pytest.raises(MalformedHeader):
        decode_header(b'')


def test_decode_header_bad_magic():
    """A wrong magic is rejected even when the length is right."""
    with pytest.raises(MalformedHeader, match="magic"):
        decode_header(b'GITIPF\x00\x02')

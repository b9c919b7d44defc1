"""Tests for remote address parsing."""

import pytest

from litipfs.core.address import (
    HASH_LEN,
    ExistingContentAddress,
    ExistingNameAddress,
    NewContentAddress,
    NewNameAddress,
    SUBMODULE_TIP_MARKER,
    content_address_for_link,
    is_submodule_marker,
    parse_address,
)
from litipfs.core.errors import AddressError, InvalidHashLength, InvalidLinkFormat

VALID_HASH = 'QmdT2sVhj8UicZsGY7x687FgdJPrzR9idGyavi5282CPH3'


def test_valid_hash_length():
    assert len(VALID_HASH) == HASH_LEN


def test_parse_ipfs_address():
    """/ipfs/<hash> parses into a content address."""
    address = parse_address(f'/ipfs/{VALID_HASH}')
    assert address == ExistingContentAddress(VALID_HASH)
    assert address.link == f'/ipfs/{VALID_HASH}'
    assert not address.is_name_addressed


def test_parse_ipns_address():
    """/ipns/<hash> parses into a name address."""
    address = parse_address(f'/ipns/{VALID_HASH}')
    assert address == ExistingNameAddress(VALID_HASH)
    assert address.is_name_addressed


def test_parse_placeholders():
    """The new-* tokens stand for remotes without an index yet."""
    assert parse_address('new-ipfs') == NewContentAddress()
    assert parse_address('new-ipns') == NewNameAddress()
    assert parse_address('new-ipfs').link is None
    assert parse_address('new-ipns').is_name_addressed


@pytest.mark.parametrize('text', [
    f'/ipfs/{VALID_HASH}',
    f'/ipns/{VALID_HASH}',
    'new-ipfs',
    'new-ipns',
])
def test_str_round_trips(text):
    """The textual form parses back to an equal address."""
    assert str(parse_address(text)) == text


@pytest.mark.parametrize('text', [
    '',
    'ipfs',
    'new-ipfsx',
    f'ipfs/{VALID_HASH}',
    f'/ipfs/{VALID_HASH}/extra',
    '/ipfs/',
    f'/ipld/{VALID_HASH}',
])
def test_invalid_link_format(text):
    """Unknown forms and wrong slash counts are rejected."""
    with pytest.raises(InvalidLinkFormat):
        parse_address(text)


def test_invalid_hash_length():
    """A correctly shaped address with a short hash reports both lengths."""
    with pytest.raises(InvalidHashLength) as exc_info:
        parse_address('/ipfs/Qm123')
    assert exc_info.value.got == 5
    assert exc_info.value.expected == HASH_LEN


def test_address_errors_share_base():
    with pytest.raises(AddressError):
        parse_address(f'/ipns/{VALID_HASH}x')


def test_content_address_for_link():
    """Store links convert to content addresses only."""
    assert content_address_for_link(f'/ipfs/{VALID_HASH}') == ExistingContentAddress(VALID_HASH)
    with pytest.raises(InvalidLinkFormat):
        content_address_for_link(f'/ipns/{VALID_HASH}')


def test_submodule_marker():
    assert is_submodule_marker(SUBMODULE_TIP_MARKER)
    assert not is_submodule_marker(f'/ipfs/{VALID_HASH}')
    assert not is_submodule_marker(None)

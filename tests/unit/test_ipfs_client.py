"""Unit tests for the IPFS HTTP API client."""

import pytest
import requests

from litipfs.remote.ipfs import IpfsClient


class FakeResponse:
    def __init__(self, json_data=None, content=b'', status_code=200):
        self._json = json_data
        self.content = content
        self.status_code = status_code

    def json(self):
        return self._json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


class FakeSession:
    """Records POSTs and answers them from a queue."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def post(self, url, timeout=None, **kwargs):
        self.calls.append((url, timeout, kwargs))
        return self.responses.pop(0)


def _client(*responses):
    session = FakeSession(*responses)
    return IpfsClient('http://node:5001/', timeout=5.0, session=session), session


def test_put_adds_and_pins():
    client, session = _client(FakeResponse({'Hash': 'QmHash', 'Name': 'file'}))

    assert client.put(b"data") == '/ipfs/QmHash'

    url, timeout, kwargs = session.calls[0]
    assert url == 'http://node:5001/api/v0/add'
    assert timeout == 5.0
    assert kwargs['params']['pin'] == 'true'
    assert kwargs['files']['file'][1] == b"data"


def test_get_cats_link():
    client, session = _client(FakeResponse(content=b"payload"))

    assert client.get('/ipfs/QmHash') == b"payload"
    url, _timeout, kwargs = session.calls[0]
    assert url.endswith('/api/v0/cat')
    assert kwargs['params'] == {'arg': '/ipfs/QmHash'}


def test_resolve_name():
    client, session = _client(FakeResponse({'Path': '/ipfs/QmTarget'}))

    assert client.resolve_name('/ipns/QmName') == '/ipfs/QmTarget'
    assert session.calls[0][2]['params']['recursive'] == 'true'


def test_publish_name():
    client, session = _client(FakeResponse({'Name': 'QmName', 'Value': '/ipfs/QmTarget'}))

    assert client.publish_name('self', '/ipfs/QmTarget') == 'QmName'
    params = session.calls[0][2]['params']
    assert params['arg'] == '/ipfs/QmTarget'
    assert params['key'] == 'self'


def test_http_errors_propagate():
    """Node failures surface as requests exceptions."""
    client, _session = _client(FakeResponse(status_code=500))
    with pytest.raises(requests.HTTPError):
        client.get('/ipfs/QmMissing')

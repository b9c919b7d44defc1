"""Content store client for the IPFS HTTP API."""

import logging
from typing import Optional

import requests

from litipfs.core.config import DEFAULT_API_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


class IpfsClient:
    """
    Talks to an IPFS node through its HTTP API (/api/v0).

    Every call is a blocking round trip. Transport and HTTP failures surface
    as the requests exceptions that caused them.

    Links handed out and accepted are '/ipfs/<hash>' paths.
    """

    def __init__(self, api_url: str = DEFAULT_API_URL, timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.api_url = api_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, command: str, **kwargs) -> requests.Response:
        url = f"{self.api_url}/api/v0/{command}"
        logger.debug("POST %s %s", url, kwargs.get('params', ''))
        response = self.session.post(url, timeout=self.timeout, **kwargs)
        response.raise_for_status()
        return response

    def put(self, data: bytes) -> str:
        """Add data to IPFS and return its /ipfs/ link."""
        response = self._post(
            'add',
            params={'pin': 'true', 'quiet': 'true'},
            files={'file': ('file', data, 'application/octet-stream')},
        )
        # One JSON object per added file; there is only one
        result = response.json()
        return f"/ipfs/{result['Hash']}"

    def get(self, link: str) -> bytes:
        """Download the bytes behind an /ipfs/ link."""
        return self._post('cat', params={'arg': link}).content

    def resolve_name(self, name: str) -> str:
        """Resolve an IPNS name (/ipns/<hash> or bare) to the /ipfs/ link it points at."""
        response = self._post('name/resolve', params={'arg': name, 'recursive': 'true'})
        return response.json()['Path']

    def publish_name(self, key: str, link: str) -> str:
        """
        Point the IPNS name of `key` at `link`.

        Returns:
            str: The published name, without the /ipns/ prefix
        """
        response = self._post(
            'name/publish',
            params={'arg': link, 'key': key, 'resolve': 'true'},
        )
        return response.json()['Name']

    def __repr__(self) -> str:
        return f"IpfsClient(api_url={self.api_url})"

import json
from typing import Dict

import requests

from populator.constants import DEFAULT_IPFS_API


class IPFSClient:
    """Pins JSON documents through the `add` endpoint of an IPFS HTTP API."""

    def __init__(self, api_url: str = DEFAULT_IPFS_API, timeout: int = 60):
        if not api_url.endswith("/"):
            api_url += "/"
        self.api_url = api_url
        self.timeout = timeout

    def pin_json(self, document: Dict) -> str:
        """Returns the base58 CIDv0 of the pinned document."""
        data = json.dumps(document).encode()
        response = requests.post(
            f"{self.api_url}api/v0/add",
            params={"pin": "true"},
            files={"file": data},
            timeout=self.timeout,
        )
        response.raise_for_status()
        ipfs_hash = response.json()["Hash"]
        print(f"  Pinned metadata to IPFS: {ipfs_hash}")
        return ipfs_hash

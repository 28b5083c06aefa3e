import logging
from typing import Any, Dict, List, Sequence

import requests

from .errors import RemoteAPIError

logger = logging.getLogger(__name__)

API_HEADERS = {
    "Content-Type": "application/json",
    "X-IOTA-API-Version": "1",
}


class NodeAPI:
    """
    Minimal client for a remote ledger node's JSON command API.

    Requests are never retried here; a failed call raises RemoteAPIError
    and returns no partial data.
    """

    def __init__(self, url: str, timeout_sec: float = 30.0, session=None):
        self.url = url
        self.timeout_sec = timeout_sec
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(API_HEADERS)

    def _command(self, command: str, **params: Any) -> Dict[str, Any]:
        payload = {"command": command}
        payload.update(params)
        try:
            r = self.session.post(self.url, json=payload, timeout=self.timeout_sec)
            r.raise_for_status()
            resp = r.json()
        except requests.exceptions.RequestException as e:
            raise RemoteAPIError(f"{command} failed: {e}") from e
        except ValueError as e:
            raise RemoteAPIError(f"{command} returned invalid JSON: {e}") from e

        if not isinstance(resp, dict):
            raise RemoteAPIError(f"{command} returned {type(resp).__name__}, expected object")
        if "error" in resp:
            raise RemoteAPIError(f"{command} error: {resp['error']}")
        return resp

    def get_trytes(self, hashes: Sequence[str]) -> List[str]:
        """
        Fetch raw transaction bodies, one per requested hash, in request
        order.
        """
        hashes = list(hashes)
        if not hashes:
            return []

        logger.debug("getTrytes for %d hash(es) from %s", len(hashes), self.url)
        resp = self._command("getTrytes", hashes=hashes)
        trytes = resp.get("trytes")
        if not isinstance(trytes, list):
            raise RemoteAPIError("getTrytes response has no trytes list")
        if len(trytes) != len(hashes):
            raise RemoteAPIError(
                f"getTrytes returned {len(trytes)} bodies for {len(hashes)} hashes"
            )
        return trytes

    def close(self) -> None:
        self.session.close()

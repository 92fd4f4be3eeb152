from __future__ import annotations

"""
Files API Client.

HTTP persistence collaborator for the tree store. Every transport error,
timeout, non-2xx status or negative acknowledgement is converted into a
PersistenceError so the store can apply its commit-after-confirm rules.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from foldertree.domain.persistence import PersistenceError
from foldertree.infra.network.common import DEFAULT_TIMEOUT, FILES_ENDPOINT, USER_AGENT, build_url

logger = logging.getLogger(__name__)


class FilesApiClient:
    """
    Client for the remote files endpoint.

    Args:
        base_url: Server root, e.g. "http://localhost:5173".
        timeout: Per-request timeout in seconds.
        session: Optional requests.Session for connection reuse.
    """

    def __init__(
            self,
            base_url: str,
            timeout: float = DEFAULT_TIMEOUT,
            session: Optional[requests.Session] = None,
    ) -> None:
        self.url = build_url(base_url, FILES_ENDPOINT)
        self.timeout = timeout
        self._http = session if session is not None else requests

    def list_nodes(self) -> List[Dict[str, Any]]:
        """Fetch the current tree listing in wire format."""
        data = self._send("GET", None)
        if isinstance(data, dict):
            data = data.get("nodes")
        if not isinstance(data, list):
            raise PersistenceError("Malformed tree listing: expected a list of nodes.")
        logger.info(f"Network: Tree listing received ({len(data)} root node(s)).")
        return data

    def create(self, name: str, node_type: str, parent_id: Optional[str] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"name": name, "type": node_type}
        if parent_id is not None:
            payload["parentId"] = parent_id
        return self._send("POST", payload)

    def delete(self, node_id: str) -> Dict[str, Any]:
        return self._send("DELETE", {"id": node_id})

    # -------------------------------------------------------------------------
    # Private Helpers
    # -------------------------------------------------------------------------

    def _send(self, method: str, payload: Optional[Dict[str, Any]]) -> Any:
        """Execute a JSON request and validate the acknowledgement."""
        headers = {"User-Agent": USER_AGENT}
        logger.debug(f"Network: {method} {self.url} {payload or ''}")

        try:
            if method == "GET":
                response = self._http.get(self.url, headers=headers, timeout=self.timeout)
            elif method == "POST":
                response = self._http.post(self.url, json=payload, headers=headers, timeout=self.timeout)
            else:
                response = self._http.delete(self.url, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            data = response.json() if response.content else {}
        except requests.exceptions.Timeout:
            raise PersistenceError(f"Request timed out after {self.timeout}s.")
        except requests.exceptions.RequestException as e:
            raise PersistenceError(f"Communication error: {e}") from e
        except ValueError as e:
            raise PersistenceError(f"Malformed response body: {e}") from e

        if isinstance(data, dict) and data.get("success") is False:
            raise PersistenceError(str(data.get("message") or "The server rejected the operation."))
        return data

from __future__ import annotations

"""
Persistence Collaborator Contract.

The tree store treats persistence as an opaque, possibly-failing remote
service. Implementations signal every failure with PersistenceError.
"""

from typing import Any, Dict, List, Optional, Protocol


class PersistenceError(Exception):
    """Raised when the remote backend rejects or cannot complete a call."""


class FilePersistence(Protocol):
    """Remote endpoint that durably records create/delete operations."""

    def list_nodes(self) -> List[Dict[str, Any]]:
        """Return the current tree in wire format."""
        ...

    def create(self, name: str, node_type: str, parent_id: Optional[str] = None) -> Any:
        """Acknowledge creation of a node named name under parent_id."""
        ...

    def delete(self, node_id: str) -> Any:
        """Acknowledge deletion of node_id and its subtree."""
        ...

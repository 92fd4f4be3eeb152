from __future__ import annotations

"""
In-Process Persistence Backend.

Stand-in for the remote files endpoint: acknowledges every call, records
it for inspection and can be told to fail selected operations. Used by
the CLI demo mode and by the test suite.
"""

import copy
import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Tuple

from foldertree.domain.persistence import PersistenceError

logger = logging.getLogger(__name__)


def sample_tree() -> List[Dict[str, Any]]:
    """Demo listing served when no remote backend is configured."""
    return [
        {
            "id": "1",
            "name": "Documents",
            "type": "folder",
            "expanded": True,
            "children": [
                {"id": "1-1", "name": "report.pdf", "type": "file"},
                {"id": "1-2", "name": "notes.txt", "type": "file"},
                {
                    "id": "1-3",
                    "name": "Projects",
                    "type": "folder",
                    "expanded": False,
                    "children": [
                        {"id": "1-3-1", "name": "project-a.md", "type": "file"},
                        {"id": "1-3-2", "name": "project-b.md", "type": "file"},
                    ],
                },
            ],
        },
        {
            "id": "2",
            "name": "Images",
            "type": "folder",
            "expanded": False,
            "children": [
                {"id": "2-1", "name": "photo.jpg", "type": "file"},
                {"id": "2-2", "name": "screenshot.png", "type": "file"},
            ],
        },
        {"id": "3", "name": "readme.md", "type": "file"},
    ]


class InMemoryBackend:
    """
    Recording persistence collaborator.

    Args:
        seed: Listing returned by list_nodes (deep-copied).
        fail_on: Operation names ("list", "create", "delete") that raise
                 PersistenceError instead of acknowledging.
    """

    def __init__(
            self,
            seed: Optional[List[Dict[str, Any]]] = None,
            fail_on: Iterable[str] = (),
    ) -> None:
        self._seed = copy.deepcopy(seed) if seed is not None else []
        self.fail_on = set(fail_on)
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self._lock = threading.Lock()

    def list_nodes(self) -> List[Dict[str, Any]]:
        self._record("list", {})
        return copy.deepcopy(self._seed)

    def create(self, name: str, node_type: str, parent_id: Optional[str] = None) -> Dict[str, Any]:
        data = {"name": name, "type": node_type, "parentId": parent_id}
        self._record("create", data)
        return {"success": True, "message": f'{node_type} "{name}" created successfully', "data": data}

    def delete(self, node_id: str) -> Dict[str, Any]:
        data = {"id": node_id}
        self._record("delete", data)
        return {"success": True, "message": f'Item "{node_id}" deleted successfully', "data": data}

    def _record(self, operation: str, data: Dict[str, Any]) -> None:
        with self._lock:
            self.calls.append((operation, data))
        if operation in self.fail_on:
            logger.debug(f"InMemoryBackend: Simulated failure for '{operation}'.")
            raise PersistenceError(f"Simulated {operation} failure.")

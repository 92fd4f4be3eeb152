from __future__ import annotations

"""
Network Communication Infrastructure.

Exposes the HTTP persistence collaborator used by the tree store.
"""

from foldertree.infra.network.common import build_url
from foldertree.infra.network.files_client import FilesApiClient

__all__ = [
    "FilesApiClient",
    "build_url",
]

from __future__ import annotations

from foldertree.domain.constants import DEFAULT_TIMEOUT, FILES_ENDPOINT, USER_AGENT

__all__ = ["DEFAULT_TIMEOUT", "FILES_ENDPOINT", "USER_AGENT", "build_url"]


def build_url(base_url: str, endpoint: str) -> str:
    """Join a base URL and an absolute endpoint path without doubling slashes."""
    return f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}"

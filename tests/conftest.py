from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

1. Puts the 'src' directory on sys.path so tests run without installation.
2. Provides shared tree fixtures: the sample listing, a recording
   in-memory backend and tree stores wired to it.
"""

import itertools
import os
import sys
from typing import Callable

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from foldertree.core.services.tree_store import TreeStore  # noqa: E402
from foldertree.domain.tree_models import Roots, roots_from_list  # noqa: E402
from foldertree.infra.memory_backend import InMemoryBackend, sample_tree  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_roots() -> Roots:
    """
    Return the demo tree:

        Documents/ (1)            expanded
            report.pdf (1-1)
            notes.txt (1-2)
            Projects/ (1-3)       collapsed
                project-a.md (1-3-1)
                project-b.md (1-3-2)
        Images/ (2)               collapsed
            photo.jpg (2-1)
            screenshot.png (2-2)
        readme.md (3)
    """
    return roots_from_list(sample_tree())


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Deterministic node ids: n1, n2, ..."""
    counter = itertools.count(1)
    return lambda: f"n{next(counter)}"


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend(seed=sample_tree())


@pytest.fixture
def empty_store(id_factory) -> TreeStore:
    """Store over an empty backend, already loaded."""
    store = TreeStore(InMemoryBackend(), id_factory=id_factory)
    store.load()
    return store


@pytest.fixture
def store(backend, id_factory) -> TreeStore:
    """Store seeded with the sample tree through load()."""
    s = TreeStore(backend, id_factory=id_factory)
    result = s.load()
    assert result.ok
    return s

from __future__ import annotations

"""
Smoke test: every module of the package imports cleanly.
"""

import importlib

import pytest

MODULES = [
    "foldertree",
    "foldertree.__main__",
    "foldertree.core.config_validator",
    "foldertree.core.services.drag",
    "foldertree.core.services.importer",
    "foldertree.core.services.tree_store",
    "foldertree.core.tree.locator",
    "foldertree.core.tree.move_planner",
    "foldertree.core.tree.mutator",
    "foldertree.core.tree.naming",
    "foldertree.core.tree.validation",
    "foldertree.domain.config",
    "foldertree.domain.constants",
    "foldertree.domain.entry_models",
    "foldertree.domain.persistence",
    "foldertree.domain.results",
    "foldertree.domain.tree_models",
    "foldertree.infra.fs",
    "foldertree.infra.logging",
    "foldertree.infra.memory_backend",
    "foldertree.infra.network",
    "foldertree.interface.cli.app",
    "foldertree.interface.cli.args",
    "foldertree.interface.cli.render",
]


@pytest.mark.parametrize("name", MODULES)
def test_module_imports(name) -> None:
    assert importlib.import_module(name) is not None

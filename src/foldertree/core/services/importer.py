from __future__ import annotations

"""
Drag-Drop Import Service.

Materializes a dropped, lazily-produced hierarchy of entries into the
tree. Creates are issued strictly one at a time, each confirmed before the
next, so a folder always exists before its children are created. Names
are pre-resolved against the target scope to avoid collisions.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from foldertree.core.services.tree_store import TreeStore
from foldertree.domain.entry_models import DirectoryEntry, Entry

logger = logging.getLogger(__name__)


@dataclass
class ImportReport:
    """
    Summary of a drop import.

    Attributes:
        created: Number of nodes created.
        failed: Names (slash paths) whose create call was rejected.
        skipped: Number of entries never attempted because an ancestor failed.
        created_ids: Identifiers of the created nodes, in creation order.
    """
    created: int = 0
    failed: List[str] = field(default_factory=list)
    skipped: int = 0
    created_ids: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed and self.skipped == 0


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def import_entries(
        store: TreeStore,
        entries: Iterable[Entry],
        parent_id: Optional[str] = None,
) -> ImportReport:
    """
    Create every entry (recursively) under parent_id.

    Args:
        store: Target tree store.
        entries: One-shot iterable of dropped entries.
        parent_id: Destination folder id, or None for root level.

    Returns:
        ImportReport: Counters and failures of the import.
    """
    report = ImportReport()
    _import_level(store, entries, parent_id, "", report)
    logger.info(
        f"Import finished: {report.created} created, "
        f"{len(report.failed)} failed, {report.skipped} skipped."
    )
    return report


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _import_level(
        store: TreeStore,
        entries: Iterable[Entry],
        parent_id: Optional[str],
        prefix: str,
        report: ImportReport,
) -> None:
    for entry in entries:
        if isinstance(entry, DirectoryEntry):
            name = store.get_unique_folder_name(parent_id, entry.name)
            result = store.add_folder(name, parent_id)
        else:
            name = store.get_unique_file_name(parent_id, entry.name)
            result = store.add_file(name, parent_id)

        path = f"{prefix}{name}"
        if not result.ok or result.node_id is None:
            logger.warning(f"Import: Could not create '{path}': {result.message}")
            report.failed.append(path)
            if isinstance(entry, DirectoryEntry):
                report.skipped += _count(entry.entries())
            continue

        report.created += 1
        report.created_ids.append(result.node_id)
        if isinstance(entry, DirectoryEntry):
            _import_level(store, entry.entries(), result.node_id, f"{path}/", report)


def _count(entries: Iterable[Entry]) -> int:
    total = 0
    for entry in entries:
        total += 1
        if isinstance(entry, DirectoryEntry):
            total += _count(entry.entries())
    return total

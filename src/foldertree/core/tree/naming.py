from __future__ import annotations

"""
Sibling-scoped Name Resolution.

Case-insensitive duplicate detection and collision-free name generation
using "(n)" counters. File names keep their extension after the counter.
"""

from typing import Iterable, Optional, Set, Tuple

from foldertree.domain.tree_models import Node


def is_duplicate(siblings: Iterable[Node], candidate: str, exclude_id: Optional[str] = None) -> bool:
    """
    Report whether candidate collides with a sibling name (case-insensitive).

    Args:
        siblings: Nodes of the sibling scope.
        candidate: Proposed name.
        exclude_id: Node to ignore (the node being renamed).
    """
    wanted = candidate.lower()
    return any(s.name.lower() == wanted for s in siblings if s.id != exclude_id)


def split_extension(name: str) -> Tuple[str, str]:
    """
    Split name into (stem, extension).

    The extension starts at the last '.' unless that dot is the first
    character, so ".env" and "README" are extension-less.
    """
    dot = name.rfind(".")
    if dot > 0:
        return name[:dot], name[dot:]
    return name, ""


def unique_folder_name(siblings: Iterable[Node], base_name: str) -> str:
    """Return base_name, or base_name(n) for the smallest free n >= 1."""
    return _resolve(_taken(siblings), base_name, "")


def unique_file_name(siblings: Iterable[Node], file_name: str) -> str:
    """Return file_name, or stem(n).ext for the smallest free n >= 1."""
    taken = _taken(siblings)
    if file_name.lower() not in taken:
        return file_name
    stem, ext = split_extension(file_name)
    return _resolve(taken, stem, ext)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _taken(siblings: Iterable[Node]) -> Set[str]:
    return {s.name.lower() for s in siblings}


def _resolve(taken: Set[str], stem: str, ext: str) -> str:
    candidate = f"{stem}{ext}"
    counter = 0
    while candidate.lower() in taken:
        counter += 1
        candidate = f"{stem}({counter}){ext}"
    return candidate

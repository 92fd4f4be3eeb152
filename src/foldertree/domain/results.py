from __future__ import annotations

"""
Command Result Domain Models.

Defines the outcome objects and factory functions used to communicate
the result of store commands to interface layers (CLI, importer,
subscribers). Failures are values, not exceptions: every failure path
leaves the last-known-good snapshot untouched.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from foldertree.domain.tree_models import Node

# -----------------------------------------------------------------------------
# ENUMERATIONS
# -----------------------------------------------------------------------------

class ErrorKind(str, Enum):
    """Failure taxonomy of store commands."""
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    PERSISTENCE = "persistence"
    DECLINED = "declined"


class MoveOutcome(str, Enum):
    """Decision produced by the move planner."""
    MOVE = "move"
    NOT_FOUND = "not_found"
    INVALID_TARGET = "invalid_target"
    CYCLE = "cycle"
    NO_OP = "no_op"
    CONFLICT = "conflict"


class ConflictPolicy(str, Enum):
    """Caller decision when a move collides with an existing sibling name."""
    REPORT = "report"
    RENAME = "rename"
    OVERWRITE = "overwrite"


# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of a single store command.

    Attributes:
        ok: True if the command committed (or was a legitimate no-op).
        error_kind: Failure category when ok is False.
        message: Human-readable reason, surfaced verbatim to the user.
        node_id: Identifier of the affected (or newly minted) node.
    """
    ok: bool
    error_kind: Optional[ErrorKind] = None
    message: str = ""
    node_id: Optional[str] = None


@dataclass(frozen=True)
class MovePlan:
    """
    Relocation decision for a node.

    Attributes:
        outcome: Planner verdict.
        node: Resolved node to relocate (None if absent).
        target_parent_id: Destination folder id (None for root level).
        conflicting_node: Sibling in the target scope sharing the name.
    """
    outcome: MoveOutcome
    node: Optional[Node] = None
    target_parent_id: Optional[str] = None
    conflicting_node: Optional[Node] = None

    @property
    def accepted(self) -> bool:
        return self.outcome is MoveOutcome.MOVE


@dataclass(frozen=True)
class MoveResult:
    """
    Outcome of a move command, carrying the planner verdict.

    Attributes:
        ok: True if the node was relocated.
        outcome: Planner verdict (CONFLICT when the conflict was not resolved).
        message: Human-readable reason for a refused move.
        node_id: Identifier of the node to move.
        new_name: Name given to the node when it was renamed to fit.
        error_kind: DECLINED for structural rejections, otherwise the
                    failure category (CONFLICT, VALIDATION, PERSISTENCE).
    """
    ok: bool
    outcome: MoveOutcome
    message: str = ""
    node_id: Optional[str] = None
    new_name: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @property
    def declined(self) -> bool:
        return self.outcome in (
            MoveOutcome.NOT_FOUND,
            MoveOutcome.INVALID_TARGET,
            MoveOutcome.CYCLE,
            MoveOutcome.NO_OP,
        )


@dataclass(frozen=True)
class ValidationResult:
    """Verdict of the name validation collaborator."""
    ok: bool
    reason: str = ""


# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_success_result(node_id: Optional[str] = None, message: str = "") -> CommandResult:
    return CommandResult(ok=True, node_id=node_id, message=message)


def create_error_result(
        kind: ErrorKind,
        message: str,
        node_id: Optional[str] = None,
) -> CommandResult:
    """
    Create a failed command result.

    Args:
        kind: Failure category.
        message: Human-readable reason.
        node_id: Identifier of the targeted node, if any.

    Returns:
        CommandResult: A result with ok=False.
    """
    return CommandResult(ok=False, error_kind=kind, message=message, node_id=node_id)

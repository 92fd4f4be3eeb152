from __future__ import annotations

"""
Default Name Validation Collaborator.

Rules: non-empty, bounded length, and free of path separators. The store
accepts any callable with the same signature, so callers can plug in
stricter policies.
"""

from typing import Callable

from foldertree.domain.constants import FORBIDDEN_NAME_CHARS, MAX_NAME_LENGTH
from foldertree.domain.results import ValidationResult

NameValidator = Callable[[str], ValidationResult]


def validate_name(name: str, max_length: int = MAX_NAME_LENGTH) -> ValidationResult:
    """
    Check a candidate node name.

    Args:
        name: Proposed name.
        max_length: Maximum accepted length in characters.

    Returns:
        ValidationResult: ok=True, or ok=False with a human-readable reason.
    """
    if not isinstance(name, str) or len(name) < 1:
        return ValidationResult(False, "Please enter a name.")
    if len(name) > max_length:
        return ValidationResult(False, "The name is too long.")
    for char in FORBIDDEN_NAME_CHARS:
        if char in name:
            return ValidationResult(False, f"The name cannot contain {char}")
    return ValidationResult(True)


def make_validator(max_length: int) -> NameValidator:
    """Bind a length limit (usually from configuration) into a validator."""
    def _validator(name: str) -> ValidationResult:
        return validate_name(name, max_length=max_length)
    return _validator

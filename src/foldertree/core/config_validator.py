from __future__ import annotations

"""
Configuration Validation Service.

Normalizes untrusted configuration (JSON file, CLI overrides) into a
strictly typed dictionary, falling back to defaults with warnings.
"""

import logging
from typing import Any, Dict, List, Tuple

from foldertree.domain.config import get_default_config

logger = logging.getLogger(__name__)

_STRING_FIELDS = ["api_base_url", "default_folder_name", "log_level", "log_file"]
_POSITIVE_INT_FIELDS = ["max_name_length", "drag_dwell_ms", "log_max_bytes", "log_backup_count"]
_POSITIVE_FLOAT_FIELDS = ["request_timeout"]
_OPTIONAL_STRING_FIELDS = {"log_file"}


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a configuration dictionary.

    Args:
        config: Raw configuration data.
        strict: If True, raise TypeError/ValueError instead of falling back.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if v is not None})

    for field in _STRING_FIELDS:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in _POSITIVE_INT_FIELDS:
        merged[field] = _as_positive(merged.get(field), defaults[field], int, field, warnings, strict)

    for field in _POSITIVE_FLOAT_FIELDS:
        merged[field] = _as_positive(merged.get(field), defaults[field], float, field, warnings, strict)

    merged["log_level"] = merged["log_level"].upper()
    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    if isinstance(value, str):
        v = value.strip()
        if v or field in _OPTIONAL_STRING_FIELDS:
            return v
        return fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_positive(value: Any, fallback: Any, kind: type, field: str, warnings: List[str], strict: bool) -> Any:
    """Coerce numbers and numeric strings; reject bools and non-positive values."""
    if not isinstance(value, bool):
        try:
            number = kind(value)
            if number > 0:
                return number
        except (TypeError, ValueError):
            pass

    msg = f"Invalid field '{field}': expected a positive number, received {value!r}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback

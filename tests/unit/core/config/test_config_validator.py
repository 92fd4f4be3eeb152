from __future__ import annotations

"""
Unit tests for the Configuration Validator.

Verifies default injection, type coercion and strict mode.
"""

import pytest

from foldertree.core.config_validator import validate_config
from foldertree.domain.config import get_default_config


def test_validate_none_returns_defaults() -> None:
    cfg, warnings = validate_config(None)
    assert cfg == get_default_config()
    assert len(warnings) == 1


def test_validate_empty_dict_returns_defaults() -> None:
    cfg, warnings = validate_config({})
    assert cfg["drag_dwell_ms"] == 800
    assert cfg["max_name_length"] == 255
    assert cfg["default_folder_name"] == "New Folder"
    assert warnings == []


def test_numeric_strings_are_coerced() -> None:
    cfg, warnings = validate_config({"drag_dwell_ms": "500", "request_timeout": "2.5"})
    assert cfg["drag_dwell_ms"] == 500
    assert cfg["request_timeout"] == 2.5
    assert warnings == []


@pytest.mark.parametrize("value", [0, -3, "abc", True, [1]])
def test_invalid_numbers_fall_back(value) -> None:
    cfg, warnings = validate_config({"max_name_length": value})
    assert cfg["max_name_length"] == 255
    assert len(warnings) == 1


def test_strings_are_trimmed_and_level_uppercased() -> None:
    cfg, _ = validate_config({"api_base_url": "  http://example.test  ", "log_level": "debug"})
    assert cfg["api_base_url"] == "http://example.test"
    assert cfg["log_level"] == "DEBUG"


def test_blank_required_string_falls_back() -> None:
    cfg, _ = validate_config({"default_folder_name": "   ", "log_file": ""})
    assert cfg["default_folder_name"] == "New Folder"
    assert cfg["log_file"] == ""


def test_strict_mode_raises() -> None:
    with pytest.raises(TypeError):
        validate_config("nope", strict=True)
    with pytest.raises(TypeError):
        validate_config({"api_base_url": 42}, strict=True)
    with pytest.raises(ValueError):
        validate_config({"drag_dwell_ms": -1}, strict=True)

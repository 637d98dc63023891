"""
Tests for validator configuration.
"""

import ipaddress
from datetime import datetime

import pytest

from graphguard.core.config import (
    DEFAULT_OPAQUE_TYPES,
    REQUIRED_NULL_MESSAGE,
    ValidatorConfig,
)
from graphguard.core.exceptions import ConfigurationError


def test_defaults():
    """Test default configuration values."""
    config = ValidatorConfig()
    assert config.opaque_types == DEFAULT_OPAQUE_TYPES
    assert config.detect_cycles is True
    assert config.required_null_message == REQUIRED_NULL_MESSAGE
    assert config.path_separator == " -> "
    assert config.list_separator == ","


def test_default_opaque_types_cover_leaf_types():
    """Test the atomic reference types are opaque by default."""
    assert str in DEFAULT_OPAQUE_TYPES
    assert datetime in DEFAULT_OPAQUE_TYPES


def test_explicit_opaque_types_replace_defaults():
    """Test passing opaque types replaces the default set."""
    config = ValidatorConfig(opaque_types=[str])
    assert config.opaque_types == frozenset({str})


def test_from_dict():
    """Test building a configuration from a mapping."""
    config = ValidatorConfig.from_dict(
        {
            "detect_cycles": False,
            "path_separator": " / ",
            "list_separator": "; ",
            "extra_opaque_types": ["ipaddress.IPv4Address"],
        }
    )
    assert config.detect_cycles is False
    assert config.path_separator == " / "
    assert config.list_separator == "; "
    assert ipaddress.IPv4Address in config.opaque_types
    assert DEFAULT_OPAQUE_TYPES <= config.opaque_types


def test_from_dict_empty():
    """Test an empty mapping yields the defaults."""
    config = ValidatorConfig.from_dict({})
    assert config.detect_cycles is True
    assert config.opaque_types == DEFAULT_OPAQUE_TYPES


@pytest.mark.parametrize(
    "data",
    [
        {"detect_cycles": "yes"},
        {"unknown_option": True},
        {"path_separator": ""},
        {"extra_opaque_types": ["NoModule"]},
    ],
)
def test_from_dict_rejects_invalid_mappings(data):
    """Test schema violations raise ConfigurationError."""
    with pytest.raises(ConfigurationError, match="Invalid validator configuration"):
        ValidatorConfig.from_dict(data)


def test_from_dict_unresolvable_type():
    """Test opaque type paths must import."""
    with pytest.raises(ConfigurationError, match="Cannot import opaque type"):
        ValidatorConfig.from_dict({"extra_opaque_types": ["ipaddress.NoSuchAddress"]})


def test_from_dict_non_class_type():
    """Test opaque type paths must name a class."""
    with pytest.raises(ConfigurationError, match="is not a class"):
        ValidatorConfig.from_dict({"extra_opaque_types": ["ipaddress.ip_address"]})

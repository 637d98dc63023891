"""
Configuration for the graph validator.

This module defines the settings that shape a traversal: which reference types
are treated as atomic leaves, whether cyclic graphs are guarded against, and
the text used when failures are composed and joined.
"""

import importlib
import re
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from pathlib import PurePath
from typing import Any, Dict, FrozenSet, Iterable, Optional
from urllib.parse import ParseResult, SplitResult
from uuid import UUID

from jsonschema import ValidationError as JsonSchemaError
from jsonschema import validate as json_validate

from .exceptions import ConfigurationError
from .models import DEFAULT_PATH_SEPARATOR

# Types with no nested structure worth descending into, even though they are
# ordinary objects at runtime.
DEFAULT_OPAQUE_TYPES: FrozenSet[type] = frozenset(
    {
        str,
        bytes,
        bytearray,
        memoryview,
        datetime,
        date,
        time,
        timedelta,
        timezone,
        Decimal,
        Fraction,
        UUID,
        ParseResult,
        SplitResult,
        PurePath,
        re.Pattern,
    }
)

# Scalar types; never eligible for descent and not configurable.
VALUE_TYPES = (bool, int, float, complex, Enum, type(None))

REQUIRED_NULL_MESSAGE = "The property is null but is marked as required!"

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "detect_cycles": {"type": "boolean"},
        "required_null_message": {"type": "string", "minLength": 1},
        "path_separator": {"type": "string", "minLength": 1},
        "list_separator": {"type": "string", "minLength": 1},
        "extra_opaque_types": {
            "type": "array",
            "items": {"type": "string", "pattern": r"^[\w.]+\.\w+$"},
            "uniqueItems": True,
        },
    },
    "additionalProperties": False,
}


class ValidatorConfig:
    """
    Configuration for graph validation.

    Attributes:
        opaque_types: Reference types treated as atomic during traversal
        detect_cycles: Whether to stop descending into an object that is
            already on the current path
        required_null_message: Message recorded for a required property
            holding None
        path_separator: Text placed between path segments in failure messages
        list_separator: Text used when joining messages and member names
    """

    def __init__(
        self,
        opaque_types: Optional[Iterable[type]] = None,
        detect_cycles: bool = True,
        required_null_message: str = REQUIRED_NULL_MESSAGE,
        path_separator: str = DEFAULT_PATH_SEPARATOR,
        list_separator: str = ",",
    ):
        self.opaque_types: FrozenSet[type] = frozenset(
            DEFAULT_OPAQUE_TYPES if opaque_types is None else opaque_types
        )
        self.detect_cycles = detect_cycles
        self.required_null_message = required_null_message
        self.path_separator = path_separator
        self.list_separator = list_separator

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidatorConfig":
        """
        Build a configuration from a plain mapping.

        The mapping is checked against CONFIG_SCHEMA. Entries in
        ``extra_opaque_types`` are dotted import paths added to the default
        opaque types.

        Example:
            >>> config = ValidatorConfig.from_dict(
            ...     {"detect_cycles": False, "extra_opaque_types": ["ipaddress.IPv4Address"]}
            ... )

        Raises:
            ConfigurationError: If the mapping does not match the schema or an
                opaque type path cannot be resolved
        """
        try:
            json_validate(instance=data, schema=CONFIG_SCHEMA)
        except JsonSchemaError as e:
            raise ConfigurationError(f"Invalid validator configuration: {e.message}")

        extra = [_import_type(path) for path in data.get("extra_opaque_types", [])]
        return cls(
            opaque_types=DEFAULT_OPAQUE_TYPES | frozenset(extra),
            detect_cycles=data.get("detect_cycles", True),
            required_null_message=data.get("required_null_message", REQUIRED_NULL_MESSAGE),
            path_separator=data.get("path_separator", DEFAULT_PATH_SEPARATOR),
            list_separator=data.get("list_separator", ","),
        )

    def __repr__(self) -> str:
        return (
            f"ValidatorConfig(opaque_types={len(self.opaque_types)} types, "
            f"detect_cycles={self.detect_cycles})"
        )


def _import_type(path: str) -> type:
    """Resolve a dotted ``module.Class`` path to a class."""
    module_name, _, attr = path.rpartition(".")
    try:
        candidate = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError(f"Cannot import opaque type '{path}': {e}")
    if not isinstance(candidate, type):
        raise ConfigurationError(f"Opaque type '{path}' is not a class")
    return candidate

"""Core validation types, configuration and exceptions."""

from .config import DEFAULT_OPAQUE_TYPES, REQUIRED_NULL_MESSAGE, ValidatorConfig
from .exceptions import ArgumentError, ArgumentNullError, ConfigurationError, ValidationError
from .models import FailureRecord, FailureSet, ValidationContext

__all__ = [
    "ArgumentError",
    "ArgumentNullError",
    "ConfigurationError",
    "DEFAULT_OPAQUE_TYPES",
    "FailureRecord",
    "FailureSet",
    "REQUIRED_NULL_MESSAGE",
    "ValidationContext",
    "ValidationError",
    "ValidatorConfig",
]

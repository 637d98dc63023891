"""
Guard helpers.

Stateless functions that check one argument and raise a structured
ArgumentError, with the caller's location attached, when the check fails.
"""

from .caller import CallerInfo, capture_caller
from .checks import (
    is_valid_datetime,
    is_well_formed_uri,
    throw_if_empty_timedelta,
    throw_if_empty_uuid,
    throw_if_equal,
    throw_if_false,
    throw_if_greater_than,
    throw_if_invalid_datetime,
    throw_if_invalid_object,
    throw_if_less_than,
    throw_if_less_than_or_equal_zero,
    throw_if_less_than_zero,
    throw_if_malformed_uri,
    throw_if_not_empty_timedelta,
    throw_if_not_empty_uuid,
    throw_if_not_equal,
    throw_if_not_null_or_empty,
    throw_if_not_zero,
    throw_if_null,
    throw_if_null_or_empty,
    throw_if_true,
    throw_if_zero,
)
from .decorators import validate_dataclass

__all__ = [
    "CallerInfo",
    "capture_caller",
    "is_valid_datetime",
    "is_well_formed_uri",
    "throw_if_empty_timedelta",
    "throw_if_empty_uuid",
    "throw_if_equal",
    "throw_if_false",
    "throw_if_greater_than",
    "throw_if_invalid_datetime",
    "throw_if_invalid_object",
    "throw_if_less_than",
    "throw_if_less_than_or_equal_zero",
    "throw_if_less_than_zero",
    "throw_if_malformed_uri",
    "throw_if_not_empty_timedelta",
    "throw_if_not_empty_uuid",
    "throw_if_not_equal",
    "throw_if_not_null_or_empty",
    "throw_if_not_zero",
    "throw_if_null",
    "throw_if_null_or_empty",
    "throw_if_true",
    "throw_if_zero",
    "validate_dataclass",
]

"""
Core models package for the validation system.

This package provides the data structures shared by the rule evaluator, the
graph validator and the guard helpers.
"""

from .context import ValidationContext
from .failure import DEFAULT_PATH_SEPARATOR, FailureRecord, FailureSet

__all__ = [
    "DEFAULT_PATH_SEPARATOR",
    "FailureRecord",
    "FailureSet",
    "ValidationContext",
]

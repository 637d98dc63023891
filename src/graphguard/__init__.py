"""
graphguard - Rule-driven Object Graph Validation

This package validates objects against declarative rules attached to their
fields, optionally descending into nested objects and collections. It includes:

- A rule library attached to fields through typing.Annotated
- A recursive graph validator with path-annotated failures
- Guard helpers that raise structured argument errors with caller context
- Reporting utilities for validation results

For more information, please see the documentation.
"""

__version__ = "0.1.0"
__author__ = "graphguard Team"
__license__ = "See LICENSE file"

# Version compatibility check
import sys

if sys.version_info < (3, 12):
    raise RuntimeError("graphguard requires Python 3.12 or higher")

# Import commonly used components for easier access
from .core import ArgumentError, ArgumentNullError, FailureRecord, FailureSet, ValidatorConfig
from .guards import throw_if_invalid_object, validate_dataclass
from .utils.validation import GraphValidator, ValidationResult, validate_graph

__all__ = [
    "ArgumentError",
    "ArgumentNullError",
    "FailureRecord",
    "FailureSet",
    "GraphValidator",
    "ValidationResult",
    "ValidatorConfig",
    "throw_if_invalid_object",
    "validate_dataclass",
    "validate_graph",
]

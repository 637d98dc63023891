"""
Validation Reporter Components for graphguard

This module provides components for formatting and outputting validation results
in various formats. It supports:
- Human-readable string formatting
- Dictionary conversion
- JSON serialization
- The joined "errors" and "properties" strings carried by guard errors
"""

import json
from typing import Any, Dict

from ...core.models import FailureRecord
from .base import ValidationResult


class ValidationReporter:
    """
    Reporter for formatting and outputting validation results.

    This class provides static methods for converting ValidationResult instances
    into various formats suitable for different use cases, such as human-readable
    output, dictionary representation, or JSON serialization.
    """

    @staticmethod
    def format_result(result: ValidationResult) -> str:
        """
        Format a validation result as a readable report.

        Each failure is listed with the dotted location of the member it is
        about. Warnings follow, then a one-line summary of the run settings.

        Example:
            >>> print(ValidationReporter.format_result(result))
            Order failed validation with 1 failure:
              - 'customer' -> 'The name field is required.' [customer.name]

            Run: recursive=True, evaluate_all_rules=True, nodes_visited=2
        """
        settings = dict(result.context or {})
        subject = settings.pop("root_type", "Object")

        if result.is_valid:
            lines = [f"{subject} passed validation"]
        else:
            count = len(result.failures)
            noun = "failure" if count == 1 else "failures"
            lines = [f"{subject} failed validation with {count} {noun}:"]
            for record in result.failures:
                location = _location(record)
                line = f"  - {record.message}"
                lines.append(f"{line} [{location}]" if location else line)

        if result.warnings:
            lines.extend(["", "Warnings:"])
            lines.extend(f"  - {warning}" for warning in result.warnings)

        if settings:
            run = ", ".join(f"{key}={value}" for key, value in settings.items())
            lines.extend(["", f"Run: {run}"])

        return "\n".join(lines)

    @staticmethod
    def to_dict(result: ValidationResult) -> Dict[str, Any]:
        """
        Convert a validation result to a dictionary.

        Example:
            >>> ValidationReporter.to_dict(result)
            {
                'is_valid': False,
                'errors': ["'customer' -> 'The name field is required.'"],
                'failures': [{'message': ..., 'member_names': ['name'], 'path': ['customer']}],
                'warnings': [],
                'context': {...}
            }
        """
        return {
            "is_valid": result.is_valid,
            "errors": result.errors,
            "failures": [
                {
                    "message": record.message,
                    "member_names": list(record.member_names),
                    "path": list(record.path),
                }
                for record in result.failures
            ],
            "warnings": result.warnings,
            "context": result.context,
        }

    @staticmethod
    def to_json(result: ValidationResult) -> str:
        """Convert a validation result to an indented JSON string."""
        return json.dumps(ValidationReporter.to_dict(result), indent=2, default=str)

    @staticmethod
    def join_errors(result: ValidationResult, separator: str = ",") -> str:
        """Join every failure message into one string."""
        return separator.join(result.errors)

    @staticmethod
    def join_properties(result: ValidationResult, separator: str = ",") -> str:
        """Join the member names of every failure into one string, skipping records without any."""
        return separator.join(result.failures.member_names)


def _location(record: FailureRecord) -> str:
    if not record.member_names:
        return ".".join(record.path)
    return ", ".join(".".join(record.path + (name,)) for name in record.member_names)

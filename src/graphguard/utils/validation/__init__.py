"""
Validation package for graphguard.

This package provides the rule library, the per-object rule evaluator and the
recursive graph validator built on top of it.

Key Components:
- ValidationRule and its subclasses: declarative rules attached to fields
- ValidationRuleSet / RuleEvaluator: evaluate one object's own rules
- GraphValidator / validate_graph: depth-first validation of object graphs
- ValidationReporter: formats and outputs validation results
"""

from .base import (
    CompareRule,
    CustomRule,
    EmailRule,
    JsonSchemaRule,
    LengthRule,
    ObjectRule,
    RangeRule,
    RegexRule,
    RequiredRule,
    TypeRule,
    UrlRule,
    ValidationResult,
    ValidationRule,
    object_rule,
)
from .graph import GraphValidator, validate_graph
from .inspection import PropertyDescriptor, describe_type, eligible_properties, read_member
from .reporter import ValidationReporter
from .ruleset import RuleEvaluator, ValidationRuleSet

__all__ = [
    "ValidationResult",
    "ValidationRule",
    "RequiredRule",
    "TypeRule",
    "RangeRule",
    "LengthRule",
    "RegexRule",
    "EmailRule",
    "UrlRule",
    "CompareRule",
    "CustomRule",
    "JsonSchemaRule",
    "ObjectRule",
    "object_rule",
    "PropertyDescriptor",
    "describe_type",
    "eligible_properties",
    "read_member",
    "RuleEvaluator",
    "ValidationRuleSet",
    "GraphValidator",
    "validate_graph",
    "ValidationReporter",
]

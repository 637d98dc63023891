"""
Rule Set Validation Components for graphguard

This module provides the rule evaluator: it applies the rules attached to one
object's own members and its object-level rules, without looking at nested
objects. It allows for:
- Grouping the rules of a type by member
- Applying multiple rules to a single member, in declaration order
- Fail-fast or exhaustive evaluation, chosen by an explicit flag
- Deferring presence checks the graph validator performs itself

Rule sets are built from type metadata and memoized per type.
"""

import logging
import types
from functools import lru_cache
from typing import Any, Collection, Dict, List, Optional, Tuple

from ...core.config import DEFAULT_OPAQUE_TYPES
from ...core.models import FailureRecord, FailureSet, ValidationContext
from .base import OBJECT_RULES_ATTR, ObjectRule, RequiredRule, ValidationRule
from .inspection import PropertyDescriptor, describe_type, read_member

logger = logging.getLogger(__name__)


class ValidationRuleSet:
    """
    Collection of validation rules organized by member.

    Attributes:
        rules (Dict[str, List[ValidationRule]]): Dictionary mapping member names
            to lists of validation rules
        object_rules (List[ObjectRule]): Rules checked against the whole object

    A frozen rule set exposes read-only views of both and rejects new rules.
    """

    def __init__(self):
        """
        Initialize an empty validation rule set.

        Creates a new rule set with no rules. Rules can be added using the
        add_rule and add_object_rule methods.
        """
        self.rules: Dict[str, List[ValidationRule]] = {}
        self.object_rules: List[ObjectRule] = []
        self._frozen = False

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "ValidationRuleSet":
        """Make the rule set read-only and return it."""
        self.rules = types.MappingProxyType(
            {field: tuple(rules) for field, rules in self.rules.items()}
        )
        self.object_rules = tuple(self.object_rules)
        self._frozen = True
        return self

    def _check_mutable(self) -> None:
        if self._frozen:
            raise TypeError("Cannot add rules to a frozen rule set")

    def add_rule(self, field: str, rule: ValidationRule) -> None:
        """
        Add a validation rule for a member.

        Multiple rules can be added for the same member, and they will be
        applied in the order they were added.

        Example:
            >>> rule_set = ValidationRuleSet()
            >>> rule_set.add_rule('age', RangeRule(0, 120, "Age must be between 0 and 120"))
            >>> rule_set.add_rule('age', RequiredRule("Age is required"))
        """
        self._check_mutable()
        if field not in self.rules:
            self.rules[field] = []
        self.rules[field].append(rule)

    def add_object_rule(self, rule: ObjectRule) -> None:
        self._check_mutable()
        self.object_rules.append(rule)

    @classmethod
    def from_descriptors(
        cls, descriptors: Tuple[PropertyDescriptor, ...], object_rules: Tuple[ObjectRule, ...] = ()
    ) -> "ValidationRuleSet":
        rule_set = cls()
        for descriptor in descriptors:
            for rule in descriptor.rules:
                rule_set.add_rule(descriptor.name, rule)
        for rule in object_rules:
            rule_set.add_object_rule(rule)
        return rule_set

    def validate(
        self,
        instance: Any,
        evaluate_all_rules: bool = True,
        deferred: Collection[str] = (),
        context: Optional[ValidationContext] = None,
    ) -> Tuple[bool, FailureSet]:
        """
        Validate an object's own members against the rule set.

        Rules for each member are applied in the order they were added. When a
        member's RequiredRule fails, its remaining rules are skipped. Object
        rules run only once every member rule has passed.

        Args:
            instance: Object whose members are checked
            evaluate_all_rules: Collect every failure when True; stop at the
                first failing rule when False
            deferred: Members whose RequiredRule is left to the caller when
                they hold None
            context: Context describing ``instance``; created when omitted

        Returns:
            Tuple of (passed, failures)

        Example:
            >>> rule_set = ValidationRuleSet()
            >>> rule_set.add_rule('age', RangeRule(0, 120))
            >>> passed, failures = rule_set.validate(Person(age=150))
            >>> passed
            False
            >>> failures.messages
            ['The field age must be between 0 and 120.']
        """
        context = context or ValidationContext(instance=instance)
        failures = FailureSet()

        for field, rules in self.rules.items():
            member_context = context.for_member(field)
            value = read_member(instance, field)
            for rule in rules:
                if value is None and field in deferred and isinstance(rule, RequiredRule):
                    continue
                if self._check(rule, value, member_context):
                    continue
                failures.add(FailureRecord(rule.format_message(field, value), (field,)))
                if not evaluate_all_rules:
                    return False, failures
                if isinstance(rule, RequiredRule):
                    break

        if failures:
            return False, failures

        name = type(instance).__name__
        for object_rule in self.object_rules:
            if self._check(object_rule, instance, context):
                continue
            failures.add(
                FailureRecord(object_rule.format_message(name, instance), object_rule.member_names)
            )
            if not evaluate_all_rules:
                break

        return not failures, failures

    @staticmethod
    def _check(rule: ValidationRule, value: Any, context: ValidationContext) -> bool:
        try:
            return rule.is_valid(value, context)
        except (TypeError, ValueError) as e:
            # A rule that cannot handle the value's type rejects it.
            logger.debug(f"{rule!r} rejected {context.member_name or 'object'}: {e}")
            return False


class RuleEvaluator:
    """
    Evaluates the rules attached to one object's own members.

    The evaluator never descends into nested objects; that is the graph
    validator's job.
    """

    def __init__(self, opaque_types=DEFAULT_OPAQUE_TYPES):
        self.opaque_types = frozenset(opaque_types)

    def rule_set_for(self, cls: type) -> ValidationRuleSet:
        """Return the shared, frozen rule set for ``cls``."""
        return _rule_set_for(cls, self.opaque_types)

    def evaluate(
        self,
        instance: Any,
        evaluate_all_rules: bool = True,
        deferred: Collection[str] = (),
        context: Optional[ValidationContext] = None,
    ) -> Tuple[bool, FailureSet]:
        """
        Evaluate every rule attached to ``instance``'s own members.

        Returns:
            Tuple of (passed, failures); failures is empty when passed is True
        """
        rule_set = self.rule_set_for(type(instance))
        return rule_set.validate(instance, evaluate_all_rules, deferred, context)


@lru_cache(maxsize=None)
def _rule_set_for(cls: type, opaque_types) -> ValidationRuleSet:
    object_rules: List[ObjectRule] = []
    for klass in reversed(cls.__mro__):
        object_rules.extend(klass.__dict__.get(OBJECT_RULES_ATTR, ()))
    rule_set = ValidationRuleSet.from_descriptors(describe_type(cls, opaque_types), tuple(object_rules))
    return rule_set.freeze()

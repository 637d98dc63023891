"""
Recursive object-graph validation.

The graph validator walks an object depth first. At every node it runs the rule
evaluator on the node's own members; only when those pass, and only when
recursion was requested, does it look at the node's eligible properties:

1. A property holding None fails the traversal if it is marked required.
2. A collection property has every element validated; all element failures
   are gathered before the property is judged.
3. Any other property value is validated as a nested object.

A loosely typed property (Any, a union or an untyped collection) whose runtime
value has type hints that cannot be resolved is skipped with a warning. When
the declared type itself cannot be resolved, ValidationError is raised.

The first property that fails stops the walk at its level. Its failures are
prefixed with the property name, so a failure found three levels down reaches
the caller as ``'Order' -> 'Customer' -> 'The Name field is required.'``.
"""

import logging
from typing import Any, List, Optional, Set, Tuple

from ...core.config import ValidatorConfig
from ...core.exceptions import ArgumentNullError, ValidationError
from ...core.models import FailureRecord, FailureSet, ValidationContext
from .base import ValidationResult
from .inspection import (
    PropertyDescriptor,
    describe_type,
    eligible_properties,
    is_traversable_value,
)
from .ruleset import RuleEvaluator

logger = logging.getLogger(__name__)


class GraphValidator:
    """
    Depth-first validator for object graphs.

    A validator holds only configuration and is safe to reuse and share;
    every call to validate() keeps its traversal state on its own stack.

    Attributes:
        config (ValidatorConfig): Traversal settings
        evaluator (RuleEvaluator): Evaluator applied to each node
    """

    def __init__(self, config: Optional[ValidatorConfig] = None):
        self.config = config or ValidatorConfig()
        self.evaluator = RuleEvaluator(self.config.opaque_types)

    def validate(
        self, instance: Any, evaluate_all_rules: bool = True, recursive: bool = True
    ) -> ValidationResult:
        """
        Validate ``instance`` and, when ``recursive`` is set, its eligible
        nested properties.

        Args:
            instance: Root object to validate
            evaluate_all_rules: Collect every rule failure of a node when True;
                stop at the first failing rule when False
            recursive: Descend into eligible properties when True

        Returns:
            ValidationResult with the overall outcome and the failures found

        Raises:
            ArgumentNullError: If ``instance`` is None
        """
        if instance is None:
            raise ArgumentNullError("instance", "The object to validate should not be null!")

        walk = _Walk(self, evaluate_all_rules, recursive)
        valid, failures = walk.visit(instance, ValidationContext(instance=instance))

        logger.debug(
            f"Validated {type(instance).__name__}: valid={valid}, "
            f"failures={len(failures)}, nodes={walk.nodes_visited}"
        )
        return ValidationResult(
            is_valid=valid,
            failures=failures,
            warnings=walk.warnings,
            context={
                "root_type": type(instance).__name__,
                "recursive": recursive,
                "evaluate_all_rules": evaluate_all_rules,
                "nodes_visited": walk.nodes_visited,
            },
        )

    def is_valid(self, instance: Any, evaluate_all_rules: bool = False, recursive: bool = True) -> bool:
        """Shorthand returning only the outcome; fail-fast by default."""
        return self.validate(instance, evaluate_all_rules, recursive).is_valid


class _Walk:
    """Traversal state for one validate() call."""

    def __init__(self, validator: GraphValidator, evaluate_all_rules: bool, recursive: bool):
        self.config = validator.config
        self.evaluator = validator.evaluator
        self.evaluate_all_rules = evaluate_all_rules
        self.recursive = recursive
        self.warnings: List[str] = []
        self.nodes_visited = 0
        # Identities of the objects on the current descent path.
        self._ancestors: Set[int] = set()

    def visit(self, instance: Any, context: ValidationContext) -> Tuple[bool, FailureSet]:
        self.nodes_visited += 1
        properties = self._properties(instance) if self.recursive else ()

        passed, failures = self.evaluator.evaluate(
            instance,
            self.evaluate_all_rules,
            deferred=frozenset(p.name for p in properties),
            context=context,
        )
        if not passed:
            logger.debug(f"{_where(context)}: own rules failed, not descending")
            return False, failures
        if not self.recursive:
            return True, FailureSet()

        failures = FailureSet()
        self._ancestors.add(id(instance))
        try:
            for prop in properties:
                value = prop.read(instance)
                if value is None:
                    if prop.is_required:
                        record = FailureRecord(self.config.required_null_message)
                        failures.add(record.prefixed(prop.name, self.config.path_separator))
                        logger.debug(f"{_where(context)}: required property {prop.name} is null")
                        return False, failures
                    continue

                valid, nested = self._visit_property(prop, value, context)
                if not valid:
                    failures.extend(nested.prefixed(prop.name, self.config.path_separator))
                    logger.debug(
                        f"{_where(context)}: property {prop.name} failed, "
                        f"skipping remaining properties"
                    )
                    return False, failures
        finally:
            self._ancestors.discard(id(instance))

        return True, failures

    def _properties(self, instance: Any) -> Tuple[PropertyDescriptor, ...]:
        return eligible_properties(type(instance), self.config.opaque_types)

    def _visit_property(
        self, prop: PropertyDescriptor, value: Any, context: ValidationContext
    ) -> Tuple[bool, FailureSet]:
        child_context = context.child(value, prop.name)
        if not prop.holds_collection(value):
            return self._descend(value, child_context, prop.is_loosely_typed)

        valid = True
        failures = FailureSet()
        for element in prop.iter_elements(value):
            # A failing element does not stop its siblings.
            element_valid, element_failures = self._descend(
                element, context.child(element, prop.name), prop.is_loosely_typed
            )
            valid = valid and element_valid
            failures.extend(element_failures)
        return valid, failures

    def _descend(
        self, value: Any, context: ValidationContext, loose: bool = False
    ) -> Tuple[bool, FailureSet]:
        if not is_traversable_value(value, self.config.opaque_types):
            return True, FailureSet()
        if self.config.detect_cycles and id(value) in self._ancestors:
            message = f"Cycle detected at {_where(context)}; {type(value).__name__} not revisited"
            logger.warning(message)
            self.warnings.append(message)
            return True, FailureSet()
        if loose and not self._describable(value, context):
            return True, FailureSet()
        return self.visit(value, context)

    def _describable(self, value: Any, context: ValidationContext) -> bool:
        try:
            describe_type(type(value), self.config.opaque_types)
        except ValidationError as e:
            message = (
                f"Cannot inspect {type(value).__name__} at {_where(context)}; not validated: {e}"
            )
            logger.warning(message)
            self.warnings.append(message)
            return False
        return True


def _where(context: ValidationContext) -> str:
    if not context.path:
        return context.object_type.__name__
    return ".".join(context.path)


def validate_graph(
    instance: Any,
    evaluate_all_rules: bool = True,
    recursive: bool = True,
    config: Optional[ValidatorConfig] = None,
) -> ValidationResult:
    """
    Validate an object graph with a validator built from ``config``.

    Example:
        >>> result = validate_graph(order)
        >>> result.is_valid
        False
        >>> result.errors
        ["'customer' -> 'The name field is required.'"]
    """
    return GraphValidator(config).validate(instance, evaluate_all_rules, recursive)

"""
Tests for rule sets and the per-object rule evaluator.
"""

from dataclasses import dataclass
from typing import Annotated, Any, Optional

import pytest

from graphguard.utils.validation.base import (
    CompareRule,
    CustomRule,
    LengthRule,
    ObjectRule,
    RangeRule,
    RequiredRule,
    object_rule,
)
from graphguard.utils.validation.ruleset import RuleEvaluator, ValidationRuleSet
from sample_models import Customer, Order


@dataclass
class Person:
    name: Annotated[str, RequiredRule(), LengthRule(2, 10)]
    age: Annotated[int, RangeRule(0, 120)] = 30


@dataclass
class Account:
    password: Annotated[str, RequiredRule()]
    confirm: Annotated[str, CompareRule("password")] = ""


@object_rule(lambda p: p.start <= p.end, "start must not be after end", member_names=("start", "end"))
@dataclass
class Period:
    start: Annotated[int, RangeRule(0, 100)]
    end: int


@object_rule(lambda p: p.end - p.start <= 10, "periods are limited to 10 units")
@dataclass
class ShortPeriod(Period):
    pass


@dataclass
class Loose:
    payload: Annotated[Any, RequiredRule()] = None


class Labelled:
    @property
    def label(self) -> Annotated[Optional[str], RequiredRule()]:
        return self.missing.label


@pytest.fixture
def evaluator() -> RuleEvaluator:
    """Fixture providing a rule evaluator with default settings."""
    return RuleEvaluator()


def test_manual_rule_set():
    """Test building and applying a rule set by hand."""
    rule_set = ValidationRuleSet()
    rule_set.add_rule("age", RangeRule(0, 120, "Age must be between 0 and 120"))
    rule_set.add_rule("age", CustomRule(lambda v: v % 2 == 0, "Age must be even"))

    passed, failures = rule_set.validate(Person(name="Ada", age=151))
    assert not passed
    assert failures.messages == ["Age must be between 0 and 120", "Age must be even"]
    assert failures.member_names == ["age", "age"]


def test_valid_instance(evaluator):
    """Test a valid instance yields no failures."""
    passed, failures = evaluator.evaluate(Person(name="Ada"))
    assert passed
    assert not failures


def test_evaluate_all_rules_collects_every_member(evaluator):
    """Test exhaustive evaluation reports every failing member."""
    passed, failures = evaluator.evaluate(Person(name="A", age=-1))
    assert not passed
    assert failures.member_names == ["name", "age"]
    assert failures.messages[1] == "The field age must be between 0 and 120."


def test_fail_fast_stops_at_first_failure(evaluator):
    """Test fail-fast evaluation reports exactly one failure."""
    passed, failures = evaluator.evaluate(Person(name="A", age=-1), evaluate_all_rules=False)
    assert not passed
    assert len(failures) == 1
    assert failures.member_names == ["name"]


def test_failed_required_rule_skips_remaining_member_rules(evaluator):
    """Test an empty required member is reported once."""
    passed, failures = evaluator.evaluate(Person(name=""))
    assert not passed
    assert failures.messages == ["The name field is required."]


def test_compare_rule_reads_sibling(evaluator):
    """Test member rules can consult the owning object."""
    assert evaluator.evaluate(Account(password="s3cret", confirm="s3cret"))[0]
    passed, failures = evaluator.evaluate(Account(password="s3cret", confirm="typo"))
    assert not passed
    assert failures.messages == ["'confirm' and 'password' do not match."]


def test_object_rules_run_after_member_rules(evaluator):
    """Test object rules only run when every member rule passed."""
    passed, failures = evaluator.evaluate(Period(start=5, end=1))
    assert not passed
    assert failures.messages == ["start must not be after end"]
    assert failures.member_names == ["start", "end"]

    passed, failures = evaluator.evaluate(Period(start=500, end=1))
    assert failures.member_names == ["start"]


def test_object_rules_are_inherited(evaluator):
    """Test base class object rules run before subclass rules."""
    passed, failures = evaluator.evaluate(ShortPeriod(start=50, end=10))
    assert failures.messages == ["start must not be after end"]

    passed, failures = evaluator.evaluate(ShortPeriod(start=0, end=50))
    assert failures.messages == ["periods are limited to 10 units"]


def test_deferred_required_rule_is_left_to_caller(evaluator):
    """Test deferred members holding None skip their RequiredRule."""
    order = Order(number="ORD-1", customer=None)
    assert not evaluator.evaluate(order)[0]
    assert evaluator.evaluate(order, deferred={"customer"})[0]


def test_deferred_required_rule_still_checks_values(evaluator):
    """Test deferral only applies to None values."""
    passed, failures = evaluator.evaluate(Loose(payload="  "), deferred={"payload"})
    assert not passed
    assert failures.messages == ["The payload field is required."]


def test_rule_type_errors_are_failures(evaluator):
    """Test a rule that cannot handle a value rejects it."""
    passed, failures = evaluator.evaluate(Person(name=12345))
    assert not passed
    assert failures.member_names == ["name"]


def test_rule_sets_are_memoized(evaluator):
    """Test rule sets are built once per type."""
    assert evaluator.rule_set_for(Customer) is RuleEvaluator().rule_set_for(Customer)
    assert list(evaluator.rule_set_for(Customer).rules) == ["name", "email"]


def test_shared_rule_sets_are_frozen(evaluator):
    """Test a memoized rule set rejects new rules and exposes read-only views."""
    rule_set = evaluator.rule_set_for(Customer)
    assert rule_set.is_frozen
    with pytest.raises(TypeError, match="frozen rule set"):
        rule_set.add_rule("name", LengthRule(1, 2))
    with pytest.raises(TypeError, match="frozen rule set"):
        rule_set.add_object_rule(ObjectRule(lambda c: False, "never"))
    with pytest.raises(TypeError):
        rule_set.rules["name"] = []
    assert isinstance(rule_set.rules["name"], tuple)

    passed, _ = evaluator.evaluate(Customer(name="A"))
    assert passed


def test_getter_errors_are_not_rule_failures(evaluator):
    """Test an AttributeError raised by a getter propagates to the caller."""
    with pytest.raises(AttributeError, match="missing"):
        evaluator.evaluate(Labelled())

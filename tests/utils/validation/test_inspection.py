"""
Tests for type inspection and property eligibility.
"""

from dataclasses import InitVar, dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, ClassVar, Dict, Iterator, List, NewType, Optional, Set, Tuple, Union
from uuid import UUID

import pytest

from graphguard.core.exceptions import ValidationError
from graphguard.utils.validation.base import LengthRule, RequiredRule
from graphguard.utils.validation.inspection import (
    classify,
    describe_type,
    eligible_properties,
    is_traversable_value,
    read_member,
    unwrap_type,
)
from sample_models import Address, Counted, Customer, Order, OrderLine


class Color(Enum):
    RED = 1


CustomerId = NewType("CustomerId", str)
CustomerRef = NewType("CustomerRef", Customer)


@dataclass
class Everything:
    count: int
    ratio: float
    flag: bool
    color: Color
    name: str
    created: datetime
    amount: Decimal
    ident: UUID
    path: Path
    customer_id: CustomerId
    tags: List[str]
    scores: Dict[str, int]
    customer: Customer
    customer_ref: CustomerRef
    maybe: Optional[Address]
    lines: List[OrderLine]
    by_key: Dict[str, OrderLine]
    unique: Set[Address]
    pair: Tuple[Address, ...]
    anything: Any
    either: Union[Address, int]
    cursor: Iterator[Address]
    kind: type


@dataclass
class WithSkipped:
    public: Annotated[str, RequiredRule()]
    _private: Optional[Address] = None
    shared: ClassVar[int] = 0
    seed: InitVar[int] = 0
    items: List[OrderLine] = field(default_factory=list)


class WithProperties:
    def __init__(self):
        self._address = Address(street="1 Main St")

    @property
    def address(self) -> Annotated[Optional[Address], RequiredRule()]:
        return self._address

    @address.setter
    def address(self, value: Optional[Address]) -> None:
        self._address = value

    @property
    def read_only(self) -> Address:
        return self._address


@dataclass(frozen=True)
class FrozenHolder:
    customer: Optional[Customer] = None


class Mixed:
    """Property declared above an annotated attribute."""

    def __init__(self, a: Customer, b: Customer):
        self._a = a
        self.b = b

    @property
    def a(self) -> Optional[Customer]:
        return self._a

    @a.setter
    def a(self, value: Optional[Customer]) -> None:
        self._a = value

    b: Optional[Customer] = None


class MixedChild(Mixed):
    c: Optional[Address] = None


class FailingGetter:
    label: Optional[str] = None

    @property
    def customer(self) -> Optional[Customer]:
        return self.missing.customer


def names(descriptors):
    return [d.name for d in descriptors]


def test_unwrap_type_collects_rules_in_order():
    """Test Annotated rules are collected and Optional is stripped."""
    required, length = RequiredRule(), LengthRule(1, 5)
    base, rules = unwrap_type(Annotated[Optional[str], required, length, "not a rule"])
    assert base is str
    assert rules == [required, length]


def test_unwrap_type_keeps_real_unions():
    """Test unions of several non-None members are kept."""
    base, _ = unwrap_type(Optional[Union[int, str]])
    assert base == Union[int, str]


@pytest.mark.parametrize(
    "name",
    ["count", "ratio", "flag", "color", "name", "created", "amount", "ident", "path",
     "customer_id", "tags", "scores", "cursor", "kind"],
)
def test_scalars_and_opaque_leaves_are_not_eligible(name):
    """Test value types, opaque leaves and their collections are skipped."""
    descriptor = {d.name: d for d in describe_type(Everything)}[name]
    assert not descriptor.is_eligible


@pytest.mark.parametrize(
    "name,is_collection",
    [
        ("customer", False),
        ("customer_ref", False),
        ("maybe", False),
        ("lines", True),
        ("by_key", True),
        ("unique", True),
        ("pair", True),
        ("anything", None),
        ("either", None),
    ],
)
def test_reference_types_are_eligible(name, is_collection):
    """Test objects and collections of objects are descended into."""
    descriptor = {d.name: d for d in describe_type(Everything)}[name]
    assert descriptor.is_eligible
    assert descriptor.is_collection is is_collection


def test_collection_element_type():
    """Test element types are recorded for collections."""
    descriptors = {d.name: d for d in describe_type(Everything)}
    assert descriptors["lines"].element_type is OrderLine
    assert descriptors["by_key"].element_type is OrderLine
    assert descriptors["pair"].element_type is Address


def test_declaration_order():
    """Test descriptors follow declaration order."""
    assert names(describe_type(Order)) == ["number", "customer", "lines", "lines_by_sku"]
    assert names(eligible_properties(Order)) == ["customer", "lines", "lines_by_sku"]


def test_private_classvar_and_initvar_are_skipped():
    """Test non-member annotations are not described."""
    assert names(describe_type(WithSkipped)) == ["public", "items"]


def test_rules_are_attached_to_descriptors():
    """Test Annotated rules end up on the descriptor."""
    descriptor = describe_type(Customer)[0]
    assert descriptor.name == "name"
    assert descriptor.is_required
    assert isinstance(descriptor.rules[0], RequiredRule)


def test_properties_need_a_setter_to_be_eligible():
    """Test read-only properties are described but not descended into."""
    descriptors = {d.name: d for d in describe_type(WithProperties)}
    assert descriptors["address"].is_eligible
    assert descriptors["address"].is_required
    assert descriptors["address"].is_writable
    assert not descriptors["read_only"].is_eligible
    assert not descriptors["read_only"].is_writable


def test_frozen_dataclass_fields_are_not_eligible():
    """Test fields of a frozen dataclass cannot be assigned and are skipped."""
    descriptor = describe_type(FrozenHolder)[0]
    assert descriptor.name == "customer"
    assert not descriptor.is_writable
    assert not descriptor.is_eligible
    assert eligible_properties(FrozenHolder) == ()


def test_members_follow_class_body_order():
    """Test properties and annotations interleave as written, bases first."""
    assert names(describe_type(Mixed)) == ["a", "b"]
    assert names(describe_type(MixedChild)) == ["a", "b", "c"]


def test_member_order_without_source():
    """Test classes built at runtime list annotations before properties."""
    built = type(
        "Built",
        (),
        {
            "p": property(lambda self: None),
            "__annotations__": {"x": Optional[Customer]},
        },
    )
    assert names(describe_type(built)) == ["x", "p"]


def test_read_member_propagates_getter_errors():
    """Test a failing property getter is not mistaken for a missing value."""
    instance = FailingGetter()
    assert read_member(instance, "label") is None
    with pytest.raises(AttributeError, match="missing"):
        read_member(instance, "customer")
    with pytest.raises(AttributeError, match="missing"):
        describe_type(FailingGetter)[1].read(instance)


def test_unset_annotation_reads_as_none():
    """Test an annotated attribute that was never assigned reads as None."""
    descriptor = describe_type(Counted)[0]
    assert descriptor.read(object.__new__(Counted)) is None


@pytest.mark.parametrize(
    "name,expected",
    [("anything", True), ("either", True), ("customer", False), ("lines", False), ("tags", False)],
)
def test_is_loosely_typed(name, expected):
    """Test which declarations leave the value shape to runtime."""
    descriptor = {d.name: d for d in describe_type(Everything)}[name]
    assert descriptor.is_loosely_typed is expected


def test_annotated_class_with_property():
    """Test plain classes mix annotations and properties."""
    assert names(describe_type(Counted)) == ["label", "child"]
    assert names(eligible_properties(Counted)) == ["child"]


def test_custom_opaque_types():
    """Test configured opaque types are not descended into."""
    opaque = frozenset({str, Address})
    assert "maybe" not in names(eligible_properties(Everything, opaque))
    assert "customer" in names(eligible_properties(Everything, opaque))


def test_describe_type_is_memoized():
    """Test descriptor tables are computed once per type."""
    assert describe_type(Order) is describe_type(Order)


def test_unresolvable_hints():
    """Test unresolvable annotations raise ValidationError."""

    @dataclass
    class Broken:
        missing: "DoesNotExist"  # noqa: F821

    with pytest.raises(ValidationError, match="Unable to resolve type hints for Broken"):
        describe_type(Broken)


def test_classify_any_defers_to_runtime():
    """Test loose declarations are decided by the runtime value."""
    assert classify(Any) == (True, None, None)
    assert classify(List[Any]) == (True, True, Any)


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, False),
        (3, False),
        ("text", False),
        (Color.RED, False),
        (Address, False),
        (len, False),
        (iter([1]), False),
        (Address(street="x"), True),
        ([1, 2], True),
    ],
)
def test_is_traversable_value(value, expected):
    """Test which runtime values can be descended into."""
    assert is_traversable_value(value) is expected

"""Shared test fixtures."""

import pytest

from sample_models import Address, Customer, Order, OrderLine


@pytest.fixture
def valid_customer() -> Customer:
    """Fixture providing a customer that passes every rule."""
    return Customer(
        name="Ada Lovelace",
        email="ada@example.com",
        address=Address(street="12 Analytical Row", city="London"),
    )


@pytest.fixture
def valid_order(valid_customer) -> Order:
    """Fixture providing an order whose whole graph is valid."""
    return Order(
        number="ORD-1",
        customer=valid_customer,
        lines=[OrderLine(sku="A-1", quantity=2), OrderLine(sku="B-2", quantity=5)],
        lines_by_sku={"C-3": OrderLine(sku="C-3", quantity=1)},
    )

"""Shared test fixtures."""

import pytest

from skima import BusinessRuleResult, SchemaRegistry, ValidationContext

from .entities import Customer, Order, OrderItem


class RecordingGuard:
    """Guard stub that records every entity it is asked to check."""

    def __init__(self, result: BusinessRuleResult | None = None):
        self.result = result or BusinessRuleResult.success()
        self.calls = []

    def validate(self, entity):
        self.calls.append(entity)
        return self.result


@pytest.fixture
def valid_order() -> Order:
    """Fixture providing an order that passes every syntactic rule."""
    return Order(
        order_number="A-100",
        customer_email="jane@acme.org",
        customer=Customer(name="Jane", email="jane@acme.org"),
        order_items=[
            OrderItem(item_id=1, quantity=2, start_date="2024-05-01", end_date="2024-05-03"),
            OrderItem(item_id=2, quantity=1),
        ],
    )


@pytest.fixture
def invalid_order() -> Order:
    """Fixture providing the order of the reference scenario."""
    return Order(order_number="", customer_email="bad", order_items=[OrderItem(quantity=-1)])


@pytest.fixture
def context() -> ValidationContext:
    """Fixture providing a fresh validation context."""
    return ValidationContext(registry=SchemaRegistry())


@pytest.fixture
def recording_guard():
    return RecordingGuard()


@pytest.fixture
def make_guard():
    """Fixture providing a factory of recording guards returning a fixed result."""
    return RecordingGuard

"""Tests for the Order status workflow — transition table, stamping and no-op updates."""

import pytest
from protean.exceptions import ValidationError
from storefront.errors import ForbiddenError, InvalidStatusTransition, NotCancellable
from storefront.order.events import OrderCancelled, OrderStatusChanged
from storefront.order.order import Order, OrderStatus

ADDRESS = {
    "name": "Asha Rao",
    "phone": "+919812345678",
    "address": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "country": "India",
    "postal_code": "560001",
}


def _make_order(**overrides):
    defaults = {
        "customer_id": "cust-001",
        "lines": [
            {"product_id": "prod-001", "name": "Toor Dal", "price": 120.0, "quantity": 2, "image": "dal.jpg"},
        ],
        "shipping_address": ADDRESS,
        "payment_method": "cash",
    }
    defaults.update(overrides)
    order = Order.place(**defaults)
    order._events.clear()
    return order


def _order_at(status):
    order = _make_order()
    path = {
        OrderStatus.PENDING: [],
        OrderStatus.CONFIRMED: ["confirmed"],
        OrderStatus.PROCESSING: ["confirmed", "processing"],
        OrderStatus.SHIPPED: ["confirmed", "processing", "shipped"],
        OrderStatus.DELIVERED: ["confirmed", "processing", "shipped", "delivered"],
        OrderStatus.CANCELLED: ["cancelled"],
        OrderStatus.RETURNED: ["confirmed", "processing", "shipped", "delivered", "returned"],
    }[status]
    for step in path:
        order.update_status(step)
    order._events.clear()
    return order


ALLOWED = [
    ("pending", "confirmed"),
    ("pending", "processing"),
    ("pending", "shipped"),
    ("pending", "delivered"),
    ("pending", "cancelled"),
    ("confirmed", "processing"),
    ("confirmed", "cancelled"),
    ("processing", "shipped"),
    ("processing", "cancelled"),
    ("shipped", "delivered"),
    ("shipped", "cancelled"),
    ("shipped", "returned"),
    ("delivered", "returned"),
]

REJECTED = [
    ("pending", "returned"),
    ("confirmed", "pending"),
    ("processing", "confirmed"),
    ("shipped", "processing"),
    ("delivered", "cancelled"),
    ("delivered", "shipped"),
    ("cancelled", "pending"),
    ("cancelled", "confirmed"),
    ("returned", "delivered"),
]


class TestTransitionTable:
    @pytest.mark.parametrize("current,target", ALLOWED)
    def test_allowed(self, current, target):
        order = _order_at(OrderStatus(current))
        assert order.update_status(target) is True
        assert order.status == target

    @pytest.mark.parametrize("current,target", REJECTED)
    def test_rejected(self, current, target):
        order = _order_at(OrderStatus(current))
        with pytest.raises(InvalidStatusTransition):
            order.update_status(target)
        assert order.status == current

    def test_unknown_status_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            _make_order().update_status("lost")

    def test_raises_status_changed_event(self):
        order = _make_order()
        order.update_status("confirmed")
        event = order._events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "pending"
        assert event.new_status == "confirmed"

    def test_admin_cancel_raises_order_cancelled(self):
        order = _make_order()
        order.update_status("cancelled")
        assert any(isinstance(e, OrderCancelled) and e.cancelled_by == "admin" for e in order._events)
        assert order.cancelled_at is not None


class TestStamping:
    def test_shipping_stamps_and_records_tracking(self):
        order = _order_at(OrderStatus.PROCESSING)
        order.update_status("shipped", tracking_number="TRK-1", carrier="BlueDart")
        assert order.shipped_at is not None
        assert order.tracking_number == "TRK-1"
        assert order.carrier == "BlueDart"

    def test_delivery_stamps(self):
        order = _order_at(OrderStatus.SHIPPED)
        order.update_status("delivered")
        assert order.delivered_at is not None

    def test_repeating_status_does_not_restamp(self):
        order = _order_at(OrderStatus.SHIPPED)
        shipped_at = order.shipped_at
        updated_at = order.updated_at

        assert order.update_status("shipped") is False
        assert order.shipped_at == shipped_at
        assert order.updated_at == updated_at
        assert order._events == []

    def test_repeating_delivered_keeps_timestamp(self):
        order = _order_at(OrderStatus.DELIVERED)
        delivered_at = order.delivered_at
        order.update_status("delivered")
        assert order.delivered_at == delivered_at

    def test_repeating_shipped_still_applies_tracking(self):
        order = _order_at(OrderStatus.SHIPPED)
        shipped_at = order.shipped_at

        order.update_status("shipped", tracking_number="TRK-2")
        assert order.tracking_number == "TRK-2"
        assert order.shipped_at == shipped_at
        assert order.status == "shipped"


class TestCustomerCancellation:
    @pytest.mark.parametrize("status", ["pending", "confirmed", "processing", "shipped"])
    def test_cancellable_states(self, status):
        order = _order_at(OrderStatus(status))
        order.cancel()
        assert order.status == "cancelled"
        event = order._events[-1]
        assert isinstance(event, OrderCancelled)
        assert event.cancelled_by == "customer"

    @pytest.mark.parametrize("status", ["delivered", "cancelled", "returned"])
    def test_not_cancellable_states(self, status):
        order = _order_at(OrderStatus(status))
        with pytest.raises(NotCancellable):
            order.cancel()
        assert order.status == status

    def test_ownership(self):
        order = _make_order(customer_id="cust-001")
        order.ensure_owned_by("cust-001")
        with pytest.raises(ForbiddenError):
            order.ensure_owned_by("cust-002")

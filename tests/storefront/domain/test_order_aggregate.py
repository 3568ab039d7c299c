"""Tests for Order placement snapshots, payment and redeem bookkeeping."""

import re

import pytest
from protean.exceptions import ValidationError
from storefront.errors import ConflictError
from storefront.order.events import OrderPlaced, PaymentRefunded, RedeemPointsAwarded
from storefront.order.order import Order, generate_order_number

ADDRESS = {
    "name": "Asha Rao",
    "phone": "+919812345678",
    "address": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "country": "India",
    "postal_code": "560001",
}

LINES = [
    {"product_id": "prod-001", "name": "Toor Dal", "price": 120.0, "quantity": 2, "image": "dal.jpg"},
    {"product_id": "prod-002", "name": "Ghee", "price": 560.0, "quantity": 1, "selected_size": "1L"},
]


def _place(**overrides):
    defaults = {
        "customer_id": "cust-001",
        "lines": LINES,
        "shipping_address": ADDRESS,
        "payment_method": "cash",
    }
    defaults.update(overrides)
    return Order.place(**defaults)


class TestOrderNumber:
    def test_format(self):
        assert re.fullmatch(r"ORD\d{13}\d{3}", generate_order_number())


class TestPlace:
    def test_snapshots_lines(self):
        order = _place()
        assert len(order.items) == 2
        dal = next(i for i in order.items if i.product_id == "prod-001")
        assert dal.name == "Toor Dal"
        assert dal.price == 120.0
        assert dal.image == "dal.jpg"
        ghee = next(i for i in order.items if i.product_id == "prod-002")
        assert ghee.selected_size == "1L"
        assert ghee.image == ""

    def test_pricing(self):
        order = _place()
        assert order.pricing.items_price == 800.0
        assert order.pricing.tax_price == 144.0
        assert order.pricing.shipping_price == 0.0
        assert order.pricing.total_price == 944.0
        assert order.pricing.currency == "INR"

    def test_cash_orders_are_pending_payment(self):
        order = _place(payment_method="cash")
        assert order.status == "pending"
        assert order.payment_status == "pending"
        assert order.paid_at is None

    def test_online_orders_are_paid(self):
        order = _place(payment_method="online")
        assert order.payment_status == "paid"
        assert order.paid_at is not None

    def test_online_reorders_start_unpaid(self):
        order = _place(payment_method="online", is_reorder=True, original_order_id="order-001")
        assert order.payment_status == "pending"
        assert order.is_reorder is True

    def test_copies_shipping_address(self):
        order = _place()
        assert order.shipping_address.city == "Bengaluru"
        assert order.shipping_name == "Asha Rao"

    def test_raises_order_placed(self):
        order = _place()
        event = order._events[-1]
        assert isinstance(event, OrderPlaced)
        assert event.total_price == 944.0
        assert event.is_reorder is False

    def test_rejects_unknown_payment_method(self):
        with pytest.raises(ValidationError):
            _place(payment_method="cheque")

    def test_rejects_no_lines(self):
        with pytest.raises(ValidationError):
            _place(lines=[])


class TestPayment:
    def test_paid_stamps_and_stores_reference(self):
        order = _place()
        order.update_payment("paid", payment_reference="pay_123")
        assert order.payment_status == "paid"
        assert order.payment_reference == "pay_123"
        assert order.paid_at is not None

    def test_failed(self):
        order = _place()
        order.update_payment("failed")
        assert order.payment_status == "failed"
        assert order.paid_at is None

    def test_customer_cannot_set_refunded(self):
        with pytest.raises(ValidationError):
            _place().update_payment("refunded")

    def test_refund_paid_order(self):
        order = _place(payment_method="online")
        order.refund(reason="Damaged")
        assert order.payment_status == "refunded"
        assert order.refunded_at is not None
        assert isinstance(order._events[-1], PaymentRefunded)

    def test_refund_requires_paid(self):
        order = _place(payment_method="cash")
        with pytest.raises(ConflictError):
            order.refund()


class TestRedeemPoints:
    def test_records_first_award(self):
        order = _place()
        assert order.record_redeem_points(10, rule_id="rule-1") is True
        assert order.redeem_points_earned == 10
        assert isinstance(order._events[-1], RedeemPointsAwarded)

    def test_second_award_is_ignored(self):
        order = _place()
        order.record_redeem_points(10)
        assert order.record_redeem_points(20) is False
        assert order.redeem_points_earned == 10

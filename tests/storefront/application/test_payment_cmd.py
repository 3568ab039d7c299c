"""Application tests for payment status updates and refunds."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from storefront.errors import ConflictError
from storefront.order.order import Order
from storefront.order.payment import RefundPayment, UpdatePaymentStatus


@pytest.fixture
def order_ids(make_product, make_customer, fill_cart, place_order):
    def _place(payment_method="cash"):
        product_id = make_product()
        customer_id = make_customer()
        fill_cart(customer_id, product_id)
        return place_order(customer_id, payment_method=payment_method), customer_id

    return _place


class TestUpdatePaymentStatus:
    def test_mark_paid(self, order_ids):
        order_id, customer_id = order_ids()
        current_domain.process(
            UpdatePaymentStatus(
                order_id=order_id,
                customer_id=customer_id,
                payment_status="paid",
                payment_reference="upi-123",
            ),
            asynchronous=False,
        )

        order = current_domain.repository_for(Order).get(order_id)
        assert order.payment_status == "paid"
        assert order.payment_reference == "upi-123"
        assert order.paid_at is not None

    def test_invalid_status(self, order_ids):
        order_id, customer_id = order_ids()
        with pytest.raises(ValidationError):
            current_domain.process(
                UpdatePaymentStatus(order_id=order_id, customer_id=customer_id, payment_status="refunded"),
                asynchronous=False,
            )

    def test_foreign_order_is_not_found(self, order_ids, make_customer):
        order_id, _ = order_ids()
        stranger = make_customer(phone="+919800000999")
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                UpdatePaymentStatus(order_id=order_id, customer_id=stranger, payment_status="paid"),
                asynchronous=False,
            )


class TestRefundPayment:
    def test_refund_paid_order(self, order_ids):
        order_id, _ = order_ids(payment_method="online")
        current_domain.process(RefundPayment(order_id=order_id, reason="Damaged in transit"), asynchronous=False)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.payment_status == "refunded"
        assert order.refunded_at is not None

    def test_refund_unpaid_order(self, order_ids):
        order_id, _ = order_ids(payment_method="cash")
        with pytest.raises(ConflictError):
            current_domain.process(RefundPayment(order_id=order_id), asynchronous=False)
        assert current_domain.repository_for(Order).get(order_id).payment_status == "pending"

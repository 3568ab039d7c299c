"""Application tests for customer registration, balances and point history."""

import pytest
from protean import current_domain
from storefront.customer.customer import Customer
from storefront.customer.points import SetRedeemPoints
from storefront.errors import ConflictError
from storefront.redeem.awarding import award_redeem_points
from storefront.redeem.balance import point_balance, points_history
from storefront.redeem.management import CreateRedeemRule


class TestRegisterCustomer:
    def test_register(self, make_customer):
        customer = current_domain.repository_for(Customer).get(make_customer(phone="+14155550100"))
        assert customer.phone == "+14155550100"
        assert customer.redeem_points == 0

    def test_duplicate_phone(self, make_customer):
        make_customer(phone="+14155550100")
        with pytest.raises(ConflictError):
            make_customer(phone="+14155550100", name="Someone Else")


class TestRedeemBalance:
    def test_set_and_read(self, make_customer):
        customer_id = make_customer()
        current_domain.process(SetRedeemPoints(customer_id=customer_id, points=42), asynchronous=False)

        balance = point_balance(customer_id)
        assert balance == {
            "customer_id": customer_id,
            "total_points": 42,
            "available_points": 42,
            "point_value": 1.0,
        }

    def test_history_lists_earning_orders(self, make_product, make_customer, fill_cart, place_order):
        current_domain.process(
            CreateRedeemRule(name="Any", description="Any order", min_order_value=100.0, redeem_points=7),
            asynchronous=False,
        )
        customer_id = make_customer()
        cheap = make_product(name="Salt", price=10.0, stock=10)
        dear = make_product(name="Saffron", price=500.0, stock=10)

        fill_cart(customer_id, cheap)
        place_order(customer_id)
        fill_cart(customer_id, dear)
        earning_id = place_order(customer_id)
        award_redeem_points(earning_id)

        history = points_history(customer_id)
        assert history["total"] == 1
        entry = history["history"][0]
        assert entry["order_id"] == earning_id
        assert entry["points_earned"] == 7
        assert entry["order_total"] == 590.0

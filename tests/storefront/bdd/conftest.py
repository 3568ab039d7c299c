"""Shared BDD fixtures and step definitions for the storefront."""

import json

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then, when
from storefront.catalogue.management import AddProduct, UpdateProduct
from storefront.catalogue.product import Product
from storefront.cart.cart import Cart
from storefront.cart.items import AddToCart
from storefront.customer.registration import RegisterCustomer
from storefront.errors import StorefrontError
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder
from storefront.order.status import UpdateOrderStatus

ADDRESS = {
    "name": "Asha Rao",
    "phone": "+919812345678",
    "address": "12 MG Road",
    "city": "Bengaluru",
    "state": "Karnataka",
    "country": "India",
    "postal_code": "560001",
}


@pytest.fixture()
def products():
    """Product ids by name."""
    return {}


@pytest.fixture()
def outcome():
    """Holds the latest order id and any rejected command's error."""
    return {"order_id": None, "error": None}


def _messages(exc):
    return [message for messages in exc.messages.values() for message in messages]


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:g} with {stock:d} in stock'))
def _(products, name, price, stock):
    products[name] = current_domain.process(
        AddProduct(name=name, price=price, stock=stock, images=json.dumps([])),
        asynchronous=False,
    )


@given("a registered customer", target_fixture="customer_id")
def _():
    return current_domain.process(RegisterCustomer(name="Asha Rao", phone="+919812345678"), asynchronous=False)


@given(parsers.cfparse('the customer has {quantity:d} of "{name}" in their cart'))
def _(products, customer_id, quantity, name):
    current_domain.process(
        AddToCart(customer_id=customer_id, product_id=products[name], quantity=quantity),
        asynchronous=False,
    )


@given(parsers.cfparse('"{name}" stock drops to {stock:d}'))
def _(products, name, stock):
    current_domain.process(UpdateProduct(product_id=products[name], stock=stock), asynchronous=False)


# ---------------------------------------------------------------------------
# Steps used as Given or When
# ---------------------------------------------------------------------------
def _place(customer_id, outcome, payment_method):
    try:
        outcome["order_id"] = current_domain.process(
            PlaceOrder(
                customer_id=customer_id,
                payment_method=payment_method,
                shipping_address=json.dumps(ADDRESS),
            ),
            asynchronous=False,
        )
    except StorefrontError as exc:
        outcome["error"] = exc


@given(parsers.re(r"the customer places an? (?P<payment_method>cash|online) order"))
@when(parsers.re(r"the customer places an? (?P<payment_method>cash|online) order"))
def _(customer_id, outcome, payment_method):
    _place(customer_id, outcome, payment_method)


@given(parsers.cfparse('the order is marked "{status}"'))
@when(parsers.cfparse('the order is marked "{status}"'))
def _(outcome, status):
    current_domain.process(UpdateOrderStatus(order_id=outcome["order_id"], status=status), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order is pending with total {total:g}"))
def _(outcome, total):
    order = current_domain.repository_for(Order).get(outcome["order_id"])
    assert order.status == "pending"
    assert order.pricing.total_price == pytest.approx(total)


@then(parsers.cfparse('the order status is "{status}"'))
def _(outcome, status):
    assert current_domain.repository_for(Order).get(outcome["order_id"]).status == status


@then(parsers.cfparse('the order payment is "{payment_status}"'))
def _(outcome, payment_status):
    assert current_domain.repository_for(Order).get(outcome["order_id"]).payment_status == payment_status


@then(parsers.cfparse('the order is rejected with "{message}"'))
def _(outcome, message):
    assert outcome["error"] is not None
    assert message in _messages(outcome["error"])


@then("no order exists")
def _():
    assert current_domain.repository_for(Order)._dao.query.all().total == 0


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _(products, name, stock):
    assert current_domain.repository_for(Product).get(products[name]).stock == stock


@then("the customer's cart is empty")
def _(customer_id):
    cart = current_domain.repository_for(Cart).find_for_customer(customer_id)
    assert cart is None or cart.is_empty

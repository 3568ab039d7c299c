import json

import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session", autouse=True)
def setup_db(storefront_bed):
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)

    yield

    drop_db(storefront)


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    """Run each test inside the domain context and wipe all data afterwards."""
    with storefront_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture
def shipping_address():
    return {
        "name": "Asha Rao",
        "phone": "+919812345678",
        "address": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "country": "India",
        "postal_code": "560001",
    }


@pytest.fixture
def make_product():
    from storefront.catalogue.management import AddProduct

    def _make(name="Basmati Rice", price=100.0, stock=10, images=None, **details):
        return current_domain.process(
            AddProduct(
                name=name,
                price=price,
                stock=stock,
                images=json.dumps(images or []),
                **details,
            ),
            asynchronous=False,
        )

    return _make


@pytest.fixture
def make_customer():
    from storefront.customer.registration import RegisterCustomer

    def _make(phone="+919800000001", name="Asha Rao"):
        return current_domain.process(RegisterCustomer(name=name, phone=phone), asynchronous=False)

    return _make


@pytest.fixture
def fill_cart():
    from storefront.cart.items import AddToCart

    def _fill(customer_id, product_id, quantity=1, **variant):
        return current_domain.process(
            AddToCart(customer_id=customer_id, product_id=product_id, quantity=quantity, **variant),
            asynchronous=False,
        )

    return _fill


@pytest.fixture
def place_order(shipping_address):
    from storefront.order.placement import PlaceOrder

    def _place(customer_id, payment_method="cash", **kwargs):
        return current_domain.process(
            PlaceOrder(
                customer_id=customer_id,
                payment_method=payment_method,
                shipping_address=json.dumps(shipping_address),
                **kwargs,
            ),
            asynchronous=False,
        )

    return _place

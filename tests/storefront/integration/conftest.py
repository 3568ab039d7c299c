import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from storefront.api import register_error_handlers, routers


@pytest.fixture()
def client():
    app = FastAPI()
    for router in routers:
        app.include_router(router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def address():
    return {
        "name": "Meera Iyer",
        "phone": "+919876543210",
        "address": "4 Cathedral Road",
        "city": "Chennai",
        "state": "Tamil Nadu",
        "country": "India",
        "postal_code": "600086",
    }


@pytest.fixture()
def api_product(client):
    def _create(name="Filter Coffee", price=250.0, stock=10, images=None, **details):
        response = client.post(
            "/products",
            json={"name": name, "price": price, "stock": stock, "images": images or [], **details},
        )
        assert response.status_code == 201
        return response.json()["product_id"]

    return _create


@pytest.fixture()
def api_customer(client):
    def _create(phone="+919876543210", name="Meera Iyer"):
        response = client.post("/customers", json={"name": name, "phone": phone})
        assert response.status_code == 201
        return response.json()["customer_id"]

    return _create

"""Tests for order pricing."""

import pytest
from storefront.order.pricing import TAX_RATE, compute_pricing


class TestComputePricing:
    def test_breakdown(self):
        pricing = compute_pricing([{"price": 100.0, "quantity": 2}, {"price": 50.0, "quantity": 1}])
        assert pricing["items_price"] == 250.0
        assert pricing["tax_price"] == 45.0
        assert pricing["shipping_price"] == 0.0
        assert pricing["total_price"] == 295.0
        assert pricing["currency"] == "INR"

    @pytest.mark.parametrize(
        "lines",
        [
            [{"price": 19.99, "quantity": 3}],
            [{"price": 0.1, "quantity": 1}, {"price": 0.2, "quantity": 1}],
            [{"price": 333.33, "quantity": 7}, {"price": 12.5, "quantity": 2}],
            [{"price": 0.0, "quantity": 4}],
        ],
    )
    def test_total_is_sum_of_components(self, lines):
        pricing = compute_pricing(lines)
        assert pricing["tax_price"] == round(pricing["items_price"] * TAX_RATE, 2)
        assert pricing["total_price"] == pytest.approx(
            pricing["items_price"] + pricing["shipping_price"] + pricing["tax_price"]
        )

    def test_tax_is_rounded_to_cents(self):
        pricing = compute_pricing([{"price": 19.99, "quantity": 1}])
        assert pricing["tax_price"] == 3.6

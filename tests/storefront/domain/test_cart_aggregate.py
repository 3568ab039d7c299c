import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from storefront.cart.cart import Cart
from storefront.cart.events import CartCleared, CartItemAdded


@pytest.fixture
def cart():
    return Cart.create(customer_id="cust-001")


class TestAddItem:
    def test_new_line(self, cart):
        item_id = cart.add_item("prod-001", 2, 120.0)
        assert cart.find_item(item_id).quantity == 2
        assert cart.total_items == 2
        assert cart.total_amount == 240.0
        assert isinstance(cart._events[-1], CartItemAdded)

    def test_same_variant_merges(self, cart):
        first = cart.add_item("prod-001", 2, 120.0, selected_size="1kg")
        second = cart.add_item("prod-001", 3, 120.0, selected_size="1kg")
        assert first == second
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5

    def test_different_variant_is_a_new_line(self, cart):
        cart.add_item("prod-001", 1, 120.0, selected_color="red")
        cart.add_item("prod-001", 1, 120.0, selected_color="blue")
        assert len(cart.items) == 2
        assert cart.total_items == 2

    def test_merge_beyond_line_limit_fails(self, cart):
        cart.add_item("prod-001", 95, 10.0)
        with pytest.raises(ValidationError):
            cart.add_item("prod-001", 5, 10.0)
        assert cart.items[0].quantity == 95


class TestUpdateAndRemove:
    def test_update_quantity(self, cart):
        item_id = cart.add_item("prod-001", 1, 50.0)
        cart.update_item_quantity(item_id, 4)
        assert cart.total_items == 4
        assert cart.total_amount == 200.0

    def test_zero_quantity_removes_line(self, cart):
        item_id = cart.add_item("prod-001", 1, 50.0)
        cart.update_item_quantity(item_id, 0)
        assert cart.is_empty
        assert cart.total_items == 0
        assert cart.total_amount == 0.0

    def test_remove_unknown_item(self, cart):
        with pytest.raises(ObjectNotFoundError):
            cart.remove_item("missing")

    def test_totals_follow_every_change(self, cart):
        a = cart.add_item("prod-001", 2, 19.99)
        cart.add_item("prod-002", 1, 5.5)
        cart.remove_item(a)
        assert cart.total_items == 1
        assert cart.total_amount == 5.5


class TestClear:
    def test_clear_keeps_cart_and_empties_lines(self, cart):
        cart.add_item("prod-001", 2, 10.0)
        cart.add_item("prod-002", 1, 10.0)
        cart.clear()
        assert cart.is_empty
        assert cart.total_items == 0
        assert isinstance(cart._events[-1], CartCleared)

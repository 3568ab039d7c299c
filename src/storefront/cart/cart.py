"""Cart aggregate — the lines a customer intends to buy.

Each customer has at most one cart, created on first use. Line prices are
snapshots taken when the line was added; order placement re-reads live
product prices. ``total_items`` and ``total_amount`` are recomputed after
every change. Placing an order clears the cart but keeps the record.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from storefront.cart.events import CartCleared, CartItemAdded, CartItemQuantityUpdated, CartItemRemoved
from storefront.domain import storefront

MAX_LINE_QUANTITY = 99


@storefront.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1, max_value=MAX_LINE_QUANTITY)
    price = Float(required=True, min_value=0.0)
    selected_color = String(max_length=50, default="")
    selected_size = String(max_length=50, default="")
    added_at = DateTime()

    @property
    def subtotal(self):
        return self.price * self.quantity


@storefront.aggregate
class Cart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    total_items = Integer(default=0)
    total_amount = Float(default=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            total_items=0,
            total_amount=0.0,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_empty(self):
        return not self.items

    def find_item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError({"item_id": ["Item not found in cart"]})
        return item

    def find_line(self, product_id, selected_color="", selected_size=""):
        return next(
            (
                i
                for i in self.items
                if str(i.product_id) == str(product_id)
                and (i.selected_color or "") == (selected_color or "")
                and (i.selected_size or "") == (selected_size or "")
            ),
            None,
        )

    def add_item(self, product_id, quantity, price, selected_color="", selected_size=""):
        """Add a line, or grow the matching line for the same product and variant."""
        existing = self.find_line(product_id, selected_color, selected_size)
        now = datetime.now(UTC)

        if existing:
            new_quantity = existing.quantity + quantity
            if new_quantity > MAX_LINE_QUANTITY:
                raise ValidationError({"quantity": [f"Maximum quantity per item is {MAX_LINE_QUANTITY}"]})
            existing.quantity = new_quantity
            item_id = str(existing.id)
        else:
            item = CartItem(
                product_id=product_id,
                quantity=quantity,
                price=price,
                selected_color=selected_color or "",
                selected_size=selected_size or "",
                added_at=now,
            )
            self.add_items(item)
            item_id = str(item.id)

        self._recompute_totals(now)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                item_id=item_id,
                product_id=str(product_id),
                quantity=quantity,
                price=price,
                selected_color=selected_color or "",
                selected_size=selected_size or "",
            )
        )
        return item_id

    def update_item_quantity(self, item_id, quantity):
        """Set a line's quantity; zero removes the line."""
        if quantity == 0:
            self.remove_item(item_id)
            return

        item = self.find_item(item_id)
        previous_quantity = item.quantity
        item.quantity = quantity
        self._recompute_totals()

        self.raise_(
            CartItemQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, item_id):
        item = self.find_item(item_id)
        self.remove_items(item)
        self._recompute_totals()

        self.raise_(CartItemRemoved(cart_id=str(self.id), item_id=str(item_id)))

    def clear(self):
        for item in list(self.items):
            self.remove_items(item)
        self._recompute_totals()

        self.raise_(CartCleared(cart_id=str(self.id), customer_id=str(self.customer_id)))

    def _recompute_totals(self, now=None):
        self.total_items = sum(item.quantity for item in self.items)
        self.total_amount = round(sum(item.subtotal for item in self.items), 2)
        self.updated_at = now or datetime.now(UTC)


@storefront.repository(part_of=Cart)
class CartRepository:
    def find_for_customer(self, customer_id) -> Cart | None:
        results = self._dao.query.filter(customer_id=str(customer_id)).all().items
        return results[0] if results else None

    def get_or_create_for_customer(self, customer_id) -> Cart:
        return self.find_for_customer(customer_id) or Cart.create(customer_id=customer_id)

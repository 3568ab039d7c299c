"""Order placement — turn a customer's cart into an order.

The order, the stock it takes and the emptied cart are committed in the
handler's unit of work. Nothing is written when any line fails its checks.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.domain import storefront
from storefront.errors import EmptyCart
from storefront.order.order import Order, PaymentMethod
from storefront.order.stock import check_availability, commit_stock

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    """Check out the customer's cart."""

    customer_id = Identifier(required=True)
    payment_method = String(required=True, choices=PaymentMethod)
    shipping_address = Text(required=True)  # JSON: address dict
    notes = String(max_length=500)
    payment_reference = String(max_length=255)


def snapshot_lines(products, requested):
    """Freeze name, price and primary image for each requested line.

    `requested` is a list of dicts with product_id, quantity, selected_color,
    selected_size and optionally price. A line without a price is charged the
    product's current price.
    """
    lines = []
    for line in requested:
        product = products[str(line["product_id"])]
        lines.append(
            {
                "product_id": str(product.id),
                "name": product.name,
                "price": product.price if line.get("price") is None else line["price"],
                "quantity": line["quantity"],
                "selected_color": line.get("selected_color") or "",
                "selected_size": line.get("selected_size") or "",
                "image": product.primary_image,
            }
        )
    return lines


def place_from_lines(
    customer_id,
    requested,
    shipping_address,
    payment_method,
    notes=None,
    payment_reference=None,
    is_reorder=False,
    original_order_id=None,
):
    """Check stock, snapshot lines, commit stock and stage a new order."""
    quantities = [(line["product_id"], line["quantity"]) for line in requested]
    products = check_availability(quantities)

    order = Order.place(
        customer_id=customer_id,
        lines=snapshot_lines(products, requested),
        shipping_address=shipping_address,
        payment_method=payment_method,
        notes=notes,
        payment_reference=payment_reference,
        is_reorder=is_reorder,
        original_order_id=original_order_id,
    )
    commit_stock(products, quantities)
    current_domain.repository_for(Order).add(order)
    return order


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.find_for_customer(command.customer_id)
        if cart is None or cart.is_empty:
            raise EmptyCart()

        shipping_address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )

        # Lines are charged at their cart price, so items_price is the cart total
        order = place_from_lines(
            customer_id=command.customer_id,
            requested=[
                {
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "price": item.price,
                    "selected_color": item.selected_color,
                    "selected_size": item.selected_size,
                }
                for item in cart.items
            ],
            shipping_address=shipping_address,
            payment_method=command.payment_method,
            notes=command.notes,
            payment_reference=command.payment_reference,
        )

        cart.clear()
        cart_repo.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(command.customer_id),
            total_price=order.pricing.total_price,
        )
        return str(order.id)

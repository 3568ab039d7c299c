"""Reorder — place a new order with the lines of an earlier one."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.order.placement import place_from_lines

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class Reorder:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class ReorderHandler:
    @handle(Reorder)
    def reorder(self, command):
        original = current_domain.repository_for(Order).get(command.order_id)
        original.ensure_owned_by(command.customer_id)

        address = original.shipping_address
        order = place_from_lines(
            customer_id=original.customer_id,
            requested=[
                {
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "selected_color": item.selected_color,
                    "selected_size": item.selected_size,
                }
                for item in original.items
            ],
            shipping_address={
                "name": address.name,
                "phone": address.phone,
                "address": address.address,
                "city": address.city,
                "state": address.state,
                "country": address.country,
                "postal_code": address.postal_code,
            },
            payment_method=original.payment_method,
            notes=f"Reorder of order {original.order_number}",
            is_reorder=True,
            original_order_id=str(original.id),
        )

        logger.info(
            "Order reordered",
            order_id=str(order.id),
            original_order_id=str(original.id),
        )
        return str(order.id)

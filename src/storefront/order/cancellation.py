"""Customer cancellation — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.order.stock import restore_stock

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.ensure_owned_by(command.customer_id)

        order.cancel()
        restore_stock(order.items)
        repo.add(order)

        # Redeem points already credited for this order are kept.
        logger.info(
            "Order cancelled by customer",
            order_id=str(order.id),
            customer_id=str(command.customer_id),
        )

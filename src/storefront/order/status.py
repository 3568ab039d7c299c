"""Admin status updates — command and handler."""

import structlog
from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order, OrderStatus
from storefront.order.stock import restore_stock

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    tracking_number = String(max_length=255)
    carrier = String(max_length=100)
    estimated_delivery = DateTime()


@storefront.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status

        changed = order.update_status(
            command.status,
            tracking_number=command.tracking_number,
            carrier=command.carrier,
            estimated_delivery=command.estimated_delivery,
        )
        if changed and order.status == OrderStatus.CANCELLED.value:
            restore_stock(order.items)

        repo.add(order)

        if changed:
            logger.info(
                "Order status changed",
                order_id=str(order.id),
                previous_status=previous,
                new_status=order.status,
            )
        return changed
